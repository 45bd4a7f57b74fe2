"""Suica History - read transaction history from FeliCa transit cards."""

__version__ = "1.0.0"
