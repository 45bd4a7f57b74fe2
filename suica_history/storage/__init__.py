"""Persistence for Suica History."""

from .history_db import HistoryDatabase

__all__ = ["HistoryDatabase"]
