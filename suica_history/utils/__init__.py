"""Utility helpers for Suica History."""

from .helpers import hexdump, parse_int

__all__ = ["hexdump", "parse_int"]
