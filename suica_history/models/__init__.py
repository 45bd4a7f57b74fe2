"""Data models for Suica History."""

from .status import StatusCode
from .transaction import Transaction
from .constants import *

__all__ = [
    "StatusCode",
    "Transaction",
    "HISTORY_SERVICE_CODE",
    "BLOCK_SIZE",
    "DEFAULT_MAX_BLOCKS",
    "ACTION_NAMES",
    "DEFAULT_DEVICE",
    "DEFAULT_DATABASE",
]
