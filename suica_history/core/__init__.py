"""Core functionality for Suica History."""

from .errors import (
    SuicaError,
    TransportError,
    FrameError,
    ProtocolStatusError,
    DecodeError,
)
from .session import CardSession
from .decoder import decode_transaction
from .history_reader import HistoryReader
from .transport import ReaderContext, FelicaLink, open_context

__all__ = [
    "SuicaError",
    "TransportError",
    "FrameError",
    "ProtocolStatusError",
    "DecodeError",
    "CardSession",
    "decode_transaction",
    "HistoryReader",
    "ReaderContext",
    "FelicaLink",
    "open_context",
]
