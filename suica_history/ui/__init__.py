"""UI components for Suica History."""

from .display import DisplayManager, DisplayStyle
from .formatters import TransactionFormatter
from .text_output import TextOutputManager

__all__ = [
    "DisplayManager",
    "DisplayStyle",
    "TransactionFormatter",
    "TextOutputManager",
]
