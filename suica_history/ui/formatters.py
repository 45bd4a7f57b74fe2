"""Formatting utilities for UI display."""

from ..models import Transaction


class TransactionFormatter:
    """Formats transaction fields for display."""

    @staticmethod
    def format_action(transaction: Transaction) -> str:
        """Format the action name, highlighting unknown codes.

        Args:
            transaction: Decoded transaction

        Returns:
            Rich markup string
        """
        if transaction.action_name is None:
            return f"[dim]Unknown (0x{transaction.action:02X})[/dim]"
        return transaction.action_name

    @staticmethod
    def format_balance(balance: int) -> str:
        return f"¥{balance:,}"

    @staticmethod
    def format_serial(serial: int) -> str:
        return f"0x{serial:06X}"

    @staticmethod
    def format_idm(idm: bytes) -> str:
        return idm.hex().upper()
