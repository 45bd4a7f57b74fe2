"""Transaction data model."""

import datetime
from dataclasses import dataclass


@dataclass(frozen=True)
class Transaction:
    """One decoded entry of the card's transaction history."""

    raw: bytes  # Original 16 byte block
    action: int  # Terminal/action code (byte 0)
    action_name: str | None  # Label for known action codes
    date: datetime.date  # Transaction date
    balance: int  # Card balance after the transaction
    serial: int  # 24-bit transaction counter assigned by the card

    @property
    def label(self) -> str:
        """Return the action name, or the raw code for unknown actions."""
        return self.action_name or f"Unknown (0x{self.action:02X})"

    def __str__(self) -> str:
        return (
            f"#{self.serial} {self.date.isoformat()} {self.label} "
            f"balance={self.balance}"
        )
