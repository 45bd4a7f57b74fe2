"""Text output manager for Suica History results."""

from datetime import datetime
from pathlib import Path

from ..models import Transaction


class TextOutputManager:
    """Manages text file output of read transactions."""

    def __init__(self, output_file: str):
        self.output_file = Path(output_file)
        self.content_lines: list[str] = []

    def _add_header(self) -> None:
        """Add file header with timestamp."""
        self.content_lines.extend(
            [
                "Suica History Results",
                "=" * 50,
                f"Date: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
                "",
            ]
        )

    def write_card_data(self, idm: bytes, transactions: list[Transaction]) -> None:
        """Append the history of one card."""
        if not self.content_lines:
            self._add_header()

        self.content_lines.extend(
            [
                f"Card {idm.hex().upper()}",
                "=" * 30,
                f"Transactions: {len(transactions)}",
            ]
        )
        for transaction in transactions:
            self.content_lines.append(
                ", ".join(
                    [
                        transaction.label,
                        transaction.date.isoformat(),
                        str(transaction.balance),
                        str(transaction.serial),
                        transaction.raw.hex(),
                    ]
                )
            )
        self.content_lines.append("")

    def save_to_file(self) -> None:
        """Write collected content to the output file."""
        self.output_file.parent.mkdir(parents=True, exist_ok=True)
        self.output_file.write_text("\n".join(self.content_lines), encoding="utf-8")

    def get_output_path(self) -> str:
        return str(self.output_file.resolve())
