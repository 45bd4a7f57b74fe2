"""Display management for Suica History UI."""

from rich import box
from rich.console import Console, Group
from rich.align import Align
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models import Transaction
from ..utils import hexdump
from .formatters import TransactionFormatter


class DisplayStyle:
    """Constants for consistent display styling."""

    PRIMARY_COLOR = "bright_blue"
    SUCCESS_COLOR = "bright_green"
    ERROR_COLOR = "bright_red"
    WARNING_COLOR = "yellow"
    INFO_COLOR = "cyan"
    ACCENT_COLOR = "magenta"
    DIM_COLOR = "dim"

    HEADER_BOX = box.DOUBLE_EDGE
    PANEL_BOX = box.ROUNDED
    TABLE_BOX = box.SIMPLE_HEAD


class DisplayManager:
    """Manages all UI display operations."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()
        self.formatter = TransactionFormatter()

    def create_transaction_table(
        self, transactions: list[Transaction], show_raw: bool = False
    ) -> Table:
        """Create a table listing transactions in card order."""
        table = Table(
            box=DisplayStyle.TABLE_BOX,
            header_style=f"bold {DisplayStyle.PRIMARY_COLOR}",
        )
        table.add_column("#", justify="right", style=DisplayStyle.DIM_COLOR)
        table.add_column("Date", no_wrap=True)
        table.add_column("Action")
        table.add_column("Balance", justify="right", style=DisplayStyle.SUCCESS_COLOR)
        table.add_column("Serial", justify="right", style=DisplayStyle.INFO_COLOR)
        if show_raw:
            table.add_column("Raw", style=DisplayStyle.DIM_COLOR, no_wrap=True)

        for index, transaction in enumerate(transactions):
            row = [
                str(index),
                transaction.date.isoformat(),
                self.formatter.format_action(transaction),
                self.formatter.format_balance(transaction.balance),
                self.formatter.format_serial(transaction.serial),
            ]
            if show_raw:
                row.append(Text(hexdump(transaction.raw)))
            table.add_row(*row)

        return table

    def show_transactions(
        self, idm: bytes, transactions: list[Transaction], show_raw: bool = False
    ) -> None:
        """Print the history of one card."""
        if not transactions:
            self.console.print(
                Panel(
                    "No transactions recorded on this card.",
                    title=f"Card {self.formatter.format_idm(idm)}",
                    border_style=DisplayStyle.WARNING_COLOR,
                    box=DisplayStyle.PANEL_BOX,
                )
            )
            return

        self.console.print(
            Panel(
                self.create_transaction_table(transactions, show_raw),
                title=f"Card {self.formatter.format_idm(idm)}",
                subtitle=f"{len(transactions)} transaction(s)",
                border_style=DisplayStyle.ACCENT_COLOR,
                box=DisplayStyle.PANEL_BOX,
            )
        )

    def show_error(self, title: str, message: str, *hints: str) -> None:
        """Print an error panel with optional hint lines."""
        lines = [
            Align.left(
                f"[{DisplayStyle.ERROR_COLOR}]{escape(message)}[/{DisplayStyle.ERROR_COLOR}]"
            )
        ]
        lines.extend(Align.left(hint) for hint in hints)
        self.console.print(
            Panel(
                Group(*lines),
                title=title,
                border_style=DisplayStyle.ERROR_COLOR,
                box=DisplayStyle.PANEL_BOX,
            )
        )

    def show_success(self, title: str, message: str) -> None:
        self.console.print(
            Panel(
                f"[{DisplayStyle.SUCCESS_COLOR}]{message}[/{DisplayStyle.SUCCESS_COLOR}]",
                title=title,
                border_style=DisplayStyle.SUCCESS_COLOR,
                box=DisplayStyle.PANEL_BOX,
            )
        )
