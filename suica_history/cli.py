"""Main CLI interface for Suica History."""

import argparse
import logging
import sqlite3
import time

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.align import Align
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from .core import (
    CardSession,
    HistoryReader,
    ReaderContext,
    SuicaError,
    TransportError,
    open_context,
)
from .models import (
    Transaction,
    HISTORY_SERVICE_CODE,
    DEFAULT_MAX_BLOCKS,
    DEFAULT_DEVICE,
    DEFAULT_DATABASE,
    DEFAULT_WATCH_INTERVAL,
)
from .storage import HistoryDatabase
from .ui import DisplayManager, DisplayStyle, TextOutputManager
from .utils import parse_int

console = Console()


class SuicaHistory:
    """Reads card histories and hands them to display, export or storage."""

    def __init__(
        self,
        device: str = DEFAULT_DEVICE,
        service_code: int = HISTORY_SERVICE_CODE,
        max_blocks: int | None = DEFAULT_MAX_BLOCKS,
        console: Console = console,
    ):
        self.device = device
        self.service_code = service_code
        self.max_blocks = max_blocks
        self.console = console
        self.display = DisplayManager(console)

    def _progress(self) -> Progress:
        return Progress(
            SpinnerColumn(style=DisplayStyle.PRIMARY_COLOR),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )

    def read_history(self, session: CardSession) -> list[Transaction]:
        """Read the complete history of a selected card."""
        reader = HistoryReader(session, self.service_code, self.max_blocks)
        transactions = []
        with self._progress() as progress:
            task = progress.add_task("Reading history...", total=None)
            try:
                for transaction in reader:
                    transactions.append(transaction)
                    progress.update(
                        task, description=f"Read {len(transactions)} transaction(s)"
                    )
            except SuicaError:
                # Keep what was read before the failure visible
                if transactions:
                    self.display.show_transactions(session.idm, transactions)
                raise
        return transactions

    def _wait_for_card(self, context: ReaderContext) -> CardSession:
        self.console.print(f"[{DisplayStyle.DIM_COLOR}]Waiting for card...[/]")
        session = context.poll()
        if session is None:
            # nfcpy reports Ctrl-C during polling as a cancelled connect
            raise KeyboardInterrupt
        return session

    def read(self, output_file: str | None = None, show_raw: bool = False) -> None:
        """Read one card, print its history and optionally export it."""
        with open_context(self.device) as context:
            session = self._wait_for_card(context)
            transactions = self.read_history(session)

        self.display.show_transactions(session.idm, transactions, show_raw)

        if output_file:
            text_output = TextOutputManager(output_file)
            text_output.write_card_data(session.idm, transactions)
            text_output.save_to_file()
            self.display.show_success(
                "Text Output", f"Results saved to {text_output.get_output_path()}"
            )

    def import_history(self, database: str) -> int:
        """Read one card and store its history, returning the stored count."""
        with open_context(self.device) as context:
            session = self._wait_for_card(context)
            self.console.print("Importing transactions")
            transactions = self.read_history(session)

        with HistoryDatabase(database) as db:
            count = db.store_all(transactions)
            total = db.count()

        self.display.show_success(
            "Import",
            f"Imported {count} transactions ({total} stored in {database})",
        )
        return count

    def watch(self, interval: float = DEFAULT_WATCH_INTERVAL) -> None:
        """Print the history of every presented card until interrupted."""
        with open_context(self.device) as context:
            while True:
                session = context.poll()
                if session is None:
                    return
                try:
                    transactions = self.read_history(session)
                except SuicaError as e:
                    self.display.show_error("Read Error", str(e))
                else:
                    self.display.show_transactions(session.idm, transactions)
                time.sleep(interval)


def _show_configuration(args: argparse.Namespace) -> None:
    config_table = Table.grid(padding=(0, 1))
    config_table.add_column(
        style=DisplayStyle.INFO_COLOR, justify="right", no_wrap=True
    )
    config_table.add_column(style="white")
    config_table.add_row("Command", f"[bold]{args.command}[/bold]")
    config_table.add_row("NFC device", args.device)
    config_table.add_row("Service code", f"0x{args.service:04X}")
    config_table.add_row("Block limit", str(args.max_blocks or "none"))
    if getattr(args, "db", None):
        config_table.add_row("Database", f"[bold]{args.db}[/bold]")
    if getattr(args, "output", None):
        config_table.add_row("Output file", f"[bold]{args.output}[/bold]")
    console.print(
        Panel(
            config_table,
            title="Configuration",
            border_style=DisplayStyle.INFO_COLOR,
            box=DisplayStyle.PANEL_BOX,
        )
    )


def _parse_service_code(value: str) -> int:
    try:
        code = parse_int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"invalid service code '{value}' (expected integer literal)"
        ) from exc
    if not 0 <= code <= 0xFFFF:
        raise argparse.ArgumentTypeError(
            "service code must be between 0x0000 and 0xFFFF"
        )
    return code


def _parse_block_limit(value: str) -> int:
    try:
        limit = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid block limit '{value}'") from exc
    if limit < 0:
        raise argparse.ArgumentTypeError("block limit must not be negative")
    return limit


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="suica-history",
        description="Suica History - Read transaction history from FeliCa transit cards",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s read                         # Print the history of one card
  %(prog)s read -o history.txt --raw    # Also save it to a text file
  %(prog)s import --db history.db       # Store the history in a database
  %(prog)s watch                        # Print every presented card
        """,
    )
    parser.add_argument(
        "--device",
        "-d",
        default=DEFAULT_DEVICE,
        help="nfcpy device path (default: %(default)s)",
    )
    parser.add_argument(
        "--service",
        type=_parse_service_code,
        default=HISTORY_SERVICE_CODE,
        help="History service code (default: 0x090F)",
        metavar="CODE",
    )
    parser.add_argument(
        "--max-blocks",
        type=_parse_block_limit,
        default=DEFAULT_MAX_BLOCKS,
        help="Stop after this many blocks without an end marker, 0 for no limit "
        "(default: %(default)s)",
        metavar="N",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log protocol exchanges"
    )
    parser.add_argument(
        "--version",
        action="version",
        version="Suica History v1.0.0",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    read_parser = subparsers.add_parser("read", help="Print the history of one card")
    read_parser.add_argument(
        "--output",
        "-o",
        help="Path to output text file for results (optional)",
        metavar="FILE",
    )
    read_parser.add_argument(
        "--raw", action="store_true", help="Show a hexdump of each block"
    )

    import_parser = subparsers.add_parser(
        "import", help="Store the history of one card in a database"
    )
    import_parser.add_argument(
        "--db",
        default=DEFAULT_DATABASE,
        help="SQLite database file (default: %(default)s)",
        metavar="FILE",
    )

    watch_parser = subparsers.add_parser(
        "watch", help="Print the history of every presented card"
    )
    watch_parser.add_argument(
        "--interval",
        type=float,
        default=DEFAULT_WATCH_INTERVAL,
        help="Seconds to pause after each card (default: %(default)s)",
        metavar="SECONDS",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the Suica History CLI."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    console.print(
        Panel(
            Align.center(
                f"[bold {DisplayStyle.PRIMARY_COLOR}]Suica History v1.0[/bold {DisplayStyle.PRIMARY_COLOR}]\n"
                f"[{DisplayStyle.DIM_COLOR}]Place your card on the reader to begin[/{DisplayStyle.DIM_COLOR}]"
            ),
            box=DisplayStyle.HEADER_BOX,
            border_style=DisplayStyle.PRIMARY_COLOR,
        )
    )
    _show_configuration(args)

    app = SuicaHistory(
        device=args.device,
        service_code=args.service,
        max_blocks=args.max_blocks or None,
        console=console,
    )

    try:
        if args.command == "read":
            app.read(output_file=args.output, show_raw=args.raw)
        elif args.command == "import":
            app.import_history(args.db)
        elif args.command == "watch":
            app.watch(interval=args.interval)
    except TransportError as e:
        app.display.show_error(
            "Reader Error",
            str(e),
            "- Confirm the NFC reader is connected",
            "- Verify USB permissions",
            "- Keep the card on the reader until reading completes",
        )
        return 1
    except SuicaError as e:
        app.display.show_error("Card Error", str(e))
        return 1
    except sqlite3.Error as e:
        app.display.show_error(
            "Database Error", str(e), f"Database: {getattr(args, 'db', None)}"
        )
        return 1
    except OSError as e:
        app.display.show_error("Output Error", str(e))
        return 1
    except KeyboardInterrupt:
        console.print(f"[{DisplayStyle.DIM_COLOR}]Interrupted[/]")
        return 130

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
