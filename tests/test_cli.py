from unittest import mock

import pytest
from rich.console import Console

from suica_history import cli
from suica_history.core import CardSession, ProtocolStatusError, TransportError
from suica_history.models import StatusCode
from suica_history.storage import HistoryDatabase

from .conftest import FakeCardLink, make_block


@pytest.fixture(autouse=True)
def quiet_console(monkeypatch):
    console = Console(record=True, width=120)
    monkeypatch.setattr(cli, "console", console)
    return console


class FakeContext:
    def __init__(self, sessions):
        self.sessions = list(sessions)
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True

    def poll(self, terminate=None):
        return self.sessions.pop(0) if self.sessions else None


@pytest.fixture
def reader(monkeypatch):
    def install(*block_lists):
        context = FakeContext(
            CardSession(FakeCardLink(blocks)) for blocks in block_lists
        )
        monkeypatch.setattr(cli, "open_context", lambda device: context)
        return context

    return install


def make_app(console):
    return cli.SuicaHistory(console=console)


def test_read_history_returns_transactions(reader, quiet_console):
    reader([make_block(serial=1), make_block(serial=2)])
    app = make_app(quiet_console)
    with cli.open_context("usb") as context:
        transactions = app.read_history(context.poll())
    assert [t.serial for t in transactions] == [1, 2]


def test_read_writes_text_output(reader, quiet_console, tmp_path):
    context = reader([make_block(action=22, serial=7), bytes(16)])
    output = tmp_path / "out" / "history.txt"

    make_app(quiet_console).read(output_file=str(output))

    assert context.closed
    text = output.read_text(encoding="utf-8")
    assert "Train, 2024-03-15, 1000, 7" in text


def test_read_error_keeps_partial_results_visible(reader, quiet_console):
    context = reader([make_block(serial=1), StatusCode(0xFF, 0xA5)])

    with pytest.raises(ProtocolStatusError):
        make_app(quiet_console).read()

    assert context.closed
    assert "0x000001" in quiet_console.export_text()


def test_import_history_stores_transactions(reader, quiet_console, tmp_path):
    db_path = str(tmp_path / "history.db")
    reader([make_block(serial=1), make_block(serial=2)])

    assert make_app(quiet_console).import_history(db_path) == 2

    with HistoryDatabase(db_path) as db:
        assert [t.serial for t in db.load_all()] == [1, 2]


def test_watch_reads_every_card_until_cancelled(reader, quiet_console):
    context = reader(
        [make_block(serial=1)],
        [StatusCode(0xFF, 0xA5)],
        [make_block(serial=3)],
    )

    with mock.patch.object(cli.time, "sleep") as sleep:
        make_app(quiet_console).watch(interval=0.5)

    assert context.closed
    assert sleep.call_count == 3
    text = quiet_console.export_text()
    assert "Access is not allowed" in text
    assert "0x000003" in text


def test_main_read(reader, monkeypatch):
    reader([make_block(serial=1)])
    assert cli.main(["read"]) == 0


def test_main_reports_reader_failure(monkeypatch, quiet_console):
    def fail(device):
        raise TransportError(f"failed to open NFC reader {device!r}")

    monkeypatch.setattr(cli, "open_context", fail)

    assert cli.main(["--device", "tty:USB0", "read"]) == 1
    assert "tty:USB0" in quiet_console.export_text()


def test_main_reports_card_error(reader, quiet_console):
    reader([StatusCode(0xFF, 0xA5)])
    assert cli.main(["read"]) == 1
    assert "Card Error" in quiet_console.export_text()


def test_parser_options():
    args = cli.build_parser().parse_args(
        ["--service", "0x008B", "--max-blocks", "0", "import", "--db", "x.db"]
    )
    assert args.service == 0x008B
    assert args.max_blocks == 0
    assert args.command == "import"
    assert args.db == "x.db"


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


@pytest.mark.parametrize(
    "argv",
    [
        ["--service", "0x10000", "read"],
        ["--service", "-1", "read"],
        ["--service", "history", "read"],
        ["--max-blocks", "-1", "read"],
        ["--max-blocks", "many", "read"],
    ],
)
def test_main_rejects_bad_options(argv, reader):
    context = reader([make_block(serial=1)])
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    assert excinfo.value.code == 2
    assert len(context.sessions) == 1


def test_parser_accepts_boundary_values():
    args = cli.build_parser().parse_args(
        ["--service", "0xFFFF", "--max-blocks", "0", "read"]
    )
    assert args.service == 0xFFFF
    assert args.max_blocks == 0
    assert cli.build_parser().parse_args(["--service", "0", "read"]).service == 0


def test_main_reports_text_output_failure(reader, quiet_console, tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    reader([make_block(serial=1)])

    assert cli.main(["read", "-o", str(blocker / "sub" / "out.txt")]) == 1
    assert "Output Error" in quiet_console.export_text()


def test_main_reports_database_failure(reader, quiet_console, tmp_path):
    reader([make_block(serial=1)])
    db_path = str(tmp_path / "missing" / "history.db")

    assert cli.main(["import", "--db", db_path]) == 1
    assert "Database Error" in quiet_console.export_text()


def test_main_cancelled_poll_is_interrupt(reader, quiet_console):
    reader()
    assert cli.main(["read"]) == 130
    text = quiet_console.export_text()
    assert "Interrupted" in text
    assert "Reader Error" not in text
