"""SQLite storage of imported transactions."""

import logging
import sqlite3
from collections.abc import Iterable

from ..core.decoder import decode_transaction
from ..models import Transaction

log = logging.getLogger(__name__)

CREATE_TABLE = """
    create table if not exists history (
        serial INT PRIMARY KEY NOT NULL,
        data BLOB
    )
"""

UPSERT = """
    insert or replace into history
        (serial, data)
        values (?, ?)
"""


class HistoryDatabase:
    """Stores each transaction exactly once, keyed by its serial.

    Only the raw block is kept; transactions are decoded again on load.
    Re-importing the same card replaces rows instead of duplicating them.
    """

    def __init__(self, path: str):
        self.path = path
        self.connection = sqlite3.connect(path)
        self.connection.execute(CREATE_TABLE)

    def __enter__(self) -> "HistoryDatabase":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if exc_type is None:
            self.connection.commit()
        else:
            self.connection.rollback()
        self.close()

    def store(self, transaction: Transaction) -> None:
        self.connection.execute(UPSERT, (transaction.serial, transaction.raw))

    def store_all(self, transactions: Iterable[Transaction]) -> int:
        """Store transactions and return how many were written."""
        count = 0
        for transaction in transactions:
            self.store(transaction)
            count += 1
        log.debug("Stored %d transactions in %s", count, self.path)
        return count

    def count(self) -> int:
        (count,) = self.connection.execute("select count(*) from history").fetchone()
        return count

    def load_all(self) -> list[Transaction]:
        """Decode every stored transaction, ordered by serial."""
        rows = self.connection.execute("select data from history order by serial")
        return [decode_transaction(bytes(data)) for (data,) in rows]

    def close(self) -> None:
        self.connection.close()
