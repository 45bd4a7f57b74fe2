"""Transaction history reading."""

import itertools
import logging
from collections.abc import Iterator

from ..models import Transaction, HISTORY_SERVICE_CODE, DEFAULT_MAX_BLOCKS
from .decoder import decode_transaction
from .errors import ProtocolStatusError
from .session import CardSession

log = logging.getLogger(__name__)

STOP_SENTINEL = "sentinel"
STOP_TERMINAL_STATUS = "terminal-status"
STOP_LIMIT = "limit"


class HistoryReader:
    """Reads the transaction history of a card block by block.

    The history ends either with a block whose first byte is zero or with
    the card reporting status (0x01, 0xA8) for a block past the last one.
    Both end the sequence without an error. Every other status error, and
    any transport or decode error, is raised to the consumer after the
    transactions read so far.

    Each iteration starts a new pass from block 0.
    """

    def __init__(
        self,
        session: CardSession,
        service_code: int = HISTORY_SERVICE_CODE,
        max_blocks: int | None = DEFAULT_MAX_BLOCKS,
    ):
        if max_blocks is not None and max_blocks < 0:
            raise ValueError(f"max_blocks must not be negative, got {max_blocks}")
        self.session = session
        self.service_code = service_code
        self.max_blocks = max_blocks or None
        self.last_stop: str | None = None

    def __iter__(self) -> Iterator[Transaction]:
        return self._read()

    def read_transactions(self) -> list[Transaction]:
        """Read the complete history into a list."""
        return list(self)

    def _read(self) -> Iterator[Transaction]:
        self.last_stop = None
        indexes = (
            range(self.max_blocks) if self.max_blocks is not None else itertools.count()
        )

        for block_index in indexes:
            try:
                block = self.session.read_block(self.service_code, block_index)
            except ProtocolStatusError as e:
                if e.status.is_terminal():
                    self._stop(STOP_TERMINAL_STATUS, block_index)
                    return
                raise

            if block[0] == 0:
                self._stop(STOP_SENTINEL, block_index)
                return

            transaction = decode_transaction(block)
            log.debug("Block %d: %s", block_index, transaction)
            yield transaction

        self.last_stop = STOP_LIMIT
        log.warning(
            "No end of history marker in the first %d blocks of service 0x%04X, "
            "stopping",
            self.max_blocks,
            self.service_code,
        )

    def _stop(self, reason: str, block_index: int) -> None:
        self.last_stop = reason
        log.debug(
            "History of service 0x%04X ends at block %d (%s)",
            self.service_code,
            block_index,
            reason,
        )
