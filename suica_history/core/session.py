"""FeliCa card session."""

import logging
from typing import Protocol

from .errors import FrameError, ProtocolStatusError, TransportError
from .protocol import build_read_command, parse_read_response

log = logging.getLogger(__name__)


class CardLink(Protocol):
    """Raw command/response channel to one selected card."""

    idm: bytes

    def exchange(self, command: bytes) -> bytes: ...


class CardSession:
    """A single selected card.

    Every call performs exactly one exchange with the card. There are no
    retries and nothing is cached.
    """

    def __init__(self, link: CardLink):
        self.link = link
        self.closed = False

    def close(self) -> None:
        """Invalidate the session; later reads raise TransportError."""
        self.closed = True

    @property
    def idm(self) -> bytes:
        return self.link.idm

    def read_block(self, service_code: int, block_index: int) -> bytes:
        """Read one block from a service without encryption.

        Args:
            service_code: Service code to read from
            block_index: Zero based block number within the service

        Returns:
            The 16 byte block

        Raises:
            ProtocolStatusError: if the card answered with error status flags
            TransportError: if the exchange failed or the response is malformed
        """
        if self.closed:
            raise TransportError("card session is closed")

        command = build_read_command(self.idm, service_code, block_index)
        log.debug(
            "read service 0x%04X block %d >> %s", service_code, block_index, command.hex()
        )

        response = self.link.exchange(command)
        log.debug("<< %s", bytes(response).hex())

        result = parse_read_response(response, self.idm)
        if not result.status.is_success():
            raise ProtocolStatusError(result.status)

        if len(result.blocks) != 1:
            raise FrameError(f"expected 1 block, received {len(result.blocks)}")

        return result.blocks[0]
