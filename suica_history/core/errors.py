"""Exception types raised by the Suica History core."""

from ..models import StatusCode


class SuicaError(Exception):
    """Base class for all Suica History errors."""


class TransportError(SuicaError):
    """The reader or the radio link failed.

    Raised when the reader cannot be opened, the card is removed during an
    exchange or the exchange times out.
    """


class FrameError(TransportError):
    """The card answered with a malformed response frame."""


class ProtocolStatusError(SuicaError):
    """The card answered a command with non-success status flags."""

    def __init__(self, status: StatusCode):
        super().__init__(str(status))
        self.status = status

    @property
    def s1(self) -> int:
        return self.status.s1

    @property
    def s2(self) -> int:
        return self.status.s2


class DecodeError(SuicaError, ValueError):
    """A block could not be decoded into a transaction."""
