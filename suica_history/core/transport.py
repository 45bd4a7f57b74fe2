"""nfcpy based reader transport."""

import logging
from collections.abc import Callable

import nfc
import nfc.clf
from nfc.tag import Tag
from nfc.tag.tt3 import Type3Tag

from ..models import DEFAULT_DEVICE, FELICA_TARGETS
from .errors import TransportError
from .session import CardSession

log = logging.getLogger(__name__)


class FelicaLink:
    """Raw command/response channel to a FeliCa card selected by nfcpy."""

    def __init__(self, tag: Type3Tag):
        self.tag = tag
        self.idm = bytes(tag.idm)
        self.pmm = bytes(tag.pmm)

    @property
    def timeout(self) -> float:
        """Response timeout for a one block read, derived from PMm."""
        # Maximum response time parameter for Read Without Encryption
        a, b, e = self.pmm[5] & 7, self.pmm[5] >> 3 & 7, self.pmm[5] >> 6
        return 302.1e-6 * ((b + 1) + a + 1) * 4**e

    def exchange(self, command: bytes) -> bytes:
        try:
            return bytes(self.tag.clf.exchange(bytearray(command), self.timeout))
        except nfc.clf.CommunicationError as e:
            raise TransportError(
                f"exchange with card {self.idm.hex().upper()} failed: "
                f"{e.__class__.__name__} {e}".rstrip()
            ) from e


class ReaderContext:
    """Owned handle on one physical reader.

    Use as a context manager so the reader is closed on every exit path::

        with open_context("usb") as context:
            session = context.poll()
    """

    def __init__(self, clf: nfc.ContactlessFrontend, path: str):
        self.clf = clf
        self.path = path
        self._closed = False
        self.session: CardSession | None = None

    def __enter__(self) -> "ReaderContext":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def poll(self, terminate: Callable[[], bool] | None = None) -> CardSession | None:
        """Block until a FeliCa card is presented.

        Args:
            terminate: Called repeatedly while waiting; returning True
                cancels the wait

        Returns:
            A session bound to the selected card, or None if cancelled
        """
        if self._closed:
            raise TransportError(f"reader {self.path} is closed")
        self._release_session()

        log.debug("Waiting for FeliCa card on %s", self.path)
        tag = self.clf.connect(
            rdwr={
                "targets": FELICA_TARGETS,
                "on-startup": lambda target: target,
                "on-connect": lambda tag: False,
            },
            terminate=terminate or (lambda: False),
        )
        if not tag:
            log.debug("Polling cancelled")
            return None

        self.session = CardSession(self._link_for(tag))
        return self.session

    def _release_session(self) -> None:
        # One card at a time: a new poll invalidates the previous session
        if self.session is not None:
            self.session.close()
            self.session = None

    @staticmethod
    def _link_for(tag: Tag) -> FelicaLink:
        if not isinstance(tag, Type3Tag):
            raise TransportError(f"unsupported tag type: {type(tag).__name__}")
        log.debug(
            "Selected card IDm=%s PMm=%s",
            bytes(tag.idm).hex().upper(),
            bytes(tag.pmm).hex().upper(),
        )
        return FelicaLink(tag)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._release_session()
        log.debug("Closing reader %s", self.path)
        self.clf.close()


def open_context(path: str = DEFAULT_DEVICE) -> ReaderContext:
    """Open the reader at an nfcpy device path (e.g. ``usb``, ``tty:USB0``).

    Raises:
        TransportError: if no reader could be opened
    """
    try:
        clf = nfc.ContactlessFrontend(path)
    except OSError as e:
        raise TransportError(f"failed to open NFC reader {path!r}: {e}") from e
    log.debug("Opened reader %s", path)
    return ReaderContext(clf, path)
