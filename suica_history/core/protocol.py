"""FeliCa Read Without Encryption framing.

A command frame is ``LEN CODE IDm[8] DATA`` where ``LEN`` counts the whole
frame. Read Without Encryption (code 0x06) carries a service code list and a
block list; the response (code 0x07) echoes the IDm and carries the status
flags, then the block count and block data when the status is success.
"""

from dataclasses import dataclass

from nfc.tag.tt3 import BlockCode, ServiceCode

from ..models import (
    StatusCode,
    BLOCK_SIZE,
    IDM_LENGTH,
    MAX_BLOCK_INDEX,
    READ_WITHOUT_ENCRYPTION_COMMAND,
)
from .errors import FrameError

# LEN, CODE, IDm
HEADER_LENGTH = 2 + IDM_LENGTH
STATUS_OFFSET = HEADER_LENGTH


@dataclass(frozen=True)
class ReadResponse:
    """Parsed Read Without Encryption response."""

    status: StatusCode
    blocks: list[bytes]


def pack_service_code(service_code: int) -> bytes:
    """Pack a service code for transmission (little endian)."""
    if not 0 <= service_code <= 0xFFFF:
        raise ValueError(f"service code out of range: 0x{service_code:X}")
    return bytes(ServiceCode(service_code >> 6, service_code & 0x3F).pack())


def pack_block_element(block_index: int, service_list_index: int = 0) -> bytes:
    """Pack a block list element.

    Block numbers below 256 use the two byte form (length bit set), larger
    ones the three byte form with a little endian block number.
    """
    if not 0 <= block_index <= MAX_BLOCK_INDEX:
        raise ValueError(f"block index out of range: {block_index}")
    return bytes(BlockCode(block_index, service=service_list_index).pack())


def build_read_command(idm: bytes, service_code: int, block_index: int) -> bytes:
    """Build a Read Without Encryption command for one block of one service."""
    if len(idm) != IDM_LENGTH:
        raise ValueError(f"IDm must be {IDM_LENGTH} bytes, got {len(idm)}")

    data = (
        bytes([1])
        + pack_service_code(service_code)
        + bytes([1])
        + pack_block_element(block_index)
    )
    frame = bytes([READ_WITHOUT_ENCRYPTION_COMMAND]) + bytes(idm) + data
    return bytes([len(frame) + 1]) + frame


def parse_read_response(response: bytes, idm: bytes) -> ReadResponse:
    """Parse a Read Without Encryption response frame.

    Raises:
        FrameError: if the frame is malformed or answered by another card
    """
    response = bytes(response)
    if len(response) < HEADER_LENGTH + 2:
        raise FrameError(f"response too short ({len(response)} bytes)")
    if response[0] != len(response):
        raise FrameError(
            f"incorrect response length {response[0]} (received {len(response)})"
        )
    if response[1] != READ_WITHOUT_ENCRYPTION_COMMAND + 1:
        raise FrameError(f"incorrect response code 0x{response[1]:02X}")
    if response[2:HEADER_LENGTH] != bytes(idm):
        raise FrameError(f"answer from wrong card {response[2:HEADER_LENGTH].hex()}")

    status = StatusCode.from_bytes(response[STATUS_OFFSET : STATUS_OFFSET + 2])
    if not status.is_success():
        return ReadResponse(status=status, blocks=[])

    payload = response[STATUS_OFFSET + 2 :]
    if not payload:
        raise FrameError("missing block count")

    block_count = payload[0]
    data = payload[1:]
    if len(data) != block_count * BLOCK_SIZE:
        raise FrameError(
            f"insufficient data received ({len(data)} bytes for {block_count} blocks)"
        )

    blocks = [
        data[i : i + BLOCK_SIZE] for i in range(0, len(data), BLOCK_SIZE)
    ]
    return ReadResponse(status=status, blocks=blocks)
