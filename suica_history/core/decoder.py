"""Transaction history block decoding."""

import datetime

from ..models import Transaction, ACTION_NAMES, BLOCK_SIZE
from .errors import DecodeError


def decode_date(value: int) -> datetime.date:
    """Decode a packed date: 7 bits year since 2000, 4 bits month, 5 bits day."""
    year = 2000 + (value >> 9)
    month = (value >> 5) & 0x0F
    day = value & 0x1F
    try:
        return datetime.date(year, month, day)
    except ValueError as e:
        raise DecodeError(
            f"invalid date field 0x{value:04X} ({year}-{month}-{day}): {e}"
        ) from e


def decode_transaction(block: bytes) -> Transaction:
    """Decode one 16 byte history block into a Transaction.

    Only the action, date, balance and serial fields are interpreted; the
    remaining bytes are kept in ``raw``.

    Raises:
        DecodeError: if the block is not 16 bytes or holds an invalid date
    """
    if len(block) != BLOCK_SIZE:
        raise DecodeError(f"history block must be {BLOCK_SIZE} bytes, got {len(block)}")

    raw = bytes(block)
    action = raw[0]
    date = decode_date(raw[4] << 8 | raw[5])
    # Balance is little endian at offset 10
    balance = (raw[11] << 8) + raw[10]
    serial = (raw[12] << 16) + (raw[13] << 8) + raw[14]

    return Transaction(
        raw=raw,
        action=action,
        action_name=ACTION_NAMES.get(action),
        date=date,
        balance=balance,
        serial=serial,
    )
