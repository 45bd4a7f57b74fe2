"""Shared fixtures: an in-memory FeliCa card answering Read Without Encryption."""

import pytest

from suica_history.core import CardSession
from suica_history.models import StatusCode

IDM = bytes.fromhex("0114b3a1c2d3e4f5")


def make_block(
    action: int = 22,
    year_offset: int = 24,
    month: int = 3,
    day: int = 15,
    balance: int = 1000,
    serial: int = 1,
) -> bytes:
    """Build a history block with the given fields."""
    block = bytearray(16)
    block[0] = action
    block[1] = 0x01
    date = (year_offset << 9) | (month << 5) | day
    block[4] = date >> 8
    block[5] = date & 0xFF
    block[10] = balance & 0xFF
    block[11] = balance >> 8
    block[12] = (serial >> 16) & 0xFF
    block[13] = (serial >> 8) & 0xFF
    block[14] = serial & 0xFF
    return bytes(block)


def success_response(idm: bytes, block: bytes) -> bytes:
    body = bytes([0x07]) + idm + bytes([0x00, 0x00, 0x01]) + block
    return bytes([len(body) + 1]) + body


def error_response(idm: bytes, s1: int, s2: int) -> bytes:
    body = bytes([0x07]) + idm + bytes([s1, s2])
    return bytes([len(body) + 1]) + body


class FakeCardLink:
    """Card link serving blocks of one service.

    ``blocks`` holds, per block index, either the 16 byte block or a
    StatusCode the card answers with. Indexes past the end answer with
    ``end_status``.
    """

    def __init__(
        self,
        blocks: list,
        service_code: int = 0x090F,
        end_status: StatusCode = StatusCode(0x01, 0xA8),
        idm: bytes = IDM,
    ):
        self.idm = idm
        self.blocks = blocks
        self.service_code = service_code
        self.end_status = end_status
        self.commands: list[bytes] = []
        self.requested: list[tuple[int, int]] = []

    def exchange(self, command: bytes) -> bytes:
        self.commands.append(command)
        assert command[0] == len(command)
        assert command[1] == 0x06
        assert command[2:10] == self.idm
        assert command[10] == 1
        service_code = command[11] | command[12] << 8
        assert command[13] == 1
        if command[14] & 0x80:
            block_index = command[15]
        else:
            block_index = command[15] | command[16] << 8
        self.requested.append((service_code, block_index))

        if service_code != self.service_code:
            return error_response(self.idm, 0x01, 0xA6)
        if block_index >= len(self.blocks):
            return error_response(self.idm, self.end_status.s1, self.end_status.s2)

        entry = self.blocks[block_index]
        if isinstance(entry, StatusCode):
            return error_response(self.idm, entry.s1, entry.s2)
        return success_response(self.idm, entry)


@pytest.fixture
def history_blocks() -> list[bytes]:
    return [
        make_block(action=25, year_offset=24, month=1, day=2, balance=0, serial=1),
        make_block(action=22, year_offset=24, month=1, day=3, balance=2000, serial=2),
        make_block(action=200, year_offset=24, month=2, day=29, balance=1840, serial=3),
    ]


@pytest.fixture
def make_session():
    def factory(blocks: list, **kwargs) -> CardSession:
        return CardSession(FakeCardLink(blocks, **kwargs))

    return factory
