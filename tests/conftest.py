# tests/conftest.py
from __future__ import annotations

from collections import deque
from typing import Deque, List

import pytest

from driver import DS1390
from emulator import DS1390Emulator
from spi_transport import (
    CMD_BEGIN,
    CMD_DESELECT,
    CMD_END,
    CMD_SELECT,
    CMD_TRANSFER,
    SpiSettings,
)


class ScriptedSerial:
    """Serial port double: records written frames, replays canned bytes."""

    def __init__(self, replies: bytes = b"") -> None:
        self.rx: Deque[int] = deque(replies)
        self.tx: List[bytes] = []
        self.closed = False

    def write(self, data: bytes) -> int:
        self.tx.append(bytes(data))
        return len(data)

    def flush(self) -> None:
        pass

    def read(self, n: int) -> bytes:
        out = bytearray()
        while self.rx and len(out) < n:
            out.append(self.rx.popleft())
        return bytes(out)

    def close(self) -> None:
        self.closed = True


class EmulatedBridgeSerial(ScriptedSerial):
    """Serial port double running the bridge firmware against a DS1390Emulator."""

    def __init__(self, emulator: DS1390Emulator) -> None:
        super().__init__()
        self.emulator = emulator

    def write(self, data: bytes) -> int:
        super().write(data)
        assert data[:2] == b"\x00\x00"
        length = int.from_bytes(data[2:4], "little")
        payload = data[4:4 + length]
        cmd, args = payload[0], payload[1:]

        reply = b""
        if cmd == CMD_BEGIN:
            self.emulator.begin_transaction(
                SpiSettings(clock_hz=int.from_bytes(args[:4], "little"), bit_order=args[4], mode=args[5])
            )
        elif cmd == CMD_END:
            self.emulator.end_transaction()
        elif cmd == CMD_SELECT:
            self.emulator.select()
        elif cmd == CMD_DESELECT:
            self.emulator.deselect()
        elif cmd == CMD_TRANSFER:
            reply = bytes([self.emulator.transfer_byte(args[0])])

        body = bytes([cmd]) + reply
        self.rx.extend(b"\x80\x00" + len(body).to_bytes(2, "little") + body)
        return len(data)


@pytest.fixture()
def emulator() -> DS1390Emulator:
    return DS1390Emulator()


@pytest.fixture()
def rtc(emulator: DS1390Emulator) -> DS1390:
    return DS1390(emulator, powerup_delay_s=0)


@pytest.fixture()
def century_rtc(emulator: DS1390Emulator) -> DS1390:
    return DS1390(emulator, validity_scheme="century", powerup_delay_s=0)
