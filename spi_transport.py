# spi_transport.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Final, Optional, Protocol

import serial

from bcd import hexdump

logger = logging.getLogger(__name__)

MSB_FIRST: Final = 1
LSB_FIRST: Final = 0

# Serial bridge commands
CMD_BEGIN: Final = 0x01
CMD_END: Final = 0x02
CMD_SELECT: Final = 0x03
CMD_DESELECT: Final = 0x04
CMD_TRANSFER: Final = 0x05


@dataclass(frozen=True)
class SpiSettings:
    """
    SPI bus parameters for one transaction.

    clock_hz  : SCLK frequency (DS1390 max 4 MHz).
    bit_order : MSB_FIRST / LSB_FIRST.
    mode      : SPI mode 0..3 (DS1390 uses mode 1, CPOL=0 CPHA=1).
    """

    clock_hz: int = 4_000_000
    bit_order: int = MSB_FIRST
    mode: int = 1


class SpiTransport(Protocol):
    """
    Bus primitives the DS1390 driver needs. Nothing else is used.

    opened_at is the time.monotonic() stamp of when the bus was powered or
    opened, or None when unknown.
    """

    opened_at: Optional[float]

    def begin_transaction(self, settings: SpiSettings) -> None:
        ...

    def end_transaction(self) -> None:
        ...

    def select(self) -> None:
        ...

    def deselect(self) -> None:
        ...

    def transfer_byte(self, out: int) -> int:
        ...

    def close(self) -> None:
        ...


class SerialBridgeTransport:
    """
    SPI primitives forwarded to a microcontroller over a serial link.

    Knows nothing about the DS1390 itself. Every primitive is one frame:

        TX: [00 00] [LEN lo hi] [cmd] [args...]
        RX: [80 00] [LEN lo hi] [cmd] [data...]

    TRANSFER replies carry the byte clocked in on MISO.
    """

    REQ_HDR = b"\x00\x00"
    RSP_HDR = b"\x80\x00"

    def __init__(
        self,
        port: str = "",
        baudrate: int = 115200,
        timeout: float = 0.5,
        serial_port: Optional[Any] = None,
    ) -> None:
        self.port, self.baudrate, self.timeout = port, baudrate, timeout
        self._ser = serial_port
        self.opened_at: Optional[float] = time.monotonic() if serial_port is not None else None

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        if self._ser is not None:
            return
        # Accepts device paths and pyserial URLs (socket://, loop://, ...)
        self._ser = serial.serial_for_url(self.port, baudrate=self.baudrate, timeout=self.timeout)
        self.opened_at = time.monotonic()
        logger.info("Opened SPI bridge on %s @ %d baud", self.port, self.baudrate)

    def close(self) -> None:
        if self._ser is not None:
            try:
                self._ser.close()
            finally:
                self._ser = None
                self.opened_at = None

    def __enter__(self) -> "SerialBridgeTransport":
        self.open()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Framing
    # ------------------------------------------------------------------

    def send_command(self, cmd: int, args: bytes = b"") -> bytes:
        """Send one command frame and return the reply data after the echoed cmd."""
        if self._ser is None:
            raise RuntimeError("Call open() first.")

        payload = bytes([cmd]) + args
        frame = self.REQ_HDR + len(payload).to_bytes(2, "little") + payload
        logger.debug("TX: %s", hexdump(frame))
        self._ser.write(frame)
        self._ser.flush()

        header = self._ser.read(4)
        if len(header) < 4:
            raise ValueError(f"Frame too short to contain header and length: {hexdump(header)}")
        if header[:2] != self.RSP_HDR:
            raise ValueError(f"Invalid header: {header[:2].hex()}")

        length = int.from_bytes(header[2:4], "little")
        reply = self._ser.read(length)
        logger.debug("RX: %s", hexdump(header + reply))

        if len(reply) != length:
            raise ValueError("Frame length does not match payload size")
        if not reply or reply[0] != cmd:
            raise ValueError(f"Reply does not echo command 0x{cmd:02X}: {hexdump(reply)}")
        return reply[1:]

    # ------------------------------------------------------------------
    # SPI primitives
    # ------------------------------------------------------------------

    def begin_transaction(self, settings: SpiSettings) -> None:
        args = settings.clock_hz.to_bytes(4, "little") + bytes([settings.bit_order, settings.mode])
        self.send_command(CMD_BEGIN, args)

    def end_transaction(self) -> None:
        self.send_command(CMD_END)

    def select(self) -> None:
        self.send_command(CMD_SELECT)

    def deselect(self) -> None:
        self.send_command(CMD_DESELECT)

    def transfer_byte(self, out: int) -> int:
        data = self.send_command(CMD_TRANSFER, bytes([out & 0xFF]))
        if len(data) != 1:
            raise ValueError(f"Transfer reply must carry one byte: {hexdump(data)}")
        return data[0]
