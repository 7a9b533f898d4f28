from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Union

import parsers
from addressing import (
    AM,
    FORMAT_12H,
    FORMAT_24H,
    MASK_AMPM,
    MASK_FORMAT,
    PM,
    TIME_BLOCK_SIZE,
    Addressing,
    TrickleCharger,
)
from bcd import bcd2dec, dec2bcd
from epoch import from_epoch, to_epoch
from payloads import constrain, hour_register, month_register, pack
from rtc_datetime import DS1390DateTime
from spi_transport import SpiSettings, SpiTransport
from validity import ValidityScheme, make_tracker

logger = logging.getLogger(__name__)

DUMMY = 0xFF


class DS1390:
    """DS1390/DS1391 SPI real-time clock.

    Owns one transport handle. Every register access is a single bracketed
    transaction: begin_transaction, select, address byte, data bytes,
    deselect, end_transaction. Not thread safe.

    Setters return True when the device was written and False when the
    value was already stored or the request was rejected. The requested
    value is compared with the stored one as given and clamped to the
    field range only when written.
    """

    def __init__(
        self,
        transport: SpiTransport,
        settings: SpiSettings = SpiSettings(),
        validity_scheme: Union[ValidityScheme, str] = ValidityScheme.OSCILLATOR_STOP_FLAG,
        powerup_delay_s: float = 0.2,
    ) -> None:
        self.transport = transport
        self.settings = settings
        self.powerup_delay_s = powerup_delay_s
        self.validity = make_tracker(ValidityScheme(validity_scheme), self.read_byte, self.write_byte)

    def begin(self) -> bool:
        """Wait out the power-up delay if still needed and report register validity."""
        opened_at = self.transport.opened_at
        remaining = self.powerup_delay_s
        if opened_at is not None:
            remaining -= time.monotonic() - opened_at
        if remaining > 0:
            time.sleep(remaining)

        valid = self.get_validity()
        if not valid:
            logger.warning("DS1390 time registers not valid, backup power was lost")
        return valid

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "DS1390":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Register access
    # ------------------------------------------------------------------

    def transfer(self, address: int, out: bytes) -> bytes:
        """Clock ``address`` then ``out`` in one transaction, returning the bytes read back."""
        bus = self.transport
        bus.begin_transaction(self.settings)
        try:
            bus.select()
            try:
                bus.transfer_byte(address)
                return bytes(bus.transfer_byte(b) for b in out)
            finally:
                bus.deselect()
        finally:
            bus.end_transaction()

    def read_byte(self, address: int) -> int:
        return self.transfer(address, bytes([DUMMY]))[0]

    def write_byte(self, address: int, data: int) -> None:
        self.transfer(address, bytes([data & 0xFF]))

    def read_time_block(self) -> bytes:
        return self.transfer(Addressing.read_address("HSEC"), bytes([DUMMY] * TIME_BLOCK_SIZE))

    def write_time_block(self, raw: bytes) -> None:
        if len(raw) != TIME_BLOCK_SIZE:
            raise ValueError(f"Time block must be {TIME_BLOCK_SIZE} bytes")
        self.transfer(Addressing.write_address("HSEC"), raw)

    def _read(self, name: str) -> int:
        return self.read_byte(Addressing.read_address(name))

    def _write(self, name: str, data: int) -> None:
        self.write_byte(Addressing.write_address(name), data)
        self.validity.set_validity()

    def _set_bcd(self, name: str, value: int, lo: int, hi: int) -> bool:
        if value == bcd2dec(self._read(name)):
            return False
        self._write(name, dec2bcd(constrain(value, lo, hi)))
        return True

    # ------------------------------------------------------------------
    # Validity
    # ------------------------------------------------------------------

    def get_validity(self) -> bool:
        return self.validity.get_validity()

    def set_validity(self) -> None:
        self.validity.set_validity()

    # ------------------------------------------------------------------
    # Time format
    # ------------------------------------------------------------------

    def get_time_format(self) -> int:
        return parsers.time_format(self._read("HRS"))

    def set_time_format(self, fmt: int) -> bool:
        """
        Flip the 12h/24h bit. The stored hour digits are kept as they are,
        so a 24h "14" reads back as a 12h "14" until the hour is rewritten.
        """
        hrs = self._read("HRS")
        if fmt == parsers.time_format(hrs):
            return False
        if fmt not in (FORMAT_24H, FORMAT_12H):
            return False

        if fmt == FORMAT_24H:
            hrs &= ~MASK_FORMAT & 0xFF
        else:
            hrs |= MASK_FORMAT
        self._write("HRS", hrs)
        logger.info("Time format set to %s", "12h" if fmt == FORMAT_12H else "24h")
        return True

    # ------------------------------------------------------------------
    # Whole date and time
    # ------------------------------------------------------------------

    def get_datetime_all(self) -> DS1390DateTime:
        return parsers.unpack(self.read_time_block())

    def set_datetime_all(self, dt: DS1390DateTime) -> None:
        raw = pack(dt, self.get_time_format())
        self.write_time_block(raw)
        self.validity.set_validity()
        logger.info("Time registers written: %s", dt)

    def get_epoch(self, timezone: int = 0) -> int:
        raw = self.read_time_block()
        fmt = parsers.time_format(raw[3])
        return to_epoch(parsers.unpack(raw, fmt), timezone, fmt)

    def set_epoch(self, epoch: int, timezone: int = 0) -> None:
        self.set_datetime_all(from_epoch(epoch, timezone, self.get_time_format()))

    def get_datetime(self) -> datetime:
        raw = self.read_time_block()
        fmt = parsers.time_format(raw[3])
        return parsers.unpack(raw, fmt).to_datetime(fmt)

    def set_datetime(self, dt: datetime) -> None:
        self.set_datetime_all(DS1390DateTime.from_datetime(dt, self.get_time_format()))

    # ------------------------------------------------------------------
    # Single fields
    # ------------------------------------------------------------------

    def get_hundredths(self) -> int:
        return bcd2dec(self._read("HSEC"))

    def set_hundredths(self, value: int) -> bool:
        return self._set_bcd("HSEC", value, 0, 99)

    def get_seconds(self) -> int:
        return bcd2dec(self._read("SEC"))

    def set_seconds(self, value: int) -> bool:
        return self._set_bcd("SEC", value, 0, 59)

    def get_minutes(self) -> int:
        return bcd2dec(self._read("MIN"))

    def set_minutes(self, value: int) -> bool:
        return self._set_bcd("MIN", value, 0, 59)

    def get_hours(self) -> int:
        return parsers.hours(self._read("HRS"))

    def set_hours(self, value: int) -> bool:
        """0..23 in 24h format, 1..12 in 12h format keeping the stored AM/PM bit."""
        hrs = self._read("HRS")
        fmt = parsers.time_format(hrs)
        if value == parsers.hours(hrs, fmt):
            return False
        value = constrain(value, 0, 23) if fmt == FORMAT_24H else constrain(value, 1, 12)
        self._write("HRS", hour_register(value, fmt, parsers.am_pm(hrs)))
        return True

    def get_weekday(self) -> int:
        return bcd2dec(self._read("WDAY"))

    def set_weekday(self, value: int) -> bool:
        return self._set_bcd("WDAY", value, 1, 7)

    def get_day(self) -> int:
        return bcd2dec(self._read("DAY"))

    def set_day(self, value: int) -> bool:
        return self._set_bcd("DAY", value, 1, 31)

    def get_month(self) -> int:
        return parsers.month(self._read("MON"))

    def set_month(self, value: int) -> bool:
        mon = self._read("MON")
        if value == parsers.month(mon):
            return False
        self._write("MON", month_register(value, parsers.century(mon)))
        return True

    def get_year(self) -> int:
        return bcd2dec(self._read("YRS"))

    def set_year(self, value: int) -> bool:
        return self._set_bcd("YRS", value, 0, 99)

    def get_century(self) -> int:
        return parsers.century(self._read("MON"))

    def set_century(self, value: int) -> bool:
        if self.validity.owns_century:
            return False
        mon = self._read("MON")
        if value == parsers.century(mon):
            return False
        self._write("MON", month_register(parsers.month(mon), value))
        return True

    def get_am_pm(self) -> int:
        hrs = self._read("HRS")
        if parsers.time_format(hrs) == FORMAT_24H:
            return AM
        return parsers.am_pm(hrs)

    def set_am_pm(self, value: int) -> bool:
        hrs = self._read("HRS")
        if parsers.time_format(hrs) == FORMAT_24H:
            return False
        if value == parsers.am_pm(hrs):
            return False
        if value not in (AM, PM):
            return False
        self._write("HRS", (hrs & ~MASK_AMPM & 0xFF) | (value << 5) | MASK_FORMAT)
        return True

    # ------------------------------------------------------------------
    # Trickle charger
    # ------------------------------------------------------------------

    def get_trickle_charger_mode(self) -> int:
        return self._read("TCH")

    def set_trickle_charger_mode(self, mode: int) -> bool:
        if mode == self.get_trickle_charger_mode():
            return False
        if mode not in {m.value for m in TrickleCharger}:
            return False
        self._write("TCH", mode)
        logger.info("Trickle charger set to %s", TrickleCharger(mode).name)
        return True
