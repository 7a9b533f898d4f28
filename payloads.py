from __future__ import annotations

from addressing import FORMAT_24H, MASK_FORMAT
from bcd import dec2bcd
from rtc_datetime import DS1390DateTime


def constrain(x: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, x))


def hour_register(hour: int, fmt: int, am_pm: int = 0) -> int:
    """
    24h: BCD hour 0..23, bit 6 clear.
    12h: BCD hour 1..12 | PM << 5 | bit 6, the format bit is always forced.
    """
    if fmt == FORMAT_24H:
        return dec2bcd(constrain(hour, 0, 23))
    return dec2bcd(constrain(hour, 1, 12)) | (constrain(am_pm, 0, 1) << 5) | MASK_FORMAT


def month_register(month: int, century: int = 0) -> int:
    return dec2bcd(constrain(month, 1, 12)) | (constrain(century, 0, 1) << 7)


def pack(dt: DS1390DateTime, fmt: int) -> bytes:
    """Encode a model as the 8-byte burst written from 0x80, clamping every field."""
    return bytes([
        dec2bcd(constrain(dt.hundredths, 0, 99)),
        dec2bcd(constrain(dt.second, 0, 59)),
        dec2bcd(constrain(dt.minute, 0, 59)),
        hour_register(dt.hour, fmt, dt.am_pm),
        dec2bcd(constrain(dt.weekday, 1, 7)),
        dec2bcd(constrain(dt.day, 1, 31)),
        month_register(dt.month, dt.century),
        dec2bcd(constrain(dt.year, 0, 99)),
    ])
