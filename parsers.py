from __future__ import annotations

from typing import Optional

from addressing import (
    FORMAT_12H,
    FORMAT_24H,
    MASK_AMPM,
    MASK_CENTURY,
    MASK_FORMAT,
    MASK_HOUR_12H,
    MASK_HOUR_24H,
    MASK_MONTH,
    TIME_BLOCK_SIZE,
)
from bcd import bcd2dec, hexdump
from rtc_datetime import DS1390DateTime


def time_format(hour_reg: int) -> int:
    return FORMAT_12H if hour_reg & MASK_FORMAT else FORMAT_24H


def hours(hour_reg: int, fmt: Optional[int] = None) -> int:
    if fmt is None:
        fmt = time_format(hour_reg)
    if fmt == FORMAT_24H:
        return bcd2dec(hour_reg & MASK_HOUR_24H)
    return bcd2dec(hour_reg & MASK_HOUR_12H)


def am_pm(hour_reg: int) -> int:
    return (hour_reg & MASK_AMPM) >> 5


def month(month_reg: int) -> int:
    return bcd2dec(month_reg & MASK_MONTH)


def century(month_reg: int) -> int:
    return (month_reg & MASK_CENTURY) >> 7


def unpack(raw: bytes, fmt: Optional[int] = None) -> DS1390DateTime:
    """
    Decode the 8-byte time block read from 0x00:
        [HSEC][SEC][MIN][HRS][WDAY][DAY][MON][YRS]

    The hour format comes from bit 6 of HRS unless given explicitly.
    In 24h format AM/PM is reported as AM.
    """
    if len(raw) != TIME_BLOCK_SIZE:
        raise ValueError(f"Time block must be {TIME_BLOCK_SIZE} bytes: {hexdump(raw)}")

    hsec, sec, minute, hrs, wday, day, mon, yrs = raw
    if fmt is None:
        fmt = time_format(hrs)

    return DS1390DateTime(
        hundredths=bcd2dec(hsec),
        second=bcd2dec(sec),
        minute=bcd2dec(minute),
        hour=hours(hrs, fmt),
        weekday=bcd2dec(wday),
        day=bcd2dec(day),
        month=month(mon),
        year=bcd2dec(yrs),
        century=century(mon),
        am_pm=am_pm(hrs) if fmt == FORMAT_12H else 0,
    )
