"""
Epoch <-> DS1390DateTime conversion.

Epoch seconds count from 00:00:00 Jan 1 1970 GMT. The device keeps a
two-digit year counted from 2000, so year offsets since 1970 are
``year + 30``. Hundredths and the century bit are ignored.

Timezones are whole hours, clamped to -12..+12. A positive timezone is
ahead of GMT.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Final, Tuple

from addressing import FORMAT_12H, FORMAT_24H
from payloads import constrain
from rtc_datetime import DS1390DateTime, to_12h, to_24h

SECONDS_PER_DAY: Final = 86400
EPOCH_YEAR: Final = 1970
# Years between the epoch and the device's year 00
YEAR_OFFSET: Final = 30

MONTH_DURATION: Final[Tuple[int, ...]] = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def is_leap_year(year: int) -> bool:
    return year > 0 and year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def _leap_offset(offset: int) -> bool:
    return is_leap_year(EPOCH_YEAR + offset)


def _year_length(offset: int) -> int:
    return 366 if _leap_offset(offset) else 365


def _month_length(month_index: int, offset: int) -> int:
    # month_index is 0-based
    if month_index == 1:
        return 29 if _leap_offset(offset) else 28
    return MONTH_DURATION[month_index]


def to_epoch(dt: DS1390DateTime, timezone: int = 0, fmt: int = FORMAT_24H) -> int:
    """Seconds since the epoch for ``dt`` given in local time ``timezone``.

    ``dt`` is left untouched.
    """
    local = replace(dt, year=dt.year + YEAR_OFFSET)
    if fmt == FORMAT_12H:
        local.hour = to_24h(local.hour, local.am_pm)

    epoch = -constrain(timezone, -12, 12) * 3600

    epoch += local.year * 365 * SECONDS_PER_DAY
    for offset in range(local.year):
        if _leap_offset(offset):
            epoch += SECONDS_PER_DAY

    # Months start from 1
    for month_index in range(local.month - 1):
        epoch += _month_length(month_index, local.year) * SECONDS_PER_DAY

    epoch += (local.day - 1) * SECONDS_PER_DAY
    epoch += local.hour * 3600
    epoch += local.minute * 60
    epoch += local.second
    return epoch


def from_epoch(epoch: int, timezone: int = 0, fmt: int = FORMAT_24H) -> DS1390DateTime:
    """Inverse of :func:`to_epoch`. hundredths and century come back as 0."""
    if epoch < 0:
        raise ValueError(f"Epoch must not be negative (got {epoch})")

    t = epoch + constrain(timezone, -12, 12) * 3600
    dt = DS1390DateTime()

    t, dt.second = divmod(t, 60)
    t, dt.minute = divmod(t, 60)
    days, dt.hour = divmod(t, 24)

    if fmt == FORMAT_12H:
        dt.hour, dt.am_pm = to_12h(dt.hour)

    # Jan 1 1970 was a Thursday, Sunday = 1
    dt.weekday = (days + 4) % 7 + 1

    offset = 0
    elapsed = _year_length(offset)
    while elapsed <= days:
        offset += 1
        elapsed += _year_length(offset)
    days -= elapsed - _year_length(offset)
    dt.year = offset - YEAR_OFFSET

    month_index = 0
    while month_index < 11 and days >= _month_length(month_index, offset):
        days -= _month_length(month_index, offset)
        month_index += 1
    dt.month = month_index + 1
    dt.day = days + 1
    return dt
