from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Tuple

from addressing import AM, FORMAT_12H, PM


@dataclass
class DS1390DateTime:
    """
    Decimal view of the 8 time registers.

    hundredths : 0-99
    second     : 0-59
    minute     : 0-59
    hour       : 0-23 in 24h format, 1-12 in 12h format
    weekday    : 1-7, 1 = Sunday
    day        : 1-31
    month      : 1-12
    year       : 0-99, years since 2000
    century    : month register bit 7
    am_pm      : AM (0) / PM (1), always AM in 24h format
    """

    hundredths: int = 0
    second: int = 0
    minute: int = 0
    hour: int = 0
    weekday: int = 0
    day: int = 0
    month: int = 0
    year: int = 0
    century: int = 0
    am_pm: int = AM

    def to_datetime(self, time_format: int) -> datetime:
        hour = self.hour
        if time_format == FORMAT_12H:
            hour = to_24h(hour, self.am_pm)
        return datetime(2000 + self.year, self.month, self.day,
                        hour, self.minute, self.second, self.hundredths * 10000)

    @classmethod
    def from_datetime(cls, dt: datetime, time_format: int) -> "DS1390DateTime":
        if not 2000 <= dt.year <= 2099:
            raise ValueError(f"DS1390 supports years 2000..2099 (got {dt.year})")
        hour, am_pm = dt.hour, AM
        if time_format == FORMAT_12H:
            hour, am_pm = to_12h(dt.hour)
        return cls(
            hundredths=dt.microsecond // 10000,
            second=dt.second,
            minute=dt.minute,
            hour=hour,
            weekday=dt.isoweekday() % 7 + 1,
            day=dt.day,
            month=dt.month,
            year=dt.year - 2000,
            am_pm=am_pm,
        )


def to_12h(hour: int) -> Tuple[int, int]:
    """0 -> 12 AM, 12 -> 12 PM, 13..23 -> 1..11 PM."""
    if hour == 0:
        return 12, AM
    if hour == 12:
        return 12, PM
    if hour < 12:
        return hour, AM
    return hour - 12, PM


def to_24h(hour: int, am_pm: int) -> int:
    return hour % 12 + (12 if am_pm == PM else 0)
