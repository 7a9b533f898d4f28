from __future__ import annotations

from enum import IntEnum
from typing import Final

# Write addresses are the read addresses with bit 7 set
WRITE_FLAG: Final = 0x80

# Time block is 8 consecutive registers starting at hundredths
TIME_BLOCK_SIZE: Final = 8

MASK_AMPM: Final = 0x20
MASK_FORMAT: Final = 0x40
MASK_CENTURY: Final = 0x80
MASK_OSF: Final = 0x80

MASK_HOUR_24H: Final = 0x3F
MASK_HOUR_12H: Final = 0x1F
MASK_MONTH: Final = 0x1F

FORMAT_24H: Final = 0
FORMAT_12H: Final = 1

AM: Final = 0
PM: Final = 1


class TrickleCharger(IntEnum):
    """Trickle charger register patterns accepted by the device."""

    DISABLE = 0x00
    R250_NO_DIODE = 0xA5
    R250_DIODE = 0xA9
    R2K_NO_DIODE = 0xA6
    R2K_DIODE = 0xAA
    R4K_NO_DIODE = 0xA7
    R4K_DIODE = 0xAB


class Addressing:
    REG = {
        "HSEC": 0x00,   # hundredths of seconds
        "SEC": 0x01,
        "MIN": 0x02,
        "HRS": 0x03,    # bit 6 = 12h format, bit 5 = PM (12h only)
        "WDAY": 0x04,   # 1 = Sunday
        "DAY": 0x05,
        "MON": 0x06,    # bit 7 = century
        "YRS": 0x07,
        "STS": 0x0E,    # bit 7 = oscillator stop flag
        "TCH": 0x0F,    # trickle charger
    }

    @classmethod
    def read_address(cls, name: str) -> int:
        return cls.REG[name.upper()]

    @classmethod
    def write_address(cls, name: str) -> int:
        return cls.REG[name.upper()] | WRITE_FLAG

    @staticmethod
    def is_write(address: int) -> bool:
        return bool(address & WRITE_FLAG)

    @staticmethod
    def register_index(address: int) -> int:
        return address & 0x0F
