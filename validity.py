from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from addressing import MASK_CENTURY, MASK_OSF, Addressing

logger = logging.getLogger(__name__)

ReadByte = Callable[[int], int]
WriteByte = Callable[[int, int], None]


class ValidityScheme(Enum):
    """
    OSCILLATOR_STOP_FLAG : status register bit 7, set by the device when the
                           oscillator stopped. Valid while clear.
    CENTURY_BIT          : month register bit 7 used as a "written" marker.
                           Valid while set. The century field is unavailable.
    """

    OSCILLATOR_STOP_FLAG = "osf"
    CENTURY_BIT = "century"


class ValidityTracker:
    """Read-modify-write of a single status bit shared with other fields."""

    register = ""
    mask = 0
    valid_when_set = False
    owns_century = False

    def __init__(self, read_byte: ReadByte, write_byte: WriteByte) -> None:
        self._read_byte = read_byte
        self._write_byte = write_byte

    def get_validity(self) -> bool:
        bit_set = bool(self._read_byte(Addressing.read_address(self.register)) & self.mask)
        return bit_set == self.valid_when_set

    def set_validity(self) -> None:
        current = self._read_byte(Addressing.read_address(self.register))
        if self.valid_when_set:
            value = current | self.mask
        else:
            value = current & ~self.mask & 0xFF
        self._write_byte(Addressing.write_address(self.register), value)


class OscillatorStopFlagTracker(ValidityTracker):
    register = "STS"
    mask = MASK_OSF
    valid_when_set = False


class CenturyBitTracker(ValidityTracker):
    register = "MON"
    mask = MASK_CENTURY
    valid_when_set = True
    owns_century = True


def make_tracker(scheme: ValidityScheme, read_byte: ReadByte, write_byte: WriteByte) -> ValidityTracker:
    if scheme is ValidityScheme.OSCILLATOR_STOP_FLAG:
        return OscillatorStopFlagTracker(read_byte, write_byte)
    if scheme is ValidityScheme.CENTURY_BIT:
        logger.debug("Using century bit as validity flag; century field disabled")
        return CenturyBitTracker(read_byte, write_byte)
    raise ValueError(f"Unknown validity scheme: {scheme!r}")
