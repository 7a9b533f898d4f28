# tests/test_validity.py
"""Validity tracking schemes."""

import pytest

from validity import (
    CenturyBitTracker,
    OscillatorStopFlagTracker,
    ValidityScheme,
    make_tracker,
)


class RegisterFile:
    def __init__(self, **regs):
        self.regs = {0x06: 0x00, 0x0E: 0x00}
        self.regs.update({int(k[1:], 16): v for k, v in regs.items()})
        self.writes = []

    def read(self, address):
        return self.regs[address]

    def write(self, address, value):
        self.writes.append((address, value))
        self.regs[address & 0x7F] = value


class TestOscillatorStopFlag:
    def test_flag_set_means_invalid(self):
        regs = RegisterFile(r0E=0x80)
        tracker = make_tracker(ValidityScheme.OSCILLATOR_STOP_FLAG, regs.read, regs.write)

        assert isinstance(tracker, OscillatorStopFlagTracker)
        assert tracker.get_validity() is False

    def test_set_validity_clears_only_the_flag(self):
        regs = RegisterFile(r0E=0x81)
        tracker = make_tracker(ValidityScheme.OSCILLATOR_STOP_FLAG, regs.read, regs.write)

        tracker.set_validity()

        assert regs.writes == [(0x8E, 0x01)]
        assert tracker.get_validity() is True

    def test_century_is_not_owned(self):
        regs = RegisterFile()
        assert make_tracker(ValidityScheme("osf"), regs.read, regs.write).owns_century is False


class TestCenturyBit:
    def test_bit_clear_means_invalid(self):
        regs = RegisterFile(r06=0x05)
        tracker = make_tracker(ValidityScheme.CENTURY_BIT, regs.read, regs.write)

        assert isinstance(tracker, CenturyBitTracker)
        assert tracker.get_validity() is False

    def test_set_validity_keeps_month(self):
        regs = RegisterFile(r06=0x12)
        tracker = make_tracker(ValidityScheme.CENTURY_BIT, regs.read, regs.write)

        tracker.set_validity()

        assert regs.writes == [(0x86, 0x92)]
        assert tracker.get_validity() is True

    def test_set_validity_is_idempotent(self):
        regs = RegisterFile(r06=0x92)
        tracker = make_tracker(ValidityScheme.CENTURY_BIT, regs.read, regs.write)

        tracker.set_validity()
        tracker.set_validity()

        assert regs.regs[0x06] == 0x92

    def test_century_is_owned(self):
        regs = RegisterFile()
        assert make_tracker(ValidityScheme("century"), regs.read, regs.write).owns_century is True


def test_unknown_scheme():
    with pytest.raises(ValueError):
        ValidityScheme("parity")
