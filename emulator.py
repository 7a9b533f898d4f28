# emulator.py
from __future__ import annotations

import logging
import time
from typing import List, Optional, Tuple

from addressing import MASK_OSF, Addressing
from spi_transport import SpiSettings

logger = logging.getLogger(__name__)

REGISTER_COUNT = 16


class DS1390Emulator:
    """
    In-memory DS1390 register file speaking the SPI primitives.

    After select() the first byte clocked in is the address (bit 7 = write).
    Following bytes read or write consecutive registers, wrapping at 0x0F.
    The clock does not tick.
    """

    def __init__(self) -> None:
        self.registers: List[int] = [0] * REGISTER_COUNT
        # Power-up state: 01/01/00, Sunday, oscillator stop flag raised
        self.registers[Addressing.read_address("WDAY")] = 0x01
        self.registers[Addressing.read_address("DAY")] = 0x01
        self.registers[Addressing.read_address("MON")] = 0x01
        self.registers[Addressing.read_address("STS")] = MASK_OSF

        self.settings: Optional[SpiSettings] = None
        self.writes: List[Tuple[int, int]] = []
        self.transactions = 0
        self.opened_at = time.monotonic()

        self._selected = False
        self._address: Optional[int] = None
        self._writing = False

    # ------------------------------------------------------------------
    # SPI primitives
    # ------------------------------------------------------------------

    def begin_transaction(self, settings: SpiSettings) -> None:
        if self.settings is not None:
            raise RuntimeError("Transaction already in progress")
        self.settings = settings
        self.transactions += 1

    def end_transaction(self) -> None:
        if self._selected:
            raise RuntimeError("end_transaction() while device selected")
        self.settings = None

    def select(self) -> None:
        if self.settings is None:
            raise RuntimeError("select() outside of a transaction")
        self._selected = True
        self._address = None

    def deselect(self) -> None:
        self._selected = False
        self._address = None

    def transfer_byte(self, out: int) -> int:
        if not self._selected:
            raise RuntimeError("transfer_byte() while device not selected")

        out &= 0xFF
        if self._address is None:
            self._writing = Addressing.is_write(out)
            self._address = Addressing.register_index(out)
            return 0xFF

        reg = self._address
        self._address = (reg + 1) % REGISTER_COUNT
        if self._writing:
            logger.debug("REG[0x%02X] <- 0x%02X", reg, out)
            self.registers[reg] = out
            self.writes.append((reg, out))
            return 0xFF
        return self.registers[reg]

    def close(self) -> None:
        self.deselect()
        self.settings = None

    # ------------------------------------------------------------------
    # Test helpers
    # ------------------------------------------------------------------

    def snapshot(self) -> bytes:
        return bytes(self.registers)

    def lose_power(self) -> None:
        """Backup supply removed: the oscillator stopped."""
        sts = Addressing.read_address("STS")
        self.registers[sts] |= MASK_OSF
