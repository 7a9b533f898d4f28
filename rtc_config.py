# rtc_config.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union
import json

from driver import DS1390
from spi_transport import SerialBridgeTransport, SpiSettings
from validity import ValidityScheme

JsonPath = Union[str, Path]


@dataclass(frozen=True)
class RTCConfig:
    """
    Configuration for a DS1390 behind a serial SPI bridge.

    port            : Serial device or pyserial URL ("/dev/ttyACM0", "COM5", "socket://host:port").
    baudrate        : Serial link speed.
    timeout         : Serial read timeout in seconds.
    spi_clock_hz    : SPI clock (DS1390 max 4 MHz).
    spi_mode        : SPI mode (DS1390 uses mode 1).
    validity_scheme : "osf" (oscillator stop flag) or "century" (century bit).
    timezone        : Local timezone in whole hours, -12..+12.
    powerup_delay_s : Minimum delay between power-up and the first access.
    """

    port: str
    baudrate: int = 115200
    timeout: float = 0.5
    spi_clock_hz: int = 4_000_000
    spi_mode: int = 1
    validity_scheme: str = ValidityScheme.OSCILLATOR_STOP_FLAG.value
    timezone: int = 0
    powerup_delay_s: float = 0.2

    def __post_init__(self) -> None:
        # Raises ValueError for unknown schemes
        ValidityScheme(self.validity_scheme)
        if not -12 <= self.timezone <= 12:
            raise ValueError(f"timezone must be -12..+12 (got {self.timezone})")

    @classmethod
    def from_json(cls, path: JsonPath) -> "RTCConfig":
        """
        Load RTC configuration from a JSON file.

        Example JSON:
        {
          "port": "/dev/ttyACM0",
          "baudrate": 115200,
          "validity_scheme": "osf",
          "timezone": -3
        }
        """
        p = Path(path)
        with p.open("r", encoding="utf-8") as f:
            data: Dict[str, Any] = json.load(f)
        return cls(**data)

    @property
    def spi_settings(self) -> SpiSettings:
        return SpiSettings(clock_hz=self.spi_clock_hz, mode=self.spi_mode)

    def open_driver(self) -> DS1390:
        bridge = SerialBridgeTransport(self.port, baudrate=self.baudrate, timeout=self.timeout)
        bridge.open()
        return DS1390(
            bridge,
            settings=self.spi_settings,
            validity_scheme=self.validity_scheme,
            powerup_delay_s=self.powerup_delay_s,
        )
