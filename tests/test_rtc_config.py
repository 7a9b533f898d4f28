# tests/test_rtc_config.py
"""RTCConfig loading and driver construction."""

import json

import pytest

import spi_transport
from rtc_config import RTCConfig
from validity import CenturyBitTracker, OscillatorStopFlagTracker

from conftest import ScriptedSerial


class TestRTCConfig:
    def test_defaults(self):
        cfg = RTCConfig(port="/dev/ttyACM0")

        assert cfg.baudrate == 115200
        assert cfg.validity_scheme == "osf"
        assert cfg.spi_settings.clock_hz == 4_000_000
        assert cfg.spi_settings.mode == 1

    def test_from_json(self, tmp_path):
        path = tmp_path / "rtc.json"
        path.write_text(json.dumps({
            "port": "COM5",
            "baudrate": 57600,
            "validity_scheme": "century",
            "timezone": -3,
            "spi_clock_hz": 1000000,
        }), encoding="utf-8")

        cfg = RTCConfig.from_json(path)

        assert cfg.port == "COM5"
        assert cfg.baudrate == 57600
        assert cfg.timezone == -3
        assert cfg.spi_settings.clock_hz == 1_000_000

    def test_unknown_key_rejected(self, tmp_path):
        path = tmp_path / "rtc.json"
        path.write_text(json.dumps({"port": "COM5", "alarm": True}), encoding="utf-8")

        with pytest.raises(TypeError):
            RTCConfig.from_json(path)

    def test_bad_scheme(self):
        with pytest.raises(ValueError):
            RTCConfig(port="COM5", validity_scheme="parity")

    def test_bad_timezone(self):
        with pytest.raises(ValueError, match="timezone"):
            RTCConfig(port="COM5", timezone=14)


class TestOpenDriver:
    @pytest.fixture()
    def fake_port(self, monkeypatch):
        port = ScriptedSerial()
        monkeypatch.setattr(spi_transport.serial, "serial_for_url", lambda url, **kw: port)
        return port

    def test_osf_driver(self, fake_port):
        rtc = RTCConfig(port="loop://").open_driver()

        assert isinstance(rtc.validity, OscillatorStopFlagTracker)
        assert rtc.powerup_delay_s == 0.2
        rtc.close()
        assert fake_port.closed

    def test_century_driver(self, fake_port):
        rtc = RTCConfig(port="loop://", validity_scheme="century", powerup_delay_s=0.5).open_driver()

        assert isinstance(rtc.validity, CenturyBitTracker)
        assert rtc.powerup_delay_s == 0.5
