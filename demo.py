#!/usr/bin/env python3
"""Read (and optionally set) a DS1390 through the serial SPI bridge.

    python demo.py --port /dev/ttyACM0 --timezone -3
    python demo.py --config rtc.json --set-now
    python demo.py --emulate --set-now
"""
from __future__ import annotations

import argparse
import logging
import time
from dataclasses import replace

from driver import DS1390
from emulator import DS1390Emulator
from rtc_config import RTCConfig


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--config", help="JSON file with RTCConfig fields")
    parser.add_argument("--port", help="serial device or pyserial URL of the SPI bridge")
    parser.add_argument("--timezone", type=int, default=None, help="local timezone in hours")
    parser.add_argument("--emulate", action="store_true", help="use the in-memory DS1390")
    parser.add_argument("--set-now", action="store_true", help="write the host clock to the RTC")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.emulate:
        cfg = RTCConfig(port="emulator", timezone=args.timezone or 0)
        rtc = DS1390(DS1390Emulator(), settings=cfg.spi_settings, powerup_delay_s=0)
    else:
        if args.config:
            cfg = RTCConfig.from_json(args.config)
        elif args.port:
            cfg = RTCConfig(port=args.port)
        else:
            parser.error("one of --config, --port or --emulate is required")
        if args.timezone is not None:
            cfg = replace(cfg, timezone=args.timezone)
        rtc = cfg.open_driver()

    with rtc:
        valid = rtc.begin()
        print("Registers valid:", valid)

        if args.set_now:
            rtc.set_epoch(int(time.time()), cfg.timezone)

        print("RTC clock:", rtc.get_datetime().isoformat(sep=" "))
        print("Epoch:", rtc.get_epoch(cfg.timezone))
        print("Format:", "12h" if rtc.get_time_format() else "24h")
        print(f"Trickle charger: 0x{rtc.get_trickle_charger_mode():02X}")


if __name__ == "__main__":
    main()
