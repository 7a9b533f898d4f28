from __future__ import annotations


def hexdump(b: bytes) -> str:
    return "-".join(f"{x:02X}" for x in b)


def dec2bcd(x: int) -> int:
    """Pack 0..99 into one BCD byte. No range check, clamp before calling."""
    return ((x // 10) << 4) | (x % 10)


def bcd2dec(b: int) -> int:
    """
    Unpack one BCD byte.

    Nibbles above 9 are not rejected:
        0x1A -> 1*10 + 10 = 20
    """
    return (((b >> 4) & 0x0F) * 10) + (b & 0x0F)
