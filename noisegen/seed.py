"""
ent — Seed Derivation
Turns a nanosecond timestamp into a seed in [0, 1_000_000) using the
POSIX cksum CRC, so seeds match `date +%s%N | cksum` on the shell.
"""

import time
from typing import Optional

SEED_MODULUS = 1_000_000

_CRC_POLY = 0x04C11DB7


def _build_table():
    table = []
    for i in range(256):
        crc = i << 24
        for _ in range(8):
            if crc & 0x80000000:
                crc = ((crc << 1) ^ _CRC_POLY) & 0xFFFFFFFF
            else:
                crc = (crc << 1) & 0xFFFFFFFF
        table.append(crc)
    return table


_CRC_TABLE = _build_table()


def cksum(data: bytes) -> int:
    """POSIX cksum CRC of `data` (message bytes, then the length, then complement)."""
    crc = 0
    for byte in data:
        crc = ((crc << 8) & 0xFFFFFFFF) ^ _CRC_TABLE[((crc >> 24) ^ byte) & 0xFF]

    length = len(data)
    while length:
        crc = ((crc << 8) & 0xFFFFFFFF) ^ _CRC_TABLE[((crc >> 24) ^ length) & 0xFF]
        length >>= 8

    return ~crc & 0xFFFFFFFF


def timestamp_seed(now_ns: Optional[int] = None) -> int:
    """
    Derive a fresh seed from the current high-resolution timestamp.

    Args:
        now_ns: Nanoseconds since the epoch (defaults to time.time_ns())

    Returns:
        Integer seed in [0, 1_000_000)
    """
    if now_ns is None:
        now_ns = time.time_ns()
    # echo appends a newline before piping to cksum
    return cksum(f"{now_ns}\n".encode("ascii")) % SEED_MODULUS
