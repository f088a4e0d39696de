"""The rolling XOR scrambling applied to save and score files."""

from __future__ import annotations

from itertools import cycle, islice
from typing import BinaryIO, Iterator

RELEASE = "5.4.4-PIERCE"
VERSION = "rogue (rogueforge) 09/05/07"

ENCSTR = bytes.fromhex(
    "c06b7c7c60a9592e27c5"
    "d1812bbf7e72225da05f"
    "933d31e129928aa1743b"
    "0924b8cc2f3c2381ac"
)
STATLIST = bytes.fromhex(
    "ed6b6c7b2b84adcb6964"
    "4af18c3d343ac9b9e177"
    "4b3ccad18b2c2c37b92f"
    "526b2508ca0ca6"
)


def _keystream(size: int) -> Iterator[int]:
    feedback = 0
    for e1, e2 in islice(zip(cycle(ENCSTR), cycle(STATLIST)), size):
        yield e1 ^ e2 ^ feedback
        feedback = (feedback + e1 * e2) & 0xFF


def crypt_bytes(data: bytes) -> bytes:
    """Scramble or unscramble ``data``; the operation is its own inverse.

    The keystream restarts at the beginning of every call.
    """
    data = bytes(data)
    return bytes(b ^ k for b, k in zip(data, _keystream(len(data))))


def encwrite(stream: BinaryIO, data: bytes) -> int:
    """Write ``data`` scrambled to ``stream`` and return the number of bytes."""
    stream.write(crypt_bytes(data))
    return len(data)


def encread(stream: BinaryIO, size: int) -> bytes:
    """Read up to ``size`` scrambled bytes from ``stream`` and unscramble them."""
    if size < 0:
        raise ValueError("size must not be negative")
    return crypt_bytes(stream.read(size))