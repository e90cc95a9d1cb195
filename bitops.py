"""Bit primitives shared by the SHA-1 and SHA-2 engines.

All helpers operate on Python ints that represent unsigned words of a fixed
width. Only the two widths used by the SHA family are supported:

    32 bits  (SHA-1, SHA-256)
    64 bits  (SHA-512)

The boolean combiners (`parity`, `ch`, `maj`) never widen their inputs, so
they do not need the width: for in-range words the result is in range too.
"""

from __future__ import annotations

from typing import Dict


MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF

_MASKS: Dict[int, int] = {32: MASK32, 64: MASK64}


def word_mask(width: int) -> int:
    """Return the all-ones mask for a `width`-bit word."""
    try:
        return _MASKS[width]
    except KeyError:
        raise ValueError(f"Unsupported word width {width}, expected 32 or 64") from None


def rotl(x: int, n: int, width: int = 32) -> int:
    """Left-rotate the `width`-bit word `x` by `n` bits."""
    mask = word_mask(width)
    if not 0 <= n < width:
        raise ValueError(f"Rotation amount must be in [0, {width}), got {n}")
    x &= mask
    if n == 0:
        return x
    return ((x << n) | (x >> (width - n))) & mask


def rotr(x: int, n: int, width: int = 32) -> int:
    """Right-rotate the `width`-bit word `x` by `n` bits."""
    mask = word_mask(width)
    if not 0 <= n < width:
        raise ValueError(f"Rotation amount must be in [0, {width}), got {n}")
    x &= mask
    if n == 0:
        return x
    return ((x >> n) | (x << (width - n))) & mask


def shr(x: int, n: int, width: int = 32) -> int:
    """Right-shift the `width`-bit word `x` by `n` bits."""
    x &= word_mask(width)
    return x >> n


def parity(x: int, y: int, z: int) -> int:
    return x ^ y ^ z


def ch(x: int, y: int, z: int) -> int:
    """Choice: take bits of `y` where `x` is set, bits of `z` elsewhere."""
    return (x & y) ^ ((~x) & z)


def maj(x: int, y: int, z: int) -> int:
    """Majority: each output bit is the value held by at least two inputs."""
    return (x & y) ^ (y & z) ^ (z & x)
