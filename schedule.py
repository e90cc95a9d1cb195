"""Message schedule expansion for SHA-1, SHA-256 and SHA-512.

Each padded block is read as sixteen big-endian words W[0..15], then
extended to one word per compression round:

    SHA-1    W[t] = rotl(W[t-3] ^ W[t-8] ^ W[t-14] ^ W[t-16], 1)       80 words
    SHA-256  W[t] = s1(W[t-2]) + W[t-7] + s0(W[t-15]) + W[t-16]        64 words
    SHA-512  same recurrence with 64-bit words and sigma functions     80 words

A schedule only ever depends on its own block.
"""

from __future__ import annotations

from typing import Callable, List, Sequence

from bitops import MASK32, MASK64, rotl, rotr, shr


def sha256_small_sigma0(x: int) -> int:
    """SHA-256 function σ0 used in the message schedule."""
    return (rotr(x, 7) ^ rotr(x, 18) ^ shr(x, 3)) & MASK32


def sha256_small_sigma1(x: int) -> int:
    """SHA-256 function σ1 used in the message schedule."""
    return (rotr(x, 17) ^ rotr(x, 19) ^ shr(x, 10)) & MASK32


def sha512_small_sigma0(x: int) -> int:
    """SHA-512 function σ0 used in the message schedule."""
    return (rotr(x, 1, 64) ^ rotr(x, 8, 64) ^ shr(x, 7, 64)) & MASK64


def sha512_small_sigma1(x: int) -> int:
    """SHA-512 function σ1 used in the message schedule."""
    return (rotr(x, 19, 64) ^ rotr(x, 61, 64) ^ shr(x, 6, 64)) & MASK64


def _load_words(block: bytes, block_size: int, word_bytes: int) -> List[int]:
    """Split a block into its sixteen big-endian words."""
    if len(block) != block_size:
        raise ValueError(f"Expected {block_size}-byte block, got {len(block)}")
    return [
        int.from_bytes(block[word_bytes * i : word_bytes * (i + 1)], byteorder="big")
        for i in range(16)
    ]


def _expand_sha2(
    w: Sequence[int],
    rounds: int,
    sigma0: Callable[[int], int],
    sigma1: Callable[[int], int],
    mask: int,
) -> List[int]:
    if len(w) < 16:
        raise ValueError(f"Message schedule must contain at least 16 words, got {len(w)}")

    # Work on a copy so callers can reuse their original list.
    schedule = list(w[:16]) + [0] * (rounds - 16)
    for i in range(16, rounds):
        s0 = sigma0(schedule[i - 15])
        s1 = sigma1(schedule[i - 2])
        schedule[i] = (schedule[i - 16] + s0 + schedule[i - 7] + s1) & mask
    return schedule


def expand_message_schedule(w: Sequence[int], rounds: int = 64) -> List[int]:
    """Expand an initial SHA-256 schedule W[0..15] to W[0..(rounds-1)].

    Only the first 16 words of `w` are used; the original list is left intact.
    """
    return _expand_sha2(w, rounds, sha256_small_sigma0, sha256_small_sigma1, MASK32)


def expand_message_schedule512(w: Sequence[int], rounds: int = 80) -> List[int]:
    """Expand an initial SHA-512 schedule W[0..15] to W[0..(rounds-1)]."""
    return _expand_sha2(w, rounds, sha512_small_sigma0, sha512_small_sigma1, MASK64)


def sha1_message_schedule(block: bytes) -> List[int]:
    """Given a 512-bit block, build the 80-word SHA-1 schedule w[0..79]."""
    w = _load_words(block, 64, 4)
    for t in range(16, 80):
        w.append(rotl(w[t - 3] ^ w[t - 8] ^ w[t - 14] ^ w[t - 16], 1))
    return w


def sha256_message_schedule(block: bytes) -> List[int]:
    """Given a 512-bit block, build the 64-word SHA-256 schedule w[0..63]."""
    return expand_message_schedule(_load_words(block, 64, 4), 64)


def sha512_message_schedule(block: bytes) -> List[int]:
    """Given a 1024-bit block, build the 80-word SHA-512 schedule w[0..79]."""
    return expand_message_schedule512(_load_words(block, 128, 8), 80)
