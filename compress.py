"""Forward SHA-1 / SHA-256 / SHA-512 compression.

One SHA-2 round, given the working state `(a, b, c, d, e, f, g, h)`, the
round constant `k` and the schedule word `w`, computes:

    S1    = Σ1(e)
    ch    = (e & f) ^ (~e & g)
    temp1 = h + S1 + ch + k + w

    S0    = Σ0(a)
    maj   = (a & b) ^ (a & c) ^ (b & c)
    temp2 = S0 + maj

    a' = temp1 + temp2
    e' = d + temp1
    b' = a, c' = b, d' = c, f' = e, g' = f, h' = g

with Σ0/Σ1 and the modulus depending on the word width:

    SHA-256  Σ0 = (a >>> 2) ^ (a >>> 13) ^ (a >>> 22)      mod 2**32
             Σ1 = (e >>> 6) ^ (e >>> 11) ^ (e >>> 25)
    SHA-512  Σ0 = (a >>> 28) ^ (a >>> 34) ^ (a >>> 39)     mod 2**64
             Σ1 = (e >>> 14) ^ (e >>> 18) ^ (e >>> 41)

One SHA-1 round works on `(a, b, c, d, e)`:

    temp = (a <<< 5) + f_t(b, c, d) + e + k_t + w
    a' = temp, b' = a, c' = b <<< 30, d' = c, e' = d

where `f_t`/`k_t` come from the stage table (ch, parity, maj, parity for
rounds 0-19, 20-39, 40-59, 60-79).

The per-block loops accept an optional `trace(round_index, state)` callback
that sees the working state after every round.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence, Tuple

from bitops import MASK32, MASK64, ch, maj, parity, rotl, rotr, word_mask
from round_constants import SHA1_STAGES, SHA256_K_VALUES, SHA512_K_VALUES


RoundCallback = Callable[[int, Tuple[int, ...]], None]

# Ordered (first round, last round, mixing function) table for SHA-1.
SHA1_ROUND_FUNCTIONS: Tuple[Tuple[int, int, Callable[[int, int, int], int]], ...] = (
    (0, 19, ch),
    (20, 39, parity),
    (40, 59, maj),
    (60, 79, parity),
)


def sha1_round_function(t: int) -> Callable[[int, int, int], int]:
    """Return the SHA-1 mixing function for round `t`."""
    for first, last, fn in SHA1_ROUND_FUNCTIONS:
        if first <= t <= last:
            return fn
    raise ValueError(f"SHA-1 round index must be in [0, 79], got {t}")


def sha1_round_constant(t: int) -> int:
    """Return the SHA-1 constant k_t for round `t`."""
    for first, last, k in SHA1_STAGES:
        if first <= t <= last:
            return k
    raise ValueError(f"SHA-1 round index must be in [0, 79], got {t}")


_SHA1_SCHEDULE = tuple((sha1_round_function(t), sha1_round_constant(t)) for t in range(80))


def sha256_big_sigma0(x: int) -> int:
    return rotr(x, 2) ^ rotr(x, 13) ^ rotr(x, 22)


def sha256_big_sigma1(x: int) -> int:
    return rotr(x, 6) ^ rotr(x, 11) ^ rotr(x, 25)


def sha512_big_sigma0(x: int) -> int:
    return rotr(x, 28, 64) ^ rotr(x, 34, 64) ^ rotr(x, 39, 64)


def sha512_big_sigma1(x: int) -> int:
    return rotr(x, 14, 64) ^ rotr(x, 18, 64) ^ rotr(x, 41, 64)


def sha1_compression(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    w: int,
    t: int,
) -> Tuple[int, int, int, int, int]:
    """Perform one SHA-1 compression round.

    Parameters
    ----------
    a, b, c, d, e : int
        32-bit words representing the current working state.
    w : int
        Message schedule word `w[t]`.
    t : int
        Round index in [0, 79]; selects the mixing function and constant.

    Returns
    -------
    (a_new, b_new, c_new, d_new, e_new) : tuple[int, ...]
        Updated working state after one round, all reduced modulo 2**32.
    """
    f = sha1_round_function(t)
    k = sha1_round_constant(t)
    temp = (rotl(a, 5) + f(b, c, d) + e + k + w) & MASK32
    return temp, a & MASK32, rotl(b, 30), c & MASK32, d & MASK32


def _sha2_round(a, b, c, d, e, f, g, h, w, k, big_sigma0, big_sigma1, mask):
    temp1 = (h + big_sigma1(e) + ch(e, f, g) + k + w) & mask
    temp2 = (big_sigma0(a) + maj(a, b, c)) & mask
    return (temp1 + temp2) & mask, a, b, c, (d + temp1) & mask, e, f, g


def compression(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    w: int,
    k: int,
) -> Tuple[int, int, int, int, int, int, int, int]:
    """Perform one SHA-256 compression round.

    Parameters
    ----------
    a, b, c, d, e, f, g, h : int
        32-bit words representing the current working state.
    w : int
        Message schedule word `w[i]`.
    k : int
        Round constant `k[i]`.

    Returns
    -------
    (a_new, b_new, c_new, d_new, e_new, f_new, g_new, h_new) : tuple[int, ...]
        Updated working state after one compression round, all reduced modulo 2**32.
    """
    a, b, c, d, e, f, g, h = (x & MASK32 for x in (a, b, c, d, e, f, g, h))
    return _sha2_round(
        a, b, c, d, e, f, g, h, w & MASK32, k & MASK32,
        sha256_big_sigma0, sha256_big_sigma1, MASK32,
    )


def compression512(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    w: int,
    k: int,
) -> Tuple[int, int, int, int, int, int, int, int]:
    """Perform one SHA-512 compression round (64-bit words, modulo 2**64)."""
    a, b, c, d, e, f, g, h = (x & MASK64 for x in (a, b, c, d, e, f, g, h))
    return _sha2_round(
        a, b, c, d, e, f, g, h, w & MASK64, k & MASK64,
        sha512_big_sigma0, sha512_big_sigma1, MASK64,
    )


def sha1_compress80(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    ws: Sequence[int],
    trace: Optional[RoundCallback] = None,
) -> Tuple[int, int, int, int, int]:
    """Run the full 80-round SHA-1 compression loop for one block.

    Parameters
    ----------
    a, b, c, d, e : int
        Initial working state words (typically the current hash value).
    ws : Sequence[int]
        The 80-word message schedule `w[0..79]` for this block.
    trace : callable, optional
        Called as `trace(t, state)` after each round.

    Returns
    -------
    (a, b, c, d, e) : tuple[int, ...]
        Final working state words after 80 rounds.
    """
    if len(ws) != 80:
        raise ValueError(f"sha1_compress80 expects 80 message schedule words, got {len(ws)}")

    a_, b_, c_, d_, e_ = (x & MASK32 for x in (a, b, c, d, e))
    for t, (fn, k) in enumerate(_SHA1_SCHEDULE):
        temp = (rotl(a_, 5) + fn(b_, c_, d_) + e_ + k + ws[t]) & MASK32
        a_, b_, c_, d_, e_ = temp, a_, rotl(b_, 30), c_, d_
        if trace is not None:
            trace(t, (a_, b_, c_, d_, e_))

    return a_, b_, c_, d_, e_


def compress64(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    ws: Sequence[int],
    trace: Optional[RoundCallback] = None,
) -> Tuple[int, int, int, int, int, int, int, int]:
    """Run the full 64-round SHA-256 compression loop for one block.

    Parameters
    ----------
    a, b, c, d, e, f, g, h : int
        Initial working state words (typically the current hash value).
    ws : Sequence[int]
        The 64-word message schedule `w[0..63]` for this block.
    trace : callable, optional
        Called as `trace(i, state)` after each round.

    Returns
    -------
    (a, b, c, d, e, f, g, h) : tuple[int, ...]
        Final working state words after 64 rounds.
    """
    if len(ws) != 64:
        raise ValueError(f"compress64 expects 64 message schedule words, got {len(ws)}")

    state = tuple(x & MASK32 for x in (a, b, c, d, e, f, g, h))
    for i in range(64):
        state = _sha2_round(
            *state, ws[i], SHA256_K_VALUES[i],
            sha256_big_sigma0, sha256_big_sigma1, MASK32,
        )
        if trace is not None:
            trace(i, state)

    return state


def compress80(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    ws: Sequence[int],
    trace: Optional[RoundCallback] = None,
) -> Tuple[int, int, int, int, int, int, int, int]:
    """Run the full 80-round SHA-512 compression loop for one block."""
    if len(ws) != 80:
        raise ValueError(f"compress80 expects 80 message schedule words, got {len(ws)}")

    state = tuple(x & MASK64 for x in (a, b, c, d, e, f, g, h))
    for i in range(80):
        state = _sha2_round(
            *state, ws[i], SHA512_K_VALUES[i],
            sha512_big_sigma0, sha512_big_sigma1, MASK64,
        )
        if trace is not None:
            trace(i, state)

    return state


def update_hash_state(
    prev_state: Sequence[int],
    working: Sequence[int],
    width: int = 32,
) -> Tuple[int, ...]:
    """Fold the working registers back into the chaining value.

    This is the post-compression feed-forward:
        H_{i+1}[j] = (H_i[j] + working[j]) mod 2**width
    """
    if len(prev_state) != len(working):
        raise ValueError(
            f"Hash state has {len(prev_state)} words but working state has {len(working)}"
        )
    mask = word_mask(width)
    return tuple((h + x) & mask for h, x in zip(prev_state, working))
