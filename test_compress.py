import pytest

from bitops import MASK32, MASK64, ch, maj, parity
from compress import (
    compress64,
    compress80,
    compression,
    compression512,
    sha1_compress80,
    sha1_compression,
    sha1_round_constant,
    sha1_round_function,
    update_hash_state,
)
from padding import pad_message
from round_constants import (
    SHA1_H0,
    SHA1_K_VALUES,
    SHA256_H0,
    SHA256_K_VALUES,
    SHA512_H0,
    SHA512_K_VALUES,
)
from schedule import sha1_message_schedule, sha256_message_schedule, sha512_message_schedule


TEST_VECTORS = [
    # All-zero state to check the basic wiring.
    (0, 0, 0, 0, 0, 0, 0, 0, 0),
    # Mixed non-zero values so that all words are distinguishable from 0.
    (1, 2, 3, 4, 5, 6, 7, 8, 0x67452301),
    (
        0x01234567,
        0x89ABCDEF,
        0xDEADBEEF,
        0xCAFEBABE,
        0x0F0F0F0F,
        0xF0F0F0F0,
        0xAAAAAAAA,
        0x55555555,
        0x12345678,
    ),
]


def test_constant_table_sizes():
    assert len(SHA1_K_VALUES) == 80
    assert len(SHA256_K_VALUES) == 64
    assert len(SHA512_K_VALUES) == 80
    assert SHA256_K_VALUES[-1] == 0xC67178F2
    assert SHA512_K_VALUES[-1] == 0x6C44198C4A475817
    # SHA-512 constants extend the SHA-256 ones to 64 bits.
    assert all(k512 >> 32 == k256 for k512, k256 in zip(SHA512_K_VALUES, SHA256_K_VALUES))


@pytest.mark.parametrize(
    "t,expected_fn,expected_k",
    [
        (0, ch, 0x5A827999),
        (19, ch, 0x5A827999),
        (20, parity, 0x6ED9EBA1),
        (39, parity, 0x6ED9EBA1),
        (40, maj, 0x8F1BBCDC),
        (59, maj, 0x8F1BBCDC),
        (60, parity, 0xCA62C1D6),
        (79, parity, 0xCA62C1D6),
    ],
)
def test_sha1_stage_boundaries(t, expected_fn, expected_k):
    assert sha1_round_function(t) is expected_fn
    assert sha1_round_constant(t) == expected_k
    assert SHA1_K_VALUES[t] == expected_k


@pytest.mark.parametrize("t", [-1, 80, 100])
def test_sha1_round_index_out_of_range(t):
    with pytest.raises(ValueError):
        sha1_round_function(t)
    with pytest.raises(ValueError):
        sha1_round_constant(t)


def test_first_sha1_round_for_abc():
    """Working state after round 0 of SHA-1("abc"), from the FIPS 180 example."""
    w = sha1_message_schedule(pad_message(b"abc"))
    state = sha1_compression(*SHA1_H0, w[0], 0)
    assert state == (0x0116FC33, 0x67452301, 0x7BF36AE2, 0x98BADCFE, 0x10325476)


def test_first_sha256_round_for_abc():
    """Working state after round 0 of SHA-256("abc"), from the FIPS 180 example."""
    w = sha256_message_schedule(pad_message(b"abc"))
    state = compression(*SHA256_H0, w[0], SHA256_K_VALUES[0])
    assert state == (
        0x5D6AEBCD,
        0x6A09E667,
        0xBB67AE85,
        0x3C6EF372,
        0xFA2A4622,
        0x510E527F,
        0x9B05688C,
        0x1F83D9AB,
    )


@pytest.mark.parametrize("a,b,c,d,e,f,g,h,w", TEST_VECTORS)
def test_sha2_round_shifts_registers(a, b, c, d, e, f, g, h, w):
    """Every register but a and e is the previous neighbour's value."""
    for round_fn, k in ((compression, SHA256_K_VALUES[63]), (compression512, SHA512_K_VALUES[79])):
        _, b_new, c_new, d_new, _, f_new, g_new, h_new = round_fn(a, b, c, d, e, f, g, h, w, k)
        assert (b_new, c_new, d_new) == (a, b, c)
        assert (f_new, g_new, h_new) == (e, f, g)


@pytest.mark.parametrize("a,b,c,d,e,f,g,h,w", TEST_VECTORS)
def test_sha2_round_a_and_e_share_temp1(a, b, c, d, e, f, g, h, w):
    """a' - e' == temp2 - d, independently of h, w and k."""
    k = SHA256_K_VALUES[0]
    a1, _, _, _, e1, _, _, _ = compression(a, b, c, d, e, f, g, h, w, k)
    a2, _, _, _, e2, _, _, _ = compression(a, b, c, d, e, f, g, (h + 1) & MASK32, w, k)
    assert (a1 - e1) & MASK32 == (a2 - e2) & MASK32
    assert (a2 - a1) & MASK32 == 1
    assert (e2 - e1) & MASK32 == 1


def test_rounds_stay_within_word_width():
    state = compression(*([MASK32] * 8), MASK32, MASK32)
    assert all(0 <= word <= MASK32 for word in state)
    state = compression512(*([MASK64] * 8), MASK64, MASK64)
    assert all(0 <= word <= MASK64 for word in state)
    state = sha1_compression(*([MASK32] * 5), MASK32, 79)
    assert all(0 <= word <= MASK32 for word in state)


@pytest.mark.parametrize("a,b,c,d,e,f,g,h,w", TEST_VECTORS)
def test_compress64_is_64_single_rounds(a, b, c, d, e, f, g, h, w):
    ws = [((w + i * 0x01020304) & MASK32) for i in range(64)]
    expected = (a, b, c, d, e, f, g, h)
    for i in range(64):
        expected = compression(*expected, ws[i], SHA256_K_VALUES[i])
    assert compress64(a, b, c, d, e, f, g, h, ws) == expected


@pytest.mark.parametrize("a,b,c,d,e,f,g,h,w", TEST_VECTORS)
def test_compress80_is_80_single_rounds(a, b, c, d, e, f, g, h, w):
    ws = [((w * 0x0100000001 + i * 0x0102030405060708) & MASK64) for i in range(80)]
    expected = (a, b, c, d, e, f, g, h)
    for i in range(80):
        expected = compression512(*expected, ws[i], SHA512_K_VALUES[i])
    assert compress80(a, b, c, d, e, f, g, h, ws) == expected


@pytest.mark.parametrize("a,b,c,d,e,f,g,h,w", TEST_VECTORS)
def test_sha1_compress80_is_80_single_rounds(a, b, c, d, e, f, g, h, w):
    ws = [((w + i * 0x01020304) & MASK32) for i in range(80)]
    expected = (a, b, c, d, e)
    for t in range(80):
        expected = sha1_compression(*expected, ws[t], t)
    assert sha1_compress80(a, b, c, d, e, ws) == expected


def test_compression_loops_check_schedule_length():
    with pytest.raises(ValueError):
        compress64(*SHA256_H0, [0] * 63)
    with pytest.raises(ValueError):
        compress80(*SHA512_H0, [0] * 64)
    with pytest.raises(ValueError):
        sha1_compress80(*SHA1_H0, [0] * 64)


def test_trace_sees_every_round_in_order():
    ws = sha256_message_schedule(pad_message(b"abc"))
    seen = []
    result = compress64(*SHA256_H0, ws, trace=lambda i, state: seen.append((i, state)))

    assert [i for i, _ in seen] == list(range(64))
    assert seen[-1][1] == result
    assert seen[0][1][0] == 0x5D6AEBCD


def test_sha1_and_sha512_traces():
    sha1_seen = []
    sha1_compress80(*SHA1_H0, sha1_message_schedule(pad_message(b"abc")),
                    trace=lambda t, state: sha1_seen.append(t))
    assert sha1_seen == list(range(80))

    sha512_seen = []
    result = compress80(*SHA512_H0, sha512_message_schedule(pad_message(b"abc", 128, 16)),
                        trace=lambda t, state: sha512_seen.append(state))
    assert len(sha512_seen) == 80
    assert sha512_seen[-1] == result


def test_update_hash_state_wraps():
    assert update_hash_state((MASK32, 1), (1, 2)) == (0, 3)
    assert update_hash_state((MASK64,), (2,), 64) == (1,)
    assert update_hash_state(SHA256_H0, (0,) * 8) == SHA256_H0


def test_update_hash_state_length_mismatch():
    with pytest.raises(ValueError):
        update_hash_state(SHA1_H0, SHA256_H0)
