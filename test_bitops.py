import pytest

from bitops import MASK32, MASK64, ch, maj, parity, rotl, rotr, shr, word_mask


ROTATION_VECTORS = [
    # (x, n, width, rotl(x, n), rotr(x, n))
    (0x12345678, 8, 32, 0x34567812, 0x78123456),
    (0x80000000, 1, 32, 0x00000001, 0x40000000),
    (0x00000001, 1, 32, 0x00000002, 0x80000000),
    (0x00000001, 31, 32, 0x80000000, 0x00000002),
    (0x0123456789ABCDEF, 16, 64, 0x456789ABCDEF0123, 0xCDEF0123456789AB),
    (0x0000000000000001, 63, 64, 0x8000000000000000, 0x0000000000000002),
]


@pytest.mark.parametrize("x,n,width,left,right", ROTATION_VECTORS)
def test_rotations_match_known_values(x, n, width, left, right):
    assert rotl(x, n, width) == left
    assert rotr(x, n, width) == right


@pytest.mark.parametrize("width", [32, 64])
@pytest.mark.parametrize("x", [0, 1, 0xDEADBEEF, MASK32])
def test_rotation_by_zero_is_identity(x, width):
    assert rotl(x, 0, width) == x
    assert rotr(x, 0, width) == x


@pytest.mark.parametrize("width,mask", [(32, MASK32), (64, MASK64)])
def test_all_ones_and_zero_are_rotation_fixed_points(width, mask):
    for n in (1, 7, width - 1):
        assert rotl(mask, n, width) == mask
        assert rotr(mask, n, width) == mask
        assert rotl(0, n, width) == 0
        assert rotr(0, n, width) == 0


@pytest.mark.parametrize("n", [1, 5, 13, 30])
def test_rotr_undoes_rotl(n):
    x = 0xCAFEBABE
    assert rotr(rotl(x, n), n) == x
    assert rotl(x, n) == rotr(x, 32 - n)


def test_rotations_reduce_oversized_inputs():
    # Bits above the word width are discarded before rotating.
    assert rotl(0x1_00000001, 1) == 0x00000002


@pytest.mark.parametrize("n", [-1, 32, 40])
def test_rotation_amount_out_of_range(n):
    with pytest.raises(ValueError):
        rotl(1, n)
    with pytest.raises(ValueError):
        rotr(1, n)


def test_unsupported_width():
    with pytest.raises(ValueError):
        word_mask(16)
    with pytest.raises(ValueError):
        rotr(1, 1, 16)


def test_shr_is_logical():
    assert shr(0x80000000, 31) == 1
    assert shr(0xFFFFFFFF, 4) == 0x0FFFFFFF
    assert shr(0x1_FFFFFFFF, 4) == 0x0FFFFFFF
    assert shr(MASK64, 60, 64) == 0xF


def test_parity():
    assert parity(0, 0, 0) == 0
    assert parity(MASK32, MASK32, MASK32) == MASK32
    assert parity(0xF0F0F0F0, 0x0FF00FF0, 0) == 0xFF00FF00
    assert parity(0x12345678, 0x12345678, 0xCAFEBABE) == 0xCAFEBABE


def test_ch_selects_bitwise():
    y, z = 0xAAAAAAAA, 0x55555555
    assert ch(MASK32, y, z) == y
    assert ch(0, y, z) == z
    assert ch(0xFFFF0000, y, z) == 0xAAAA5555


def test_ch_stays_within_word_width():
    assert ch(0, MASK64, MASK64) == MASK64
    assert ch(0, 0, MASK32) == MASK32


def test_maj_takes_majority():
    x = 0x0F0F0F0F
    assert maj(x, x, 0xFFFFFFFF) == x
    assert maj(x, 0, x) == x
    assert maj(0xFF00FF00, 0xF0F0F0F0, 0x00000000) == 0xF000F000
    assert maj(MASK32, MASK32, MASK32) == MASK32
    assert maj(0, 0, MASK32) == 0
