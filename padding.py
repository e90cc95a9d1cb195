"""Merkle–Damgård message padding shared by SHA-1, SHA-256 and SHA-512.

A message M of L bytes is extended to

    M || 0x80 || 0x00 * k || bit_length(M)

where the bit length is big-endian and fills the last `length_field_bytes`
bytes of the final block, and k is the smallest count making the total a
multiple of the block size. SHA-1 and SHA-256 use 64-byte blocks with an
8-byte length field; SHA-512 uses 128-byte blocks with a 16-byte field.

Only the low 64 bits of the 16-byte field are ever populated here, so every
algorithm rejects messages of 2**64 bits or more.
"""

from __future__ import annotations

from typing import Iterator, List


MAX_MESSAGE_BITS = 1 << 64


class MessageTooLongError(ValueError):
    """Raised when a message's bit length does not fit the length field."""


def _check_geometry(block_size: int, length_field_bytes: int) -> None:
    if block_size <= 0 or block_size % 8 != 0:
        raise ValueError(f"Block size must be a positive multiple of 8 bytes, got {block_size}")
    if length_field_bytes not in (8, 16):
        raise ValueError(f"Length field must be 8 or 16 bytes, got {length_field_bytes}")
    if length_field_bytes + 1 > block_size:
        raise ValueError(
            f"Block size {block_size} cannot hold a {length_field_bytes}-byte length field"
        )


def padded_length(message_length: int, block_size: int = 64, length_field_bytes: int = 8) -> int:
    """Return the padded size in bytes for a message of `message_length` bytes."""
    _check_geometry(block_size, length_field_bytes)

    padlen = block_size - (message_length % block_size)
    # The marker byte plus the length field must fit after the message,
    # otherwise a whole extra block is needed.
    if padlen < length_field_bytes + 1:
        padlen += block_size
    return message_length + padlen


def pad_message(message: bytes, block_size: int = 64, length_field_bytes: int = 8) -> bytes:
    """Pad `message` to a multiple of `block_size` bytes.

    Parameters
    ----------
    message : bytes
        Raw message bytes.
    block_size : int
        64 for SHA-1/SHA-256, 128 for SHA-512.
    length_field_bytes : int
        8 for SHA-1/SHA-256, 16 for SHA-512.

    Returns
    -------
    bytes
        The padded message.

    Raises
    ------
    MessageTooLongError
        If the message is 2**64 bits or longer.
    """
    msg_len = len(message)
    ml_bits = msg_len * 8
    if ml_bits >= MAX_MESSAGE_BITS:
        raise MessageTooLongError(
            f"Message of {ml_bits} bits exceeds the supported maximum of 2**64 - 1 bits"
        )

    total = padded_length(msg_len, block_size, length_field_bytes)

    padded = bytearray(total)
    padded[:msg_len] = message
    padded[msg_len] = 0x80
    padded[total - length_field_bytes :] = ml_bits.to_bytes(length_field_bytes, byteorder="big")
    return bytes(padded)


def iter_blocks(padded: bytes, block_size: int = 64) -> Iterator[bytes]:
    """Yield successive `block_size`-byte blocks from a padded message."""
    if len(padded) % block_size != 0:
        raise ValueError(
            f"Padded message length must be a multiple of {block_size} bytes, got {len(padded)}"
        )
    for i in range(0, len(padded), block_size):
        yield padded[i : i + block_size]


def split_into_blocks(padded: bytes, block_size: int = 64) -> List[bytes]:
    """Split a padded message into a list of `block_size`-byte blocks."""
    return list(iter_blocks(padded, block_size))
