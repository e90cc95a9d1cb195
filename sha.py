"""SHA-1, SHA-256 and SHA-512 built from the shared Merkle–Damgård pipeline.

This module provides:

- `Algorithm`: a descriptor holding what differs between the three hashes
  (word width, block size, length field, rounds, initial state, schedule
  builder and compression loop) and the pipeline that is common to them.
- `SHA1`, `SHA256`, `SHA512`: the three instances, also reachable through
  `get_algorithm(name)`.
- `sha1(data)`, `sha256(data)`, `sha512(data)`: one-shot digests.

The pipeline is split the same way for every algorithm:

    state, schedules = SHA256.before(data)
    for ws in schedules:
        working = compress64(*state, ws)
        state = update_hash_state(state, working, 32)
    digest = SHA256.after(state)

which is exactly what `Algorithm.hash` does.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional, Sequence, Tuple, Union

from compress import compress64, compress80, sha1_compress80, update_hash_state
from padding import iter_blocks, pad_message
from round_constants import SHA1_H0, SHA256_H0, SHA512_H0
from schedule import sha1_message_schedule, sha256_message_schedule, sha512_message_schedule


logger = logging.getLogger(__name__)

Message = Union[bytes, bytearray, memoryview, str]


class RoundTrace(NamedTuple):
    """Working state observed after one compression round."""

    algorithm: str
    block_index: int
    round_index: int
    state: Tuple[int, ...]


TraceCallback = Callable[[RoundTrace], None]


def to_message_bytes(message: Message) -> bytes:
    """Return `message` as bytes, treating each character of a str as one byte."""
    if isinstance(message, (bytes, bytearray, memoryview)):
        return bytes(message)
    if isinstance(message, str):
        try:
            return message.encode("latin-1")
        except UnicodeEncodeError as e:
            raise ValueError(
                f"Text messages may only contain characters U+0000..U+00FF; "
                f"found {message[e.start]!r} at index {e.start}"
            ) from None
    raise TypeError(f"message must be bytes or str, not {type(message).__name__}")


def finalize_digest(state: Sequence[int], width: int = 32) -> bytes:
    """Convert a final chaining value into the big-endian digest bytes."""
    word_bytes = width // 8
    return b"".join(word.to_bytes(word_bytes, byteorder="big") for word in state)


def log_trace(event: RoundTrace) -> None:
    """Trace callback that logs every round at DEBUG level."""
    digits = get_algorithm(event.algorithm).word_bits // 4
    logger.debug(
        "%s block %d round %2d: %s",
        event.algorithm,
        event.block_index,
        event.round_index,
        " ".join(f"{w:0{digits}x}" for w in event.state),
    )


@dataclass(frozen=True)
class Algorithm:
    """Parameters of one SHA instantiation plus the shared hashing pipeline."""

    name: str
    word_bits: int
    block_size: int
    length_field_bytes: int
    rounds: int
    initial_state: Tuple[int, ...]
    message_schedule: Callable[[bytes], List[int]]
    compress: Callable[..., Tuple[int, ...]]

    @property
    def state_words(self) -> int:
        return len(self.initial_state)

    @property
    def digest_size(self) -> int:
        return self.state_words * self.word_bits // 8

    def pad(self, message: Message) -> bytes:
        """Pad a message to a multiple of this algorithm's block size."""
        return pad_message(to_message_bytes(message), self.block_size, self.length_field_bytes)

    def before(self, message: Message) -> Tuple[Tuple[int, ...], Iterator[List[int]]]:
        """Prepare everything needed before compression.

        Returns the initial hash state and an iterator over the message
        schedules, one per block. Schedules are built lazily, so each one
        exists only while its block is being compressed.
        """
        padded = self.pad(message)
        schedules = (self.message_schedule(block) for block in iter_blocks(padded, self.block_size))
        return self.initial_state, schedules

    def after(self, final_state: Sequence[int]) -> bytes:
        """Finalize the digest from the state left after the last block."""
        if len(final_state) != self.state_words:
            raise ValueError(
                f"{self.name} state must have {self.state_words} words, got {len(final_state)}"
            )
        return finalize_digest(final_state, self.word_bits)

    def hash(self, message: Message, trace: Optional[TraceCallback] = None) -> bytes:
        """Compute the digest of `message`.

        `trace`, when given, is called with a `RoundTrace` after every round
        of every block. It has no effect on the result.
        """
        state, schedules = self.before(message)

        for block_index, ws in enumerate(schedules):
            round_callback = None
            if trace is not None:
                round_callback = self._round_callback(trace, block_index)

            working = self.compress(*state, ws, trace=round_callback)
            state = update_hash_state(state, working, self.word_bits)

            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "%s block %d -> %s",
                    self.name,
                    block_index,
                    " ".join(f"{w:0{self.word_bits // 4}x}" for w in state),
                )

        return self.after(state)

    def hexdigest(self, message: Message, trace: Optional[TraceCallback] = None) -> str:
        return self.hash(message, trace=trace).hex()

    def _round_callback(self, trace: TraceCallback, block_index: int):
        def on_round(round_index: int, working: Tuple[int, ...]) -> None:
            trace(RoundTrace(self.name, block_index, round_index, working))

        return on_round


SHA1 = Algorithm(
    name="sha1",
    word_bits=32,
    block_size=64,
    length_field_bytes=8,
    rounds=80,
    initial_state=SHA1_H0,
    message_schedule=sha1_message_schedule,
    compress=sha1_compress80,
)

SHA256 = Algorithm(
    name="sha256",
    word_bits=32,
    block_size=64,
    length_field_bytes=8,
    rounds=64,
    initial_state=SHA256_H0,
    message_schedule=sha256_message_schedule,
    compress=compress64,
)

SHA512 = Algorithm(
    name="sha512",
    word_bits=64,
    block_size=128,
    length_field_bytes=16,
    rounds=80,
    initial_state=SHA512_H0,
    message_schedule=sha512_message_schedule,
    compress=compress80,
)

ALGORITHMS: Dict[str, Algorithm] = {alg.name: alg for alg in (SHA1, SHA256, SHA512)}


def get_algorithm(name: str) -> Algorithm:
    """Look up an algorithm by name ("sha1", "SHA-256", ...)."""
    key = name.lower().replace("-", "").replace("_", "")
    try:
        return ALGORITHMS[key]
    except KeyError:
        raise ValueError(
            f"Unknown algorithm {name!r}, expected one of {', '.join(ALGORITHMS)}"
        ) from None


def sha1(data: Message, trace: Optional[TraceCallback] = None) -> bytes:
    """Compute the 20-byte SHA-1 digest of `data`."""
    return SHA1.hash(data, trace=trace)


def sha256(data: Message, trace: Optional[TraceCallback] = None) -> bytes:
    """Compute the 32-byte SHA-256 digest of `data`."""
    return SHA256.hash(data, trace=trace)


def sha512(data: Message, trace: Optional[TraceCallback] = None) -> bytes:
    """Compute the 64-byte SHA-512 digest of `data`."""
    return SHA512.hash(data, trace=trace)
