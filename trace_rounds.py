"""Record the working state after every compression round of a message.

For one message, this script:
1. Hashes it with the chosen algorithm while tracing every round
2. Records the working registers after each round and the chaining value
   after each block's feed-forward
3. Saves the results to <output-dir>/<algorithm>.yaml or <algorithm>.db

Usage:
    python trace_rounds.py "abc"
    python trace_rounds.py -a sha1 "abc"
    python trace_rounds.py -a sha512 -f path/to/file --format sqlite

SQLite Schema:
    - metadata: algorithm, message_hex, message_length_bytes, block_count, digest_hex
    - blocks: block_index, chaining_value
    - rounds: block_index, round_index, a, b, c, d, e, f, g, h
      (f, g, h are NULL for SHA-1)
"""

from __future__ import annotations

import argparse
import os
import sqlite3
import sys
from typing import Dict, List, Tuple

import yaml

from compress import update_hash_state
from sha import ALGORITHMS, Algorithm, RoundTrace, get_algorithm


REGISTER_NAMES = "abcdefgh"


def collect_round_states(algorithm: Algorithm, data: bytes) -> Tuple[bytes, List[Dict]]:
    """Hash `data` and return (digest, per-block records).

    Each record holds the block index, the list of per-round working states
    and the chaining value after the block's feed-forward.
    """
    blocks: List[Dict] = []

    def on_round(event: RoundTrace) -> None:
        if event.block_index == len(blocks):
            blocks.append({"block_index": event.block_index, "rounds": []})
        blocks[event.block_index]["rounds"].append(event.state)

    digest = algorithm.hash(data, trace=on_round)

    # Replay the feed-forward so every block also carries its chaining value.
    state = algorithm.initial_state
    for block in blocks:
        state = update_hash_state(state, block["rounds"][-1], algorithm.word_bits)
        block["chaining_value"] = state

    return digest, blocks


def _hex_word(word: int, algorithm: Algorithm) -> str:
    return f"{word:0{algorithm.word_bits // 4}x}"


def write_yaml(path: str, algorithm: Algorithm, data: bytes, digest: bytes, blocks: List[Dict]) -> None:
    """Save traced rounds to a YAML file."""
    results: Dict = {
        "algorithm": algorithm.name,
        "message_hex": data.hex(),
        "message_length_bytes": len(data),
        "digest_hex": digest.hex(),
        "blocks": [],
    }

    for block in blocks:
        results["blocks"].append(
            {
                "block_index": block["block_index"],
                "rounds": [
                    {
                        name: _hex_word(word, algorithm)
                        for name, word in zip(REGISTER_NAMES, state)
                    }
                    for state in block["rounds"]
                ],
                "chaining_value": [_hex_word(w, algorithm) for w in block["chaining_value"]],
            }
        )

    with open(path, "w") as f:
        yaml.dump(results, f, default_flow_style=False, sort_keys=False)


def write_sqlite(path: str, algorithm: Algorithm, data: bytes, digest: bytes, blocks: List[Dict]) -> None:
    """Save traced rounds to a SQLite database, replacing any existing file."""
    if os.path.exists(path):
        os.remove(path)

    conn = sqlite3.connect(path)
    try:
        cursor = conn.cursor()
        cursor.executescript("""
            CREATE TABLE metadata (
                algorithm TEXT NOT NULL,
                message_hex TEXT NOT NULL,
                message_length_bytes INTEGER NOT NULL,
                block_count INTEGER NOT NULL,
                digest_hex TEXT NOT NULL
            );

            CREATE TABLE blocks (
                block_index INTEGER PRIMARY KEY,
                chaining_value TEXT NOT NULL
            );

            CREATE TABLE rounds (
                block_index INTEGER NOT NULL,
                round_index INTEGER NOT NULL,
                a TEXT NOT NULL,
                b TEXT NOT NULL,
                c TEXT NOT NULL,
                d TEXT NOT NULL,
                e TEXT NOT NULL,
                f TEXT,
                g TEXT,
                h TEXT,
                FOREIGN KEY (block_index) REFERENCES blocks(block_index)
            );

            CREATE INDEX idx_rounds_block ON rounds(block_index);
        """)

        cursor.execute(
            "INSERT INTO metadata VALUES (?, ?, ?, ?, ?)",
            (algorithm.name, data.hex(), len(data), len(blocks), digest.hex()),
        )

        block_rows = []
        round_rows = []
        for block in blocks:
            block_index = block["block_index"]
            block_rows.append(
                (block_index, " ".join(_hex_word(w, algorithm) for w in block["chaining_value"]))
            )
            for round_index, state in enumerate(block["rounds"]):
                registers = [_hex_word(w, algorithm) for w in state]
                registers += [None] * (8 - len(registers))
                round_rows.append((block_index, round_index, *registers))

        cursor.executemany("INSERT INTO blocks VALUES (?, ?)", block_rows)
        cursor.executemany("INSERT INTO rounds VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)", round_rows)
        conn.commit()
    finally:
        conn.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Record the working state after every compression round"
    )
    parser.add_argument(
        "message",
        nargs="?",
        help="Message to hash (UTF-8 encoded)",
    )
    parser.add_argument(
        "-f",
        "--file",
        help="Hash the raw bytes of this file instead of a message",
    )
    parser.add_argument(
        "-a",
        "--algorithm",
        choices=sorted(ALGORITHMS),
        default="sha256",
        help="Hash algorithm (default: sha256)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="data/trace",
        help="Output directory (default: data/trace)",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["yaml", "sqlite"],
        default="yaml",
        help="Output format: yaml or sqlite (default: yaml)",
    )
    args = parser.parse_args(argv)

    if (args.message is None) == (args.file is None):
        print("ERROR: give either a message or -f path/to/file")
        return 1

    if args.file is not None:
        try:
            with open(args.file, "rb") as f:
                data = f.read()
        except OSError as e:
            sys.stderr.write(f"Error reading file '{args.file}': {e}\n")
            return 1
    else:
        data = args.message.encode("utf-8")

    algorithm = get_algorithm(args.algorithm)
    print(f"Algorithm: {algorithm.name}")
    print(f"Message length: {len(data):,} bytes")

    digest, blocks = collect_round_states(algorithm, data)
    print(f"Blocks: {len(blocks):,} ({len(blocks) * algorithm.rounds:,} rounds)")

    os.makedirs(args.output_dir, exist_ok=True)
    if args.format == "sqlite":
        output_path = os.path.join(args.output_dir, f"{algorithm.name}.db")
        write_sqlite(output_path, algorithm, data, digest, blocks)
    else:
        output_path = os.path.join(args.output_dir, f"{algorithm.name}.yaml")
        write_yaml(output_path, algorithm, data, digest, blocks)

    print(f"Done! Saved round trace to {output_path}")
    print(f"Digest: {digest.hex()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
