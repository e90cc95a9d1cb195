"""Command-line front end for the SHA-1 / SHA-256 / SHA-512 engines.

Usage:
    python sha_cli.py "message"
    python sha_cli.py -a sha1 "message"
    python sha_cli.py -a sha512 -f path/to/file
    python sha_cli.py -v "abc"      # log every round at DEBUG level

Without `-f`, the single argument is interpreted as a UTF-8 string and
hashed. With `-f`, the raw bytes of the named file are hashed. The resulting
hex digest is printed to stdout.
"""

from __future__ import annotations

import argparse
import logging
import sys

from sha import ALGORITHMS, get_algorithm, log_trace


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Print the SHA-1, SHA-256 or SHA-512 hex digest of a message or file"
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
        "-v",
        "--verbose",
        action="store_true",
        help="Log the working state after every compression round",
    )
    return parser


def read_input(message: str | None, filename: str | None) -> bytes:
    """Return the bytes to hash from either a message or a file."""
    if filename is not None:
        with open(filename, "rb") as f:
            return f.read()
    return message.encode("utf-8")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if (args.message is None) == (args.file is None):
        sys.stderr.write("Error: give either a message or -f path/to/file\n")
        parser.print_usage(sys.stderr)
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(levelname)s - %(message)s")

    try:
        data = read_input(args.message, args.file)
    except OSError as e:
        sys.stderr.write(f"Error reading file '{args.file}': {e}\n")
        return 1

    algorithm = get_algorithm(args.algorithm)
    trace = log_trace if args.verbose else None
    try:
        digest_hex = algorithm.hexdigest(data, trace=trace)
    except ValueError as e:
        sys.stderr.write(f"Error: {e}\n")
        return 1

    print(digest_hex)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
