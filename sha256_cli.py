"""Command-line front end for the streaming SHA-256 hasher.

Usage:
    python sha256_cli.py "message" ["message" ...]
    python sha256_cli.py -f path/to/file [-f other/file]
    python sha256_cli.py -f -                 # read stdin
    python sha256_cli.py --chunk-size 4096 -f big.iso
    python sha256_cli.py --check              # bundled known-answer vectors
    python sha256_cli.py --check vectors.yaml

Strings are hashed as the bytes they arrived as on the command line (UTF-8 on
most systems; see `os.fsencode`). Files are streamed through `Sha256Hasher`
in `--chunk-size` pieces, so their size is not limited by memory. Each digest is
printed as `<hex>  <name>`, the format used by `sha256sum`.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from known_answers import load_vectors, run_vectors
from sha256_stream import DEFAULT_CHUNK_SIZE, hash_stream, sha256_hex


def _positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sha256-stream",
        description="Compute SHA-256 digests of strings, files or stdin",
    )
    parser.add_argument(
        "messages",
        nargs="*",
        help="Strings to hash (encoded as on the command line)",
    )
    parser.add_argument(
        "-f",
        "--file",
        dest="files",
        action="append",
        default=[],
        metavar="PATH",
        help="File to hash; may be repeated. Use '-' for stdin",
    )
    parser.add_argument(
        "--chunk-size",
        type=_positive_int,
        default=DEFAULT_CHUNK_SIZE,
        help=f"Read size in bytes when streaming files (default: {DEFAULT_CHUNK_SIZE})",
    )
    parser.add_argument(
        "--check",
        nargs="?",
        const="",
        default=None,
        metavar="VECTORS",
        help="Verify known-answer vectors from a YAML file (default: bundled vectors)",
    )
    return parser


def _hash_file(name: str, chunk_size: int) -> str:
    if name == "-":
        return hash_stream(sys.stdin.buffer, chunk_size).hexdigest()
    with open(name, "rb") as f:
        return hash_stream(f, chunk_size).hexdigest()


def _display(text: str) -> str:
    """Make argv text printable; undecodable bytes become U+FFFD."""
    return os.fsencode(text).decode("utf-8", "replace")


def _run_check(path: str, chunk_size: int) -> int:
    source = path or "bundled vectors"
    try:
        vectors = load_vectors(Path(path) if path else None)
    except OSError as e:
        sys.stderr.write(f"Error reading vectors '{source}': {e}\n")
        return 1
    except (ValueError, yaml.YAMLError) as e:
        sys.stderr.write(f"Invalid vector file '{source}': {e}\n")
        return 1

    failures = run_vectors(vectors, chunk_size)
    return 1 if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.check is not None:
        return _run_check(args.check, args.chunk_size)

    if not args.messages and not args.files:
        parser.print_usage(sys.stderr)
        return 1

    status = 0

    for message in args.messages:
        print(f"{sha256_hex(os.fsencode(message))}  {_display(message)}")

    for name in args.files:
        try:
            digest_hex = _hash_file(name, args.chunk_size)
        except OSError as e:
            sys.stderr.write(f"Error reading file '{_display(name)}': {e}\n")
            status = 1
            continue
        print(f"{digest_hex}  {_display(name)}")

    return status


if __name__ == "__main__":
    raise SystemExit(main())
