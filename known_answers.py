"""Known-answer vectors for the streaming SHA-256 hasher.

Vectors are YAML documents of this shape:

    vectors:
      - name: abc
        message: abc
        digest: ba7816bf...
      - name: million-a
        message: a
        repeat: 1000000
        digest: cdc76e5c...

Each entry has a `name`, either `message` (UTF-8 text) or `message_hex`, an
optional `repeat` count and the expected `digest` in hex. The FIPS 180-4 and
NIST CAVS vectors below ship inside this module, so they are available after
any kind of install; `load_vectors(path)` reads the same format from a file.

`run_vectors` hashes each message through `Sha256Hasher`, feeding repeated
messages in chunks so long inputs exercise the streaming path, and prints a
pass/fail line per vector.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, NamedTuple, Optional, Sequence

import yaml

from sha256_stream import DEFAULT_CHUNK_SIZE, Sha256Hasher, parse_digest


BUNDLED_VECTORS_YAML = """\
vectors:
  - name: empty
    message: ""
    digest: e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855

  - name: abc
    message: abc
    digest: ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad

  - name: two-block-448-bit
    message: abcdbcdecdefdefgefghfghighijhijkijkljklmklmnlmnomnopnopq
    digest: 248d6a61d20638b8e5c026930c3e6039a33ce45964ff2167f6ecedd419db06c1

  - name: two-block-896-bit
    message: abcdefghbcdefghicdefghijdefghijkefghijklfghijklmghijklmnhijklmnoijklmnopjklmnopqklmnopqrlmnopqrsmnopqrstnopqrstu
    digest: cf5b16a778af8380036ce59e7b0492370b249b11e8f07a51afac45037afee9d1

  - name: quick-brown-fox
    message: The quick brown fox jumps over the lazy dog
    digest: d7a8fbb307d7809469ca9abcb0082e4f8d5651e46d3cdb762d02d0bf37c9e592

  - name: single-byte-bd
    message_hex: "bd"
    digest: 68325720aabd7c82f30f554b313d0570c95accbb7dc4b5aae11204c08ffe732b

  - name: million-a
    message: a
    repeat: 1000000
    digest: cdc76e5c9914fb9281a1c7e284d73e67f1809a48a497200e046d39ccc7112cd0
"""


class KnownAnswer(NamedTuple):
    name: str
    message: bytes
    repeat: int
    digest: bytes


def _parse_entry(entry, index: int) -> KnownAnswer:
    if not isinstance(entry, dict):
        raise ValueError(f"Vector #{index} must be a mapping, got {type(entry).__name__}")

    name = str(entry.get("name", f"vector-{index}"))

    if "message" in entry and "message_hex" in entry:
        raise ValueError(f"Vector {name!r} has both 'message' and 'message_hex'")
    if "message_hex" in entry:
        try:
            message = bytes.fromhex(str(entry["message_hex"]))
        except ValueError as e:
            raise ValueError(f"Vector {name!r} has invalid message_hex: {e}") from e
    elif "message" in entry:
        message = str(entry["message"]).encode("utf-8")
    else:
        raise ValueError(f"Vector {name!r} needs 'message' or 'message_hex'")

    repeat = entry.get("repeat", 1)
    # YAML booleans load as bool, which is an int subclass.
    if isinstance(repeat, bool) or not isinstance(repeat, int) or repeat < 1:
        raise ValueError(f"Vector {name!r} has invalid repeat {repeat!r}")

    if "digest" not in entry:
        raise ValueError(f"Vector {name!r} is missing 'digest'")
    digest = parse_digest(str(entry["digest"]))

    return KnownAnswer(name, message, repeat, digest)


def parse_vectors(document) -> List[KnownAnswer]:
    """Validate a loaded YAML document and return its vectors."""
    if not isinstance(document, dict) or not isinstance(document.get("vectors"), list):
        raise ValueError("Vector file must contain a top-level 'vectors' list")
    return [_parse_entry(entry, i) for i, entry in enumerate(document["vectors"])]


def load_bundled_vectors() -> List[KnownAnswer]:
    """Return the vectors shipped in `BUNDLED_VECTORS_YAML`."""
    return parse_vectors(yaml.safe_load(BUNDLED_VECTORS_YAML))


def load_vectors(path: Optional[Path] = None) -> List[KnownAnswer]:
    """Load known-answer vectors from a YAML file, or the bundled set if `path` is None."""
    if path is None:
        return load_bundled_vectors()
    with open(path, "r", encoding="utf-8") as f:
        document = yaml.safe_load(f)
    return parse_vectors(document)


def compute_vector(vector: KnownAnswer, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """Hash the (possibly repeated) message of `vector` and return the digest."""
    hasher = Sha256Hasher()
    if not vector.message:
        return hasher.digest()

    # Group repetitions so each process() call carries about chunk_size bytes.
    per_chunk = max(1, chunk_size // len(vector.message))
    remaining = vector.repeat
    chunk = vector.message * per_chunk
    while remaining >= per_chunk:
        hasher.process(chunk)
        remaining -= per_chunk
    if remaining:
        hasher.process(vector.message * remaining)

    return hasher.digest()


def check_vector(vector: KnownAnswer, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bool:
    return compute_vector(vector, chunk_size) == vector.digest


def run_vectors(
    vectors: Sequence[KnownAnswer], chunk_size: int = DEFAULT_CHUNK_SIZE
) -> List[KnownAnswer]:
    """Check every vector, print a line per result, and return the failures."""
    failures: List[KnownAnswer] = []

    for vector in vectors:
        actual = compute_vector(vector, chunk_size)
        if actual == vector.digest:
            print(f"[OK]   {vector.name}")
        else:
            print(f"[FAIL] {vector.name}: expected {vector.digest.hex()}, got {actual.hex()}")
            failures.append(vector)

    passed = len(vectors) - len(failures)
    print(f"\n[SUMMARY] known-answer vectors: {passed} passed, {len(failures)} failed")
    return failures
