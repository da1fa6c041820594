"""Streaming SHA-256 built on `compress_block` from `compress.py`.

`Sha256Hasher` accepts input in arbitrary chunks and can produce the digest
of everything seen so far at any time:

    hasher = Sha256Hasher()
    hasher.process(b"ab")
    hasher.process(b"c")
    hasher.hexdigest()   # 'ba7816bf...'
    hasher.process(b"def")
    hasher.hexdigest()   # digest of b"abcdef"

`digest()` finalises a copy of the hasher, so the live instance keeps
accumulating.
"""

from __future__ import annotations

from typing import BinaryIO, Optional

from compress import BLOCK_SIZE, State, compress_block


# Initial hash values (first 32 bits of the fractional parts of the
# square roots of the first 8 primes 2..19), as per FIPS 180-4.
_H0: State = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

DIGEST_SIZE = 32

MASK64 = 0xFFFFFFFFFFFFFFFF

# Largest buffered count whose footer (0x80 + 8 length bytes) still fits in
# the current block.
_ONE_BLOCK_FOOTER_LIMIT = BLOCK_SIZE - 9

DEFAULT_CHUNK_SIZE = 64 * 1024


def _as_byte_view(data) -> memoryview:
    """Return a flat unsigned-byte view of a bytes-like object."""
    if isinstance(data, str):
        raise TypeError("Strings must be encoded before hashing")
    view = memoryview(data)
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view


class Sha256Hasher:
    """Incremental SHA-256 hasher.

    The complete mutable state is the 8-word hash state, a partial block
    buffer of up to 63 bytes and the total number of bytes processed.
    Instances are not safe for concurrent use; separate instances share
    nothing mutable.
    """

    name = "sha256"
    block_size = BLOCK_SIZE
    digest_size = DIGEST_SIZE

    def __init__(self, data=None) -> None:
        self._buf = bytearray(BLOCK_SIZE)
        self.reset()
        if data is not None:
            self.process(data)

    def reset(self) -> None:
        """Discard all input and return to the initial FIPS 180-4 state."""
        self._h: State = _H0
        self._buf_count = 0
        self._bytes_processed = 0

    @property
    def state(self) -> State:
        return self._h

    @property
    def bytes_processed(self) -> int:
        return self._bytes_processed

    @property
    def buffered_count(self) -> int:
        return self._buf_count

    def process(self, data, length: Optional[int] = None) -> None:
        """Feed bytes into the hasher.

        ``data`` may be any bytes-like object. When ``length`` is given only
        the first ``length`` bytes of ``data`` are consumed. Splitting input
        across several calls gives the same digest as a single call with the
        concatenation.
        """
        view = _as_byte_view(data)
        if length is None:
            length = len(view)
        elif length < 0 or length > len(view):
            raise ValueError(
                f"length must be between 0 and {len(view)}, got {length}"
            )

        self._bytes_processed += length

        pos = 0
        while length:
            if self._buf_count or length < BLOCK_SIZE:
                copy_len = min(BLOCK_SIZE - self._buf_count, length)
                self._buf[self._buf_count : self._buf_count + copy_len] = view[pos : pos + copy_len]
                pos += copy_len
                length -= copy_len
                self._buf_count += copy_len
                if self._buf_count == BLOCK_SIZE:
                    self._h = compress_block(self._h, self._buf)
                    self._buf_count = 0
            else:
                self._h = compress_block(self._h, view[pos : pos + BLOCK_SIZE])
                pos += BLOCK_SIZE
                length -= BLOCK_SIZE

    def update(self, data) -> None:
        """hashlib-style alias for `process`."""
        self.process(data)

    def copy(self) -> "Sha256Hasher":
        """Return an independent hasher with identical state."""
        clone = self.__class__.__new__(self.__class__)
        clone._h = self._h
        clone._buf = bytearray(self._buf)
        clone._buf_count = self._buf_count
        clone._bytes_processed = self._bytes_processed
        return clone

    def _footer(self) -> bytes:
        """Build the padding footer for the bytes processed so far."""
        if self._buf_count <= _ONE_BLOCK_FOOTER_LIMIT:
            footer_len = BLOCK_SIZE - self._buf_count
        else:
            footer_len = 2 * BLOCK_SIZE - self._buf_count

        footer = bytearray(footer_len)
        footer[0] = 0x80
        bit_length = (self._bytes_processed * 8) & MASK64
        footer[-8:] = bit_length.to_bytes(8, byteorder="big")
        return bytes(footer)

    def digest(self) -> bytes:
        """Return the 32-byte digest of all input so far.

        The live hasher is not modified: padding is applied to a copy.
        """
        tmp = self.copy()
        tmp.process(self._footer())
        return b"".join(word.to_bytes(4, byteorder="big") for word in tmp._h)

    def hexdigest(self) -> str:
        return self.digest().hex()

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} bytes_processed={self._bytes_processed} "
            f"buffered={self._buf_count}>"
        )


def sha256(data) -> bytes:
    """Compute the SHA-256 digest of `data` in one call."""
    return Sha256Hasher(data).digest()


def sha256_hex(data) -> str:
    """Convenience helper to return the SHA-256 hex digest of `data`."""
    return sha256(data).hex()


def hash_stream(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Sha256Hasher:
    """Hash a binary stream by reading it in `chunk_size` pieces.

    Returns the hasher so callers can take the digest in whichever form they
    need.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    hasher = Sha256Hasher()
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        hasher.process(chunk)
    return hasher


def parse_digest(text: str) -> bytes:
    """Parse a 64-character hex string into a 32-byte digest.

    Surrounding whitespace and upper-case digits are accepted.
    """
    cleaned = text.strip()
    if len(cleaned) != 2 * DIGEST_SIZE:
        raise ValueError(
            f"SHA-256 digest must be {2 * DIGEST_SIZE} hex characters, got {len(cleaned)}"
        )
    try:
        digest = bytes.fromhex(cleaned)
    except ValueError as e:
        raise ValueError(f"Invalid hex digest {cleaned!r}: {e}") from e
    # fromhex() skips embedded whitespace, so the decoded size can still be short.
    if len(digest) != DIGEST_SIZE:
        raise ValueError(
            f"SHA-256 digest must decode to {DIGEST_SIZE} bytes, got {len(digest)}"
        )
    return digest
