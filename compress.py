"""SHA-256 compression core.

This module holds everything that operates on a single 512-bit block:

- the message schedule, expanding 16 big-endian block words to `w[0..63]`;
- one round of the compression loop (`compression`);
- the full 64-round loop (`compress64`);
- `compress_block`, which runs the above and folds the result back into the
  running hash state (the feed-forward step).

One round, given working state words `(a, b, c, d, e, f, g, h)`, the round
constant `k` and the schedule word `w`:

    S1    = (e >>> 6) ^ (e >>> 11) ^ (e >>> 25)
    ch    = (e & f) ^ (~e & g)
    temp1 = h + S1 + ch + k + w

    S0    = (a >>> 2) ^ (a >>> 13) ^ (a >>> 22)
    maj   = (a & b) ^ (a & c) ^ (b & c)
    temp2 = S0 + maj

    (a, b, c, d, e, f, g, h) <- (temp1 + temp2, a, b, c, d + temp1, e, f, g)

All additions are performed modulo 2**32, as in FIPS 180-4.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple


MASK32 = 0xFFFFFFFF

BLOCK_SIZE = 64

State = Tuple[int, int, int, int, int, int, int, int]

# Standard SHA-256 round constants k[0..63] from FIPS 180-4 (first 32 bits of
# the fractional parts of the cube roots of the first 64 primes).
K_VALUES: Tuple[int, ...] = (
    0x428A2F98, 0x71374491, 0xB5C0FBCF, 0xE9B5DBA5,
    0x3956C25B, 0x59F111F1, 0x923F82A4, 0xAB1C5ED5,
    0xD807AA98, 0x12835B01, 0x243185BE, 0x550C7DC3,
    0x72BE5D74, 0x80DEB1FE, 0x9BDC06A7, 0xC19BF174,
    0xE49B69C1, 0xEFBE4786, 0x0FC19DC6, 0x240CA1CC,
    0x2DE92C6F, 0x4A7484AA, 0x5CB0A9DC, 0x76F988DA,
    0x983E5152, 0xA831C66D, 0xB00327C8, 0xBF597FC7,
    0xC6E00BF3, 0xD5A79147, 0x06CA6351, 0x14292967,
    0x27B70A85, 0x2E1B2138, 0x4D2C6DFC, 0x53380D13,
    0x650A7354, 0x766A0ABB, 0x81C2C92E, 0x92722C85,
    0xA2BFE8A1, 0xA81A664B, 0xC24B8B70, 0xC76C51A3,
    0xD192E819, 0xD6990624, 0xF40E3585, 0x106AA070,
    0x19A4C116, 0x1E376C08, 0x2748774C, 0x34B0BCB5,
    0x391C0CB3, 0x4ED8AA4A, 0x5B9CCA4F, 0x682E6FF3,
    0x748F82EE, 0x78A5636F, 0x84C87814, 0x8CC70208,
    0x90BEFFFA, 0xA4506CEB, 0xBEF9A3F7, 0xC67178F2,
)


def _rotr(x: int, n: int) -> int:
    """Right-rotate a 32-bit word `x` by `n` bits."""
    x &= MASK32
    return ((x >> n) | (x << (32 - n))) & MASK32


def _shr(x: int, n: int) -> int:
    """Right-shift a 32-bit word `x` by `n` bits."""
    return (x & MASK32) >> n


def _small_sigma0(x: int) -> int:
    """SHA-256 function σ0 used in the message schedule."""
    return _rotr(x, 7) ^ _rotr(x, 18) ^ _shr(x, 3)


def _small_sigma1(x: int) -> int:
    """SHA-256 function σ1 used in the message schedule."""
    return _rotr(x, 17) ^ _rotr(x, 19) ^ _shr(x, 10)


def _big_sigma0(x: int) -> int:
    return _rotr(x, 2) ^ _rotr(x, 13) ^ _rotr(x, 22)


def _big_sigma1(x: int) -> int:
    return _rotr(x, 6) ^ _rotr(x, 11) ^ _rotr(x, 25)


def _ch(x: int, y: int, z: int) -> int:
    return (x & y) ^ ((~x) & z)


def _maj(x: int, y: int, z: int) -> int:
    return (x & y) ^ (x & z) ^ (y & z)


def expand_message_schedule(w: Sequence[int], rounds: int = 64) -> List[int]:
    """Expand an initial schedule W[0..15] to W[0..(rounds-1)].

    Only the first 16 words of ``w`` are used. The caller's sequence is left
    untouched; a new list of exactly ``rounds`` 32-bit words is returned.
    """
    if len(w) < 16:
        raise ValueError(
            f"Message schedule must contain at least 16 words, got {len(w)}"
        )

    schedule = [word & MASK32 for word in w[:16]] + [0] * max(0, rounds - 16)

    for i in range(16, rounds):
        s0 = _small_sigma0(schedule[i - 15])
        s1 = _small_sigma1(schedule[i - 2])
        schedule[i] = (s1 + schedule[i - 7] + s0 + schedule[i - 16]) & MASK32

    return schedule[:rounds]


def build_message_schedule(block) -> List[int]:
    """Given a 64-byte block, build the 64-word message schedule w[0..63].

    ``block`` may be any bytes-like object (``bytes``, ``bytearray``,
    ``memoryview``); its 16 words are read big-endian.
    """
    if len(block) != BLOCK_SIZE:
        raise ValueError(f"Expected {BLOCK_SIZE}-byte block, got {len(block)}")

    w = [int.from_bytes(block[4 * i : 4 * (i + 1)], byteorder="big") for i in range(16)]
    return expand_message_schedule(w)


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
) -> State:
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
        Updated working state after one round, all reduced modulo 2**32.
    """
    temp1 = (h + _big_sigma1(e) + _ch(e, f, g) + k + w) & MASK32
    temp2 = (_big_sigma0(a) + _maj(a, b, c)) & MASK32

    return (
        (temp1 + temp2) & MASK32,
        a,
        b,
        c,
        (d + temp1) & MASK32,
        e,
        f,
        g,
    )


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
) -> State:
    """Run the full 64-round SHA-256 compression loop for one block.

    Parameters
    ----------
    a, b, c, d, e, f, g, h : int
        Initial working state words (the current hash value).
    ws : Sequence[int]
        The 64-word message schedule `w[0..63]` for this block.

    Returns
    -------
    (a, b, c, d, e, f, g, h) : tuple[int, ...]
        Final working state words after 64 rounds. These are *not* yet added
        into the hash state; see `compress_block`.
    """
    if len(ws) != 64:
        raise ValueError(f"compress64 expects 64 message schedule words, got {len(ws)}")

    v = (a, b, c, d, e, f, g, h)
    for i in range(64):
        v = compression(*v, ws[i], K_VALUES[i])

    return v


def compress_block(state: Sequence[int], block) -> State:
    """Compress one 64-byte block into the 8-word hash state.

    Returns the updated state ``H[i] + v[i] mod 2**32`` where ``v`` is the
    working state left by the 64 rounds.
    """
    if len(state) != 8:
        raise ValueError(f"Hash state must have 8 words, got {len(state)}")

    ws = build_message_schedule(block)
    v = compress64(*state, ws)

    h0, h1, h2, h3, h4, h5, h6, h7 = state
    return (
        (h0 + v[0]) & MASK32,
        (h1 + v[1]) & MASK32,
        (h2 + v[2]) & MASK32,
        (h3 + v[3]) & MASK32,
        (h4 + v[4]) & MASK32,
        (h5 + v[5]) & MASK32,
        (h6 + v[6]) & MASK32,
        (h7 + v[7]) & MASK32,
    )
