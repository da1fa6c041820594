import hashlib
import io
import random

import pytest

from sha256_stream import (
    Sha256Hasher,
    _H0,
    hash_stream,
    parse_digest,
    sha256,
    sha256_hex,
)


EMPTY_HEX = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
ABC_HEX = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"

BOUNDARY_LENGTHS = [0, 1, 55, 56, 57, 63, 64, 65, 119, 120, 127, 128, 129, 200]


def _message(length: int, seed: int = 0) -> bytes:
    rng = random.Random(seed + length)
    return bytes(rng.randrange(256) for _ in range(length))


def test_empty_digest():
    assert Sha256Hasher().hexdigest() == EMPTY_HEX


def test_abc_digest():
    hasher = Sha256Hasher()
    hasher.process(b"abc")
    assert hasher.hexdigest() == ABC_HEX


def test_digest_is_32_bytes():
    digest = Sha256Hasher(b"abc").digest()
    assert isinstance(digest, bytes)
    assert len(digest) == Sha256Hasher.digest_size == 32


@pytest.mark.parametrize("length", BOUNDARY_LENGTHS)
def test_boundary_lengths_match_hashlib(length):
    data = _message(length)
    hasher = Sha256Hasher()
    hasher.process(data)
    assert hasher.digest() == hashlib.sha256(data).digest()


@pytest.mark.parametrize("chunk_size", [1, 3, 7, 63, 64, 65, 100])
def test_chunking_is_transparent(chunk_size):
    data = _message(300, seed=1)
    hasher = Sha256Hasher()
    for i in range(0, len(data), chunk_size):
        hasher.process(data[i : i + chunk_size])
    assert hasher.digest() == sha256(data)


def test_random_partitions_match_single_call():
    rng = random.Random(42)
    data = _message(1000, seed=2)
    expected = hashlib.sha256(data).digest()

    for _ in range(20):
        hasher = Sha256Hasher()
        pos = 0
        while pos < len(data):
            step = rng.randrange(0, 150)
            hasher.process(data[pos : pos + step])
            pos += step
        assert hasher.digest() == expected


def test_digest_twice_is_identical_and_non_destructive():
    hasher = Sha256Hasher(b"hello ")
    first = hasher.digest()
    second = hasher.digest()
    assert first == second

    hasher.process(b"world")
    assert hasher.digest() == hashlib.sha256(b"hello world").digest()


@pytest.mark.parametrize("split", [0, 10, 55, 56, 64, 100])
def test_interleaved_process_and_digest(split):
    data = _message(150, seed=3)
    x, y = data[:split], data[split:]

    hasher = Sha256Hasher()
    hasher.process(x)
    assert hasher.digest() == hashlib.sha256(x).digest()
    hasher.process(y)

    assert hasher.digest() == Sha256Hasher(x + y).digest()


def test_reset_discards_previous_input():
    hasher = Sha256Hasher(_message(77, seed=4))
    hasher.digest()
    hasher.reset()

    assert hasher.bytes_processed == 0
    assert hasher.buffered_count == 0
    assert hasher.state == _H0

    hasher.process(b"abc")
    assert hasher.hexdigest() == ABC_HEX


def test_buffered_count_tracks_bytes_processed():
    rng = random.Random(7)
    hasher = Sha256Hasher()
    total = 0
    for _ in range(50):
        step = rng.randrange(0, 130)
        hasher.process(b"\x5a" * step)
        total += step
        assert hasher.bytes_processed == total
        assert hasher.buffered_count == total % 64


def test_digest_leaves_internal_state_alone():
    hasher = Sha256Hasher(_message(60, seed=5))
    before = (hasher.state, hasher.buffered_count, hasher.bytes_processed)

    hasher.digest()

    assert (hasher.state, hasher.buffered_count, hasher.bytes_processed) == before


@pytest.mark.parametrize("buffered", [0, 3, 55, 56, 63])
def test_footer_layout(buffered):
    hasher = Sha256Hasher(b"\x11" * buffered)
    footer = hasher._footer()

    assert len(footer) == (64 if buffered <= 55 else 128) - buffered
    assert footer[0] == 0x80
    assert footer[1:-8] == b"\x00" * (len(footer) - 9)
    assert footer[-8:] == (buffered * 8).to_bytes(8, "big")


def test_bit_length_wraps_modulo_2_64():
    hasher = Sha256Hasher(b"abc")
    # 2**61 more bytes is exactly 2**64 more bits, and the block position is unchanged.
    hasher._bytes_processed += 2**61

    assert hasher.buffered_count == hasher.bytes_processed % 64
    assert hasher._footer()[-8:] == (24).to_bytes(8, "big")
    assert hasher.copy().hexdigest() == ABC_HEX


def test_zero_length_process_is_a_noop():
    hasher = Sha256Hasher(b"abc")
    hasher.process(b"")
    hasher.process(b"xyz", 0)
    assert hasher.bytes_processed == 3
    assert hasher.hexdigest() == ABC_HEX


def test_length_selects_prefix():
    hasher = Sha256Hasher()
    hasher.process(b"abcdef", 3)
    assert hasher.hexdigest() == ABC_HEX


@pytest.mark.parametrize("length", [-1, 7])
def test_length_out_of_range_is_rejected(length):
    hasher = Sha256Hasher()
    with pytest.raises(ValueError):
        hasher.process(b"abcdef", length)
    assert hasher.bytes_processed == 0


def test_str_input_is_rejected():
    with pytest.raises(TypeError):
        Sha256Hasher().process("abc")


def test_non_buffer_input_is_rejected():
    with pytest.raises(TypeError):
        Sha256Hasher().process(123)


def test_accepts_bytes_like_objects():
    data = _message(130, seed=6)
    expected = hashlib.sha256(data).digest()

    assert Sha256Hasher(bytearray(data)).digest() == expected
    assert Sha256Hasher(memoryview(data)).digest() == expected


def test_update_alias_matches_process():
    a = Sha256Hasher()
    a.update(b"abc")
    assert a.hexdigest() == ABC_HEX


def test_copy_is_independent():
    original = Sha256Hasher(b"ab")
    clone = original.copy()

    clone.process(b"c")
    original.process(b"x")

    assert clone.hexdigest() == ABC_HEX
    assert original.digest() == hashlib.sha256(b"abx").digest()


def test_instances_do_not_share_state():
    a = Sha256Hasher()
    b = Sha256Hasher()
    a.process(b"a" * 70)
    assert b.hexdigest() == EMPTY_HEX


def test_one_shot_helpers():
    assert sha256(b"abc").hex() == ABC_HEX
    assert sha256_hex(b"") == EMPTY_HEX


def test_hash_stream_reads_in_chunks():
    data = _message(1000, seed=8)
    hasher = hash_stream(io.BytesIO(data), chunk_size=37)
    assert hasher.bytes_processed == len(data)
    assert hasher.digest() == hashlib.sha256(data).digest()


def test_hash_stream_rejects_bad_chunk_size():
    with pytest.raises(ValueError):
        hash_stream(io.BytesIO(b""), chunk_size=0)


def test_parse_digest_round_trip():
    assert parse_digest(ABC_HEX) == sha256(b"abc")
    assert parse_digest("  " + ABC_HEX.upper() + "\n") == sha256(b"abc")


@pytest.mark.parametrize(
    "text",
    [
        "",
        "abc",
        ABC_HEX[:-2],
        ABC_HEX + "00",
        "zz" * 32,
        # 64 characters, but the embedded spaces leave only 31 bytes of hex.
        ABC_HEX[:10] + " " + ABC_HEX[10:60] + " " + ABC_HEX[60:62],
    ],
)
def test_parse_digest_rejects_malformed_text(text):
    with pytest.raises(ValueError):
        parse_digest(text)
