"""
Tests for the 32-byte block padding
"""
import pytest

from envelope.padding import BLOCK_SIZE, pad, padding_length, unpad


def test_pad_reaches_block_boundary():
    """Padded output is always a whole number of blocks."""
    for length in range(0, 100):
        padded = pad(b"x" * length)
        assert len(padded) % BLOCK_SIZE == 0
        assert len(padded) > length


def test_pad_block_aligned_input_adds_full_block():
    """An already aligned 32-byte input gets 32 more bytes, all valued 32."""
    data = bytes(range(32))
    padded = pad(data)

    assert len(padded) == 64
    assert padded[:32] == data
    assert padded[32:] == bytes([32]) * 32


def test_pad_empty_input():
    assert pad(b"") == bytes([32]) * 32


def test_pad_bytes_encode_amount():
    padded = pad(b"hello")
    assert padded == b"hello" + bytes([27]) * 27


def test_unpad_reverses_pad_for_all_lengths():
    """unpad(pad(x)) == x for lengths 0..1000, including trailing bytes in 1..32."""
    for length in range(0, 1001):
        data = bytes((i * 7 + 1) % 256 for i in range(length))
        assert unpad(pad(data)) == data, f"round trip failed for length {length}"


@pytest.mark.parametrize("last_byte", [0, 33, 100, 255])
def test_unpad_out_of_range_returns_input_unchanged(last_byte: int):
    """Out-of-range padding bytes mean nothing is stripped."""
    data = b"payload" + bytes([last_byte])
    assert padding_length(data) == 0
    assert unpad(data) == data


def test_unpad_empty_input():
    assert padding_length(b"") == 0
    assert unpad(b"") == b""


def test_unpad_strips_indicated_amount():
    data = b"abcdef" + bytes([3]) * 3
    assert padding_length(data) == 3
    assert unpad(data) == b"abcdef"
