"""
Block Padding for Envelope Plaintext

Every padding byte carries the padding length, over a 32-byte block. A
block-aligned input still gets a full block, so the trailing byte of a padded
buffer is always in 1..32.
"""

BLOCK_SIZE = 32


def pad(data: bytes) -> bytes:
    """Append 1..BLOCK_SIZE bytes, each valued with the amount appended."""
    amount = BLOCK_SIZE - (len(data) % BLOCK_SIZE)
    return data + bytes([amount]) * amount


def padding_length(data: bytes) -> int:
    """
    Number of trailing bytes `unpad` strips from data.
    Returns 0 when the last byte is outside 1..BLOCK_SIZE (nothing to strip).
    """
    if not data:
        return 0
    amount = data[-1]
    if amount < 1 or amount > BLOCK_SIZE:
        return 0
    return amount


def unpad(data: bytes) -> bytes:
    """Remove padding added by `pad`; out-of-range padding leaves data as-is."""
    amount = padding_length(data)
    if amount == 0:
        return data
    return data[:-amount]
