"""
Shared fixtures for envelope tests
"""
import base64

import pytest

from envelope.codec import EnvelopeCodec

# base64 of 32 zero bytes, without the trailing "="
ZERO_KEY = base64.b64encode(bytes(32)).decode().rstrip("=")


@pytest.fixture
def zero_key() -> str:
    return ZERO_KEY


@pytest.fixture
def codec() -> EnvelopeCodec:
    """Codec with token "t", an all-zero key and receive id "corp1"."""
    return EnvelopeCodec("t", ZERO_KEY, "corp1")
