"""
Envelope Error Types
"""


class EnvelopeError(Exception):
    """Base class for every failure raised by the envelope package."""


class ConfigurationError(EnvelopeError, ValueError):
    """Secret material is missing or malformed (e.g. key is not 32 bytes)."""


class CryptoBackendError(EnvelopeError):
    """The cipher backend or the random source failed while encrypting."""


class DecryptionError(EnvelopeError, ValueError):
    """Ciphertext could not be decoded or decrypted."""


class FramingError(EnvelopeError, ValueError):
    """Decrypted bytes do not hold a consistent length-prefixed envelope."""


class SignatureMismatchError(EnvelopeError):
    """Callback signature does not match the locally computed one."""


class ReceiveIdMismatchError(EnvelopeError):
    """Envelope was addressed to a different receive id."""

    def __init__(self, expected: str, actual: str):
        super().__init__(f"Receive id mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual
