"""
Callback Envelope Encryption

Wire format of an envelope before padding and encryption:

    random(16) || body_length(4, big-endian) || body || receive_id

The padded envelope is encrypted with AES-256-CBC. The IV is the first
16 bytes of the key, and the ciphertext travels as base64 text.
"""
import base64
import binascii
import hashlib
import logging
import os
import struct
from dataclasses import dataclass, field
from typing import Optional

from cryptography.exceptions import InternalError, UnsupportedAlgorithm
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import ConfigurationError, CryptoBackendError, DecryptionError, FramingError
from .models import DecryptedMessage, EnvelopeConfig
from .padding import BLOCK_SIZE, pad, unpad

logger = logging.getLogger(__name__)

KEY_SIZE = 32
IV_SIZE = 16
RANDOM_SIZE = 16
LENGTH_SIZE = 4
HEADER_SIZE = RANDOM_SIZE + LENGTH_SIZE


def generate_encoding_aes_key() -> str:
    """Generate a fresh key in the 43-character unpadded base64 form."""
    return base64.b64encode(os.urandom(KEY_SIZE)).decode().rstrip("=")


def build_envelope(body: bytes, receive_id: str, random: Optional[bytes] = None,
                   length: Optional[int] = None) -> bytes:
    """
    Frame body bytes into an unpadded envelope.
    `length` overrides the length field; it defaults to len(body).
    """
    if random is None:
        try:
            random = os.urandom(RANDOM_SIZE)
        except (OSError, NotImplementedError) as e:
            logger.error(f"Random source failed: {e}")
            raise CryptoBackendError("Random source unavailable") from e
    if len(random) != RANDOM_SIZE:
        raise ValueError(f"Random prefix must be {RANDOM_SIZE} bytes, got {len(random)}")

    if length is None:
        length = len(body)
    return random + struct.pack(">I", length) + body + receive_id.encode("ascii")


def parse_envelope(data: bytes) -> DecryptedMessage:
    """Split an unpadded envelope into message and receive id."""
    if len(data) < HEADER_SIZE:
        raise FramingError(f"Envelope too short: {len(data)} bytes, need at least {HEADER_SIZE}")

    (length,) = struct.unpack(">I", data[RANDOM_SIZE:HEADER_SIZE])
    available = len(data) - HEADER_SIZE
    if length > available:
        raise FramingError(f"Declared body length {length} exceeds the {available} bytes available")

    body = data[HEADER_SIZE:HEADER_SIZE + length]
    tail = data[HEADER_SIZE + length:]
    try:
        message = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FramingError(f"Message body is not valid UTF-8: {e}") from e
    try:
        receive_id = tail.decode("ascii")
    except UnicodeDecodeError as e:
        raise FramingError(f"Receive id is not valid ASCII: {e}") from e

    return DecryptedMessage(message=message, id=receive_id)


@dataclass(frozen=True)
class EnvelopeCodec:
    """
    Signs, encrypts and decrypts callback envelopes for one receiver.
    Immutable after construction, so one instance can be shared freely.
    """
    token: str
    encoding_aes_key: str = field(repr=False)
    receive_id: str
    _key: bytes = field(init=False, repr=False)
    _iv: bytes = field(init=False, repr=False)

    def __post_init__(self):
        # Trailing "=" lets the unpadded 43-character form decode.
        try:
            key = base64.b64decode(self.encoding_aes_key + "=")
        except (binascii.Error, ValueError) as e:
            raise ConfigurationError(f"encoding_aes_key is not valid base64: {e}") from e
        if len(key) != KEY_SIZE:
            raise ConfigurationError(
                f"encoding_aes_key must decode to {KEY_SIZE} bytes, got {len(key)}"
            )
        if not self.receive_id.isascii():
            raise ConfigurationError("receive_id must be ASCII")

        object.__setattr__(self, "_key", key)
        object.__setattr__(self, "_iv", key[:IV_SIZE])

    @classmethod
    def from_config(cls, config: EnvelopeConfig) -> 'EnvelopeCodec':
        return cls(config.token, config.encoding_aes_key, config.receive_id)

    def _cipher(self) -> Cipher:
        return Cipher(algorithms.AES(self._key), modes.CBC(self._iv))

    def get_signature(self, timestamp: str, nonce: str, ciphertext: str) -> str:
        """SHA-1 hex digest of the sorted, concatenated token/timestamp/nonce/ciphertext."""
        parts = sorted([self.token, timestamp, nonce, ciphertext])
        return hashlib.sha1("".join(parts).encode("utf-8")).hexdigest()

    def decrypt(self, ciphertext: str) -> DecryptedMessage:
        """
        Decrypt a base64 envelope.
        The embedded id is returned as-is; comparing it to `receive_id`
        is left to the caller.
        """
        try:
            encrypted = base64.b64decode(ciphertext)
        except (binascii.Error, ValueError) as e:
            logger.warning(f"Rejected ciphertext with invalid base64: {e}")
            raise DecryptionError(f"Ciphertext is not valid base64: {e}") from e

        if not encrypted or len(encrypted) % BLOCK_SIZE != 0:
            logger.warning(f"Rejected ciphertext of {len(encrypted)} bytes")
            raise DecryptionError(
                f"Ciphertext length {len(encrypted)} is not a positive multiple of {BLOCK_SIZE}"
            )

        try:
            decryptor = self._cipher().decryptor()
            padded = decryptor.update(encrypted) + decryptor.finalize()
        except ValueError as e:
            logger.error(f"AES decryption failed: {e}")
            raise DecryptionError(f"Decryption failed: {e}") from e
        except (UnsupportedAlgorithm, InternalError) as e:
            logger.error(f"AES backend failed: {e}")
            raise CryptoBackendError(f"Cipher backend failed: {e}") from e

        return parse_envelope(unpad(padded))

    def encrypt(self, plaintext: str) -> str:
        """Encrypt plaintext into a base64 envelope addressed to `receive_id`."""
        envelope = build_envelope(plaintext.encode("utf-8"), self.receive_id)

        try:
            encryptor = self._cipher().encryptor()
            encrypted = encryptor.update(pad(envelope)) + encryptor.finalize()
        except (ValueError, UnsupportedAlgorithm, InternalError) as e:
            logger.error(f"AES encryption failed: {e}")
            raise CryptoBackendError(f"Encryption failed: {e}") from e

        return base64.b64encode(encrypted).decode()
