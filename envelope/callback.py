"""
Callback Verification

Checks an inbound callback before trusting its payload:
1. Signature check (recompute SHA-1 over token/timestamp/nonce/ciphertext)
2. Decryption
3. Receive id check (the envelope must be addressed to us)
"""
import hmac
import logging
import secrets
import time
from typing import Optional

from .codec import EnvelopeCodec
from .errors import ReceiveIdMismatchError, SignatureMismatchError
from .models import DecryptedMessage, ReplyEnvelope

logger = logging.getLogger(__name__)


class CallbackVerifier:
    """Verifies inbound callbacks and builds signed replies for one codec."""

    def __init__(self, codec: EnvelopeCodec):
        self.codec = codec

    def verify_signature(self, msg_signature: str, timestamp: str, nonce: str, ciphertext: str) -> bool:
        """Constant-time comparison against the locally computed signature."""
        expected = self.codec.get_signature(timestamp, nonce, ciphertext)
        return hmac.compare_digest(expected.encode(), msg_signature.lower().encode())

    def decrypt_callback(
        self,
        msg_signature: str,
        timestamp: str,
        nonce: str,
        ciphertext: str
    ) -> DecryptedMessage:
        """Verify signature, decrypt, and check the embedded receive id."""
        if not self.verify_signature(msg_signature, timestamp, nonce, ciphertext):
            logger.warning(f"Callback signature mismatch (timestamp={timestamp}, nonce={nonce})")
            raise SignatureMismatchError("Callback signature does not match")

        decrypted = self.codec.decrypt(ciphertext)

        if decrypted.id != self.codec.receive_id:
            logger.warning("Callback rejected: receive id mismatch")
            logger.debug(f"Callback addressed to {decrypted.id!r}, expected {self.codec.receive_id!r}")
            raise ReceiveIdMismatchError(self.codec.receive_id, decrypted.id)

        return decrypted

    def verify_url(self, msg_signature: str, timestamp: str, nonce: str, echostr: str) -> str:
        """URL verification handshake: returns the decrypted echo string."""
        return self.decrypt_callback(msg_signature, timestamp, nonce, echostr).message

    def build_reply(
        self,
        message: str,
        timestamp: Optional[str] = None,
        nonce: Optional[str] = None
    ) -> ReplyEnvelope:
        """Encrypt and sign a reply message."""
        if timestamp is None:
            timestamp = str(int(time.time()))
        if nonce is None:
            nonce = str(secrets.randbelow(10 ** 10))

        encrypted = self.codec.encrypt(message)
        return ReplyEnvelope(
            encrypt=encrypted,
            msg_signature=self.codec.get_signature(timestamp, nonce, encrypted),
            timestamp=timestamp,
            nonce=nonce
        )
