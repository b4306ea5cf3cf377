"""
Envelope Data Models
"""
import os
from typing import ClassVar, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError


class DecryptedMessage(BaseModel):
    """Plaintext body and the receive id embedded in a decrypted envelope."""
    message: str
    id: str

    model_config = ConfigDict(frozen=True)


class EnvelopeConfig(BaseModel):
    """
    Secret material shared with the messaging server.
    Passed explicitly to `EnvelopeCodec.from_config` at the call site.
    """
    token: str = Field(..., description="Token used only for request signatures.")
    encoding_aes_key: str = Field(..., description="Base64 (padding optional) of the 32-byte AES key.")
    receive_id: str = Field(..., description="Tenant identifier embedded in every envelope.")

    model_config = ConfigDict(frozen=True)

    ENV_FIELDS: ClassVar[Dict[str, str]] = {
        "token": "TOKEN",
        "encoding_aes_key": "AES_KEY",
        "receive_id": "RECEIVE_ID",
    }

    @classmethod
    def from_env(cls, prefix: str = "ENVELOPE_", environ: Optional[Mapping[str, str]] = None) -> 'EnvelopeConfig':
        """Load configuration from ENVELOPE_TOKEN, ENVELOPE_AES_KEY and ENVELOPE_RECEIVE_ID."""
        if environ is None:
            environ = os.environ

        values = {}
        missing = []
        for field_name, suffix in cls.ENV_FIELDS.items():
            value = environ.get(f"{prefix}{suffix}")
            if value is None:
                missing.append(f"{prefix}{suffix}")
            else:
                values[field_name] = value

        if missing:
            raise ConfigurationError(f"Missing environment variables: {', '.join(missing)}")
        return cls(**values)


class ReplyEnvelope(BaseModel):
    """Encrypted reply plus the signature fields the server checks."""
    encrypt: str
    msg_signature: str
    timestamp: str
    nonce: str
