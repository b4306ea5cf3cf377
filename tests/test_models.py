"""
Tests for configuration and message models
"""
import pytest
from pydantic import ValidationError

from envelope.errors import ConfigurationError
from envelope.models import DecryptedMessage, EnvelopeConfig


def test_config_from_env(zero_key: str):
    environ = {
        "ENVELOPE_TOKEN": "t",
        "ENVELOPE_AES_KEY": zero_key,
        "ENVELOPE_RECEIVE_ID": "corp1",
    }
    config = EnvelopeConfig.from_env(environ=environ)

    assert config.token == "t"
    assert config.encoding_aes_key == zero_key
    assert config.receive_id == "corp1"


def test_config_from_env_custom_prefix():
    environ = {"WX_TOKEN": "a", "WX_AES_KEY": "b", "WX_RECEIVE_ID": "c"}
    config = EnvelopeConfig.from_env(prefix="WX_", environ=environ)
    assert (config.token, config.encoding_aes_key, config.receive_id) == ("a", "b", "c")


def test_config_from_process_environment(monkeypatch, zero_key: str):
    monkeypatch.setenv("ENVELOPE_TOKEN", "t")
    monkeypatch.setenv("ENVELOPE_AES_KEY", zero_key)
    monkeypatch.setenv("ENVELOPE_RECEIVE_ID", "corp1")

    assert EnvelopeConfig.from_env().receive_id == "corp1"


def test_config_from_env_reports_missing_variables():
    with pytest.raises(ConfigurationError) as exc_info:
        EnvelopeConfig.from_env(environ={"ENVELOPE_TOKEN": "t"})

    assert "ENVELOPE_AES_KEY" in str(exc_info.value)
    assert "ENVELOPE_RECEIVE_ID" in str(exc_info.value)
    assert "ENVELOPE_TOKEN" not in str(exc_info.value)


def test_models_are_frozen(zero_key: str):
    message = DecryptedMessage(message="hello", id="corp1")
    with pytest.raises(ValidationError):
        message.message = "changed"

    config = EnvelopeConfig(token="t", encoding_aes_key=zero_key, receive_id="corp1")
    with pytest.raises(ValidationError):
        config.token = "other"
