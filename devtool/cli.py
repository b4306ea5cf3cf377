"""
CLI tool for signing, encrypting and decrypting callback envelopes.
"""
import argparse
import json
import logging
import os
import sys

from envelope.callback import CallbackVerifier
from envelope.codec import EnvelopeCodec, generate_encoding_aes_key
from envelope.errors import ConfigurationError, EnvelopeError
from envelope.logging_config import setup_logging
from envelope.models import EnvelopeConfig

logger = logging.getLogger(__name__)


def _load_codec(args) -> EnvelopeCodec:
    """Build a codec from command-line secrets, falling back to ENVELOPE_* variables."""
    environ = dict(os.environ)
    overrides = {
        "ENVELOPE_TOKEN": args.token,
        "ENVELOPE_AES_KEY": args.aes_key,
        "ENVELOPE_RECEIVE_ID": args.receive_id,
    }
    for name, value in overrides.items():
        if value is not None:
            environ[name] = value

    config = EnvelopeConfig.from_env(environ=environ)
    logger.debug(f"Loaded secrets for receive id {config.receive_id}")
    return EnvelopeCodec.from_config(config)


def generate_key(args):
    """Prints a fresh 43-character encoding AES key."""
    print(generate_encoding_aes_key())


def sign(args):
    """Prints the signature for a timestamp, nonce and ciphertext."""
    codec = _load_codec(args)
    print(codec.get_signature(args.timestamp, args.nonce, args.ciphertext))


def encrypt(args):
    """Encrypts a message and prints the base64 envelope."""
    codec = _load_codec(args)
    print(codec.encrypt(args.message))


def decrypt(args):
    """Decrypts a base64 envelope and prints message and receive id as JSON."""
    codec = _load_codec(args)
    decrypted = codec.decrypt(args.ciphertext)
    print(json.dumps(decrypted.model_dump(), ensure_ascii=False, indent=2))


def verify(args):
    """Checks a callback signature, decrypts it and checks the receive id."""
    verifier = CallbackVerifier(_load_codec(args))
    decrypted = verifier.decrypt_callback(args.signature, args.timestamp, args.nonce, args.ciphertext)
    print(decrypted.message)


def _add_secret_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--token", help="Signature token (default: $ENVELOPE_TOKEN).")
    parser.add_argument("--aes-key", help="Encoding AES key (default: $ENVELOPE_AES_KEY).")
    parser.add_argument("--receive-id", help="Receive id (default: $ENVELOPE_RECEIVE_ID).")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Callback envelope CLI tool.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", help="Available commands", required=True)

    parser_gen = subparsers.add_parser("generate-key", help="Generate a new encoding AES key.")
    parser_gen.set_defaults(func=generate_key)

    parser_sign = subparsers.add_parser("sign", help="Compute a callback signature.")
    _add_secret_arguments(parser_sign)
    parser_sign.add_argument("--timestamp", required=True)
    parser_sign.add_argument("--nonce", required=True)
    parser_sign.add_argument("--ciphertext", required=True)
    parser_sign.set_defaults(func=sign)

    parser_encrypt = subparsers.add_parser("encrypt", help="Encrypt a message into an envelope.")
    _add_secret_arguments(parser_encrypt)
    parser_encrypt.add_argument("--message", required=True)
    parser_encrypt.set_defaults(func=encrypt)

    parser_decrypt = subparsers.add_parser("decrypt", help="Decrypt an envelope.")
    _add_secret_arguments(parser_decrypt)
    parser_decrypt.add_argument("--ciphertext", required=True)
    parser_decrypt.set_defaults(func=decrypt)

    parser_verify = subparsers.add_parser("verify", help="Verify and decrypt a signed callback.")
    _add_secret_arguments(parser_verify)
    parser_verify.add_argument("--signature", required=True)
    parser_verify.add_argument("--timestamp", required=True)
    parser_verify.add_argument("--nonce", required=True)
    parser_verify.add_argument("--ciphertext", required=True)
    parser_verify.set_defaults(func=verify)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        args.func(args)
    except ConfigurationError as e:
        print(f"Error: Invalid configuration. {e}", file=sys.stderr)
        return 1
    except EnvelopeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
