"""
Instance Secret
Encrypt and decrypt strings with a single instance-wide secret.

Tokens look like "<iv>.<ciphertext>" and carry everything needed to decrypt
them except the key: AES-256-CBC, a random 16-byte IV per message, and one
of three text encodings (hex, base64, base64url) recognised on the way back
in from the shape of the IV.

Usage:
    from instance_secret import InstanceSecret
    secrets = InstanceSecret.from_env()      # reads N8N_ENCRYPTION_KEY
    token = secrets.encrypt("hello world", "base64url")
    secrets.decrypt(token)
"""

from instance_secret.codec import decrypt, encrypt
from instance_secret.encoding import EncodingKind, detect_encoding
from instance_secret.errors import (
    ConfigError,
    DecryptError,
    FormatError,
    InstanceSecretError,
    InvalidInputError,
    UnknownFormatError,
    UnknownOperationError,
)
from instance_secret.keys import KEY_SIZE, derive_key
from instance_secret.node import InstanceSecret, NodeParameters, Operation, OutputItem, load_secret

__version__ = "0.1.0"
__all__ = [
    "InstanceSecret",
    "NodeParameters",
    "Operation",
    "OutputItem",
    "EncodingKind",
    "encrypt",
    "decrypt",
    "detect_encoding",
    "derive_key",
    "load_secret",
    "KEY_SIZE",
    "InstanceSecretError",
    "InvalidInputError",
    "ConfigError",
    "FormatError",
    "DecryptError",
    "UnknownOperationError",
    "UnknownFormatError",
]
