"""
Codec - Token Encryption
AES-256-CBC with PKCS#7 padding and a random IV per message.

encrypt() returns a self-describing token "<iv>.<ciphertext>" in the chosen
text encoding. decrypt() needs only the token and the key: the encoding is
recovered from the IV segment (see encoding.detect_encoding).

There is no integrity tag. Tampered or wrong-key input usually fails the
padding check, but that is incidental, not authentication.
"""

import os

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from instance_secret.encoding import (
    EncodingKind,
    decode_text,
    detect_encoding,
    encode_bytes,
    join_token,
    split_token,
)
from instance_secret.errors import DecryptError

IV_SIZE = 16       # AES block size
BLOCK_BITS = 128   # PKCS#7 block size in bits


def _cipher(key: bytes, iv: bytes) -> Cipher:
    # Fresh context per call; nothing is shared between threads.
    return Cipher(algorithms.AES(key), modes.CBC(iv))


def encrypt_bytes(data: bytes, key: bytes, iv: bytes) -> bytes:
    """Pad and encrypt raw bytes. Output length is a multiple of 16."""
    padder = padding.PKCS7(BLOCK_BITS).padder()
    padded = padder.update(data) + padder.finalize()
    encryptor = _cipher(key, iv).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def decrypt_bytes(ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
    """Decrypt and unpad raw bytes. Raises ValueError on bad sizes or padding."""
    decryptor = _cipher(key, iv).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()
    unpadder = padding.PKCS7(BLOCK_BITS).unpadder()
    return unpadder.update(padded) + unpadder.finalize()


def encrypt(plaintext: str, key: bytes, fmt: EncodingKind | str = EncodingKind.HEX) -> str:
    """
    Encrypt a string into a token.

    Args:
        plaintext: Any string. Encrypted as UTF-8.
        key: 32-byte key from keys.derive_key.
        fmt: Text encoding for both token segments.

    Returns:
        "<iv>.<ciphertext>", both segments encoded with fmt.
    """
    kind = EncodingKind.parse(fmt)
    iv = os.urandom(IV_SIZE)
    ciphertext = encrypt_bytes(plaintext.encode("utf-8"), key, iv)
    return join_token(encode_bytes(iv, kind), encode_bytes(ciphertext, kind))


def decrypt(token: str, key: bytes) -> str:
    """
    Decrypt a token produced by encrypt().

    Raises:
        FormatError: Bad separator, or the IV encoding can't be detected.
        DecryptError: Anything that goes wrong after detection: undecodable
            segments, IV of the wrong size, wrong key, bad padding, or
            plaintext that isn't valid UTF-8.
    """
    iv_text, cipher_text = split_token(token)
    kind = detect_encoding(iv_text)

    try:
        iv = decode_text(iv_text, kind)
        ciphertext = decode_text(cipher_text, kind)
        plaintext = decrypt_bytes(ciphertext, key, iv)
        return plaintext.decode("utf-8")
    except ValueError as e:
        # binascii.Error and UnicodeDecodeError are ValueErrors too
        raise DecryptError(f"Decryption failed: {e}") from e
