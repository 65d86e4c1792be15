"""
Encoding - Token Text Formats
Maps raw bytes to and from the three text encodings a token may use, and
recognises which one a token was written in.

A token is "<iv>.<ciphertext>". No format tag is stored: the IV is always
16 bytes, so its encoded length and alphabet identify the encoding.

    hex        32 chars  [0-9a-fA-F]
    base64     24 chars  standard alphabet, '=' padded
    base64url  22 chars  [A-Za-z0-9_-], no padding
"""

import base64
import binascii
import re
from enum import Enum

from instance_secret.errors import FormatError, UnknownFormatError

SEPARATOR = "."

HEX_IV_LENGTH = 32
BASE64_IV_LENGTH = 24
BASE64URL_IV_LENGTH = 22

_HEX_CHARS = re.compile(r"[0-9a-fA-F]+")
_BASE64_MARKERS = re.compile(r"[+/=]")
_BASE64URL_CHARS = re.compile(r"[A-Za-z0-9_-]+")


class EncodingKind(Enum):
    HEX = "hex"
    BASE64 = "base64"
    BASE64URL = "base64url"

    @classmethod
    def parse(cls, value) -> "EncodingKind":
        """Accept an EncodingKind or its option string ("hex", "base64", "base64url")."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownFormatError(value) from None


def _repad(text: str) -> str:
    text = text.rstrip("=")
    return text + "=" * (-len(text) % 4)


def encode_bytes(data: bytes, kind: EncodingKind) -> str:
    if kind is EncodingKind.HEX:
        return data.hex()
    if kind is EncodingKind.BASE64:
        return base64.b64encode(data).decode("ascii")
    if kind is EncodingKind.BASE64URL:
        return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")
    raise UnknownFormatError(kind)


def decode_text(text: str, kind: EncodingKind) -> bytes:
    """
    Decode one token segment.

    Raises ValueError (binascii.Error) on characters outside the alphabet,
    odd-length hex or impossible base64 lengths. Missing base64 padding is
    restored first, so unpadded standard base64 decodes too.
    """
    if kind is EncodingKind.HEX:
        return binascii.unhexlify(text)
    if kind is EncodingKind.BASE64:
        return base64.b64decode(_repad(text), validate=True)
    if kind is EncodingKind.BASE64URL:
        standard = text.replace("-", "+").replace("_", "/")
        return base64.b64decode(_repad(standard), validate=True)
    raise UnknownFormatError(kind)


def join_token(iv_text: str, cipher_text: str) -> str:
    return f"{iv_text}{SEPARATOR}{cipher_text}"


def split_token(token: str) -> tuple[str, str]:
    """Split a token into (iv, ciphertext) segments. Exactly one separator is allowed."""
    parts = token.split(SEPARATOR)
    if len(parts) != 2:
        raise FormatError(
            "Invalid encrypted text format: missing or malformed separator. "
            "Expected format: iv.encryptedData"
        )
    return parts[0], parts[1]


def detect_encoding(iv_text: str) -> EncodingKind:
    """
    Work out a token's encoding from its IV segment.

    Rules are tried in order and the first match wins:

    1. 32 hex characters                          -> hex
    2. 24 or 22 characters containing + / or =    -> base64
    3. 22 characters of [A-Za-z0-9_-]             -> base64url

    A 22-character standard base64 IV that happens to contain none of
    + / = is indistinguishable from base64url and lands in rule 3. Both
    decode it to the same bytes, so this is left as is.

    Raises:
        FormatError: No rule matched. Carries the observed IV length.
    """
    length = len(iv_text)

    if length == HEX_IV_LENGTH and _HEX_CHARS.fullmatch(iv_text):
        return EncodingKind.HEX
    if length in (BASE64_IV_LENGTH, BASE64URL_IV_LENGTH) and _BASE64_MARKERS.search(iv_text):
        return EncodingKind.BASE64
    if length == BASE64URL_IV_LENGTH and _BASE64URL_CHARS.fullmatch(iv_text):
        return EncodingKind.BASE64URL

    raise FormatError(
        f"Unable to detect encoding format. IV length: {length}. "
        f"Expected {HEX_IV_LENGTH} (hex), {BASE64_IV_LENGTH} (base64), "
        f"or {BASE64URL_IV_LENGTH} (base64url)",
        iv_length=length,
    )
