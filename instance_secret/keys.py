"""
Keys - Secret Key Material
Turns an operator-supplied secret of any length into a 256-bit AES key.

This is plain padding/truncation, not a KDF. It lets one instance secret
(human-chosen or generated) act as the cipher key without any extra state.
"""

KEY_SIZE = 32     # 256 bits
PAD_BYTE = b"0"   # ASCII '0', not NUL


def derive_key(secret: str) -> bytes:
    """Derive a 32-byte key: UTF-8 bytes right-padded with '0' or truncated."""
    raw = secret.encode("utf-8")
    return raw[:KEY_SIZE].ljust(KEY_SIZE, PAD_BYTE)
