"""
Errors raised by instance_secret.

Everything derives from InstanceSecretError so callers can tell per-item
failures apart from programming errors.
"""


class InstanceSecretError(Exception):
    """Base class. item_index is filled in by the batch runner."""

    def __init__(self, message: str, item_index: int | None = None):
        super().__init__(message)
        self.item_index = item_index


class ConfigError(InstanceSecretError):
    """The instance secret is missing. Fatal for the whole batch."""


class FormatError(InstanceSecretError):
    """Token has a bad separator or its encoding cannot be detected."""

    def __init__(self, message: str, iv_length: int | None = None, item_index: int | None = None):
        super().__init__(message, item_index=item_index)
        self.iv_length = iv_length


class DecryptError(InstanceSecretError):
    """Decoding, cipher, padding or UTF-8 failure while decrypting."""


class UnknownOperationError(InstanceSecretError):
    def __init__(self, operation, item_index: int | None = None):
        super().__init__(f"Unknown operation: {operation}", item_index=item_index)
        self.operation = operation


class UnknownFormatError(InstanceSecretError):
    def __init__(self, value, item_index: int | None = None):
        super().__init__(
            f"Unknown output format: {value}. Expected hex, base64 or base64url",
            item_index=item_index,
        )
        self.value = value


class InvalidInputError(InstanceSecretError):
    """The value to encrypt or decrypt is not a string."""

    def __init__(self, value, item_index: int | None = None):
        super().__init__(
            f"Input must be a string, got {type(value).__name__}",
            item_index=item_index,
        )
        self.value = value
