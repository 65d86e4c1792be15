"""
Node - Batch Processing
Runs encrypt/decrypt over a batch of workflow items.

The host hands over a list of items ({"json": {...}}), parameters that may
differ per item, and a failure policy. Each item yields exactly one output
item, in input order. The instance secret is read from the environment once,
before any item is touched.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Sequence

from instance_secret import codec
from instance_secret.encoding import EncodingKind
from instance_secret.errors import (
    ConfigError,
    InstanceSecretError,
    InvalidInputError,
    UnknownOperationError,
)
from instance_secret.keys import derive_key

logger = logging.getLogger(__name__)

SECRET_ENV_VAR = "N8N_ENCRYPTION_KEY"
DEFAULT_OUTPUT_FIELD = "result"


class Operation(Enum):
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"

    @classmethod
    def parse(cls, value) -> "Operation":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownOperationError(value) from None


@dataclass
class NodeParameters:
    """Parameters for one item. output_format only matters when encrypting."""

    operation: Operation | str
    input_field: str
    output_field_name: str = DEFAULT_OUTPUT_FIELD
    keep_original: bool = True
    output_format: EncodingKind | str = EncodingKind.HEX

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "NodeParameters":
        """
        Build parameters from the host's loose mapping.

        Expected keys: operation, inputField, outputFieldName and an optional
        options dict with keepOriginal and outputFormat. keepOriginal is only
        off when explicitly False; an empty outputFormat means hex.
        """
        options = raw.get("options") or {}
        return cls(
            operation=raw.get("operation", Operation.ENCRYPT.value),
            input_field=raw.get("inputField", ""),
            output_field_name=raw.get("outputFieldName") or DEFAULT_OUTPUT_FIELD,
            keep_original=options.get("keepOriginal") is not False,
            output_format=options.get("outputFormat") or EncodingKind.HEX,
        )


ParametersSource = (
    NodeParameters
    | Mapping[str, Any]
    | Callable[[int, dict], NodeParameters | Mapping[str, Any]]
)


@dataclass
class OutputItem:
    json: dict
    paired_item: int
    error: InstanceSecretError | None = field(default=None, repr=False)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        """Host representation: {"json": ..., "pairedItem": index}."""
        return {"json": self.json, "pairedItem": self.paired_item}


def load_secret(environ: Mapping[str, str] | None = None) -> str:
    """Read the instance secret from the environment. Missing or empty is fatal."""
    env = os.environ if environ is None else environ
    secret = env.get(SECRET_ENV_VAR)
    if not secret:
        raise ConfigError(f"{SECRET_ENV_VAR} environment variable is not set")
    return secret


def _resolve(parameters: ParametersSource, index: int, item: dict) -> NodeParameters:
    if callable(parameters):
        parameters = parameters(index, item)
    if isinstance(parameters, NodeParameters):
        return parameters
    return NodeParameters.from_dict(parameters)


class InstanceSecret:
    """
    Encrypts and decrypts item fields with one instance secret.

    The key is derived once in the constructor and never changes, so a
    single instance can be shared across threads.

    Args:
        secret: The instance secret. Any length; see keys.derive_key.
    """

    def __init__(self, secret: str):
        self._key = derive_key(secret)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "InstanceSecret":
        return cls(load_secret(environ))

    def encrypt(self, plaintext: str, fmt: EncodingKind | str = EncodingKind.HEX) -> str:
        return codec.encrypt(plaintext, self._key, fmt)

    def decrypt(self, token: str) -> str:
        return codec.decrypt(token, self._key)

    def run(self, operation: Operation | str, value: str, fmt: EncodingKind | str = EncodingKind.HEX) -> str:
        """Apply one operation to one string."""
        op = Operation.parse(operation)
        if not isinstance(value, str):
            raise InvalidInputError(value)
        if op is Operation.ENCRYPT:
            return self.encrypt(value, fmt)
        if op is Operation.DECRYPT:
            return self.decrypt(value)
        raise UnknownOperationError(op)

    def process_item(self, item: dict, parameters: NodeParameters, index: int = 0) -> OutputItem:
        """
        Process a single item.

        Returns:
            An OutputItem holding the original fields (if keep_original) plus
            the result under output_field_name.

        Raises:
            InstanceSecretError: The operation failed for this item.
        """
        result = self.run(parameters.operation, parameters.input_field, parameters.output_format)

        json = dict(item.get("json") or {}) if parameters.keep_original else {}
        json[parameters.output_field_name] = result
        return OutputItem(json=json, paired_item=index)

    def execute(
        self,
        items: Sequence[dict],
        parameters: ParametersSource,
        continue_on_fail: bool = False,
    ) -> list[OutputItem]:
        """
        Process a batch of items in order.

        Args:
            items: Host items, each {"json": {...}}.
            parameters: NodeParameters, a raw parameter mapping, or a
                callable (index, item) -> either, resolved per item.
            continue_on_fail: If True, a failing item produces
                {"json": {"error": message}} and the batch goes on. If False,
                the first failure is raised with its item_index set.

        Returns:
            One OutputItem per input item, same order.
        """
        logger.debug("Processing %d item(s)", len(items))
        results = []

        for index, item in enumerate(items):
            try:
                params = _resolve(parameters, index, item)
                logger.debug("Item %d: %s", index, getattr(params.operation, "value", params.operation))
                results.append(self.process_item(item, params, index))
            except ConfigError:
                raise
            except InstanceSecretError as e:
                e.item_index = index
                if not continue_on_fail:
                    raise
                logger.warning("Item %d failed: %s", index, type(e).__name__)
                results.append(OutputItem(json={"error": str(e)}, paired_item=index, error=e))

        return results
