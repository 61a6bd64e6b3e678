"""JSON codec used to deep-copy flow data.

All data crossing an engine boundary goes through encode/decode, so no live
object reference survives a step. Values that JSON cannot represent fail
loudly instead of being coerced: that includes mapping keys that are not
strings, which ``json`` would otherwise turn into strings. Key order is kept
unless the codec is built with ``sort_keys=True``.
"""

import json
from collections.abc import Mapping
from typing import Any

from pyflows.core.errors import DataCodecError

__all__ = ["JsonCodec", "DEFAULT_CODEC", "deep_copy"]


def _reject_non_string_keys(value: Any) -> None:
    if isinstance(value, Mapping):
        for key, item in value.items():
            if not isinstance(key, str):
                raise DataCodecError(
                    f"data is not serializable: keys must be strings, got {key!r}"
                )
            _reject_non_string_keys(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _reject_non_string_keys(item)


class JsonCodec:
    """Serialize flow data to JSON text and back.

    Usage:
        ```python
        codec = JsonCodec()
        text = codec.encode({"b": 1, "a": [1, 2]})  # '{"b": 1, "a": [1, 2]}'
        copy = codec.copy({"a": 1})
        ```
    """

    def __init__(self, sort_keys: bool = False):
        self.sort_keys = sort_keys

    def encode(self, value: Any) -> str:
        try:
            text = json.dumps(value, sort_keys=self.sort_keys, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise DataCodecError(f"data is not serializable: {e}") from e
        # dumps has already rejected cycles, so the walk terminates
        _reject_non_string_keys(value)
        return text

    def decode(self, text: str) -> Any:
        try:
            return json.loads(text)
        except ValueError as e:
            raise DataCodecError(f"data could not be decoded: {e}") from e

    def copy(self, value: Any) -> Any:
        """Deep-copy value through its textual encoding."""
        return self.decode(self.encode(value))

    def __repr__(self) -> str:
        return f"JsonCodec(sort_keys={self.sort_keys})"


DEFAULT_CODEC = JsonCodec()


def deep_copy(value: Any) -> Any:
    """Deep-copy value with the default codec."""
    return DEFAULT_CODEC.copy(value)
