"""Conversion between JSON-like values and SQLite storage values."""

import math
from collections.abc import Sequence
from typing import Any

from sqlbridge.errors import EncodingError, InvalidParameterKind

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

StorageValue = None | int | float | str | bytes


def to_storage_value(value: Any, position: int | None = None) -> StorageValue:
    """Classify a caller value into Null, Integer, Real or Text.

    Booleans are stored as 0/1. Floats without a fractional part become
    integers. Blobs are output-only, so bytes are rejected like any other
    unsupported kind.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        if not INT64_MIN <= value <= INT64_MAX:
            raise InvalidParameterKind(value, position)
        return value
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and INT64_MIN <= value <= INT64_MAX:
            return int(value)
        return value
    if isinstance(value, str):
        return value
    raise InvalidParameterKind(value, position)


def to_storage_params(params: Sequence[Any] | None) -> list[StorageValue]:
    if params is None:
        return []
    if isinstance(params, (str, bytes)) or not isinstance(params, Sequence):
        raise InvalidParameterKind(params)
    return [to_storage_value(p, i) for i, p in enumerate(params)]


def from_storage_value(value: StorageValue) -> Any:
    """Map a column value 1:1 to a dynamic value.

    The driver already yields int, float, bytes or None. Text is decoded by
    decode_text, installed as the connection's text_factory.
    """
    return value


def decode_text(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise EncodingError(f"Invalid UTF-8 in text column: {exc}") from exc


def to_dynamic(value: Any) -> Any:
    """Render a column value for JSON transport; blobs become lists of byte values."""
    if isinstance(value, bytes):
        return list(value)
    return value


def row_to_dynamic(row: dict[str, Any]) -> dict[str, Any]:
    return {name: to_dynamic(value) for name, value in row.items()}


__all__ = [
    "StorageValue",
    "to_storage_value",
    "to_storage_params",
    "from_storage_value",
    "decode_text",
    "to_dynamic",
    "row_to_dynamic",
]
