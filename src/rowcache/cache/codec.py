"""Snapshot serialization for cache values.

A snapshot is a plain ``dict`` of column values. ``orjson`` handles
``datetime``, ``date``, ``time`` and ``UUID`` natively; ``Decimal`` and
``bytes`` go through ``_default``. Decoding yields JSON types only, and the
record store coerces them back per column type.
"""

from __future__ import annotations

import base64
from decimal import Decimal
from typing import Any

import orjson


def _default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    raise TypeError(f"Type is not JSON serializable: {type(value).__name__}")


def encode_snapshot(snapshot: dict[str, Any]) -> bytes:
    """Serialize a record snapshot to JSON bytes."""
    return orjson.dumps(snapshot, default=_default)


def decode_snapshot(data: bytes) -> dict[str, Any]:
    """Deserialize JSON bytes to a record snapshot."""
    parsed = orjson.loads(data)
    if not isinstance(parsed, dict):
        raise ValueError(f"Cached snapshot must be a JSON object, got {type(parsed).__name__}")
    return parsed
