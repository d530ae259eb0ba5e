"""Cache key schema for rowcache.

Key format:
    {prefix}:{entity}:pk:{value_b64}
    {prefix}:{entity}:uk:{field}:{value_b64}

Where:
- prefix: namespace shared by every wrapper on one Redis database
- entity: record type name (table name by default)
- field: unique field name, so equal field names on different entities
  never collide
- value_b64: Base64URL of the JSON encoding of the key value, so ``1`` and
  ``"1"`` map to different keys and values cannot inject separators
"""

from __future__ import annotations

import base64
from typing import Any

import orjson

DEFAULT_PREFIX = "rowcache"


def encode_value(value: Any) -> str:
    """Encode a key value as unpadded Base64URL of its JSON form."""
    raw = orjson.dumps(value, default=str)
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


class CacheKeys:
    """Cache key generator following a consistent naming convention."""

    def __init__(self, prefix: str = DEFAULT_PREFIX):
        self.prefix = prefix

    def primary(self, entity: str, pk_value: Any) -> str:
        """Key for a record cached by primary key."""
        return f"{self.prefix}:{entity}:pk:{encode_value(pk_value)}"

    def unique(self, entity: str, field: str, value: Any) -> str:
        """Key for a record cached by a unique field value."""
        return f"{self.prefix}:{entity}:uk:{field}:{encode_value(value)}"

    def entity_pattern(self, entity: str) -> str:
        """Pattern matching every key of one entity.

        Use with Redis SCAN + DEL for bulk invalidation.
        """
        return f"{self.prefix}:{entity}:*"
