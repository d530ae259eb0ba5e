"""Tests for snapshot encoding."""

from datetime import datetime
from decimal import Decimal

import pytest

from rowcache.cache.codec import decode_snapshot, encode_snapshot


class TestSnapshotCodec:
    """Test snapshot serialization."""

    def test_native_types(self) -> None:
        """datetime is written in ISO format by orjson."""
        data = encode_snapshot({"id": 1, "at": datetime(2024, 1, 2, 3, 4, 5)})
        assert decode_snapshot(data) == {"id": 1, "at": "2024-01-02T03:04:05"}

    def test_decimal_and_bytes(self) -> None:
        """Decimal becomes a string, bytes become Base64."""
        data = encode_snapshot({"balance": Decimal("12.50"), "digest": b"\x00\x01"})
        assert decode_snapshot(data) == {"balance": "12.50", "digest": "AAE="}

    def test_unsupported_type(self) -> None:
        with pytest.raises(TypeError):
            encode_snapshot({"value": object()})

    def test_rejects_non_object(self) -> None:
        """A cached value that is not a JSON object is corrupt."""
        with pytest.raises(ValueError):
            decode_snapshot(b"[1, 2]")
