"""Per-wrapper cache options."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rowcache.cache.jitter import normalize_expiry_deviation
from rowcache.config import settings


class CacheOptions(BaseModel):
    """Options for one CacheWrapper.

    ``expiry_deviation`` is clamped into ``[0, 1]`` and defaults to 5% when
    unset, so out-of-range configuration never reaches a cache write.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    expire: float = Field(gt=0, description="Base TTL in seconds")
    expiry_deviation: float = Field(
        default_factory=lambda: normalize_expiry_deviation(None),
        description="Fraction of jitter around expire",
    )
    unique_fields: frozenset[str] = frozenset()
    disable: bool = False
    entity_name: str | None = Field(
        default=None, description="Key namespace, defaults to the store's entity name"
    )

    @field_validator("expiry_deviation", mode="before")
    @classmethod
    def _clamp_deviation(cls, value: Any) -> float:
        return normalize_expiry_deviation(None if value is None else float(value))

    @classmethod
    def from_settings(cls, **overrides: Any) -> "CacheOptions":
        """Options from environment defaults, with explicit overrides."""
        values: dict[str, Any] = {
            "expire": settings.default_expire,
            "expiry_deviation": settings.default_expiry_deviation,
            "disable": settings.cache_disabled,
        }
        values.update(overrides)
        return cls(**values)
