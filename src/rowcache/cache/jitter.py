"""Expiry jitter.

Cached records written at the same moment with the same base TTL would all
expire together and send a burst of misses to the store. Each write instead
gets ``expire * (1 + offset)`` where ``offset`` is drawn uniformly from
``[-deviation, +deviation]``.
"""

from __future__ import annotations

import random

DEFAULT_EXPIRY_DEVIATION = 0.05

# Floor for computed TTLs, in seconds
MIN_TTL = 0.001


def normalize_expiry_deviation(value: float | None) -> float:
    """Clamp an expiry deviation into ``[0, 1]``.

    ``None`` means unset and yields the default of 5%.
    """
    if value is None:
        return DEFAULT_EXPIRY_DEVIATION
    if value < 0:
        return 0.0
    if value > 1:
        return 1.0
    return float(value)


def compute_ttl(expire: float, deviation: float, rng: random.Random | None = None) -> float:
    """Return a jittered TTL in seconds, always strictly positive."""
    deviation = normalize_expiry_deviation(deviation)
    uniform = (rng or random).uniform
    ttl = expire * (1 + uniform(-deviation, deviation))
    return max(ttl, MIN_TTL)


def ttl_to_millis(ttl: float) -> int:
    """Convert a TTL in seconds to whole milliseconds, at least 1."""
    return max(1, int(ttl * 1000))
