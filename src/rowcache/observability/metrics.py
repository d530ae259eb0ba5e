"""Prometheus metrics for rowcache.

Provides cache metrics collection:
- Hits and misses per entity and lookup (``pk`` or the unique field name)
- Invalidated keys per entity and operation
- Backend errors tolerated by the wrapper

Usage:
    from rowcache.observability.metrics import get_metrics

    metrics = get_metrics()
    metrics.cache_hits_total.labels(entity="students", lookup="pk").inc()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from prometheus_client import Counter

from rowcache.config import settings

logger = logging.getLogger(__name__)


class NoOpMetric:
    """No-op metric for when metrics are disabled."""

    def labels(self, **kwargs: Any) -> "NoOpMetric":
        """Return self for chaining."""
        return self

    def inc(self, amount: float = 1) -> None:
        """No-op."""
        pass


@dataclass
class MetricsRegistry:
    """Registry for Prometheus metrics."""

    cache_hits_total: Any = field(default_factory=NoOpMetric)
    cache_misses_total: Any = field(default_factory=NoOpMetric)
    cache_invalidations_total: Any = field(default_factory=NoOpMetric)
    cache_errors_total: Any = field(default_factory=NoOpMetric)

    # Internal state
    _initialized: bool = field(default=False, repr=False)

    def initialize(self) -> None:
        """Initialize Prometheus metrics."""
        if self._initialized:
            return

        if not settings.enable_metrics:
            logger.info("Metrics are disabled")
            self._initialized = True
            return

        self.cache_hits_total = Counter(
            "rowcache_cache_hits_total",
            "Cache hits",
            ["entity", "lookup"],
        )

        self.cache_misses_total = Counter(
            "rowcache_cache_misses_total",
            "Cache misses",
            ["entity", "lookup"],
        )

        self.cache_invalidations_total = Counter(
            "rowcache_cache_invalidations_total",
            "Cache keys invalidated",
            ["entity", "operation"],
        )

        self.cache_errors_total = Counter(
            "rowcache_cache_errors_total",
            "Cache backend errors tolerated by the wrapper",
            ["entity", "operation"],
        )

        self._initialized = True
        logger.info("Prometheus metrics initialized")


# Global metrics registry
metrics_registry = MetricsRegistry()


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry.

    Initializes metrics on first access.
    """
    if not metrics_registry._initialized:
        metrics_registry.initialize()
    return metrics_registry
