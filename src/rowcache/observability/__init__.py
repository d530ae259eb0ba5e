"""Logging and metrics for rowcache."""

from rowcache.observability.logging import ConsoleFormatter, JsonFormatter, configure_logging
from rowcache.observability.metrics import MetricsRegistry, get_metrics

__all__ = [
    "configure_logging",
    "JsonFormatter",
    "ConsoleFormatter",
    "MetricsRegistry",
    "get_metrics",
]
