"""Observability module for brewcache.

Provides metrics and structured logging:
- Prometheus metrics for cache hits, misses and populations
- JSON structured logging with a per-command correlation id
"""

from brewcache.observability.logging import (
    LogContext,
    configure_logging,
    correlation_id_var,
)
from brewcache.observability.metrics import (
    MetricsRegistry,
    get_metrics,
    metrics_registry,
)

__all__ = [
    # Logging
    "configure_logging",
    "LogContext",
    "correlation_id_var",
    # Metrics
    "MetricsRegistry",
    "metrics_registry",
    "get_metrics",
]
