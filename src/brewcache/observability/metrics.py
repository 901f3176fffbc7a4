"""Prometheus metrics for brewcache.

Provides metrics collection and exposure:
- Cache metrics (hits, misses, populations, latency)
- Primary store metrics (reads)

Usage:
    from brewcache.observability.metrics import get_metrics

    metrics = get_metrics()
    metrics.cache_hits_total.labels(cache_type="coffee").inc()
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram
from prometheus_client import generate_latest as prometheus_generate_latest

from brewcache.config import settings

logger = logging.getLogger(__name__)


class NoOpMetric:
    """No-op metric for when metrics are disabled."""

    def labels(self, **kwargs: Any) -> "NoOpMetric":
        """Return self for chaining."""
        return self

    def inc(self, amount: float = 1) -> None:
        """No-op."""
        pass

    def observe(self, value: float) -> None:
        """No-op."""
        pass


@dataclass
class MetricsRegistry:
    """Registry for Prometheus metrics."""

    enabled: bool = True
    registry: CollectorRegistry = field(default=REGISTRY, repr=False)

    cache_hits_total: Any = field(default_factory=NoOpMetric)
    cache_misses_total: Any = field(default_factory=NoOpMetric)
    cache_populations_total: Any = field(default_factory=NoOpMetric)
    primary_reads_total: Any = field(default_factory=NoOpMetric)
    cache_operation_duration_seconds: Any = field(default_factory=NoOpMetric)

    _initialized: bool = field(default=False, repr=False)

    def initialize(self) -> None:
        """Initialize Prometheus metrics."""
        if self._initialized:
            return

        if not self.enabled:
            logger.info("Metrics are disabled")
            self._initialized = True
            return

        self.cache_hits_total = Counter(
            "brewcache_cache_hits_total",
            "Cache hits",
            ["cache_type"],
            registry=self.registry,
        )
        self.cache_misses_total = Counter(
            "brewcache_cache_misses_total",
            "Cache misses",
            ["cache_type"],
            registry=self.registry,
        )
        self.cache_populations_total = Counter(
            "brewcache_cache_populations_total",
            "Cache entries written after a primary store read",
            ["cache_type"],
            registry=self.registry,
        )
        self.primary_reads_total = Counter(
            "brewcache_primary_reads_total",
            "Primary store reads",
            ["cache_type", "found"],
            registry=self.registry,
        )
        self.cache_operation_duration_seconds = Histogram(
            "brewcache_cache_operation_duration_seconds",
            "Cache-aside operation latency in seconds",
            ["operation", "cache_type"],
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.5),
            registry=self.registry,
        )

        self._initialized = True
        logger.info("Prometheus metrics initialized")

    @contextmanager
    def time(self, operation: str, cache_type: str) -> Iterator[None]:
        """Observe the duration of the enclosed block."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.cache_operation_duration_seconds.labels(
                operation=operation, cache_type=cache_type
            ).observe(time.perf_counter() - start)

    def generate_latest(self) -> bytes:
        """Generate Prometheus metrics in exposition format."""
        if not self.enabled:
            return b"# Metrics disabled\n"
        return prometheus_generate_latest(self.registry)


# Global metrics registry
metrics_registry = MetricsRegistry(enabled=settings.enable_metrics)


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry.

    Initializes metrics on first access.
    """
    if not metrics_registry._initialized:
        metrics_registry.initialize()
    return metrics_registry
