"""Prometheus metrics for substitute generation.

Three series are exported, all labeled by model id:
- substitution_latency_seconds: histogram of the full generation call,
  retries included. p50/p90/p99 are computed by the collector from buckets.
- substitution_request_latency_ms: gauge holding the duration of the last
  successful attempt.
- substitution_errors_total: requests that exhausted every attempt.

Metrics live in a registry owned by the SubstitutionMetrics instance so
that several services (or tests) never collide on the global registry.
"""

from __future__ import annotations

from typing import Final

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from ingredient_substitution.observability.logging import get_logger


logger = get_logger(__name__)

LATENCY_BUCKETS: Final[tuple[float, ...]] = (
    0.25,
    0.5,
    1.0,
    2.0,
    3.0,
    5.0,
    8.0,
    13.0,
    21.0,
    34.0,
    55.0,
)


class SubstitutionMetrics:
    """Latency and error instrumentation for the generation path."""

    def __init__(
        self,
        registry: CollectorRegistry | None = None,
        *,
        enabled: bool = True,
    ) -> None:
        """Create the metric families.

        Args:
            registry: Registry to register into. A private one is created
                when omitted.
            enabled: When False every recording method is a no-op.
        """
        self.registry = registry if registry is not None else CollectorRegistry()
        self.enabled = enabled

        self.latency = Histogram(
            "substitution_latency_seconds",
            "Latency of substitute generation, including retries",
            labelnames=["model"],
            buckets=LATENCY_BUCKETS,
            registry=self.registry,
        )
        self.request_latency = Gauge(
            "substitution_request_latency_ms",
            "Latency of the last successful substitute generation attempt in ms",
            labelnames=["model"],
            registry=self.registry,
        )
        self.errors = Counter(
            "substitution_errors",
            "Substitute generation requests that exhausted all attempts",
            labelnames=["model"],
            registry=self.registry,
        )

        if not enabled:
            logger.info("Substitution metrics disabled")

    def observe_generation(self, model: str, seconds: float) -> None:
        """Record the duration of a whole generation call."""
        if self.enabled:
            self.latency.labels(model=model).observe(seconds)

    def set_request_latency(self, model: str, milliseconds: float) -> None:
        """Record the duration of the successful attempt."""
        if self.enabled:
            self.request_latency.labels(model=model).set(milliseconds)

    def record_failure(self, model: str) -> None:
        """Count one generation request that gave up."""
        if self.enabled:
            self.errors.labels(model=model).inc()

    def render(self) -> bytes:
        """Render the registry in the Prometheus text exposition format."""
        return generate_latest(self.registry)


__all__ = ["LATENCY_BUCKETS", "SubstitutionMetrics"]
