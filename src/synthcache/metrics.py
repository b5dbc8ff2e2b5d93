"""Observability sinks for cache traffic and provider latency.

The cache manager takes any object implementing SynthesisMetrics. The
default NullMetrics discards everything; PrometheusMetrics records into its
own CollectorRegistry so several instances can coexist in one process.

Metrics exposed by PrometheusMetrics:
    synthcache_cache_requests_total      - lookups by result (found=yes/no)
    synthcache_provider_requests_total   - provider calls by provider and outcome
    synthcache_response_time_seconds     - provider round-trip latency
"""

from typing import Protocol

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)


class SynthesisMetrics(Protocol):
    """Interface the cache manager reports to."""

    def record_cache(self, found: bool) -> None: ...

    def record_response_time(self, provider: str, seconds: float) -> None: ...

    def record_provider_result(self, provider: str, accepted: bool) -> None: ...


class NullMetrics:
    """Metrics sink that records nothing."""

    def record_cache(self, found: bool) -> None:
        pass

    def record_response_time(self, provider: str, seconds: float) -> None:
        pass

    def record_provider_result(self, provider: str, accepted: bool) -> None:
        pass


class PrometheusMetrics:
    """Prometheus-backed metrics sink.

    Example:
        >>> metrics = PrometheusMetrics()
        >>> metrics.record_cache(found=True)
        >>> content, content_type = metrics.get_metrics_response()
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metric objects.

        Args:
            registry: Registry to record into; a private one by default
        """
        self.registry = registry or CollectorRegistry()

        self._cache_requests = Counter(
            "synthcache_cache_requests_total",
            "Result cache lookups",
            ["found"],
            registry=self.registry,
        )
        self._provider_requests = Counter(
            "synthcache_provider_requests_total",
            "Provider synthesis calls",
            ["provider", "accepted"],
            registry=self.registry,
        )
        self._response_time = Histogram(
            "synthcache_response_time_seconds",
            "Provider synthesis round-trip time in seconds",
            ["provider"],
            buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
            registry=self.registry,
        )

    def record_cache(self, found: bool) -> None:
        self._cache_requests.labels(found="yes" if found else "no").inc()

    def record_response_time(self, provider: str, seconds: float) -> None:
        self._response_time.labels(provider=provider).observe(seconds)

    def record_provider_result(self, provider: str, accepted: bool) -> None:
        self._provider_requests.labels(
            provider=provider, accepted="yes" if accepted else "no"
        ).inc()

    def get_metrics_response(self) -> tuple[bytes, str]:
        """Get metrics in Prometheus exposition format."""
        return generate_latest(self.registry), CONTENT_TYPE_LATEST
