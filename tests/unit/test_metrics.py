"""Unit tests for metrics sinks."""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from synthcache.metrics import NullMetrics, PrometheusMetrics


class TestPrometheusMetrics:
    """Test PrometheusMetrics recording."""

    def test_cache_lookups_by_result(self) -> None:
        metrics = PrometheusMetrics()
        metrics.record_cache(True)
        metrics.record_cache(True)
        metrics.record_cache(False)

        sample = metrics.registry.get_sample_value
        assert sample("synthcache_cache_requests_total", {"found": "yes"}) == 2.0
        assert sample("synthcache_cache_requests_total", {"found": "no"}) == 1.0

    def test_provider_results(self) -> None:
        metrics = PrometheusMetrics()
        metrics.record_provider_result("google", True)
        metrics.record_provider_result("google", False)

        sample = metrics.registry.get_sample_value
        labels = {"provider": "google", "accepted": "no"}
        assert sample("synthcache_provider_requests_total", labels) == 1.0

    def test_response_time_histogram(self) -> None:
        metrics = PrometheusMetrics()
        metrics.record_response_time("aws", 0.3)

        sample = metrics.registry.get_sample_value
        assert sample("synthcache_response_time_seconds_count", {"provider": "aws"}) == 1.0
        assert sample("synthcache_response_time_seconds_sum", {"provider": "aws"}) == 0.3

    def test_instances_do_not_collide(self) -> None:
        first = PrometheusMetrics()
        second = PrometheusMetrics()
        first.record_cache(True)
        assert second.registry.get_sample_value(
            "synthcache_cache_requests_total", {"found": "yes"}
        ) is None

    def test_exposition(self) -> None:
        metrics = PrometheusMetrics()
        metrics.record_cache(False)
        content, content_type = metrics.get_metrics_response()
        assert b"synthcache_cache_requests_total" in content
        assert content_type.startswith("text/plain")


class TestNullMetrics:
    """Test the silent default sink."""

    def test_accepts_everything(self) -> None:
        metrics = NullMetrics()
        metrics.record_cache(True)
        metrics.record_response_time("x", 1.0)
        metrics.record_provider_result("x", False)
