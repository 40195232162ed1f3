"""Prometheus metrics for the idregistry server.

Provides /metrics endpoint with Prometheus text format.
Implements simple text format without prometheus_client dependency.

Metrics exported:
- idregistry_http_request_duration_seconds: Request latency histogram
- idregistry_http_requests_total: Request count by endpoint/status
- idregistry_active_connections: Currently active connections
- idregistry_registration_lookups_total: Registration lookups by outcome
"""

from __future__ import annotations

import logging
import re
import threading
import time
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

logger = logging.getLogger(__name__)

# Histogram bucket boundaries (in seconds)
LATENCY_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)

# Outcomes of a registration lookup
LOOKUP_REGISTERED = "registered"
LOOKUP_UNREGISTERED = "unregistered"
LOOKUP_ERROR = "error"

_HEX_SEGMENT = re.compile(r"^(0x)?[0-9a-fA-F]{16,}$")


@dataclass
class HistogramData:
    """Histogram metric data."""

    buckets: dict[float, int] = field(default_factory=lambda: defaultdict(int))
    sum: float = 0.0
    count: int = 0

    def observe(self, value: float) -> None:
        """Record an observation."""
        self.sum += value
        self.count += 1
        for bucket in LATENCY_BUCKETS:
            if value <= bucket:
                self.buckets[bucket] += 1


class MetricsCollector:
    """Thread-safe metrics collector.

    Collects request metrics and provides Prometheus text format output.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

        # Request metrics: {(method, path, status): count}
        self._request_counts: dict[tuple[str, str, int], int] = defaultdict(int)

        # Latency histogram: {(method, path): HistogramData}
        self._latency_histograms: dict[tuple[str, str], HistogramData] = defaultdict(HistogramData)

        self._active_connections: int = 0

        # Registration lookups: {outcome: count}
        self._lookup_counts: dict[str, int] = defaultdict(int)

    def record_request(
        self, method: str, path: str, status_code: int, duration_seconds: float
    ) -> None:
        """Record a completed request.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: Request path (normalized)
            status_code: HTTP response status code
            duration_seconds: Request duration in seconds
        """
        normalized_path = self._normalize_path(path)

        with self._lock:
            self._request_counts[(method, normalized_path, status_code)] += 1
            self._latency_histograms[(method, normalized_path)].observe(duration_seconds)

    def record_lookup(self, outcome: str) -> None:
        """Record the outcome of one registration lookup."""
        with self._lock:
            self._lookup_counts[outcome] += 1

    def _normalize_path(self, path: str) -> str:
        """Replace identity addresses and numeric IDs with a placeholder."""
        parts = path.split("/")
        normalized = []
        for part in parts:
            if _HEX_SEGMENT.match(part) or part.isdigit():
                normalized.append("{id}")
            else:
                normalized.append(part)
        return "/".join(normalized)

    def increment_connections(self) -> None:
        with self._lock:
            self._active_connections += 1

    def decrement_connections(self) -> None:
        with self._lock:
            self._active_connections = max(0, self._active_connections - 1)

    def get_active_connections(self) -> int:
        with self._lock:
            return self._active_connections

    def format_prometheus(self) -> str:
        """Format all metrics in Prometheus text format.

        Returns:
            Prometheus text format string
        """
        lines: list[str] = []

        with self._lock:
            lines.append("# HELP idregistry_http_requests_total Total HTTP requests")
            lines.append("# TYPE idregistry_http_requests_total counter")
            for (method, path, status), count in sorted(self._request_counts.items()):
                metric = "idregistry_http_requests_total"
                labels = f'method="{method}",path="{path}",status="{status}"'
                lines.append(f"{metric}{{{labels}}} {count}")

            lines.append("")
            lines.append("# HELP idregistry_http_request_duration_seconds HTTP request latency")
            lines.append("# TYPE idregistry_http_request_duration_seconds histogram")
            for (method, path), histogram in sorted(self._latency_histograms.items()):
                base_labels = f'method="{method}",path="{path}"'
                # observe() already keeps bucket counts cumulative
                for bucket in LATENCY_BUCKETS:
                    bucket_metric = "idregistry_http_request_duration_seconds_bucket"
                    count = histogram.buckets.get(bucket, 0)
                    lines.append(f'{bucket_metric}{{{base_labels},le="{bucket}"}} {count}')
                bucket_metric = "idregistry_http_request_duration_seconds_bucket"
                lines.append(f'{bucket_metric}{{{base_labels},le="+Inf"}} {histogram.count}')
                sum_metric = "idregistry_http_request_duration_seconds_sum"
                lines.append(f"{sum_metric}{{{base_labels}}} {histogram.sum:.6f}")
                count_metric = "idregistry_http_request_duration_seconds_count"
                lines.append(f"{count_metric}{{{base_labels}}} {histogram.count}")

            lines.append("")
            lines.append("# HELP idregistry_active_connections Currently active HTTP connections")
            lines.append("# TYPE idregistry_active_connections gauge")
            lines.append(f"idregistry_active_connections {self._active_connections}")

            lines.append("")
            lines.append("# HELP idregistry_registration_lookups_total Registration lookups by outcome")
            lines.append("# TYPE idregistry_registration_lookups_total counter")
            for outcome in (LOOKUP_REGISTERED, LOOKUP_UNREGISTERED, LOOKUP_ERROR):
                count = self._lookup_counts.get(outcome, 0)
                lines.append(f'idregistry_registration_lookups_total{{outcome="{outcome}"}} {count}')

        lines.append("")
        return "\n".join(lines)


# Global metrics collector instance
_metrics_collector: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Get or create the global metrics collector."""
    global _metrics_collector
    if _metrics_collector is None:
        _metrics_collector = MetricsCollector()
    return _metrics_collector


class MetricsMiddleware(BaseHTTPMiddleware):
    """Starlette middleware for collecting request metrics.

    Tracks request count, latency, and active connections.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        collector = get_metrics_collector()

        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        collector.increment_connections()
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time

            collector.record_request(
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_seconds=duration,
            )

            return response
        except Exception:
            duration = time.perf_counter() - start_time
            collector.record_request(
                method=request.method,
                path=request.url.path,
                status_code=500,
                duration_seconds=duration,
            )
            raise
        finally:
            collector.decrement_connections()


async def metrics_endpoint(request: Request) -> PlainTextResponse:
    """Prometheus metrics endpoint.

    Returns metrics in Prometheus text exposition format.
    """
    collector = get_metrics_collector()
    metrics_text = collector.format_prometheus()

    return PlainTextResponse(
        content=metrics_text,
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
