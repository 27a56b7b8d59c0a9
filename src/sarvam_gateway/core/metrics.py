"""
Prometheus Metrics for the Gateway.

Metrics collection is optional: when prometheus_client is not installed
every operation is a no-op and /metrics returns a placeholder.

Metrics Exposed:
    gateway_requests_total            - Requests by flow and status
    gateway_request_duration_seconds  - Request latency by flow
    gateway_audio_files_total         - Audio files written to disk
    gateway_audio_bytes_total         - Audio bytes written to disk
    gateway_document_jobs_total       - Document jobs by terminal state

Usage:
    from sarvam_gateway.core.metrics import metrics

    metrics.record_request("speech", "success", 0.8)
    metrics.record_audio_file(44_100)
    content, content_type = metrics.get_metrics_response()

Installation:
    pip install sarvam-gateway[metrics]
"""
from __future__ import annotations

from typing import Optional

try:
    from prometheus_client import (
        CONTENT_TYPE_LATEST,
        CollectorRegistry,
        Counter,
        Histogram,
        generate_latest,
    )
    PROMETHEUS_AVAILABLE = True
except ImportError:
    PROMETHEUS_AVAILABLE = False
    Counter = None
    Histogram = None
    CollectorRegistry = None


class GatewayMetrics:
    """
    Gateway metrics collector.

    A single module-level instance (``metrics``) is shared by the services.
    Uses its own CollectorRegistry so it never clashes with other
    collectors in the same process.
    """

    def __init__(self):
        self._enabled = PROMETHEUS_AVAILABLE
        self._registry: Optional["CollectorRegistry"] = None

        if self._enabled:
            self._setup_metrics()

    def _setup_metrics(self) -> None:
        self._registry = CollectorRegistry()

        self._requests_total = Counter(
            "gateway_requests_total",
            "Total gateway requests",
            ["flow", "status"],
            registry=self._registry,
        )

        # Document jobs routinely take minutes, so the buckets run long
        self._request_duration = Histogram(
            "gateway_request_duration_seconds",
            "Gateway request duration in seconds",
            ["flow"],
            buckets=(0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 180.0, 600.0),
            registry=self._registry,
        )

        self._audio_files_total = Counter(
            "gateway_audio_files_total",
            "Total audio files written",
            registry=self._registry,
        )
        self._audio_bytes_total = Counter(
            "gateway_audio_bytes_total",
            "Total audio bytes written",
            registry=self._registry,
        )

        self._document_jobs_total = Counter(
            "gateway_document_jobs_total",
            "Document jobs by terminal state",
            ["state"],
            registry=self._registry,
        )

    @property
    def enabled(self) -> bool:
        return self._enabled

    def record_request(self, flow: str, status: str, duration: float) -> None:
        """
        Record a completed request.

        Args:
            flow: "document" or "speech"
            status: "success" or "error"
            duration: Request duration in seconds (negative values skip the histogram)
        """
        if not self._enabled:
            return

        self._requests_total.labels(flow=flow, status=status).inc()
        if duration >= 0:
            self._request_duration.labels(flow=flow).observe(duration)

    def record_audio_file(self, size_bytes: int) -> None:
        if not self._enabled:
            return
        self._audio_files_total.inc()
        if size_bytes > 0:
            self._audio_bytes_total.inc(size_bytes)

    def record_document_job(self, state: str) -> None:
        if not self._enabled:
            return
        self._document_jobs_total.labels(state=state or "unknown").inc()

    def get_metrics_response(self) -> tuple[bytes, str]:
        """
        Get metrics in Prometheus text format.

        Returns:
            Tuple of (content_bytes, content_type)
        """
        if not self._enabled:
            return (
                b"# Metrics not available (prometheus_client not installed)\n",
                "text/plain; charset=utf-8",
            )

        return (generate_latest(self._registry), CONTENT_TYPE_LATEST)


metrics = GatewayMetrics()
