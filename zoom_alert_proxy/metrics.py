"""Prometheus counters shared by the composer and the delivery client."""

from typing import Optional

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, generate_latest


class MetricsReporter:
    """Holds the process-wide counters on its own registry.

    A fresh registry per reporter keeps tests isolated; the application
    creates one reporter and hands it to every component.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self._alerts_processed = Counter(
            "zoom_proxy_processed_alerts",
            "The total number of processed alerts",
            registry=self.registry,
        )
        self._send_request = Counter(
            "zoom_proxy_send_request",
            "The total number of sending request by HTTP status code",
            ["code"],
            registry=self.registry,
        )

    def alert_processed(self) -> None:
        self._alerts_processed.inc()

    def send_result(self, status_code: int) -> None:
        self._send_request.labels(code=str(status_code)).inc()

    def alerts_processed_total(self) -> float:
        return self.registry.get_sample_value("zoom_proxy_processed_alerts_total") or 0.0

    def send_total(self, status_code: int) -> float:
        value = self.registry.get_sample_value(
            "zoom_proxy_send_request_total", {"code": str(status_code)}
        )
        return value or 0.0

    def render(self) -> bytes:
        """Render the registry in the Prometheus text exposition format."""
        return generate_latest(self.registry)
