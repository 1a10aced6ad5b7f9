from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import httpx
import pytest
from loguru import logger

from zoom_alert_proxy.metrics import MetricsReporter


class FakeZoom:
    """Stand-in for the Zoom incoming-webhook endpoint."""

    def __init__(self, status_code: int = 200, text: str = "{}", error: Optional[Exception] = None):
        self.status_code = status_code
        self.text = text
        self.error = error
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text=self.text)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def payloads(self) -> List[Dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests]


def make_payload(alert_count: int = 1, **overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "version": "4",
        "groupKey": "{}:{alertname=\"DiskFull\"}",
        "status": "firing",
        "receiver": "ops",
        "groupLabels": {"alertname": "DiskFull"},
        "commonLabels": {"alertname": "DiskFull", "severity": "critical"},
        "commonAnnotations": {"summary": "disk full"},
        "externalURL": "http://am",
        "alerts": [
            {
                "status": "firing",
                "labels": {"alertname": "DiskFull", "instance": f"node-{i}"},
                "annotations": {"description": f"disk at 9{i % 10}%", "runbook": "http://runbook"},
                "startsAt": "2024-01-01T00:00:00Z",
                "endsAt": "0001-01-01T00:00:00Z",
                "generatorURL": "http://prometheus/graph",
                "fingerprint": f"{i:016x}",
            }
            for i in range(alert_count)
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def metrics() -> MetricsReporter:
    return MetricsReporter()


@pytest.fixture()
def fake_zoom() -> FakeZoom:
    return FakeZoom()


@pytest.fixture()
def log_messages():
    messages: List[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
