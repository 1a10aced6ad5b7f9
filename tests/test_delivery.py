import httpx
import pytest

from conftest import FakeZoom
from zoom_alert_proxy.delivery import DeliveryClient
from zoom_alert_proxy.models import BodyItem, ChatMessage, HeadColor, RoutingParams

ROUTE = RoutingParams(channel_id="abc123", token="tok")


class TrackingStream(httpx.AsyncByteStream):
    def __init__(self, content: bytes, error: Exception = None):
        self.content = content
        self.error = error
        self.closed = False

    async def __aiter__(self):
        if self.error is not None:
            raise self.error
        yield self.content

    async def aclose(self) -> None:
        self.closed = True


def sample_message() -> ChatMessage:
    return ChatMessage(
        head_color=HeadColor.RED,
        head_text="disk full (firing) critical",
        sub_head_text="http://am/#/alerts?receiver=ops",
        body=[BodyItem(text="disk at 95% http://runbook")],
    )


async def test_send_posts_message(metrics, fake_zoom):
    client = DeliveryClient(metrics=metrics, transport=fake_zoom.transport)

    await client.send(sample_message(), ROUTE)

    assert len(fake_zoom.requests) == 1
    request = fake_zoom.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://inbots.zoom.us/incoming/hook/abc123?format=full"
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Authorization"] == "tok"
    assert fake_zoom.payloads()[0] == sample_message().to_payload()
    assert metrics.send_total(200) == 1


async def test_send_uses_configured_host(metrics, fake_zoom):
    client = DeliveryClient(metrics=metrics, hook_host="hooks.example.test", transport=fake_zoom.transport)

    await client.send(sample_message(), ROUTE)

    assert fake_zoom.requests[0].url.host == "hooks.example.test"


async def test_send_logs_and_counts_rejection(metrics, log_messages):
    zoom = FakeZoom(status_code=500, text="upstream exploded")
    client = DeliveryClient(metrics=metrics, transport=zoom.transport)

    await client.send(sample_message(), ROUTE)

    assert metrics.send_total(500) == 1
    assert metrics.send_total(200) == 0
    assert any("upstream exploded" in m and "abc123" in m for m in log_messages)


async def test_send_swallows_transport_errors(metrics, log_messages):
    zoom = FakeZoom(error=httpx.ConnectError("connection refused"))
    client = DeliveryClient(metrics=metrics, transport=zoom.transport)

    await client.send(sample_message(), ROUTE)

    assert len(zoom.requests) == 1
    assert metrics.send_total(200) == 0
    assert any("connection refused" in m for m in log_messages)


async def test_send_swallows_timeouts(metrics):
    zoom = FakeZoom(error=httpx.ReadTimeout("timed out"))
    client = DeliveryClient(metrics=metrics, timeout=0.5, transport=zoom.transport)

    await client.send(sample_message(), ROUTE)

    assert len(zoom.requests) == 1


@pytest.mark.parametrize("route", [
    RoutingParams(channel_id="", token="tok"),
    RoutingParams(channel_id="abc123", token=""),
])
async def test_send_skips_incomplete_route(metrics, fake_zoom, route):
    client = DeliveryClient(metrics=metrics, transport=fake_zoom.transport)

    await client.send(sample_message(), route)

    assert fake_zoom.requests == []


@pytest.mark.parametrize("status_code", [200, 404, 500])
async def test_send_closes_response_stream(metrics, status_code):
    stream = TrackingStream(b"response body")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, stream=stream)

    client = DeliveryClient(metrics=metrics, transport=httpx.MockTransport(handler))

    await client.send(sample_message(), ROUTE)

    assert stream.closed
    assert metrics.send_total(status_code) == 1


async def test_send_closes_response_stream_when_read_fails(metrics, log_messages):
    stream = TrackingStream(b"", error=httpx.ReadError("connection reset"))

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, stream=stream)

    client = DeliveryClient(metrics=metrics, transport=httpx.MockTransport(handler))

    await client.send(sample_message(), ROUTE)

    assert stream.closed
    assert metrics.send_total(502) == 1
    assert any("Error reading response body" in m for m in log_messages)


@pytest.mark.parametrize("route", [
    RoutingParams(channel_id="abc123", token="tök"),
    RoutingParams(channel_id="abc\n123", token="tok"),
])
async def test_send_swallows_unsendable_route(metrics, fake_zoom, log_messages, route):
    client = DeliveryClient(metrics=metrics, transport=fake_zoom.transport)

    await client.send(sample_message(), route)

    assert fake_zoom.requests == []
    assert metrics.send_total(200) == 0
    assert any("Error building request" in m for m in log_messages)
