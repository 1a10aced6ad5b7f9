"""HTTP delivery of chat messages to the Zoom incoming webhook."""

import json
from typing import Optional

import httpx
from loguru import logger

from zoom_alert_proxy.metrics import MetricsReporter
from zoom_alert_proxy.models import ChatMessage, RoutingParams

DEFAULT_HOOK_HOST = "inbots.zoom.us"
DEFAULT_TIMEOUT = 10.0


class DeliveryClient:
    """Posts chat messages to Zoom, fire-and-forget.

    Failures are logged and counted, never raised and never retried.
    """

    def __init__(
        self,
        metrics: MetricsReporter,
        hook_host: str = DEFAULT_HOOK_HOST,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the delivery client.

        Args:
            metrics: Reporter receiving one outcome per HTTP response
            hook_host: Host serving the incoming-webhook API
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport, used to stub the remote end
        """
        self.metrics = metrics
        self.hook_host = hook_host
        self.timeout = timeout
        self._transport = transport

    def hook_url(self, channel_id: str) -> str:
        return f"https://{self.hook_host}/incoming/hook/{channel_id}?format=full"

    async def send(self, message: ChatMessage, route: RoutingParams) -> None:
        """Serialize and post a message to the channel named by route."""
        if not route.is_complete():
            logger.error("Skipping delivery: channel-id and token are both required")
            return

        url = self.hook_url(route.channel_id)
        payload = json.dumps(message.to_payload())
        headers = {
            "Content-Type": "application/json",
            "Authorization": route.token,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                async with client.stream("POST", url, content=payload, headers=headers) as response:
                    if response.status_code != 200:
                        await self._log_rejection(response, url, route.token, payload)
                    self.metrics.send_result(response.status_code)
        except httpx.HTTPError as e:
            logger.error(f"Error sending request url:{url} :{e}")
        except (httpx.InvalidURL, ValueError) as e:
            # Unencodable token or malformed channel id.
            logger.error(f"Error building request url:{url!r} :{e}")

    async def _log_rejection(
        self, response: httpx.Response, url: str, token: str, payload: str
    ) -> None:
        try:
            await response.aread()
            response_body = response.text
        except (httpx.HTTPError, httpx.StreamError) as e:
            logger.error(f"Error reading response body: {e}")
            response_body = ""

        logger.error(
            f"Error sending request url:{url} token:{token} body:{payload} "
            f"status code:{response.status_code} {response.reason_phrase} "
            f"status body:{response_body}"
        )
