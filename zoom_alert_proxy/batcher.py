"""Split an alert group into bounded batches and deliver each one."""

from loguru import logger

from zoom_alert_proxy.composer import compose
from zoom_alert_proxy.delivery import DeliveryClient
from zoom_alert_proxy.metrics import MetricsReporter
from zoom_alert_proxy.models import AlertGroup, RoutingParams

MAX_ALERT_COUNTS = 100


async def dispatch(
    group: AlertGroup,
    route: RoutingParams,
    client: DeliveryClient,
    metrics: MetricsReporter,
    limit: int = MAX_ALERT_COUNTS,
) -> int:
    """Relay an alert group as one message per chunk of at most `limit` alerts.

    Chunks are consecutive and in original order. A group without alerts
    still produces one header-only message. Deliveries run one after another.

    Args:
        group: Decoded Alertmanager payload
        route: Destination channel and token
        client: Delivery client used for every chunk
        metrics: Reporter passed to the composer
        limit: Maximum number of alerts per message

    Returns:
        Number of messages handed to the delivery client

    Raises:
        ValueError: If limit is lower than 1
    """
    if limit < 1:
        raise ValueError(f"Batch limit must be at least 1, got {limit}")

    alerts = group.alerts
    chunks = [alerts[i:i + limit] for i in range(0, len(alerts), limit)] or [[]]

    logger.debug(f"Relaying {len(alerts)} alerts in {len(chunks)} message(s)")
    for chunk in chunks:
        message = compose(group, chunk, metrics)
        await client.send(message, route)

    return len(chunks)
