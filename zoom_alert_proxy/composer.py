"""Turn an Alertmanager alert group into a Zoom chat message."""

from typing import Sequence

from loguru import logger

from zoom_alert_proxy.metrics import MetricsReporter
from zoom_alert_proxy.models import Alert, AlertGroup, AlertStatus, BodyItem, ChatMessage, HeadColor


def head_color(group: AlertGroup) -> HeadColor:
    """Pick the head colour from the group status and common severity.

    Unrecognised statuses fall back to red.
    """
    state = group.state
    if state is AlertStatus.RESOLVED:
        return HeadColor.GREEN
    if state is AlertStatus.FIRING and group.common_labels.get("severity") == "warning":
        return HeadColor.ORANGE
    return HeadColor.RED


def body_item(alert: Alert) -> BodyItem:
    description = alert.annotations.get("description", "")
    runbook = alert.annotations.get("runbook", "")
    if not description:
        logger.warning(f"Alert {alert.labels.get('alertname', '')} description is empty")
    return BodyItem(text=f"{description} {runbook}")


def compose(group: AlertGroup, alerts: Sequence[Alert], metrics: MetricsReporter) -> ChatMessage:
    """Build the chat message for one batch of a group's alerts.

    Args:
        group: The alert group the batch belongs to; supplies the head
        alerts: Alerts rendered into the body, in order
        metrics: Reporter whose processed-alerts counter is bumped per alert

    Returns:
        ChatMessage with one body item per alert
    """
    summary = group.common_annotations.get("summary", "")
    severity = group.common_labels.get("severity", "")

    body = []
    for alert in alerts:
        metrics.alert_processed()
        body.append(body_item(alert))

    return ChatMessage(
        markdown_enabled=False,
        head_color=head_color(group),
        head_text=f"{summary} ({group.status}) {severity}",
        sub_head_text=f"{group.external_url}/#/alerts?receiver={group.receiver}",
        body=body,
    )
