"""Pydantic models for the Alertmanager webhook payload and the Zoom chat message."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AlertStatus(str, Enum):
    """Status of an alert group as reported by Alertmanager."""

    FIRING = "firing"
    RESOLVED = "resolved"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str) -> "AlertStatus":
        """Map a raw status string to a member, UNKNOWN for anything unrecognised."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class HeadColor(str, Enum):
    """Colour of the chat message head."""

    RED = "#ff0000"
    ORANGE = "#ffa500"
    GREEN = "#00ff00"


class Alert(BaseModel):
    """Individual alert within an Alertmanager notification."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    status: str = ""
    labels: Dict[str, str] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)
    starts_at: Optional[str] = Field(default=None, alias="startsAt")
    ends_at: Optional[str] = Field(default=None, alias="endsAt")
    generator_url: str = Field(default="", alias="generatorURL")
    fingerprint: Optional[str] = None


class AlertGroup(BaseModel):
    """Alertmanager webhook payload structure.

    Every field has an empty default so partially filled payloads still decode;
    only syntactically broken JSON or wrongly typed values are rejected.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    version: str = Field(default="4")
    group_key: str = Field(default="", alias="groupKey")
    truncated_alerts: int = Field(default=0, alias="truncatedAlerts")
    status: str = ""
    receiver: str = ""
    group_labels: Dict[str, str] = Field(default_factory=dict, alias="groupLabels")
    common_labels: Dict[str, str] = Field(default_factory=dict, alias="commonLabels")
    common_annotations: Dict[str, str] = Field(default_factory=dict, alias="commonAnnotations")
    external_url: str = Field(default="", alias="externalURL")
    alerts: List[Alert] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def accept_null(cls, data: Any) -> Any:
        """Treat a JSON null document as an empty group."""
        if data is None:
            return {}
        return data

    @property
    def state(self) -> AlertStatus:
        return AlertStatus.parse(self.status)


class RoutingParams(BaseModel):
    """Destination of a relayed message, taken from the inbound query string."""

    channel_id: str = Field(description="Zoom incoming-webhook channel ID")
    token: str = Field(description="Authorization token passed through verbatim")

    def is_complete(self) -> bool:
        return bool(self.channel_id) and bool(self.token)


class BodyItem(BaseModel):
    """One line of the chat message body."""

    type: str = Field(default="message")
    text: str = Field(default="")


class ChatMessage(BaseModel):
    """Zoom incoming-webhook message."""

    markdown_enabled: bool = Field(default=False)
    head_color: HeadColor = Field(default=HeadColor.RED)
    head_text: str = Field(default="")
    sub_head_text: str = Field(default="")
    body: List[BodyItem] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        """Build the JSON document expected by the Zoom webhook."""
        return {
            "is_markdown_support": self.markdown_enabled,
            "content": {
                "head": {
                    "style": {"color": self.head_color.value},
                    "text": self.head_text,
                    "sub_head": {"text": self.sub_head_text},
                },
                "body": [item.model_dump() for item in self.body],
            },
        }
