"""
Notification Models for budgetwatch

Two notifications exist: an ongoing, low-importance summary that is
always present while the notifier runs, and a high-priority alert that
is only present while spending is close to or over the limit.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class NotificationImportance(str, Enum):
    """Channel importance as understood by the notification host."""
    LOW = "low"
    HIGH = "high"


class NotificationPriority(str, Enum):
    """Per-notification priority."""
    DEFAULT = "default"
    HIGH = "high"


class NotificationChannel(BaseModel):
    """A category of notifications the host is told about up front."""
    model_config = ConfigDict(frozen=True)

    channel_id: str = Field(..., min_length=1)
    name: str
    description: str = ""
    importance: NotificationImportance = NotificationImportance.LOW


class Notification(BaseModel):
    """
    One notification as handed to the host.

    Publishing a notification whose id is already showing replaces it.
    """
    model_config = ConfigDict(frozen=True)

    notification_id: int
    channel_id: str = Field(..., min_length=1)
    title: str
    body: str
    priority: NotificationPriority = NotificationPriority.DEFAULT
    ongoing: bool = Field(
        default=False,
        description="Ongoing notifications cannot be dismissed by the user"
    )
    only_alert_once: bool = Field(
        default=False,
        description="Updates replace the content silently"
    )
