"""Notification inbox schemas."""

from pydantic import BaseModel, ConfigDict

from rogha.models import NotificationType

from .common import UTCDateTime


class NotificationResponse(BaseModel):
    id: str
    type: NotificationType
    post_id: str
    creator_id: str
    read: bool
    created_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)


class NotificationInbox(BaseModel):
    """Newest notifications plus the total still unread."""

    items: list[NotificationResponse]
    unread: int


class UnreadCountResponse(BaseModel):
    unread: int


class MarkReadResponse(BaseModel):
    marked: int
