"""Notification domain models."""

from datetime import datetime

from pydantic import BaseModel

from app.schemas import NotificationType


class NotificationResponse(BaseModel):
    notification_id: str
    type: NotificationType
    sender_id: str | None = None
    receiver_id: str
    message: str | None = None
    ref_post_id: str | None = None
    ref_story_id: str | None = None
    ref_stream_id: str | None = None
    read: bool
    created_at: datetime


class NotificationCreateParams(BaseModel):
    """Parameters for creating a notification."""

    receiver_id: str
    type: NotificationType
    sender_id: str | None = None
    message: str | None = None
    ref_post_id: str | None = None
    ref_story_id: str | None = None
    ref_stream_id: str | None = None
