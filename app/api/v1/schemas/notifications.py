from pydantic import BaseModel

from app.schemas import NotificationType

from .serializers import UtcDateTime


class NotificationOut(BaseModel):
    notification_id: str
    type: NotificationType
    sender_id: str | None = None
    receiver_id: str
    message: str | None = None
    ref_post_id: str | None = None
    ref_story_id: str | None = None
    ref_stream_id: str | None = None
    read: bool
    created_at: UtcDateTime


class MarkAsReadIn(BaseModel):
    notification_id: str


class ListNotificationsOut(BaseModel):
    notifications: list[NotificationOut]
