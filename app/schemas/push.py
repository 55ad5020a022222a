"""Push notification ODM schemas."""

from datetime import datetime
from enum import Enum
from typing import Any

from beanie import Document, Indexed
from pydantic import Field, field_validator
from pymongo import ASCENDING, IndexModel

from .schema_utils import parse_mongo_datetime, utc_now


class DeviceType(str, Enum):
    IOS = "ios"
    ANDROID = "android"
    WEB = "web"


class PushToken(Document):
    """A device token registered for push delivery."""

    token_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    user_id: str
    token: str
    device_type: DeviceType
    is_active: bool = True

    created_at: datetime = Field(default_factory=utc_now)
    last_used_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", "last_used_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "push_notification_tokens"
        indexes = [
            IndexModel(
                [("user_id", ASCENDING), ("token", ASCENDING)],
                name="uniq_user_token",
                unique=True,
            ),
            IndexModel([("token", ASCENDING)], name="idx_token"),
        ]


class NotificationPreferences(Document):
    """Per-user switches for each push notification type."""

    user_id: Indexed(str, unique=True)  # type: ignore[valid-type]

    stream_started: bool = True
    moderator_role_updated: bool = True
    gift_received: bool = True
    new_follower: bool = True
    new_message: bool = True

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "notification_preferences"
