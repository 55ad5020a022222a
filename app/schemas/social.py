"""Social ODM schemas: live comments, followers and notifications."""

from datetime import datetime
from enum import Enum
from typing import Any

from beanie import Document, Indexed
from pydantic import Field, field_validator
from pymongo import ASCENDING, DESCENDING, IndexModel

from .schema_utils import parse_mongo_datetime, utc_now


class NotificationType(str, Enum):
    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"
    MESSAGE = "message"
    STREAM_STARTED = "stream_started"
    VIP_SUBSCRIPTION = "vip_subscription"
    MODERATOR_ROLE_UPDATED = "moderator_role_updated"
    GIFT_RECEIVED = "gift_received"
    NEW_FOLLOWER = "new_follower"
    NEW_MESSAGE = "new_message"


class LiveComment(Document):
    """A chat message posted during a live stream."""

    comment_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    stream_id: str
    user_id: str
    message: str

    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "live_comments"
        indexes = [
            IndexModel(
                [("stream_id", ASCENDING), ("created_at", DESCENDING)],
                name="idx_stream_created",
            ),
        ]


class Follower(Document):
    """Edge of the follower graph: `follower_id` follows `following_id`."""

    follow_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    follower_id: str
    following_id: str

    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "followers"
        indexes = [
            IndexModel(
                [("follower_id", ASCENDING), ("following_id", ASCENDING)],
                name="uniq_follower_following",
                unique=True,
            ),
            IndexModel([("following_id", ASCENDING)], name="idx_following"),
        ]


class Notification(Document):
    """In-app notification shown in the receiver's inbox."""

    notification_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    type: NotificationType
    sender_id: str | None = None
    receiver_id: str
    message: str | None = None

    # References to the object the notification is about
    ref_post_id: str | None = None
    ref_story_id: str | None = None
    ref_stream_id: str | None = None

    read: bool = False
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "notifications"
        indexes = [
            IndexModel(
                [("receiver_id", ASCENDING), ("read", ASCENDING), ("created_at", DESCENDING)],
                name="idx_receiver_read_created",
            ),
        ]
