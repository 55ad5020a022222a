"""Stream moderation ODM schemas."""

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import Field, field_validator
from pymongo import ASCENDING, DESCENDING, IndexModel

from .schema_utils import parse_mongo_datetime, utc_now


class Moderator(Document):
    """A user granted moderation rights over a streamer's chats."""

    moderator_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    streamer_id: str
    user_id: str

    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "moderators"
        indexes = [
            IndexModel(
                [("streamer_id", ASCENDING), ("user_id", ASCENDING)],
                name="uniq_streamer_user",
                unique=True,
            ),
        ]


class BannedUser(Document):
    """A user banned from all of a streamer's streams."""

    ban_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    streamer_id: str
    user_id: str
    reason: str | None = None

    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "banned_users"
        indexes = [
            IndexModel(
                [("streamer_id", ASCENDING), ("user_id", ASCENDING)],
                name="uniq_streamer_user",
                unique=True,
            ),
        ]


class TimedOutUser(Document):
    """A user muted in one stream until `end_time`; one per stream and user."""

    timeout_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    stream_id: str
    user_id: str
    end_time: datetime

    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("end_time", "created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "timed_out_users"
        indexes = [
            IndexModel(
                [("stream_id", ASCENDING), ("user_id", ASCENDING)],
                name="uniq_stream_user",
                unique=True,
            ),
        ]


class PinnedComment(Document):
    """The single comment pinned on top of a stream's chat."""

    pin_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    stream_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    comment_id: str
    pinned_by: str
    expires_at: datetime

    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("expires_at", "created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "pinned_comments"


class CommentLike(Document):
    like_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    comment_id: str
    user_id: str

    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "comment_likes"
        indexes = [
            IndexModel(
                [("comment_id", ASCENDING), ("user_id", ASCENDING)],
                name="uniq_comment_user",
                unique=True,
            ),
            IndexModel([("created_at", DESCENDING)], name="idx_created_desc"),
        ]
