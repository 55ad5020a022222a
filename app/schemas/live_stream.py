"""Live stream ODM schema."""

from datetime import datetime
from enum import Enum
from typing import Any

from beanie import Document, Indexed
from pydantic import Field, field_validator
from pymongo import ASCENDING, DESCENDING, IndexModel

from .schema_utils import parse_mongo_datetime, utc_now


class LiveStreamStatus(str, Enum):
    LIVE = "live"
    ENDED = "ended"


class LiveStream(Document):
    """A broadcast, keyed by the video platform's live input uid.

    `streamer_id` is the authenticated user who started it and owns its
    chat, pins and guest seats.
    """

    stream_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    streamer_id: str
    title: str
    status: LiveStreamStatus = LiveStreamStatus.LIVE
    seats_locked: bool = False

    created_at: datetime = Field(default_factory=utc_now)
    ended_at: datetime | None = None

    @field_validator("created_at", "ended_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "live_streams"
        indexes = [
            IndexModel(
                [("streamer_id", ASCENDING), ("created_at", DESCENDING)],
                name="idx_streamer_created",
            ),
        ]
