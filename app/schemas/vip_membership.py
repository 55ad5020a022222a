"""VIP membership ODM schema."""

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import Field, field_validator
from pymongo import ASCENDING, DESCENDING, IndexModel

from .schema_utils import parse_mongo_datetime, utc_now

DEFAULT_BADGE_COLOR = "#FF1493"


class VipMembership(Document):
    """A subscriber's VIP membership in a creator's club, shown as a chat badge."""

    membership_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    vip_owner_id: str
    subscriber_id: str

    badge_text: str
    badge_color: str = DEFAULT_BADGE_COLOR
    is_active: bool = True

    activated_at: datetime
    expires_at: datetime
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("activated_at", "expires_at", "created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "vip_memberships"
        indexes = [
            IndexModel(
                [("vip_owner_id", ASCENDING), ("activated_at", DESCENDING)],
                name="idx_owner_activated",
            ),
            IndexModel(
                [("vip_owner_id", ASCENDING), ("subscriber_id", ASCENDING), ("is_active", ASCENDING)],
                name="idx_owner_subscriber_active",
            ),
        ]
