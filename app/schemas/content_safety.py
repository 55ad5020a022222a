"""Content-safety ODM schemas: strikes, violations and appeals."""

from datetime import datetime
from enum import Enum
from typing import Any

from beanie import Document, Indexed
from pydantic import Field, field_validator
from pymongo import ASCENDING, DESCENDING, IndexModel

from .schema_utils import parse_mongo_datetime, utc_now


class AppealStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class Strike(Document):
    """A strike issued against a user's account."""

    strike_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    user_id: str

    strike_type: str
    strike_message: str
    strike_level: int = 1
    expires_at: datetime
    active: bool = True

    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("expires_at", "created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "content_safety_strikes"
        indexes = [
            IndexModel([("user_id", ASCENDING), ("created_at", DESCENDING)], name="idx_user_created"),
        ]


class Violation(Document):
    """A reported content-safety violation."""

    violation_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    reported_user_id: str
    reporter_user_id: str | None = None
    stream_id: str | None = None

    violation_reason: str
    notes: str | None = None
    severity_level: int = 1
    resolved: bool = False

    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "content_safety_violations"
        indexes = [
            IndexModel(
                [("reported_user_id", ASCENDING), ("created_at", DESCENDING)],
                name="idx_reported_created",
            ),
        ]


class Appeal(Document):
    """A user's appeal against a strike or violation."""

    appeal_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    user_id: str
    violation_id: str | None = None
    strike_id: str | None = None

    appeal_reason: str
    evidence_url: str | None = None
    status: AppealStatus = AppealStatus.PENDING

    # Review outcome
    admin_decision: str | None = None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None

    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("reviewed_at", "created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "appeals"
        indexes = [
            IndexModel([("user_id", ASCENDING), ("created_at", DESCENDING)], name="idx_user_created"),
        ]
