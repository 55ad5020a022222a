"""Guest seat ODM schemas: seats next to the host, invitations and the seat event log."""

from datetime import datetime
from enum import Enum
from typing import Any

from beanie import Document, Indexed
from pydantic import Field, field_validator
from pymongo import ASCENDING, DESCENDING, IndexModel

from .schema_utils import parse_mongo_datetime, utc_now


class InvitationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"


class GuestEventType(str, Enum):
    JOINED_LIVE = "joined_live"
    LEFT_LIVE = "left_live"
    HOST_REMOVED = "host_removed"
    MUTED_MIC = "muted_mic"
    UNMUTED_MIC = "unmuted_mic"
    ENABLED_CAMERA = "enabled_camera"
    DISABLED_CAMERA = "disabled_camera"
    BECAME_MODERATOR = "became_moderator"
    REMOVED_MODERATOR = "removed_moderator"


class GuestSeat(Document):
    """A guest occupying one seat of a stream until `left_at`.

    At most one active seat per index and per user in a stream.
    """

    seat_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    stream_id: str
    user_id: str
    seat_index: int
    display_name: str = "Guest"

    is_active: bool = True
    is_moderator: bool = False
    mic_enabled: bool = True
    camera_enabled: bool = True

    joined_at: datetime = Field(default_factory=utc_now)
    left_at: datetime | None = None
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("joined_at", "left_at", "updated_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "stream_guest_seats"
        indexes = [
            IndexModel(
                [("stream_id", ASCENDING), ("seat_index", ASCENDING)],
                name="uniq_active_stream_seat",
                unique=True,
                partialFilterExpression={"is_active": True},
            ),
            IndexModel(
                [("stream_id", ASCENDING), ("user_id", ASCENDING)],
                name="uniq_active_stream_user",
                unique=True,
                partialFilterExpression={"is_active": True},
            ),
        ]


class GuestInvitation(Document):
    """The host's offer of a seat to a viewer."""

    invitation_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    stream_id: str
    inviter_id: str
    invitee_id: str
    seat_index: int
    status: InvitationStatus = InvitationStatus.PENDING

    created_at: datetime = Field(default_factory=utc_now)
    expires_at: datetime
    responded_at: datetime | None = None

    @field_validator("created_at", "expires_at", "responded_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "stream_guest_invitations"
        indexes = [
            IndexModel(
                [("stream_id", ASCENDING), ("invitee_id", ASCENDING)],
                name="uniq_pending_stream_invitee",
                unique=True,
                partialFilterExpression={"status": InvitationStatus.PENDING.value},
            ),
        ]


class GuestEvent(Document):
    """Seat activity shown in the stream's chat."""

    event_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    stream_id: str
    user_id: str | None = None
    event_type: GuestEventType
    display_name: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "stream_guest_events"
        indexes = [
            IndexModel([("stream_id", ASCENDING), ("created_at", DESCENDING)], name="idx_stream_created"),
        ]
