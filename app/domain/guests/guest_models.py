"""Guest seat domain models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from app.schemas import GuestEventType, InvitationStatus

# Seats are numbered 0..8
MAX_GUEST_SEATS = 9
INVITATION_TTL_MINUTES = 2
GUEST_EVENTS_LIMIT = 50


class GuestSeatResponse(BaseModel):
    seat_id: str
    stream_id: str
    user_id: str
    seat_index: int
    display_name: str
    is_active: bool
    is_moderator: bool
    mic_enabled: bool
    camera_enabled: bool
    joined_at: datetime
    left_at: datetime | None = None


class GuestInvitationResponse(BaseModel):
    invitation_id: str
    stream_id: str
    inviter_id: str
    invitee_id: str
    seat_index: int
    status: InvitationStatus
    created_at: datetime
    expires_at: datetime
    responded_at: datetime | None = None


class GuestEventResponse(BaseModel):
    event_id: str
    stream_id: str
    user_id: str | None = None
    event_type: GuestEventType
    display_name: str
    metadata: dict[str, Any]
    created_at: datetime
