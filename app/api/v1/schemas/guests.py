from pydantic import BaseModel, Field

from app.domain.guests.guest_models import MAX_GUEST_SEATS
from app.schemas import GuestEventType, InvitationStatus

from .serializers import UtcDateTime


class GuestSeatOut(BaseModel):
    seat_id: str
    stream_id: str
    user_id: str
    seat_index: int
    display_name: str
    is_active: bool
    is_moderator: bool
    mic_enabled: bool
    camera_enabled: bool
    joined_at: UtcDateTime
    left_at: UtcDateTime | None = None


class GuestInvitationOut(BaseModel):
    invitation_id: str
    stream_id: str
    inviter_id: str
    invitee_id: str
    seat_index: int
    status: InvitationStatus
    created_at: UtcDateTime
    expires_at: UtcDateTime


class GuestEventOut(BaseModel):
    event_id: str
    user_id: str | None = None
    event_type: GuestEventType
    display_name: str
    metadata: dict
    created_at: UtcDateTime


class ListGuestSeatsOut(BaseModel):
    seats: list[GuestSeatOut]


class ListGuestEventsOut(BaseModel):
    events: list[GuestEventOut]


class StreamIn(BaseModel):
    stream_id: str


class InviteGuestIn(StreamIn):
    invitee_id: str


class InvitationIn(BaseModel):
    invitation_id: str


class AcceptInvitationIn(InvitationIn):
    display_name: str | None = Field(default=None, max_length=50, description="Name shown on the seat")


class GuestIn(StreamIn):
    user_id: str


class UpdateMicIn(StreamIn):
    user_id: str | None = Field(default=None, description="Guest to update; defaults to the caller")
    mic_enabled: bool


class UpdateCameraIn(StreamIn):
    user_id: str | None = Field(default=None, description="Guest to update; defaults to the caller")
    camera_enabled: bool


class SetGuestModeratorIn(GuestIn):
    is_moderator: bool


class SetSeatsLockedIn(StreamIn):
    locked: bool


class SwapSeatsIn(StreamIn):
    seat_index_1: int = Field(ge=0, lt=MAX_GUEST_SEATS)
    seat_index_2: int = Field(ge=0, lt=MAX_GUEST_SEATS)
