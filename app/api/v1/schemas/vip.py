from pydantic import BaseModel, Field

from .serializers import UtcDateTime


class CreateMembershipIn(BaseModel):
    subscriber_id: str
    badge_text: str = Field(min_length=1, max_length=20)
    badge_color: str | None = Field(default=None, description="Hex colour, e.g. #FF1493")
    duration_months: int = Field(default=1, ge=1)


class MembershipIdIn(BaseModel):
    membership_id: str


class RenewMembershipIn(MembershipIdIn):
    duration_months: int = Field(default=1, ge=1)


class MembershipOut(BaseModel):
    membership_id: str
    vip_owner_id: str
    subscriber_id: str
    badge_text: str
    badge_color: str
    is_active: bool
    activated_at: UtcDateTime
    expires_at: UtcDateTime


class ListMembershipsOut(BaseModel):
    memberships: list[MembershipOut]


class BadgeOut(BaseModel):
    badge_text: str
    badge_color: str
