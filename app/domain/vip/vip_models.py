"""VIP membership domain models."""

from datetime import datetime

from pydantic import BaseModel


class VipMembershipResponse(BaseModel):
    membership_id: str
    vip_owner_id: str
    subscriber_id: str
    badge_text: str
    badge_color: str
    is_active: bool
    activated_at: datetime
    expires_at: datetime
    created_at: datetime


class VipBadge(BaseModel):
    badge_text: str
    badge_color: str
