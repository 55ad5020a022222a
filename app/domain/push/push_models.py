"""Push domain models."""

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field

from app.schemas import DeviceType

PUSH_TOKEN_PLATFORMS = ("ios", "android")
WEB_PUSH_SKIP_REASON = "Web push not implemented"


class PushNotificationType(str, Enum):
    """Notification types a user can switch on or off for push delivery."""

    STREAM_STARTED = "stream_started"
    MODERATOR_ROLE_UPDATED = "moderator_role_updated"
    GIFT_RECEIVED = "gift_received"
    NEW_FOLLOWER = "new_follower"
    NEW_MESSAGE = "new_message"


class PushTarget(BaseModel):
    token: str
    platform: str


class PushContent(BaseModel):
    title: str
    body: str
    data: dict[str, Any] = Field(default_factory=dict)


class PushDeliveryResult(BaseModel):
    """Outcome for one device token."""

    token: str
    platform: str
    status: Literal["sent", "failed", "skipped"]
    error: Any | None = None
    reason: str | None = None


class PushDeliveryReport(BaseModel):
    success: bool = True
    sent: int = 0
    failed: int = 0
    results: list[PushDeliveryResult] = Field(default_factory=list)

    @classmethod
    def from_results(cls, results: list[PushDeliveryResult]) -> "PushDeliveryReport":
        return cls(
            sent=sum(1 for r in results if r.status == "sent"),
            failed=sum(1 for r in results if r.status == "failed"),
            results=results,
        )


class PushTokenResponse(BaseModel):
    token_id: str
    user_id: str
    token: str
    device_type: DeviceType
    is_active: bool
    created_at: datetime
    last_used_at: datetime


class NotificationPreferencesResponse(BaseModel):
    user_id: str
    stream_started: bool
    moderator_role_updated: bool
    gift_received: bool
    new_follower: bool
    new_message: bool
    created_at: datetime
    updated_at: datetime


class NotificationPreferencesUpdate(BaseModel):
    """Partial update; unset fields keep their stored value."""

    stream_started: bool | None = None
    moderator_role_updated: bool | None = None
    gift_received: bool | None = None
    new_follower: bool | None = None
    new_message: bool | None = None
