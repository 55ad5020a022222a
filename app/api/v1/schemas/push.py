from typing import Any

from pydantic import BaseModel, Field

from app.domain.push.push_models import PushNotificationType
from app.schemas import DeviceType

from .serializers import UtcDateTime


class RegisterTokenIn(BaseModel):
    token: str = Field(description="Device push token")
    device_type: DeviceType


class PushTokenOut(BaseModel):
    token_id: str
    device_type: DeviceType
    is_active: bool
    created_at: UtcDateTime
    last_used_at: UtcDateTime


class PreferencesOut(BaseModel):
    stream_started: bool
    moderator_role_updated: bool
    gift_received: bool
    new_follower: bool
    new_message: bool
    updated_at: UtcDateTime


class UpdatePreferencesIn(BaseModel):
    stream_started: bool | None = None
    moderator_role_updated: bool | None = None
    gift_received: bool | None = None
    new_follower: bool | None = None
    new_message: bool | None = None


class SendNotificationIn(BaseModel):
    user_id: str = Field(description="Receiver of the notification")
    type: PushNotificationType
    title: str
    body: str
    data: dict[str, Any] = Field(default_factory=dict)


class SendNotificationOut(BaseModel):
    delivered: bool
    sent: int = 0
    failed: int = 0
