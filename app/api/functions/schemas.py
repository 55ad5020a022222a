"""Request bodies of the proxy functions.

Fields are optional so that a missing value is answered with the function's
own 400 error instead of a validation failure. Bodies are read by
`requests.parse_body`.
"""

from typing import Any

from pydantic import BaseModel, Field


class StartLiveIn(BaseModel):
    title: str | None = None
    user_id: str | None = None


class StopLiveIn(BaseModel):
    live_input_id: str | None = None


class PushTokenIn(BaseModel):
    token: str
    platform: str


class PushNotificationIn(BaseModel):
    title: str
    body: str
    data: dict[str, Any] = Field(default_factory=dict)


class SendPushNotificationIn(BaseModel):
    userId: str | None = None
    tokens: list[PushTokenIn] | None = None
    notification: PushNotificationIn | None = None
