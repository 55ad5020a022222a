from fastapi import APIRouter, Depends

from app.api.v1.dependency import CurrentUser
from app.api.v1.schemas.base import ApiOut
from app.api.v1.schemas.push import (
    PreferencesOut,
    PushTokenOut,
    RegisterTokenIn,
    SendNotificationIn,
    SendNotificationOut,
    UpdatePreferencesIn,
)
from app.domain.push.push_domain import PushService
from app.domain.push.push_models import NotificationPreferencesUpdate

router = APIRouter(prefix="/push")

# Singleton instance
_push_service = PushService()


def get_push_service() -> PushService:
    """Get the singleton PushService instance."""
    return _push_service


@router.post("/register_token")
async def register_token(
    payload: RegisterTokenIn,
    user: CurrentUser,
    service: PushService = Depends(get_push_service),
) -> ApiOut[PushTokenOut]:
    """Register (or refresh) a device token for the authenticated user."""
    token = await service.register_token(user.user_id, payload.token, payload.device_type)

    return ApiOut[PushTokenOut](results=PushTokenOut(**token.model_dump()))


@router.get("/get_preferences")
async def get_preferences(
    user: CurrentUser,
    service: PushService = Depends(get_push_service),
) -> ApiOut[PreferencesOut]:
    preferences = await service.get_preferences(user.user_id)

    return ApiOut[PreferencesOut](results=PreferencesOut(**preferences.model_dump()))


@router.post("/update_preferences")
async def update_preferences(
    payload: UpdatePreferencesIn,
    user: CurrentUser,
    service: PushService = Depends(get_push_service),
) -> ApiOut[PreferencesOut]:
    """Update only the notification types present in the request."""
    update = NotificationPreferencesUpdate(**payload.model_dump(exclude_unset=True))
    preferences = await service.update_preferences(user.user_id, update)

    return ApiOut[PreferencesOut](results=PreferencesOut(**preferences.model_dump()))


@router.post("/send_notification")
async def send_notification(
    payload: SendNotificationIn,
    user: CurrentUser,
    service: PushService = Depends(get_push_service),
) -> ApiOut[SendNotificationOut]:
    """Push a typed notification to another user, honouring their preferences.

    The authenticated user is always recorded as the sender.
    """
    data = {**payload.data, "sender_id": user.user_id}
    report = await service.send_notification(
        user_id=payload.user_id,
        type=payload.type,
        title=payload.title,
        body=payload.body,
        data=data,
    )

    if report is None:
        return ApiOut[SendNotificationOut](results=SendNotificationOut(delivered=False))

    return ApiOut[SendNotificationOut](
        results=SendNotificationOut(delivered=True, sent=report.sent, failed=report.failed)
    )
