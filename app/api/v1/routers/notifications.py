from fastapi import APIRouter, Depends, Query

from app.api.v1.dependency import CurrentUser
from app.api.v1.schemas.base import ApiOut, CountOut
from app.api.v1.schemas.notifications import ListNotificationsOut, MarkAsReadIn, NotificationOut
from app.domain.notifications.notification_domain import NotificationService

router = APIRouter(prefix="/notifications")

# Singleton instance
_notification_service = NotificationService()


def get_notification_service() -> NotificationService:
    """Get the singleton NotificationService instance."""
    return _notification_service


@router.get("/list_notifications")
async def list_notifications(
    user: CurrentUser,
    limit: int = Query(50, ge=1, le=200, description="Maximum number of notifications"),
    service: NotificationService = Depends(get_notification_service),
) -> ApiOut[ListNotificationsOut]:
    """The authenticated user's inbox, newest first."""
    notifications = await service.list_notifications(user.user_id, limit=limit)

    return ApiOut[ListNotificationsOut](
        results=ListNotificationsOut(
            notifications=[NotificationOut(**n.model_dump()) for n in notifications]
        )
    )


@router.get("/get_unread_count")
async def get_unread_count(
    user: CurrentUser,
    service: NotificationService = Depends(get_notification_service),
) -> ApiOut[CountOut]:
    count = await service.get_unread_count(user.user_id)

    return ApiOut[CountOut](results=CountOut(count=count))


@router.post("/mark_as_read")
async def mark_as_read(
    payload: MarkAsReadIn,
    user: CurrentUser,
    service: NotificationService = Depends(get_notification_service),
) -> ApiOut[NotificationOut]:
    notification = await service.mark_as_read(payload.notification_id, user.user_id)

    return ApiOut[NotificationOut](results=NotificationOut(**notification.model_dump()))


@router.post("/mark_all_as_read")
async def mark_all_as_read(
    user: CurrentUser,
    service: NotificationService = Depends(get_notification_service),
) -> ApiOut[CountOut]:
    """Mark the whole inbox read; returns how many notifications changed."""
    count = await service.mark_all_as_read(user.user_id)

    return ApiOut[CountOut](results=CountOut(count=count))
