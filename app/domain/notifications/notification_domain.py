"""Notification domain service - the in-app inbox."""

from beanie.operators import Set
from loguru import logger

from app.schemas import Notification
from app.schemas.schema_utils import NEWEST_FIRST
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ..utils.idgen import new_notification_id
from .notification_models import NotificationCreateParams, NotificationResponse


def _to_response(notification: Notification) -> NotificationResponse:
    return NotificationResponse(**notification.model_dump(exclude={"id"}))


class NotificationService:
    """Creates and reads inbox notifications."""

    async def create_notification(self, params: NotificationCreateParams) -> NotificationResponse:
        notification = Notification(
            notification_id=new_notification_id(),
            **params.model_dump(),
        )
        await notification.insert()

        logger.debug(
            f"Created notification {notification.notification_id} "
            f"type={params.type.value} receiver={params.receiver_id}"
        )
        return _to_response(notification)

    async def list_notifications(self, user_id: str, limit: int = 50) -> list[NotificationResponse]:
        """Return the user's notifications, newest first."""
        notifications = (
            await Notification.find(Notification.receiver_id == user_id)
            .sort(NEWEST_FIRST)  # type: ignore
            .limit(limit)
            .to_list()
        )
        return [_to_response(n) for n in notifications]

    async def get_unread_count(self, user_id: str) -> int:
        return await Notification.find(
            Notification.receiver_id == user_id,
            Notification.read == False,  # noqa: E712
        ).count()

    async def mark_as_read(self, notification_id: str, user_id: str) -> NotificationResponse:
        """Mark one notification read. Only its receiver may do so."""
        notification = await Notification.find_one(
            Notification.notification_id == notification_id,
            Notification.receiver_id == user_id,
        )
        if not notification:
            raise AppError(
                errcode=AppErrorCode.E_NOTIFICATION_NOT_FOUND,
                errmesg=f"Notification not found: {notification_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )

        if not notification.read:
            notification.read = True
            await notification.save()

        return _to_response(notification)

    async def mark_all_as_read(self, user_id: str) -> int:
        """Mark every unread notification of the user read; returns how many changed."""
        result = await Notification.find(
            Notification.receiver_id == user_id,
            Notification.read == False,  # noqa: E712
        ).update(Set({Notification.read: True}))

        modified = getattr(result, "modified_count", 0) or 0
        logger.debug(f"Marked {modified} notifications read for user {user_id}")
        return modified
