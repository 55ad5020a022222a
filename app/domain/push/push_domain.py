"""Push domain service - device tokens, preferences and FCM delivery."""

from typing import Any

from beanie.operators import Set, SetOnInsert
from loguru import logger

from app.schemas import DeviceType, NotificationPreferences, NotificationType, PushToken
from app.schemas.schema_utils import utc_now
from app.services.fcm_push import FcmPushSender, get_fcm_push_sender
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ..notifications.notification_domain import NotificationService
from ..notifications.notification_models import NotificationCreateParams
from ..utils.idgen import new_push_token_id
from ..utils.upsert import upsert_one
from .push_models import (
    PUSH_TOKEN_PLATFORMS,
    WEB_PUSH_SKIP_REASON,
    NotificationPreferencesResponse,
    NotificationPreferencesUpdate,
    PushContent,
    PushDeliveryReport,
    PushDeliveryResult,
    PushNotificationType,
    PushTarget,
    PushTokenResponse,
)


class PushService:
    """Registers device tokens and delivers push notifications to them."""

    def __init__(
        self,
        sender: FcmPushSender | None = None,
        notifications: NotificationService | None = None,
    ):
        self._sender = sender or get_fcm_push_sender()
        self._notifications = notifications or NotificationService()

    # ==================== DELIVERY ====================

    async def deliver(
        self,
        user_id: str | None,
        tokens: list[PushTarget] | None,
        content: PushContent | None,
    ) -> PushDeliveryReport:
        """Send `content` to every token and report per-token outcomes.

        Tokens are processed one by one; a failure on one token never stops
        the others. Tokens FCM reports as unregistered are deactivated.

        Raises AppError 400 on missing fields, 500 when FCM is not configured.
        """
        if not user_id or not tokens or content is None:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="Missing required fields",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        if not self._sender.configured:
            logger.error("FCM_SERVER_KEY not configured")
            raise AppError(
                errcode=AppErrorCode.E_PUSH_CONFIG_MISSING,
                errmesg="Push notification service not configured",
                status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
            )

        results: list[PushDeliveryResult] = []
        for target in tokens:
            result = await self._deliver_one(target, content)
            if result is not None:
                results.append(result)

        report = PushDeliveryReport.from_results(results)
        logger.info(f"Push delivery for user {user_id}: sent={report.sent} failed={report.failed}")
        return report

    async def _deliver_one(self, target: PushTarget, content: PushContent) -> PushDeliveryResult | None:
        token, platform = target.token, target.platform
        try:
            if platform in PUSH_TOKEN_PLATFORMS:
                outcome = await self._sender.send(token, content.title, content.body, content.data)
                if outcome.ok:
                    logger.debug(f"Push sent to {platform} device")
                    return PushDeliveryResult(token=token, platform=platform, status="sent")

                logger.warning(f"Push to {platform} device failed: {outcome.payload}")
                if outcome.token_invalid:
                    await self.deactivate_token(token)
                return PushDeliveryResult(
                    token=token, platform=platform, status="failed", error=outcome.payload
                )

            if platform == DeviceType.WEB.value:
                return PushDeliveryResult(
                    token=token, platform=platform, status="skipped", reason=WEB_PUSH_SKIP_REASON
                )

            logger.warning(f"Ignoring push token with unknown platform: {platform}")
            return None
        except Exception as e:
            logger.exception(f"Error sending push to {platform} device: {e}")
            return PushDeliveryResult(token=token, platform=platform, status="failed", error=str(e))

    async def deactivate_token(self, token: str) -> None:
        await PushToken.find(PushToken.token == token).update(Set({PushToken.is_active: False}))
        logger.info("Deactivated invalid push token")

    # ==================== TOKENS ====================

    async def register_token(self, user_id: str, token: str, device_type: DeviceType) -> PushTokenResponse:
        """Upsert the token for the user and mark it active and freshly used."""
        now = utc_now()
        push_token = await upsert_one(
            PushToken,
            [PushToken.user_id == user_id, PushToken.token == token],
            Set(
                {
                    PushToken.device_type: device_type,
                    PushToken.is_active: True,
                    PushToken.last_used_at: now,
                }
            ),
            SetOnInsert({PushToken.token_id: new_push_token_id(), PushToken.created_at: now}),
        )
        logger.info(f"Registered {device_type.value} push token for user {user_id}")

        return PushTokenResponse(**push_token.model_dump(exclude={"id"}))

    async def get_active_tokens(self, user_id: str) -> list[PushTokenResponse]:
        tokens = await PushToken.find(
            PushToken.user_id == user_id,
            PushToken.is_active == True,  # noqa: E712
        ).to_list()
        return [PushTokenResponse(**t.model_dump(exclude={"id"})) for t in tokens]

    # ==================== PREFERENCES ====================

    async def _upsert_preferences(self, user_id: str, changes: dict[str, Any]) -> NotificationPreferences:
        """Apply `changes` to the user's preferences, creating them with defaults if missing."""
        defaults = NotificationPreferences(user_id=user_id).model_dump(
            exclude={"id", "revision_id", "user_id", *changes}
        )
        updates: list[Any] = [SetOnInsert(defaults)]
        if changes:
            updates.append(Set(changes))
        return await upsert_one(
            NotificationPreferences,
            [NotificationPreferences.user_id == user_id],
            *updates,
        )

    async def get_preferences(self, user_id: str) -> NotificationPreferencesResponse:
        preferences = await self._upsert_preferences(user_id, {})
        return NotificationPreferencesResponse(**preferences.model_dump(exclude={"id"}))

    async def update_preferences(
        self, user_id: str, update: NotificationPreferencesUpdate
    ) -> NotificationPreferencesResponse:
        changes = update.model_dump(exclude_none=True)
        preferences = await self._upsert_preferences(user_id, {**changes, "updated_at": utc_now()})

        return NotificationPreferencesResponse(**preferences.model_dump(exclude={"id"}))

    # ==================== SEND ====================

    async def send_notification(
        self,
        user_id: str,
        type: PushNotificationType,
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> PushDeliveryReport | None:
        """Push a typed notification to all of the user's active devices.

        Returns None without sending when the user disabled this type or has
        no active tokens. Otherwise the notification is also recorded in the
        user's inbox.
        """
        data = data or {}
        preferences = await self._upsert_preferences(user_id, {})
        if not getattr(preferences, type.value):
            logger.debug(f"Notification type {type.value} is disabled for user {user_id}")
            return None

        tokens = await self.get_active_tokens(user_id)
        if not tokens:
            logger.debug(f"No push tokens found for user {user_id}")
            return None

        report = None
        if self._sender.configured:
            report = await self.deliver(
                user_id,
                [PushTarget(token=t.token, platform=t.device_type.value) for t in tokens],
                PushContent(title=title, body=body, data=data),
            )
        else:
            logger.warning("FCM not configured; recording notification without delivery")

        await self._notifications.create_notification(
            NotificationCreateParams(
                type=NotificationType(type.value),
                sender_id=data.get("sender_id"),
                receiver_id=user_id,
                message=body,
                ref_stream_id=data.get("stream_id"),
                ref_post_id=data.get("post_id"),
                ref_story_id=data.get("story_id"),
            )
        )
        return report
