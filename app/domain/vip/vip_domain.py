"""VIP membership domain service - premium chat badges granted by a creator."""

import calendar
from datetime import datetime

from loguru import logger
from pymongo import DESCENDING

from app.schemas import DEFAULT_BADGE_COLOR, NotificationType, VipMembership
from app.schemas.schema_utils import utc_now
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ..notifications.notification_domain import NotificationService
from ..notifications.notification_models import NotificationCreateParams
from ..utils.idgen import new_membership_id
from .vip_models import VipBadge, VipMembershipResponse


def add_months(value: datetime, months: int) -> datetime:
    """Shift by calendar months, clamping the day to the target month's length.

    Jan 31 + 1 month is Feb 28 (or 29), never a date in March.
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def _to_response(membership: VipMembership) -> VipMembershipResponse:
    return VipMembershipResponse(**membership.model_dump(exclude={"id"}))


class VipService:
    def __init__(self, notifications: NotificationService | None = None):
        self._notifications = notifications or NotificationService()

    def _ensure_months(self, months: int) -> None:
        if months < 1:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_PARAMS,
                errmesg="Membership duration must be at least 1 month",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

    async def create_vip_membership(
        self,
        owner_id: str,
        subscriber_id: str,
        badge_text: str,
        duration_months: int = 1,
        badge_color: str | None = None,
    ) -> VipMembershipResponse:
        """Activate a membership for `duration_months` and notify the subscriber."""
        self._ensure_months(duration_months)

        now = utc_now()
        membership = VipMembership(
            membership_id=new_membership_id(),
            vip_owner_id=owner_id,
            subscriber_id=subscriber_id,
            badge_text=badge_text,
            badge_color=badge_color or DEFAULT_BADGE_COLOR,
            activated_at=now,
            expires_at=add_months(now, duration_months),
        )
        await membership.insert()
        logger.info(f"VIP membership {membership.membership_id} created: owner={owner_id} subscriber={subscriber_id}")

        await self._notifications.create_notification(
            NotificationCreateParams(
                type=NotificationType.VIP_SUBSCRIPTION,
                sender_id=owner_id,
                receiver_id=subscriber_id,
                message=f"You are now a VIP member! Your {badge_text} badge is active.",
            )
        )

        return _to_response(membership)

    async def get_vip_memberships(self, owner_id: str, active_only: bool = True) -> list[VipMembershipResponse]:
        """Memberships of the owner's club, most recently activated first."""
        conditions = [VipMembership.vip_owner_id == owner_id]
        if active_only:
            conditions.append(VipMembership.is_active == True)  # noqa: E712

        memberships = (
            await VipMembership.find(*conditions)
            .sort([("activated_at", DESCENDING), ("_id", DESCENDING)])  # type: ignore
            .to_list()
        )
        return [_to_response(m) for m in memberships]

    async def _find_active(self, owner_id: str, subscriber_id: str) -> VipMembership | None:
        return await VipMembership.find_one(
            VipMembership.vip_owner_id == owner_id,
            VipMembership.subscriber_id == subscriber_id,
            VipMembership.is_active == True,  # noqa: E712
        )

    async def is_vip_member(self, owner_id: str, subscriber_id: str) -> bool:
        return await self._find_active(owner_id, subscriber_id) is not None

    async def _get_membership(self, membership_id: str, owner_id: str | None = None) -> VipMembership:
        conditions = [VipMembership.membership_id == membership_id]
        if owner_id:
            conditions.append(VipMembership.vip_owner_id == owner_id)

        membership = await VipMembership.find_one(*conditions)
        if not membership:
            raise AppError(
                errcode=AppErrorCode.E_MEMBERSHIP_NOT_FOUND,
                errmesg=f"Membership not found: {membership_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return membership

    async def deactivate_vip_membership(
        self, membership_id: str, owner_id: str | None = None
    ) -> VipMembershipResponse:
        membership = await self._get_membership(membership_id, owner_id)
        membership.is_active = False
        await membership.save()

        logger.info(f"VIP membership {membership_id} deactivated")
        return _to_response(membership)

    async def renew_vip_membership(
        self, membership_id: str, duration_months: int = 1, owner_id: str | None = None
    ) -> VipMembershipResponse:
        """Extend from the current expiry, even a past one, and reactivate."""
        self._ensure_months(duration_months)

        membership = await self._get_membership(membership_id, owner_id)
        membership.expires_at = add_months(membership.expires_at, duration_months)
        membership.is_active = True
        await membership.save()

        logger.info(f"VIP membership {membership_id} renewed until {membership.expires_at.isoformat()}")
        return _to_response(membership)

    async def get_vip_badge(self, owner_id: str, subscriber_id: str) -> VipBadge | None:
        membership = await self._find_active(owner_id, subscriber_id)
        if membership is None:
            return None
        return VipBadge(
            badge_text=membership.badge_text,
            badge_color=membership.badge_color or DEFAULT_BADGE_COLOR,
        )
