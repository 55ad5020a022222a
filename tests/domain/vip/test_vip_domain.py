"""Tests for the VIP membership domain service."""

from datetime import datetime, timezone

import pytest

from app.domain.vip.vip_domain import VipService, add_months
from app.schemas import DEFAULT_BADGE_COLOR, Notification, NotificationType, VipMembership
from app.schemas.schema_utils import utc_now
from app.utils.app_errors import AppError


class TestAddMonths:
    def test_same_day_next_month(self):
        start = datetime(2024, 3, 15, 12, 30, tzinfo=timezone.utc)

        assert add_months(start, 1) == datetime(2024, 4, 15, 12, 30, tzinfo=timezone.utc)

    def test_clamps_to_month_end(self):
        assert add_months(datetime(2024, 1, 31, tzinfo=timezone.utc), 1) == datetime(2024, 2, 29, tzinfo=timezone.utc)
        assert add_months(datetime(2023, 1, 31, tzinfo=timezone.utc), 1) == datetime(2023, 2, 28, tzinfo=timezone.utc)

    def test_crosses_year(self):
        assert add_months(datetime(2024, 12, 10, tzinfo=timezone.utc), 1) == datetime(2025, 1, 10, tzinfo=timezone.utc)
        assert add_months(datetime(2024, 11, 30, tzinfo=timezone.utc), 15) == datetime(2026, 2, 28, tzinfo=timezone.utc)


@pytest.mark.usefixtures("clear_collections")
class TestVipService:
    @pytest.fixture
    def service(self) -> VipService:
        return VipService()

    async def test_create_membership(self, beanie_db, service: VipService):
        membership = await service.create_vip_membership("creator", "fan", "Roaster", duration_months=3)

        assert membership.membership_id.startswith("vm_")
        assert membership.is_active is True
        assert membership.badge_color == DEFAULT_BADGE_COLOR
        assert membership.expires_at == add_months(membership.activated_at, 3)

        notification = await Notification.find_one(Notification.receiver_id == "fan")
        assert notification is not None
        assert notification.type == NotificationType.VIP_SUBSCRIPTION
        assert notification.message == "You are now a VIP member! Your Roaster badge is active."

    async def test_create_membership_invalid_duration(self, beanie_db, service: VipService):
        with pytest.raises(AppError) as exc_info:
            await service.create_vip_membership("creator", "fan", "Roaster", duration_months=0)

        assert exc_info.value.status_code == 400
        assert await VipMembership.count() == 0

    async def test_badge_and_membership_check(self, beanie_db, service: VipService):
        await service.create_vip_membership("creator", "fan", "Roaster", badge_color="#00FF00")

        assert await service.is_vip_member("creator", "fan") is True
        assert await service.is_vip_member("creator", "stranger") is False

        badge = await service.get_vip_badge("creator", "fan")
        assert badge is not None
        assert badge.badge_text == "Roaster"
        assert badge.badge_color == "#00FF00"
        assert await service.get_vip_badge("creator", "stranger") is None

    async def test_deactivate(self, beanie_db, service: VipService):
        membership = await service.create_vip_membership("creator", "fan", "Roaster")

        deactivated = await service.deactivate_vip_membership(membership.membership_id, owner_id="creator")

        assert deactivated.is_active is False
        assert await service.is_vip_member("creator", "fan") is False
        assert await service.get_vip_memberships("creator") == []
        assert len(await service.get_vip_memberships("creator", active_only=False)) == 1

    async def test_deactivate_someone_elses_membership(self, beanie_db, service: VipService):
        membership = await service.create_vip_membership("creator", "fan", "Roaster")

        with pytest.raises(AppError) as exc_info:
            await service.deactivate_vip_membership(membership.membership_id, owner_id="intruder")

        assert exc_info.value.status_code == 404
        assert await service.is_vip_member("creator", "fan") is True

    async def test_renew_extends_from_expiry(self, beanie_db, service: VipService):
        membership = await service.create_vip_membership("creator", "fan", "Roaster")
        await service.deactivate_vip_membership(membership.membership_id)
        stored = await VipMembership.find_one(VipMembership.membership_id == membership.membership_id)
        assert stored is not None

        renewed = await service.renew_vip_membership(membership.membership_id, duration_months=2)

        assert renewed.is_active is True
        assert renewed.expires_at == add_months(stored.expires_at, 2)
        assert renewed.expires_at > utc_now()

    async def test_memberships_most_recent_first(self, beanie_db, service: VipService):
        await service.create_vip_membership("creator", "fan_1", "Roaster")
        await service.create_vip_membership("creator", "fan_2", "Roaster")
        await service.create_vip_membership("other", "fan_3", "Roaster")

        memberships = await service.get_vip_memberships("creator")

        assert [m.subscriber_id for m in memberships] == ["fan_2", "fan_1"]

    async def test_renew_unknown(self, beanie_db, service: VipService):
        with pytest.raises(AppError) as exc_info:
            await service.renew_vip_membership("vm_missing")

        assert exc_info.value.errcode == "E_MEMBERSHIP_NOT_FOUND"
