"""Tests for the guest seat domain service."""

import asyncio
from datetime import timedelta

import pytest

from app.domain.guests.guest_domain import GuestService
from app.domain.guests.guest_models import MAX_GUEST_SEATS
from app.domain.live.stream_domain import LiveStreamService
from app.schemas import GuestEventType, GuestInvitation, GuestSeat, InvitationStatus, Notification
from app.schemas.schema_utils import utc_now
from app.utils.app_errors import AppError

STREAM_ID = "live_1"


@pytest.fixture
def service() -> GuestService:
    return GuestService()


@pytest.fixture
async def stream(beanie_db) -> str:
    await LiveStreamService().record_stream(STREAM_ID, "host", "Roast night")
    return STREAM_ID


async def seat_guest(service: GuestService, user_id: str, display_name: str | None = None):
    invitation = await service.invite_guest(STREAM_ID, "host", user_id)
    return await service.accept_invitation(invitation.invitation_id, user_id, display_name)


@pytest.mark.usefixtures("clear_collections")
class TestInvitations:
    async def test_invite_accept_leave(self, stream: str, service: GuestService):
        invitation = await service.invite_guest(stream, "host", "guest")
        assert invitation.seat_index == 0
        assert invitation.status == InvitationStatus.PENDING
        assert await Notification.find_one(Notification.receiver_id == "guest") is not None

        seat = await service.accept_invitation(invitation.invitation_id, "guest", "Roaster")
        assert seat.seat_index == 0
        assert seat.display_name == "Roaster"
        assert [s.user_id for s in await service.get_active_guest_seats(stream)] == ["guest"]

        assert await service.leave_guest_seat(stream, "guest") is True
        assert await service.get_active_guest_seats(stream) == []
        assert len(await service.get_guest_seats(stream)) == 1

        events = await service.get_guest_events(stream)
        assert [e.event_type for e in events] == [GuestEventType.LEFT_LIVE, GuestEventType.JOINED_LIVE]

    async def test_only_host_invites(self, stream: str, service: GuestService):
        with pytest.raises(AppError) as exc_info:
            await service.invite_guest(stream, "guest", "friend")

        assert exc_info.value.status_code == 403

    async def test_ended_stream(self, stream: str, service: GuestService):
        await LiveStreamService().end_stream(stream)

        with pytest.raises(AppError) as exc_info:
            await service.invite_guest(stream, "host", "guest")

        assert exc_info.value.errcode == "E_STREAM_NOT_LIVE"

    async def test_pending_invitation_not_duplicated(self, stream: str, service: GuestService):
        await service.invite_guest(stream, "host", "guest")

        with pytest.raises(AppError) as exc_info:
            await service.invite_guest(stream, "host", "guest")

        assert exc_info.value.status_code == 409
        assert exc_info.value.errmesg == "User already has a pending invitation"

    async def test_expired_invitation_can_be_renewed(self, stream: str, service: GuestService):
        first = await service.invite_guest(stream, "host", "guest")
        await GuestInvitation.find(GuestInvitation.invitation_id == first.invitation_id).update(
            {"$set": {"expires_at": utc_now() - timedelta(seconds=1)}}
        )

        with pytest.raises(AppError) as exc_info:
            await service.accept_invitation(first.invitation_id, "guest")
        assert exc_info.value.errmesg == "Invitation has expired"

        second = await service.invite_guest(stream, "host", "guest")
        assert second.invitation_id != first.invitation_id

    async def test_accept_someone_elses_invitation(self, stream: str, service: GuestService):
        invitation = await service.invite_guest(stream, "host", "guest")

        with pytest.raises(AppError) as exc_info:
            await service.accept_invitation(invitation.invitation_id, "intruder")

        assert exc_info.value.status_code == 404

    async def test_decline(self, stream: str, service: GuestService):
        invitation = await service.invite_guest(stream, "host", "guest")

        assert await service.decline_invitation(invitation.invitation_id, "guest") is True
        assert await service.decline_invitation(invitation.invitation_id, "guest") is False

    async def test_seated_guest_not_invited_again(self, stream: str, service: GuestService):
        await seat_guest(service, "guest")

        with pytest.raises(AppError) as exc_info:
            await service.invite_guest(stream, "host", "guest")

        assert exc_info.value.errcode == "E_ALREADY_SEATED"


@pytest.mark.usefixtures("clear_collections")
class TestSeats:
    async def test_seats_full(self, stream: str, service: GuestService):
        for i in range(MAX_GUEST_SEATS):
            await seat_guest(service, f"guest{i}")

        with pytest.raises(AppError) as exc_info:
            await service.invite_guest(stream, "host", "one_too_many")

        assert exc_info.value.errcode == "E_SEATS_FULL"

    async def test_concurrent_accepts_get_distinct_seats(self, stream: str, service: GuestService):
        """Two invitations for the same free seat both end up seated, on different indexes."""
        first = await service.invite_guest(stream, "host", "a")
        second = await service.invite_guest(stream, "host", "b")
        assert first.seat_index == second.seat_index == 0

        seats = await asyncio.gather(
            service.accept_invitation(first.invitation_id, "a"),
            service.accept_invitation(second.invitation_id, "b"),
        )

        assert sorted(s.seat_index for s in seats) == [0, 1]

    async def test_locked_seats(self, stream: str, service: GuestService):
        assert await service.set_seats_locked(stream, "host", True) is True

        with pytest.raises(AppError) as exc_info:
            await service.invite_guest(stream, "host", "guest")
        assert exc_info.value.errcode == "E_SEATS_LOCKED"

        await service.set_seats_locked(stream, "host", False)
        await service.invite_guest(stream, "host", "guest")

    async def test_lock_requires_host(self, stream: str, service: GuestService):
        with pytest.raises(AppError) as exc_info:
            await service.set_seats_locked(stream, "guest", True)

        assert exc_info.value.status_code == 403

    async def test_swap(self, stream: str, service: GuestService):
        await seat_guest(service, "a")
        await seat_guest(service, "b")

        assert await service.swap_seats(stream, "host", 0, 1) is True

        seats = {s.user_id: s.seat_index for s in await service.get_active_guest_seats(stream)}
        assert seats == {"a": 1, "b": 0}

    async def test_swap_with_empty_seat(self, stream: str, service: GuestService):
        await seat_guest(service, "a")

        assert await service.swap_seats(stream, "host", 0, 3) is False

    async def test_swap_same_seat(self, stream: str, service: GuestService):
        with pytest.raises(AppError) as exc_info:
            await service.swap_seats(stream, "host", 2, 2)

        assert exc_info.value.status_code == 400

    async def test_end_all_sessions(self, stream: str, service: GuestService):
        await seat_guest(service, "a")
        await seat_guest(service, "b")

        assert await service.end_all_guest_sessions(stream, "host") == 2
        assert await GuestSeat.find(GuestSeat.is_active == True).count() == 0  # noqa: E712


@pytest.mark.usefixtures("clear_collections")
class TestGuestControls:
    async def test_guest_mutes_self(self, stream: str, service: GuestService):
        await seat_guest(service, "guest")

        assert await service.update_mic_status(stream, "guest", "guest", False) is True

        seat = (await service.get_active_guest_seats(stream))[0]
        assert seat.mic_enabled is False
        assert (await service.get_guest_events(stream))[0].event_type == GuestEventType.MUTED_MIC

    async def test_host_turns_off_camera(self, stream: str, service: GuestService):
        await seat_guest(service, "guest")

        assert await service.update_camera_status(stream, "guest", "host", False) is True
        assert (await service.get_active_guest_seats(stream))[0].camera_enabled is False

    async def test_other_guest_cannot_mute(self, stream: str, service: GuestService):
        await seat_guest(service, "a")
        await seat_guest(service, "b")

        with pytest.raises(AppError) as exc_info:
            await service.update_mic_status(stream, "a", "b", False)

        assert exc_info.value.status_code == 403

    async def test_remove_and_promote(self, stream: str, service: GuestService):
        await seat_guest(service, "guest")

        assert await service.set_guest_moderator(stream, "guest", "host", True) is True
        assert (await service.get_active_guest_seats(stream))[0].is_moderator is True

        assert await service.remove_guest(stream, "guest", "host") is True
        assert await service.remove_guest(stream, "guest", "host") is False
        assert (await service.get_guest_events(stream))[0].event_type == GuestEventType.HOST_REMOVED
