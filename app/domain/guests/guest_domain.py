"""Guest seat domain service.

Up to nine viewers can join a live stream next to its host. The host invites,
removes and rearranges guests and can lock the seats; guests control their own
mic and camera. Seat activity is logged for display in the chat.
"""

from datetime import timedelta
from typing import Any

from beanie.odm.queries.update import UpdateResponse
from beanie.operators import In, Set
from loguru import logger
from pymongo.errors import DuplicateKeyError

from app.schemas import (
    GuestEvent,
    GuestEventType,
    GuestInvitation,
    GuestSeat,
    InvitationStatus,
    LiveStreamStatus,
    NotificationType,
)
from app.schemas.schema_utils import NEWEST_FIRST, utc_now
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ..live.live_models import LiveStreamResponse
from ..live.stream_domain import LiveStreamService
from ..notifications.notification_domain import NotificationService
from ..notifications.notification_models import NotificationCreateParams
from ..utils.idgen import new_guest_event_id, new_invitation_id, new_seat_id
from .guest_models import (
    GUEST_EVENTS_LIMIT,
    INVITATION_TTL_MINUTES,
    MAX_GUEST_SEATS,
    GuestEventResponse,
    GuestInvitationResponse,
    GuestSeatResponse,
)


def _seats_full() -> AppError:
    return AppError(
        errcode=AppErrorCode.E_SEATS_FULL,
        errmesg="All guest seats are currently full",
        status_code=HttpStatusCode.CONFLICT,
    )


def _already_seated(user_id: str) -> AppError:
    return AppError(
        errcode=AppErrorCode.E_ALREADY_SEATED,
        errmesg=f"User {user_id} already has a guest seat",
        status_code=HttpStatusCode.CONFLICT,
    )


class GuestService:
    def __init__(
        self,
        streams: LiveStreamService | None = None,
        notifications: NotificationService | None = None,
    ):
        self._streams = streams or LiveStreamService()
        self._notifications = notifications or NotificationService()

    @staticmethod
    def _ensure_live(stream: LiveStreamResponse) -> None:
        if stream.status != LiveStreamStatus.LIVE:
            raise AppError(
                errcode=AppErrorCode.E_STREAM_NOT_LIVE,
                errmesg=f"Live stream has ended: {stream.stream_id}",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

    # ==================== SEATS ====================

    async def get_guest_seats(self, stream_id: str, active_only: bool = False) -> list[GuestSeatResponse]:
        """Seats of the stream ordered by index; `active_only` drops guests who left."""
        conditions: list[Any] = [GuestSeat.stream_id == stream_id]
        if active_only:
            conditions.append(GuestSeat.is_active == True)  # noqa: E712
        seats = await GuestSeat.find(*conditions).sort("+seat_index", "+joined_at").to_list()
        return [GuestSeatResponse(**s.model_dump(exclude={"id"})) for s in seats]

    async def get_active_guest_seats(self, stream_id: str) -> list[GuestSeatResponse]:
        return await self.get_guest_seats(stream_id, active_only=True)

    async def find_available_seat_index(self, stream_id: str) -> int | None:
        """Lowest free seat index, or None when every seat is taken."""
        occupied = {seat.seat_index for seat in await self.get_active_guest_seats(stream_id)}
        for index in range(MAX_GUEST_SEATS):
            if index not in occupied:
                return index
        return None

    async def _find_active_seat(self, stream_id: str, user_id: str) -> GuestSeat | None:
        return await GuestSeat.find_one(
            GuestSeat.stream_id == stream_id,
            GuestSeat.user_id == user_id,
            GuestSeat.is_active == True,  # noqa: E712
        )

    async def _update_active_seat(self, stream_id: str, user_id: str, changes: dict[str, Any]) -> GuestSeat | None:
        """Apply `changes` to the user's active seat and return it, or None when not seated."""
        return await GuestSeat.find_one(
            GuestSeat.stream_id == stream_id,
            GuestSeat.user_id == user_id,
            GuestSeat.is_active == True,  # noqa: E712
        ).update(
            Set({**changes, "updated_at": utc_now()}),
            response_type=UpdateResponse.NEW_DOCUMENT,
        )  # type: ignore[return-value]

    async def _release_seat(self, stream_id: str, user_id: str) -> GuestSeat | None:
        return await self._update_active_seat(stream_id, user_id, {"is_active": False, "left_at": utc_now()})

    async def _take_seat(self, stream_id: str, user_id: str, seat_index: int, display_name: str) -> GuestSeat:
        """Insert an active seat, moving to the next free index if `seat_index` got taken."""
        for _ in range(MAX_GUEST_SEATS):
            seat = GuestSeat(
                seat_id=new_seat_id(),
                stream_id=stream_id,
                user_id=user_id,
                seat_index=seat_index,
                display_name=display_name,
            )
            try:
                await seat.insert()
                return seat
            except DuplicateKeyError:
                if await self._find_active_seat(stream_id, user_id):
                    raise _already_seated(user_id)
                next_index = await self.find_available_seat_index(stream_id)
                if next_index is None:
                    raise _seats_full()
                logger.debug(f"Seat {seat_index} of stream {stream_id} taken, trying seat {next_index}")
                seat_index = next_index

        raise _seats_full()

    # ==================== INVITATIONS ====================

    async def _expire_invitations(self, stream_id: str, invitee_id: str) -> None:
        await GuestInvitation.find(
            GuestInvitation.stream_id == stream_id,
            GuestInvitation.invitee_id == invitee_id,
            GuestInvitation.status == InvitationStatus.PENDING,
            GuestInvitation.expires_at < utc_now(),
        ).update(Set({GuestInvitation.status: InvitationStatus.EXPIRED}))

    async def invite_guest(self, stream_id: str, inviter_id: str, invitee_id: str) -> GuestInvitationResponse:
        """Offer the lowest free seat to `invitee_id`. Only the host may invite."""
        stream = await self._streams.ensure_host(stream_id, inviter_id)
        self._ensure_live(stream)

        if stream.seats_locked:
            raise AppError(
                errcode=AppErrorCode.E_SEATS_LOCKED,
                errmesg="Seats are currently locked",
                status_code=HttpStatusCode.CONFLICT,
            )

        if await self._find_active_seat(stream_id, invitee_id):
            raise _already_seated(invitee_id)

        seat_index = await self.find_available_seat_index(stream_id)
        if seat_index is None:
            raise _seats_full()

        await self._expire_invitations(stream_id, invitee_id)

        now = utc_now()
        invitation = GuestInvitation(
            invitation_id=new_invitation_id(),
            stream_id=stream_id,
            inviter_id=inviter_id,
            invitee_id=invitee_id,
            seat_index=seat_index,
            created_at=now,
            expires_at=now + timedelta(minutes=INVITATION_TTL_MINUTES),
        )
        try:
            await invitation.insert()
        except DuplicateKeyError:
            raise AppError(
                errcode=AppErrorCode.E_ALREADY_INVITED,
                errmesg="User already has a pending invitation",
                status_code=HttpStatusCode.CONFLICT,
            )

        logger.info(f"User {inviter_id} invited {invitee_id} to seat {seat_index} of stream {stream_id}")

        await self._notifications.create_notification(
            NotificationCreateParams(
                type=NotificationType.STREAM_STARTED,
                sender_id=inviter_id,
                receiver_id=invitee_id,
                ref_stream_id=stream_id,
                message="invited you to join their live stream",
            )
        )

        return GuestInvitationResponse(**invitation.model_dump(exclude={"id"}))

    async def accept_invitation(
        self, invitation_id: str, user_id: str, display_name: str | None = None
    ) -> GuestSeatResponse:
        """Seat the invitee. Raises 404 when there is no pending invitation, 400 when it expired."""
        invitation = await GuestInvitation.find_one(
            GuestInvitation.invitation_id == invitation_id,
            GuestInvitation.invitee_id == user_id,
            GuestInvitation.status == InvitationStatus.PENDING,
        )
        if invitation is None:
            raise AppError(
                errcode=AppErrorCode.E_INVITATION_NOT_FOUND,
                errmesg="Invitation not found or expired",
                status_code=HttpStatusCode.NOT_FOUND,
            )

        if invitation.expires_at < utc_now():
            await GuestInvitation.find(GuestInvitation.invitation_id == invitation_id).update(
                Set({GuestInvitation.status: InvitationStatus.EXPIRED})
            )
            raise AppError(
                errcode=AppErrorCode.E_INVITATION_EXPIRED,
                errmesg="Invitation has expired",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        stream = await self._streams.get_stream(invitation.stream_id)
        self._ensure_live(stream)

        seat = await self._take_seat(invitation.stream_id, user_id, invitation.seat_index, display_name or "Guest")

        await GuestInvitation.find(GuestInvitation.invitation_id == invitation_id).update(
            Set({GuestInvitation.status: InvitationStatus.ACCEPTED, GuestInvitation.responded_at: utc_now()})
        )
        await self.log_guest_event(seat.stream_id, user_id, GuestEventType.JOINED_LIVE, seat.display_name)

        logger.info(f"User {user_id} joined stream {seat.stream_id} on seat {seat.seat_index}")
        return GuestSeatResponse(**seat.model_dump(exclude={"id"}))

    async def decline_invitation(self, invitation_id: str, user_id: str) -> bool:
        result = await GuestInvitation.find(
            GuestInvitation.invitation_id == invitation_id,
            GuestInvitation.invitee_id == user_id,
            GuestInvitation.status == InvitationStatus.PENDING,
        ).update(Set({GuestInvitation.status: InvitationStatus.DECLINED, GuestInvitation.responded_at: utc_now()}))
        return bool(result and result.modified_count)

    # ==================== GUEST ACTIONS ====================

    async def leave_guest_seat(self, stream_id: str, user_id: str) -> bool:
        seat = await self._release_seat(stream_id, user_id)
        if seat is None:
            return False

        await self.log_guest_event(stream_id, user_id, GuestEventType.LEFT_LIVE, seat.display_name)
        return True

    async def remove_guest(self, stream_id: str, user_id: str, host_id: str) -> bool:
        await self._streams.ensure_host(stream_id, host_id)

        seat = await self._release_seat(stream_id, user_id)
        if seat is None:
            return False

        await self.log_guest_event(stream_id, user_id, GuestEventType.HOST_REMOVED, seat.display_name)
        logger.info(f"Host {host_id} removed guest {user_id} from stream {stream_id}")
        return True

    async def update_mic_status(self, stream_id: str, user_id: str, actor_id: str, mic_enabled: bool) -> bool:
        """Toggle the guest's mic; allowed for the guest and the host."""
        if actor_id != user_id:
            await self._streams.ensure_host(stream_id, actor_id)

        seat = await self._update_active_seat(stream_id, user_id, {"mic_enabled": mic_enabled})
        if seat is None:
            return False

        event = GuestEventType.UNMUTED_MIC if mic_enabled else GuestEventType.MUTED_MIC
        await self.log_guest_event(stream_id, user_id, event, seat.display_name)
        return True

    async def update_camera_status(self, stream_id: str, user_id: str, actor_id: str, camera_enabled: bool) -> bool:
        """Toggle the guest's camera; allowed for the guest and the host."""
        if actor_id != user_id:
            await self._streams.ensure_host(stream_id, actor_id)

        seat = await self._update_active_seat(stream_id, user_id, {"camera_enabled": camera_enabled})
        if seat is None:
            return False

        event = GuestEventType.ENABLED_CAMERA if camera_enabled else GuestEventType.DISABLED_CAMERA
        await self.log_guest_event(stream_id, user_id, event, seat.display_name)
        return True

    # ==================== HOST ACTIONS ====================

    async def set_guest_moderator(self, stream_id: str, user_id: str, host_id: str, is_moderator: bool) -> bool:
        await self._streams.ensure_host(stream_id, host_id)

        seat = await self._update_active_seat(stream_id, user_id, {"is_moderator": is_moderator})
        if seat is None:
            return False

        event = GuestEventType.BECAME_MODERATOR if is_moderator else GuestEventType.REMOVED_MODERATOR
        await self.log_guest_event(stream_id, user_id, event, seat.display_name)
        return True

    async def set_seats_locked(self, stream_id: str, host_id: str, locked: bool) -> bool:
        """Lock or unlock the seats; a locked stream accepts no new invitations."""
        await self._streams.ensure_host(stream_id, host_id)
        changed = await self._streams.set_seats_locked(stream_id, locked)
        logger.info(f"Seats of stream {stream_id} {'locked' if locked else 'unlocked'}")
        return changed

    async def swap_seats(self, stream_id: str, host_id: str, seat_index_1: int, seat_index_2: int) -> bool:
        """Exchange the guests on two occupied seats. Returns False unless both are occupied."""
        await self._streams.ensure_host(stream_id, host_id)

        indexes = (seat_index_1, seat_index_2)
        if seat_index_1 == seat_index_2 or not all(0 <= i < MAX_GUEST_SEATS for i in indexes):
            raise AppError(
                errcode=AppErrorCode.E_INVALID_PARAMS,
                errmesg=f"Seat indexes must be two different values between 0 and {MAX_GUEST_SEATS - 1}",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        seats = await GuestSeat.find(
            GuestSeat.stream_id == stream_id,
            GuestSeat.is_active == True,  # noqa: E712
            In(GuestSeat.seat_index, list(indexes)),
        ).to_list()
        by_index = {seat.seat_index: seat for seat in seats}
        if len(by_index) != 2:
            logger.warning(f"Could not find both seats {indexes} in stream {stream_id}")
            return False

        first, second = by_index[seat_index_1], by_index[seat_index_2]
        now = utc_now()

        # Active seat indexes are unique, so the first guest parks on a negative index
        await GuestSeat.find(GuestSeat.seat_id == first.seat_id).update(
            Set({GuestSeat.seat_index: -1 - seat_index_1, GuestSeat.updated_at: now})
        )
        await GuestSeat.find(GuestSeat.seat_id == second.seat_id).update(
            Set({GuestSeat.seat_index: seat_index_1, GuestSeat.updated_at: now})
        )
        await GuestSeat.find(GuestSeat.seat_id == first.seat_id).update(
            Set({GuestSeat.seat_index: seat_index_2, GuestSeat.updated_at: now})
        )

        logger.info(f"Swapped seats {seat_index_1} and {seat_index_2} in stream {stream_id}")
        return True

    async def end_all_guest_sessions(self, stream_id: str, host_id: str | None = None) -> int:
        """Release every active seat of the stream; returns how many were released."""
        if host_id is not None:
            await self._streams.ensure_host(stream_id, host_id)

        now = utc_now()
        result = await GuestSeat.find(
            GuestSeat.stream_id == stream_id,
            GuestSeat.is_active == True,  # noqa: E712
        ).update(Set({GuestSeat.is_active: False, GuestSeat.left_at: now, GuestSeat.updated_at: now}))

        released = result.modified_count if result else 0
        logger.info(f"Ended {released} guest sessions in stream {stream_id}")
        return released

    # ==================== EVENTS ====================

    async def log_guest_event(
        self,
        stream_id: str,
        user_id: str | None,
        event_type: GuestEventType,
        display_name: str,
        metadata: dict[str, Any] | None = None,
    ) -> GuestEventResponse:
        event = GuestEvent(
            event_id=new_guest_event_id(),
            stream_id=stream_id,
            user_id=user_id,
            event_type=event_type,
            display_name=display_name,
            metadata=metadata or {},
        )
        await event.insert()
        return GuestEventResponse(**event.model_dump(exclude={"id"}))

    async def get_guest_events(self, stream_id: str, limit: int = GUEST_EVENTS_LIMIT) -> list[GuestEventResponse]:
        """Most recent seat events of the stream, newest first."""
        events = (
            await GuestEvent.find(GuestEvent.stream_id == stream_id)
            .sort(NEWEST_FIRST)  # type: ignore
            .limit(limit)
            .to_list()
        )
        return [GuestEventResponse(**e.model_dump(exclude={"id"})) for e in events]
