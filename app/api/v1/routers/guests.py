from fastapi import APIRouter, Depends, Query

from app.api.v1.dependency import CurrentUser
from app.api.v1.schemas.base import ApiOut, ChangedOut, CountOut
from app.api.v1.schemas.guests import (
    AcceptInvitationIn,
    GuestEventOut,
    GuestIn,
    GuestInvitationOut,
    GuestSeatOut,
    InvitationIn,
    InviteGuestIn,
    ListGuestEventsOut,
    ListGuestSeatsOut,
    SetGuestModeratorIn,
    SetSeatsLockedIn,
    StreamIn,
    SwapSeatsIn,
    UpdateCameraIn,
    UpdateMicIn,
)
from app.domain.guests.guest_domain import GuestService
from app.domain.guests.guest_models import GUEST_EVENTS_LIMIT

router = APIRouter(prefix="/guests")

# Singleton instance
_guest_service = GuestService()


def get_guest_service() -> GuestService:
    """Get the singleton GuestService instance."""
    return _guest_service


# ==================== SEATS ====================


@router.get("/list_seats")
async def list_seats(
    user: CurrentUser,
    stream_id: str = Query(..., description="Stream identifier"),
    active_only: bool = Query(True, description="Hide guests who already left"),
    service: GuestService = Depends(get_guest_service),
) -> ApiOut[ListGuestSeatsOut]:
    seats = await service.get_guest_seats(stream_id, active_only=active_only)

    return ApiOut[ListGuestSeatsOut](results=ListGuestSeatsOut(seats=[GuestSeatOut(**s.model_dump()) for s in seats]))


# ==================== INVITATIONS ====================


@router.post("/invite_guest")
async def invite_guest(
    payload: InviteGuestIn,
    user: CurrentUser,
    service: GuestService = Depends(get_guest_service),
) -> ApiOut[GuestInvitationOut]:
    """Offer a seat to a viewer. Only the stream host may invite."""
    invitation = await service.invite_guest(payload.stream_id, inviter_id=user.user_id, invitee_id=payload.invitee_id)

    return ApiOut[GuestInvitationOut](results=GuestInvitationOut(**invitation.model_dump()))


@router.post("/accept_invitation")
async def accept_invitation(
    payload: AcceptInvitationIn,
    user: CurrentUser,
    service: GuestService = Depends(get_guest_service),
) -> ApiOut[GuestSeatOut]:
    seat = await service.accept_invitation(payload.invitation_id, user.user_id, payload.display_name)

    return ApiOut[GuestSeatOut](results=GuestSeatOut(**seat.model_dump()))


@router.post("/decline_invitation")
async def decline_invitation(
    payload: InvitationIn,
    user: CurrentUser,
    service: GuestService = Depends(get_guest_service),
) -> ApiOut[ChangedOut]:
    changed = await service.decline_invitation(payload.invitation_id, user.user_id)

    return ApiOut[ChangedOut](results=ChangedOut(changed=changed))


# ==================== GUEST ACTIONS ====================


@router.post("/leave_seat")
async def leave_seat(
    payload: StreamIn,
    user: CurrentUser,
    service: GuestService = Depends(get_guest_service),
) -> ApiOut[ChangedOut]:
    changed = await service.leave_guest_seat(payload.stream_id, user.user_id)

    return ApiOut[ChangedOut](results=ChangedOut(changed=changed))


@router.post("/update_mic")
async def update_mic(
    payload: UpdateMicIn,
    user: CurrentUser,
    service: GuestService = Depends(get_guest_service),
) -> ApiOut[ChangedOut]:
    """Toggle a guest's mic. Guests change their own; the host may change anyone's."""
    changed = await service.update_mic_status(
        payload.stream_id, payload.user_id or user.user_id, actor_id=user.user_id, mic_enabled=payload.mic_enabled
    )

    return ApiOut[ChangedOut](results=ChangedOut(changed=changed))


@router.post("/update_camera")
async def update_camera(
    payload: UpdateCameraIn,
    user: CurrentUser,
    service: GuestService = Depends(get_guest_service),
) -> ApiOut[ChangedOut]:
    changed = await service.update_camera_status(
        payload.stream_id,
        payload.user_id or user.user_id,
        actor_id=user.user_id,
        camera_enabled=payload.camera_enabled,
    )

    return ApiOut[ChangedOut](results=ChangedOut(changed=changed))


# ==================== HOST ACTIONS ====================


@router.post("/remove_guest")
async def remove_guest(
    payload: GuestIn,
    user: CurrentUser,
    service: GuestService = Depends(get_guest_service),
) -> ApiOut[ChangedOut]:
    changed = await service.remove_guest(payload.stream_id, payload.user_id, host_id=user.user_id)

    return ApiOut[ChangedOut](results=ChangedOut(changed=changed))


@router.post("/set_moderator")
async def set_moderator(
    payload: SetGuestModeratorIn,
    user: CurrentUser,
    service: GuestService = Depends(get_guest_service),
) -> ApiOut[ChangedOut]:
    changed = await service.set_guest_moderator(
        payload.stream_id, payload.user_id, host_id=user.user_id, is_moderator=payload.is_moderator
    )

    return ApiOut[ChangedOut](results=ChangedOut(changed=changed))


@router.post("/set_seats_locked")
async def set_seats_locked(
    payload: SetSeatsLockedIn,
    user: CurrentUser,
    service: GuestService = Depends(get_guest_service),
) -> ApiOut[ChangedOut]:
    changed = await service.set_seats_locked(payload.stream_id, host_id=user.user_id, locked=payload.locked)

    return ApiOut[ChangedOut](results=ChangedOut(changed=changed))


@router.post("/swap_seats")
async def swap_seats(
    payload: SwapSeatsIn,
    user: CurrentUser,
    service: GuestService = Depends(get_guest_service),
) -> ApiOut[ChangedOut]:
    changed = await service.swap_seats(
        payload.stream_id, host_id=user.user_id, seat_index_1=payload.seat_index_1, seat_index_2=payload.seat_index_2
    )

    return ApiOut[ChangedOut](results=ChangedOut(changed=changed))


@router.post("/end_all_sessions")
async def end_all_sessions(
    payload: StreamIn,
    user: CurrentUser,
    service: GuestService = Depends(get_guest_service),
) -> ApiOut[CountOut]:
    """Release every guest seat of the stream."""
    released = await service.end_all_guest_sessions(payload.stream_id, host_id=user.user_id)

    return ApiOut[CountOut](results=CountOut(count=released))


# ==================== EVENTS ====================


@router.get("/list_events")
async def list_events(
    user: CurrentUser,
    stream_id: str = Query(..., description="Stream identifier"),
    limit: int = Query(GUEST_EVENTS_LIMIT, ge=1, le=200),
    service: GuestService = Depends(get_guest_service),
) -> ApiOut[ListGuestEventsOut]:
    events = await service.get_guest_events(stream_id, limit=limit)

    return ApiOut[ListGuestEventsOut](
        results=ListGuestEventsOut(events=[GuestEventOut(**e.model_dump()) for e in events])
    )
