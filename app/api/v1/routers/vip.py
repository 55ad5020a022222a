from fastapi import APIRouter, Depends, Query

from app.api.v1.dependency import CurrentUser
from app.api.v1.schemas.base import ApiOut, FlagOut
from app.api.v1.schemas.vip import (
    BadgeOut,
    CreateMembershipIn,
    ListMembershipsOut,
    MembershipIdIn,
    MembershipOut,
    RenewMembershipIn,
)
from app.domain.vip.vip_domain import VipService

router = APIRouter(prefix="/vip")

# Singleton instance
_vip_service = VipService()


def get_vip_service() -> VipService:
    """Get the singleton VipService instance."""
    return _vip_service


@router.post("/create_membership")
async def create_membership(
    payload: CreateMembershipIn,
    user: CurrentUser,
    service: VipService = Depends(get_vip_service),
) -> ApiOut[MembershipOut]:
    """Grant a VIP badge in the authenticated creator's club."""
    membership = await service.create_vip_membership(
        owner_id=user.user_id,
        subscriber_id=payload.subscriber_id,
        badge_text=payload.badge_text,
        duration_months=payload.duration_months,
        badge_color=payload.badge_color,
    )

    return ApiOut[MembershipOut](results=MembershipOut(**membership.model_dump()))


@router.get("/list_memberships")
async def list_memberships(
    user: CurrentUser,
    active_only: bool = Query(True, description="Only active memberships"),
    service: VipService = Depends(get_vip_service),
) -> ApiOut[ListMembershipsOut]:
    """Memberships of the authenticated creator's club, newest activation first."""
    memberships = await service.get_vip_memberships(user.user_id, active_only=active_only)

    return ApiOut[ListMembershipsOut](
        results=ListMembershipsOut(memberships=[MembershipOut(**m.model_dump()) for m in memberships])
    )


@router.get("/is_vip_member")
async def is_vip_member(
    user: CurrentUser,
    owner_id: str = Query(..., description="Creator owning the club"),
    subscriber_id: str | None = Query(None, description="Defaults to the authenticated user"),
    service: VipService = Depends(get_vip_service),
) -> ApiOut[FlagOut]:
    value = await service.is_vip_member(owner_id, subscriber_id or user.user_id)

    return ApiOut[FlagOut](results=FlagOut(value=value))


@router.post("/deactivate_membership")
async def deactivate_membership(
    payload: MembershipIdIn,
    user: CurrentUser,
    service: VipService = Depends(get_vip_service),
) -> ApiOut[MembershipOut]:
    membership = await service.deactivate_vip_membership(payload.membership_id, owner_id=user.user_id)

    return ApiOut[MembershipOut](results=MembershipOut(**membership.model_dump()))


@router.post("/renew_membership")
async def renew_membership(
    payload: RenewMembershipIn,
    user: CurrentUser,
    service: VipService = Depends(get_vip_service),
) -> ApiOut[MembershipOut]:
    membership = await service.renew_vip_membership(
        payload.membership_id,
        duration_months=payload.duration_months,
        owner_id=user.user_id,
    )

    return ApiOut[MembershipOut](results=MembershipOut(**membership.model_dump()))


@router.get("/get_badge")
async def get_badge(
    user: CurrentUser,
    owner_id: str = Query(..., description="Creator owning the club"),
    subscriber_id: str = Query(..., description="Chat participant"),
    service: VipService = Depends(get_vip_service),
) -> ApiOut[BadgeOut | None]:
    """Badge to render next to `subscriber_id` in `owner_id`'s chat, or null."""
    badge = await service.get_vip_badge(owner_id, subscriber_id)

    return ApiOut[BadgeOut | None](results=BadgeOut(**badge.model_dump()) if badge else None)
