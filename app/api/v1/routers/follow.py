from fastapi import APIRouter, Depends, Query

from app.api.v1.dependency import CurrentUser
from app.api.v1.schemas.base import ApiOut, ChangedOut, FlagOut
from app.api.v1.schemas.follow import FollowOut, FollowUserIn, ListFollowsOut
from app.domain.follow.follow_domain import FollowService

router = APIRouter(prefix="/follow")

# Singleton instance
_follow_service = FollowService()


def get_follow_service() -> FollowService:
    """Get the singleton FollowService instance."""
    return _follow_service


@router.post("/follow_user")
async def follow_user(
    payload: FollowUserIn,
    user: CurrentUser,
    service: FollowService = Depends(get_follow_service),
) -> ApiOut[FollowOut]:
    follow = await service.follow_user(follower_id=user.user_id, following_id=payload.user_id)

    return ApiOut[FollowOut](results=FollowOut(**follow.model_dump()))


@router.post("/unfollow_user")
async def unfollow_user(
    payload: FollowUserIn,
    user: CurrentUser,
    service: FollowService = Depends(get_follow_service),
) -> ApiOut[ChangedOut]:
    changed = await service.unfollow_user(follower_id=user.user_id, following_id=payload.user_id)

    return ApiOut[ChangedOut](results=ChangedOut(changed=changed))


@router.get("/is_following")
async def is_following(
    user: CurrentUser,
    user_id: str = Query(..., description="User who may be followed"),
    service: FollowService = Depends(get_follow_service),
) -> ApiOut[FlagOut]:
    """Whether the authenticated user follows `user_id`."""
    value = await service.is_following(follower_id=user.user_id, following_id=user_id)

    return ApiOut[FlagOut](results=FlagOut(value=value))


@router.get("/list_followers")
async def list_followers(
    user: CurrentUser,
    user_id: str | None = Query(None, description="Defaults to the authenticated user"),
    service: FollowService = Depends(get_follow_service),
) -> ApiOut[ListFollowsOut]:
    follows = await service.get_followers(user_id or user.user_id)

    return ApiOut[ListFollowsOut](
        results=ListFollowsOut(follows=[FollowOut(**f.model_dump()) for f in follows])
    )


@router.get("/list_following")
async def list_following(
    user: CurrentUser,
    user_id: str | None = Query(None, description="Defaults to the authenticated user"),
    service: FollowService = Depends(get_follow_service),
) -> ApiOut[ListFollowsOut]:
    follows = await service.get_following(user_id or user.user_id)

    return ApiOut[ListFollowsOut](
        results=ListFollowsOut(follows=[FollowOut(**f.model_dump()) for f in follows])
    )
