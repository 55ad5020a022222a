from fastapi import APIRouter, Depends, Query

from app.api.v1.dependency import CurrentUser
from app.api.v1.schemas.base import ApiOut, ChangedOut, CountOut, FlagOut
from app.api.v1.schemas.comments import CommentOut
from app.api.v1.schemas.moderation import (
    BannedUserOut,
    BanUserIn,
    CommentLikeIn,
    CommentLikeOut,
    ListBannedUsersOut,
    ListModeratorsOut,
    ModeratorOut,
    PinCommentIn,
    PinnedCommentOut,
    RemoveCommentIn,
    StreamerUserIn,
    TimeoutOut,
    TimeoutUserIn,
    UnpinCommentIn,
)
from app.domain.moderation.moderation_domain import ModerationService

router = APIRouter(prefix="/moderation")

# Singleton instance
_moderation_service = ModerationService()


def get_moderation_service() -> ModerationService:
    """Get the singleton ModerationService instance."""
    return _moderation_service


# ==================== MODERATORS ====================


@router.get("/is_moderator")
async def is_moderator(
    user: CurrentUser,
    streamer_id: str = Query(..., description="Streamer identifier"),
    user_id: str | None = Query(None, description="Defaults to the authenticated user"),
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[FlagOut]:
    value = await service.is_moderator(streamer_id, user_id or user.user_id)

    return ApiOut[FlagOut](results=FlagOut(value=value))


@router.post("/add_moderator")
async def add_moderator(
    payload: StreamerUserIn,
    user: CurrentUser,
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[ModeratorOut]:
    await service.ensure_can_moderate(payload.streamer_id, user.user_id)
    moderator = await service.add_moderator(payload.streamer_id, payload.user_id)

    return ApiOut[ModeratorOut](results=ModeratorOut(**moderator.model_dump()))


@router.post("/remove_moderator")
async def remove_moderator(
    payload: StreamerUserIn,
    user: CurrentUser,
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[ChangedOut]:
    await service.ensure_can_moderate(payload.streamer_id, user.user_id)
    changed = await service.remove_moderator(payload.streamer_id, payload.user_id)

    return ApiOut[ChangedOut](results=ChangedOut(changed=changed))


@router.get("/list_moderators")
async def list_moderators(
    user: CurrentUser,
    streamer_id: str = Query(..., description="Streamer identifier"),
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[ListModeratorsOut]:
    moderators = await service.get_moderators(streamer_id)

    return ApiOut[ListModeratorsOut](
        results=ListModeratorsOut(moderators=[ModeratorOut(**m.model_dump()) for m in moderators])
    )


# ==================== BANS ====================


@router.get("/is_banned")
async def is_banned(
    user: CurrentUser,
    streamer_id: str = Query(..., description="Streamer identifier"),
    user_id: str | None = Query(None, description="Defaults to the authenticated user"),
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[FlagOut]:
    value = await service.is_banned(streamer_id, user_id or user.user_id)

    return ApiOut[FlagOut](results=FlagOut(value=value))


@router.post("/ban_user")
async def ban_user(
    payload: BanUserIn,
    user: CurrentUser,
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[BannedUserOut]:
    await service.ensure_can_moderate(payload.streamer_id, user.user_id)
    ban = await service.ban_user(payload.streamer_id, payload.user_id, reason=payload.reason)

    return ApiOut[BannedUserOut](results=BannedUserOut(**ban.model_dump()))


@router.post("/unban_user")
async def unban_user(
    payload: StreamerUserIn,
    user: CurrentUser,
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[ChangedOut]:
    await service.ensure_can_moderate(payload.streamer_id, user.user_id)
    changed = await service.unban_user(payload.streamer_id, payload.user_id)

    return ApiOut[ChangedOut](results=ChangedOut(changed=changed))


@router.get("/list_banned_users")
async def list_banned_users(
    user: CurrentUser,
    streamer_id: str = Query(..., description="Streamer identifier"),
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[ListBannedUsersOut]:
    await service.ensure_can_moderate(streamer_id, user.user_id)
    bans = await service.get_banned_users(streamer_id)

    return ApiOut[ListBannedUsersOut](
        results=ListBannedUsersOut(banned_users=[BannedUserOut(**b.model_dump()) for b in bans])
    )


# ==================== TIMEOUTS ====================


@router.post("/timeout_user")
async def timeout_user(
    payload: TimeoutUserIn,
    user: CurrentUser,
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[TimeoutOut]:
    """Mute a user in one stream for 1 to 60 minutes."""
    await service.ensure_can_moderate_stream(payload.stream_id, user.user_id)
    timeout = await service.timeout_user(payload.stream_id, payload.user_id, payload.duration_minutes)

    return ApiOut[TimeoutOut](results=TimeoutOut(**timeout.model_dump()))


@router.get("/is_timed_out")
async def is_timed_out(
    user: CurrentUser,
    stream_id: str = Query(..., description="Stream identifier"),
    user_id: str | None = Query(None, description="Defaults to the authenticated user"),
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[FlagOut]:
    value = await service.is_timed_out(stream_id, user_id or user.user_id)

    return ApiOut[FlagOut](results=FlagOut(value=value))


# ==================== COMMENTS ====================


@router.post("/remove_comment")
async def remove_comment(
    payload: RemoveCommentIn,
    user: CurrentUser,
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[ChangedOut]:
    await service.ensure_can_moderate_comment(payload.comment_id, user.user_id)
    changed = await service.remove_comment(payload.comment_id)

    return ApiOut[ChangedOut](results=ChangedOut(changed=changed))


@router.post("/pin_comment")
async def pin_comment(
    payload: PinCommentIn,
    user: CurrentUser,
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[PinnedCommentOut]:
    """Pin a comment for 1 to 5 minutes, replacing the stream's current pin."""
    await service.ensure_can_moderate_stream(payload.stream_id, user.user_id)
    pin = await service.pin_comment(
        stream_id=payload.stream_id,
        comment_id=payload.comment_id,
        pinned_by=user.user_id,
        duration_minutes=payload.duration_minutes,
    )

    return ApiOut[PinnedCommentOut](results=PinnedCommentOut(**pin.model_dump(exclude={"comment"})))


@router.post("/unpin_comment")
async def unpin_comment(
    payload: UnpinCommentIn,
    user: CurrentUser,
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[ChangedOut]:
    await service.ensure_can_moderate_stream(payload.stream_id, user.user_id)
    changed = await service.unpin_comment(payload.stream_id)

    return ApiOut[ChangedOut](results=ChangedOut(changed=changed))


@router.get("/get_pinned_comment")
async def get_pinned_comment(
    user: CurrentUser,
    stream_id: str = Query(..., description="Stream identifier"),
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[PinnedCommentOut | None]:
    """The stream's live pin with its comment, or null when none or expired."""
    pin = await service.get_pinned_comment(stream_id)
    if pin is None:
        return ApiOut[PinnedCommentOut | None](results=None)

    return ApiOut[PinnedCommentOut | None](
        results=PinnedCommentOut(
            **pin.model_dump(exclude={"comment"}),
            comment=CommentOut(**pin.comment.model_dump()) if pin.comment else None,
        )
    )


# ==================== LIKES ====================


@router.post("/like_comment")
async def like_comment(
    payload: CommentLikeIn,
    user: CurrentUser,
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[CommentLikeOut]:
    like = await service.like_comment(payload.comment_id, user.user_id)

    return ApiOut[CommentLikeOut](results=CommentLikeOut(**like.model_dump()))


@router.post("/unlike_comment")
async def unlike_comment(
    payload: CommentLikeIn,
    user: CurrentUser,
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[ChangedOut]:
    changed = await service.unlike_comment(payload.comment_id, user.user_id)

    return ApiOut[ChangedOut](results=ChangedOut(changed=changed))


@router.get("/get_comment_likes_count")
async def get_comment_likes_count(
    user: CurrentUser,
    comment_id: str = Query(..., description="Comment identifier"),
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[CountOut]:
    count = await service.get_comment_likes_count(comment_id)

    return ApiOut[CountOut](results=CountOut(count=count))
