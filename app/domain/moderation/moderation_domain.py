"""Moderation domain service.

Per-streamer moderator lists and bans, per-stream timeouts and pinned
comments, and comment likes.
"""

from datetime import timedelta

from beanie.operators import Set
from loguru import logger
from pymongo.errors import DuplicateKeyError

from app.schemas import (
    BannedUser,
    CommentLike,
    LiveComment,
    Moderator,
    NotificationType,
    PinnedComment,
    TimedOutUser,
)
from app.schemas.schema_utils import NEWEST_FIRST, utc_now
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ..comments.comment_models import CommentResponse
from ..live.stream_domain import LiveStreamService
from ..notifications.notification_domain import NotificationService
from ..notifications.notification_models import NotificationCreateParams
from ..utils.idgen import new_ban_id, new_like_id, new_moderator_id, new_pin_id, new_timeout_id
from ..utils.upsert import upsert_one
from .moderation_models import (
    PIN_MAX_MINUTES,
    PIN_MIN_MINUTES,
    TIMEOUT_MAX_MINUTES,
    TIMEOUT_MIN_MINUTES,
    BannedUserResponse,
    CommentLikeResponse,
    ModeratorResponse,
    PinnedCommentResponse,
    TimeoutResponse,
)


class ModerationService:
    def __init__(
        self,
        notifications: NotificationService | None = None,
        streams: LiveStreamService | None = None,
    ):
        self._notifications = notifications or NotificationService()
        self._streams = streams or LiveStreamService()

    # ==================== PERMISSIONS ====================

    async def can_moderate(self, streamer_id: str, actor_id: str) -> bool:
        """The streamer and their moderators may moderate."""
        if streamer_id == actor_id:
            return True
        return await self.is_moderator(streamer_id, actor_id)

    async def ensure_can_moderate(self, streamer_id: str, actor_id: str) -> None:
        if not await self.can_moderate(streamer_id, actor_id):
            logger.warning(f"User {actor_id} attempted to moderate for streamer {streamer_id}")
            raise AppError(
                errcode=AppErrorCode.E_FORBIDDEN,
                errmesg="Only the streamer or their moderators can perform this action",
                status_code=HttpStatusCode.FORBIDDEN,
            )

    async def ensure_can_moderate_stream(self, stream_id: str, actor_id: str) -> None:
        """Check the actor against the recorded owner of the stream."""
        stream = await self._streams.get_stream(stream_id)
        await self.ensure_can_moderate(stream.streamer_id, actor_id)

    async def ensure_can_moderate_comment(self, comment_id: str, actor_id: str) -> None:
        """Check the actor against the owner of the stream the comment was posted in."""
        comment = await self._get_comment(comment_id)
        await self.ensure_can_moderate_stream(comment.stream_id, actor_id)

    async def _get_comment(self, comment_id: str, stream_id: str | None = None) -> LiveComment:
        conditions = [LiveComment.comment_id == comment_id]
        if stream_id is not None:
            conditions.append(LiveComment.stream_id == stream_id)

        comment = await LiveComment.find_one(*conditions)
        if comment is None:
            raise AppError(
                errcode=AppErrorCode.E_COMMENT_NOT_FOUND,
                errmesg=f"Comment not found: {comment_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return comment

    # ==================== MODERATORS ====================

    async def is_moderator(self, streamer_id: str, user_id: str) -> bool:
        moderator = await Moderator.find_one(
            Moderator.streamer_id == streamer_id,
            Moderator.user_id == user_id,
        )
        return moderator is not None

    async def add_moderator(self, streamer_id: str, user_id: str) -> ModeratorResponse:
        moderator = Moderator(
            moderator_id=new_moderator_id(),
            streamer_id=streamer_id,
            user_id=user_id,
        )
        try:
            await moderator.insert()
        except DuplicateKeyError:
            raise AppError(
                errcode=AppErrorCode.E_ALREADY_MODERATOR,
                errmesg=f"User {user_id} is already a moderator",
                status_code=HttpStatusCode.CONFLICT,
            )

        logger.info(f"Added moderator {user_id} for streamer {streamer_id}")

        await self._notifications.create_notification(
            NotificationCreateParams(
                type=NotificationType.MODERATOR_ROLE_UPDATED,
                sender_id=streamer_id,
                receiver_id=user_id,
                message="You have been added as a moderator",
            )
        )

        return ModeratorResponse(**moderator.model_dump(exclude={"id"}))

    async def remove_moderator(self, streamer_id: str, user_id: str) -> bool:
        result = await Moderator.find(
            Moderator.streamer_id == streamer_id,
            Moderator.user_id == user_id,
        ).delete()
        return bool(result and result.deleted_count)

    async def get_moderators(self, streamer_id: str) -> list[ModeratorResponse]:
        """Moderators of the streamer, newest first."""
        moderators = (
            await Moderator.find(Moderator.streamer_id == streamer_id)
            .sort(NEWEST_FIRST)  # type: ignore
            .to_list()
        )
        return [ModeratorResponse(**m.model_dump(exclude={"id"})) for m in moderators]

    # ==================== BANS ====================

    async def is_banned(self, streamer_id: str, user_id: str) -> bool:
        ban = await BannedUser.find_one(
            BannedUser.streamer_id == streamer_id,
            BannedUser.user_id == user_id,
        )
        return ban is not None

    async def ban_user(self, streamer_id: str, user_id: str, reason: str | None = None) -> BannedUserResponse:
        ban = BannedUser(
            ban_id=new_ban_id(),
            streamer_id=streamer_id,
            user_id=user_id,
            reason=reason or None,
        )
        try:
            await ban.insert()
        except DuplicateKeyError:
            raise AppError(
                errcode=AppErrorCode.E_ALREADY_BANNED,
                errmesg=f"User {user_id} is already banned",
                status_code=HttpStatusCode.CONFLICT,
            )

        logger.info(f"Banned user {user_id} from streamer {streamer_id}")
        return BannedUserResponse(**ban.model_dump(exclude={"id"}))

    async def unban_user(self, streamer_id: str, user_id: str) -> bool:
        result = await BannedUser.find(
            BannedUser.streamer_id == streamer_id,
            BannedUser.user_id == user_id,
        ).delete()
        return bool(result and result.deleted_count)

    async def get_banned_users(self, streamer_id: str) -> list[BannedUserResponse]:
        bans = (
            await BannedUser.find(BannedUser.streamer_id == streamer_id)
            .sort(NEWEST_FIRST)  # type: ignore
            .to_list()
        )
        return [BannedUserResponse(**b.model_dump(exclude={"id"})) for b in bans]

    # ==================== TIMEOUTS ====================

    async def timeout_user(self, stream_id: str, user_id: str, duration_minutes: int) -> TimeoutResponse:
        """Mute the user in the stream for `duration_minutes`, replacing any earlier timeout."""
        if not TIMEOUT_MIN_MINUTES <= duration_minutes <= TIMEOUT_MAX_MINUTES:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_PARAMS,
                errmesg=(
                    f"Timeout duration must be between {TIMEOUT_MIN_MINUTES} "
                    f"and {TIMEOUT_MAX_MINUTES} minutes"
                ),
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        timeout = await upsert_one(
            TimedOutUser,
            [TimedOutUser.stream_id == stream_id, TimedOutUser.user_id == user_id],
            Set(
                {
                    TimedOutUser.timeout_id: new_timeout_id(),
                    TimedOutUser.end_time: utc_now() + timedelta(minutes=duration_minutes),
                    TimedOutUser.created_at: utc_now(),
                }
            ),
        )

        logger.info(f"User {user_id} timed out in stream {stream_id} for {duration_minutes} minutes")
        return TimeoutResponse(**timeout.model_dump(exclude={"id"}))

    async def is_timed_out(self, stream_id: str, user_id: str) -> bool:
        timeout = await TimedOutUser.find_one(
            TimedOutUser.stream_id == stream_id,
            TimedOutUser.user_id == user_id,
        )
        if timeout is None:
            return False
        return utc_now() < timeout.end_time

    # ==================== COMMENTS ====================

    async def remove_comment(self, comment_id: str) -> bool:
        """Delete any comment, regardless of its author."""
        result = await LiveComment.find(LiveComment.comment_id == comment_id).delete()
        return bool(result and result.deleted_count)

    async def pin_comment(
        self, stream_id: str, comment_id: str, pinned_by: str, duration_minutes: int
    ) -> PinnedCommentResponse:
        """Pin a comment of the stream on top of its chat, replacing the current pin."""
        if not PIN_MIN_MINUTES <= duration_minutes <= PIN_MAX_MINUTES:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_PARAMS,
                errmesg=f"Pin duration must be between {PIN_MIN_MINUTES} and {PIN_MAX_MINUTES} minutes",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        await self._get_comment(comment_id, stream_id=stream_id)

        pin = await upsert_one(
            PinnedComment,
            [PinnedComment.stream_id == stream_id],
            Set(
                {
                    PinnedComment.pin_id: new_pin_id(),
                    PinnedComment.comment_id: comment_id,
                    PinnedComment.pinned_by: pinned_by,
                    PinnedComment.expires_at: utc_now() + timedelta(minutes=duration_minutes),
                    PinnedComment.created_at: utc_now(),
                }
            ),
        )

        logger.info(f"Comment {comment_id} pinned in stream {stream_id} for {duration_minutes} minutes")
        return PinnedCommentResponse(**pin.model_dump(exclude={"id"}))

    async def unpin_comment(self, stream_id: str) -> bool:
        result = await PinnedComment.find(PinnedComment.stream_id == stream_id).delete()
        return bool(result and result.deleted_count)

    async def get_pinned_comment(self, stream_id: str) -> PinnedCommentResponse | None:
        """Current pin with its comment; an expired pin is removed and None returned."""
        pin = await PinnedComment.find_one(PinnedComment.stream_id == stream_id)
        if pin is None:
            return None

        if utc_now() > pin.expires_at:
            await self.unpin_comment(stream_id)
            logger.debug(f"Removed expired pin in stream {stream_id}")
            return None

        comment = await LiveComment.find_one(LiveComment.comment_id == pin.comment_id)
        return PinnedCommentResponse(
            **pin.model_dump(exclude={"id"}),
            comment=CommentResponse(**comment.model_dump(exclude={"id"})) if comment else None,
        )

    # ==================== LIKES ====================

    async def like_comment(self, comment_id: str, user_id: str) -> CommentLikeResponse:
        like = CommentLike(like_id=new_like_id(), comment_id=comment_id, user_id=user_id)
        try:
            await like.insert()
        except DuplicateKeyError:
            raise AppError(
                errcode=AppErrorCode.E_ALREADY_LIKED,
                errmesg=f"Comment already liked: {comment_id}",
                status_code=HttpStatusCode.CONFLICT,
            )
        return CommentLikeResponse(**like.model_dump(exclude={"id"}))

    async def unlike_comment(self, comment_id: str, user_id: str) -> bool:
        result = await CommentLike.find(
            CommentLike.comment_id == comment_id,
            CommentLike.user_id == user_id,
        ).delete()
        return bool(result and result.deleted_count)

    async def get_comment_likes_count(self, comment_id: str) -> int:
        return await CommentLike.find(CommentLike.comment_id == comment_id).count()
