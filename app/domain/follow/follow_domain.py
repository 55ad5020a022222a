"""Follow domain service - the follower graph."""

from loguru import logger
from pymongo.errors import DuplicateKeyError

from app.schemas import Follower, NotificationType
from app.schemas.schema_utils import NEWEST_FIRST
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ..notifications.notification_domain import NotificationService
from ..notifications.notification_models import NotificationCreateParams
from ..utils.idgen import new_follow_id
from .follow_models import FollowResponse


class FollowService:
    def __init__(self, notifications: NotificationService | None = None):
        self._notifications = notifications or NotificationService()

    async def follow_user(self, follower_id: str, following_id: str) -> FollowResponse:
        """Make `follower_id` follow `following_id` and notify the followed user.

        Raises AppError on self-follow or when already following.
        """
        if follower_id == following_id:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="Users cannot follow themselves",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        follow = Follower(
            follow_id=new_follow_id(),
            follower_id=follower_id,
            following_id=following_id,
        )
        try:
            await follow.insert()
        except DuplicateKeyError:
            raise AppError(
                errcode=AppErrorCode.E_ALREADY_FOLLOWING,
                errmesg=f"Already following user: {following_id}",
                status_code=HttpStatusCode.CONFLICT,
            )

        logger.info(f"User {follower_id} followed {following_id}")

        await self._notifications.create_notification(
            NotificationCreateParams(
                type=NotificationType.FOLLOW,
                sender_id=follower_id,
                receiver_id=following_id,
                message="started following you",
            )
        )

        return FollowResponse(**follow.model_dump(exclude={"id"}))

    async def unfollow_user(self, follower_id: str, following_id: str) -> bool:
        """Remove the edge; returns False when there was nothing to remove."""
        result = await Follower.find(
            Follower.follower_id == follower_id,
            Follower.following_id == following_id,
        ).delete()

        deleted = bool(result and result.deleted_count)
        if deleted:
            logger.info(f"User {follower_id} unfollowed {following_id}")
        return deleted

    async def is_following(self, follower_id: str, following_id: str) -> bool:
        follow = await Follower.find_one(
            Follower.follower_id == follower_id,
            Follower.following_id == following_id,
        )
        return follow is not None

    async def get_followers(self, user_id: str) -> list[FollowResponse]:
        """Users following `user_id`, newest first."""
        edges = (
            await Follower.find(Follower.following_id == user_id)
            .sort(NEWEST_FIRST)  # type: ignore
            .to_list()
        )
        return [FollowResponse(**e.model_dump(exclude={"id"})) for e in edges]

    async def get_following(self, user_id: str) -> list[FollowResponse]:
        """Users `user_id` follows, newest first."""
        edges = (
            await Follower.find(Follower.follower_id == user_id)
            .sort(NEWEST_FIRST)  # type: ignore
            .to_list()
        )
        return [FollowResponse(**e.model_dump(exclude={"id"})) for e in edges]
