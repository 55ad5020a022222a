"""Beanie initialization for ODM."""

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .content_safety import Appeal, Strike, Violation
from .gifts import Gift, GiftEvent, Transaction, Wallet
from .guests import GuestEvent, GuestInvitation, GuestSeat
from .live_stream import LiveStream
from .moderation import BannedUser, CommentLike, Moderator, PinnedComment, TimedOutUser
from .push import NotificationPreferences, PushToken
from .social import Follower, LiveComment, Notification
from .vip_membership import VipMembership

ALL_DOCUMENT_MODELS = [
    Appeal,
    Strike,
    Violation,
    LiveComment,
    Follower,
    Notification,
    PushToken,
    NotificationPreferences,
    Moderator,
    BannedUser,
    TimedOutUser,
    PinnedComment,
    CommentLike,
    VipMembership,
    LiveStream,
    Gift,
    Wallet,
    Transaction,
    GiftEvent,
    GuestSeat,
    GuestInvitation,
    GuestEvent,
]


async def init_beanie_odm(
    mongo_client: AsyncIOMotorClient | AsyncIOMotorDatabase,
    database_name: str | None = None,
) -> None:
    """
    Initialize Beanie ODM with all document models.

    Args:
        mongo_client: Motor client or database instance
        database_name: Database name (only needed if passing client)
    """
    if isinstance(mongo_client, AsyncIOMotorClient):
        if not database_name:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="database_name required when passing AsyncIOMotorClient",
                status_code=HttpStatusCode.BAD_REQUEST,
            )
        database = mongo_client[database_name]
    else:
        database = mongo_client

    await init_beanie(
        database=database,  # type: ignore[arg-type]
        document_models=ALL_DOCUMENT_MODELS,
    )


__all__ = ["ALL_DOCUMENT_MODELS", "init_beanie_odm"]
