"""Beanie ODM schemas for MongoDB collections."""

from .content_safety import Appeal, AppealStatus, Strike, Violation
from .gifts import Gift, GiftEvent, Transaction, TransactionStatus, TransactionType, Wallet
from .guests import GuestEvent, GuestEventType, GuestInvitation, GuestSeat, InvitationStatus
from .init import ALL_DOCUMENT_MODELS, init_beanie_odm
from .live_stream import LiveStream, LiveStreamStatus
from .moderation import BannedUser, CommentLike, Moderator, PinnedComment, TimedOutUser
from .push import DeviceType, NotificationPreferences, PushToken
from .social import Follower, LiveComment, Notification, NotificationType
from .vip_membership import DEFAULT_BADGE_COLOR, VipMembership

__all__ = [
    "ALL_DOCUMENT_MODELS",
    "Appeal",
    "AppealStatus",
    "BannedUser",
    "CommentLike",
    "DEFAULT_BADGE_COLOR",
    "DeviceType",
    "Follower",
    "Gift",
    "GiftEvent",
    "GuestEvent",
    "GuestEventType",
    "GuestInvitation",
    "GuestSeat",
    "InvitationStatus",
    "LiveComment",
    "LiveStream",
    "LiveStreamStatus",
    "Moderator",
    "Notification",
    "NotificationPreferences",
    "NotificationType",
    "PinnedComment",
    "PushToken",
    "Strike",
    "TimedOutUser",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    "Violation",
    "VipMembership",
    "Wallet",
    "init_beanie_odm",
]
