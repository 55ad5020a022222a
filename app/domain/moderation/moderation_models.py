"""Moderation domain models."""

from datetime import datetime

from pydantic import BaseModel

from ..comments.comment_models import CommentResponse

TIMEOUT_MIN_MINUTES = 1
TIMEOUT_MAX_MINUTES = 60
PIN_MIN_MINUTES = 1
PIN_MAX_MINUTES = 5


class ModeratorResponse(BaseModel):
    moderator_id: str
    streamer_id: str
    user_id: str
    created_at: datetime


class BannedUserResponse(BaseModel):
    ban_id: str
    streamer_id: str
    user_id: str
    reason: str | None = None
    created_at: datetime


class TimeoutResponse(BaseModel):
    timeout_id: str
    stream_id: str
    user_id: str
    end_time: datetime
    created_at: datetime


class PinnedCommentResponse(BaseModel):
    pin_id: str
    stream_id: str
    comment_id: str
    pinned_by: str
    expires_at: datetime
    created_at: datetime
    comment: CommentResponse | None = None


class CommentLikeResponse(BaseModel):
    like_id: str
    comment_id: str
    user_id: str
    created_at: datetime
