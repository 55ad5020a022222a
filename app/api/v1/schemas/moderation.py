from pydantic import BaseModel, Field

from .comments import CommentOut
from .serializers import UtcDateTime


class StreamerUserIn(BaseModel):
    streamer_id: str = Field(description="Streamer whose moderation settings change")
    user_id: str = Field(description="Target user")


class BanUserIn(StreamerUserIn):
    reason: str | None = None


class TimeoutUserIn(BaseModel):
    stream_id: str
    user_id: str
    duration_minutes: int = Field(description="Between 1 and 60 minutes")


class RemoveCommentIn(BaseModel):
    comment_id: str


class PinCommentIn(BaseModel):
    stream_id: str
    comment_id: str
    duration_minutes: int = Field(description="Between 1 and 5 minutes")


class UnpinCommentIn(BaseModel):
    stream_id: str


class CommentLikeIn(BaseModel):
    comment_id: str


class ModeratorOut(BaseModel):
    moderator_id: str
    streamer_id: str
    user_id: str
    created_at: UtcDateTime


class BannedUserOut(BaseModel):
    ban_id: str
    streamer_id: str
    user_id: str
    reason: str | None = None
    created_at: UtcDateTime


class TimeoutOut(BaseModel):
    timeout_id: str
    stream_id: str
    user_id: str
    end_time: UtcDateTime


class PinnedCommentOut(BaseModel):
    pin_id: str
    stream_id: str
    comment_id: str
    pinned_by: str
    expires_at: UtcDateTime
    comment: CommentOut | None = None


class CommentLikeOut(BaseModel):
    like_id: str
    comment_id: str
    user_id: str
    created_at: UtcDateTime


class ListModeratorsOut(BaseModel):
    moderators: list[ModeratorOut]


class ListBannedUsersOut(BaseModel):
    banned_users: list[BannedUserOut]
