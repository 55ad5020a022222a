"""Follow domain models."""

from datetime import datetime

from pydantic import BaseModel


class FollowResponse(BaseModel):
    follow_id: str
    follower_id: str
    following_id: str
    created_at: datetime


class FollowStatusResponse(BaseModel):
    follower_id: str
    following_id: str
    is_following: bool
