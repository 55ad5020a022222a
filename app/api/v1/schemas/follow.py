from pydantic import BaseModel, Field

from .serializers import UtcDateTime


class FollowOut(BaseModel):
    follow_id: str
    follower_id: str
    following_id: str
    created_at: UtcDateTime


class FollowUserIn(BaseModel):
    user_id: str = Field(description="User to follow or unfollow")


class ListFollowsOut(BaseModel):
    follows: list[FollowOut]
