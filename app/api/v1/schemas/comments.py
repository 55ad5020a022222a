from pydantic import BaseModel, Field

from .serializers import UtcDateTime


class CommentOut(BaseModel):
    comment_id: str
    stream_id: str
    user_id: str
    message: str
    created_at: UtcDateTime


class SaveCommentIn(BaseModel):
    stream_id: str = Field(description="Stream the comment is posted in")
    message: str = Field(description="Comment text")


class DeleteCommentIn(BaseModel):
    comment_id: str


class ListCommentsOut(BaseModel):
    comments: list[CommentOut]
