"""Live comment domain models."""

from datetime import datetime

from pydantic import BaseModel

MAX_COMMENT_LENGTH = 500


class CommentResponse(BaseModel):
    comment_id: str
    stream_id: str
    user_id: str
    message: str
    created_at: datetime
