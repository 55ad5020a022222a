"""Live comment domain service."""

from loguru import logger

from app.schemas import LiveComment
from app.schemas.schema_utils import NEWEST_FIRST
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ..utils.idgen import new_comment_id
from .comment_models import MAX_COMMENT_LENGTH, CommentResponse


class CommentService:
    """Persists the chat of a live stream."""

    async def save_comment(self, stream_id: str, user_id: str, message: str) -> CommentResponse:
        message = message.strip()
        if not message:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="Comment message is required",
                status_code=HttpStatusCode.BAD_REQUEST,
            )
        if len(message) > MAX_COMMENT_LENGTH:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg=f"Comment message cannot exceed {MAX_COMMENT_LENGTH} characters",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        comment = LiveComment(
            comment_id=new_comment_id(),
            stream_id=stream_id,
            user_id=user_id,
            message=message,
        )
        await comment.insert()
        logger.debug(f"Saved comment {comment.comment_id} on stream {stream_id}")

        return CommentResponse(**comment.model_dump(exclude={"id"}))

    async def get_comments(self, stream_id: str, limit: int = 50) -> list[CommentResponse]:
        """Return the latest `limit` comments of the stream, oldest first."""
        latest = (
            await LiveComment.find(LiveComment.stream_id == stream_id)
            .sort(NEWEST_FIRST)  # type: ignore
            .limit(limit)
            .to_list()
        )
        return [CommentResponse(**c.model_dump(exclude={"id"})) for c in reversed(latest)]

    async def get_comment(self, comment_id: str) -> CommentResponse:
        comment = await LiveComment.find_one(LiveComment.comment_id == comment_id)
        if not comment:
            raise AppError(
                errcode=AppErrorCode.E_COMMENT_NOT_FOUND,
                errmesg=f"Comment not found: {comment_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return CommentResponse(**comment.model_dump(exclude={"id"}))

    async def delete_comment(self, comment_id: str, user_id: str | None = None) -> None:
        """Delete a comment, restricted to its author when `user_id` is given."""
        conditions = [LiveComment.comment_id == comment_id]
        if user_id:
            conditions.append(LiveComment.user_id == user_id)

        comment = await LiveComment.find_one(*conditions)
        if not comment:
            raise AppError(
                errcode=AppErrorCode.E_COMMENT_NOT_FOUND,
                errmesg=f"Comment not found: {comment_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )

        await comment.delete()
        logger.debug(f"Deleted comment {comment_id}")

    async def get_comment_count(self, stream_id: str) -> int:
        return await LiveComment.find(LiveComment.stream_id == stream_id).count()
