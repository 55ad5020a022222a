from fastapi import APIRouter, Depends, Query

from app.api.v1.dependency import CurrentUser
from app.api.v1.schemas.base import ApiOut, CountOut
from app.api.v1.schemas.comments import CommentOut, DeleteCommentIn, ListCommentsOut, SaveCommentIn
from app.domain.comments.comment_domain import CommentService

router = APIRouter(prefix="/comments")

# Singleton instance
_comment_service = CommentService()


def get_comment_service() -> CommentService:
    """Get the singleton CommentService instance."""
    return _comment_service


@router.post("/save_comment")
async def save_comment(
    payload: SaveCommentIn,
    user: CurrentUser,
    service: CommentService = Depends(get_comment_service),
) -> ApiOut[CommentOut]:
    """Post a chat comment as the authenticated user."""
    comment = await service.save_comment(
        stream_id=payload.stream_id,
        user_id=user.user_id,
        message=payload.message,
    )

    return ApiOut[CommentOut](results=CommentOut(**comment.model_dump()))


@router.get("/list_comments")
async def list_comments(
    user: CurrentUser,
    stream_id: str = Query(..., description="Stream identifier"),
    limit: int = Query(50, ge=1, le=200, description="Number of latest comments"),
    service: CommentService = Depends(get_comment_service),
) -> ApiOut[ListCommentsOut]:
    """Latest comments of a stream in chat order (oldest first)."""
    comments = await service.get_comments(stream_id, limit=limit)

    return ApiOut[ListCommentsOut](
        results=ListCommentsOut(comments=[CommentOut(**c.model_dump()) for c in comments])
    )


@router.get("/get_comment_count")
async def get_comment_count(
    user: CurrentUser,
    stream_id: str = Query(..., description="Stream identifier"),
    service: CommentService = Depends(get_comment_service),
) -> ApiOut[CountOut]:
    count = await service.get_comment_count(stream_id)

    return ApiOut[CountOut](results=CountOut(count=count))


@router.post("/delete_comment")
async def delete_comment(
    payload: DeleteCommentIn,
    user: CurrentUser,
    service: CommentService = Depends(get_comment_service),
) -> ApiOut[str]:
    """Delete one of the authenticated user's own comments."""
    await service.delete_comment(payload.comment_id, user_id=user.user_id)

    return ApiOut[str](results="OK")
