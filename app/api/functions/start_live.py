from fastapi import APIRouter, Depends, Request
from fastapi.responses import ORJSONResponse
from loguru import logger

from app.api.v1.dependency import CurrentUser
from app.domain.live.live_domain import LiveService

from .requests import parse_body
from .responses import function_failure, function_success
from .schemas import StartLiveIn

router = APIRouter()


def get_live_service() -> LiveService:
    """Build a LiveService bound to the current Cloudflare configuration."""
    return LiveService()


@router.post("/start-live")
async def start_live(
    request: Request,
    user: CurrentUser,
    service: LiveService = Depends(get_live_service),
) -> ORJSONResponse:
    """Create a live input and return its ingest and playback endpoints."""
    try:
        payload = await parse_body(request, StartLiveIn)
        logger.info(f"start-live requested by {user.user_id} for user_id={payload.user_id}")
        result = await service.start_live(title=payload.title, user_id=payload.user_id, owner_id=user.user_id)
    except Exception as e:
        return function_failure(e)

    return function_success(result.model_dump())
