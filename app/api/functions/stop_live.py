from fastapi import APIRouter, Depends, Request
from fastapi.responses import ORJSONResponse
from loguru import logger

from app.api.v1.dependency import CurrentUser
from app.domain.live.live_domain import LiveService

from .requests import parse_body
from .responses import function_failure, function_success
from .schemas import StopLiveIn
from .start_live import get_live_service

router = APIRouter()


@router.post("/stop-live")
async def stop_live(
    request: Request,
    user: CurrentUser,
    service: LiveService = Depends(get_live_service),
) -> ORJSONResponse:
    """Delete the live input, ending the broadcast. Only its streamer may stop it."""
    try:
        payload = await parse_body(request, StopLiveIn)
        logger.info(f"stop-live requested by {user.user_id} for live_input_id={payload.live_input_id}")
        await service.stop_live(payload.live_input_id, actor_id=user.user_id)
    except Exception as e:
        return function_failure(e)

    return function_success({"message": "Live stream ended"})
