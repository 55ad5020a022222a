from fastapi import APIRouter, Depends, Request
from fastapi.responses import ORJSONResponse

from app.api.v1.dependency import CurrentUser
from app.api.v1.routers.push import get_push_service
from app.domain.push.push_domain import PushService
from app.domain.push.push_models import PushContent, PushTarget

from .requests import parse_body
from .responses import function_failure
from .schemas import SendPushNotificationIn

router = APIRouter()


@router.post("/send-push-notification")
async def send_push_notification(
    request: Request,
    user: CurrentUser,
    service: PushService = Depends(get_push_service),
) -> ORJSONResponse:
    """Deliver one notification to the given device tokens.

    Always 200 once delivery starts; per-token outcomes are in `results`.
    """
    try:
        payload = await parse_body(request, SendPushNotificationIn)

        tokens = [PushTarget(token=t.token, platform=t.platform) for t in payload.tokens or []]
        content = None
        if payload.notification is not None:
            content = PushContent(**payload.notification.model_dump())

        report = await service.deliver(payload.userId, tokens, content)
    except Exception as e:
        return function_failure(e, with_success_flag=False)

    return ORJSONResponse(status_code=200, content=report.model_dump(exclude_none=True))
