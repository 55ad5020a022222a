from fastapi import APIRouter, Depends, Query

from app.api.v1.dependency import CurrentUser
from app.api.v1.schemas.appeals import (
    AppealOut,
    ListAppealsOut,
    ListStrikesOut,
    ListViolationsOut,
    StrikeOut,
    SubmitAppealIn,
    ViolationOut,
)
from app.api.v1.schemas.base import ApiOut
from app.domain.appeals.appeals_domain import AppealsService
from app.domain.appeals.appeals_models import AppealCreateParams

router = APIRouter(prefix="/appeals")

# Singleton instance
_appeals_service = AppealsService()


def get_appeals_service() -> AppealsService:
    """Get the singleton AppealsService instance."""
    return _appeals_service


@router.get("/list_strikes")
async def list_strikes(
    user: CurrentUser,
    service: AppealsService = Depends(get_appeals_service),
) -> ApiOut[ListStrikesOut]:
    """List the authenticated user's strikes, newest first."""
    strikes = await service.get_user_strikes(user.user_id)

    return ApiOut[ListStrikesOut](
        results=ListStrikesOut(strikes=[StrikeOut(**s.model_dump()) for s in strikes])
    )


@router.get("/list_violations")
async def list_violations(
    user: CurrentUser,
    service: AppealsService = Depends(get_appeals_service),
) -> ApiOut[ListViolationsOut]:
    """List violations reported against the authenticated user, newest first."""
    violations = await service.get_user_violations(user.user_id)

    return ApiOut[ListViolationsOut](
        results=ListViolationsOut(violations=[ViolationOut(**v.model_dump()) for v in violations])
    )


@router.get("/list_appeals")
async def list_appeals(
    user: CurrentUser,
    service: AppealsService = Depends(get_appeals_service),
) -> ApiOut[ListAppealsOut]:
    appeals = await service.get_user_appeals(user.user_id)

    return ApiOut[ListAppealsOut](
        results=ListAppealsOut(appeals=[AppealOut(**a.model_dump()) for a in appeals])
    )


@router.post("/submit_appeal")
async def submit_appeal(
    payload: SubmitAppealIn,
    user: CurrentUser,
    service: AppealsService = Depends(get_appeals_service),
) -> ApiOut[AppealOut]:
    """Submit an appeal against a strike or violation."""
    params = AppealCreateParams(
        user_id=user.user_id,
        violation_id=payload.violation_id,
        strike_id=payload.strike_id,
        appeal_reason=payload.appeal_reason,
        evidence_url=payload.evidence_url,
    )

    appeal = await service.submit_appeal(params)

    return ApiOut[AppealOut](results=AppealOut(**appeal.model_dump()))


@router.get("/get_appeal")
async def get_appeal(
    user: CurrentUser,
    appeal_id: str = Query(..., description="Appeal identifier"),
    service: AppealsService = Depends(get_appeals_service),
) -> ApiOut[AppealOut]:
    appeal = await service.get_appeal(appeal_id, user_id=user.user_id)

    return ApiOut[AppealOut](results=AppealOut(**appeal.model_dump()))
