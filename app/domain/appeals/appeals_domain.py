"""Appeals domain service - strikes, violations and the appeals raised against them."""

from loguru import logger

from app.schemas import Appeal, AppealStatus, NotificationType, Strike, Violation
from app.schemas.schema_utils import NEWEST_FIRST
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ..notifications.notification_domain import NotificationService
from ..notifications.notification_models import NotificationCreateParams
from ..utils.idgen import new_appeal_id
from .appeals_models import AppealCreateParams, AppealResponse, StrikeResponse, ViolationResponse

APPEAL_SUBMITTED_MESSAGE = "Your appeal has been submitted and is under review."


class AppealsService:
    def __init__(self, notifications: NotificationService | None = None):
        self._notifications = notifications or NotificationService()

    async def get_user_strikes(self, user_id: str) -> list[StrikeResponse]:
        strikes = await Strike.find(Strike.user_id == user_id).sort(NEWEST_FIRST).to_list()  # type: ignore
        return [StrikeResponse(**s.model_dump(exclude={"id"})) for s in strikes]

    async def get_user_violations(self, user_id: str) -> list[ViolationResponse]:
        violations = (
            await Violation.find(Violation.reported_user_id == user_id)
            .sort(NEWEST_FIRST)  # type: ignore
            .to_list()
        )
        return [ViolationResponse(**v.model_dump(exclude={"id"})) for v in violations]

    async def get_user_appeals(self, user_id: str) -> list[AppealResponse]:
        appeals = await Appeal.find(Appeal.user_id == user_id).sort(NEWEST_FIRST).to_list()  # type: ignore
        return [AppealResponse(**a.model_dump(exclude={"id"})) for a in appeals]

    async def submit_appeal(self, params: AppealCreateParams) -> AppealResponse:
        """File a pending appeal and tell the user it is under review."""
        if not params.appeal_reason:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="Appeal reason is required",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        appeal = Appeal(
            appeal_id=new_appeal_id(),
            user_id=params.user_id,
            violation_id=params.violation_id,
            strike_id=params.strike_id,
            appeal_reason=params.appeal_reason,
            evidence_url=params.evidence_url,
            status=AppealStatus.PENDING,
        )
        await appeal.insert()
        logger.info(f"Appeal {appeal.appeal_id} submitted by user {params.user_id}")

        await self._notifications.create_notification(
            NotificationCreateParams(
                type=NotificationType.MESSAGE,
                receiver_id=params.user_id,
                message=APPEAL_SUBMITTED_MESSAGE,
            )
        )

        return AppealResponse(**appeal.model_dump(exclude={"id"}))

    async def get_appeal(self, appeal_id: str, user_id: str | None = None) -> AppealResponse:
        """Get one appeal, optionally restricted to its owner.

        Raises AppError if the appeal is not found.
        """
        conditions = [Appeal.appeal_id == appeal_id]
        if user_id:
            conditions.append(Appeal.user_id == user_id)

        appeal = await Appeal.find_one(*conditions)
        if not appeal:
            raise AppError(
                errcode=AppErrorCode.E_APPEAL_NOT_FOUND,
                errmesg=f"Appeal not found: {appeal_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )

        return AppealResponse(**appeal.model_dump(exclude={"id"}))
