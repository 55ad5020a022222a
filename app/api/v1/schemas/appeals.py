from pydantic import BaseModel, Field

from app.schemas import AppealStatus

from .serializers import UtcDateTime


class StrikeOut(BaseModel):
    strike_id: str
    strike_type: str
    strike_message: str
    strike_level: int
    expires_at: UtcDateTime | None = None
    active: bool
    created_at: UtcDateTime


class ViolationOut(BaseModel):
    violation_id: str
    stream_id: str | None = None
    violation_reason: str
    notes: str | None = None
    severity_level: int
    resolved: bool
    created_at: UtcDateTime


class AppealOut(BaseModel):
    appeal_id: str
    violation_id: str | None = None
    strike_id: str | None = None
    appeal_reason: str
    evidence_url: str | None = None
    status: AppealStatus
    admin_decision: str | None = None
    reviewed_at: UtcDateTime | None = None
    created_at: UtcDateTime


class SubmitAppealIn(BaseModel):
    violation_id: str | None = Field(default=None, description="Violation being appealed")
    strike_id: str | None = Field(default=None, description="Strike being appealed")
    appeal_reason: str = Field(description="Why the decision should be reversed")
    evidence_url: str | None = Field(default=None, description="URL of supporting evidence")


class ListStrikesOut(BaseModel):
    strikes: list[StrikeOut]


class ListViolationsOut(BaseModel):
    violations: list[ViolationOut]


class ListAppealsOut(BaseModel):
    appeals: list[AppealOut]
