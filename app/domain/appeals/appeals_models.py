"""Appeals domain models."""

from datetime import datetime

from pydantic import BaseModel, field_validator

from app.schemas import AppealStatus


class StrikeResponse(BaseModel):
    strike_id: str
    user_id: str
    strike_type: str
    strike_message: str
    strike_level: int
    expires_at: datetime
    active: bool
    created_at: datetime


class ViolationResponse(BaseModel):
    violation_id: str
    reported_user_id: str
    reporter_user_id: str | None = None
    stream_id: str | None = None
    violation_reason: str
    notes: str | None = None
    severity_level: int
    resolved: bool
    created_at: datetime


class AppealResponse(BaseModel):
    appeal_id: str
    user_id: str
    violation_id: str | None = None
    strike_id: str | None = None
    appeal_reason: str
    evidence_url: str | None = None
    status: AppealStatus
    admin_decision: str | None = None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    created_at: datetime


class AppealCreateParams(BaseModel):
    """Parameters for submitting an appeal."""

    user_id: str
    violation_id: str | None = None
    strike_id: str | None = None
    appeal_reason: str
    evidence_url: str | None = None

    @field_validator("appeal_reason")
    @classmethod
    def strip_reason(cls, v: str) -> str:
        return v.strip()
