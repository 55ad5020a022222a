from typing import Generic, TypeVar

from pydantic import BaseModel

from app.shared.api.utils import ApiSuccess

T = TypeVar("T")


class ApiOut(ApiSuccess, Generic[T]):
    """Standard API envelope used by public routers."""

    results: T  # type: ignore[valid-type]


class CountOut(BaseModel):
    count: int


class FlagOut(BaseModel):
    """Answer to a yes/no question such as "is this user banned"."""

    value: bool


class ChangedOut(BaseModel):
    """Whether a delete or update actually touched a record."""

    changed: bool
