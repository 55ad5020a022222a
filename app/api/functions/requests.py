"""Body parsing for the proxy functions.

The functions answer every bad request with their own error body, so the
JSON is read by hand instead of through FastAPI's body validation.
"""

from typing import TypeVar

import orjson
from fastapi import Request
from pydantic import BaseModel, ValidationError

from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

BodyT = TypeVar("BodyT", bound=BaseModel)


async def parse_body(request: Request, model: type[BodyT]) -> BodyT:
    """Read the request body as `model`.

    An empty body or a JSON value other than an object reads as `{}`, so
    missing fields get the function's own 400. Malformed JSON raises
    `orjson.JSONDecodeError`; fields of the wrong type raise AppError 400.
    """
    raw = await request.body()
    data = orjson.loads(raw) if raw.strip() else {}
    if not isinstance(data, dict):
        data = {}

    try:
        return model.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(part) for part in error["loc"]) for error in e.errors())
        raise AppError(
            errcode=AppErrorCode.E_INVALID_REQUEST,
            errmesg=f"Invalid request body: {fields}",
            status_code=HttpStatusCode.BAD_REQUEST,
        ) from e
