"""Response helpers for the proxy functions' `{success, error}` contract."""

from typing import Any

from fastapi.responses import ORJSONResponse
from loguru import logger

from app.utils.app_errors import AppError


def function_success(content: dict[str, Any]) -> ORJSONResponse:
    return ORJSONResponse(status_code=200, content={"success": True, **content})


def function_failure(exc: Exception, *, with_success_flag: bool = True) -> ORJSONResponse:
    """Render an exception as the function's error body.

    AppError keeps its status and message; anything else is a 500 carrying
    the exception text.
    """
    if isinstance(exc, AppError):
        status_code, message = exc.status_code, exc.errmesg
        logger.warning(f"{exc.errcode} {exc.erresid} status={status_code} msg={message} caller={exc.caller_info}")
    else:
        status_code, message = 500, str(exc)
        logger.exception(f"Unhandled error in function: {type(exc).__name__}: {exc}")

    content: dict[str, Any] = {"error": message}
    if with_success_flag:
        content = {"success": False, **content}
    return ORJSONResponse(status_code=status_code, content=content)
