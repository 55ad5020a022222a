from typing import Annotated

from fastapi import Depends, Request
from loguru import logger
from pydantic import BaseModel

from app.shared.api.auth.verify_token import verify_token
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


class User(BaseModel):
    user_id: str
    email: str | None = None
    role: str | None = None


async def get_current_user(request: Request) -> User:
    # Do not log request headers here (may include secrets like Authorization).
    user_info = await verify_token(request)
    if not user_info:
        raise AppError(
            errcode=AppErrorCode.E_BAD_TOKEN,
            errmesg="Invalid token",
            status_code=HttpStatusCode.UNAUTHORIZED,
        )

    logger.debug("Authenticated user_id: {}", user_info["user_id"])

    return User(**user_info)


CurrentUser = Annotated[User, Depends(get_current_user)]
