"""Application error taxonomy.

Domain code raises `AppError`; the API layer renders it as an `ApiFailure`
envelope with the carried HTTP status.
"""

import inspect
from enum import Enum, IntEnum
from uuid import uuid4


class HttpStatusCode(IntEnum):
    OK = 200
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    UNPROCESSABLE_ENTITY = 422
    INTERNAL_SERVER_ERROR = 500
    BAD_GATEWAY = 502


class AppErrorCode(str, Enum):
    E_INTERNAL_ERROR = "E_INTERNAL_ERROR"
    E_INVALID_REQUEST = "E_INVALID_REQUEST"
    E_INVALID_PARAMS = "E_INVALID_PARAMS"
    E_BAD_TOKEN = "E_BAD_TOKEN"
    E_FORBIDDEN = "E_FORBIDDEN"

    E_APPEAL_NOT_FOUND = "E_APPEAL_NOT_FOUND"
    E_COMMENT_NOT_FOUND = "E_COMMENT_NOT_FOUND"
    E_ALREADY_FOLLOWING = "E_ALREADY_FOLLOWING"
    E_NOTIFICATION_NOT_FOUND = "E_NOTIFICATION_NOT_FOUND"
    E_ALREADY_MODERATOR = "E_ALREADY_MODERATOR"
    E_ALREADY_BANNED = "E_ALREADY_BANNED"
    E_ALREADY_LIKED = "E_ALREADY_LIKED"
    E_MEMBERSHIP_NOT_FOUND = "E_MEMBERSHIP_NOT_FOUND"
    E_STREAM_NOT_FOUND = "E_STREAM_NOT_FOUND"
    E_STREAM_NOT_LIVE = "E_STREAM_NOT_LIVE"
    E_GIFT_NOT_FOUND = "E_GIFT_NOT_FOUND"
    E_WALLET_NOT_FOUND = "E_WALLET_NOT_FOUND"
    E_INSUFFICIENT_BALANCE = "E_INSUFFICIENT_BALANCE"
    E_INVITATION_NOT_FOUND = "E_INVITATION_NOT_FOUND"
    E_INVITATION_EXPIRED = "E_INVITATION_EXPIRED"
    E_ALREADY_INVITED = "E_ALREADY_INVITED"
    E_SEATS_LOCKED = "E_SEATS_LOCKED"
    E_SEATS_FULL = "E_SEATS_FULL"
    E_ALREADY_SEATED = "E_ALREADY_SEATED"
    E_SEAT_NOT_FOUND = "E_SEAT_NOT_FOUND"

    E_STREAM_CONFIG_MISSING = "E_STREAM_CONFIG_MISSING"
    E_STREAM_PROVIDER_ERROR = "E_STREAM_PROVIDER_ERROR"
    E_PUSH_CONFIG_MISSING = "E_PUSH_CONFIG_MISSING"


class AppError(Exception):
    """Error raised by domain and service code, carrying its API rendering."""

    def __init__(
        self,
        errcode: AppErrorCode | str = AppErrorCode.E_INTERNAL_ERROR,
        errmesg: str = "We are sorry, an error occurred.",
        status_code: HttpStatusCode | int = HttpStatusCode.BAD_REQUEST,
    ):
        self.errcode = errcode.value if isinstance(errcode, AppErrorCode) else str(errcode)
        self.errmesg = errmesg
        self.status_code = int(status_code)
        self.erresid = uuid4().hex[:10]

        # Record where the error was raised for the exception handler's log line
        frame = inspect.currentframe()
        caller = frame.f_back if frame else None
        if caller is not None:
            module = caller.f_globals.get("__name__", caller.f_code.co_filename)
            self.caller_info = f"{module}:{caller.f_code.co_name}:{caller.f_lineno}"
        else:
            self.caller_info = "unknown"

        super().__init__(f"{self.errcode}: {errmesg}")
