"""FCM push delivery service.

Sends notifications through the FCM legacy HTTP endpoint, which serves both
iOS and Android devices.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel, Field

from app.app_config import get_app_environ_config

# FCM per-message errors meaning the token will never be deliverable again
INVALID_TOKEN_ERRORS = frozenset({"InvalidRegistration", "NotRegistered"})


class FcmSendResult(BaseModel):
    """Outcome of one FCM send call."""

    ok: bool
    payload: dict[str, Any] = Field(default_factory=dict)

    @property
    def error(self) -> str | None:
        results = self.payload.get("results") or []
        if results and isinstance(results[0], dict):
            return results[0].get("error")
        return None

    @property
    def token_invalid(self) -> bool:
        return self.error in INVALID_TOKEN_ERRORS


class FcmPushSender:
    """Async sender for the FCM legacy HTTP API."""

    def __init__(
        self,
        server_key: str | None,
        send_url: str = "https://fcm.googleapis.com/fcm/send",
        timeout: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.server_key = server_key
        self.send_url = send_url
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.server_key)

    async def send(
        self,
        token: str,
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> FcmSendResult:
        """Send one notification to one device token.

        `ok` is true only when FCM answered 2xx and reported exactly one success.

        Raises:
            httpx.HTTPError: On transport failures
        """
        message = {
            "to": token,
            "notification": {"title": title, "body": body, "sound": "default"},
            "data": data or {},
            "priority": "high",
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"key={self.server_key}",
        }

        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            response = await client.post(self.send_url, json=message, headers=headers)

        try:
            payload = response.json()
        except ValueError:
            payload = {"status_code": response.status_code, "body": response.text}
        if not isinstance(payload, dict):
            payload = {"body": payload}

        ok = response.is_success and payload.get("success") == 1
        logger.debug(f"FCM send status={response.status_code} ok={ok}")
        return FcmSendResult(ok=ok, payload=payload)


def get_fcm_push_sender() -> FcmPushSender:
    cfg = get_app_environ_config()
    return FcmPushSender(
        server_key=cfg.FCM_SERVER_KEY,
        send_url=cfg.FCM_SEND_URL,
        timeout=cfg.HTTP_TIMEOUT,
    )
