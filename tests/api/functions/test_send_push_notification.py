"""Tests for the send-push-notification function."""

import json
from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.functions import send_push_notification
from app.api.v1.dependency import User, get_current_user
from app.api.v1.routers.push import get_push_service
from app.domain.notifications.notification_domain import NotificationService
from app.domain.push.push_domain import PushService
from app.services.fcm_push import FcmPushSender

NOTIFICATION = {"title": "You're live", "body": "Your stream started", "data": {"stream_id": "s1"}}


class FcmStub:
    """MockTransport handler answering per token."""

    def __init__(self, answers: dict[str, httpx.Response] | None = None):
        self.answers = answers or {}
        self.tokens: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        token = json.loads(request.content)["to"]
        self.tokens.append(token)
        return self.answers.get(token) or httpx.Response(200, json={"success": 1, "failure": 0})


@pytest.fixture
def fcm() -> FcmStub:
    return FcmStub()


@pytest.fixture
def push_service(fcm: FcmStub) -> PushService:
    sender = FcmPushSender(server_key="fcm-key", transport=httpx.MockTransport(fcm))
    service = PushService(sender=sender, notifications=AsyncMock(spec=NotificationService))
    service.deactivate_token = AsyncMock()  # type: ignore[method-assign]
    return service


def make_client(service: PushService) -> TestClient:
    app = FastAPI()
    app.dependency_overrides[get_current_user] = lambda: User(user_id="test_user_123")
    app.dependency_overrides[get_push_service] = lambda: service
    app.include_router(send_push_notification.router, prefix="/functions/v1")
    return TestClient(app)


class TestSendPushNotification:
    """Tests for POST /functions/v1/send-push-notification."""

    def test_mixed_platforms(self, fcm: FcmStub, push_service: PushService):
        """Should send mobile tokens through FCM and skip web tokens."""
        # Arrange
        client = make_client(push_service)
        payload = {
            "userId": "u1",
            "tokens": [
                {"token": "ios-1", "platform": "ios"},
                {"token": "android-1", "platform": "android"},
                {"token": "web-1", "platform": "web"},
            ],
            "notification": NOTIFICATION,
        }

        # Act
        response = client.post("/functions/v1/send-push-notification", json=payload)

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["sent"] == 2
        assert data["failed"] == 0
        assert data["results"] == [
            {"token": "ios-1", "platform": "ios", "status": "sent"},
            {"token": "android-1", "platform": "android", "status": "sent"},
            {"token": "web-1", "platform": "web", "status": "skipped", "reason": "Web push not implemented"},
        ]
        assert fcm.tokens == ["ios-1", "android-1"]

    def test_invalid_token_is_deactivated(self, fcm: FcmStub, push_service: PushService):
        """Should report failure with the FCM payload and deactivate unregistered tokens."""
        fcm_payload = {"success": 0, "failure": 1, "results": [{"error": "NotRegistered"}]}
        fcm.answers["stale"] = httpx.Response(200, json=fcm_payload)
        client = make_client(push_service)

        response = client.post(
            "/functions/v1/send-push-notification",
            json={
                "userId": "u1",
                "tokens": [{"token": "stale", "platform": "android"}, {"token": "fresh", "platform": "ios"}],
                "notification": NOTIFICATION,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["sent"] == 1
        assert data["failed"] == 1
        assert data["results"][0] == {
            "token": "stale",
            "platform": "android",
            "status": "failed",
            "error": fcm_payload,
        }
        push_service.deactivate_token.assert_awaited_once_with("stale")  # type: ignore[attr-defined]

    def test_transient_failure_keeps_token(self, fcm: FcmStub, push_service: PushService):
        fcm.answers["busy"] = httpx.Response(200, json={"success": 0, "results": [{"error": "Unavailable"}]})
        client = make_client(push_service)

        response = client.post(
            "/functions/v1/send-push-notification",
            json={"userId": "u1", "tokens": [{"token": "busy", "platform": "ios"}], "notification": NOTIFICATION},
        )

        assert response.json()["failed"] == 1
        push_service.deactivate_token.assert_not_awaited()  # type: ignore[attr-defined]

    def test_per_token_exception_is_reported(self, push_service: PushService):
        """Should turn a transport error into a failed entry and continue."""

        def handler(request: httpx.Request) -> httpx.Response:
            if json.loads(request.content)["to"] == "boom":
                raise httpx.ConnectError("connection reset")
            return httpx.Response(200, json={"success": 1})

        push_service._sender = FcmPushSender(server_key="fcm-key", transport=httpx.MockTransport(handler))
        client = make_client(push_service)

        response = client.post(
            "/functions/v1/send-push-notification",
            json={
                "userId": "u1",
                "tokens": [{"token": "boom", "platform": "ios"}, {"token": "ok", "platform": "ios"}],
                "notification": NOTIFICATION,
            },
        )

        data = response.json()
        assert response.status_code == 200
        assert data["sent"] == 1
        assert data["failed"] == 1
        assert data["results"][0]["status"] == "failed"
        assert "connection reset" in data["results"][0]["error"]

    @pytest.mark.parametrize(
        "payload",
        [
            {"tokens": [{"token": "t", "platform": "ios"}], "notification": NOTIFICATION},
            {"userId": "u1", "tokens": [], "notification": NOTIFICATION},
            {"userId": "u1", "notification": NOTIFICATION},
            {"userId": "u1", "tokens": [{"token": "t", "platform": "ios"}]},
        ],
    )
    def test_missing_fields(self, fcm: FcmStub, push_service: PushService, payload: dict):
        client = make_client(push_service)

        response = client.post("/functions/v1/send-push-notification", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields"}
        assert fcm.tokens == []

    def test_not_configured(self, fcm: FcmStub):
        """Should answer 500 when no FCM server key is configured."""
        sender = FcmPushSender(server_key=None, transport=httpx.MockTransport(fcm))
        service = PushService(sender=sender, notifications=AsyncMock(spec=NotificationService))
        client = make_client(service)

        response = client.post(
            "/functions/v1/send-push-notification",
            json={"userId": "u1", "tokens": [{"token": "t", "platform": "ios"}], "notification": NOTIFICATION},
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Push notification service not configured"}
        assert fcm.tokens == []

    def test_malformed_json(self, fcm: FcmStub, push_service: PushService):
        """Should answer with the function's own error body."""
        client = make_client(push_service)

        response = client.post(
            "/functions/v1/send-push-notification",
            content=b'{"userId": "u1", "tokens": [',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert set(response.json()) == {"error"}
        assert fcm.tokens == []

    @pytest.mark.parametrize("body", [b"[]", b"null", b'"u1"'])
    def test_body_not_an_object(self, fcm: FcmStub, push_service: PushService, body: bytes):
        client = make_client(push_service)

        response = client.post(
            "/functions/v1/send-push-notification", content=body, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields"}

    def test_tokens_not_a_list(self, fcm: FcmStub, push_service: PushService):
        client = make_client(push_service)

        response = client.post(
            "/functions/v1/send-push-notification",
            json={"userId": "u1", "tokens": "ios-1", "notification": NOTIFICATION},
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid request body: tokens")
        assert fcm.tokens == []
