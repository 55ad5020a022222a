"""Tests for bearer token authentication."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import jwt
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.v1.errors import app_error_handler
from app.api.v1.routers.notifications import get_notification_service, router
from app.app_config import get_app_environ_config
from app.domain.notifications.notification_domain import NotificationService
from app.utils.app_errors import AppError


def make_token(secret: str | None = None, **claims) -> str:
    cfg = get_app_environ_config()
    payload = {
        "sub": "user_abc",
        "aud": cfg.JWT_AUDIENCE,
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        "email": "abc@example.com",
        "role": "authenticated",
    }
    payload.update(claims)
    return jwt.encode(payload, secret or cfg.JWT_SECRET, algorithm="HS256")


@pytest.fixture
def mock_notification_service() -> AsyncMock:
    service = AsyncMock(spec=NotificationService)
    service.get_unread_count.return_value = 0
    return service


@pytest.fixture
def client(mock_notification_service: AsyncMock) -> TestClient:
    app = FastAPI()
    app.dependency_overrides[get_notification_service] = lambda: mock_notification_service
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.include_router(router)
    return TestClient(app)


class TestGetCurrentUser:
    def test_valid_token(self, client: TestClient, mock_notification_service: AsyncMock):
        """Should authenticate the token's subject."""
        response = client.get(
            "/notifications/get_unread_count",
            headers={"Authorization": f"Bearer {make_token()}"},
        )

        assert response.status_code == 200
        mock_notification_service.get_unread_count.assert_awaited_once_with("user_abc")

    def test_missing_header(self, client: TestClient):
        response = client.get("/notifications/get_unread_count")

        assert response.status_code == 401
        assert response.json()["errcode"] == "E_BAD_TOKEN"

    @pytest.mark.parametrize(
        "header",
        [
            "Basic dXNlcjpwYXNz",
            "Bearer",
            "Bearer not-a-jwt",
        ],
    )
    def test_malformed_header(self, client: TestClient, header: str):
        response = client.get("/notifications/get_unread_count", headers={"Authorization": header})

        assert response.status_code == 401

    def test_wrong_secret(self, client: TestClient):
        token = make_token(secret="some-other-secret-of-enough-length")

        response = client.get("/notifications/get_unread_count", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_expired_token(self, client: TestClient):
        token = make_token(exp=datetime.now(timezone.utc) - timedelta(minutes=1))

        response = client.get("/notifications/get_unread_count", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_wrong_audience(self, client: TestClient):
        token = make_token(aud="service_role")

        response = client.get("/notifications/get_unread_count", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_token_without_subject(self, client: TestClient):
        token = make_token(sub="")

        response = client.get("/notifications/get_unread_count", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
