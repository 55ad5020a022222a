"""Unit tests for follow router endpoints."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.v1.dependency import User, get_current_user
from app.api.v1.errors import app_error_handler
from app.api.v1.routers.follow import get_follow_service, router
from app.domain.follow.follow_domain import FollowService
from app.domain.follow.follow_models import FollowResponse
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


@pytest.fixture
def mock_follow_service() -> AsyncMock:
    return AsyncMock(spec=FollowService)


@pytest.fixture
def client(mock_follow_service: AsyncMock) -> TestClient:
    app = FastAPI()
    app.dependency_overrides[get_current_user] = lambda: User(user_id="me")
    app.dependency_overrides[get_follow_service] = lambda: mock_follow_service
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.include_router(router)
    return TestClient(app)


class TestFollowUser:
    def test_follow_user(self, client: TestClient, mock_follow_service: AsyncMock):
        mock_follow_service.follow_user.return_value = FollowResponse(
            follow_id="fo_1", follower_id="me", following_id="creator", created_at=datetime.now(timezone.utc)
        )

        response = client.post("/follow/follow_user", json={"user_id": "creator"})

        assert response.status_code == 200
        assert response.json()["results"]["following_id"] == "creator"
        mock_follow_service.follow_user.assert_awaited_once_with(follower_id="me", following_id="creator")

    def test_follow_user_twice(self, client: TestClient, mock_follow_service: AsyncMock):
        """Should answer 409 when the edge already exists."""
        mock_follow_service.follow_user.side_effect = AppError(
            errcode=AppErrorCode.E_ALREADY_FOLLOWING,
            errmesg="Already following user: creator",
            status_code=HttpStatusCode.CONFLICT,
        )

        response = client.post("/follow/follow_user", json={"user_id": "creator"})

        assert response.status_code == 409
        assert response.json()["errcode"] == "E_ALREADY_FOLLOWING"

    def test_unfollow_user(self, client: TestClient, mock_follow_service: AsyncMock):
        mock_follow_service.unfollow_user.return_value = False

        response = client.post("/follow/unfollow_user", json={"user_id": "creator"})

        assert response.json()["results"] == {"changed": False}


class TestFollowQueries:
    def test_is_following(self, client: TestClient, mock_follow_service: AsyncMock):
        mock_follow_service.is_following.return_value = True

        response = client.get("/follow/is_following", params={"user_id": "creator"})

        assert response.json()["results"] == {"value": True}
        mock_follow_service.is_following.assert_awaited_once_with(follower_id="me", following_id="creator")

    def test_list_followers_defaults_to_caller(self, client: TestClient, mock_follow_service: AsyncMock):
        mock_follow_service.get_followers.return_value = []

        response = client.get("/follow/list_followers")

        assert response.json()["results"] == {"follows": []}
        mock_follow_service.get_followers.assert_awaited_once_with("me")

    def test_list_following_of_other_user(self, client: TestClient, mock_follow_service: AsyncMock):
        mock_follow_service.get_following.return_value = []

        client.get("/follow/list_following", params={"user_id": "creator"})

        mock_follow_service.get_following.assert_awaited_once_with("creator")
