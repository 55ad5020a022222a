"""Unit tests for comments router endpoints."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.v1.dependency import User, get_current_user
from app.api.v1.errors import app_error_handler
from app.api.v1.routers.comments import get_comment_service, router
from app.domain.comments.comment_domain import CommentService
from app.domain.comments.comment_models import CommentResponse
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


@pytest.fixture
def mock_comment_service() -> AsyncMock:
    return AsyncMock(spec=CommentService)


@pytest.fixture
def client(mock_comment_service: AsyncMock) -> TestClient:
    app = FastAPI()
    app.dependency_overrides[get_current_user] = lambda: User(user_id="test_user_123")
    app.dependency_overrides[get_comment_service] = lambda: mock_comment_service
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.include_router(router)
    return TestClient(app)


def make_comment(comment_id: str, message: str = "nice") -> CommentResponse:
    return CommentResponse(
        comment_id=comment_id,
        stream_id="st_1",
        user_id="test_user_123",
        message=message,
        created_at=datetime.now(timezone.utc),
    )


class TestSaveComment:
    def test_save_comment(self, client: TestClient, mock_comment_service: AsyncMock):
        """Should save the comment as the authenticated user."""
        mock_comment_service.save_comment.return_value = make_comment("cm_1", "🔥")

        response = client.post("/comments/save_comment", json={"stream_id": "st_1", "message": "🔥"})

        assert response.status_code == 200
        assert response.json()["results"]["message"] == "🔥"
        mock_comment_service.save_comment.assert_awaited_once_with(
            stream_id="st_1", user_id="test_user_123", message="🔥"
        )

    def test_save_empty_comment(self, client: TestClient, mock_comment_service: AsyncMock):
        mock_comment_service.save_comment.side_effect = AppError(
            errcode=AppErrorCode.E_INVALID_REQUEST,
            errmesg="Comment message is required",
            status_code=HttpStatusCode.BAD_REQUEST,
        )

        response = client.post("/comments/save_comment", json={"stream_id": "st_1", "message": ""})

        assert response.status_code == 400
        assert response.json()["errmesg"] == "Comment message is required"


class TestListComments:
    def test_list_comments_keeps_service_order(self, client: TestClient, mock_comment_service: AsyncMock):
        mock_comment_service.get_comments.return_value = [make_comment("cm_1"), make_comment("cm_2")]

        response = client.get("/comments/list_comments", params={"stream_id": "st_1", "limit": 2})

        assert response.status_code == 200
        ids = [c["comment_id"] for c in response.json()["results"]["comments"]]
        assert ids == ["cm_1", "cm_2"]
        mock_comment_service.get_comments.assert_awaited_once_with("st_1", limit=2)

    def test_list_comments_limit_bounds(self, client: TestClient):
        response = client.get("/comments/list_comments", params={"stream_id": "st_1", "limit": 0})

        assert response.status_code == 422


class TestCommentCountAndDelete:
    def test_get_comment_count(self, client: TestClient, mock_comment_service: AsyncMock):
        mock_comment_service.get_comment_count.return_value = 7

        response = client.get("/comments/get_comment_count", params={"stream_id": "st_1"})

        assert response.json()["results"] == {"count": 7}

    def test_delete_comment_restricted_to_author(self, client: TestClient, mock_comment_service: AsyncMock):
        mock_comment_service.delete_comment.return_value = None

        response = client.post("/comments/delete_comment", json={"comment_id": "cm_1"})

        assert response.status_code == 200
        mock_comment_service.delete_comment.assert_awaited_once_with("cm_1", user_id="test_user_123")
