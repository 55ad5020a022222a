"""Unit tests for guest seat router endpoints."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.v1.dependency import User, get_current_user
from app.api.v1.errors import app_error_handler
from app.api.v1.routers.guests import get_guest_service, router
from app.domain.guests.guest_domain import GuestService
from app.domain.guests.guest_models import GuestInvitationResponse, GuestSeatResponse
from app.schemas import InvitationStatus
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_guest_service() -> AsyncMock:
    return AsyncMock(spec=GuestService)


@pytest.fixture
def client(mock_guest_service: AsyncMock) -> TestClient:
    app = FastAPI()
    app.dependency_overrides[get_current_user] = lambda: User(user_id="host")
    app.dependency_overrides[get_guest_service] = lambda: mock_guest_service
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.include_router(router)
    return TestClient(app)


def make_seat(**overrides) -> GuestSeatResponse:
    fields = {
        "seat_id": "gs_1",
        "stream_id": "live_1",
        "user_id": "guest",
        "seat_index": 0,
        "display_name": "Guest",
        "is_active": True,
        "is_moderator": False,
        "mic_enabled": True,
        "camera_enabled": True,
        "joined_at": NOW,
    }
    fields.update(overrides)
    return GuestSeatResponse(**fields)


class TestGuestsRouter:
    def test_invite_as_caller(self, client: TestClient, mock_guest_service: AsyncMock):
        mock_guest_service.invite_guest.return_value = GuestInvitationResponse(
            invitation_id="gi_1",
            stream_id="live_1",
            inviter_id="host",
            invitee_id="guest",
            seat_index=0,
            status=InvitationStatus.PENDING,
            created_at=NOW,
            expires_at=NOW + timedelta(minutes=2),
        )

        response = client.post("/guests/invite_guest", json={"stream_id": "live_1", "invitee_id": "guest"})

        assert response.status_code == 200
        assert response.json()["results"]["expires_at"] == "2026-03-01T12:02:00+00:00"
        mock_guest_service.invite_guest.assert_awaited_once_with("live_1", inviter_id="host", invitee_id="guest")

    def test_invite_not_host(self, client: TestClient, mock_guest_service: AsyncMock):
        mock_guest_service.invite_guest.side_effect = AppError(
            errcode=AppErrorCode.E_FORBIDDEN,
            errmesg="Only the stream host can perform this action",
            status_code=HttpStatusCode.FORBIDDEN,
        )

        response = client.post("/guests/invite_guest", json={"stream_id": "live_1", "invitee_id": "guest"})

        assert response.status_code == 403

    def test_accept_invitation(self, client: TestClient, mock_guest_service: AsyncMock):
        mock_guest_service.accept_invitation.return_value = make_seat(user_id="host", display_name="Roaster")

        response = client.post("/guests/accept_invitation", json={"invitation_id": "gi_1", "display_name": "Roaster"})

        assert response.json()["results"]["display_name"] == "Roaster"
        mock_guest_service.accept_invitation.assert_awaited_once_with("gi_1", "host", "Roaster")

    def test_list_seats(self, client: TestClient, mock_guest_service: AsyncMock):
        mock_guest_service.get_guest_seats.return_value = [make_seat(), make_seat(seat_id="gs_2", seat_index=1)]

        response = client.get("/guests/list_seats", params={"stream_id": "live_1"})

        assert len(response.json()["results"]["seats"]) == 2
        mock_guest_service.get_guest_seats.assert_awaited_once_with("live_1", active_only=True)

    def test_update_mic_defaults_to_caller(self, client: TestClient, mock_guest_service: AsyncMock):
        mock_guest_service.update_mic_status.return_value = True

        response = client.post("/guests/update_mic", json={"stream_id": "live_1", "mic_enabled": False})

        assert response.json()["results"] == {"changed": True}
        mock_guest_service.update_mic_status.assert_awaited_once_with(
            "live_1", "host", actor_id="host", mic_enabled=False
        )

    def test_update_camera_of_guest(self, client: TestClient, mock_guest_service: AsyncMock):
        mock_guest_service.update_camera_status.return_value = True

        client.post("/guests/update_camera", json={"stream_id": "live_1", "user_id": "guest", "camera_enabled": False})

        mock_guest_service.update_camera_status.assert_awaited_once_with(
            "live_1", "guest", actor_id="host", camera_enabled=False
        )

    def test_swap_seats_out_of_range(self, client: TestClient, mock_guest_service: AsyncMock):
        response = client.post("/guests/swap_seats", json={"stream_id": "live_1", "seat_index_1": 0, "seat_index_2": 9})

        assert response.status_code == 422
        mock_guest_service.swap_seats.assert_not_awaited()

    def test_end_all_sessions(self, client: TestClient, mock_guest_service: AsyncMock):
        mock_guest_service.end_all_guest_sessions.return_value = 3

        response = client.post("/guests/end_all_sessions", json={"stream_id": "live_1"})

        assert response.json()["results"] == {"count": 3}
        mock_guest_service.end_all_guest_sessions.assert_awaited_once_with("live_1", host_id="host")
