"""Live broadcast domain service - proxy to the video platform's live inputs."""

import orjson
from loguru import logger

from app.services.cloudflare_stream import CloudflareStreamClient, get_cloudflare_stream_client
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ..guests.guest_domain import GuestService
from .live_models import LiveStreamInfo, StartLiveResult
from .stream_domain import LiveStreamService

MISSING_CREDENTIALS_MESSAGE = (
    "Missing Cloudflare credentials. Please configure CF_ACCOUNT_ID (or CLOUDFLARE_ACCOUNT_ID) "
    "and CF_API_TOKEN (or CLOUDFLARE_API_TOKEN)."
)


def _upstream_errors(errors: list | None, fallback: str) -> str:
    return orjson.dumps(errors).decode() if errors is not None else fallback


class LiveService:
    """Starts and stops broadcasts by creating and deleting live inputs.

    Each call makes a single upstream request, never retried. Started
    broadcasts are recorded so that their owner can be checked later.
    """

    def __init__(
        self,
        client: CloudflareStreamClient | None = None,
        streams: LiveStreamService | None = None,
        guests: GuestService | None = None,
    ):
        self._client = client or get_cloudflare_stream_client()
        self._streams = streams or LiveStreamService()
        self._guests = guests or GuestService(streams=self._streams)

    def _ensure_credentials(self) -> None:
        if not self._client.has_credentials:
            logger.error("Cloudflare credentials not configured")
            raise AppError(
                errcode=AppErrorCode.E_STREAM_CONFIG_MISSING,
                errmesg=MISSING_CREDENTIALS_MESSAGE,
                status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
            )

    async def start_live(
        self, title: str | None, user_id: str | None, owner_id: str | None = None
    ) -> StartLiveResult:
        """Create a live input for `user_id` and return its ingest and playback endpoints.

        The stream is recorded as owned by `owner_id`, the authenticated
        caller, falling back to `user_id`.

        Raises AppError 400 on missing fields or upstream rejection, 500 on
        missing credentials or a result without uid.
        """
        if not title or not user_id:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="Missing required fields: title and user_id are required",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        self._ensure_credentials()

        response = await self._client.create_live_input(title=title, user_id=user_id)

        if not response.success or response.result is None:
            raise AppError(
                errcode=AppErrorCode.E_STREAM_PROVIDER_ERROR,
                errmesg=_upstream_errors(response.errors, "Cloudflare API error"),
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        live_input = response.result
        uid = live_input.uid
        if not uid:
            raise AppError(
                errcode=AppErrorCode.E_STREAM_PROVIDER_ERROR,
                errmesg="Missing uid in Cloudflare response",
                status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
            )

        await self._streams.record_stream(uid, owner_id or user_id, title)

        playback_url = self._client.get_playback_url(uid)
        rtmps = live_input.rtmps
        web_rtc = live_input.web_rtc

        return StartLiveResult(
            stream=LiveStreamInfo(
                id=uid,
                live_input_id=uid,
                title=title,
                playback_url=playback_url,
            ),
            live_input_id=uid,
            ingest_url=rtmps.url if rtmps else None,
            stream_key=rtmps.stream_key if rtmps else None,
            rtc_publish_url=web_rtc.url if web_rtc else None,
            playback_url=playback_url,
        )

    async def stop_live(self, live_input_id: str | None, actor_id: str) -> None:
        """Delete the live input, ending the broadcast and its guest sessions.

        Raises AppError 400 on a missing id or upstream rejection, 404 for an
        unknown stream, 403 when `actor_id` did not start it, 500 on missing
        credentials.
        """
        if not live_input_id:
            logger.warning("stop_live called without live_input_id")
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="Missing live_input_id parameter",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        self._ensure_credentials()

        await self._streams.ensure_host(live_input_id, actor_id)

        response = await self._client.delete_live_input(live_input_id)

        if not response.success:
            logger.error(f"Cloudflare delete error: {response.errors}")
            raise AppError(
                errcode=AppErrorCode.E_STREAM_PROVIDER_ERROR,
                errmesg=_upstream_errors(response.errors, "Failed to delete Cloudflare live input"),
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        await self._streams.end_stream(live_input_id)
        await self._guests.end_all_guest_sessions(live_input_id)
        logger.info(f"Live stream {live_input_id} ended by {actor_id}")
