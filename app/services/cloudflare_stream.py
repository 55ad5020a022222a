"""Cloudflare Stream helper service.

A thin async wrapper around the Cloudflare Stream "live inputs" REST API:
https://developers.cloudflare.com/api/resources/stream/subresources/live_inputs/

Usage:
    from app.services.cloudflare_stream import get_cloudflare_stream_client

    client = get_cloudflare_stream_client()
    response = await client.create_live_input(title="My stream", user_id="user-123")
    await client.delete_live_input(response.result.uid)
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.app_config import get_app_environ_config


class CloudflareRtmps(BaseModel):
    """RTMPS ingest endpoint of a live input."""

    url: str | None = None
    stream_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("streamKey", "stream_key"),
    )


class CloudflareWebRtc(BaseModel):
    """WebRTC (WHIP) publish endpoint of a live input."""

    url: str | None = None


class CloudflareLiveInput(BaseModel):
    """Cloudflare live input data model."""

    uid: str | None = None
    rtmps: CloudflareRtmps | None = None
    web_rtc: CloudflareWebRtc | None = Field(
        default=None,
        validation_alias=AliasChoices("webRTC", "web_rtc"),
    )
    meta: dict[str, Any] | None = None
    created: str | None = None

    model_config = ConfigDict(extra="ignore")


class CloudflareApiResponse(BaseModel):
    """Envelope returned by every Cloudflare v4 API call."""

    success: bool = False
    errors: list[Any] | None = None
    messages: list[Any] | None = None
    result: CloudflareLiveInput | None = None

    model_config = ConfigDict(extra="ignore")


class CloudflareStreamClient:
    """Async client for Cloudflare Stream live inputs."""

    def __init__(
        self,
        account_id: str | None,
        api_token: str | None,
        base_url: str = "https://api.cloudflare.com/client/v4",
        timeout: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.account_id = account_id
        self.api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def has_credentials(self) -> bool:
        return bool(self.account_id and self.api_token)

    def _build_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }

    def _live_inputs_url(self, live_input_id: str | None = None) -> str:
        url = f"{self.base_url}/accounts/{self.account_id}/stream/live_inputs"
        return f"{url}/{live_input_id}" if live_input_id else url

    def get_playback_url(self, uid: str) -> str:
        """HLS manifest URL of a live input.

        Example:
            >>> client.get_playback_url("abc123")
            'https://customer-<account>.cloudflarestream.com/abc123/manifest/video.m3u8'
        """
        return f"https://customer-{self.account_id}.cloudflarestream.com/{uid}/manifest/video.m3u8"

    async def _request(self, method: str, url: str, **kwargs: Any) -> CloudflareApiResponse:
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            response = await client.request(method, url, headers=self._build_headers(), **kwargs)

        logger.debug(f"Cloudflare {method} {url} status={response.status_code}")

        # Some DELETE calls answer with an empty body
        if not response.content.strip():
            return CloudflareApiResponse(success=response.is_success)

        return CloudflareApiResponse.model_validate(response.json())

    async def create_live_input(self, title: str, user_id: str) -> CloudflareApiResponse:
        """Create a new live input tagged with the stream title and owner.

        Returns:
            CloudflareApiResponse whose `result` carries:
                - uid: live input identifier
                - rtmps.url / rtmps.stream_key: RTMPS ingest
                - web_rtc.url: WebRTC publish URL

        Raises:
            httpx.HTTPError: On transport failures
            ValueError: If the upstream body is not JSON
        """
        logger.info(f"Creating Cloudflare live input title={title!r} user_id={user_id}")
        result = await self._request(
            "POST",
            self._live_inputs_url(),
            json={"meta": {"title": title, "user_id": user_id}},
        )
        if result.success and result.result:
            logger.info(f"Created Cloudflare live input uid={result.result.uid}")
        return result

    async def delete_live_input(self, live_input_id: str) -> CloudflareApiResponse:
        """Delete a live input, ending its broadcast."""
        logger.info(f"Deleting Cloudflare live input uid={live_input_id}")
        result = await self._request("DELETE", self._live_inputs_url(live_input_id))
        if result.success:
            logger.info(f"Deleted Cloudflare live input uid={live_input_id}")
        return result


def get_cloudflare_stream_client() -> CloudflareStreamClient:
    cfg = get_app_environ_config()
    return CloudflareStreamClient(
        account_id=cfg.CF_ACCOUNT_ID,
        api_token=cfg.CF_API_TOKEN,
        base_url=cfg.CF_API_BASE_URL,
        timeout=cfg.HTTP_TIMEOUT,
    )
