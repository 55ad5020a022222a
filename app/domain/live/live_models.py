"""Live broadcast domain models."""

from datetime import datetime

from pydantic import BaseModel

from app.schemas import LiveStreamStatus


class LiveStreamInfo(BaseModel):
    id: str
    live_input_id: str
    title: str
    status: str = "live"
    playback_url: str


class StartLiveResult(BaseModel):
    """A freshly created live input, ready for the broadcaster to publish to."""

    stream: LiveStreamInfo
    live_input_id: str
    ingest_url: str | None = None
    stream_key: str | None = None
    rtc_publish_url: str | None = None
    playback_url: str


class LiveStreamResponse(BaseModel):
    stream_id: str
    streamer_id: str
    title: str
    status: LiveStreamStatus
    seats_locked: bool
    created_at: datetime
    ended_at: datetime | None = None
