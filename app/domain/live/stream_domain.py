"""Live stream records - who owns a broadcast and its seat lock."""

from beanie.operators import Set
from loguru import logger

from app.schemas import LiveStream, LiveStreamStatus
from app.schemas.schema_utils import utc_now
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .live_models import LiveStreamResponse


class LiveStreamService:
    """Tracks the broadcasts started through the live functions."""

    async def record_stream(self, stream_id: str, streamer_id: str, title: str) -> LiveStreamResponse:
        stream = LiveStream(stream_id=stream_id, streamer_id=streamer_id, title=title)
        await stream.insert()
        logger.info(f"Recorded live stream {stream_id} of streamer {streamer_id}")

        return LiveStreamResponse(**stream.model_dump(exclude={"id"}))

    async def find_stream(self, stream_id: str) -> LiveStreamResponse | None:
        stream = await LiveStream.find_one(LiveStream.stream_id == stream_id)
        if stream is None:
            return None
        return LiveStreamResponse(**stream.model_dump(exclude={"id"}))

    async def get_stream(self, stream_id: str) -> LiveStreamResponse:
        stream = await self.find_stream(stream_id)
        if stream is None:
            raise AppError(
                errcode=AppErrorCode.E_STREAM_NOT_FOUND,
                errmesg=f"Live stream not found: {stream_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return stream

    async def ensure_host(self, stream_id: str, actor_id: str) -> LiveStreamResponse:
        """Return the stream when `actor_id` started it, else raise 403."""
        stream = await self.get_stream(stream_id)
        if stream.streamer_id != actor_id:
            logger.warning(f"User {actor_id} is not the host of stream {stream_id}")
            raise AppError(
                errcode=AppErrorCode.E_FORBIDDEN,
                errmesg="Only the stream host can perform this action",
                status_code=HttpStatusCode.FORBIDDEN,
            )
        return stream

    async def end_stream(self, stream_id: str) -> bool:
        result = await LiveStream.find(
            LiveStream.stream_id == stream_id,
            LiveStream.status == LiveStreamStatus.LIVE,
        ).update(Set({LiveStream.status: LiveStreamStatus.ENDED, LiveStream.ended_at: utc_now()}))
        return bool(result and result.modified_count)

    async def set_seats_locked(self, stream_id: str, locked: bool) -> bool:
        result = await LiveStream.find(LiveStream.stream_id == stream_id).update(
            Set({LiveStream.seats_locked: locked})
        )
        return bool(result and result.modified_count)
