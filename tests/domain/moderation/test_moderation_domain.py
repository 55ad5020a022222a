"""Tests for the moderation domain service."""

import asyncio
from datetime import timedelta

import pytest

from app.domain.comments.comment_domain import CommentService
from app.domain.live.stream_domain import LiveStreamService
from app.domain.moderation.moderation_domain import ModerationService
from app.schemas import Notification, NotificationType, PinnedComment, TimedOutUser
from app.schemas.schema_utils import utc_now
from app.utils.app_errors import AppError


@pytest.mark.usefixtures("clear_collections")
class TestModerators:
    @pytest.fixture
    def service(self) -> ModerationService:
        return ModerationService()

    async def test_add_moderator_notifies_user(self, beanie_db, service: ModerationService):
        moderator = await service.add_moderator("streamer", "mod")

        assert moderator.moderator_id.startswith("md_")
        assert await service.is_moderator("streamer", "mod") is True

        notification = await Notification.find_one(Notification.receiver_id == "mod")
        assert notification is not None
        assert notification.type == NotificationType.MODERATOR_ROLE_UPDATED
        assert notification.sender_id == "streamer"

    async def test_add_moderator_twice(self, beanie_db, service: ModerationService):
        await service.add_moderator("streamer", "mod")

        with pytest.raises(AppError) as exc_info:
            await service.add_moderator("streamer", "mod")

        assert exc_info.value.status_code == 409
        assert exc_info.value.errcode == "E_ALREADY_MODERATOR"

    async def test_remove_moderator(self, beanie_db, service: ModerationService):
        await service.add_moderator("streamer", "mod")

        assert await service.remove_moderator("streamer", "mod") is True
        assert await service.remove_moderator("streamer", "mod") is False
        assert await service.get_moderators("streamer") == []

    async def test_moderators_newest_first(self, beanie_db, service: ModerationService):
        await service.add_moderator("streamer", "mod_1")
        await service.add_moderator("streamer", "mod_2")

        moderators = await service.get_moderators("streamer")

        assert [m.user_id for m in moderators] == ["mod_2", "mod_1"]

    async def test_can_moderate(self, beanie_db, service: ModerationService):
        await service.add_moderator("streamer", "mod")

        assert await service.can_moderate("streamer", "streamer") is True
        assert await service.can_moderate("streamer", "mod") is True
        assert await service.can_moderate("streamer", "viewer") is False

        with pytest.raises(AppError) as exc_info:
            await service.ensure_can_moderate("streamer", "viewer")
        assert exc_info.value.status_code == 403


@pytest.mark.usefixtures("clear_collections")
class TestBansAndTimeouts:
    @pytest.fixture
    def service(self) -> ModerationService:
        return ModerationService()

    async def test_ban_and_unban(self, beanie_db, service: ModerationService):
        ban = await service.ban_user("streamer", "troll", reason="spam")

        assert ban.reason == "spam"
        assert await service.is_banned("streamer", "troll") is True
        assert await service.is_banned("other_streamer", "troll") is False

        assert await service.unban_user("streamer", "troll") is True
        assert await service.is_banned("streamer", "troll") is False

    async def test_ban_twice(self, beanie_db, service: ModerationService):
        await service.ban_user("streamer", "troll")

        with pytest.raises(AppError) as exc_info:
            await service.ban_user("streamer", "troll")

        assert exc_info.value.status_code == 409
        assert exc_info.value.errcode == "E_ALREADY_BANNED"
        assert len(await service.get_banned_users("streamer")) == 1

    @pytest.mark.parametrize("minutes", [0, 61])
    async def test_timeout_out_of_range(self, beanie_db, service: ModerationService, minutes: int):
        with pytest.raises(AppError) as exc_info:
            await service.timeout_user("stream", "troll", minutes)

        assert exc_info.value.status_code == 400
        assert await TimedOutUser.count() == 0

    async def test_timeout_replaces_earlier_one(self, beanie_db, service: ModerationService):
        await service.timeout_user("stream", "troll", 1)
        latest = await service.timeout_user("stream", "troll", 60)

        timeouts = await TimedOutUser.find(TimedOutUser.stream_id == "stream").to_list()
        assert len(timeouts) == 1
        assert timeouts[0].timeout_id == latest.timeout_id
        assert latest.end_time - utc_now() > timedelta(minutes=59)

    async def test_is_timed_out(self, beanie_db, service: ModerationService):
        await service.timeout_user("stream", "troll", 5)

        assert await service.is_timed_out("stream", "troll") is True
        assert await service.is_timed_out("other_stream", "troll") is False

    async def test_expired_timeout(self, beanie_db, service: ModerationService):
        await TimedOutUser(
            timeout_id="to_expired",
            stream_id="stream",
            user_id="troll",
            end_time=utc_now() - timedelta(seconds=1),
        ).insert()

        assert await service.is_timed_out("stream", "troll") is False


@pytest.mark.usefixtures("clear_collections")
class TestPinsAndLikes:
    @pytest.fixture
    def service(self) -> ModerationService:
        return ModerationService()

    async def test_pin_out_of_range(self, beanie_db, service: ModerationService):
        with pytest.raises(AppError) as exc_info:
            await service.pin_comment("stream", "cm_1", "streamer", 6)

        assert exc_info.value.status_code == 400

    async def test_one_pin_per_stream(self, beanie_db, service: ModerationService):
        comments = CommentService()
        first = await comments.save_comment("stream", "viewer", "first!")
        second = await comments.save_comment("stream", "viewer", "second")

        await service.pin_comment("stream", first.comment_id, "streamer", 5)
        await service.pin_comment("stream", second.comment_id, "streamer", 5)

        assert await PinnedComment.find(PinnedComment.stream_id == "stream").count() == 1
        pinned = await service.get_pinned_comment("stream")
        assert pinned is not None
        assert pinned.comment_id == second.comment_id
        assert pinned.comment is not None
        assert pinned.comment.message == "second"

    async def test_expired_pin_is_removed(self, beanie_db, service: ModerationService):
        await PinnedComment(
            pin_id="pn_expired",
            stream_id="stream",
            comment_id="cm_1",
            pinned_by="streamer",
            expires_at=utc_now() - timedelta(seconds=1),
        ).insert()

        assert await service.get_pinned_comment("stream") is None
        assert await PinnedComment.count() == 0

    async def test_unpin(self, beanie_db, service: ModerationService):
        comment = await CommentService().save_comment("stream", "viewer", "pin me")
        await service.pin_comment("stream", comment.comment_id, "streamer", 1)

        assert await service.unpin_comment("stream") is True
        assert await service.get_pinned_comment("stream") is None

    async def test_remove_comment(self, beanie_db, service: ModerationService):
        comment = await CommentService().save_comment("stream", "troll", "bad words")

        assert await service.remove_comment(comment.comment_id) is True
        assert await service.remove_comment(comment.comment_id) is False

    async def test_likes(self, beanie_db, service: ModerationService):
        await service.like_comment("cm_1", "fan_1")
        await service.like_comment("cm_1", "fan_2")

        with pytest.raises(AppError) as exc_info:
            await service.like_comment("cm_1", "fan_1")
        assert exc_info.value.status_code == 409

        assert await service.get_comment_likes_count("cm_1") == 2
        assert await service.unlike_comment("cm_1", "fan_1") is True
        assert await service.get_comment_likes_count("cm_1") == 1

    async def test_pin_comment_of_another_stream(self, beanie_db, service: ModerationService):
        comment = await CommentService().save_comment("other_stream", "viewer", "elsewhere")

        with pytest.raises(AppError) as exc_info:
            await service.pin_comment("stream", comment.comment_id, "streamer", 2)

        assert exc_info.value.status_code == 404
        assert await PinnedComment.count() == 0

    async def test_concurrent_pins_leave_one(self, beanie_db, service: ModerationService):
        comments = CommentService()
        first = await comments.save_comment("stream", "viewer", "first!")
        second = await comments.save_comment("stream", "viewer", "second")

        pins = await asyncio.gather(
            service.pin_comment("stream", first.comment_id, "streamer", 5),
            service.pin_comment("stream", second.comment_id, "streamer", 5),
            service.pin_comment("stream", first.comment_id, "mod", 3),
        )

        assert len(pins) == 3
        assert await PinnedComment.find(PinnedComment.stream_id == "stream").count() == 1

    async def test_concurrent_timeouts_leave_one(self, beanie_db, service: ModerationService):
        await asyncio.gather(*(service.timeout_user("stream", "troll", minutes) for minutes in (1, 5, 10)))

        assert await TimedOutUser.find(TimedOutUser.stream_id == "stream").count() == 1
        assert await service.is_timed_out("stream", "troll") is True


@pytest.mark.usefixtures("clear_collections")
class TestStreamPermissions:
    """Stream and comment actions are checked against the recorded owner."""

    @pytest.fixture
    def service(self) -> ModerationService:
        return ModerationService()

    @pytest.fixture
    async def stream_id(self, beanie_db) -> str:
        stream = await LiveStreamService().record_stream("live_victim", "victim", "Victim's show")
        return stream.stream_id

    async def test_owner_and_moderators_allowed(self, beanie_db, service: ModerationService, stream_id: str):
        await service.add_moderator("victim", "mod")

        await service.ensure_can_moderate_stream(stream_id, "victim")
        await service.ensure_can_moderate_stream(stream_id, "mod")

    async def test_outsider_forbidden(self, beanie_db, service: ModerationService, stream_id: str):
        """Moderating one's own channel gives no rights over someone else's stream."""
        await service.add_moderator("attacker", "accomplice")

        for actor in ("attacker", "accomplice"):
            with pytest.raises(AppError) as exc_info:
                await service.ensure_can_moderate_stream(stream_id, actor)
            assert exc_info.value.status_code == 403

    async def test_unknown_stream(self, beanie_db, service: ModerationService):
        with pytest.raises(AppError) as exc_info:
            await service.ensure_can_moderate_stream("live_missing", "attacker")

        assert exc_info.value.status_code == 404
        assert exc_info.value.errcode == "E_STREAM_NOT_FOUND"

    async def test_comment_checked_against_its_stream(self, beanie_db, service: ModerationService, stream_id: str):
        comment = await CommentService().save_comment(stream_id, "fan", "great show")

        await service.ensure_can_moderate_comment(comment.comment_id, "victim")
        with pytest.raises(AppError) as exc_info:
            await service.ensure_can_moderate_comment(comment.comment_id, "attacker")

        assert exc_info.value.status_code == 403

    async def test_unknown_comment(self, beanie_db, service: ModerationService):
        with pytest.raises(AppError) as exc_info:
            await service.ensure_can_moderate_comment("cm_missing", "victim")

        assert exc_info.value.errcode == "E_COMMENT_NOT_FOUND"
