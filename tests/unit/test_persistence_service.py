# tests/unit/test_persistence_service.py
"""
Unit Tests for PersistenceService and ProfileStream
"""

from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from commentlens.services import PersistenceError, ProfileStream, ValidationError


# ============================================================================
# Profile Stream
# ============================================================================


class TestProfileStream:
    def test_new_subscriber_gets_current_value(self):
        stream = ProfileStream()
        listener = Mock()

        stream.subscribe(listener)

        listener.assert_called_once_with(None)

    def test_publish_reaches_subscribers_until_unsubscribed(self):
        stream = ProfileStream()
        listener = Mock()
        unsubscribe = stream.subscribe(listener)

        stream.publish("first")
        unsubscribe()
        stream.publish("second")

        assert [c.args[0] for c in listener.call_args_list] == [None, "first"]
        assert stream.current == "second"

    def test_failing_listener_does_not_block_others(self):
        stream = ProfileStream()
        broken = Mock(side_effect=[None, RuntimeError("boom")])
        healthy = Mock()
        stream.subscribe(broken)
        stream.subscribe(healthy)

        stream.publish("value")

        healthy.assert_called_with("value")

    def test_close_drops_subscribers(self):
        stream = ProfileStream()
        listener = Mock()
        stream.subscribe(listener)

        stream.close()
        stream.publish("ignored")

        assert stream.closed is True
        assert listener.call_count == 1
        assert stream.current is None


# ============================================================================
# Profiles and Credits
# ============================================================================


class TestProfiles:
    @pytest.mark.asyncio
    async def test_create_profile_grants_starting_credits(self, persistence):
        profile = await persistence.create_profile(
            "u1", email="ada@example.com", full_name="Ada"
        )

        assert profile.uid == "u1"
        assert profile.credits == 2
        assert profile.created_at is not None
        assert (await persistence.get_profile("u1")).full_name == "Ada"

    @pytest.mark.asyncio
    async def test_duplicate_profile_rejected(self, persistence):
        await persistence.create_profile("u1")

        with pytest.raises(ValidationError):
            await persistence.create_profile("u1")

    @pytest.mark.asyncio
    async def test_missing_profile_is_none(self, persistence):
        assert await persistence.get_profile("ghost") is None
        assert await persistence.update_profile("ghost", full_name="x") is None

    @pytest.mark.asyncio
    async def test_update_profile_cannot_write_credits(self, persistence):
        await persistence.create_profile("u1")

        profile = await persistence.update_profile(
            "u1", youtube_channel_name="AdaBuilds", credits=500
        )

        assert profile.youtube_channel_name == "AdaBuilds"
        assert profile.credits == 2

    @pytest.mark.asyncio
    async def test_deduct_until_empty(self, persistence):
        await persistence.create_profile("u1")

        assert await persistence.deduct_credit("u1") is True
        assert await persistence.deduct_credit("u1") is True
        assert await persistence.deduct_credit("u1") is False
        assert (await persistence.get_profile("u1")).credits == 0

    @pytest.mark.asyncio
    async def test_store_failure_becomes_persistence_error(self, persistence, monkeypatch):
        from commentlens.infrastructure.repositories import UserRepository

        async def broken(self, uid):
            raise OperationalError("UPDATE", {}, Exception("disk I/O error"))

        monkeypatch.setattr(UserRepository, "deduct_credit", broken)

        with pytest.raises(PersistenceError) as exc_info:
            await persistence.deduct_credit("u1")

        assert exc_info.value.operation == "deduct_credit"


class TestLiveProfile:
    @pytest.mark.asyncio
    async def test_sign_in_publishes_profile(self, persistence, profile_stream):
        await persistence.create_profile("u1")
        seen = []
        profile_stream.subscribe(seen.append)

        await persistence.sign_in("u1")

        assert seen[0] is None
        assert seen[-1].uid == "u1"
        assert persistence.signed_in_uid == "u1"

    @pytest.mark.asyncio
    async def test_credit_changes_are_pushed(self, persistence, profile_stream):
        await persistence.create_profile("u1")
        await persistence.sign_in("u1")
        seen = []
        profile_stream.subscribe(seen.append)

        await persistence.deduct_credit("u1")

        assert [p.credits for p in seen] == [2, 1]

    @pytest.mark.asyncio
    async def test_other_users_changes_not_pushed(self, persistence, profile_stream):
        await persistence.create_profile("u1")
        await persistence.create_profile("u2")
        await persistence.sign_in("u1")

        await persistence.deduct_credit("u2")

        assert profile_stream.current.uid == "u1"
        assert profile_stream.current.credits == 2

    @pytest.mark.asyncio
    async def test_sign_out_publishes_none(self, persistence, profile_stream):
        await persistence.create_profile("u1")
        await persistence.sign_in("u1")

        persistence.sign_out()

        assert profile_stream.current is None
        assert persistence.signed_in_uid is None


# ============================================================================
# Reports
# ============================================================================


class TestReports:
    @pytest.mark.asyncio
    async def test_save_and_read_back(self, persistence):
        await persistence.create_profile("u1")

        report_id = await persistence.save_report(
            "u1", "ABCDEFGHIJK", "Title", "https://youtu.be/ABCDEFGHIJK", {"a": 1}
        )
        report = await persistence.get_report("u1", report_id)

        assert report.id == report_id
        assert report.video_id == "ABCDEFGHIJK"
        assert report.report_data == {"a": 1}
        assert report.created_at is not None

    @pytest.mark.asyncio
    async def test_reports_are_private(self, persistence):
        await persistence.create_profile("u1")
        await persistence.create_profile("u2")
        report_id = await persistence.save_report("u1", "ABCDEFGHIJK", "T", "u", {})

        assert await persistence.get_report("u2", report_id) is None
        assert await persistence.get_reports("u2") == []
        assert len(await persistence.get_reports("u1")) == 1
