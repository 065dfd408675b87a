# tests/unit/mud_capture/test_hub.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""
Unit tests for mud_capture.hub.

Tests both capture families sharing one line stream, in memory and
against fakeredis.
"""

import json

import fakeredis
import pytest
import redis

from mud_capture.config import CaptureConfig
from mud_capture.hub import CaptureHub
from mud_capture.models import FeedHealth
from mud_capture.oracle import PlayerRoster, RedisPlayerRoster
from mud_capture.redis_keys import RedisKeys
from mud_capture.sinks import MemorySink, RedisStreamSink

PROMPT = "<100hp 50mp 80mv>"


@pytest.fixture
def transcript(table_lines, room_lines):
    return table_lines + [PROMPT] + room_lines + [PROMPT]


class TestCaptureHub:
    """Tests for the in-memory hub."""

    def test_both_families_capture(self, transcript):
        hub = CaptureHub()
        results = hub.feed_lines(transcript)

        assert [r.reason for r in results] == ["table:border", "end:prompt"]
        assert all(r.ok for r in results)
        assert hub.score_store.latest.parsed["name"] == "Vzae"
        assert hub.entities.get_state().mobs == {"A cityguard"}
        assert hub.room_status.health().state == FeedHealth.LIVE

    def test_sink_receives_both(self, transcript):
        sink = MemorySink()
        hub = CaptureHub(sink=sink)
        hub.feed_lines(transcript)

        assert len(sink.scores) == 1
        assert sink.last_room.items == {"A bulletin board"}

    def test_roster_drives_room_players(self, transcript):
        roster = PlayerRoster()
        hub = CaptureHub(oracle=roster)
        hub.feed_lines(transcript)
        assert hub.entities.get_state().unknown == {"Scynox the adventurer"}

        roster.add("Scynox")
        assert hub.entities.get_state().players == {"Scynox"}

    def test_summary_is_json_ready(self, transcript):
        hub = CaptureHub()
        hub.feed_lines(transcript)

        summary = json.loads(json.dumps(hub.summary()))

        assert summary["score"]["latest"]["variant"] == "table_short"
        assert len(summary["score"]["history"]) == 1
        assert summary["score"]["status"]["last_end_reason"] == "table:border"
        assert summary["room"]["entities"]["mobs"] == ["A cityguard"]
        assert summary["room"]["health"]["state"] == "live"
        assert summary["room"]["stats"]["emits"] == 1

    def test_config_reaches_components(self):
        config = CaptureConfig.model_validate({
            "score": {"max_lines": 10},
            "room": {"max_snapshot_lines": 20},
            "history": {"max_entries": 3},
        })
        hub = CaptureHub(config)

        assert hub.score.config.max_lines == 10
        assert hub.room.config.max_snapshot_lines == 20
        assert hub.score_store.max_entries == 3


class TestFromConfig:
    """Tests for building a hub from configuration."""

    def test_without_redis(self):
        hub = CaptureHub.from_config(CaptureConfig(), known_players=["Xia"])

        assert hub.sink is None
        assert hub.oracle.current_players() == frozenset({"xia"})

    def test_with_redis(self, monkeypatch, transcript):
        fake = fakeredis.FakeRedis(decode_responses=True)
        fake.sadd(RedisKeys.KNOWN_PLAYERS, "Scynox")
        monkeypatch.setattr(redis.Redis, "from_url", lambda url, **kwargs: fake)

        hub = CaptureHub.from_config(CaptureConfig(), redis_url="redis://localhost:6379", known_players=["Xia"])

        assert isinstance(hub.sink, RedisStreamSink)
        assert isinstance(hub.oracle, RedisPlayerRoster)
        assert hub.oracle.current_players() == frozenset({"scynox", "xia"})

        hub.feed_lines(transcript)

        assert fake.xlen(RedisKeys.SCORE_STREAM) == 1
        assert fake.xlen(RedisKeys.ROOM_STREAM) == 1
        _, fields = fake.xrange(RedisKeys.ROOM_STREAM)[0]
        assert json.loads(fields["data"])["players"] == ["Scynox"]
