# tests/unit/mud_capture/test_models.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""
Unit tests for mud_capture.models.
"""

import pytest
from pydantic import ValidationError

from mud_capture.models import (
    Bucket,
    CaptureMode,
    CaptureSession,
    EntityBucketSet,
    SCHEMA_VERSION,
    ScoreVariant,
    Snapshot,
)


class TestEntityBucketSet:
    """Tests for the disjoint bucket set."""

    def test_all_buckets_present(self):
        data = EntityBucketSet().model_dump()
        assert data == {"players": [], "mobs": [], "items": [], "unknown": []}

    def test_accepts_lists_and_drops_blanks(self):
        buckets = EntityBucketSet(mobs=["A rat", " ", "A rat "], unknown=None)
        assert buckets.mobs == {"A rat"}
        assert buckets.unknown == set()

    def test_rejects_bare_string(self):
        """A string is a single name, not a collection of keys."""
        with pytest.raises(ValidationError):
            EntityBucketSet(mobs="A rat")

    def test_add_respects_precedence(self):
        buckets = EntityBucketSet()

        assert buckets.add(Bucket.UNKNOWN, "An altar") is True
        assert buckets.add(Bucket.ITEMS, "An altar") is True
        assert buckets.add(Bucket.MOBS, "An altar") is False
        assert buckets.find("An altar") == Bucket.ITEMS
        assert buckets.is_disjoint()

    def test_add_blank_key(self):
        assert EntityBucketSet().add(Bucket.MOBS, "  ") is False

    def test_remove(self):
        buckets = EntityBucketSet(players={"Xia"})
        assert buckets.remove("Xia") is True
        assert buckets.remove("Xia") is False

    def test_same_keys_ignores_order(self):
        a = EntityBucketSet(mobs=["A rat", "A bat"])
        b = EntityBucketSet(mobs=["A bat", "A rat"])
        assert a.same_keys(b)
        assert not a.same_keys(EntityBucketSet(unknown=["A rat", "A bat"]))

    def test_serialized_sorted(self):
        data = EntityBucketSet(mobs={"b", "a", "c"}).model_dump(mode="json")
        assert data["mobs"] == ["a", "b", "c"]

    def test_copy_is_deep(self):
        buckets = EntityBucketSet(mobs={"A rat"})
        copy = buckets.copy_state()
        copy.mobs.add("A bat")
        assert buckets.mobs == {"A rat"}

    def test_bucket_rank(self):
        assert Bucket.PLAYERS.rank < Bucket.ITEMS.rank < Bucket.MOBS.rank < Bucket.UNKNOWN.rank


class TestCaptureSession:
    """Tests for the session value."""

    def test_begin(self):
        session = CaptureSession.begin(CaptureMode.TABLE, "+---+", skip_once=True)

        assert session.buffer == ["+---+"]
        assert session.start_line == "+---+"
        assert session.skip_once is True

    def test_note_seen_counts_newline(self):
        session = CaptureSession.begin(CaptureMode.REPORT, "start")
        session.note_seen("abcd")
        assert session.lines_seen == 1
        assert session.bytes_seen == 5

    def test_pop_if_last(self):
        session = CaptureSession.begin(CaptureMode.REPORT, "a")
        session.append("b")
        session.pop_if_last("a")
        assert session.buffer == ["a", "b"]
        session.pop_if_last("b")
        assert session.buffer == ["a"]


class TestSnapshot:
    """Tests for the immutable snapshot."""

    def test_defaults(self):
        snapshot = Snapshot(raw="text")
        assert snapshot.variant == ScoreVariant.UNKNOWN
        assert snapshot.schema_version == SCHEMA_VERSION
        assert snapshot.source == "score"

    def test_frozen(self):
        snapshot = Snapshot(raw="text")
        with pytest.raises(ValidationError):
            snapshot.raw = "changed"

    def test_json_timestamp(self):
        data = Snapshot(raw="text").model_dump(mode="json")
        assert isinstance(data["timestamp"], str)
        assert "T" in data["timestamp"]
