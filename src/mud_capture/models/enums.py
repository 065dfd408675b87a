# mud_capture/models/enums.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Enumeration types for capture state and classification."""

from enum import Enum


class CaptureState(str, Enum):
    """Lifecycle state of a capture family.

    Attributes:
        IDLE: Waiting for a start marker.
        CAPTURING: A session is live and buffering.
        DONE: The last session finalized (ready for the next start).
        ABORTED: The last session was discarded (guard trip or restart).
    """

    IDLE = "idle"
    CAPTURING = "capturing"
    DONE = "done"
    ABORTED = "aborted"


class CaptureMode(str, Enum):
    """Which sub-machine owns a capture session.

    Attributes:
        TABLE: Bordered score table ("+-=-=-+").
        REPORT: Sentence-style score report ("You are a 270 year-old ...").
        ROOM: Room description snapshot.
    """

    TABLE = "table"
    REPORT = "report"
    ROOM = "room"


class ScoreVariant(str, Enum):
    """Detected layout of a finalized score block."""

    TABLE_SHORT = "table_short"
    TABLE_LONG = "table_long"
    REPORT = "report"
    UNKNOWN = "unknown"


class Bucket(str, Enum):
    """The four disjoint entity buckets.

    Order of declaration is the precedence used when the same key is
    classified into two buckets by different lines.
    """

    PLAYERS = "players"
    ITEMS = "items"
    MOBS = "mobs"
    UNKNOWN = "unknown"

    @property
    def rank(self) -> int:
        return _BUCKET_RANK[self]


_BUCKET_RANK = {
    Bucket.PLAYERS: 0,
    Bucket.ITEMS: 1,
    Bucket.MOBS: 2,
    Bucket.UNKNOWN: 3,
}


class OverrideType(str, Enum):
    """User correction applied downstream of classification."""

    MOB = "mob"
    ITEM = "item"
    IGNORE = "ignore"


class FeedHealth(str, Enum):
    """Room feed health as reported to a UI.

    Attributes:
        LIVE: Watching and snapshots are fresh.
        PAUSED: Watching is turned off.
        STALE: No snapshot yet, or the last one is too old.
        DEGRADED: Fresh, but an unrecognized movement line was seen.
    """

    LIVE = "live"
    PAUSED = "paused"
    STALE = "stale"
    DEGRADED = "degraded"
