# mud_capture/room/status.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Room feed health tracking."""

import logging
from datetime import datetime
from typing import Optional

from ..helper import _utc_now
from ..models.enums import FeedHealth
from ..models.status import FeedHealthReport

logger = logging.getLogger(__name__)

DEFAULT_STALE_SECONDS = 90


class RoomFeedStatus:
    """Watch toggle plus the bookkeeping needed to rate feed health.

    Health is evaluated in order: PAUSED when watching is off, STALE when
    there is no snapshot or the last one is older than the threshold,
    DEGRADED when an unrecognized movement line has been seen since the
    last snapshot, LIVE otherwise.
    """

    def __init__(self, watch_enabled: bool = False, stale_seconds: int = DEFAULT_STALE_SECONDS):
        self.watch_enabled = watch_enabled
        self.stale_seconds = stale_seconds if stale_seconds > 0 else DEFAULT_STALE_SECONDS
        self.last_snapshot_at: Optional[datetime] = None
        self.last_snapshot_source: Optional[str] = None
        self.last_abort_reason: Optional[str] = None
        self.last_abort_at: Optional[datetime] = None
        self.degraded_reason: Optional[str] = None
        self.degraded_at: Optional[datetime] = None
        self.updates = 0

    def set_watch(self, enabled: bool) -> None:
        self.watch_enabled = bool(enabled)
        self.updates += 1
        logger.info(f"Room watch {'ON' if self.watch_enabled else 'OFF'}")

    def note_snapshot(self, source: str = "roomfeed_capture", at: Optional[datetime] = None) -> None:
        """Record a good snapshot; clears abort and degraded state."""
        self.last_snapshot_at = at or _utc_now()
        self.last_snapshot_source = source
        self.last_abort_reason = None
        self.last_abort_at = None
        self.degraded_reason = None
        self.degraded_at = None
        self.updates += 1

    def note_abort(self, reason: str, at: Optional[datetime] = None) -> None:
        self.last_abort_reason = reason
        self.last_abort_at = at or _utc_now()
        self.updates += 1

    def note_degraded(self, reason: str, at: Optional[datetime] = None) -> None:
        self.degraded_reason = reason
        self.degraded_at = at or _utc_now()
        self.updates += 1
        logger.warning(f"Room feed degraded: {reason}")

    def clear_degraded(self) -> None:
        self.degraded_reason = None
        self.degraded_at = None
        self.updates += 1

    def health(self, now: Optional[datetime] = None) -> FeedHealthReport:
        """Classify the feed for a UI badge.

        Args:
            now: Evaluation time; defaults to the current UTC time.
        """
        if not self.watch_enabled:
            return FeedHealthReport(state=FeedHealth.PAUSED, note="watch OFF")

        now = now or _utc_now()
        if self.last_snapshot_at is None:
            return FeedHealthReport(state=FeedHealth.STALE, note="no snapshot yet")

        age = (now - self.last_snapshot_at).total_seconds()
        if age < 0:
            return FeedHealthReport(state=FeedHealth.STALE, note="no snapshot yet", age_seconds=age)
        if age > self.stale_seconds:
            return FeedHealthReport(
                state=FeedHealth.STALE,
                note=f"last snapshot {int(age)}s ago",
                age_seconds=age,
            )

        if self.degraded_reason:
            return FeedHealthReport(state=FeedHealth.DEGRADED, note=self.degraded_reason, age_seconds=age)

        return FeedHealthReport(state=FeedHealth.LIVE, note="watch ON", age_seconds=age)
