# mud_capture/score/store.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""In-memory score snapshot store with bounded history."""

import logging
from collections import deque
from itertools import count
from typing import Callable, Optional

from ..config import HistoryConfig, clamp_history_entries
from ..exceptions import SinkUnavailableError
from ..models.events import ScoreUpdate
from ..models.results import IngestResult
from ..models.snapshot import Snapshot
from ..sinks import ScoreSink
from .parser import detect_variant, parse_score

logger = logging.getLogger(__name__)

ScoreListener = Callable[[ScoreUpdate], None]

FIXTURES = {
    "basic": "\n".join([
        "[SCORE FIXTURE v1]",
        "Name: Vzae",
        "Class: Warrior",
        "Level: 50",
        "HP: 1234/5678",
        "Mana: 222/333",
        "Move: 44/55",
        "Gold: 98765",
        "Exp: 123456 (Next: 7890)",
    ]),
}


def get_fixture(name: str = "basic") -> Optional[str]:
    """Return deterministic fixture text, or None for an unknown name."""
    return FIXTURES.get(name or "basic")


class ScoreStore(ScoreSink):
    """Latest score snapshot plus a bounded, oldest-evicted history.

    The store is itself a score sink, so a ``ScoreCapture`` can deliver
    into it directly. Listeners registered with ``on_updated`` receive a
    ``ScoreUpdate``; its ``snapshot`` is None after ``clear``.

    Args:
        history: History bounds (default 50 entries).
        publisher: Optional downstream sink that receives every ingested
            snapshot (for example a ``RedisStreamSink``).
    """

    def __init__(
        self,
        history: Optional[HistoryConfig] = None,
        publisher: Optional[ScoreSink] = None,
    ):
        self.max_entries = (history or HistoryConfig()).max_entries
        self.publisher = publisher
        self._latest: Optional[Snapshot] = None
        self._history: deque[Snapshot] = deque(maxlen=self.max_entries)
        self._listeners: dict[int, ScoreListener] = {}
        self._tokens = count(1)

    @property
    def latest(self) -> Optional[Snapshot]:
        return self._latest

    def history(self) -> list[Snapshot]:
        """Snapshots oldest first."""
        return list(self._history)

    def set_max_entries(self, n) -> int:
        """Resize the history, evicting the oldest entries immediately.

        Returns:
            The clamped size actually applied.
        """
        self.max_entries = clamp_history_entries(n)
        self._history = deque(self._history, maxlen=self.max_entries)
        return self.max_entries

    def on_updated(self, handler: ScoreListener) -> int:
        token = next(self._tokens)
        self._listeners[token] = handler
        return token

    def off(self, token: int) -> bool:
        return self._listeners.pop(token, None) is not None

    def ingest(self, snapshot: Snapshot) -> IngestResult:
        """Store a snapshot and notify listeners and the publisher.

        The snapshot is kept even when a listener or the publisher fails;
        the failure is reported in the result.
        """
        self._latest = snapshot
        self._history.append(snapshot)
        logger.debug(f"Stored score snapshot from {snapshot.source} ({len(self._history)} in history)")

        errors = self._notify(snapshot, snapshot.source)
        if self.publisher is not None:
            try:
                self.publisher.publish_score(snapshot)
            except Exception as e:
                logger.warning(f"Score publisher failed: {e}")
                errors.append(f"publisher: {e}")

        if errors:
            return IngestResult(ok=False, error="; ".join(errors), emitted=True)
        return IngestResult(ok=True, emitted=True)

    def ingest_text(self, text: str, source: str = "manual") -> IngestResult:
        """Parse raw score text and store it."""
        if not isinstance(text, str) or not text:
            return IngestResult.failure("ingest_text(text): text must be a non-empty string")
        variant = detect_variant(text)
        snapshot = Snapshot(
            raw=text,
            variant=variant,
            parsed=parse_score(text, variant),
            source=source or "manual",
        )
        return self.ingest(snapshot)

    def ingest_fixture(self, name: str = "basic", source: str = "fixture") -> IngestResult:
        text = get_fixture(name)
        if text is None:
            return IngestResult.failure(f"unknown fixture: {name}")
        return self.ingest_text(text, source=source)

    def clear(self, source: str = "manual") -> IngestResult:
        """Drop the latest snapshot. History is kept."""
        self._latest = None
        errors = self._notify(None, source)
        if errors:
            return IngestResult(ok=False, error="; ".join(errors), emitted=True)
        return IngestResult(ok=True, emitted=True)

    def publish_score(self, snapshot: Snapshot) -> None:
        result = self.ingest(snapshot)
        if not result.ok:
            raise SinkUnavailableError(result.error)

    def _notify(self, snapshot: Optional[Snapshot], source: str) -> list[str]:
        errors = []
        for token, handler in list(self._listeners.items()):
            try:
                handler(ScoreUpdate(snapshot=snapshot, source=source))
            except Exception as e:
                logger.warning(f"Score listener {token} failed: {e}")
                errors.append(f"listener {token}: {e}")
        return errors
