# mud_capture/entities/reclassify.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Re-evaluation of room buckets when the known-player roster changes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Optional

from ..models.buckets import EntityBucketSet
from ..models.enums import Bucket
from ..models.results import IngestResult
from ..oracle import KnownPlayerOracle
from .matching import match_known_player

if TYPE_CHECKING:
    from .service import RoomEntitiesService

logger = logging.getLogger(__name__)

RECLASSIFY_SOURCE = "reclassify:roster"
MANUAL_SOURCE = "manual:reclassify"


def reclassify_buckets(
    current: EntityBucketSet, known_players: Iterable[str]
) -> tuple[EntityBucketSet, int]:
    """Move keys that now match a known player into ``players``.

    Existing players are kept as they are. Keys in ``unknown``, ``mobs``
    and ``items`` that match (exactly or by prefix) move to ``players``
    under the matched name, or under an existing player key that differs
    only in case; the rest stay put.

    Returns:
        The new bucket set and the number of keys moved.
    """
    known = frozenset(known_players)
    result = EntityBucketSet()
    players: dict[str, str] = {}
    for key in current.players:
        if result.add(Bucket.PLAYERS, key):
            players.setdefault(key.lower(), key)

    moved = 0
    for name in (Bucket.ITEMS, Bucket.MOBS, Bucket.UNKNOWN):
        for key in current.bucket(name):
            canonical = match_known_player(key, known)
            if canonical:
                canonical = players.setdefault(canonical.lower(), canonical)
                result.add(Bucket.PLAYERS, canonical)
                moved += 1
            else:
                result.add(name, key)
    return result, moved


class ReclassificationEngine:
    """Keeps a room entities service in step with a player roster.

    Subscribes to the roster's change notification at most once. A
    reclassification triggered while another is running is ignored.
    """

    def __init__(self, service: RoomEntitiesService, oracle: KnownPlayerOracle):
        self.service = service
        self.oracle = oracle
        self.token: Optional[int] = None
        self.last_error: Optional[str] = None
        self.running = False
        self.runs = 0

    @property
    def subscribed(self) -> bool:
        return self.token is not None

    def ensure_subscribed(self) -> bool:
        """Subscribe to roster changes if not already subscribed."""
        if self.token is not None:
            return True
        try:
            self.token = self.oracle.on_changed(self._on_roster_changed)
        except Exception as e:
            self.last_error = f"roster subscribe failed: {e}"
            logger.warning(self.last_error)
            return False
        self.last_error = None
        logger.debug(f"Subscribed to roster changes (token {self.token})")
        return True

    def unsubscribe(self) -> None:
        if self.token is not None:
            self.oracle.off(self.token)
            self.token = None

    def _on_roster_changed(self, players: frozenset[str]) -> None:
        self.reclassify(source=RECLASSIFY_SOURCE)

    def reclassify(self, source: str = MANUAL_SOURCE, force: bool = False) -> IngestResult:
        """Re-run known-player matching over the current state.

        Returns:
            The service result; ``suppressed`` when nothing moved.
        """
        if self.running:
            logger.debug("Reclassification already running; trigger ignored")
            return IngestResult(ok=True)

        self.running = True
        try:
            before = self.service.get_state()
            after, moved = reclassify_buckets(before, self.oracle.current_players())
            self.runs += 1
            if moved:
                logger.info(f"Reclassified {moved} room entities as players")
            return self.service.set_state(
                after,
                source=source,
                force=force,
                delta={"reclassified": moved},
            )
        finally:
            self.running = False
