# mud_capture/entities/service.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""
Room entities state.

Owns the current bucket set for the room the character is standing in.
Every change goes through one of the mutators below; each compares the
new state against the old one and suppresses the notification when the
buckets are identical, unless the caller forces it.
"""

import logging
import re
from itertools import count
from typing import Callable, Iterable, Mapping, Optional, Union

from ..helper import _utc_now, normalize_player_name
from ..models.buckets import EntityBucketSet
from ..models.enums import Bucket
from ..models.events import RoomUpdate
from ..models.results import IngestResult
from ..models.status import RoomEntitiesStats
from ..oracle import KnownPlayerOracle
from ..sinks import RoomSink
from .classifier import EntityClassifier
from .reclassify import MANUAL_SOURCE, ReclassificationEngine

logger = logging.getLogger(__name__)

RoomListener = Callable[[RoomUpdate], None]

LINE_SPLIT_PATTERN = re.compile(r"\r?\n|\r")


def _normalized(state: Union[EntityBucketSet, Mapping]) -> EntityBucketSet:
    """Validate and rebuild a state so its buckets are disjoint."""
    if not isinstance(state, EntityBucketSet):
        state = EntityBucketSet.model_validate(dict(state))
    result = EntityBucketSet()
    for name in Bucket:
        for key in state.bucket(name):
            result.add(name, key)
    return result


class RoomEntitiesService:
    """Current room occupants, classified into four buckets.

    Args:
        classifier: Classifier used by ``ingest_lines``.
        oracle: Known-player roster. When given, the service follows its
            changes through a ``ReclassificationEngine``.
        publisher: Optional downstream sink that receives every emitted
            state (for example a ``RedisStreamSink``).
    """

    def __init__(
        self,
        classifier: Optional[EntityClassifier] = None,
        oracle: Optional[KnownPlayerOracle] = None,
        publisher: Optional[RoomSink] = None,
    ):
        self.classifier = classifier or EntityClassifier()
        self.oracle = oracle
        self.publisher = publisher
        self.reclassifier = ReclassificationEngine(self, oracle) if oracle is not None else None

        self._state = EntityBucketSet()
        self._listeners: dict[int, RoomListener] = {}
        self._tokens = count(1)

        self.updates = 0
        self.emits = 0
        self.suppressed_emits = 0
        self.last_updated_at = None

    def get_state(self) -> EntityBucketSet:
        """Copy of the current state."""
        return self._state.copy_state()

    def known_players(self) -> frozenset[str]:
        if self.oracle is None:
            return frozenset()
        return self.oracle.current_players()

    def on_updated(self, handler: RoomListener) -> int:
        token = next(self._tokens)
        self._listeners[token] = handler
        return token

    def off(self, token: int) -> bool:
        return self._listeners.pop(token, None) is not None

    def set_state(
        self,
        new_state: Union[EntityBucketSet, Mapping],
        *,
        source: Optional[str] = None,
        force: bool = False,
        delta: Optional[dict] = None,
    ) -> IngestResult:
        """Replace the whole state."""
        try:
            new_state = _normalized(new_state)
        except (TypeError, ValueError) as e:
            return IngestResult.failure(f"set_state(new_state): invalid state: {e}")
        return self._apply(new_state, source=source, force=force, delta=delta)

    def update(
        self,
        delta: Mapping[str, Iterable[str]],
        *,
        source: Optional[str] = None,
        force: bool = False,
    ) -> IngestResult:
        """Replace only the buckets named in ``delta``."""
        if not isinstance(delta, Mapping):
            return IngestResult.failure("update(delta): delta must be a mapping")
        merged = self._state.copy_state()
        for name, keys in delta.items():
            try:
                bucket = Bucket(name)
            except ValueError:
                return IngestResult.failure(f"update(delta): unknown bucket {name!r}")
            if isinstance(keys, str):
                return IngestResult.failure(f"update(delta): bucket {name!r} must be a collection of keys")
            setattr(merged, bucket.value, {str(k).strip() for k in keys or () if str(k).strip()})
        return self._apply(
            _normalized(merged),
            source=source,
            force=force,
            delta={name: sorted(keys or ()) for name, keys in delta.items()},
        )

    def clear(self, *, source: Optional[str] = None, force: bool = False) -> IngestResult:
        return self._apply(EntityBucketSet(), source=source, force=force, delta={"cleared": True})

    def ingest_lines(
        self,
        lines: Iterable[str],
        *,
        source: str = "ingest_lines",
        force: bool = False,
        known_players: Optional[Iterable[str]] = None,
    ) -> IngestResult:
        """Classify a block of room lines and replace the state with it.

        Args:
            lines: Raw lines, oldest first.
            source: Recorded on the notification.
            force: Emit even when the state is unchanged.
            known_players: Override for the roster's names.
        """
        if isinstance(lines, str):
            return IngestResult.failure("ingest_lines(lines): lines must be a sequence of strings")
        if self.reclassifier is not None:
            self.reclassifier.ensure_subscribed()
        if known_players is None:
            known = self.known_players()
        else:
            known = frozenset(n for n in map(normalize_player_name, known_players) if n)
        buckets = self.classifier.classify(lines, known)
        return self._apply(buckets, source=source, force=force, delta=None)

    def ingest_text(self, text: str, **kwargs) -> IngestResult:
        """Split text into lines and ``ingest_lines`` them."""
        if not isinstance(text, str):
            return IngestResult.failure("ingest_text(text): text must be a string")
        lines = [line for line in LINE_SPLIT_PATTERN.split(text) if line]
        return self.ingest_lines(lines, **kwargs)

    def reclassify(self, source: str = MANUAL_SOURCE, force: bool = False) -> IngestResult:
        """Re-run known-player matching against the roster now."""
        if self.reclassifier is None:
            return IngestResult.failure("reclassify: no known-player oracle configured")
        self.reclassifier.ensure_subscribed()
        return self.reclassifier.reclassify(source=source, force=force)

    def stats(self) -> RoomEntitiesStats:
        engine = self.reclassifier
        return RoomEntitiesStats(
            updates=self.updates,
            emits=self.emits,
            suppressed_emits=self.suppressed_emits,
            last_updated_at=self.last_updated_at,
            total_keys=self._state.total(),
            subscribed=engine.subscribed if engine else False,
            subscription_error=engine.last_error if engine else None,
        )

    def _apply(
        self,
        new_state: EntityBucketSet,
        *,
        source: Optional[str],
        force: bool,
        delta: Optional[dict],
    ) -> IngestResult:
        if not force and new_state.same_keys(self._state):
            self.suppressed_emits += 1
            logger.debug(f"Room state unchanged ({source}); emit suppressed")
            return IngestResult(ok=True, suppressed=True)

        self._state = new_state
        self.updates += 1
        self.last_updated_at = _utc_now()

        update = RoomUpdate(state=self._state.copy_state(), delta=delta, source=source)
        errors = []
        for token, handler in list(self._listeners.items()):
            try:
                handler(update)
            except Exception as e:
                logger.warning(f"Room listener {token} failed: {e}")
                errors.append(f"listener {token}: {e}")

        if self.publisher is not None:
            try:
                self.publisher.publish_room(self._state.copy_state(), source or "room")
            except Exception as e:
                logger.warning(f"Room publisher failed: {e}")
                errors.append(f"publisher: {e}")

        if errors:
            return IngestResult(ok=False, error="; ".join(errors), emitted=True)
        self.emits += 1
        return IngestResult(ok=True, emitted=True)
