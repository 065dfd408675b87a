# mud_capture/sinks.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Snapshot sinks: where finalized captures are delivered.

Sinks are synchronous and never retry. A sink that cannot deliver raises;
the capture boundary converts that into an error result.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Optional

import redis

from .exceptions import SinkUnavailableError
from .helper import _utc_now
from .models.buckets import EntityBucketSet
from .models.snapshot import Snapshot
from .redis_keys import RedisKeys

logger = logging.getLogger(__name__)


def _decode_stream_id(msg_id: str | bytes) -> str:
    if isinstance(msg_id, bytes):
        return msg_id.decode("utf-8")
    return str(msg_id)


class ScoreSink(ABC):
    """Destination for finalized score snapshots."""

    @abstractmethod
    def publish_score(self, snapshot: Snapshot) -> None:
        """Deliver a finalized score snapshot."""
        pass


class RoomSink(ABC):
    """Destination for room entity bucket states."""

    @abstractmethod
    def publish_room(self, state: EntityBucketSet, source: str) -> None:
        """Deliver a room entity bucket state."""
        pass


class SnapshotSink(ScoreSink, RoomSink):
    """A sink that takes both capture families."""


class MemorySink(SnapshotSink):
    """Collects everything in lists. Used by replay and tests."""

    def __init__(self):
        self.scores: list[Snapshot] = []
        self.rooms: list[tuple[EntityBucketSet, str]] = []

    def publish_score(self, snapshot: Snapshot) -> None:
        self.scores.append(snapshot)

    def publish_room(self, state: EntityBucketSet, source: str) -> None:
        self.rooms.append((state.copy_state(), source))

    @property
    def last_score(self) -> Optional[Snapshot]:
        return self.scores[-1] if self.scores else None

    @property
    def last_room(self) -> Optional[EntityBucketSet]:
        return self.rooms[-1][0] if self.rooms else None


class RedisStreamSink(SnapshotSink):
    """Appends JSON payloads to Redis streams.

    Each entry carries ``type``, ``source``, ``timestamp`` and a JSON
    ``data`` field. Streams are trimmed approximately to ``maxlen``.

    Args:
        redis_client: Sync redis client (``redis.Redis`` or compatible).
        score_stream: Stream key for score snapshots.
        room_stream: Stream key for room states.
        maxlen: Approximate stream length bound, or None for unbounded.
    """

    def __init__(
        self,
        redis_client,
        *,
        score_stream: str = RedisKeys.SCORE_STREAM,
        room_stream: str = RedisKeys.ROOM_STREAM,
        maxlen: Optional[int] = 1000,
    ):
        self.redis = redis_client
        self.score_stream = score_stream
        self.room_stream = room_stream
        self.maxlen = maxlen

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisStreamSink":
        return cls(redis.Redis.from_url(url, decode_responses=True), **kwargs)

    def _append(self, key: str, payload: dict) -> str:
        try:
            if self.maxlen is None:
                msg_id = self.redis.xadd(key, payload)
            else:
                msg_id = self.redis.xadd(
                    key,
                    payload,
                    maxlen=self.maxlen,
                    approximate=True,
                )
        except redis.RedisError as e:
            raise SinkUnavailableError(f"Failed to append to {key}: {e}") from e
        msg_id = _decode_stream_id(msg_id)
        logger.debug(f"Appended {payload['type']} entry {msg_id} to {key}")
        return msg_id

    def publish_score(self, snapshot: Snapshot) -> None:
        payload = {
            "type": "score",
            "source": snapshot.source,
            "timestamp": snapshot.timestamp.isoformat(),
            "data": snapshot.model_dump_json(),
        }
        self._append(self.score_stream, payload)

    def publish_room(self, state: EntityBucketSet, source: str) -> None:
        payload = {
            "type": "room",
            "source": source,
            "timestamp": _utc_now().isoformat(),
            "data": json.dumps(state.model_dump()),
        }
        self._append(self.room_stream, payload)
