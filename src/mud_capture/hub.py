# mud_capture/hub.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""
Wiring for both capture families.

``CaptureHub`` builds the score and room pipelines from one configuration
and fans every incoming line out to both. The families never share a
buffer; each line is processed to completion by the score capture and
then by the room capture.
"""

import logging
from typing import Any, Iterable, Optional

from .config import CaptureConfig
from .entities.classifier import EntityClassifier
from .entities.service import RoomEntitiesService
from .models.results import CaptureResult
from .oracle import KnownPlayerOracle, PlayerRoster, RedisPlayerRoster
from .room.capture import RoomCapture
from .room.status import RoomFeedStatus
from .score.capture import ScoreCapture
from .score.store import ScoreStore
from .sinks import RedisStreamSink, SnapshotSink

logger = logging.getLogger(__name__)


class CaptureHub:
    """Score and room capture sharing one line stream.

    Args:
        config: Capture configuration; defaults throughout when omitted.
        oracle: Known-player roster. An empty in-memory roster is used
            when omitted.
        sink: Optional downstream sink for score snapshots and room
            states (for example a ``RedisStreamSink``).
    """

    def __init__(
        self,
        config: Optional[CaptureConfig] = None,
        *,
        oracle: Optional[KnownPlayerOracle] = None,
        sink: Optional[SnapshotSink] = None,
    ):
        self.config = config or CaptureConfig()
        self.oracle = oracle if oracle is not None else PlayerRoster()
        self.sink = sink

        self.score_store = ScoreStore(self.config.history, publisher=sink)
        self.score = ScoreCapture(self.config.score, sink=self.score_store)

        self.room_status = RoomFeedStatus(watch_enabled=True)
        self.entities = RoomEntitiesService(
            EntityClassifier(self.config.classifier),
            oracle=self.oracle,
            publisher=sink,
        )
        self.room = RoomCapture(self.entities, self.room_status, self.config.room)

    @classmethod
    def from_config(
        cls,
        config: CaptureConfig,
        *,
        redis_url: Optional[str] = None,
        known_players: Iterable[str] = (),
    ) -> "CaptureHub":
        """Build a hub, connecting to Redis when a URL is configured.

        With Redis, snapshots go to the configured streams and the roster
        is read from the configured set (``known_players`` are added on
        top). Without it, everything stays in memory.
        """
        url = redis_url or config.redis.url
        if not url:
            return cls(config, oracle=PlayerRoster(known_players))

        sink = RedisStreamSink.from_url(
            url,
            score_stream=config.redis.score_stream,
            room_stream=config.redis.room_stream,
            maxlen=config.redis.stream_maxlen,
        )
        roster = RedisPlayerRoster(sink.redis, key=config.redis.known_players_key)
        roster.refresh()
        roster.set_players(roster.current_players() | set(known_players))
        logger.info(f"Publishing captures to Redis ({len(roster.current_players())} known players)")
        return cls(config, oracle=roster, sink=sink)

    def feed_line(self, raw: str) -> list[CaptureResult]:
        """Hand one line to both families; returns any session results."""
        results = []
        score_result = self.score.feed_line(raw)
        if score_result is not None:
            results.append(score_result)
        room_result = self.room.feed_line(raw)
        if room_result is not None:
            results.append(room_result)
        return results

    def feed_lines(self, lines: Iterable[str]) -> list[CaptureResult]:
        results = []
        for raw in lines:
            results.extend(self.feed_line(raw))
        return results

    def summary(self) -> dict[str, Any]:
        """JSON-ready view of everything captured so far."""
        latest = self.score_store.latest
        return {
            "score": {
                "latest": latest.model_dump(mode="json") if latest else None,
                "history": [s.model_dump(mode="json") for s in self.score_store.history()],
                "status": self.score.status().model_dump(mode="json"),
            },
            "room": {
                "entities": self.entities.get_state().model_dump(mode="json"),
                "status": self.room.status().model_dump(mode="json"),
                "health": self.room_status.health().model_dump(mode="json"),
                "stats": self.entities.stats().model_dump(mode="json"),
            },
        }
