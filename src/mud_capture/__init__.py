# mud_capture/__init__.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""
Passive capture of MUD output.

Reconstructs character score sheets and room occupant lists from the raw
line stream of a text game, without ever sending a command.
"""

from .config import CaptureConfig, load_config
from .entities.classifier import EntityClassifier
from .entities.service import RoomEntitiesService
from .exceptions import CaptureConfigError, CaptureError, SinkUnavailableError
from .hub import CaptureHub
from .normalize import RawLine, clean_line
from .oracle import KnownPlayerOracle, PlayerRoster, RedisPlayerRoster
from .room.capture import RoomCapture
from .room.status import RoomFeedStatus
from .score.capture import ScoreCapture
from .score.store import ScoreStore
from .sinks import MemorySink, RedisStreamSink, SnapshotSink

__all__ = [
    "CaptureConfig",
    "load_config",
    "EntityClassifier",
    "RoomEntitiesService",
    "CaptureConfigError",
    "CaptureError",
    "SinkUnavailableError",
    "CaptureHub",
    "RawLine",
    "clean_line",
    "KnownPlayerOracle",
    "PlayerRoster",
    "RedisPlayerRoster",
    "RoomCapture",
    "RoomFeedStatus",
    "ScoreCapture",
    "ScoreStore",
    "MemorySink",
    "RedisStreamSink",
    "SnapshotSink",
]
