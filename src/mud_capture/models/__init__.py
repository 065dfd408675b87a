# mud_capture/models/__init__.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Pydantic models and enums for the capture package."""

from .enums import (
    Bucket,
    CaptureMode,
    CaptureState,
    FeedHealth,
    OverrideType,
    ScoreVariant,
)
from .buckets import EntityBucketSet
from .events import RoomUpdate, ScoreUpdate
from .results import CaptureResult, IngestResult
from .session import CaptureSession
from .snapshot import SCHEMA_VERSION, Snapshot
from .status import (
    FeedHealthReport,
    RoomCaptureStatus,
    RoomEntitiesStats,
    ScoreCaptureStatus,
)

__all__ = [
    # Enums
    "Bucket",
    "CaptureMode",
    "CaptureState",
    "FeedHealth",
    "OverrideType",
    "ScoreVariant",
    # Models
    "EntityBucketSet",
    "RoomUpdate",
    "ScoreUpdate",
    "CaptureResult",
    "IngestResult",
    "CaptureSession",
    "SCHEMA_VERSION",
    "Snapshot",
    "FeedHealthReport",
    "RoomCaptureStatus",
    "RoomEntitiesStats",
    "ScoreCaptureStatus",
]
