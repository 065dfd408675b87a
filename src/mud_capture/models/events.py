# mud_capture/models/events.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Change notification payloads."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_serializer

from ..helper import _utc_now
from .buckets import EntityBucketSet
from .snapshot import Snapshot


class ScoreUpdate(BaseModel):
    """Score store change.

    Attributes:
        snapshot: The new latest snapshot; None after a clear.
        source: Who caused the change ("score", "fixture", "manual", ...).
        timestamp: When the change happened (UTC).
    """

    snapshot: Optional[Snapshot] = None
    source: str
    timestamp: datetime = Field(default_factory=_utc_now)

    @field_serializer("timestamp")
    def serialize_timestamp(self, dt: datetime, _info: Any) -> str:
        return dt.isoformat()


class RoomUpdate(BaseModel):
    """Room entity state change.

    Attributes:
        state: Copy of the new bucket state; safe to mutate.
        delta: What changed, when the caller knows ("cleared", the
            replaced buckets, the reclassified count).
        source: Who caused the change.
        timestamp: When the change happened (UTC).
    """

    state: EntityBucketSet
    delta: Optional[dict[str, Any]] = None
    source: Optional[str] = None
    timestamp: datetime = Field(default_factory=_utc_now)

    @field_serializer("timestamp")
    def serialize_timestamp(self, dt: datetime, _info: Any) -> str:
        return dt.isoformat()
