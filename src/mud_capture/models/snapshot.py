# mud_capture/models/snapshot.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Score snapshot model."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from ..helper import _utc_now
from .enums import ScoreVariant

SCHEMA_VERSION = 1


class Snapshot(BaseModel):
    """Immutable result of a finalized score capture.

    Attributes:
        raw: The captured block, lines joined with "\\n".
        variant: Detected score layout.
        parsed: Field-by-field extraction. Fields that could not be
            resolved are absent rather than defaulted.
        timestamp: When the block was finalized (UTC).
        source: Where the block came from ("score", "fixture", "manual").
        schema_version: Snapshot schema version.
    """

    model_config = ConfigDict(frozen=True)

    raw: str
    variant: ScoreVariant = ScoreVariant.UNKNOWN
    parsed: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=_utc_now)
    source: str = "score"
    schema_version: int = SCHEMA_VERSION

    @field_serializer("timestamp")
    def serialize_timestamp(self, dt: datetime, _info: Any) -> str:
        """Serialize datetime to ISO format string."""
        return dt.isoformat()
