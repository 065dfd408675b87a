# mud_capture/models/results.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Result values returned at the finalize and ingest boundaries.

Capture never raises for malformed input; callers inspect these instead.
"""

from typing import Optional

from pydantic import BaseModel

from .buckets import EntityBucketSet
from .snapshot import Snapshot


class IngestResult(BaseModel):
    """Outcome of handing data to a store or service.

    Attributes:
        ok: True when the data was accepted and all notifications went out.
        error: Human-readable error when ``ok`` is False.
        emitted: Whether an update notification was sent.
        suppressed: Whether the update was skipped because nothing changed.
    """

    ok: bool = True
    error: Optional[str] = None
    emitted: bool = False
    suppressed: bool = False

    @classmethod
    def failure(cls, error: str) -> "IngestResult":
        return cls(ok=False, error=error)


class CaptureResult(BaseModel):
    """Outcome of a capture session ending.

    Produced whenever a session finalizes or aborts. A result with
    ``ok=False`` and a ``snapshot`` means the block was valid but the sink
    could not take it.

    Attributes:
        ok: True when the block was produced and delivered.
        reason: End reason ("table:border", "guard:maxlines", ...).
        error: Error text when ``ok`` is False.
        aborted: True when the session was discarded without output.
        snapshot: Score snapshot produced by the score family.
        entities: Bucket state produced by the room family.
        line_count: Buffered lines at the end of the session.
    """

    ok: bool
    reason: str
    error: Optional[str] = None
    aborted: bool = False
    snapshot: Optional[Snapshot] = None
    entities: Optional[EntityBucketSet] = None
    line_count: int = 0
