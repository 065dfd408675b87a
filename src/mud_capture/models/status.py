# mud_capture/models/status.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Diagnostics snapshots for the capture families."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .enums import CaptureMode, CaptureState, FeedHealth


class ScoreCaptureStatus(BaseModel):
    """Point-in-time diagnostics for the score capture.

    Attributes:
        state: Current lifecycle state.
        mode: Mode of the live session, if any.
        max_lines: Configured line guard.
        max_bytes: Configured byte guard.
        lines_seen: Lines counted by the live session.
        bytes_seen: Bytes counted by the live session.
        buffer_len: Lines buffered by the live session.
        border_count: Border lines counted by the live session.
        terminal_state_seen: Whether the live report is armed.
        last_end_reason: Why the previous session ended.
        last_ingest_ok: Whether the previous session produced a snapshot.
        last_ingest_error: Error for the previous session, if any.
        last_captured_len: Length of the previous block's text.
        last_capture_at: When the previous session ended.
        snapshots: Snapshots produced since construction.
        aborts: Sessions aborted since construction.
    """

    state: CaptureState
    mode: Optional[CaptureMode] = None
    max_lines: int
    max_bytes: int
    lines_seen: int = 0
    bytes_seen: int = 0
    buffer_len: int = 0
    border_count: int = 0
    terminal_state_seen: bool = False
    last_end_reason: Optional[str] = None
    last_ingest_ok: Optional[bool] = None
    last_ingest_error: Optional[str] = None
    last_captured_len: Optional[int] = None
    last_capture_at: Optional[datetime] = None
    snapshots: int = 0
    aborts: int = 0


class RoomCaptureStatus(BaseModel):
    """Point-in-time diagnostics for the room capture."""

    state: CaptureState
    has_exits: bool = False
    buffer_len: int = 0
    lines_seen: int = 0
    max_snapshot_lines: int
    last_ok_at: Optional[datetime] = None
    last_abort_reason: Optional[str] = None
    last_degraded_reason: Optional[str] = None
    snapshots: int = 0
    aborts: int = 0


class RoomEntitiesStats(BaseModel):
    """Counters for the room entities service.

    Attributes:
        updates: State changes applied.
        emits: Change notifications delivered without error.
        suppressed_emits: Updates skipped because nothing changed.
        last_updated_at: When the state last changed.
        total_keys: Keys across all buckets.
        subscribed: Whether reclassification follows the roster.
        subscription_error: Why subscribing failed, if it did.
    """

    updates: int = 0
    emits: int = 0
    suppressed_emits: int = 0
    last_updated_at: Optional[datetime] = None
    total_keys: int = 0
    subscribed: bool = False
    subscription_error: Optional[str] = None


class FeedHealthReport(BaseModel):
    """Room feed health for a UI badge.

    Attributes:
        state: Health classification.
        note: Short human explanation.
        age_seconds: Seconds since the last snapshot, if any.
    """

    state: FeedHealth
    note: str
    age_seconds: Optional[float] = None
