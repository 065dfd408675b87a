# mud_capture/models/session.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Live capture session state."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..helper import _utc_now
from .enums import CaptureMode


@dataclass
class CaptureSession:
    """State of one in-progress block capture.

    A session is owned by exactly one capture state machine; at most one
    is live per capture family.

    Attributes:
        mode: Sub-machine that owns the session.
        buffer: Buffered lines, oldest first.
        start_line: Line the session began on.
        lines_seen: Lines observed after the start (noise included).
        bytes_seen: Bytes observed after the start (len + 1 per line).
        border_count: Border lines seen (table mode).
        terminal_state_seen: "You are <state>." seen (report mode).
        has_exits: Exits marker seen (room mode).
        skip_once: Armed re-entry guard for the first post-start line.
        started_at: When the session began.
    """

    mode: CaptureMode
    buffer: list[str] = field(default_factory=list)
    start_line: str = ""
    lines_seen: int = 0
    bytes_seen: int = 0
    border_count: int = 0
    terminal_state_seen: bool = False
    has_exits: bool = False
    skip_once: bool = False
    started_at: datetime = field(default_factory=_utc_now)

    @classmethod
    def begin(cls, mode: CaptureMode, first_line: str, *, skip_once: bool = False) -> "CaptureSession":
        """Start a session whose buffer holds the start line."""
        return cls(
            mode=mode,
            buffer=[first_line],
            start_line=first_line,
            skip_once=skip_once,
        )

    def append(self, line: str) -> None:
        self.buffer.append(line)

    def pop_if_last(self, line: str) -> None:
        """Drop the newest buffered line when it equals ``line``."""
        if self.buffer and self.buffer[-1] == line:
            self.buffer.pop()

    def note_seen(self, line: str) -> None:
        self.lines_seen += 1
        self.bytes_seen += len(line) + 1


def session_length(session: Optional[CaptureSession]) -> int:
    """Buffer length of a possibly-absent session."""
    return len(session.buffer) if session is not None else 0
