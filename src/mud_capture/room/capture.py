# mud_capture/room/capture.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""
Passive room snapshot capture.

A snapshot starts on a room header: a line carrying the room id
annotation ``(#123)``, or, when enabled, a line shaped like a room title.
Lines are buffered verbatim until the next prompt. A block that never
showed an exits line is discarded. Another header or title mid-block
aborts the block and starts a new one on that line.

While idle the capture also watches arrival and departure lines and
applies single-name movements to the current room state directly.
"""

import logging
from typing import Optional

from ..config import RoomCaptureConfig
from ..helper import _utc_now
from ..models.enums import Bucket, CaptureMode, CaptureState
from ..models.results import CaptureResult
from ..models.session import CaptureSession, session_length
from ..models.status import RoomCaptureStatus
from ..normalize import clean_line
from ..prompts import compile_optional
from ..entities.service import RoomEntitiesService
from .patterns import (
    ARRIVE,
    LEAVE,
    POOF,
    is_exits_line,
    is_room_header,
    is_room_prompt,
    looks_like_title,
    parse_movement,
)
from .status import RoomFeedStatus

logger = logging.getLogger(__name__)

CAPTURE_SOURCE = "roomfeed_capture"
MOVEMENT_SOURCE = "roomfeed_arriveleave"
POOF_REASON = "admin poof line seen, run look to resync"
UNRECOGNIZED_REASON = "unrecognized arrive/leave line, run look to resync"
NO_EXITS_ERROR = "room snapshot ended before an exits line was seen"
NO_SERVICE_ERROR = "room entities service not available"


class RoomCapture:
    """State machine assembling room snapshots from a line stream.

    Args:
        service: Receives finalized snapshots and movement deltas.
            Optional; without one, snapshots finalize with an error result.
        status: Feed health tracker notified of snapshots, aborts and
            degraded movement lines.
        config: Guard size, prompt pattern and title heuristic settings.
    """

    def __init__(
        self,
        service: Optional[RoomEntitiesService] = None,
        status: Optional[RoomFeedStatus] = None,
        config: Optional[RoomCaptureConfig] = None,
    ):
        self.service = service
        self.feed_status = status
        self.config = config or RoomCaptureConfig()
        self._prompt_pattern = compile_optional(self.config.prompt_pattern)

        self.session: Optional[CaptureSession] = None
        self.state = CaptureState.IDLE

        self.last_ok_at = None
        self.last_abort_reason: Optional[str] = None
        self.last_degraded_reason: Optional[str] = None
        self.snapshots = 0
        self.aborts = 0

    @property
    def capturing(self) -> bool:
        return self.session is not None

    def is_start(self, line: str) -> bool:
        if is_room_header(line):
            return True
        return self.config.detect_heuristic_titles and self._is_title(line)

    def _is_title(self, line: str) -> bool:
        return looks_like_title(line, self.config.title_min_length, self.config.title_max_length)

    def feed_line(self, raw: str) -> Optional[CaptureResult]:
        """Process one line of server output.

        Args:
            raw: Line as received. It is buffered verbatim; decisions use
                the cleaned projection.

        Returns:
            A result when this line ended or restarted a session,
            otherwise None.
        """
        raw = raw if isinstance(raw, str) else str(raw or "")
        line = clean_line(raw)

        if self.session is None:
            if self._handle_movement(line):
                return None
            if self.is_start(line):
                self._begin(raw, line)
            return None

        session = self.session

        if is_room_prompt(line, self._prompt_pattern):
            return self._finalize()

        session.lines_seen += 1
        if session.lines_seen > self.config.max_snapshot_lines:
            return self.abort("abort:max_lines")

        if line != session.start_line and self._is_restart(line):
            result = self.abort("abort:restart_header_seen")
            self._begin(raw, line)
            return result

        if is_exits_line(line):
            session.has_exits = True

        session.append(raw)
        return None

    def _is_restart(self, line: str) -> bool:
        return self.is_start(line)

    def _begin(self, raw: str, line: str) -> None:
        self.session = CaptureSession.begin(CaptureMode.ROOM, raw)
        self.session.start_line = line
        self.session.lines_seen = 1
        self.session.has_exits = is_exits_line(line)
        self.state = CaptureState.CAPTURING
        logger.debug(f"Room snapshot started: {line!r}")

    def reset(self, state: CaptureState = CaptureState.IDLE) -> None:
        """Drop the live session, if any, and move to ``state``."""
        self.session = None
        self.state = state

    def abort(self, reason: str = "abort:manual") -> Optional[CaptureResult]:
        """Discard the live session, if any."""
        if self.session is None:
            return None
        line_count = len(self.session.buffer)
        self.reset(CaptureState.ABORTED)
        self.aborts += 1
        self.last_abort_reason = reason
        if self.feed_status is not None:
            self.feed_status.note_abort(reason)
        logger.info(f"Room snapshot aborted ({reason}) after {line_count} lines")
        return CaptureResult(
            ok=False,
            reason=reason,
            error=f"room snapshot aborted: {reason}",
            aborted=True,
            line_count=line_count,
        )

    def _finalize(self) -> CaptureResult:
        session = self.session
        lines = list(session.buffer)

        if not session.has_exits:
            result = self.abort("end:prompt_before_exits")
            return result.model_copy(update={"error": NO_EXITS_ERROR})

        self.reset(CaptureState.DONE)

        if self.service is None:
            logger.warning(f"Room snapshot of {len(lines)} lines dropped: {NO_SERVICE_ERROR}")
            return CaptureResult(ok=False, reason="end:prompt", error=NO_SERVICE_ERROR, line_count=len(lines))

        ingest = self.service.ingest_lines(lines, source=CAPTURE_SOURCE)
        now = _utc_now()
        self.last_ok_at = now
        self.snapshots += 1
        if self.feed_status is not None:
            self.feed_status.note_snapshot(CAPTURE_SOURCE, now)

        entities = self.service.get_state()
        logger.info(f"Room snapshot captured: {len(lines)} lines, {entities.total()} entities")
        return CaptureResult(
            ok=ingest.ok,
            reason="end:prompt",
            error=ingest.error,
            entities=entities,
            line_count=len(lines),
        )

    def _degrade(self, reason: str) -> None:
        self.last_degraded_reason = reason
        if self.feed_status is not None:
            self.feed_status.note_degraded(reason)

    def _handle_movement(self, line: str) -> bool:
        """Apply an idle arrival/departure line.

        Returns:
            True if the line was a movement line (applied or not).
        """
        movement = parse_movement(line)
        if movement is None:
            return False

        if movement.kind == POOF:
            self._degrade(POOF_REASON)
            return True
        if movement.kind not in (ARRIVE, LEAVE) or not movement.name:
            self._degrade(UNRECOGNIZED_REASON)
            return True
        if self.service is None:
            return True

        state = self.service.get_state()
        if movement.kind == ARRIVE:
            changed = state.add(Bucket.UNKNOWN, movement.name)
            delta = {"arrived": movement.name}
        else:
            changed = state.remove(movement.name)
            delta = {"left": movement.name}

        if changed:
            logger.debug(f"Room movement: {delta}")
            self.service.set_state(state, source=MOVEMENT_SOURCE, force=True, delta=delta)
        return True

    def status(self) -> RoomCaptureStatus:
        session = self.session
        return RoomCaptureStatus(
            state=self.state,
            has_exits=session.has_exits if session else False,
            buffer_len=session_length(session),
            lines_seen=session.lines_seen if session else 0,
            max_snapshot_lines=self.config.max_snapshot_lines,
            last_ok_at=self.last_ok_at,
            last_abort_reason=self.last_abort_reason,
            last_degraded_reason=self.last_degraded_reason,
            snapshots=self.snapshots,
            aborts=self.aborts,
        )
