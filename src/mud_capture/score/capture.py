# mud_capture/score/capture.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""
Passive score capture.

Watches the line stream for the start of a score block, buffers it and
decides where it ends without ever sending anything to the server. Two
layouts are handled by one state machine:

- table: a bordered sheet. The start border counts as the first border and
  the second border finalizes the block.
- report: the sentence-style sheet. It has no closing marker, so the block
  is "armed" by the terminal "You are <state>." sentence and ends on the
  first line after that which does not belong to a report. A second report
  arriving back-to-back is split off into its own block.

Prompt lines mixed into the output are never buffered. A runaway guard
bounds every session by lines and bytes seen.
"""

import logging
from typing import Optional

from ..config import ScoreCaptureConfig
from ..helper import _utc_now
from ..models.enums import CaptureMode, CaptureState
from ..models.results import CaptureResult
from ..models.session import CaptureSession, session_length
from ..models.snapshot import Snapshot
from ..models.status import ScoreCaptureStatus
from ..normalize import clean_line
from ..prompts import compile_optional
from ..sinks import ScoreSink
from .parser import detect_variant, parse_score
from .patterns import (
    is_border,
    is_prompt_noise,
    is_report_line,
    is_report_start,
    is_terminal_state,
    looks_like_score_block,
)

logger = logging.getLogger(__name__)

DROPPED_ERROR = "capture ended but block did not look like score output (dropped)"
NO_SINK_ERROR = "score sink not available"


class ScoreCapture:
    """State machine assembling score blocks from a line stream.

    Args:
        config: Guard sizes, prompt pattern and fallback switch.
        sink: Receives finalized snapshots. Optional; without one, valid
            blocks still finalize but the result carries an error.
    """

    def __init__(
        self,
        config: Optional[ScoreCaptureConfig] = None,
        sink: Optional[ScoreSink] = None,
    ):
        self.config = config or ScoreCaptureConfig()
        self.sink = sink
        self._prompt_pattern = compile_optional(self.config.prompt_pattern)

        self.session: Optional[CaptureSession] = None
        self.state = CaptureState.IDLE

        self.last_end_reason: Optional[str] = None
        self.last_ingest_ok: Optional[bool] = None
        self.last_ingest_error: Optional[str] = None
        self.last_captured_len: Optional[int] = None
        self.last_capture_at = None
        self.snapshots = 0
        self.aborts = 0

    @property
    def capturing(self) -> bool:
        return self.session is not None

    def is_noise(self, line: str) -> bool:
        return is_prompt_noise(line, self._prompt_pattern, self.config.noise_prefixes)

    def feed_line(self, raw: str) -> Optional[CaptureResult]:
        """Process one line of server output.

        Args:
            raw: Line as received; control sequences are stripped here.

        Returns:
            A result when this line ended a session, otherwise None.
        """
        line = clean_line(raw)

        if self.session is None:
            mode = self._detect_start(line)
            if mode is not None:
                self._begin(line, mode)
            return None

        return self._capture_line(line)

    def _detect_start(self, line: str) -> Optional[CaptureMode]:
        if is_border(line):
            return CaptureMode.TABLE
        if is_report_start(line):
            return CaptureMode.REPORT
        return None

    def _begin(self, line: str, mode: CaptureMode) -> None:
        self.session = CaptureSession.begin(mode, line, skip_once=True)
        if mode == CaptureMode.TABLE:
            self.session.border_count = 1
        self.state = CaptureState.CAPTURING
        self.last_end_reason = None
        self.last_ingest_ok = None
        self.last_ingest_error = None
        self.last_captured_len = None
        logger.debug(f"Score capture started ({mode.value}): {line!r}")

    def _capture_line(self, line: str) -> Optional[CaptureResult]:
        session = self.session

        # A host may deliver the start line to the line hook a second time.
        if session.skip_once:
            session.skip_once = False
            if line == session.start_line:
                return None

        session.note_seen(line)
        if session.lines_seen > self.config.max_lines:
            return self.abort(
                "guard:maxlines",
                f"capture aborted: exceeded max_lines={self.config.max_lines}",
            )
        if session.bytes_seen > self.config.max_bytes:
            return self.abort(
                "guard:maxbytes",
                f"capture aborted: exceeded max_bytes={self.config.max_bytes}",
            )

        noise = self.is_noise(line)
        if not noise:
            session.append(line)

        if session.mode == CaptureMode.TABLE:
            if is_border(line):
                session.border_count += 1
                if session.border_count >= 2:
                    return self._finalize("table:border")

        elif session.mode == CaptureMode.REPORT:
            if is_terminal_state(line):
                session.terminal_state_seen = True

            if session.terminal_state_seen:
                if is_report_start(line):
                    session.pop_if_last(line)
                    result = self._finalize("report:nextreport")
                    self._begin(line, CaptureMode.REPORT)
                    return result
                if is_border(line):
                    session.pop_if_last(line)
                    return self._finalize("report:nextborder")
                if not noise and not is_report_line(line):
                    session.pop_if_last(line)
                    return self._finalize("report:nonreport")
                if noise:
                    return self._finalize("report:promptnoise")

        if (
            self.config.enable_prompt_fallback
            and self._prompt_pattern is not None
            and self._prompt_pattern.search(line)
        ):
            return self._finalize("fallback:prompt")

        return None

    def reset(self, state: CaptureState = CaptureState.IDLE) -> None:
        """Drop the live session, if any, and move to ``state``."""
        self.session = None
        self.state = state

    def abort(self, reason: str = "abort:manual", error: Optional[str] = None) -> Optional[CaptureResult]:
        """Discard the live session, if any.

        Returns:
            The abort result, or None when nothing was capturing.
        """
        if self.session is None:
            return None
        line_count = len(self.session.buffer)
        self.reset(CaptureState.ABORTED)
        self.aborts += 1
        self.last_capture_at = _utc_now()
        self.last_end_reason = reason
        self.last_ingest_ok = False
        self.last_ingest_error = error or "capture aborted"
        self.last_captured_len = None
        logger.warning(f"Score capture aborted ({reason}): {self.last_ingest_error}")
        return CaptureResult(
            ok=False,
            reason=reason,
            error=self.last_ingest_error,
            aborted=True,
            line_count=line_count,
        )

    def _finalize(self, reason: str) -> CaptureResult:
        buffer = list(self.session.buffer)
        self.reset(CaptureState.DONE)
        self.last_capture_at = _utc_now()
        self.last_end_reason = reason

        while buffer and self.is_noise(buffer[-1]):
            buffer.pop()

        text = "\n".join(buffer)
        self.last_captured_len = len(text)

        if not looks_like_score_block(text):
            logger.warning(f"Score capture ended ({reason}) but block was dropped: {len(buffer)} lines")
            return self._record(CaptureResult(
                ok=False, reason=reason, error=DROPPED_ERROR, line_count=len(buffer),
            ))

        variant = detect_variant(text, self.config.long_table_markers)
        snapshot = Snapshot(
            raw=text,
            variant=variant,
            parsed=parse_score(text, variant),
            source="score",
        )
        self.snapshots += 1
        logger.info(f"Score snapshot captured ({reason}): {variant.value}, {len(buffer)} lines")

        if self.sink is None:
            return self._record(CaptureResult(
                ok=False, reason=reason, error=NO_SINK_ERROR,
                snapshot=snapshot, line_count=len(buffer),
            ))

        try:
            self.sink.publish_score(snapshot)
        except Exception as e:
            logger.warning(f"Score sink failed: {e}")
            return self._record(CaptureResult(
                ok=False, reason=reason, error=f"score sink failed: {e}",
                snapshot=snapshot, line_count=len(buffer),
            ))

        return self._record(CaptureResult(
            ok=True, reason=reason, snapshot=snapshot, line_count=len(buffer),
        ))

    def _record(self, result: CaptureResult) -> CaptureResult:
        self.last_ingest_ok = result.ok
        self.last_ingest_error = result.error
        return result

    def status(self) -> ScoreCaptureStatus:
        """Point-in-time diagnostics."""
        session = self.session
        return ScoreCaptureStatus(
            state=self.state,
            mode=session.mode if session else None,
            max_lines=self.config.max_lines,
            max_bytes=self.config.max_bytes,
            lines_seen=session.lines_seen if session else 0,
            bytes_seen=session.bytes_seen if session else 0,
            buffer_len=session_length(session),
            border_count=session.border_count if session else 0,
            terminal_state_seen=session.terminal_state_seen if session else False,
            last_end_reason=self.last_end_reason,
            last_ingest_ok=self.last_ingest_ok,
            last_ingest_error=self.last_ingest_error,
            last_captured_len=self.last_captured_len,
            last_capture_at=self.last_capture_at,
            snapshots=self.snapshots,
            aborts=self.aborts,
        )
