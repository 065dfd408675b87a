# tests/unit/mud_capture/test_score_capture.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""
Unit tests for mud_capture.score.capture.

Tests the score capture state machine: table and report boundaries, the
re-entry guard, runaway guards, the shape check and sink handling.
"""

import pytest

from mud_capture.config import ScoreCaptureConfig
from mud_capture.exceptions import SinkUnavailableError
from mud_capture.models import CaptureMode, CaptureState, ScoreVariant
from mud_capture.score.capture import DROPPED_ERROR, NO_SINK_ERROR, ScoreCapture
from mud_capture.sinks import MemorySink, ScoreSink

BORDER = "+-=-=-=-=-=-=-+"
PROMPT = "<100hp 50mp 80mv>"


class FailingSink(ScoreSink):
    """Sink whose backend is gone."""

    def publish_score(self, snapshot):
        raise SinkUnavailableError("redis down")


def feed(capture, lines):
    """Feed lines and collect every non-None result."""
    results = []
    for line in lines:
        result = capture.feed_line(line)
        if result is not None:
            results.append(result)
    return results


@pytest.fixture
def sink():
    return MemorySink()


@pytest.fixture
def capture(sink):
    return ScoreCapture(sink=sink)


class TestTableCapture:
    """Tests for the bordered table layout."""

    def test_vzae_table(self, capture, sink):
        """The minimal table yields one short-table snapshot."""
        results = feed(capture, [
            "+-=-=-=-=-=-=-+",
            "| Name: Vzae | Class: Warrior | Level: 50 |",
            "+-=-=-=-=-=-=-+",
        ])

        assert len(results) == 1
        assert results[0].ok is True
        assert results[0].reason == "table:border"
        assert len(sink.scores) == 1
        snapshot = sink.scores[0]
        assert snapshot.variant == ScoreVariant.TABLE_SHORT
        assert snapshot.parsed["name"] == "Vzae"
        assert snapshot.parsed["class"] == "Warrior"
        assert snapshot.parsed["level"] == 50
        assert snapshot.source == "score"

    def test_single_border_never_finalizes(self, capture, sink):
        """Without the second border there is no snapshot."""
        results = feed(capture, [
            BORDER,
            "| Name: Vzae | Class: Warrior | Level: 50 |",
            PROMPT,
            "You are hungry.",
        ])

        assert results == []
        assert sink.scores == []
        assert capture.status().state == CaptureState.CAPTURING
        assert capture.status().mode == CaptureMode.TABLE

    def test_table_with_pools(self, capture, sink, table_lines):
        """Ratio cells are parsed into current and max values."""
        feed(capture, table_lines)

        parsed = sink.last_score.parsed
        assert parsed["hp_cur"] == 1234
        assert parsed["hp_max"] == 5678
        assert parsed["mana_cur"] == 222
        assert parsed["move_max"] == 55

    def test_long_table_variant(self, capture, sink):
        """Long-layout markers select the long variant."""
        feed(capture, [
            BORDER,
            "| Name: Vzae | Class: Warrior | Level: 50 |",
            "| Hitroll: 12 | Damroll: 15 | Armor: -40 |",
            BORDER,
        ])
        assert sink.last_score.variant == ScoreVariant.TABLE_LONG

    def test_color_codes_on_border(self, capture, sink):
        """Borders are recognized after control sequences are stripped."""
        feed(capture, [
            "\x1b[36m" + BORDER + "\x1b[0m",
            "| Name: Vzae | Class: Warrior | Level: 50 |",
            "\x1b[36m" + BORDER + "\x1b[0m\r",
        ])
        assert len(sink.scores) == 1
        assert "\x1b" not in sink.last_score.raw

    def test_noise_is_not_buffered(self, capture, sink):
        """Prompt noise inside a table never reaches the snapshot."""
        feed(capture, [
            BORDER,
            "Opp: Goblin [fighting]",
            "| Name: Vzae | Class: Warrior | Level: 50 |",
            "716(716)Hp 100(100)Mp 82(82)Mv>",
            BORDER,
        ])

        raw = sink.last_score.raw
        assert "Opp:" not in raw
        assert "Mv>" not in raw
        assert raw.splitlines() == [
            BORDER,
            "| Name: Vzae | Class: Warrior | Level: 50 |",
            BORDER,
        ]


class TestSkipOnce:
    """Tests for the one-shot re-entry guard."""

    def test_duplicate_start_line_is_skipped(self, capture, sink):
        """A start border delivered twice counts once."""
        results = feed(capture, [
            BORDER,
            BORDER,
            "| Name: Vzae | Class: Warrior | Level: 50 |",
            BORDER,
        ])

        assert len(results) == 1
        assert results[0].ok is True
        assert sink.last_score.raw.splitlines() == [
            BORDER,
            "| Name: Vzae | Class: Warrior | Level: 50 |",
            BORDER,
        ]

    def test_skip_applies_only_once(self, capture, sink):
        """Only the first post-start line is eligible for skipping."""
        results = feed(capture, [
            BORDER,
            BORDER,
            BORDER,
        ])

        # Second border skipped, third closes an empty table.
        assert len(results) == 1
        assert results[0].ok is False
        assert results[0].error == DROPPED_ERROR


class TestReportCapture:
    """Tests for the sentence-style report layout."""

    def test_report_ends_on_non_report_line(self, capture, sink, report_lines):
        """After the terminal state, a foreign line ends the report."""
        results = feed(capture, report_lines + ["The Temple Square (#3001)"])

        assert len(results) == 1
        assert results[0].reason == "report:nonreport"
        snapshot = sink.last_score
        assert snapshot.variant == ScoreVariant.REPORT
        assert "Temple" not in snapshot.raw
        assert snapshot.raw.splitlines() == report_lines

    def test_report_ends_on_prompt(self, capture, sink, report_lines):
        """Prompt noise after the terminal state ends the report."""
        results = feed(capture, report_lines + [PROMPT])

        assert [r.reason for r in results] == ["report:promptnoise"]
        assert PROMPT not in sink.last_score.raw

    def test_report_not_armed_before_terminal_state(self, capture, sink, report_lines):
        """Foreign lines before the terminal state do not end the report."""
        lines = report_lines[:3] + ["Something unrelated happens."] + report_lines[3:] + [PROMPT]
        results = feed(capture, lines)

        assert len(results) == 1
        assert "Something unrelated happens." in sink.last_score.raw

    def test_back_to_back_reports_split(self, capture, sink, report_lines):
        """Two reports in a row produce two disjoint snapshots."""
        results = feed(capture, report_lines + report_lines + [PROMPT])

        assert [r.reason for r in results] == ["report:nextreport", "report:promptnoise"]
        assert len(sink.scores) == 2
        first, second = sink.scores
        assert first.raw.splitlines() == report_lines
        assert second.raw.splitlines() == report_lines
        assert first.raw.count("year-old") == 1
        assert second.raw.count("year-old") == 1

    def test_report_then_border(self, capture, sink, report_lines):
        """A border after an armed report ends it without being buffered."""
        results = feed(capture, report_lines + [BORDER])

        assert results[0].reason == "report:nextborder"
        assert BORDER not in sink.last_score.raw

    def test_report_fields(self, capture, sink, report_lines):
        """Report sentences are parsed into fields."""
        feed(capture, report_lines + [PROMPT])

        parsed = sink.last_score.parsed
        assert parsed["age"] == 270
        assert parsed["hp_cur"] == 100
        assert parsed["hp_max"] == 120
        assert parsed["move_max"] == 90
        assert parsed["exp"] == 12345
        assert parsed["gold"] == 500
        assert parsed["name"] == "Vzae"
        assert parsed["level"] == 50
        assert parsed["position"] == "standing"


class TestGuards:
    """Tests for the runaway guards."""

    def test_max_lines_guard(self, sink):
        """A table that never closes aborts with a bounded buffer."""
        capture = ScoreCapture(ScoreCaptureConfig(max_lines=5), sink=sink)
        results = feed(capture, [BORDER] + ["| filler row |"] * 10)

        assert len(results) == 1
        result = results[0]
        assert result.aborted is True
        assert result.reason == "guard:maxlines"
        assert result.line_count <= 5 + 1
        assert sink.scores == []
        assert capture.status().state == CaptureState.ABORTED
        assert capture.aborts == 1

    def test_max_bytes_guard(self, sink):
        """The byte guard trips independently of the line guard."""
        capture = ScoreCapture(ScoreCaptureConfig(max_bytes=50), sink=sink)
        results = feed(capture, [BORDER] + ["| " + "x" * 27 + " |"] * 3)

        assert len(results) == 1
        assert results[0].reason == "guard:maxbytes"
        assert sink.scores == []

    def test_capture_recovers_after_abort(self, sink, table_lines):
        """A fresh start marker after an abort captures normally."""
        capture = ScoreCapture(ScoreCaptureConfig(max_lines=5), sink=sink)
        feed(capture, [BORDER] + ["| filler row |"] * 6)
        results = feed(capture, table_lines)

        assert results[-1].ok is True
        assert len(sink.scores) == 1

    def test_manual_abort(self, capture):
        """abort() discards a live session and is a no-op when idle."""
        assert capture.abort() is None
        capture.feed_line(BORDER)
        result = capture.abort()
        assert result.reason == "abort:manual"
        assert capture.capturing is False

    def test_reset_returns_to_idle(self, capture, sink, table_lines):
        capture.feed_line(BORDER)
        capture.reset()

        assert capture.capturing is False
        assert capture.status().state == CaptureState.IDLE
        assert capture.aborts == 0

        feed(capture, table_lines)
        assert len(sink.scores) == 1


class TestFinalize:
    """Tests for the finalize step."""

    def test_shape_check_drops_block(self, capture, sink):
        """A bordered block without score markers is dropped."""
        results = feed(capture, [BORDER, "| just some | table |", BORDER])

        assert len(results) == 1
        assert results[0].ok is False
        assert results[0].error == DROPPED_ERROR
        assert results[0].snapshot is None
        assert sink.scores == []

    def test_missing_sink(self, table_lines):
        """Without a sink the block still finalizes, with an error."""
        capture = ScoreCapture()
        results = feed(capture, table_lines)

        assert len(results) == 1
        assert results[0].ok is False
        assert results[0].error == NO_SINK_ERROR
        assert results[0].snapshot is not None
        assert capture.status().state == CaptureState.DONE
        assert capture.capturing is False

    def test_failing_sink(self, table_lines):
        """Sink exceptions become error results."""
        capture = ScoreCapture(sink=FailingSink())
        results = feed(capture, table_lines)

        assert results[0].ok is False
        assert results[0].error.startswith("score sink failed")
        assert capture.snapshots == 1
        assert capture.status().last_ingest_ok is False

    def test_prompt_fallback(self, sink):
        """With the fallback enabled a prompt line ends the capture."""
        capture = ScoreCapture(ScoreCaptureConfig(enable_prompt_fallback=True), sink=sink)
        results = feed(capture, [
            BORDER,
            "| Name: Vzae | Class: Warrior | Level: 50 |",
            "716(716)Hp 100(100)Mp 82(82)Mv>",
        ])

        assert [r.reason for r in results] == ["fallback:prompt"]
        assert sink.last_score.parsed["name"] == "Vzae"

    def test_prompt_fallback_disabled_by_default(self, capture):
        """By default a prompt line is only noise."""
        feed(capture, [
            BORDER,
            "| Name: Vzae | Class: Warrior | Level: 50 |",
            "716(716)Hp 100(100)Mp 82(82)Mv>",
        ])
        assert capture.capturing is True

    def test_status_after_capture(self, capture, table_lines):
        """Status reports the last end reason and outcome."""
        feed(capture, table_lines)

        status = capture.status()
        assert status.state == CaptureState.DONE
        assert status.last_end_reason == "table:border"
        assert status.last_ingest_ok is True
        assert status.buffer_len == 0
        assert status.snapshots == 1
