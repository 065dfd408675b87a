# tests/unit/mud_capture/test_main.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""
Unit tests for the mud_capture CLI.
"""

import json

import pytest

from mud_capture.main import build_parser, main

PROMPT = "<100hp 50mp 80mv>"


@pytest.fixture
def transcript_file(tmp_path, table_lines, room_lines):
    path = tmp_path / "session.log"
    path.write_text("\n".join(table_lines + [PROMPT] + room_lines + [PROMPT]) + "\n")
    return path


class TestParser:
    """Tests for argument parsing."""

    def test_replay_arguments(self):
        args = build_parser().parse_args([
            "replay", "session.log",
            "--known-player", "Scynox",
            "--known-player", "Xia",
            "-v",
        ])

        assert args.command == "replay"
        assert args.known_player == ["Scynox", "Xia"]
        assert args.verbose_replay is True
        assert args.config is None

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestReplay:
    """Tests for the replay command."""

    def test_prints_summary(self, transcript_file, capsys):
        exit_code = main(["replay", str(transcript_file)])

        assert exit_code == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["score"]["latest"]["parsed"]["name"] == "Vzae"
        assert summary["room"]["entities"]["mobs"] == ["A cityguard"]
        assert [s["reason"] for s in summary["sessions"]] == ["table:border", "end:prompt"]

    def test_known_players(self, transcript_file, capsys):
        exit_code = main(["replay", str(transcript_file), "--known-player", "Scynox"])

        assert exit_code == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["room"]["entities"]["players"] == ["Scynox"]
        assert summary["room"]["entities"]["unknown"] == []

    def test_with_config(self, transcript_file, tmp_path, capsys):
        config_path = tmp_path / "capture.yaml"
        config_path.write_text("history:\n  max_entries: 5\n")

        assert main(["replay", str(transcript_file), "--config", str(config_path)]) == 0

    def test_missing_transcript(self, tmp_path):
        assert main(["replay", str(tmp_path / "missing.log")]) == 1

    def test_bad_config(self, transcript_file, tmp_path):
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("score: [unclosed")

        assert main(["replay", str(transcript_file), "--config", str(config_path)]) == 1
