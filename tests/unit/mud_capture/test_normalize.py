# tests/unit/mud_capture/test_normalize.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""
Unit tests for mud_capture.normalize.
"""

from mud_capture.normalize import RawLine, clean_line, strip_control_sequences


class TestCleanLine:
    """Tests for clean_line."""

    def test_strips_color_codes(self):
        """SGR color sequences are removed."""
        assert clean_line("\x1b[1;31mA cityguard\x1b[0m is here.") == "A cityguard is here."

    def test_strips_carriage_returns(self):
        """CR characters never survive."""
        assert clean_line("Obvious exits:\r") == "Obvious exits:"

    def test_keeps_leading_indent(self):
        """Leading whitespace is a classifier signal and must be kept."""
        assert clean_line("   A small fountain gurgles.  ") == "   A small fountain gurgles."

    def test_empty_and_none(self):
        """Empty input yields an empty string."""
        assert clean_line("") == ""
        assert clean_line(None) == ""

    def test_charset_and_single_escapes(self):
        """Charset designators and single-character escapes are removed."""
        assert clean_line("\x1b(BHello\x1b7 world\x1b8") == "Hello world"

    def test_nested_sequence_is_fully_removed(self):
        """A sequence exposed by stripping another is stripped too."""
        assert clean_line("\x1b\x1b[0m[1mHi") == "Hi"

    def test_idempotent(self):
        """Cleaning a cleaned line changes nothing."""
        samples = [
            "\x1b[32m716(716)Hp 100(100)Mp 82(82)Mv>\x1b[0m",
            "  \x1b[1mThe Temple Square (#3001)\r",
            "plain text",
            "\x1b\x1b[0m[1m",
        ]
        for raw in samples:
            once = clean_line(raw)
            assert clean_line(once) == once

    def test_unterminated_csi_left_alone(self):
        """An incomplete CSI is not guessed at."""
        assert strip_control_sequences("abc\x1b[") == "abc\x1b["


class TestRawLine:
    """Tests for RawLine."""

    def test_of_keeps_raw_and_clean(self):
        """Both projections are available."""
        line = RawLine.of("\x1b[33m   Scynox is here.\r")
        assert line.raw == "\x1b[33m   Scynox is here.\r"
        assert line.clean == "   Scynox is here."
        assert line.trimmed == "Scynox is here."

    def test_of_non_string(self):
        """None becomes an empty line."""
        line = RawLine.of(None)
        assert line.raw == ""
        assert line.clean == ""
