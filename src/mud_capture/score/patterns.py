# mud_capture/score/patterns.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Regular expression patterns and line predicates for score output."""

import re
from typing import Iterable, Optional

from ..prompts import ends_with_prompt_marker, is_stat_bar

# +-=-=-=-=-=-=-+
BORDER_PATTERN = re.compile(r"^\+[-=]+\+$")

# You are a 270 year-old male.
REPORT_START_PATTERN = re.compile(r"^You are a \d+ year-old .+\.$")

# You are standing. / You are mortally wounded.
TERMINAL_STATE_PATTERN = re.compile(r"^You are .+\.$")
TERMINAL_EXCLUDE_PATTERN = re.compile(r"^You are (?:a|an|the)\s")

# Lines that belong to a "score -r" report
REPORT_LINE_PREFIXES = (
    "Current stats:",
    "Original stats:",
    "Deaths:",
    "Saves vs:",
    "This ranks you",
)
REPORT_LINE_PATTERN = re.compile(r"^(?:You|Your)\s")

# Substrings required by the finalize shape check
TABLE_SHAPE_MARKERS = ("| Name:", "| Class:", "Level:")
REPORT_SHAPE_MARKERS = ("movement points", "Current stats:", "You have scored")


def is_border(line: str) -> bool:
    return BORDER_PATTERN.match(line) is not None


def is_report_start(line: str) -> bool:
    return REPORT_START_PATTERN.match(line) is not None


def is_terminal_state(line: str) -> bool:
    """True for "You are <state>." but not "You are a/an/the ..."."""
    if TERMINAL_STATE_PATTERN.match(line) is None:
        return False
    return TERMINAL_EXCLUDE_PATTERN.match(line) is None


def is_report_line(line: str) -> bool:
    if not line.strip():
        return True
    if REPORT_LINE_PATTERN.match(line):
        return True
    return line.startswith(REPORT_LINE_PREFIXES)


def is_prompt_noise(
    line: str,
    prompt_pattern: Optional[re.Pattern] = None,
    noise_prefixes: Iterable[str] = ("Opp:",),
) -> bool:
    """Lines that are never part of a score block.

    Blank lines, configured prefixes, the HpMpMv stat bar, the user's
    prompt pattern and anything ending in ``>``.
    """
    if not line.strip():
        return True
    for prefix in noise_prefixes:
        if prefix and line.startswith(prefix):
            return True
    if is_stat_bar(line):
        return True
    if prompt_pattern is not None and prompt_pattern.search(line):
        return True
    return ends_with_prompt_marker(line)


def looks_like_table(text: str) -> bool:
    return all(marker in text for marker in TABLE_SHAPE_MARKERS)


def looks_like_report(text: str) -> bool:
    return all(marker in text for marker in REPORT_SHAPE_MARKERS)


def looks_like_score_block(text: str) -> bool:
    if not text:
        return False
    return looks_like_table(text) or looks_like_report(text)
