# mud_capture/room/patterns.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Regular expression patterns for room output."""

import re
from dataclasses import dataclass
from typing import Optional

from ..prompts import ends_with_prompt_marker, is_angle_prompt, is_stat_bar

# The Temple Square (#3001)
ROOM_HEADER_PATTERN = re.compile(r"\(#\d+\)")

# Obvious exits: / Exits: north south / [ Exits: n e ]
EXITS_PATTERN = re.compile(r"^\s*\[?\s*(?:obvious\s+)?exits\s*:", re.IGNORECASE)

# north - The Temple
EXIT_ROW_PATTERN = re.compile(r"^(?:north|south|east|west|up|down)\s+-\s+", re.IGNORECASE)

# Movement feed
MOVE_VERBS = r"(arrives|leaves|appears out of thin air)"
SINGLE_MOVE_PATTERN = re.compile(r"^([A-Za-z][\w'-]*)\s+" + MOVE_VERBS + r"\b")
PHRASE_MOVE_PATTERN = re.compile(r"^([A-Z][^.!?]*?|(?:a|an|the)\s[^.!?]*?)\s+" + MOVE_VERBS + r"\b")
POOF_MARKER = "poof"

ARRIVE = "arrive"
LEAVE = "leave"
POOF = "poof"
UNRECOGNIZED = "unrecognized"

# Title heuristic
TITLE_ENDINGS = (".", "!", "?")
LETTER_PATTERN = re.compile(r"[A-Za-z]")
UPPER_PATTERN = re.compile(r"[A-Z]")
BRACKETED_PATTERN = re.compile(r"^[\[(<].*[\])>]$")
TABLE_CELL_PREFIXES = ("|", "+")
# Vzae gossips, 'hi there'
SPEECH_PATTERN = re.compile(r""",\s*['"`]|['"]$""")


@dataclass(frozen=True)
class Movement:
    """A parsed arrival/departure line.

    Attributes:
        kind: "arrive", "leave", "poof" or "unrecognized".
        name: Single-token name for arrive/leave, otherwise None.
    """

    kind: str
    name: Optional[str] = None


def is_room_header(line: str) -> bool:
    return ROOM_HEADER_PATTERN.search(line) is not None


def is_exits_line(line: str) -> bool:
    return EXITS_PATTERN.match(line) is not None


def is_exit_row(line: str) -> bool:
    return EXIT_ROW_PATTERN.match(line.strip()) is not None


def is_room_prompt(line: str, prompt_pattern: Optional[re.Pattern] = None) -> bool:
    """Prompt shapes that end a room snapshot."""
    if not line.strip():
        return False
    if is_angle_prompt(line) or is_stat_bar(line):
        return True
    return prompt_pattern is not None and prompt_pattern.search(line) is not None


def parse_movement(line: str) -> Optional[Movement]:
    """Parse an arrival/departure line, or None when it is not one."""
    trimmed = line.strip()
    if not trimmed:
        return None
    if POOF_MARKER in trimmed.lower():
        return Movement(kind=POOF)

    match = SINGLE_MOVE_PATTERN.match(trimmed)
    if match:
        verb = match.group(2)
        return Movement(kind=LEAVE if verb == "leaves" else ARRIVE, name=match.group(1))

    if PHRASE_MOVE_PATTERN.match(trimmed):
        return Movement(kind=UNRECOGNIZED)
    return None


def is_movement_line(line: str) -> bool:
    movement = parse_movement(line)
    return movement is not None and movement.kind != POOF


def looks_like_title(line: str, min_length: int = 4, max_length: int = 72) -> bool:
    """Heuristic room title: a short unindented capitalized line.

    Rejects shapes that are common on their own line but are never titles:
    command echoes and prompts, bracketed system lines, table rows, "You are ...",
    quoted speech, movement lines, exits lines and exit rows.
    """
    if not line or line[0].isspace():
        return False
    text = line.rstrip()
    if not (min_length <= len(text) <= max_length):
        return False
    if text.endswith(TITLE_ENDINGS):
        return False
    if not LETTER_PATTERN.search(text) or not UPPER_PATTERN.search(text):
        return False
    if text.startswith(">") or ends_with_prompt_marker(text):
        return False
    if is_angle_prompt(text) or is_stat_bar(text):
        return False
    if BRACKETED_PATTERN.match(text) or text.startswith(TABLE_CELL_PREFIXES):
        return False
    if text.startswith("You are") or SPEECH_PATTERN.search(text):
        return False
    if is_exits_line(text) or is_exit_row(text) or is_movement_line(text):
        return False
    return True
