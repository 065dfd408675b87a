# mud_capture/score/parser.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Best-effort field extraction from captured score blocks.

Three layouts are understood:

- bordered tables, where each row holds ``| Key: value |`` cells;
- the sentence-style report (``You are a 270 year-old male.`` ...);
- plain ``Key: value`` lines, as used by the deterministic fixtures.

Fields that cannot be resolved are left out of the result. Nothing here
raises for odd input.
"""

import logging
import re
from typing import Any, Iterable, Optional

from ..models.enums import ScoreVariant
from .patterns import is_terminal_state, looks_like_report, looks_like_table

logger = logging.getLogger(__name__)

DEFAULT_LONG_MARKERS = ("Hitroll", "Damroll", "Str:", "Saves", "Armor")

# "Key: value" inside a cell; a run of 2+ spaces separates cells sharing a segment
CELL_KV_PATTERN = re.compile(
    r"([A-Za-z][A-Za-z .'/-]*?)\s*:\s*(.*?)(?=\s{2,}[A-Za-z][A-Za-z .'/-]*?\s*:|$)"
)
NUMBER_PATTERN = re.compile(r"-?\d[\d,]*")
RATIO_PATTERN = re.compile(r"(-?\d[\d,]*)\s*(?:/\s*(-?\d[\d,]*)|\(\s*(-?\d[\d,]*)\s*\))")
NEXT_PATTERN = re.compile(r"Next\s*:\s*(\d[\d,]*)", re.IGNORECASE)

# Report sentences
REPORT_AGE_PATTERN = re.compile(r"^You are a (\d+) year-old (.+)\.$", re.MULTILINE)
REPORT_POOL_PATTERN = r"(\d[\d,]*)\s*(?:\(\s*(\d[\d,]*)\s*\)|/\s*(\d[\d,]*))\s*{label}"
REPORT_HP_PATTERN = re.compile(REPORT_POOL_PATTERN.format(label=r"hit points"))
REPORT_MANA_PATTERN = re.compile(REPORT_POOL_PATTERN.format(label=r"mana points"))
REPORT_MOVE_PATTERN = re.compile(REPORT_POOL_PATTERN.format(label=r"movement points"))
REPORT_CURRENT_STATS_PATTERN = re.compile(r"^Current stats:\s*(.+)$", re.MULTILINE)
REPORT_ORIGINAL_STATS_PATTERN = re.compile(r"^Original stats:\s*(.+)$", re.MULTILINE)
REPORT_EXP_PATTERN = re.compile(r"You have scored (\d[\d,]*) exp", re.IGNORECASE)
REPORT_GOLD_PATTERN = re.compile(r"(\d[\d,]*) gold coins?", re.IGNORECASE)
REPORT_NEXT_PATTERN = re.compile(r"You need (\d[\d,]*) exp", re.IGNORECASE)
REPORT_RANK_PATTERN = re.compile(
    r"^This ranks you as (\S+)(?:\s+(.+?))?\s*\(level (\d+)\)\.?$", re.MULTILINE
)
REPORT_DEATHS_PATTERN = re.compile(r"^Deaths:\s*(\d[\d,]*)", re.MULTILINE)

# Table/fixture keys (lower-cased) -> canonical field
TEXT_FIELDS = {
    "name": "name",
    "class": "class",
    "race": "race",
    "title": "title",
}
INT_FIELDS = {
    "level": "level",
    "lvl": "level",
    "gold": "gold",
    "age": "age",
    "exp to level": "next_exp",
    "next": "next_exp",
    "next level": "next_exp",
    "deaths": "deaths",
}
RATIO_FIELDS = {
    "hp": "hp",
    "hit points": "hp",
    "hits": "hp",
    "mana": "mana",
    "mp": "mana",
    "move": "move",
    "moves": "move",
    "mv": "move",
    "movement": "move",
}
EXP_KEYS = ("exp", "experience", "xp")
ALIGNMENT_KEYS = ("alignment", "align")


def to_int(value: str) -> Optional[int]:
    """Parse the first integer in ``value``; thousands separators allowed."""
    match = NUMBER_PATTERN.search(value or "")
    if not match:
        return None
    try:
        return int(match.group(0).replace(",", ""))
    except ValueError:
        return None


def parse_ratio(value: str) -> Optional[tuple[int, int]]:
    """Parse ``cur/max`` or ``cur(max)``."""
    match = RATIO_PATTERN.search(value or "")
    if not match:
        return None
    cur = to_int(match.group(1))
    maximum = to_int(match.group(2) or match.group(3))
    if cur is None or maximum is None:
        return None
    return cur, maximum


def detect_variant(text: str, long_markers: Optional[Iterable[str]] = None) -> ScoreVariant:
    """Classify a score block by shape.

    Args:
        text: The captured block.
        long_markers: Substrings that mark the long table layout.

    Returns:
        The detected variant; ``UNKNOWN`` when neither shape matches.
    """
    if not text:
        return ScoreVariant.UNKNOWN
    markers = DEFAULT_LONG_MARKERS if long_markers is None else tuple(long_markers)
    if looks_like_table(text):
        if any(marker in text for marker in markers):
            return ScoreVariant.TABLE_LONG
        return ScoreVariant.TABLE_SHORT
    if looks_like_report(text):
        return ScoreVariant.REPORT
    return ScoreVariant.UNKNOWN


def _apply_kv(parsed: dict[str, Any], key: str, value: str) -> None:
    key = " ".join(key.lower().split())
    value = value.strip().strip("|").strip()
    if not value:
        return

    if key in TEXT_FIELDS:
        parsed.setdefault(TEXT_FIELDS[key], value)
    elif key in INT_FIELDS:
        n = to_int(value)
        if n is not None:
            parsed.setdefault(INT_FIELDS[key], n)
    elif key in RATIO_FIELDS:
        ratio = parse_ratio(value)
        if ratio is not None:
            prefix = RATIO_FIELDS[key]
            parsed.setdefault(f"{prefix}_cur", ratio[0])
            parsed.setdefault(f"{prefix}_max", ratio[1])
    elif key in EXP_KEYS:
        n = to_int(value)
        if n is not None:
            parsed.setdefault("exp", n)
        nxt = NEXT_PATTERN.search(value)
        if nxt:
            parsed.setdefault("next_exp", to_int(nxt.group(1)))
    elif key in ALIGNMENT_KEYS:
        n = to_int(value)
        parsed.setdefault("alignment", n if n is not None else value)


def parse_key_values(text: str) -> dict[str, Any]:
    """Parse table cells and plain ``Key: value`` lines."""
    parsed: dict[str, Any] = {}
    for line in text.splitlines():
        for segment in line.split("|"):
            segment = segment.strip()
            if not segment or ":" not in segment:
                continue
            for key, value in CELL_KV_PATTERN.findall(segment):
                _apply_kv(parsed, key, value)
    return parsed


def _pool(parsed: dict[str, Any], prefix: str, pattern: re.Pattern, text: str) -> None:
    match = pattern.search(text)
    if not match:
        return
    cur = to_int(match.group(1))
    maximum = to_int(match.group(2) or match.group(3))
    if cur is not None and maximum is not None:
        parsed[f"{prefix}_cur"] = cur
        parsed[f"{prefix}_max"] = maximum


def parse_report(text: str) -> dict[str, Any]:
    """Parse the sentence-style score report."""
    parsed: dict[str, Any] = {}

    if match := REPORT_AGE_PATTERN.search(text):
        parsed["age"] = int(match.group(1))

    _pool(parsed, "hp", REPORT_HP_PATTERN, text)
    _pool(parsed, "mana", REPORT_MANA_PATTERN, text)
    _pool(parsed, "move", REPORT_MOVE_PATTERN, text)

    if match := REPORT_CURRENT_STATS_PATTERN.search(text):
        parsed["current_stats"] = match.group(1).strip()
    if match := REPORT_ORIGINAL_STATS_PATTERN.search(text):
        parsed["original_stats"] = match.group(1).strip()
    if match := REPORT_EXP_PATTERN.search(text):
        parsed["exp"] = to_int(match.group(1))
    if match := REPORT_GOLD_PATTERN.search(text):
        parsed["gold"] = to_int(match.group(1))
    if match := REPORT_NEXT_PATTERN.search(text):
        parsed["next_exp"] = to_int(match.group(1))
    if match := REPORT_RANK_PATTERN.search(text):
        parsed["name"] = match.group(1)
        if match.group(2):
            parsed["title"] = match.group(2).strip()
        parsed["level"] = int(match.group(3))
    if match := REPORT_DEATHS_PATTERN.search(text):
        parsed["deaths"] = to_int(match.group(1))

    for line in reversed(text.splitlines()):
        if is_terminal_state(line.strip()):
            parsed["position"] = line.strip()[len("You are "):-1]
            break

    return parsed


def parse_score(text: str, variant: Optional[ScoreVariant] = None) -> dict[str, Any]:
    """Extract fields from a score block.

    Args:
        text: The captured block.
        variant: Known variant; detected from ``text`` when omitted.

    Returns:
        Mapping of canonical field name to value. Empty when nothing could
        be extracted.
    """
    if not text:
        return {}
    if variant is None:
        variant = detect_variant(text)

    if variant == ScoreVariant.REPORT:
        parsed = parse_report(text)
    else:
        parsed = parse_key_values(text)

    logger.debug(f"Parsed {len(parsed)} score fields from {variant.value} block")
    return parsed
