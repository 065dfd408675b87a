# mud_capture/entities/rules.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""
Ordered classification rules for room lines.

Each rule pairs a predicate with an extractor. The classifier walks the
table in order and the first rule whose predicate accepts a line decides
it: the extractor returns ``(bucket, key)`` or None to drop the line.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from ..config import ClassifierConfig
from ..models.enums import Bucket
from ..room.patterns import is_exit_row, is_exits_line, is_room_header
from .matching import match_known_player

Classification = Optional[tuple[Bucket, str]]

INDENT_PATTERN = re.compile(r"^\s{3,}")
POSTURE_HERE_PATTERN = re.compile(r"^(.+?)\s+is\s+([A-Za-z]+)\s+here\.$")
IS_HERE_PATTERN = re.compile(r"^(.+?)\s+is\s+here\.$")
ROOM_TITLE_PATTERN = re.compile(r"^[A-Za-z\s']+$")
ROOM_TITLE_MAX_LENGTH = 60
NOTHING_SPECIAL = "you see nothing special."
CORPSE = "corpse"


@dataclass
class LineContext:
    """One line prepared for rule evaluation."""

    raw: str
    trimmed: str
    lower: str
    known_players: frozenset[str]
    config: ClassifierConfig
    indented: bool = field(default=False)

    @classmethod
    def build(cls, raw: str, trimmed: str, known_players: frozenset[str], config: ClassifierConfig) -> "LineContext":
        return cls(
            raw=raw,
            trimmed=trimmed,
            lower=trimmed.lower(),
            known_players=known_players,
            config=config,
            indented=INDENT_PATTERN.match(raw) is not None,
        )


@dataclass(frozen=True)
class Rule:
    """A predicate and the extractor applied when it accepts a line."""

    name: str
    predicate: Callable[[LineContext], bool]
    extractor: Callable[[LineContext], Classification]


def _drop(ctx: LineContext) -> Classification:
    return None


def _posture_match(ctx: LineContext) -> Optional[re.Match]:
    match = POSTURE_HERE_PATTERN.match(ctx.trimmed)
    if match and match.group(2).lower() in ctx.config.postures:
        return match
    return None


def is_entityish(ctx: LineContext) -> bool:
    """Entity-presence shapes that survive the indentation rule."""
    if "is here." in ctx.lower:
        return True
    return _posture_match(ctx) is not None


def is_ignored(ctx: LineContext) -> bool:
    for sub in ctx.config.ignore_substrings:
        if sub and sub in ctx.trimmed:
            return True
    return any(p.search(ctx.trimmed) for p in ctx.config.compiled_ignore_patterns)


def is_description(ctx: LineContext) -> bool:
    return ctx.indented and not is_entityish(ctx)


def is_non_entity(ctx: LineContext) -> bool:
    if ctx.lower == NOTHING_SPECIAL:
        return True
    if is_exits_line(ctx.trimmed) or is_exit_row(ctx.trimmed):
        return True
    return ctx.lower in ctx.config.systemic_lines


def looks_like_room_title(ctx: LineContext) -> bool:
    """Room headers and short letters-only lines."""
    if is_room_header(ctx.trimmed):
        return True
    text = ctx.trimmed
    if "." in text or len(text) > ROOM_TITLE_MAX_LENGTH or ctx.raw[:1].isspace():
        return False
    if " is here" in ctx.lower or "standing here" in ctx.lower:
        return False
    return ROOM_TITLE_PATTERN.match(text) is not None


def _has_article(phrase_lower: str, articles: list[str]) -> bool:
    first, _, rest = phrase_lower.partition(" ")
    return bool(rest) and first in articles


def _is_item_phrase(phrase_lower: str, item_nouns: list[str]) -> bool:
    return any(noun in phrase_lower for noun in item_nouns)


def extract_posture(ctx: LineContext) -> Classification:
    """``<phrase> is <posture> here.``"""
    phrase = _posture_match(ctx).group(1).strip()
    canonical = match_known_player(phrase, ctx.known_players)
    if canonical:
        return Bucket.PLAYERS, canonical
    if ctx.config.assume_capitalized_as_player and phrase[:1].isupper():
        return Bucket.PLAYERS, phrase
    return Bucket.UNKNOWN, phrase


def extract_is_here(ctx: LineContext) -> Classification:
    """``<phrase> is here.``"""
    phrase = IS_HERE_PATTERN.match(ctx.trimmed).group(1).strip()
    canonical = match_known_player(phrase, ctx.known_players)
    if canonical:
        return Bucket.PLAYERS, canonical
    if CORPSE in ctx.lower:
        return Bucket.ITEMS, phrase
    phrase_lower = phrase.lower()
    if _has_article(phrase_lower, ctx.config.articles):
        if _is_item_phrase(phrase_lower, ctx.config.item_nouns):
            return Bucket.ITEMS, phrase
        return Bucket.MOBS, phrase
    return Bucket.UNKNOWN, phrase


def extract_fallback(ctx: LineContext) -> Classification:
    if CORPSE in ctx.lower:
        return Bucket.ITEMS, ctx.trimmed
    return Bucket.UNKNOWN, ctx.trimmed


RULES: tuple[Rule, ...] = (
    Rule("ignored", is_ignored, _drop),
    Rule("description", is_description, _drop),
    Rule("non_entity", is_non_entity, _drop),
    Rule("room_title", looks_like_room_title, _drop),
    Rule("posture_here", lambda ctx: _posture_match(ctx) is not None, extract_posture),
    Rule("is_here", lambda ctx: IS_HERE_PATTERN.match(ctx.trimmed) is not None, extract_is_here),
    Rule("fallback", lambda ctx: True, extract_fallback),
)
