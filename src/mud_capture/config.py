# mud_capture/config.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""
Configuration models for passive MUD output capture.

Defines the structure of the YAML configuration file. Every section is
optional; an empty file yields the defaults.

Example YAML:
    score:
      max_lines: 250
      max_bytes: 25000
      prompt_pattern: 'Mv>\\s*$'
    room:
      max_snapshot_lines: 140
    classifier:
      assume_capitalized_as_player: false
      ignore_substrings:
        - "A faint hum"
    history:
      max_entries: 50
    redis:
      url: redis://localhost:6379
"""

import re
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, PrivateAttr, ValidationError, field_validator

from .exceptions import CaptureConfigError
from .redis_keys import RedisKeys

HISTORY_MIN_ENTRIES = 1
HISTORY_MAX_ENTRIES = 500


def _check_pattern(pattern: Optional[str]) -> Optional[str]:
    if pattern is None or pattern == "":
        return None
    try:
        re.compile(pattern)
    except re.error as e:
        raise ValueError(f"invalid regular expression {pattern!r}: {e}") from e
    return pattern


class ScoreCaptureConfig(BaseModel):
    """Score capture settings.

    Attributes:
        max_lines: Runaway guard on lines seen after the start line.
        max_bytes: Runaway guard on bytes seen after the start line.
        prompt_pattern: Regex for the user's prompt (noise, and the
            optional fallback terminator).
        enable_prompt_fallback: End any capture on a prompt-pattern line.
        noise_prefixes: Line prefixes always treated as prompt noise.
        long_table_markers: Substrings that mark the long table layout.
    """

    max_lines: int = Field(default=250, gt=0)
    max_bytes: int = Field(default=25000, gt=0)
    prompt_pattern: Optional[str] = r"Mv>\s*$"
    enable_prompt_fallback: bool = False
    noise_prefixes: list[str] = Field(default_factory=lambda: ["Opp:"])
    long_table_markers: list[str] = Field(
        default_factory=lambda: ["Hitroll", "Damroll", "Str:", "Saves", "Armor"]
    )

    @field_validator("prompt_pattern")
    @classmethod
    def validate_prompt_pattern(cls, v):
        """Reject prompt patterns that do not compile."""
        return _check_pattern(v)


class RoomCaptureConfig(BaseModel):
    """Room snapshot capture settings.

    Attributes:
        max_snapshot_lines: Runaway guard on lines in one snapshot.
        prompt_pattern: Optional extra regex that ends a snapshot.
        detect_heuristic_titles: Start snapshots on title-shaped lines,
            not only on explicit room-id headers.
        title_min_length: Shortest accepted heuristic title.
        title_max_length: Longest accepted heuristic title.
    """

    max_snapshot_lines: int = Field(default=140, gt=0)
    prompt_pattern: Optional[str] = None
    detect_heuristic_titles: bool = True
    title_min_length: int = Field(default=4, ge=1)
    title_max_length: int = Field(default=72, ge=1)

    @field_validator("prompt_pattern")
    @classmethod
    def validate_prompt_pattern(cls, v):
        """Reject prompt patterns that do not compile."""
        return _check_pattern(v)


class ClassifierConfig(BaseModel):
    """Entity classifier settings and vocabulary tables.

    The vocabulary tables are tuned to one game; edit them per game.

    Attributes:
        assume_capitalized_as_player: Treat unknown capitalized phrases in
            "is <posture> here." lines as players.
        ignore_patterns: Regexes; a matching line is dropped.
        ignore_substrings: Plain substrings; a containing line is dropped.
        postures: Words accepted in "<phrase> is <posture> here.".
        articles: Leading words that mark a mob or item phrase.
        item_nouns: Substrings that turn an article phrase into an item.
        systemic_lines: Lower-cased one-liners that are never entities.
    """

    assume_capitalized_as_player: bool = False
    ignore_patterns: list[str] = Field(default_factory=list)
    ignore_substrings: list[str] = Field(default_factory=list)
    postures: list[str] = Field(
        default_factory=lambda: [
            "standing", "sitting", "sleeping", "resting", "kneeling", "meditating",
        ]
    )
    articles: list[str] = Field(default_factory=lambda: ["a", "an", "the"])
    item_nouns: list[str] = Field(
        default_factory=lambda: [
            "board", "bulletin", "announcement", "keg", "mechanism", "altar",
            "portal", "sign", "plaque", "statue", "fountain", "table", "chair",
            "bench", "door", "gate", "lever", "switch", "chest", "bag",
            "scroll", "potion", "sword", "shield", "corpse",
        ]
    )
    systemic_lines: list[str] = Field(
        default_factory=lambda: ["huh?!?", "you are hungry.", "you are thirsty."]
    )

    _compiled_ignores: list[re.Pattern] = PrivateAttr(default_factory=list)

    @field_validator("ignore_patterns")
    @classmethod
    def validate_ignore_patterns(cls, v):
        """Ensure every ignore pattern compiles."""
        for pattern in v:
            _check_pattern(pattern)
        return [p for p in v if p]

    @field_validator("postures", "articles", "systemic_lines", "item_nouns")
    @classmethod
    def lower_vocabulary(cls, v):
        """Vocabulary is matched case-insensitively."""
        return [w.strip().lower() for w in v if w and w.strip()]

    def model_post_init(self, __context) -> None:
        self._compiled_ignores = [re.compile(p) for p in self.ignore_patterns]

    @property
    def compiled_ignore_patterns(self) -> list[re.Pattern]:
        return self._compiled_ignores


class HistoryConfig(BaseModel):
    """Score history bounds.

    Attributes:
        max_entries: Snapshots kept, clamped to [1, 500].
    """

    max_entries: int = 50

    @field_validator("max_entries", mode="before")
    @classmethod
    def clamp_entries(cls, v):
        """Clamp into the supported range instead of failing."""
        return clamp_history_entries(v)


class RedisConfig(BaseModel):
    """Optional Redis stream publishing.

    Attributes:
        url: Redis connection URL; publishing is off when unset.
        score_stream: Stream receiving score snapshots.
        room_stream: Stream receiving room bucket states.
        known_players_key: Set holding the known-player roster.
        stream_maxlen: Approximate stream length bound.
    """

    url: Optional[str] = None
    score_stream: str = RedisKeys.SCORE_STREAM
    room_stream: str = RedisKeys.ROOM_STREAM
    known_players_key: str = RedisKeys.KNOWN_PLAYERS
    stream_maxlen: int = Field(default=1000, gt=0)


class CaptureConfig(BaseModel):
    """Root configuration, mapping directly to the YAML file."""

    score: ScoreCaptureConfig = Field(default_factory=ScoreCaptureConfig)
    room: RoomCaptureConfig = Field(default_factory=RoomCaptureConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    redis: RedisConfig = Field(default_factory=RedisConfig)


def clamp_history_entries(value) -> int:
    """Clamp a history size into [1, 500]; non-numbers fall back to 50."""
    try:
        n = int(value)
    except (TypeError, ValueError):
        return 50
    return max(HISTORY_MIN_ENTRIES, min(HISTORY_MAX_ENTRIES, n))


def load_config(path: Union[str, Path]) -> CaptureConfig:
    """Load and validate a YAML capture configuration.

    Args:
        path: Path to the YAML file.

    Returns:
        Validated configuration.

    Raises:
        CaptureConfigError: If the file is missing, is not valid YAML, or
            does not validate.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise CaptureConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise CaptureConfigError(f"Invalid YAML in config file: {e}") from e

    if config_dict is None:
        config_dict = {}
    if not isinstance(config_dict, dict):
        raise CaptureConfigError(f"Config root must be a mapping, got {type(config_dict).__name__}")

    try:
        return CaptureConfig.model_validate(config_dict)
    except ValidationError as e:
        raise CaptureConfigError(f"Invalid configuration: {e}") from e
