# mud_capture/score/__init__.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Score block capture, parsing and storage."""

from .capture import ScoreCapture
from .parser import detect_variant, parse_score
from .store import FIXTURES, ScoreStore, get_fixture

__all__ = [
    "ScoreCapture",
    "detect_variant",
    "parse_score",
    "FIXTURES",
    "ScoreStore",
    "get_fixture",
]
