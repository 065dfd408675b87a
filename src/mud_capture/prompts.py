# mud_capture/prompts.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Prompt shapes shared by both capture families."""

import re
from typing import Optional

# 716(716)Hp 100(100)Mp 82(82)Mv>
STAT_BAR_PATTERN = re.compile(r"^\d+\(\d+\)Hp\s+\d+\(\d+\)Mp\s+\d+\(\d+\)Mv>\s*$")

# <716hp 100mp 82mv>, (Fighting) <100hp ...
ANGLE_PROMPT_PATTERN = re.compile(r"<\d")
PROMPT_STAT_WORDS = ("hp", "mp", "mv")


def compile_optional(pattern: Optional[str]) -> Optional[re.Pattern]:
    """Compile a configured pattern, treating empty as unset."""
    if not pattern:
        return None
    return re.compile(pattern)


def is_stat_bar(line: str) -> bool:
    return STAT_BAR_PATTERN.match(line.strip()) is not None


def is_angle_prompt(line: str) -> bool:
    """True for ``<...>`` prompts that carry a number and a stat word."""
    if not ANGLE_PROMPT_PATTERN.search(line):
        return False
    lower = line.lower()
    return any(word in lower for word in PROMPT_STAT_WORDS)


def ends_with_prompt_marker(line: str) -> bool:
    """Generic prompt: anything ending in ``>``."""
    return line.rstrip().endswith(">")
