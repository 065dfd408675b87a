# mud_capture/entities/matching.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Known-player name matching."""

from typing import Iterable, Optional


def match_known_player(phrase: str, known_players: Iterable[str]) -> Optional[str]:
    """Match a phrase against lower-cased known player names.

    A known name matches when it equals the phrase or is a prefix of it
    followed by whitespace, so "Scynox the adventurer" matches "scynox"
    while "Xiantha" does not match "xia". When several names match the
    longest one wins.

    Args:
        phrase: Entity phrase as seen in game output.
        known_players: Lower-cased known names.

    Returns:
        The matched name in the phrase's own casing, or None.
    """
    raw = (phrase or "").strip()
    if not raw:
        return None
    lower = raw.lower()

    best: Optional[str] = None
    for name in known_players:
        if not name or not lower.startswith(name):
            continue
        if len(lower) > len(name) and not lower[len(name)].isspace():
            continue
        if best is None or len(name) > len(best):
            best = name

    if best is None:
        return None
    return raw[:len(best)].strip()
