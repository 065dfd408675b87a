# mud_capture/helper.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Small shared helpers."""

from datetime import datetime, timezone


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def normalize_player_name(name: str) -> str:
    """Normalize a display name for known-player lookups.

    Converts "  Scynox " → "scynox". Inner whitespace is preserved so
    multi-word names still prefix-match on a word boundary.

    Args:
        name: Display name as seen in game output.

    Returns:
        Lower-cased, trimmed name (may be empty).
    """
    return " ".join(name.split()).lower()
