# tests/conftest.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""
Pytest configuration for mud-capture tests.

Ensures the src package (mud_capture) is importable without installing,
and provides the transcripts shared across test modules.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to path for local packages
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


BORDER = "+-=-=-=-=-=-=-+"


@pytest.fixture
def table_lines():
    """A short bordered score table."""
    return [
        BORDER,
        "| Name: Vzae | Class: Warrior | Level: 50 |",
        "| HP: 1234/5678 | Mana: 222/333 | Move: 44/55 |",
        BORDER,
    ]


@pytest.fixture
def report_lines():
    """A sentence-style score report, ending on its terminal state line."""
    return [
        "You are a 270 year-old male.",
        "You have 100(120) hit points, 50(60) mana points and 80(90) movement points.",
        "Current stats: Str 18 Int 12 Wis 14 Dex 16 Con 17",
        "Original stats: Str 17 Int 12 Wis 13 Dex 15 Con 16",
        "You have scored 12345 exp, and have 500 gold coins.",
        "You need 4321 exp to reach your next level.",
        "This ranks you as Vzae the Warrior (level 50).",
        "You are standing.",
    ]


@pytest.fixture
def room_lines():
    """A room block with header, description, exits and occupants."""
    return [
        "The Temple Square (#3001)",
        "   You are standing in a large temple square. Worn stone steps",
        "   lead up to the temple in the north.",
        "Obvious exits:",
        "north - The Temple",
        "south - Market Street",
        "A cityguard is here.",
        "A bulletin board is here.",
        "Scynox the adventurer is standing here.",
    ]

