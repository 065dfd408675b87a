# mud_capture/entities/__init__.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Room entity classification, state and reclassification."""

from .classifier import EntityClassifier
from .matching import match_known_player
from .overrides import Override, OverrideStore, apply_overrides
from .reclassify import ReclassificationEngine, reclassify_buckets
from .service import RoomEntitiesService

__all__ = [
    "EntityClassifier",
    "match_known_player",
    "Override",
    "OverrideStore",
    "apply_overrides",
    "ReclassificationEngine",
    "reclassify_buckets",
    "RoomEntitiesService",
]
