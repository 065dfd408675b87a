# mud_capture/entities/classifier.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""
Entity classification for room snapshots.

Turns the lines of a captured room block into four disjoint buckets
(players, mobs, items, unknown). The heuristics are conservative: a line
that does not clearly name a mob or item, and does not match a known
player, lands in ``unknown``.
"""

import logging
from typing import Iterable, Optional

from ..config import ClassifierConfig
from ..models.buckets import EntityBucketSet
from ..normalize import clean_line
from .rules import RULES, Classification, LineContext, Rule

logger = logging.getLogger(__name__)


class EntityClassifier:
    """Classifies room lines with an ordered rule table.

    Args:
        config: Vocabulary tables, ignore rules and the capitalization
            switch.
        rules: Rule table override, mostly for tests.
    """

    def __init__(self, config: Optional[ClassifierConfig] = None, rules: Optional[Iterable[Rule]] = None):
        self.config = config or ClassifierConfig()
        self.rules = tuple(rules) if rules is not None else RULES

    def classify_line(self, line: str, known_players: Iterable[str] = ()) -> Classification:
        """Classify a single line.

        Args:
            line: Raw or cleaned line; control sequences are stripped here.
            known_players: Lower-cased known player names.

        Returns:
            ``(bucket, key)`` or None when the line names no entity.
        """
        raw = clean_line(line)
        trimmed = raw.strip()
        if not trimmed:
            return None
        ctx = LineContext.build(raw, trimmed, frozenset(known_players), self.config)
        for rule in self.rules:
            if rule.predicate(ctx):
                result = rule.extractor(ctx)
                logger.debug(f"Rule {rule.name} -> {result} for {trimmed!r}")
                return result
        return None

    def classify(self, lines: Iterable[str], known_players: Iterable[str] = ()) -> EntityBucketSet:
        """Classify a block of lines into a fresh bucket set.

        When two lines put the same key in different buckets the stronger
        bucket wins (players > items > mobs > unknown).
        """
        known = frozenset(known_players)
        buckets = EntityBucketSet()
        for line in lines:
            result = self.classify_line(line, known)
            if result is not None:
                buckets.add(*result)
        return buckets
