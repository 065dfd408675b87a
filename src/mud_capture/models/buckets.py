# mud_capture/models/buckets.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Entity bucket set for room occupants."""

from typing import Any, Iterator, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from .enums import Bucket


class EntityBucketSet(BaseModel):
    """Four disjoint sets of entity keys seen in a room.

    All four buckets are always present, even when empty, so equality is
    a plain per-bucket set comparison.

    Invariant: a key appears in at most one bucket. ``add`` enforces this
    by precedence (players > items > mobs > unknown); a key already held
    by a stronger bucket is left where it is.

    Attributes:
        players: Known or inferred player characters.
        mobs: Non-player characters.
        items: Objects, corpses, fixtures.
        unknown: Anything the heuristics would not commit to.
    """

    players: set[str] = Field(default_factory=set)
    mobs: set[str] = Field(default_factory=set)
    items: set[str] = Field(default_factory=set)
    unknown: set[str] = Field(default_factory=set)

    @field_validator("players", "mobs", "items", "unknown", mode="before")
    @classmethod
    def ensure_set(cls, v):
        """Accept None, lists and tuples; drop blank keys."""
        if isinstance(v, str):
            raise ValueError("bucket must be a collection of keys, not a string")
        if not v:
            return set()
        return {str(k).strip() for k in v if str(k).strip()}

    @field_serializer("players", "mobs", "items", "unknown")
    def serialize_bucket(self, keys: set[str], _info: Any) -> list[str]:
        """Serialize buckets as sorted lists for stable output."""
        return sorted(keys)

    def bucket(self, name: Bucket) -> set[str]:
        return getattr(self, name.value)

    def find(self, key: str) -> Optional[Bucket]:
        """Return the bucket holding ``key``, if any."""
        for name in Bucket:
            if key in self.bucket(name):
                return name
        return None

    def add(self, name: Bucket, key: str) -> bool:
        """Add ``key`` to bucket ``name`` keeping buckets disjoint.

        Returns:
            True if the set changed.
        """
        key = key.strip()
        if not key:
            return False
        current = self.find(key)
        if current is not None and current.rank <= name.rank:
            return False
        if current is not None:
            self.bucket(current).discard(key)
        self.bucket(name).add(key)
        return True

    def remove(self, key: str) -> bool:
        """Remove ``key`` from whichever bucket holds it."""
        current = self.find(key)
        if current is None:
            return False
        self.bucket(current).discard(key)
        return True

    def keys(self) -> Iterator[tuple[Bucket, str]]:
        for name in Bucket:
            for key in self.bucket(name):
                yield name, key

    def same_keys(self, other: "EntityBucketSet") -> bool:
        """Per-bucket set equality, ignoring insertion order."""
        return all(self.bucket(name) == other.bucket(name) for name in Bucket)

    def total(self) -> int:
        return sum(len(self.bucket(name)) for name in Bucket)

    def is_disjoint(self) -> bool:
        seen: set[str] = set()
        for _, key in self.keys():
            if key in seen:
                return False
            seen.add(key)
        return True

    def copy_state(self) -> "EntityBucketSet":
        """Deep copy; callers may mutate the result freely."""
        return self.model_copy(deep=True)
