# mud_capture/entities/overrides.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""User corrections applied after classification.

The classifier never reads overrides. A renderer takes the classified
buckets and passes them through ``apply_overrides`` for display.
"""

import logging
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, Field, field_serializer

from ..helper import _utc_now
from ..models.buckets import EntityBucketSet
from ..models.enums import Bucket, OverrideType
from ..models.results import IngestResult

logger = logging.getLogger(__name__)


class Override(BaseModel):
    """One user correction.

    Attributes:
        type: Where the key should go (mob, item) or ignore to hide it.
        set_at: When the override was set (UTC).
    """

    type: OverrideType
    set_at: datetime = Field(default_factory=_utc_now)

    @field_serializer("set_at")
    def serialize_set_at(self, dt: datetime, _info: Any) -> str:
        return dt.isoformat()


class OverrideStore:
    """In-memory map of entity key to override."""

    def __init__(self):
        self._overrides: dict[str, Override] = {}

    def __len__(self) -> int:
        return len(self._overrides)

    def get_all(self) -> dict[str, Override]:
        return dict(self._overrides)

    def get(self, key: str) -> Optional[Override]:
        return self._overrides.get((key or "").strip())

    def get_type(self, key: str) -> Optional[OverrideType]:
        override = self.get(key)
        return override.type if override else None

    def set(self, key: str, override_type: Union[OverrideType, str]) -> IngestResult:
        key = (key or "").strip()
        if not key:
            return IngestResult.failure("set(key, type): key must be non-empty")
        try:
            override_type = OverrideType(override_type)
        except ValueError:
            return IngestResult.failure("set(key, type): type must be mob|item|ignore")
        self._overrides[key] = Override(type=override_type)
        logger.debug(f"Override set: {key!r} -> {override_type.value}")
        return IngestResult(ok=True)

    def clear(self, key: str) -> IngestResult:
        key = (key or "").strip()
        if not key:
            return IngestResult.failure("clear(key): key must be non-empty")
        self._overrides.pop(key, None)
        return IngestResult(ok=True)

    def clear_all(self) -> None:
        self._overrides = {}


def apply_overrides(
    buckets: EntityBucketSet,
    overrides: Union[OverrideStore, Mapping[str, Union[Override, OverrideType, str]]],
) -> EntityBucketSet:
    """Return a copy of ``buckets`` with overrides applied.

    Overridden keys move to ``mobs`` or ``items``, or disappear for
    ``ignore``. Players are never overridden.
    """
    if isinstance(overrides, OverrideStore):
        overrides = overrides.get_all()

    result = buckets.copy_state()
    for key, override in overrides.items():
        value = override.type if isinstance(override, Override) else override
        try:
            override_type = OverrideType(value)
        except ValueError:
            logger.warning(f"Skipping invalid override {key!r}: {value!r}")
            continue

        current = result.find(key)
        if current is None or current == Bucket.PLAYERS:
            continue
        result.bucket(current).discard(key)
        if override_type == OverrideType.MOB:
            result.mobs.add(key)
        elif override_type == OverrideType.ITEM:
            result.items.add(key)
    return result
