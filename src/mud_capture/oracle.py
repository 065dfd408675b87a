# mud_capture/oracle.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Known-player oracles.

An oracle supplies the set of lower-cased names known to be players (from
a "who" list, a roster file, a shared Redis set) and announces changes.
The capture core only reads it.
"""

import logging
from abc import ABC, abstractmethod
from itertools import count
from typing import Callable, Iterable

import redis

from .exceptions import SinkUnavailableError
from .helper import normalize_player_name
from .redis_keys import RedisKeys

logger = logging.getLogger(__name__)

RosterCallback = Callable[[frozenset[str]], None]


class KnownPlayerOracle(ABC):
    """Source of known player names."""

    @abstractmethod
    def current_players(self) -> frozenset[str]:
        """Return the lower-cased known player names."""
        pass

    @abstractmethod
    def on_changed(self, callback: RosterCallback) -> int:
        """Register a change callback; returns a subscription token."""
        pass

    @abstractmethod
    def off(self, token: int) -> bool:
        """Remove a change callback."""
        pass


class PlayerRoster(KnownPlayerOracle):
    """In-memory roster. Notifies only when the set actually changes."""

    def __init__(self, players: Iterable[str] = ()):
        self._players = frozenset(self._normalize(players))
        self._callbacks: dict[int, RosterCallback] = {}
        self._tokens = count(1)

    @staticmethod
    def _normalize(players: Iterable[str]) -> set[str]:
        names = (normalize_player_name(str(p)) for p in players if p is not None)
        return {n for n in names if n}

    def current_players(self) -> frozenset[str]:
        return self._players

    def on_changed(self, callback: RosterCallback) -> int:
        token = next(self._tokens)
        self._callbacks[token] = callback
        return token

    def off(self, token: int) -> bool:
        return self._callbacks.pop(token, None) is not None

    def set_players(self, players: Iterable[str]) -> bool:
        """Replace the roster.

        Returns:
            True if the set changed (and callbacks were notified).
        """
        new_players = frozenset(self._normalize(players))
        if new_players == self._players:
            return False
        self._players = new_players
        logger.info(f"Known player roster changed ({len(new_players)} names)")
        self._notify()
        return True

    def add(self, name: str) -> bool:
        return self.set_players(self._players | {name})

    def remove(self, name: str) -> bool:
        key = normalize_player_name(name)
        return self.set_players(p for p in self._players if p != key)

    def _notify(self) -> None:
        for token, callback in list(self._callbacks.items()):
            try:
                callback(self._players)
            except Exception as e:
                logger.error(f"Roster callback {token} failed: {e}", exc_info=True)


class RedisPlayerRoster(PlayerRoster):
    """Roster mirrored from a Redis set of player names.

    Call ``refresh()`` to re-read the set; callbacks fire only when the
    membership changed.

    Args:
        redis_client: Sync redis client.
        key: Redis set key.
    """

    def __init__(self, redis_client, key: str = RedisKeys.KNOWN_PLAYERS):
        super().__init__()
        self.redis = redis_client
        self.key = key

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisPlayerRoster":
        return cls(redis.Redis.from_url(url, decode_responses=True), **kwargs)

    def refresh(self) -> bool:
        """Re-read the Redis set.

        Returns:
            True if the roster changed.

        Raises:
            SinkUnavailableError: If Redis cannot be reached.
        """
        try:
            members = self.redis.smembers(self.key)
        except redis.RedisError as e:
            raise SinkUnavailableError(f"Failed to read {self.key}: {e}") from e
        names = [m.decode("utf-8") if isinstance(m, bytes) else m for m in members]
        return self.set_players(names)
