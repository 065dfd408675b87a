# mud_capture/redis_keys.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Redis key conventions for capture publishing.

This module provides consistent key naming across all components:
- Capture sinks (score and room publishers)
- Known-player rosters (readers of the player set)
- Downstream consumers (renderers, loggers)
"""


class RedisKeys:
    """Redis key name generator for capture streams.

    Stream Architecture:
        mud:capture:score            <- Finalized score snapshots
        mud:capture:room             <- Room entity bucket states
        mud:capture:known_players    <- Set of lower-cased player names
    """

    # Stream names
    SCORE_STREAM = "mud:capture:score"
    ROOM_STREAM = "mud:capture:room"

    # Roster
    KNOWN_PLAYERS = "mud:capture:known_players"
