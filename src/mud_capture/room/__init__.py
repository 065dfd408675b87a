# mud_capture/room/__init__.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Room snapshot capture and feed health.

Import from the submodules (``room.capture``, ``room.status``,
``room.patterns``); the entities classifier depends on ``room.patterns``,
so this package does not import ``room.capture`` eagerly.
"""
