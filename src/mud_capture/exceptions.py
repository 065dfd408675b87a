# mud_capture/exceptions.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Exceptions for the capture package.

Malformed game output never raises. These are reserved for configuration
mistakes and for collaborators that lost their backend.
"""


class CaptureError(Exception):
    """Base class for capture errors."""
    pass


class CaptureConfigError(CaptureError):
    """Raised when a capture configuration cannot be loaded or validated."""
    pass


class SinkUnavailableError(CaptureError):
    """Raised by a sink or roster whose backend (e.g. Redis) is unreachable."""
    pass
