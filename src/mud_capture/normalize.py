# mud_capture/normalize.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""Line normalization for raw MUD output.

Strips the terminal control sequences a MUD commonly emits so the capture
state machines can make decisions on plain text. Leading indentation is
kept; the classifier reads it.
"""

import re
from dataclasses import dataclass, field

# ESC [ params intermediates final (colors, cursor movement, erase)
CSI_PATTERN = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")

# ESC ( B, ESC ) 0 ... character set designators
CHARSET_PATTERN = re.compile(r"\x1b[()*+][0-9A-Za-z]")

# Single-character escapes (ESC 7, ESC 8, ESC =, ESC >, ESC M, ...).
# '[' is excluded so an unterminated CSI is left untouched.
STRAY_ESCAPE_PATTERN = re.compile(r"\x1b[78=>@-Z\\\]^_]")


def strip_control_sequences(text: str) -> str:
    """Remove recognized escape sequences, leaving anything unrecognized."""
    text = CSI_PATTERN.sub("", text)
    text = CHARSET_PATTERN.sub("", text)
    return STRAY_ESCAPE_PATTERN.sub("", text)


def clean_line(raw: str) -> str:
    """Return the cleaned projection of a raw line.

    Carriage returns and known escape families are removed and trailing
    whitespace is trimmed. The result is stable under repeated application.

    Args:
        raw: Line as received from the server (may be empty).

    Returns:
        Cleaned text. Never raises.
    """
    if not raw:
        return ""
    text = raw.replace("\r", "")
    # Stripping can expose a new sequence ("\x1b\x1b[0m[1m"); repeat until stable.
    while True:
        stripped = strip_control_sequences(text)
        if stripped == text:
            break
        text = stripped
    return text.rstrip()


@dataclass(frozen=True)
class RawLine:
    """A line as received plus its cleaned projection.

    Attributes:
        raw: Unmodified text.
        clean: Control-free, right-trimmed text used for decisions.
    """

    raw: str
    clean: str = field(default="")

    @classmethod
    def of(cls, raw: str) -> "RawLine":
        raw = raw if isinstance(raw, str) else str(raw or "")
        return cls(raw=raw, clean=clean_line(raw))

    @property
    def trimmed(self) -> str:
        return self.clean.strip()
