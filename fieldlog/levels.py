"""Severity levels and their text forms."""

from __future__ import annotations

import enum
import json


class Level(enum.IntEnum):
    """Severity of a log record; a lower value is more severe."""

    PANIC = 0
    FATAL = 1
    ERROR = 2
    WARN = 3
    INFO = 4
    DEBUG = 5
    TRACE = 6

    def __str__(self) -> str:
        return _NAMES[self]

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)

    def marshal_text(self) -> bytes:
        """Return the level's name as bytes, e.g. ``b"warning"``."""
        return str(self).encode("ascii")

    @classmethod
    def unmarshal_text(cls, text: str | bytes) -> Level:
        """Build a level from its textual name; raises ValueError if unknown."""
        return parse_level(text)


_NAMES = {
    Level.PANIC: "panic",
    Level.FATAL: "fatal",
    Level.ERROR: "error",
    Level.WARN: "warning",
    Level.INFO: "info",
    Level.DEBUG: "debug",
    Level.TRACE: "trace",
}

_ALIASES = {
    "panic": Level.PANIC,
    "fatal": Level.FATAL,
    "error": Level.ERROR,
    "warn": Level.WARN,
    "warning": Level.WARN,
    "info": Level.INFO,
    "debug": Level.DEBUG,
    "trace": Level.TRACE,
}

ALL_LEVELS: tuple[Level, ...] = tuple(Level)


def parse_level(name: str | bytes) -> Level:
    """Return the level named by ``name``, ignoring case.

    Raises ValueError when the name is not a known level.
    """
    text = name.decode("utf-8", "replace") if isinstance(name, (bytes, bytearray)) else name
    try:
        return _ALIASES[text.casefold()]
    except KeyError:
        raise ValueError(
            f"not a valid level: {json.dumps(text, ensure_ascii=False)}"
        ) from None