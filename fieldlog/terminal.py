"""Detection of whether an output stream is attached to a terminal."""

from __future__ import annotations

import os
import sys
from typing import Any

_NO_TERMINAL_PLATFORMS = ("emscripten", "wasi")


def check_if_terminal(stream: Any) -> bool:
    """Return True if ``stream`` is backed by a file descriptor of a terminal."""
    if sys.platform in _NO_TERMINAL_PLATFORMS:
        return False
    fileno = getattr(stream, "fileno", None)
    if fileno is None:
        return False
    try:
        fd = fileno()
    except (OSError, ValueError):
        return False
    if not isinstance(fd, int) or fd < 0:
        return False
    try:
        return os.isatty(fd)
    except OSError:
        return False