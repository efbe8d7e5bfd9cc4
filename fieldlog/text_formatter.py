"""Rendering of log records as logfmt-style text, optionally colored."""

from __future__ import annotations

import enum
import math
import os
import string
import sys
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Callable

from fieldlog.levels import ALL_LEVELS, Level
from fieldlog.terminal import check_if_terminal

FIELD_KEY_MSG = "msg"
FIELD_KEY_LEVEL = "level"
FIELD_KEY_TIME = "time"
FIELD_KEY_ERROR = "fieldlog_error"
FIELD_KEY_FUNC = "func"
FIELD_KEY_FILE = "file"

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_BASE_TIMESTAMP = datetime.now(timezone.utc)
_INT64_MAX = 2**63 - 1
_INT64_MIN = -(2**63)
_NS_PER_SECOND = 1_000_000_000

_SAFE_CHARS = frozenset(string.ascii_letters + string.digits + "-._/@^+")
_SAFE_BYTES = frozenset(_SAFE_CHARS_B for _SAFE_CHARS_B in "".join(sorted(_SAFE_CHARS)).encode("ascii"))

_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}

_RED = 31
_YELLOW = 33
_BLUE = 36
_GRAY = 37

_LEVEL_COLORS = {
    Level.TRACE: _GRAY,
    Level.DEBUG: _GRAY,
    Level.INFO: _BLUE,
    Level.WARN: _YELLOW,
    Level.ERROR: _RED,
    Level.FATAL: _RED,
    Level.PANIC: _RED,
}

_LEVEL_TEXT_MAX_LENGTH = max(len(str(level)) for level in ALL_LEVELS)


@dataclass(frozen=True)
class Frame:
    """The call site a record was emitted from."""

    function: str = ""
    file: str = ""
    line: int = 0


@dataclass
class Record:
    """One log event as seen by a formatter.

    ``output`` is the stream the record is headed for; it is used only to
    decide whether that stream is a terminal.
    """

    message: str = ""
    level: Level = Level.PANIC
    time: datetime = ZERO_TIME
    data: dict[str, Any] = field(default_factory=dict)
    caller: Frame | None = None
    error: str = ""
    output: Any = None


def needs_quoting(value: str | bytes | bytearray) -> bool:
    """Return True if ``value`` holds any character outside the safe set."""
    if isinstance(value, (bytes, bytearray)):
        return any(b not in _SAFE_BYTES for b in value)
    return any(ch not in _SAFE_CHARS for ch in value)


def _quote(text: str) -> str:
    parts = ['"']
    for ch in text:
        code = ord(ch)
        if ch in _ESCAPES:
            parts.append(_ESCAPES[ch])
        elif 0xDC80 <= code <= 0xDCFF:
            parts.append(f"\\x{code - 0xDC00:02x}")
        elif ch.isprintable():
            parts.append(ch)
        elif code < 0x20 or code == 0x7F:
            parts.append(f"\\x{code:02x}")
        elif 0xD800 <= code <= 0xDFFF:
            parts.append("\\ufffd")
        elif code < 0x10000:
            parts.append(f"\\u{code:04x}")
        else:
            parts.append(f"\\U{code:08x}")
    parts.append('"')
    return "".join(parts)


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    _, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    ndigits = len(digits)
    point = ndigits + int(exponent)
    exp = point - 1
    if exp < -4 or exp >= 6:
        return format(value, f".{ndigits - 1}e")
    return format(value, f".{max(ndigits - point, 0)}f")


def _rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    offset = moment.utcoffset() or timedelta(0)
    stamp = (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
    if not offset:
        return stamp + "Z"
    minutes = int(offset.total_seconds()) // 60
    sign = "+" if minutes >= 0 else "-"
    hours, mins = divmod(abs(minutes), 60)
    return f"{stamp}{sign}{hours:02d}:{mins:02d}"


def _format_time(moment: datetime, fmt: str) -> str:
    return _rfc3339(moment) if not fmt else moment.strftime(fmt)


def _seconds_since_start(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    nanos = (moment - _BASE_TIMESTAMP) // timedelta(microseconds=1) * 1000
    nanos = max(_INT64_MIN, min(_INT64_MAX, nanos))
    seconds = abs(nanos) // _NS_PER_SECOND
    return -seconds if nanos < 0 else seconds


def _resolve(field_map: dict[str, str], key: str) -> str:
    return field_map.get(key, key)


def _prefix_field_clashes(
    data: dict[str, Any], field_map: dict[str, str], has_caller: bool
) -> None:
    keys = [FIELD_KEY_TIME, FIELD_KEY_MSG, FIELD_KEY_LEVEL, FIELD_KEY_ERROR]
    if has_caller:
        keys += [FIELD_KEY_FUNC, FIELD_KEY_FILE]
    for key in keys:
        name = _resolve(field_map, key)
        if name in data:
            data["fields." + name] = data.pop(name)


def _colorize(level: Level, text: str) -> str:
    return f"\x1b[{_LEVEL_COLORS.get(level, _BLUE)}m{text}\x1b[0m"


@dataclass
class TextFormatter:
    """Formats records as ``key=value`` pairs, or colored for terminals.

    ``timestamp_format`` is a ``strftime`` pattern; when empty, times are
    written in RFC 3339 form. ``sorting_func`` sorts a list of keys in place.
    ``caller_prettyfier`` maps a Frame to ``(function, file)`` texts; an
    empty text drops that field.
    """

    force_colors: bool = False
    disable_colors: bool = False
    force_quote: bool = False
    disable_quote: bool = False
    environment_override_colors: bool = False
    disable_timestamp: bool = False
    full_timestamp: bool = False
    timestamp_format: str = ""
    disable_sorting: bool = False
    sorting_func: Callable[[list[str]], None] | None = None
    disable_level_truncation: bool = False
    pad_level_text: bool = False
    quote_empty_fields: bool = False
    field_map: dict[str, str] = field(default_factory=dict)
    caller_prettyfier: Callable[[Frame], tuple[str, str]] | None = None
    _terminal: bool | None = field(default=None, init=False, repr=False, compare=False)
    _terminal_lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def _is_terminal(self, record: Record) -> bool:
        if record.output is None:
            return False
        with self._terminal_lock:
            if self._terminal is None:
                self._terminal = check_if_terminal(record.output)
            return self._terminal

    def is_colored(self, is_terminal: bool) -> bool:
        """Decide whether output gets ANSI colors."""
        if self.disable_colors:
            return False
        colored = self.force_colors or (is_terminal and sys.platform != "win32")
        if not self.environment_override_colors:
            return colored
        force = os.environ.get("CLICOLOR_FORCE")
        if force is not None:
            return force != "0"
        if os.environ.get("CLICOLOR", "") == "0":
            return False
        return colored

    def format(self, record: Record) -> str:
        """Render ``record`` as one line of text ending in a newline."""
        data = dict(record.data)
        colored = self.is_colored(self._is_terminal(record))
        _prefix_field_clashes(data, self.field_map, record.caller is not None)
        keys = list(data)
        if colored:
            return self._format_colored(record, keys, data)
        return self._format_plain(record, keys, data)

    def _key(self, key: str) -> str:
        return _resolve(self.field_map, key)

    def _format_plain(self, record: Record, keys: list[str], data: dict[str, Any]) -> str:
        caller = record.caller
        has_caller = caller is not None
        fixed: list[str] = []
        if not self.disable_timestamp:
            fixed.append(self._key(FIELD_KEY_TIME))
        fixed.append(self._key(FIELD_KEY_LEVEL))
        if record.message:
            fixed.append(self._key(FIELD_KEY_MSG))
        if record.error:
            fixed.append(self._key(FIELD_KEY_ERROR))

        func_val = file_val = ""
        if caller is not None:
            if self.caller_prettyfier is not None:
                func_val, file_val = self.caller_prettyfier(caller)
            else:
                func_val = caller.function
                file_val = f"{caller.file}:{caller.line}"
            if func_val:
                fixed.append(self._key(FIELD_KEY_FUNC))
            if file_val:
                fixed.append(self._key(FIELD_KEY_FILE))

        if self.disable_sorting:
            fixed.extend(keys)
        elif self.sorting_func is None:
            fixed.extend(sorted(keys))
        else:
            fixed.extend(keys)
            self.sorting_func(fixed)

        parts: list[str] = []
        for key in fixed:
            if key == self._key(FIELD_KEY_TIME):
                value: Any = _format_time(record.time, self.timestamp_format)
            elif key == self._key(FIELD_KEY_LEVEL):
                value = str(record.level)
            elif key == self._key(FIELD_KEY_MSG):
                value = record.message
            elif key == self._key(FIELD_KEY_ERROR):
                value = record.error
            elif key == self._key(FIELD_KEY_FUNC) and has_caller:
                value = func_val
            elif key == self._key(FIELD_KEY_FILE) and has_caller:
                value = file_val
            else:
                value = data.get(key)
            parts.append(f"{key}={self._render_value(value)}")
        return " ".join(parts) + "\n"

    def _level_text(self, level: Level) -> str:
        text = str(level).upper()
        if not self.disable_level_truncation and not self.pad_level_text:
            text = text[:4]
        if self.pad_level_text:
            text = text.ljust(_LEVEL_TEXT_MAX_LENGTH)
        return _colorize(level, text)

    def _format_colored(self, record: Record, keys: list[str], data: dict[str, Any]) -> str:
        message = record.message.removesuffix("\n")

        caller_text = ""
        caller = record.caller
        if caller is not None:
            if self.caller_prettyfier is not None:
                func_val, file_val = self.caller_prettyfier(caller)
            else:
                func_val = f"{caller.function}()" if caller.function else ""
                file_val = f"{caller.file}:{caller.line}"
            if not file_val:
                caller_text = func_val
            elif not func_val:
                caller_text = file_val
            else:
                caller_text = f"{file_val} {func_val}"

        level_text = self._level_text(record.level)
        if self.disable_timestamp:
            head = f"{level_text}{caller_text} {message:<44} "
        elif not self.full_timestamp:
            seconds = _seconds_since_start(record.time)
            head = f"{level_text}[{seconds:04d}]{caller_text} {message:<44} "
        else:
            stamp = _format_time(record.time, self.timestamp_format)
            head = f"{level_text}[{stamp}]{caller_text} {message:<44} "

        if not self.disable_sorting:
            if self.sorting_func is None:
                keys.sort()
            else:
                self.sorting_func(keys)

        pairs = "".join(
            f" {_colorize(record.level, key)}={self._render_value(data.get(key))}"
            for key in keys
        )
        return head + pairs + "\n"

    def _render_value(self, value: Any) -> str:
        if isinstance(value, str):
            return self._render_string(value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return self._render_bytes(bytes(value))
        if isinstance(value, bool):
            return self._render_string("true" if value else "false")
        if isinstance(value, BaseException):
            return self._render_string(str(value))
        if isinstance(value, enum.Enum):
            return self._render_string(str(value))
        if isinstance(value, int):
            return self._render_numeric(str(value))
        if isinstance(value, float):
            return self._render_numeric(_format_float(value))
        if value is None:
            return self._render_string("<nil>")
        return self._render_string(str(value))

    def _should_quote(self, raw: str | bytes) -> bool:
        return (
            self.force_quote
            or (self.quote_empty_fields and len(raw) == 0)
            or (not self.disable_quote and needs_quoting(raw))
        )

    def _render_string(self, text: str) -> str:
        return _quote(text) if self._should_quote(text) else text

    def _render_bytes(self, raw: bytes) -> str:
        if not self._should_quote(raw):
            return raw.decode("utf-8", "replace")
        return _quote(raw.decode("utf-8", "surrogateescape"))

    def _render_numeric(self, text: str) -> str:
        return _quote(text) if self.force_quote else text