"""A file-like sink that turns written text into log messages."""

from __future__ import annotations

import threading
from typing import Callable, Iterator

MAX_CHUNK = 64 * 1024

PrintFunc = Callable[[str], object]


class LogWriter:
    """Writable stream that passes each line written to a print function.

    Lines are split on newlines; any run of buffered data reaching
    ``MAX_CHUNK`` bytes is emitted as one message regardless of newlines.
    Trailing carriage returns and newlines are stripped from each message.
    Data left without a newline is emitted on close.
    """

    def __init__(self, print_func: PrintFunc) -> None:
        self._print = print_func
        self._buffer = bytearray()
        self._lock = threading.RLock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def writable(self) -> bool:
        return True

    def flush(self) -> None:
        """Check the writer is open; complete lines are emitted as they arrive."""
        if self._closed:
            raise ValueError("flush of closed log writer")

    def write(self, data: str | bytes | bytearray | memoryview) -> int:
        """Buffer ``data`` and log every complete line; return its length."""
        payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        with self._lock:
            if self._closed:
                raise ValueError("write to closed log writer")
            self._buffer.extend(payload)
            for token in list(self._tokens(at_eof=False)):
                self._emit(token)
        return len(data)

    def close(self) -> None:
        """Log whatever remains buffered and refuse further writes."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            for token in list(self._tokens(at_eof=True)):
                self._emit(token)

    def __enter__(self) -> LogWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __del__(self) -> None:
        try:
            self.close()
        except Exception:
            pass

    def _tokens(self, at_eof: bool) -> Iterator[bytes]:
        buf = self._buffer
        while buf:
            if len(buf) >= MAX_CHUNK:
                token = bytes(buf[:MAX_CHUNK])
                del buf[:MAX_CHUNK]
            else:
                newline = buf.find(b"\n")
                if newline >= 0:
                    token = bytes(buf[:newline])
                    del buf[: newline + 1]
                elif at_eof:
                    token = bytes(buf)
                    buf.clear()
                else:
                    return
            yield token

    def _emit(self, token: bytes) -> None:
        self._print(token.decode("utf-8", "replace").rstrip("\r\n"))


def writer_for(print_func: PrintFunc) -> LogWriter:
    """Return a LogWriter that logs each written line through ``print_func``."""
    return LogWriter(print_func)