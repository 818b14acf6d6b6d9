"""
WriterSink: one line per message on a stream.

Line layout:  20260212143205 [WARN] svc: disk at 91%

ANSI color is applied only when asked for AND the stream reports itself
as an interactive terminal. Anything without isatty() is treated as a
plain byte/text sink.
"""

import io
import threading
from datetime import datetime
from typing import Any, Callable, Protocol, runtime_checkable

from xlog.formatting import sprintf
from xlog.severity import Severity, severity_name
from xlog.sinks import Sink

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


@runtime_checkable
class TerminalCapable(Protocol):
    """Optional capability of a destination: can it tell it is a TTY?"""

    def isatty(self) -> bool: ...


def is_terminal(stream: Any) -> bool:
    """True only if the stream implements isatty() and it answers yes."""
    if not isinstance(stream, TerminalCapable):
        return False
    try:
        return bool(stream.isatty())
    except (OSError, ValueError):
        # Closed or detached streams
        return False


class WriterSink(Sink):
    """
    Renders accepted messages to a text or binary stream.

    Messages more verbose than the sink's severity are dropped before any
    formatting work, so LogClosure arguments are never evaluated for them.
    Each accepted message becomes exactly one write() call, made under the
    sink's lock so lines from concurrent callers never interleave.

    Write failures never reach the caller. Pass on_error to observe them.
    """

    COLORS = {
        Severity.EMERGENCY: "\033[1;97;41m",  # bold white on red
        Severity.ALERT: "\033[1;91m",         # bold bright red
        Severity.CRITICAL: "\033[91m",        # bright red
        Severity.ERROR: "\033[31m",           # red
        Severity.WARN: "\033[33m",            # yellow
        Severity.NOTICE: "\033[97m",          # bright white
        Severity.INFO: "\033[37m",            # white/default
        Severity.DEBUG: "\033[36m",           # cyan
        Severity.TRACE: "\033[90m",           # gray
    }
    RESET = "\033[0m"

    def __init__(
        self,
        stream: Any,
        severity: Severity = Severity.DEBUG,
        color: bool = True,
        on_error: Callable[[Exception], None] | None = None,
    ):
        self._stream = stream
        self._severity = Severity(severity)
        self._on_error = on_error
        self._binary = isinstance(stream, (io.RawIOBase, io.BufferedIOBase))
        self._terminal = is_terminal(stream)
        self._color = color and self._terminal
        self._lock = threading.Lock()

    @property
    def stream(self) -> Any:
        return self._stream

    @property
    def severity(self) -> Severity:
        return self._severity

    def set_severity(self, severity: Severity) -> None:
        with self._lock:
            self._severity = Severity(severity)

    @property
    def is_terminal(self) -> bool:
        return self._terminal

    @property
    def color(self) -> bool:
        return self._color

    def receive_locally(self, severity: Severity, fmt: str, *args: Any) -> None:
        self.receive_from_child(severity, fmt, *args)

    def receive_from_child(self, severity: Severity, fmt: str, *args: Any) -> None:
        if severity > self._severity:
            return

        line = self.render(severity, fmt, *args)
        try:
            with self._lock:
                self._stream.write(line.encode("utf-8") if self._binary else line)
        except Exception as exc:
            self._report(exc)

    def _report(self, exc: Exception) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(exc)
        except Exception:
            # A failing hook must not turn logging into a failure
            pass

    def render(self, severity: Severity, fmt: str, *args: Any) -> str:
        """Build the full output line, newline included."""
        ts = datetime.now().strftime(TIMESTAMP_FORMAT)
        text = f"{ts} [{severity_name(severity)}] {sprintf(fmt, *args)}"
        if self._color:
            text = f"{self.COLORS.get(severity, '')}{text}{self.RESET}"
        return text + "\n"
