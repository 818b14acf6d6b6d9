"""
SyslogSink: hands rendered messages to a syslog-style writer.

The writer owns presentation (timestamp, host, tag), so the message body
is the bare formatted text with no prefix.
"""

from typing import Any, Protocol, runtime_checkable

from xlog.formatting import sprintf
from xlog.severity import Severity
from xlog.sinks import Sink


@runtime_checkable
class SyslogWriter(Protocol):
    """One delivery method per syslog priority. Return values are ignored."""

    def emergency(self, message: str) -> Any: ...
    def alert(self, message: str) -> Any: ...
    def critical(self, message: str) -> Any: ...
    def error(self, message: str) -> Any: ...
    def warning(self, message: str) -> Any: ...
    def notice(self, message: str) -> Any: ...
    def info(self, message: str) -> Any: ...
    def debug(self, message: str) -> Any: ...


class SyslogSink(Sink):
    """
    Maps each severity onto the matching SyslogWriter method.

    Syslog has no TRACE priority; anything without an entry in DISPATCH
    is delivered through debug().
    """

    DISPATCH = {
        Severity.EMERGENCY: "emergency",
        Severity.ALERT: "alert",
        Severity.CRITICAL: "critical",
        Severity.ERROR: "error",
        Severity.WARN: "warning",
        Severity.NOTICE: "notice",
        Severity.INFO: "info",
        Severity.DEBUG: "debug",
    }
    FALLBACK = "debug"

    def __init__(self, writer: SyslogWriter, severity: Severity = Severity.DEBUG):
        self._writer = writer
        self._severity = Severity(severity)

    @property
    def writer(self) -> SyslogWriter:
        return self._writer

    @property
    def severity(self) -> Severity:
        return self._severity

    def set_severity(self, severity: Severity) -> None:
        self._severity = Severity(severity)

    def receive_locally(self, severity: Severity, fmt: str, *args: Any) -> None:
        self.receive_from_child(severity, fmt, *args)

    def receive_from_child(self, severity: Severity, fmt: str, *args: Any) -> None:
        if severity > self._severity:
            return

        name = self.DISPATCH.get(severity, self.FALLBACK)
        try:
            getattr(self._writer, name)(sprintf(fmt, *args))
        except Exception:
            # Syslog delivery problems are not the caller's problem
            pass
