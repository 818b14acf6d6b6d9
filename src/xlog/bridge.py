"""
LoggingSink: forwards into the standard library logging module.

Lets an application that already configures logging handlers host an
xlog tree as one of its leaves:

    xlog.root_sink().add(LoggingSink("myapp"))
"""

import logging
from typing import Any

from xlog.formatting import sprintf
from xlog.severity import Severity
from xlog.sinks import Sink

TRACE_LEVEL = 5

STDLIB_LEVELS: dict[Severity, int] = {
    Severity.EMERGENCY: logging.CRITICAL,
    Severity.ALERT: logging.CRITICAL,
    Severity.CRITICAL: logging.CRITICAL,
    Severity.ERROR: logging.ERROR,
    Severity.WARN: logging.WARNING,
    Severity.NOTICE: logging.INFO,
    Severity.INFO: logging.INFO,
    Severity.DEBUG: logging.DEBUG,
    Severity.TRACE: TRACE_LEVEL,
}


class LoggingSink(Sink):
    """Renders accepted messages and logs them on a stdlib logger."""

    def __init__(self, logger_name: str = "xlog", severity: Severity = Severity.TRACE):
        self._logger = logging.getLogger(logger_name)
        self._severity = Severity(severity)

    @property
    def logger_name(self) -> str:
        return self._logger.name

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

        level = STDLIB_LEVELS.get(severity, logging.DEBUG)
        if not self._logger.isEnabledFor(level):
            return
        try:
            # Pre-rendered; stdlib must not apply its own %-formatting
            self._logger.log(level, "%s", sprintf(fmt, *args))
        except Exception:
            pass
