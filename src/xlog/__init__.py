"""
xlog: hierarchical per-component logging.

Named loggers forward severity-tagged printf-style messages up a tree of
sinks. Every hop applies its own threshold; leaf sinks render.
"""

from xlog.severity import Severity, parse_severity, resolve_severity, severity_name
from xlog.formatting import LogClosure, sprintf
from xlog.sinks import Sink, MultiSink
from xlog.writer import WriterSink, TerminalCapable
from xlog.syslogsink import SyslogSink, SyslogWriter
from xlog.bridge import LoggingSink
from xlog.core import (
    Logger,
    LoggerNameConflict,
    Registry,
    Site,
    new,
    new_under,
    root,
    root_sink,
    visit_sites,
)
from xlog.reconfig import SiteReconfig, set_severity_on_all_loggers
from xlog.config import XlogConfig, StderrSinkConfig

__all__ = [
    "Severity",
    "parse_severity",
    "resolve_severity",
    "severity_name",
    "LogClosure",
    "sprintf",
    "Sink",
    "MultiSink",
    "WriterSink",
    "TerminalCapable",
    "SyslogSink",
    "SyslogWriter",
    "LoggingSink",
    "Logger",
    "LoggerNameConflict",
    "Registry",
    "Site",
    "new",
    "new_under",
    "root",
    "root_sink",
    "visit_sites",
    "SiteReconfig",
    "set_severity_on_all_loggers",
    "XlogConfig",
    "StderrSinkConfig",
]
