"""
Registry of named loggers.

Every component registers one name and gets back two views of the same node:

    log, site = xlog.new("svc")
    log.warnf("disk at %d%%", 91)       # Logger: emission
    site.set_severity(Severity.INFO)    # Site: configuration only

Dispatch: the node checks its own threshold, prefixes "<name>: " when the
message originates there, then hands it to its parent sink. Parents may be
other nodes, MultiSinks or leaf sinks; each re-applies its own threshold.
Nothing short-circuits across hops.
"""

import sys
import threading
from typing import Any, Callable, Optional

from xlog.formatting import sprintf
from xlog.severity import Severity
from xlog.sinks import MultiSink, Sink
from xlog.writer import WriterSink


class LoggerNameConflict(BaseException):
    """
    A logger name was registered twice.

    Names are fixed component identifiers, so a collision is a programming
    defect. Derives from BaseException so generic `except Exception`
    recovery code does not absorb it.
    """


class _Node(Sink):
    """Shared state behind a Logger/Site pair."""

    def __init__(self, name: str, severity: Severity, parent: Sink | None):
        self.name = name
        self._severity = Severity(severity)
        self._parent = parent
        self._lock = threading.Lock()

    @property
    def severity(self) -> Severity:
        with self._lock:
            return self._severity

    @severity.setter
    def severity(self, value: Severity) -> None:
        value = Severity(value)
        with self._lock:
            self._severity = value

    @property
    def parent(self) -> Sink | None:
        with self._lock:
            return self._parent

    @parent.setter
    def parent(self, value: Sink | None) -> None:
        with self._lock:
            self._parent = value

    def local_prefix(self) -> str:
        # Escaped so a '%' in the name is printed, not parsed as a directive
        if self.name:
            return self.name.replace("%", "%%") + ": "
        return ""

    def receive_locally(self, severity: Severity, fmt: str, *args: Any) -> None:
        self._forward(severity, self.local_prefix() + fmt, args)

    def receive_from_child(self, severity: Severity, fmt: str, *args: Any) -> None:
        self._forward(severity, fmt, args)

    def _forward(self, severity: Severity, fmt: str, args: tuple) -> None:
        with self._lock:
            threshold = self._severity
            parent = self._parent
        if severity > threshold or parent is None:
            return
        parent.receive_from_child(severity, fmt, *args)


class Site(Sink):
    """
    Configuration view of a logger: name, threshold and parent sink.

    A Site is also a Sink, so another logger can be hung beneath it with
    set_sink(). Both receive paths relay without the name prefix; holding
    a Site does not allow emitting as that component.
    """

    def __init__(self, node: _Node):
        self._node = node

    @property
    def name(self) -> str:
        return self._node.name

    @property
    def severity(self) -> Severity:
        return self._node.severity

    @property
    def sink(self) -> Sink | None:
        return self._node.parent

    def set_severity(self, severity: Severity) -> None:
        self._node.severity = severity

    def set_sink(self, sink: Sink | None) -> None:
        self._node.parent = sink

    def receive_locally(self, severity: Severity, fmt: str, *args: Any) -> None:
        self._node.receive_from_child(severity, fmt, *args)

    def receive_from_child(self, severity: Severity, fmt: str, *args: Any) -> None:
        self._node.receive_from_child(severity, fmt, *args)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Site) and other._node is self._node

    def __hash__(self) -> int:
        return id(self._node)

    def __repr__(self) -> str:
        return f"Site(name={self.name!r}, severity={self.severity.name})"


class Logger:
    """
    Emission view of a logger.

    Usage:
        log, site = Registry.instance().new("db")
        log.infof("connected to %s in %.1fms", host, elapsed)
        log.debugf("plan: %s", LogClosure(lambda: explain(query)))
    """

    def __init__(self, node: _Node):
        self._node = node

    @property
    def name(self) -> str:
        return self._node.name

    def enabled_for(self, severity: Severity) -> bool:
        """Whether this node's own threshold admits the severity."""
        return severity <= self._node.severity

    # ── Core ──────────────────────────────────────────────────────

    def log(self, severity: Severity, fmt: str, *args: Any) -> None:
        """Emit a printf-style message at any severity."""
        self._node.receive_locally(severity, fmt, *args)

    def _plain(self, severity: Severity, *args: Any) -> None:
        # Arguments joined with spaces, none of them parsed as a format
        self._node.receive_locally(severity, " ".join(["%v"] * len(args)), *args)

    # ── printf-style ──────────────────────────────────────────────

    def tracef(self, fmt: str, *args: Any) -> None:
        self.log(Severity.TRACE, fmt, *args)

    def debugf(self, fmt: str, *args: Any) -> None:
        self.log(Severity.DEBUG, fmt, *args)

    def infof(self, fmt: str, *args: Any) -> None:
        self.log(Severity.INFO, fmt, *args)

    def noticef(self, fmt: str, *args: Any) -> None:
        self.log(Severity.NOTICE, fmt, *args)

    def warnf(self, fmt: str, *args: Any) -> None:
        self.log(Severity.WARN, fmt, *args)

    def errorf(self, fmt: str, *args: Any) -> None:
        self.log(Severity.ERROR, fmt, *args)

    def criticalf(self, fmt: str, *args: Any) -> None:
        self.log(Severity.CRITICAL, fmt, *args)

    def alertf(self, fmt: str, *args: Any) -> None:
        self.log(Severity.ALERT, fmt, *args)

    def emergencyf(self, fmt: str, *args: Any) -> None:
        self.log(Severity.EMERGENCY, fmt, *args)

    # ── Plain ─────────────────────────────────────────────────────

    def trace(self, *args: Any) -> None:
        self._plain(Severity.TRACE, *args)

    def debug(self, *args: Any) -> None:
        self._plain(Severity.DEBUG, *args)

    def info(self, *args: Any) -> None:
        self._plain(Severity.INFO, *args)

    def notice(self, *args: Any) -> None:
        self._plain(Severity.NOTICE, *args)

    def warn(self, *args: Any) -> None:
        self._plain(Severity.WARN, *args)

    def error(self, *args: Any) -> None:
        self._plain(Severity.ERROR, *args)

    def critical(self, *args: Any) -> None:
        self._plain(Severity.CRITICAL, *args)

    def alert(self, *args: Any) -> None:
        self._plain(Severity.ALERT, *args)

    def emergency(self, *args: Any) -> None:
        self._plain(Severity.EMERGENCY, *args)

    # ── Terminal ──────────────────────────────────────────────────

    def fatalf(self, fmt: str, *args: Any) -> None:
        """Log at CRITICAL, then exit the process with status 1."""
        self.criticalf(fmt, *args)
        raise SystemExit(1)

    def panicf(self, fmt: str, *args: Any) -> None:
        """Log at CRITICAL, then raise RuntimeError with the message."""
        self.criticalf(fmt, *args)
        raise RuntimeError(sprintf(fmt, *args))

    def __repr__(self) -> str:
        return f"Logger(name={self.name!r})"


class Registry:
    """
    Process-wide name → logger mapping plus the default sink topology:

        root (unnamed, TRACE) → root_sink (MultiSink) → stderr_sink (WriterSink)

    Loggers are created once and live as long as the registry. There is
    no removal. One lock covers registration and visit_sites(); the lock
    is held while visitors run, so a visitor must not call new().
    """

    _instance: Optional["Registry"] = None
    _instance_lock = threading.Lock()

    def __init__(self, stream: Any = None) -> None:
        self._loggers: dict[str, _Node] = {}
        self._lock = threading.Lock()
        self.stderr_sink = WriterSink(
            stream if stream is not None else sys.stderr, severity=Severity.TRACE
        )
        self.root_sink = MultiSink([self.stderr_sink])
        self._root = _Node("", Severity.TRACE, self.root_sink)
        self.root = Site(self._root)

    @classmethod
    def instance(cls) -> "Registry":
        """Get or create the process-wide registry."""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the process-wide registry. For testing only."""
        with cls._instance_lock:
            cls._instance = None

    # ── Registration ──────────────────────────────────────────────

    def new(self, name: str, severity: Severity = Severity.TRACE) -> tuple[Logger, Site]:
        """Register a logger under the root."""
        return self.new_under(name, self.root, severity)

    def new_under(
        self, name: str, parent: Sink | None, severity: Severity = Severity.TRACE
    ) -> tuple[Logger, Site]:
        """Register a logger whose parent is the given sink (often another Site)."""
        with self._lock:
            if name in self._loggers:
                raise LoggerNameConflict(
                    f"Logger name conflict: logger with name {name} already exists"
                )
            node = _Node(name, severity, parent)
            self._loggers[name] = node
        return Logger(node), Site(node)

    # ── Lookup ────────────────────────────────────────────────────

    def get(self, name: str) -> Site | None:
        with self._lock:
            node = self._loggers.get(name)
        return Site(node) if node is not None else None

    def names(self) -> list[str]:
        with self._lock:
            return list(self._loggers)

    def __len__(self) -> int:
        return len(self._loggers)

    def __contains__(self, name: object) -> bool:
        return name in self._loggers

    # ── Bulk ──────────────────────────────────────────────────────

    def visit_sites(self, visitor: Callable[[Site], None]) -> None:
        """
        Call visitor once per registered Site, in no particular order.

        The first exception raised by the visitor stops the traversal and
        propagates to the caller.
        """
        with self._lock:
            for node in self._loggers.values():
                visitor(Site(node))


# ── Module-level conveniences (process-wide registry) ─────────────────

def new(name: str, severity: Severity = Severity.TRACE) -> tuple[Logger, Site]:
    return Registry.instance().new(name, severity)


def new_under(
    name: str, parent: Sink | None, severity: Severity = Severity.TRACE
) -> tuple[Logger, Site]:
    return Registry.instance().new_under(name, parent, severity)


def visit_sites(visitor: Callable[[Site], None]) -> None:
    Registry.instance().visit_sites(visitor)


def root() -> Site:
    return Registry.instance().root


def root_sink() -> MultiSink:
    return Registry.instance().root_sink
