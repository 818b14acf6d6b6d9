"""
Sink contract and fan-out.

A sink accepts (severity, format, args) either from the node that owns it
(receive_locally) or relayed from a descendant (receive_from_child). Only
leaf sinks render; intermediate sinks forward the unformatted pieces.
"""

import threading
from abc import ABC, abstractmethod
from typing import Any, Iterable

from xlog.severity import Severity


class Sink(ABC):
    """Base sink. Implementations must tolerate concurrent calls."""

    @abstractmethod
    def receive_locally(self, severity: Severity, fmt: str, *args: Any) -> None:
        """A message originating at this node."""
        ...

    @abstractmethod
    def receive_from_child(self, severity: Severity, fmt: str, *args: Any) -> None:
        """A message forwarded from a descendant."""
        ...


class MultiSink(Sink):
    """
    Broadcasts every message to an ordered set of sinks.

    Membership is by identity: adding the same sink twice is a no-op.
    Insertion order is delivery order. No filtering happens here; each
    member applies its own threshold.

    Membership is copy-on-write, so a broadcast always iterates a complete
    snapshot even while add()/remove() run on other threads.
    """

    def __init__(self, sinks: Iterable[Sink] = ()):
        self._sinks: tuple[Sink, ...] = ()
        self._lock = threading.Lock()
        for sink in sinks:
            self.add(sink)

    def add(self, sink: Sink) -> None:
        with self._lock:
            if any(s is sink for s in self._sinks):
                return
            self._sinks = self._sinks + (sink,)

    def remove(self, sink: Sink) -> None:
        with self._lock:
            self._sinks = tuple(s for s in self._sinks if s is not sink)

    @property
    def sinks(self) -> tuple[Sink, ...]:
        return self._sinks

    def __len__(self) -> int:
        return len(self._sinks)

    def __contains__(self, sink: object) -> bool:
        return any(s is sink for s in self._sinks)

    def receive_locally(self, severity: Severity, fmt: str, *args: Any) -> None:
        for sink in self._sinks:
            try:
                sink.receive_locally(severity, fmt, *args)
            except Exception:
                # One broken member must not starve the others
                pass

    def receive_from_child(self, severity: Severity, fmt: str, *args: Any) -> None:
        for sink in self._sinks:
            try:
                sink.receive_from_child(severity, fmt, *args)
            except Exception:
                pass
