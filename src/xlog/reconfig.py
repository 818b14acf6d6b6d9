"""
Runtime reconfiguration.

Changes thresholds and topology without restart:
- Set one severity on every registered logger (e.g. from a signal handler)
- Set a single logger's severity by name
- Apply an XlogConfig
- Report current state

Usage:
    reconfig = SiteReconfig()
    reconfig.set_all("DEBUG")
    reconfig.set_severity("db", Severity.TRACE)
    status = reconfig.status()
"""

from __future__ import annotations

from typing import Any

from xlog.config import XlogConfig
from xlog.core import Registry, Site
from xlog.severity import Severity, resolve_severity, severity_name
from xlog.writer import WriterSink


def set_severity_on_all_loggers(severity: Severity, registry: Registry | None = None) -> None:
    """Set the same threshold on every registered logger."""
    registry = registry if registry is not None else Registry.instance()
    severity = Severity(severity)

    def visit(site: Site) -> None:
        site.set_severity(severity)

    registry.visit_sites(visit)


class SiteReconfig:
    """Runtime reconfiguration interface for a Registry."""

    def __init__(self, registry: Registry | None = None):
        self._registry = registry if registry is not None else Registry.instance()

    # ── Level management ──────────────────────────────────────

    def set_all(self, severity: Severity | int | str) -> None:
        set_severity_on_all_loggers(resolve_severity(severity), self._registry)

    def set_severity(self, name: str, severity: Severity | int | str) -> None:
        site = self._registry.get(name)
        if site is None:
            raise ValueError(f"Unknown logger '{name}'")
        site.set_severity(resolve_severity(severity))

    def set_root_severity(self, severity: Severity | int | str) -> None:
        self._registry.root.set_severity(resolve_severity(severity))

    def set_stderr_severity(self, severity: Severity | int | str) -> None:
        self._registry.stderr_sink.set_severity(resolve_severity(severity))

    # ── Configuration ─────────────────────────────────────────

    def apply(self, config: XlogConfig) -> None:
        """
        Apply a validated config.

        Order: default_severity on everyone, then per-name overrides, then
        root and stderr. Unknown names in `severities` raise ValueError
        after every known name has been applied.
        """
        if config.default_severity is not None:
            self.set_all(config.default_severity)

        unknown = []
        for name, sev in config.resolved_severities.items():
            site = self._registry.get(name)
            if site is None:
                unknown.append(name)
                continue
            site.set_severity(sev)

        if config.root_severity is not None:
            self.set_root_severity(config.root_severity)

        if config.stderr is not None:
            self._apply_stderr(config)

        if unknown:
            raise ValueError(f"Unknown logger(s) in config: {', '.join(sorted(unknown))}")

    def _apply_stderr(self, config: XlogConfig) -> None:
        cfg = config.stderr
        registry = self._registry
        current = registry.stderr_sink

        # Color is fixed at construction, so a color setting means a new sink
        if cfg.color is not None:
            replacement = WriterSink(
                current.stream, severity=cfg.resolved_severity, color=cfg.color
            )
            if current in registry.root_sink:
                registry.root_sink.remove(current)
                registry.root_sink.add(replacement)
            registry.stderr_sink = replacement
            current = replacement
        else:
            current.set_severity(cfg.resolved_severity)

        if cfg.enabled:
            registry.root_sink.add(current)
        else:
            registry.root_sink.remove(current)

    # ── Status ────────────────────────────────────────────────

    def status(self) -> dict[str, Any]:
        """
        Snapshot of the registry.

        Returns:
            {
                "root_severity": "TRACE",
                "loggers": {"db": "DEBUG", ...},
                "root_sinks": [{"type": "WriterSink", "severity": "TRACE"}, ...],
            }
        """
        loggers: dict[str, str] = {}

        def visit(site: Site) -> None:
            loggers[site.name] = severity_name(site.severity)

        self._registry.visit_sites(visit)

        sinks = []
        for sink in self._registry.root_sink.sinks:
            info: dict[str, Any] = {"type": type(sink).__name__}
            sev = getattr(sink, "severity", None)
            if sev is not None:
                info["severity"] = severity_name(sev)
            sinks.append(info)

        return {
            "root_severity": severity_name(self._registry.root.severity),
            "loggers": dict(sorted(loggers.items())),
            "root_sinks": sinks,
        }
