"""
Severity levels.

Lower value = more urgent. A threshold admits every message whose severity
is <= the threshold, so "greater than" reads as "more verbose than":

    EMERGENCY < ALERT < CRITICAL < ERROR < WARN < NOTICE < INFO < DEBUG < TRACE

NONE sits below EMERGENCY and, used as a threshold, suppresses everything.
"""

from enum import IntEnum


class Severity(IntEnum):
    """Message urgency, most urgent first."""
    NONE = -1
    EMERGENCY = 1
    ALERT = 2
    CRITICAL = 3
    ERROR = 4
    WARN = 5
    NOTICE = 6
    INFO = 7
    DEBUG = 8
    TRACE = 9

    @classmethod
    def from_name(cls, name: str) -> "Severity":
        """Resolve severity from its label, case-insensitive."""
        sev = _VALUES.get(name.upper())
        if sev is None:
            raise ValueError(
                f"Unknown severity '{name}'. "
                f"Valid severities: {', '.join(_LABELS.values())}"
            )
        return sev

    def __str__(self) -> str:
        return _LABELS[self]


# Source of truth for labels. Both lookup directions are derived from it once.
_LABELS: dict[Severity, str] = {
    Severity.NONE: "NONE",
    Severity.EMERGENCY: "EMERGENCY",
    Severity.ALERT: "ALERT",
    Severity.CRITICAL: "CRITICAL",
    Severity.ERROR: "ERROR",
    Severity.WARN: "WARN",
    Severity.NOTICE: "NOTICE",
    Severity.INFO: "INFO",
    Severity.DEBUG: "DEBUG",
    Severity.TRACE: "TRACE",
}

_VALUES: dict[str, Severity] = {label: sev for sev, label in _LABELS.items()}


def severity_name(severity: int) -> str:
    """Canonical label for a severity. Falls back to the numeric string."""
    try:
        return _LABELS[Severity(severity)]
    except ValueError:
        return str(severity)


def parse_severity(text: str) -> tuple[Severity, bool]:
    """
    Look up a severity by its canonical label.

    Returns (severity, True) on a match and (Severity.NONE, False) otherwise.
    Matching is exact; "warn" is not "WARN".
    """
    sev = _VALUES.get(text)
    if sev is None:
        return Severity.NONE, False
    return sev, True


def resolve_severity(value: int | str) -> Severity:
    """Convert a label or numeric value to a Severity. Raises ValueError."""
    if isinstance(value, str):
        return Severity.from_name(value)
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return Severity(value)
        except ValueError:
            raise ValueError(
                f"No severity with value {value}. "
                f"Valid values: {', '.join(f'{s.name}={s.value}' for s in Severity)}"
            ) from None
    raise TypeError(f"Expected int or str for severity, got {type(value).__name__}")
