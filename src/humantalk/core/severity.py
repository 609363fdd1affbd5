"""Severity levels for user-facing messages.

Each severity maps to exactly one color token and one gating rule.
See DEFAULT_PALETTE for the stock colors.
"""

from __future__ import annotations

from enum import Enum


class Severity(Enum):
    """Classification of a message shown to the user"""

    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"  # Only rendered when debug is enabled
    NOTICE = "notice"  # Non-fatal error
    FATAL = "fatal"  # Produces a crash report

    @classmethod
    def parse(cls, value: "Severity | str") -> "Severity":
        """Accept a Severity or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            names = ", ".join(s.name for s in cls)
            raise ValueError(f"Unknown severity {value!r} (expected one of: {names})") from None

    def __str__(self) -> str:
        return self.value


DEFAULT_PALETTE: dict[Severity, str] = {
    Severity.WARNING: "yellow",
    Severity.INFO: "green",
    Severity.DEBUG: "blue",
    Severity.NOTICE: "cyan",
    Severity.FATAL: "red",
}


def severity_tag(severity: Severity) -> str:
    """Level tag shown before the message text, e.g. ``[warning]``."""
    if severity is Severity.FATAL:
        return "[FATAL]"
    return f"[{severity.value}]"
