"""Core ports (interfaces) for humantalk.

The router and the crash reporter only talk to these; console streams and
crash files live behind adapters.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class OutputSink(Protocol):
    """Destination for rendered messages."""

    def write(self, tag: str, text: str, color: str | None) -> None:
        """Write one message line; raise OSError/ValueError if the write is rejected."""


@runtime_checkable
class ReportStore(Protocol):
    """Destination for crash artifacts."""

    def target_path(self, report_id: str) -> str:
        """Path the artifact for ``report_id`` would be written to."""

    def save(self, report_id: str, content: str) -> str:
        """Create the artifact and return its path; raise OSError on failure."""
