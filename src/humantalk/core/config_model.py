"""Core configuration model (structured view)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping

from .severity import DEFAULT_PALETTE, Severity

DEFAULT_BUG_REPORT_MESSAGE = "Oh no! The program has crashed"
DEFAULT_BUG_REPORT_URL = "the appropriate place"

DEFAULT_INSTRUCTION_TEMPLATE = (
    "{message}. Please submit a report to {url}, along with a copy of this error message, "
    "which can also be found in {report_path} as plaintext."
)
# Used when the crash artifact was not saved anywhere
UNSAVED_INSTRUCTION_TEMPLATE = (
    "{message}. Please submit a report to {url}, along with a copy of this error message."
)


@dataclass(frozen=True)
class BugReportInfo:
    """Where users are pointed when the program crashes."""

    message: str = DEFAULT_BUG_REPORT_MESSAGE
    url: str = DEFAULT_BUG_REPORT_URL


@dataclass(frozen=True)
class DebugConfig:
    """Process-wide settings, read-only once built.

    Attributes:
        debug_enabled: Render DEBUG messages
        color_palette: Severity -> color token; missing entries render plain
        report_sink: Where crash artifacts go (None = not persisted). A template
            containing {report_id} or a directory is used as is; for a plain
            file path the id is inserted before the suffix, so
            "crash_report.log" becomes "crash_report-<report_id>.log"
        bug_report: Message and URL used in the instruction text
        instruction_template: Format string for the instruction text
        environment: Extra key/value pairs recorded in every crash report
    """

    debug_enabled: bool = False
    color_palette: Mapping[Severity, str] = field(default_factory=lambda: dict(DEFAULT_PALETTE))
    report_sink: str | None = None
    bug_report: BugReportInfo = field(default_factory=BugReportInfo)
    instruction_template: str = DEFAULT_INSTRUCTION_TEMPLATE
    environment: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze the mappings too, so a shared config can't drift under readers
        object.__setattr__(self, "color_palette", MappingProxyType(dict(self.color_palette)))
        object.__setattr__(
            self, "environment", MappingProxyType({str(k): str(v) for k, v in self.environment.items()})
        )

    def get_color(self, severity: Severity) -> str | None:
        return self.color_palette.get(severity)

    def with_color(self, severity: Severity, color: str) -> "DebugConfig":
        palette = dict(self.color_palette)
        palette[severity] = color
        return replace(self, color_palette=palette)
