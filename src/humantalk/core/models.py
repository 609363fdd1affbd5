"""Value types shared by the router and the crash reporter."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from .severity import Severity

if TYPE_CHECKING:
    from .errors import ReportPersistError


def _frozen_mapping(values: Mapping | None) -> Mapping[str, str]:
    return MappingProxyType({str(k): str(v) for k, v in (values or {}).items()})


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    """A single user-facing message.

    Attributes:
        severity: Severity level
        text: Text exactly as supplied by the caller
        timestamp: When the message was created (UTC)
        metadata: Free-form context, e.g. {"module": "loader"}
    """

    severity: Severity
    text: str
    timestamp: datetime = field(default_factory=utcnow)
    metadata: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "metadata", _frozen_mapping(self.metadata))


@dataclass(frozen=True)
class StackFrame:
    """Caller-supplied frame descriptor."""

    function: str
    location: str = ""

    def __str__(self) -> str:
        if not self.location:
            return self.function
        return f"{self.function} at {self.location}"

    @classmethod
    def parse(cls, line: str) -> "StackFrame":
        function, sep, location = line.rpartition(" at ")
        if not sep:
            return cls(function=line)
        return cls(function=function, location=location)


@dataclass(frozen=True)
class CrashReport:
    """Snapshot of a fatal failure, one per FATAL message."""

    message: Message
    report_id: str
    stack_context: tuple[StackFrame, ...] = ()
    environment: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "stack_context", tuple(self.stack_context))
        object.__setattr__(self, "environment", _frozen_mapping(self.environment))


@dataclass(frozen=True)
class CaptureResult:
    """Outcome of one crash capture.

    The report and instruction are always present; ``path`` is set when the
    artifact was saved, ``persist_error`` when saving failed.
    """

    report: CrashReport
    instruction: str
    path: str | None = None
    persist_error: ReportPersistError | None = None

    @property
    def persisted(self) -> bool:
        return self.path is not None


class EmitStatus(Enum):
    SUPPRESSED = auto()
    RENDERED = auto()
    FATAL_HANDLED = auto()


@dataclass(frozen=True)
class EmitResult:
    status: EmitStatus
    message: Message | None = None
    capture: CaptureResult | None = None

    @classmethod
    def suppressed(cls) -> "EmitResult":
        return cls(status=EmitStatus.SUPPRESSED)

    @classmethod
    def rendered(cls, message: Message) -> "EmitResult":
        return cls(status=EmitStatus.RENDERED, message=message)

    @classmethod
    def fatal_handled(cls, message: Message, capture: CaptureResult) -> "EmitResult":
        return cls(status=EmitStatus.FATAL_HANDLED, message=message, capture=capture)

    @property
    def report_id(self) -> str | None:
        return self.capture.report.report_id if self.capture else None

    @property
    def instruction_text(self) -> str | None:
        return self.capture.instruction if self.capture else None

    @property
    def report(self) -> CrashReport | None:
        return self.capture.report if self.capture else None

    @property
    def persist_error(self) -> ReportPersistError | None:
        return self.capture.persist_error if self.capture else None
