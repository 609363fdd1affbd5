"""Crash report capture for FATAL messages.

Builds a CrashReport from the message plus caller-supplied context, writes
the artifact through a ReportStore (one attempt, never retried) and formats
the instruction text shown to the user. Failing to save the artifact never
prevents the report or instruction from being returned.
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable, Iterable, Mapping

from .config_model import DEFAULT_INSTRUCTION_TEMPLATE, UNSAVED_INSTRUCTION_TEMPLATE, DebugConfig
from .errors import ReportPersistError
from .models import CaptureResult, CrashReport, Message, StackFrame, utcnow
from .ports import ReportStore
from .report_format import render_report
from .severity import Severity
from .state_machine import CaptureEvent, CaptureStateMachine

logger = logging.getLogger(__name__)

NOT_SAVED = "(not saved)"

FrameLike = StackFrame | tuple[str, str] | str


def new_report_id(now=None) -> str:
    """Timestamp plus a random suffix, safe to use in file names."""
    now = now or utcnow()
    return f"{now:%Y%m%dT%H%M%S}-{uuid.uuid4().hex[:12]}"


def to_frames(stack_context: Iterable[FrameLike] | None) -> tuple[StackFrame, ...]:
    frames = []
    for item in stack_context or ():
        if isinstance(item, StackFrame):
            frames.append(item)
        elif isinstance(item, str):
            frames.append(StackFrame.parse(item))
        else:
            function, location = item
            frames.append(StackFrame(function=str(function), location=str(location)))
    return tuple(frames)


class CrashReporter:
    """Turns a FATAL message into a persisted crash report."""

    def __init__(
        self,
        config: DebugConfig,
        store: ReportStore | None = None,
        id_factory: Callable[[], str] = new_report_id,
    ):
        self._config = config
        self._store = store
        self._id_factory = id_factory

    def capture(
        self,
        message: Message,
        stack_context: Iterable[FrameLike] | None = None,
        environment: Mapping[str, str] | None = None,
    ) -> CaptureResult:
        """Capture, serialize and persist a crash report.

        Args:
            message: The FATAL message being reported.
            stack_context: Frame descriptors supplied by the caller, outermost first.
            environment: Extra environment entries; they override the configured ones.

        Raises:
            ValueError: if ``message`` is not FATAL.
        """
        if message.severity is not Severity.FATAL:
            raise ValueError(f"Crash reports are only produced for FATAL messages, got {message.severity.name}")

        state = CaptureStateMachine()
        state.transition(CaptureEvent.START)

        env = dict(self._config.environment)
        env.update(environment or {})
        report = CrashReport(
            message=message,
            report_id=self._id_factory(),
            stack_context=to_frames(stack_context),
            environment=env,
        )
        state.transition(CaptureEvent.SNAPSHOT_DONE)

        content = render_report(report)
        path, persist_error = self._persist(report.report_id, content, state)
        state.transition(CaptureEvent.FINISH)
        logger.debug("Crash capture %s finished: %s", report.report_id, [s.name for s in state.history])

        return CaptureResult(
            report=report,
            instruction=self.instruction_text(report, path),
            path=path,
            persist_error=persist_error,
        )

    def _persist(self, report_id: str, content: str, state: CaptureStateMachine):
        if self._store is None:
            state.transition(CaptureEvent.NO_STORE)
            return None, None

        try:
            path = self._store.save(report_id, content)
        except Exception as e:
            target = _safe_target(self._store, report_id)
            logger.warning("Could not save crash report to %s: %s", target, e)
            state.transition(CaptureEvent.WRITE_FAILED)
            error = ReportPersistError(
                f"Failed to write crash report {report_id} to {target}: {e}",
                path=target,
                user_message="Failed to save the crash report - just copy the information displayed above.",
            )
            error.__cause__ = e
            return None, error

        state.transition(CaptureEvent.WRITE_OK)
        logger.info("Crash report written to %s", path)
        return str(path), None

    def instruction_text(self, report: CrashReport, path: str | None) -> str:
        """Format the user-facing instruction for ``report``."""
        bug_report = self._config.bug_report
        template = self._config.instruction_template
        if path is None and template == DEFAULT_INSTRUCTION_TEMPLATE:
            template = UNSAVED_INSTRUCTION_TEMPLATE

        values = {
            "message": bug_report.message,
            "url": bug_report.url,
            "report_path": path or NOT_SAVED,
            "report_id": report.report_id,
        }
        try:
            return template.format_map(values)
        except (KeyError, IndexError, ValueError, AttributeError, TypeError) as e:
            logger.warning("Bad instruction template %r (%s), using the default", template, e)
            fallback = DEFAULT_INSTRUCTION_TEMPLATE if path else UNSAVED_INSTRUCTION_TEMPLATE
            return fallback.format_map(values)


def _safe_target(store: ReportStore, report_id: str) -> str | None:
    try:
        return store.target_path(report_id)
    except Exception:
        return None
