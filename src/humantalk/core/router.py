"""Severity routing for user-facing messages.

Gates each message on its severity, renders it through the output sink and,
for FATAL, hands it to the crash reporter. The router never exits the
process: what to do after a FATAL is up to the host.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from .config_model import DebugConfig
from .crash_reporter import CrashReporter, FrameLike
from .errors import ConfigurationError, SinkWriteError
from .models import CaptureResult, EmitResult, Message, utcnow
from .ports import OutputSink, ReportStore
from .severity import Severity, severity_tag

PLATFORM_INFO_TAG = "[PLATFORM INFO]"
PLATFORM_INFO_COLOR = "cyan"


class SeverityRouter:
    """Dispatches messages for one DebugConfig."""

    def __init__(
        self,
        config: DebugConfig,
        sink: OutputSink,
        store: ReportStore | None = None,
        reporter: CrashReporter | None = None,
    ):
        if not isinstance(config, DebugConfig):
            raise ConfigurationError(
                f"SeverityRouter needs a DebugConfig, got {type(config).__name__}",
                user_message="humantalk was used before it was configured.",
            )
        self._config = config
        self._sink = sink
        self._reporter = reporter or CrashReporter(config, store)

    @property
    def config(self) -> DebugConfig:
        return self._config

    def should_render(self, severity: Severity) -> bool:
        if severity is Severity.DEBUG:
            return self._config.debug_enabled
        return True

    def emit(
        self,
        severity: Severity | str,
        text: str,
        metadata: Mapping[str, str] | None = None,
        stack_context: Iterable[FrameLike] | None = None,
        environment: Mapping[str, str] | None = None,
    ) -> EmitResult:
        """Render one message.

        Args:
            severity: Severity or its name.
            text: Message text; may be empty.
            metadata: Free-form context stored on the message.
            stack_context: Frame descriptors for the crash report (FATAL only).
            environment: Extra crash report environment entries (FATAL only).

        Raises:
            SinkWriteError: if the output sink rejects the write.
        """
        severity = Severity.parse(severity)
        if not self.should_render(severity):
            return EmitResult.suppressed()

        message = Message(severity=severity, text=text or "", timestamp=utcnow(), metadata=metadata or {})
        if severity is not Severity.FATAL:
            self._write(severity_tag(severity), message.text, self._config.get_color(severity))
            return EmitResult.rendered(message)

        capture = None
        try:
            self._write(severity_tag(severity), message.text, self._config.get_color(severity))
            # The artifact is written before the instruction is shown
            capture = self._reporter.capture(message, stack_context=stack_context, environment=environment)
            self._show_instruction(capture)
        except SinkWriteError as e:
            # A broken console must not cost us the crash report
            if capture is None:
                capture = self._reporter.capture(message, stack_context=stack_context, environment=environment)
            e.capture = capture
            raise
        return EmitResult.fatal_handled(message, capture)

    def _show_instruction(self, capture: CaptureResult) -> None:
        color = self._config.get_color(Severity.FATAL)
        self._write("", capture.instruction, color)
        if capture.persist_error is not None:
            self._write("", capture.persist_error.user_message, color)
        if capture.report.environment:
            self._write(PLATFORM_INFO_TAG, _format_environment(capture.report.environment), PLATFORM_INFO_COLOR)

    def _write(self, tag: str, text: str, color: str | None) -> None:
        try:
            self._sink.write(tag, text, color)
        except (OSError, ValueError) as e:
            raise SinkWriteError(
                f"Output sink rejected a write: {e}",
                user_message="Could not display a message.",
            ) from e

    def warning(self, text: str, **kwargs) -> EmitResult:
        return self.emit(Severity.WARNING, text, **kwargs)

    def info(self, text: str, **kwargs) -> EmitResult:
        return self.emit(Severity.INFO, text, **kwargs)

    def debug(self, text: str, **kwargs) -> EmitResult:
        return self.emit(Severity.DEBUG, text, **kwargs)

    def notice(self, text: str, **kwargs) -> EmitResult:
        return self.emit(Severity.NOTICE, text, **kwargs)

    def fatal(self, text: str, **kwargs) -> EmitResult:
        return self.emit(Severity.FATAL, text, **kwargs)


def _format_environment(environment: Mapping[str, str]) -> str:
    return "\n".join(f"{key}: {value}" for key, value in sorted(environment.items()))
