import io

import pytest

from humantalk.core.config_model import DebugConfig
from humantalk.core.errors import ConfigurationError, SinkWriteError
from humantalk.core.models import EmitStatus
from humantalk.core.ports import OutputSink, ReportStore
from humantalk.core.router import SeverityRouter
from humantalk.core.severity import Severity


class _Sink(OutputSink):
    def __init__(self):
        self.calls = []

    def write(self, tag: str, text: str, color) -> None:
        self.calls.append((tag, text, color))


class _ClosedSink(OutputSink):
    def write(self, tag: str, text: str, color) -> None:
        stream = io.StringIO()
        stream.close()
        stream.write(text)


class _Store(ReportStore):
    def __init__(self):
        self.saved = {}

    def target_path(self, report_id: str) -> str:
        return f"{report_id}.log"

    def save(self, report_id: str, content: str) -> str:
        self.saved[report_id] = content
        return self.target_path(report_id)


class _FullDisk(_Store):
    def save(self, report_id: str, content: str) -> str:
        raise OSError(28, "No space left on device")


@pytest.mark.parametrize("severity", [Severity.WARNING, Severity.INFO, Severity.NOTICE])
@pytest.mark.parametrize("debug_enabled", [True, False])
def test_non_debug_severities_always_render(severity, debug_enabled):
    sink = _Sink()
    router = SeverityRouter(DebugConfig(debug_enabled=debug_enabled), sink)

    result = router.emit(severity, "hello", metadata={"module": "tests"})

    assert result.status is EmitStatus.RENDERED
    assert result.message.text == "hello"
    assert dict(result.message.metadata) == {"module": "tests"}
    assert sink.calls == [(f"[{severity.value}]", "hello", DebugConfig().color_palette[severity])]


def test_debug_suppressed_when_disabled():
    sink = _Sink()
    router = SeverityRouter(DebugConfig(debug_enabled=False), sink)

    for _ in range(3):
        assert router.debug("x").status is EmitStatus.SUPPRESSED
    assert sink.calls == []


def test_debug_rendered_when_enabled():
    sink = _Sink()
    router = SeverityRouter(DebugConfig(debug_enabled=True), sink)

    for _ in range(2):
        assert router.emit("debug", "x").status is EmitStatus.RENDERED
    assert sink.calls == [("[debug]", "x", "blue")] * 2


def test_missing_palette_entry_renders_plain():
    sink = _Sink()
    router = SeverityRouter(DebugConfig(color_palette={Severity.INFO: "green"}), sink)

    router.warning("careful")

    assert sink.calls == [("[warning]", "careful", None)]


def test_empty_text_keeps_tag():
    sink = _Sink()
    SeverityRouter(DebugConfig(), sink).info("")
    assert sink.calls == [("[info]", "", "green")]


def test_fatal_renders_then_reports():
    sink = _Sink()
    store = _Store()
    router = SeverityRouter(DebugConfig(environment={"os": "linux"}), sink, store=store)

    result = router.fatal("disk full", stack_context=[("main", "app.py:1")])

    assert result.status is EmitStatus.FATAL_HANDLED
    assert result.report_id in store.saved
    assert "Message: disk full" in store.saved[result.report_id]
    assert result.instruction_text
    assert result.persist_error is None
    assert sink.calls[0] == ("[FATAL]", "disk full", "red")
    assert sink.calls[1] == ("", result.instruction_text, "red")
    assert sink.calls[2] == ("[PLATFORM INFO]", "os: linux", "cyan")


def test_fatal_with_failing_store_is_still_handled():
    sink = _Sink()
    router = SeverityRouter(DebugConfig(), sink, store=_FullDisk())

    result = router.fatal("oops")

    assert result.status is EmitStatus.FATAL_HANDLED
    assert result.report is not None
    assert result.instruction_text
    assert result.persist_error is not None
    assert any("copy the information displayed above" in text for _, text, _ in sink.calls)


def test_only_fatal_produces_reports():
    store = _Store()
    router = SeverityRouter(DebugConfig(debug_enabled=True), _Sink(), store=store)
    for severity in (Severity.WARNING, Severity.INFO, Severity.DEBUG, Severity.NOTICE):
        assert router.emit(severity, "msg").report is None
    assert store.saved == {}

    router.emit(Severity.FATAL, "msg")
    assert len(store.saved) == 1


def test_sink_failure_is_reported():
    router = SeverityRouter(DebugConfig(), _ClosedSink())
    with pytest.raises(SinkWriteError) as exc_info:
        router.info("lost?")
    assert isinstance(exc_info.value.__cause__, ValueError)
    assert exc_info.value.capture is None


def test_sink_failure_on_fatal_keeps_crash_report():
    store = _Store()
    router = SeverityRouter(DebugConfig(), _ClosedSink(), store=store)
    with pytest.raises(SinkWriteError) as exc_info:
        router.fatal("boom")
    capture = exc_info.value.capture
    assert capture is not None
    assert capture.report.report_id in store.saved


def test_router_requires_config():
    with pytest.raises(ConfigurationError):
        SeverityRouter(None, _Sink())


def test_bad_instruction_template_does_not_break_fatal():
    sink = _Sink()
    router = SeverityRouter(DebugConfig(instruction_template="Report at {url.host}"), sink, store=_Store())

    result = router.fatal("oops")

    assert result.status is EmitStatus.FATAL_HANDLED
    assert result.instruction_text.startswith("Oh no! The program has crashed. Please submit a report to")


def test_sink_write_error_has_no_capture_by_default():
    error = SinkWriteError("closed")
    assert error.capture is None
    assert error.user_message == "closed"
