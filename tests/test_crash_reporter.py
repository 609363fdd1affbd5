import pytest

from humantalk.core.config_model import BugReportInfo, DebugConfig
from humantalk.core.crash_reporter import CrashReporter, new_report_id, to_frames
from humantalk.core.errors import ReportPersistError
from humantalk.core.models import Message, StackFrame
from humantalk.core.ports import ReportStore
from humantalk.core.report_format import parse_report
from humantalk.core.severity import Severity


class _Store(ReportStore):
    def __init__(self):
        self.saved = {}

    def target_path(self, report_id: str) -> str:
        return f"/reports/{report_id}.log"

    def save(self, report_id: str, content: str) -> str:
        path = self.target_path(report_id)
        self.saved[path] = content
        return path


class _BrokenStore(_Store):
    def save(self, report_id: str, content: str) -> str:
        raise PermissionError(13, "Permission denied")


def _config(**kwargs):
    kwargs.setdefault("bug_report", BugReportInfo(message="It broke", url="https://example.org/issues"))
    return DebugConfig(**kwargs)


def test_capture_persists_and_formats_instruction():
    store = _Store()
    reporter = CrashReporter(_config(environment={"os": "linux"}), store)

    result = reporter.capture(
        Message(Severity.FATAL, "disk full", metadata={"module": "io"}),
        stack_context=[("main", "app.py:3"), "write at io.py:9"],
        environment={"build": "abc123"},
    )

    assert result.persisted
    assert result.persist_error is None
    assert result.path in store.saved
    report = parse_report(store.saved[result.path])
    assert report.report_id == result.report.report_id
    assert report.message.text == "disk full"
    assert report.stack_context == (StackFrame("main", "app.py:3"), StackFrame("write", "io.py:9"))
    assert dict(report.environment) == {"os": "linux", "build": "abc123"}
    assert result.instruction == (
        "It broke. Please submit a report to https://example.org/issues, along with a copy of this "
        f"error message, which can also be found in {result.path} as plaintext."
    )


def test_capture_without_store_still_returns_report():
    reporter = CrashReporter(_config(), store=None)

    result = reporter.capture(Message(Severity.FATAL, "oops"))

    assert result.report.message.text == "oops"
    assert result.path is None
    assert result.persist_error is None
    assert result.instruction.endswith("along with a copy of this error message.")


def test_capture_survives_store_failure(caplog):
    reporter = CrashReporter(_config(), _BrokenStore())

    with caplog.at_level("WARNING"):
        result = reporter.capture(Message(Severity.FATAL, "oops"))

    assert result.report is not None
    assert result.instruction
    assert not result.persisted
    assert isinstance(result.persist_error, ReportPersistError)
    assert result.persist_error.path == f"/reports/{result.report.report_id}.log"
    assert isinstance(result.persist_error.__cause__, PermissionError)
    assert "Could not save crash report" in caplog.text


def test_capture_rejects_non_fatal_messages():
    reporter = CrashReporter(_config(), _Store())
    with pytest.raises(ValueError):
        reporter.capture(Message(Severity.NOTICE, "not a crash"))


def test_custom_instruction_template():
    reporter = CrashReporter(
        _config(instruction_template="Please report this issue at {url}, and attach {report_path} ({report_id})"),
        _Store(),
    )
    result = reporter.capture(Message(Severity.FATAL, "oops"))
    assert result.instruction == (
        f"Please report this issue at https://example.org/issues, and attach {result.path} "
        f"({result.report.report_id})"
    )


@pytest.mark.parametrize(
    "template",
    ["Report at {nowhere}", "Report at {url.host}", "Report at {url[x]}", "Report at {0}", "Report at {url"],
)
def test_bad_instruction_template_falls_back_to_default(template):
    reporter = CrashReporter(_config(instruction_template=template), store=None)
    result = reporter.capture(Message(Severity.FATAL, "oops"))
    assert result.instruction.startswith("It broke. Please submit a report to https://example.org/issues")


def test_report_ids_are_unique():
    reporter = CrashReporter(_config(), _Store())
    ids = {reporter.capture(Message(Severity.FATAL, "boom")).report.report_id for _ in range(50)}
    assert len(ids) == 50
    assert len({new_report_id() for _ in range(200)}) == 200


def test_to_frames_accepts_mixed_descriptors():
    frames = to_frames([StackFrame("a", "x.py:1"), ("b", "y.py:2"), "c"])
    assert frames == (StackFrame("a", "x.py:1"), StackFrame("b", "y.py:2"), StackFrame("c"))
