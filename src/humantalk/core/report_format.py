"""Plain-text crash artifact format.

Sections are written in a fixed order::

    Report-Id: 20261016T120000-3f9a0c1b2d4e
    Timestamp: 2026-10-16T12:00:00+00:00
    Severity: FATAL
    Message: disk full
    Metadata:
      module: loader
    Stack-Context:
      load_config at app/config.py:42
    Environment:
      os: linux

Map sections are sorted by key, so two reports that differ only in id and
timestamp render to the same text apart from those two lines.
"""

from __future__ import annotations

import re
from datetime import datetime

from .models import CrashReport, Message, StackFrame
from .severity import Severity

SCALAR_SECTIONS = ("Report-Id", "Timestamp", "Severity", "Message")
BLOCK_SECTIONS = ("Metadata", "Stack-Context", "Environment")
SECTION_ORDER = SCALAR_SECTIONS + BLOCK_SECTIONS

INDENT = "  "

_SHORT_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\r": "\\r"}
_UNESCAPES = {"\\": "\\", "n": "\n", "r": "\r"}

# Every character str.splitlines() breaks on
_LINE_BREAKS = "\n\r\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029"

# A space that would read as the " at " frame separator
_FRAME_SEPARATOR_RE = re.compile(r" (?=at( |$))")


def _escape_char(ch: str) -> str:
    if ch in _SHORT_ESCAPES:
        return _SHORT_ESCAPES[ch]
    code = ord(ch)
    return f"\\x{code:02x}" if code < 0x100 else f"\\u{code:04x}"


def escape(value: str, extra: str = "") -> str:
    """Escape backslashes, line breaks and any character in ``extra``."""
    special = _LINE_BREAKS + extra
    return "".join(_escape_char(ch) if ch == "\\" or ch in special else ch for ch in value)


def unescape(value: str) -> str:
    out = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        nxt = value[i + 1:i + 2]
        if nxt in ("x", "u"):
            width = 2 if nxt == "x" else 4
            digits = value[i + 2:i + 2 + width]
            if len(digits) == width and all(c in "0123456789abcdefABCDEF" for c in digits):
                out.append(chr(int(digits, 16)))
                i += 2 + width
                continue
        out.append(_UNESCAPES.get(nxt, "\\" + nxt))
        i += 2
    return "".join(out)


def _mapping_lines(values) -> list[str]:
    # ":" in keys is escaped so the first ": " always ends the key
    return [f"{INDENT}{escape(k, extra=':')}: {escape(v)}" for k, v in sorted(values.items())]


def _frame_line(frame: StackFrame) -> str:
    function = _FRAME_SEPARATOR_RE.sub(r"\\x20", escape(frame.function))
    if not frame.location:
        return f"{INDENT}{function}"
    return f"{INDENT}{function} at {escape(frame.location)}"


def _parse_frame(line: str) -> StackFrame:
    function, sep, location = line.partition(" at ")
    if not sep:
        return StackFrame(function=unescape(line))
    return StackFrame(function=unescape(function), location=unescape(location))


def render_report(report: CrashReport) -> str:
    """Serialize a report to artifact text (always ends with a newline)."""
    message = report.message
    lines = [
        f"Report-Id: {report.report_id}",
        f"Timestamp: {message.timestamp.isoformat()}",
        f"Severity: {message.severity.name}",
        f"Message: {escape(message.text)}",
        "Metadata:",
        *_mapping_lines(message.metadata),
        "Stack-Context:",
        *(_frame_line(frame) for frame in report.stack_context),
        "Environment:",
        *_mapping_lines(report.environment),
    ]
    return "\n".join(lines) + "\n"


def _split_pair(line: str, lineno: int) -> tuple[str, str]:
    key, sep, value = line.partition(": ")
    if not sep:
        if line.endswith(":"):
            return line[:-1], ""
        raise ValueError(f"line {lineno}: expected 'key: value', got {line!r}")
    return key, value


def parse_report(text: str) -> CrashReport:
    """Read artifact text back into a CrashReport.

    Raises:
        ValueError: if a section is missing, unknown or out of order.
    """
    scalars: dict[str, str] = {}
    blocks: dict[str, list[str]] = {}
    seen: list[str] = []
    current: str | None = None

    for lineno, line in enumerate(text.split("\n"), start=1):
        # Raw "\r" never appears in rendered values, only in CRLF files
        line = line.rstrip("\r")
        if not line:
            continue
        if line.startswith(INDENT):
            if current is None:
                raise ValueError(f"line {lineno}: indented line outside a section")
            blocks[current].append(line[len(INDENT):])
            continue

        label, value = _split_pair(line, lineno)
        if label not in SECTION_ORDER:
            raise ValueError(f"line {lineno}: unknown section {label!r}")
        if label in seen:
            raise ValueError(f"line {lineno}: duplicate section {label!r}")
        seen.append(label)
        if label in BLOCK_SECTIONS:
            current = label
            blocks[label] = []
        else:
            current = None
            scalars[label] = value

    if seen != list(SECTION_ORDER):
        missing = [s for s in SECTION_ORDER if s not in seen]
        if missing:
            raise ValueError(f"missing sections: {', '.join(missing)}")
        raise ValueError("sections out of order")

    def _mapping(name: str) -> dict[str, str]:
        pairs = (_split_pair(line, 0) for line in blocks[name])
        return {unescape(k): unescape(v) for k, v in pairs}

    message = Message(
        severity=Severity.parse(scalars["Severity"]),
        text=unescape(scalars["Message"]),
        timestamp=datetime.fromisoformat(scalars["Timestamp"]),
        metadata=_mapping("Metadata"),
    )
    return CrashReport(
        message=message,
        report_id=scalars["Report-Id"],
        stack_context=tuple(_parse_frame(line) for line in blocks["Stack-Context"]),
        environment=_mapping("Environment"),
    )
