"""Crash artifact store backed by plain files."""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_FILENAME = "crash_report-{report_id}.log"


class FileReportStore:
    """Creates one crash file per report.

    ``sink`` may be a template containing ``{report_id}``, a directory, or a
    file path; for a plain file path the report id is inserted before the
    suffix (``crash_report.log`` -> ``crash_report-<id>.log``).
    """

    def __init__(self, sink: str | os.PathLike):
        self._sink = os.fspath(sink)

    @property
    def sink(self) -> str:
        return self._sink

    def target_path(self, report_id: str) -> str:
        sink = os.path.expanduser(self._sink)
        if "{report_id}" in sink:
            return sink.replace("{report_id}", report_id)
        if sink.endswith(("/", os.sep)) or os.path.isdir(sink):
            return os.path.join(sink, DEFAULT_FILENAME.format(report_id=report_id))
        path = Path(sink)
        return str(path.with_name(f"{path.stem}-{report_id}{path.suffix}"))

    def save(self, report_id: str, content: str) -> str:
        path = Path(self.target_path(report_id))
        path.parent.mkdir(parents=True, exist_ok=True)
        # "x": never overwrite another report
        with open(path, "x", encoding="utf-8") as f:
            f.write(content)
        return str(path)
