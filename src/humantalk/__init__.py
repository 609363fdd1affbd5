"""humantalk - Human-friendly warnings, errors and crash reports"""

__version__ = "0.1.1"
__description__ = "Human-friendly warnings, errors and crash reports"

from .api import (  # noqa: E402
    FATAL_EXIT_CODE,
    configure,
    debug,
    emit,
    fatal,
    fatal_error,
    info,
    machine_info,
    notice,
    reset,
    warning,
)
from .core.config_model import BugReportInfo, DebugConfig  # noqa: E402
from .core.errors import ConfigurationError, HumantalkError, ReportPersistError, SinkWriteError  # noqa: E402
from .core.models import CrashReport, EmitResult, EmitStatus, Message, StackFrame  # noqa: E402
from .core.severity import Severity  # noqa: E402

__all__ = [
    "BugReportInfo",
    "ConfigurationError",
    "CrashReport",
    "DebugConfig",
    "EmitResult",
    "EmitStatus",
    "FATAL_EXIT_CODE",
    "HumantalkError",
    "Message",
    "ReportPersistError",
    "Severity",
    "SinkWriteError",
    "StackFrame",
    "__version__",
    "configure",
    "debug",
    "emit",
    "fatal",
    "fatal_error",
    "info",
    "machine_info",
    "notice",
    "reset",
    "warning",
]
