"""Process-wide entry points.

The host calls ``configure()`` once at startup, then ``emit()`` (or one of
the shorthands) wherever it needs to talk to the user.
"""

from __future__ import annotations

import sys
from typing import Iterable, Mapping

from .adapters.config_env import load_debug_config
from .adapters.console import ConsoleSink
from .adapters.report_file import FileReportStore
from .config import config as env_config
from .core.config_model import DebugConfig
from .core.crash_reporter import FrameLike
from .core.errors import ConfigurationError
from .core.models import EmitResult
from .core.ports import OutputSink, ReportStore
from .core.router import SeverityRouter
from .core.severity import Severity
from .platform_utils import machine_info

# Exit status used by fatal_error(): erroring out has succeeded
FATAL_EXIT_CODE = 3

_router: SeverityRouter | None = None


def build_router(
    config: DebugConfig,
    sink: OutputSink | None = None,
    store: ReportStore | None = None,
) -> SeverityRouter:
    """Wire a router with the console sink and a file store for ``config``."""
    if sink is None:
        sink = ConsoleSink(color_enabled=False if env_config.NO_COLOR else None)
    if store is None and config.report_sink:
        store = FileReportStore(config.report_sink)
    return SeverityRouter(config, sink, store=store)


def configure(
    config: DebugConfig | None = None,
    sink: OutputSink | None = None,
    store: ReportStore | None = None,
) -> SeverityRouter:
    """Install the process-wide configuration.

    Without ``config`` the settings come from the environment (see
    ``humantalk.config``). Calling it again swaps the whole router at once,
    so concurrent emitters see either the old or the new configuration.
    """
    global _router
    if config is None:
        config = load_debug_config()
    router = build_router(config, sink=sink, store=store)
    _router = router
    return router


def reset() -> None:
    """Forget the configuration (mostly for tests)."""
    global _router
    _router = None


def get_router() -> SeverityRouter:
    router = _router
    if router is None:
        raise ConfigurationError(
            "humantalk.configure() must be called before emitting messages",
            user_message="humantalk was used before it was configured.",
        )
    return router


def emit(
    severity: Severity | str,
    text: str,
    metadata: Mapping[str, str] | None = None,
    stack_context: Iterable[FrameLike] | None = None,
    environment: Mapping[str, str] | None = None,
) -> EmitResult:
    return get_router().emit(
        severity, text, metadata=metadata, stack_context=stack_context, environment=environment
    )


def warning(text: str, **kwargs) -> EmitResult:
    return emit(Severity.WARNING, text, **kwargs)


def info(text: str, **kwargs) -> EmitResult:
    return emit(Severity.INFO, text, **kwargs)


def debug(text: str, **kwargs) -> EmitResult:
    return emit(Severity.DEBUG, text, **kwargs)


def notice(text: str, **kwargs) -> EmitResult:
    return emit(Severity.NOTICE, text, **kwargs)


def fatal(text: str, **kwargs) -> EmitResult:
    return emit(Severity.FATAL, text, **kwargs)


def fatal_error(text: str, exit_code: int = FATAL_EXIT_CODE, **kwargs):
    """Emit a FATAL message, then exit the process with ``exit_code``."""
    fatal(text, **kwargs)
    sys.exit(exit_code)


__all__ = [
    "FATAL_EXIT_CODE",
    "build_router",
    "configure",
    "debug",
    "emit",
    "fatal",
    "fatal_error",
    "get_router",
    "info",
    "machine_info",
    "notice",
    "reset",
    "warning",
]
