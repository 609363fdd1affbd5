"""Env configuration adapter producing a structured DebugConfig."""

from __future__ import annotations

from ..config import config as env_config
from ..core.config_model import DEFAULT_INSTRUCTION_TEMPLATE, BugReportInfo, DebugConfig
from ..core.severity import DEFAULT_PALETTE, Severity
from ..platform_utils import get_platform_info


def load_debug_config() -> DebugConfig:
    palette = dict(DEFAULT_PALETTE)
    for name, color in env_config.COLORS.items():
        palette[Severity.parse(name)] = color

    return DebugConfig(
        debug_enabled=env_config.DEBUG,
        color_palette=palette,
        report_sink=env_config.REPORT_SINK or None,
        bug_report=BugReportInfo(message=env_config.REPORT_MESSAGE, url=env_config.REPORT_URL),
        instruction_template=env_config.INSTRUCTION_TEMPLATE or DEFAULT_INSTRUCTION_TEMPLATE,
        environment=get_platform_info(),
    )
