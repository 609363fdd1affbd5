"""Configuration for humantalk, read from the environment and a local .env file"""

import os

from dotenv import load_dotenv

load_dotenv()

_SEVERITY_NAMES = ("WARNING", "INFO", "DEBUG", "NOTICE", "FATAL")


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Environment-backed settings"""

    # Render DEBUG messages
    DEBUG = _flag("HUMANTALK_DEBUG")

    # Crash reports: directory, file path or template with {report_id}; empty = not saved
    REPORT_SINK = os.getenv("HUMANTALK_REPORT_SINK", "")

    # Bug report instructions
    REPORT_URL = os.getenv("HUMANTALK_REPORT_URL", "the appropriate place")
    REPORT_MESSAGE = os.getenv("HUMANTALK_REPORT_MESSAGE", "Oh no! The program has crashed")
    INSTRUCTION_TEMPLATE = os.getenv("HUMANTALK_INSTRUCTION_TEMPLATE", "")

    # Per-severity color overrides, e.g. HUMANTALK_COLOR_INFO=bright_green
    COLORS = {
        name: os.environ[f"HUMANTALK_COLOR_{name}"]
        for name in _SEVERITY_NAMES
        if os.environ.get(f"HUMANTALK_COLOR_{name}")
    }

    # https://no-color.org
    NO_COLOR = _flag("HUMANTALK_NO_COLOR") or bool(os.getenv("NO_COLOR"))


config = Config()
