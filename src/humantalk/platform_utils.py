"""Platform detection for crash report environments"""

import os
import platform
import sys

from . import __version__

# Platform detection
IS_WINDOWS = sys.platform == "win32"
IS_LINUX = sys.platform.startswith("linux")
IS_MACOS = sys.platform == "darwin"


def os_family() -> str:
    return "windows" if os.name == "nt" else "unix"


def os_name() -> str:
    if IS_MACOS:
        return "macos"
    return platform.system().lower() or sys.platform


def get_platform_info() -> dict[str, str]:
    """Get platform information recorded in crash reports."""
    return {
        "family": os_family(),
        "os": os_name(),
        "release": platform.release(),
        "arch": platform.machine(),
        "python_version": platform.python_version(),
        "python_implementation": platform.python_implementation(),
        "humantalk_version": __version__,
    }


def machine_info() -> str:
    """One-line summary, e.g. ``unix-linux-x86_64 - Python version 3.12.1 (CPython)...``"""
    info = get_platform_info()
    return (
        f"{info['family']}-{info['os']}-{info['arch']} - Python version {info['python_version']} "
        f"({info['python_implementation']}). information generated by humantalk {info['humantalk_version']}"
    )
