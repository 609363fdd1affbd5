"""Console output adapter (colored with colorama)."""

from __future__ import annotations

import sys

import colorama
from colorama import Fore, Style

_FORE = {
    "black": Fore.BLACK,
    "red": Fore.RED,
    "green": Fore.GREEN,
    "yellow": Fore.YELLOW,
    "blue": Fore.BLUE,
    "magenta": Fore.MAGENTA,
    "cyan": Fore.CYAN,
    "white": Fore.WHITE,
}


def ansi_for(color: str | None) -> str:
    """ANSI prefix for a color token like ``red`` or ``bright_cyan``; "" if unknown."""
    if not color:
        return ""
    token = color.strip().lower()
    bright = token.startswith("bright_")
    if bright:
        token = token[len("bright_"):]
    fore = _FORE.get(token)
    if fore is None:
        return ""
    return Style.BRIGHT + fore if bright else fore


def format_line(tag: str, text: str) -> str:
    if not tag:
        return text
    if "\n" in text:
        return f"{tag}\n{text}"
    return f"{tag} {text}" if text else tag


class ConsoleSink:
    """Writes tagged messages to a text stream (stdout by default)."""

    def __init__(self, stream=None, color_enabled: bool | None = None):
        self._stream = stream
        self._color_enabled = color_enabled
        colorama.just_fix_windows_console()

    @property
    def stream(self):
        # Resolved per write so redirected stdout is honoured
        return self._stream if self._stream is not None else sys.stdout

    def use_color(self) -> bool:
        if self._color_enabled is not None:
            return self._color_enabled
        isatty = getattr(self.stream, "isatty", None)
        return bool(isatty and isatty())

    def write(self, tag: str, text: str, color: str | None) -> None:
        line = format_line(tag, text)
        prefix = ansi_for(color) if self.use_color() else ""
        if prefix:
            line = f"{prefix}{line}{Style.RESET_ALL}"
        print(line, file=self.stream, flush=True)
