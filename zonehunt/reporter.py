"""Levelled progress output on a rich console."""

from __future__ import annotations

from datetime import datetime

from rich.console import Console
from rich.markup import escape

# name -> (rank, style)
LEVELS: dict[str, tuple[int, str]] = {
    "debug": (10, "dim"),
    "info": (20, ""),
    "warning": (30, "yellow"),
    "error": (40, "red"),
}

_ALIASES = {"warn": "warning", "trace": "debug", "fatal": "error", "panic": "error"}


def parse_level(name: str) -> str:
    """Normalise a level name, raising ValueError if it is unknown."""
    key = (name or "").strip().lower()
    key = _ALIASES.get(key, key)
    if key not in LEVELS:
        raise ValueError(f"not a valid log level: {name!r}")
    return key


class Reporter:
    """Prints timestamped messages at or above a minimum level."""

    def __init__(self, level: str = "info", console: Console | None = None) -> None:
        self.level = parse_level(level)
        self.console = console or Console()

    def enabled(self, level: str) -> bool:
        return LEVELS[level][0] >= LEVELS[self.level][0]

    def log(self, level: str, message: str) -> None:
        if not self.enabled(level):
            return
        style = LEVELS[level][1]
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        body = escape(message)
        if style:
            body = f"[{style}]{body}[/{style}]"
        self.console.print(f"[dim]{stamp}[/dim] {body}", highlight=False)

    def debug(self, message: str) -> None:
        self.log("debug", message)

    def info(self, message: str) -> None:
        self.log("info", message)

    def warning(self, message: str) -> None:
        self.log("warning", message)

    def error(self, message: str) -> None:
        self.log("error", message)
