"""Console logger with an explicit verbosity context.

A :class:`Logger` is built once per invocation (usually from the parsed
command-line options) and handed to every component that reports progress.
Output goes through a Rich console so glyphs and colours match the rest of
the CLI.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape


class LogLevel(IntEnum):
    ERROR = 0
    WARN = 1
    INFO = 2
    DEBUG = 3


class Logger:
    """Level-filtered console output.

    Attributes:
        level: Highest level that is printed.
        quiet: When ``True`` nothing is printed at all, errors included.
        console: Destination console for regular output.
        err_console: Destination console for errors and warnings.
    """

    def __init__(
        self,
        level: LogLevel = LogLevel.INFO,
        quiet: bool = False,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ) -> None:
        self.level = level
        self.quiet = quiet
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)

    @classmethod
    def from_options(cls, options: Any, **kwargs: Any) -> "Logger":
        """Build a logger from anything exposing ``verbose`` and ``quiet``."""
        if getattr(options, "verbose", False):
            return cls(level=LogLevel.DEBUG, **kwargs)
        return cls(quiet=bool(getattr(options, "quiet", False)), **kwargs)

    def _enabled(self, level: LogLevel) -> bool:
        return not self.quiet and self.level >= level

    def error(self, message: str, *details: Any) -> None:
        if self._enabled(LogLevel.ERROR):
            self.err_console.print(f"[red]✗[/red] {_join(message, details)}")

    def warn(self, message: str, *details: Any) -> None:
        if self._enabled(LogLevel.WARN):
            self.err_console.print(f"[yellow]⚠[/yellow] {_join(message, details)}")

    def info(self, message: str, *details: Any) -> None:
        if self._enabled(LogLevel.INFO):
            self.console.print(f"[cyan]ℹ[/cyan] {_join(message, details)}")

    def success(self, message: str, *details: Any) -> None:
        if self._enabled(LogLevel.INFO):
            self.console.print(f"[green]✓[/green] {_join(message, details)}")

    def debug(self, message: str, *details: Any) -> None:
        if self._enabled(LogLevel.DEBUG):
            self.console.print(f"[dim]· {_join(message, details)}[/dim]")

    def raw(self, message: str) -> None:
        """Print *message* as Rich markup, without a glyph or level filter."""
        if not self.quiet:
            self.console.print(message)


def _join(message: str, details: tuple[Any, ...]) -> str:
    parts = [escape(str(message))]
    parts.extend(escape(repr(d) if not isinstance(d, str) else d) for d in details)
    return " ".join(parts)
