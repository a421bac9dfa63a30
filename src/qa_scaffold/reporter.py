"""Progress reporting for the scaffolding core."""

from __future__ import annotations

import logging
from typing import Protocol

from rich.console import Console

from qa_scaffold.console import console as default_console

logger = logging.getLogger(__name__)

HEADER_COLORS = ("blue", "green", "yellow", "red")


class Reporter(Protocol):
    """Protocol for human-readable progress output."""

    def success(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def debug(self, message: str) -> None: ...

    def show_header(self, title: str, color: str = "blue") -> None: ...


class ConsoleReporter:
    """Reporter that prints to a rich console and mirrors to logging.

    Messages may contain rich markup.
    """

    def __init__(self, console: Console | None = None, verbose: bool = False) -> None:
        self._console = console or default_console
        self.verbose = verbose

    def success(self, message: str) -> None:
        logger.info(message)
        self._console.print(f"[green]✓[/green] {message}")

    def info(self, message: str) -> None:
        logger.info(message)
        self._console.print(f"[blue]ℹ[/blue] {message}")

    def warning(self, message: str) -> None:
        logger.warning(message)
        self._console.print(f"[yellow]⚠ {message}[/yellow]")

    def error(self, message: str) -> None:
        logger.error(message)
        self._console.print(f"[red]✗ {message}[/red]")

    def debug(self, message: str) -> None:
        """Print only when verbose output was requested."""
        logger.debug(message)
        if self.verbose:
            self._console.print(f"[dim]{message}[/dim]")

    def show_header(self, title: str, color: str = "blue") -> None:
        if color not in HEADER_COLORS:
            color = "blue"
        line = "=" * (len(title) + 4)
        self._console.print()
        self._console.print(f"[bold {color}]{line}[/bold {color}]")
        self._console.print(f"[bold {color}]  {title}  [/bold {color}]")
        self._console.print(f"[bold {color}]{line}[/bold {color}]")
        self._console.print()


class NullReporter:
    """Reporter that discards everything."""

    def success(self, message: str) -> None:
        pass

    def info(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass

    def debug(self, message: str) -> None:
        pass

    def show_header(self, title: str, color: str = "blue") -> None:
        pass
