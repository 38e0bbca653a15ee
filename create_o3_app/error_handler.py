"""Print any raised error the way the CLI reports it."""

from __future__ import annotations

import traceback
from typing import Optional

from rich.markup import escape

from create_o3_app.errors import (
    CLIError,
    FileSystemError,
    GitError,
    PackageManagerError,
    TemplateError,
    ValidationError,
    create_error_message,
)
from create_o3_app.logger import Logger

HELP_URL = "https://github.com/openmrs/create-o3-app/issues"


def _context_lines(error: CLIError) -> list[str]:
    lines: list[str] = []
    if isinstance(error, ValidationError) and error.field:
        lines.append(f"Field: {error.field}")
    elif isinstance(error, TemplateError) and error.template_path:
        lines.append(f"Template path: {error.template_path}")
    elif isinstance(error, FileSystemError):
        if error.path:
            lines.append(f"Path: {error.path}")
        if error.operation:
            lines.append(f"Operation: {error.operation}")
    elif isinstance(error, GitError) and error.command:
        lines.append(f"Git command: {error.command}")
    elif isinstance(error, PackageManagerError):
        if error.package_manager:
            lines.append(f"Package manager: {error.package_manager}")
        if error.command:
            lines.append(f"Command: {error.command}")
    return lines


def handle_error(
    error: BaseException,
    logger: Optional[Logger] = None,
    verbose: bool = False,
) -> None:
    """Report *error* on stderr with its context and suggestions.

    Error output is printed even when the logger is in quiet mode.
    """
    logger = logger or Logger()
    console = logger.err_console

    if isinstance(error, CLIError):
        console.print(f"[red]✗[/red] {escape(error.message)}")
        for line in _context_lines(error):
            console.print(f"[cyan]ℹ[/cyan] {escape(line)}")
        if error.suggestions:
            console.print("\n[yellow]Suggestions:[/yellow]")
            for index, suggestion in enumerate(error.suggestions, start=1):
                console.print(f"[dim]   {index}. {escape(suggestion)}[/dim]")
    else:
        console.print(f"[red]✗[/red] {escape(create_error_message(error))}")

    if verbose:
        console.print("\n[dim]Stack trace:[/dim]")
        console.print(
            escape("".join(traceback.format_exception(type(error), error, error.__traceback__))),
            style="dim",
        )

    console.print(f"\n[dim]For help, visit: {HELP_URL}[/dim]")
