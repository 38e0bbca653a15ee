"""Exception hierarchy for create-o3-app.

Every fatal condition is a :class:`CLIError` carrying a machine-readable
``code`` and a short list of actionable ``suggestions`` that the CLI prints
under the message.
"""

from __future__ import annotations

from typing import Optional


class CLIError(Exception):
    """Base class for all errors surfaced to the user."""

    code: Optional[str] = None

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        suggestions: Optional[list[str]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.suggestions: list[str] = list(suggestions or [])


class ValidationError(CLIError):
    """A field value or cross-field constraint was rejected."""

    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        suggestions: Optional[list[str]] = None,
    ) -> None:
        super().__init__(message, suggestions=suggestions)
        self.field = field


class TemplateError(CLIError):
    """The template root is missing, unreadable, or a template failed to render."""

    code = "TEMPLATE_ERROR"

    def __init__(
        self,
        message: str,
        template_path: Optional[str] = None,
        suggestions: Optional[list[str]] = None,
    ) -> None:
        super().__init__(message, suggestions=suggestions)
        self.template_path = template_path


class FileSystemError(CLIError):
    """Creating a directory or writing a file failed."""

    code = "FILE_SYSTEM_ERROR"

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        operation: Optional[str] = None,
        suggestions: Optional[list[str]] = None,
    ) -> None:
        super().__init__(message, suggestions=suggestions)
        self.path = path
        self.operation = operation


class GitError(CLIError):
    """A git command failed."""

    code = "GIT_ERROR"

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        suggestions: Optional[list[str]] = None,
    ) -> None:
        super().__init__(message, suggestions=suggestions)
        self.command = command


class PackageManagerError(CLIError):
    """A package manager invocation failed."""

    code = "PACKAGE_MANAGER_ERROR"

    def __init__(
        self,
        message: str,
        package_manager: Optional[str] = None,
        command: Optional[str] = None,
        suggestions: Optional[list[str]] = None,
    ) -> None:
        super().__init__(message, suggestions=suggestions)
        self.package_manager = package_manager
        self.command = command


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

WRITE_SUGGESTIONS: list[str] = [
    "Check if you have write permissions in the target directory",
    "Verify the directory path is valid",
    "Ensure the directory does not already exist with conflicting files",
]


def format_error(error: BaseException) -> str:
    """Return the error message followed by a numbered suggestion list."""
    message = str(error)
    if isinstance(error, CLIError) and error.suggestions:
        message += "\n\nSuggestions:"
        for index, suggestion in enumerate(error.suggestions, start=1):
            message += f"\n  {index}. {suggestion}"
    return message


def is_cli_error(error: object) -> bool:
    return isinstance(error, CLIError)


def create_error_message(error: object) -> str:
    """Produce a user-facing message for any raised object."""
    if isinstance(error, CLIError):
        return format_error(error)
    if isinstance(error, BaseException):
        return str(error) or error.__class__.__name__
    return str(error)
