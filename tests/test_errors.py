"""Tests for the error hierarchy (create_o3_app.errors) and handle_error."""

from __future__ import annotations

import pytest

from create_o3_app.error_handler import HELP_URL, handle_error
from create_o3_app.errors import (
    CLIError,
    FileSystemError,
    GitError,
    PackageManagerError,
    TemplateError,
    ValidationError,
    create_error_message,
    format_error,
    is_cli_error,
)

from conftest import RecordingLogger

pytestmark = pytest.mark.unit


class TestHierarchy:
    @pytest.mark.parametrize(
        "error, code",
        [
            (ValidationError("bad", field="projectName"), "VALIDATION_ERROR"),
            (TemplateError("missing", template_path="/t"), "TEMPLATE_ERROR"),
            (FileSystemError("denied", path="/p", operation="write"), "FILE_SYSTEM_ERROR"),
            (GitError("failed", command="git init"), "GIT_ERROR"),
            (PackageManagerError("failed", package_manager="npm"), "PACKAGE_MANAGER_ERROR"),
        ],
    )
    def test_codes(self, error, code):
        assert isinstance(error, CLIError)
        assert error.code == code

    def test_base_error(self):
        error = CLIError("boom", code="CUSTOM", suggestions=["try again"])
        assert str(error) == "boom"
        assert error.message == "boom"
        assert error.code == "CUSTOM"
        assert error.suggestions == ["try again"]

    def test_suggestions_default_empty(self):
        assert ValidationError("x").suggestions == []

    def test_is_cli_error(self):
        assert is_cli_error(GitError("x"))
        assert not is_cli_error(ValueError("x"))


class TestFormatting:
    def test_format_with_suggestions(self):
        error = FileSystemError("Failed", suggestions=["first", "second"])
        assert format_error(error) == "Failed\n\nSuggestions:\n  1. first\n  2. second"

    def test_format_without_suggestions(self):
        assert format_error(TemplateError("Missing")) == "Missing"

    def test_create_error_message(self):
        assert create_error_message(ValidationError("bad", suggestions=["fix"])).endswith("1. fix")
        assert create_error_message(RuntimeError("plain")) == "plain"
        assert create_error_message(RuntimeError()) == "RuntimeError"
        assert create_error_message("text") == "text"


class TestHandleError:
    def test_validation_error(self):
        logger = RecordingLogger()
        error = ValidationError(
            "Invalid project name", field="projectName", suggestions=["Use kebab-case"]
        )
        handle_error(error, logger)
        assert "✗ Invalid project name" in logger.err
        assert "Field: projectName" in logger.err
        assert "Suggestions:" in logger.err
        assert "1. Use kebab-case" in logger.err
        assert HELP_URL in logger.err

    def test_file_system_error_context(self):
        logger = RecordingLogger()
        handle_error(FileSystemError("Failed", path="/x", operation="mkdir"), logger)
        assert "Path: /x" in logger.err
        assert "Operation: mkdir" in logger.err

    def test_package_manager_context(self):
        logger = RecordingLogger()
        handle_error(PackageManagerError("x", package_manager="pnpm", command="pnpm install"), logger)
        assert "Package manager: pnpm" in logger.err
        assert "Command: pnpm install" in logger.err

    def test_plain_exception(self):
        logger = RecordingLogger()
        handle_error(RuntimeError("unexpected"), logger)
        assert "✗ unexpected" in logger.err

    def test_stack_trace_only_when_verbose(self):
        logger = RecordingLogger()
        try:
            raise GitError("failed", command="git init")
        except GitError as exc:
            handle_error(exc, logger, verbose=False)
            assert "Stack trace" not in logger.err
            handle_error(exc, logger, verbose=True)
        assert "Stack trace" in logger.err
        assert "Traceback" in logger.err

    def test_printed_even_when_quiet(self):
        logger = RecordingLogger(quiet=True)
        handle_error(TemplateError("Missing templates", template_path="/t"), logger)
        assert "Missing templates" in logger.err
        assert "Template path: /t" in logger.err

    def test_markup_is_not_interpreted(self):
        logger = RecordingLogger()
        handle_error(CLIError("bad [bold]value[/bold]"), logger)
        assert "bad [bold]value[/bold]" in logger.err
