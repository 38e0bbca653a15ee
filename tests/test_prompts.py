"""Tests for option resolution and the interactive policy (create_o3_app.prompts)."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from create_o3_app.config import Settings
from create_o3_app.errors import ValidationError
from create_o3_app.models import BuildTool, CreateOptions, MonorepoContext, MonorepoType
from create_o3_app.prompts import (
    DEV_SERVER_URL,
    is_interactive,
    normalize_project_name,
    resolve_module_config,
    resolve_project_config,
)

pytestmark = pytest.mark.unit

NO_MONOREPO = MonorepoContext(is_monorepo=False)
PNPM_MONOREPO = MonorepoContext(is_monorepo=True, type=MonorepoType.PNPM, root_path="/repo")


class _Stdin:
    def __init__(self, tty: bool) -> None:
        self._tty = tty

    def isatty(self) -> bool:
        return self._tty


@pytest.fixture
def terminal(monkeypatch):
    """Pretend stdin is a terminal and no CI variable is set."""
    monkeypatch.delenv("CI", raising=False)
    monkeypatch.setattr("create_o3_app.prompts.sys.stdin", _Stdin(True))


@pytest.fixture
def pipe(monkeypatch):
    monkeypatch.delenv("CI", raising=False)
    monkeypatch.setattr("create_o3_app.prompts.sys.stdin", _Stdin(False))


class TestNormalizeProjectName:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("openmrs-esm-billing", "billing"),
            ("esm-billing", "billing"),
            ("openmrs-billing", "billing"),
            ("billing", "billing"),
            ("patient-esm-chart", "patient-esm-chart"),
        ],
    )
    def test_prefixes(self, raw, expected):
        assert normalize_project_name(raw) == expected


class TestIsInteractive:
    def test_terminal_without_flags(self, terminal, settings):
        assert is_interactive(CreateOptions(), settings) is True

    def test_project_type_flag(self, terminal, settings):
        assert is_interactive(CreateOptions(standalone=True), settings) is False

    def test_quiet(self, terminal, settings):
        assert is_interactive(CreateOptions(quiet=True), settings) is False

    def test_ci_variable(self, terminal, settings, monkeypatch):
        monkeypatch.setenv("CI", "true")
        assert is_interactive(CreateOptions(), settings) is False

    def test_ci_setting(self, terminal):
        assert is_interactive(CreateOptions(), Settings(is_ci=True)) is False

    def test_not_a_terminal(self, pipe, settings):
        assert is_interactive(CreateOptions(), settings) is False


class TestResolveProjectConfig:
    def test_standalone_defaults(self, pipe, settings, logger):
        project = resolve_project_config(
            "billing", CreateOptions(standalone=True), NO_MONOREPO, settings=settings, logger=logger
        )
        assert project.project_name == "billing"
        assert project.package_name == "@openmrs/esm-billing"
        assert project.description == "billing frontend module for O3"
        assert project.build_tool == BuildTool.WEBPACK
        assert project.is_monorepo is False
        assert project.package_location is None
        assert project.git is True
        assert project.ci is True

    def test_normalizes_name(self, pipe, settings, logger):
        project = resolve_project_config(
            "openmrs-esm-billing", CreateOptions(), NO_MONOREPO, settings=settings, logger=logger
        )
        assert project.project_name == "billing"
        assert 'Normalized project name from "openmrs-esm-billing" to "billing"' in logger.out

    def test_missing_name_without_terminal(self, pipe, settings, logger):
        with pytest.raises(ValidationError) as exc_info:
            resolve_project_config(None, CreateOptions(), NO_MONOREPO, settings=settings, logger=logger)
        assert exc_info.value.field == "projectName"

    def test_missing_name_is_asked(self, terminal, settings, logger):
        with patch("create_o3_app.prompts.Prompt.ask", return_value="esm-billing") as ask:
            project = resolve_project_config(
                None, CreateOptions(), NO_MONOREPO, settings=settings, logger=logger
            )
        ask.assert_called_once()
        assert project.project_name == "billing"

    def test_invalid_name(self, pipe, settings, logger):
        with pytest.raises(ValidationError) as exc_info:
            resolve_project_config(
                "Billing", CreateOptions(standalone=True), NO_MONOREPO, settings=settings, logger=logger
            )
        assert exc_info.value.message == "Invalid project name: Billing"
        assert exc_info.value.suggestions

    def test_explicit_package_name(self, pipe, settings, logger):
        options = CreateOptions(standalone=True, package_name="@acme/billing-ui")
        project = resolve_project_config("billing", options, NO_MONOREPO, settings=settings, logger=logger)
        assert project.package_name == "@acme/billing-ui"

    def test_scope_from_settings(self, pipe, logger):
        project = resolve_project_config(
            "billing", CreateOptions(standalone=True), NO_MONOREPO,
            settings=Settings(default_scope="@acme"), logger=logger,
        )
        assert project.package_name == "@acme/esm-billing"

    @pytest.mark.parametrize(
        "options, expected",
        [
            (CreateOptions(rspack=True), BuildTool.RSPACK),
            (CreateOptions(webpack=True), BuildTool.WEBPACK),
        ],
    )
    def test_build_tool_flags(self, pipe, settings, logger, options, expected):
        project = resolve_project_config("billing", options, NO_MONOREPO, settings=settings, logger=logger)
        assert project.build_tool == expected

    def test_build_tool_default_from_settings(self, pipe, logger):
        settings = Settings(default_build_tool=BuildTool.RSPACK)
        project = resolve_project_config("billing", CreateOptions(), NO_MONOREPO, settings=settings, logger=logger)
        assert project.build_tool == BuildTool.RSPACK

    def test_monorepo_flag(self, pipe, settings, logger):
        project = resolve_project_config(
            "billing", CreateOptions(monorepo=True), NO_MONOREPO, settings=settings, logger=logger
        )
        assert project.is_monorepo is True
        assert project.is_new_monorepo is False
        assert project.package_location == "packages/apps/esm-billing"

    def test_new_monorepo_flag(self, pipe, settings, logger):
        project = resolve_project_config(
            "billing", CreateOptions(new_monorepo=True), NO_MONOREPO, settings=settings, logger=logger
        )
        assert project.is_monorepo is True
        assert project.is_new_monorepo is True

    def test_detected_monorepo_asks(self, terminal, settings, logger):
        with patch("create_o3_app.prompts.Confirm.ask", return_value=True) as confirm:
            project = resolve_project_config(
                "billing", CreateOptions(), PNPM_MONOREPO, settings=settings, logger=logger
            )
        confirm.assert_called_once()
        assert project.is_monorepo is True

    def test_detected_monorepo_declined(self, terminal, settings, logger):
        with patch("create_o3_app.prompts.Confirm.ask", return_value=False):
            project = resolve_project_config(
                "billing", CreateOptions(), PNPM_MONOREPO, settings=settings, logger=logger
            )
        assert project.is_monorepo is False

    def test_detected_monorepo_without_terminal(self, pipe, settings, logger):
        with patch("create_o3_app.prompts.Confirm.ask") as confirm:
            project = resolve_project_config(
                "billing", CreateOptions(), PNPM_MONOREPO, settings=settings, logger=logger
            )
        confirm.assert_not_called()
        assert project.is_monorepo is False
        assert "Defaulting to standalone module." in logger.out

    def test_git_and_ci_switches(self, pipe, settings, logger):
        options = CreateOptions(standalone=True, git=False, ci=False)
        project = resolve_project_config("billing", options, NO_MONOREPO, settings=settings, logger=logger)
        assert project.git is False
        assert project.ci is False


class TestResolveModuleConfig:
    def test_default_route(self, project_config, logger):
        project = project_config.model_copy(update={"project_name": "patient-chart"})
        module = resolve_module_config(project, CreateOptions(), logger=logger)
        assert len(module.routes) == 1
        route = module.routes[0]
        assert route.path == "/patient-chart"
        assert route.component_name == "PatientChart"
        assert route.online is True
        assert route.offline is True
        assert f"{DEV_SERVER_URL}/patient-chart" in logger.out

    def test_route_flags(self, project_config, logger):
        options = CreateOptions(route="/billing/invoices", route_component="InvoiceList")
        module = resolve_module_config(project_config, options, logger=logger)
        assert module.routes[0].path == "/billing/invoices"
        assert module.routes[0].component_name == "InvoiceList"
        assert module.extensions == []

    def test_feature_toggle_defaults(self, project_config, logger):
        module = resolve_module_config(project_config, CreateOptions(), logger=logger)
        assert module.coverage_thresholds is True
        assert module.accessibility is True
        assert module.dependabot is True
        assert module.contributing is True
        assert module.offline is False
        assert module.error_boundary is False
        assert module.turbo is False
        assert module.path_aliases is None

    def test_reserved_route_component(self, project_config, logger):
        options = CreateOptions(route="/root", route_component="Root")
        with pytest.raises(ValidationError) as exc_info:
            resolve_module_config(project_config, options, logger=logger)
        assert exc_info.value.field == "moduleConfig"
