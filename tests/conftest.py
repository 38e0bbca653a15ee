"""Shared pytest fixtures for the create-o3-app test suite.

Provides reusable fixtures for:
- Validated project, module, and option configs (the "billing" module)
- Loggers that record output instead of printing it
- Settings pointing at the bundled templates
- Monorepo roots for pnpm, yarn, and npm workspaces
"""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any, Callable

import pytest
from rich.console import Console

from create_o3_app.config import DEFAULT_TEMPLATE_DIR, Settings
from create_o3_app.logger import LogLevel, Logger
from create_o3_app.models import CreateOptions, ModuleConfig, ProjectConfig


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class RecordingLogger(Logger):
    """Logger whose consoles write into string buffers."""

    def __init__(self, level: LogLevel = LogLevel.DEBUG, quiet: bool = False) -> None:
        super().__init__(
            level=level,
            quiet=quiet,
            console=Console(file=io.StringIO(), width=200, highlight=False),
            err_console=Console(file=io.StringIO(), width=200, highlight=False),
        )

    @property
    def out(self) -> str:
        return self.console.file.getvalue()

    @property
    def err(self) -> str:
        return self.err_console.file.getvalue()


@pytest.fixture
def logger() -> RecordingLogger:
    """A DEBUG-level logger that records everything it prints."""
    return RecordingLogger()


# ---------------------------------------------------------------------------
# Configs
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> Settings:
    return Settings(template_dir=DEFAULT_TEMPLATE_DIR)


@pytest.fixture
def project_config() -> ProjectConfig:
    """Standalone webpack project named ``billing``."""
    return ProjectConfig(
        project_name="billing",
        package_name="@openmrs/esm-billing",
        description="billing frontend module for O3",
        build_tool="webpack",
        is_monorepo=False,
    )


@pytest.fixture
def module_config() -> ModuleConfig:
    """Page module with a single ``/billing`` route."""
    return ModuleConfig.model_validate(
        {"type": "page", "routes": [{"path": "/billing", "componentName": "BillingList"}]}
    )


@pytest.fixture
def extension_module_config() -> ModuleConfig:
    """Module with one route and one extension."""
    return ModuleConfig.model_validate(
        {
            "type": "both",
            "routes": [{"path": "/billing", "componentName": "BillingList"}],
            "extensions": [
                {
                    "name": "quick-actions",
                    "slot": "patient-actions-slot",
                    "componentName": "QuickActions",
                    "order": 3,
                }
            ],
        }
    )


@pytest.fixture
def options() -> CreateOptions:
    return CreateOptions()


@pytest.fixture
def dry_run_options() -> CreateOptions:
    return CreateOptions(dry_run=True)


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def list_files(root: Path) -> list[str]:
    """Every file below *root* as a sorted list of POSIX relative paths."""
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())


@pytest.fixture
def write_json() -> Callable[[Path, Any], Path]:
    def _write(path: Path, data: Any) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def pnpm_root(tmp_path: Path) -> Path:
    """Monorepo root managed by pnpm."""
    root = tmp_path / "pnpm-root"
    root.mkdir()
    (root / "pnpm-workspace.yaml").write_text(
        "# workspace packages\npackages:\n  - \"packages/*\"\n  - 'tools/*'\n\ncatalog:\n  react: ^18.2.0\n",
        encoding="utf-8",
    )
    return root


@pytest.fixture
def npm_root(tmp_path: Path, write_json) -> Path:
    """Monorepo root using an npm ``workspaces`` array."""
    root = tmp_path / "npm-root"
    write_json(
        root / "package.json",
        {"name": "root", "private": True, "workspaces": ["packages/*"], "scripts": {"test": "jest"}},
    )
    return root
