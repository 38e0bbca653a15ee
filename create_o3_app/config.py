"""create-o3-app settings.

Process-level defaults that are not part of a single project's
configuration: where templates live, which npm scope and monorepo location
to propose, and whether we are running under CI.  Settings are resolved once
at start-up (usually via :meth:`Settings.from_env`) and passed down.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

from create_o3_app.models import BuildTool

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "scaffolder" / "template_files"


class Settings(BaseModel):
    """Tool-wide defaults."""

    template_dir: Path = Field(default=DEFAULT_TEMPLATE_DIR)
    default_scope: str = Field(default="@openmrs", description="npm scope for generated packages")
    default_location_prefix: str = Field(
        default="packages/apps/esm-",
        description="Prefix of the proposed package location inside a monorepo",
    )
    default_build_tool: BuildTool = Field(default=BuildTool.WEBPACK)
    is_ci: bool = Field(default=False, description="Running under a CI system")

    def default_package_name(self, project_name: str) -> str:
        """Return ``<scope>/esm-<project_name>``."""
        return f"{self.default_scope}/esm-{project_name}"

    def default_package_location(self, project_name: str) -> str:
        return f"{self.default_location_prefix}{project_name}"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            O3_TEMPLATE_DIR, O3_DEFAULT_SCOPE, O3_BUILD_TOOL, CI.
        """
        kwargs: dict[str, object] = {}
        if os.environ.get("O3_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["O3_TEMPLATE_DIR"])
        if os.environ.get("O3_DEFAULT_SCOPE"):
            kwargs["default_scope"] = os.environ["O3_DEFAULT_SCOPE"]
        if os.environ.get("O3_BUILD_TOOL"):
            kwargs["default_build_tool"] = BuildTool(os.environ["O3_BUILD_TOOL"])
        kwargs["is_ci"] = os.environ.get("CI", "").lower() == "true"
        return cls(**kwargs)
