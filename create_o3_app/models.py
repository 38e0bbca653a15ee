"""Pydantic v2 models for project, module, and option configuration.

All models are frozen once validated.  Attributes are snake_case, but every
model also accepts the camelCase keys of the JSON configuration shape
(``projectName``, ``componentName``, ...), so option
bags coming from config files or tests validate either way.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    model_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from create_o3_app import rules


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class BuildTool(str, Enum):
    """Bundler used by the generated module."""
    WEBPACK = "webpack"
    RSPACK = "rspack"


class ModuleType(str, Enum):
    """Overall shape of the generated module."""
    PAGE = "page"
    EXTENSION = "extension"
    BOTH = "both"
    MODAL = "modal"


class WorkspaceType(str, Enum):
    """Kind of workspace panel a module contributes."""
    FORM = "form"
    CHART = "chart"
    OTHER = "other"


class MonorepoType(str, Enum):
    """Workspace manager that owns a monorepo root."""
    YARN = "yarn"
    PNPM = "pnpm"
    NPM = "npm"


# ---------------------------------------------------------------------------
# Constrained field types
# ---------------------------------------------------------------------------

ProjectName = Annotated[str, AfterValidator(rules.PROJECT_NAME.enforce)]
PackageName = Annotated[str, AfterValidator(rules.PACKAGE_NAME.enforce)]
Description = Annotated[str, AfterValidator(rules.DESCRIPTION.enforce)]
RoutePath = Annotated[str, AfterValidator(rules.ROUTE_PATH.enforce)]
ComponentName = Annotated[str, AfterValidator(rules.COMPONENT_NAME.enforce)]
ExtensionName = Annotated[str, AfterValidator(rules.EXTENSION_NAME.enforce)]
SlotName = Annotated[str, AfterValidator(rules.SLOT_NAME.enforce)]
PathAlias = Annotated[str, AfterValidator(rules.PATH_ALIAS.enforce)]
WorkspaceName = Annotated[str, AfterValidator(rules.WORKSPACE_NAME.enforce)]
FeatureFlagName = Annotated[str, AfterValidator(rules.FEATURE_FLAG_NAME.enforce)]
BackendDependency = Annotated[str, AfterValidator(rules.BACKEND_DEPENDENCY.enforce)]
PackageLocation = Annotated[str, AfterValidator(rules.PACKAGE_LOCATION.enforce)]
BuildToolField = Annotated[BuildTool, BeforeValidator(rules.check_build_tool)]


class _ConfigModel(BaseModel):
    """Shared model configuration: frozen, camelCase aliases, no extras."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="forbid",
        use_enum_values=False,
    )


# ---------------------------------------------------------------------------
# Module building blocks
# ---------------------------------------------------------------------------


class RouteConfig(_ConfigModel):
    """A page route registered by the module."""
    path: RoutePath
    component_name: ComponentName
    online: Optional[bool] = None
    offline: Optional[bool] = None


class ExtensionConfig(_ConfigModel):
    """An extension mounted into a named slot."""
    name: ExtensionName
    slot: SlotName
    component_name: ComponentName
    order: Optional[int] = Field(default=None, ge=0)
    online: Optional[bool] = None
    offline: Optional[bool] = None
    feature_flag: Optional[str] = None


class ModalConfig(_ConfigModel):
    """A modal registered by the module."""
    name: ExtensionName
    component_name: ComponentName


class WorkspaceConfig(_ConfigModel):
    """A workspace panel registered by the module."""
    name: WorkspaceName
    title: Annotated[str, AfterValidator(rules.WORKSPACE_TITLE.enforce)]
    component_name: ComponentName
    type: WorkspaceType


class FeatureFlagConfig(_ConfigModel):
    """A feature flag the module registers at startup."""
    name: FeatureFlagName
    label: Annotated[str, AfterValidator(rules.FEATURE_FLAG_LABEL.enforce)]
    description: Annotated[str, AfterValidator(rules.FEATURE_FLAG_DESCRIPTION.enforce)]


# ---------------------------------------------------------------------------
# Top-level configuration
# ---------------------------------------------------------------------------


class ProjectConfig(_ConfigModel):
    """Where and under which identity the module is generated."""

    project_name: ProjectName
    package_name: PackageName
    description: Description
    build_tool: BuildToolField = BuildTool.WEBPACK
    is_monorepo: bool = False
    is_new_monorepo: bool = False
    package_location: Optional[PackageLocation] = None
    git: bool = True
    ci: bool = True

    @model_validator(mode="after")
    def _check_monorepo_placement(self) -> "ProjectConfig":
        if self.is_new_monorepo and not self.is_monorepo:
            raise PydanticCustomError(
                "monorepo_placement",
                "isNewMonorepo requires isMonorepo to be true",
            )
        if self.is_monorepo and not self.package_location:
            raise PydanticCustomError(
                "monorepo_placement",
                "packageLocation is required for monorepo projects",
            )
        if not self.is_monorepo and self.package_location:
            raise PydanticCustomError(
                "monorepo_placement",
                "packageLocation is only allowed for monorepo projects",
            )
        return self

    @property
    def output_location(self) -> str:
        """Path of the generated package relative to the base directory."""
        return self.package_location or self.project_name


class ModuleConfig(_ConfigModel):
    """What the module contains: routes, extensions, and feature toggles."""

    type: ModuleType = ModuleType.PAGE
    routes: list[RouteConfig] = Field(default_factory=list)
    extensions: list[ExtensionConfig] = Field(default_factory=list)
    modals: Optional[list[ModalConfig]] = None
    workspaces: Optional[list[WorkspaceConfig]] = None
    feature_flags: Optional[list[FeatureFlagConfig]] = None
    backend_dependencies: Optional[list[BackendDependency]] = None
    offline: Optional[bool] = None
    error_boundary: Optional[bool] = None
    path_aliases: Optional[list[PathAlias]] = None
    coverage_thresholds: Optional[bool] = None
    accessibility: Optional[bool] = None
    dependabot: Optional[bool] = None
    contributing: Optional[bool] = None
    turbo: Optional[bool] = None


class CreateOptions(_ConfigModel):
    """Run-time flags as supplied on the command line."""

    package_name: Optional[PackageName] = None
    rspack: Optional[bool] = None
    webpack: Optional[bool] = None
    standalone: Optional[bool] = None
    monorepo: Optional[bool] = None
    new_monorepo: Optional[bool] = None
    route: Optional[RoutePath] = None
    route_component: Optional[ComponentName] = None
    git: Optional[bool] = None
    ci: Optional[bool] = None
    dry_run: bool = False
    verbose: bool = False
    quiet: bool = False


class MonorepoContext(_ConfigModel):
    """Result of inspecting a directory for workspace markers."""

    is_monorepo: bool
    type: Optional[MonorepoType] = None
    root_path: Optional[str] = None
    workspace_pattern: Optional[str] = None
