"""Turn command-line options into validated project and module configs.

Only one question is ever asked interactively: whether to place the new
module inside a detected monorepo.  Everything else comes from flags or
defaults, so scripted and CI runs never block on input.
"""

from __future__ import annotations

import os
import sys
from typing import Optional

from rich.prompt import Confirm, Prompt

from create_o3_app.config import Settings
from create_o3_app.errors import ValidationError
from create_o3_app.logger import Logger
from create_o3_app.models import (
    BuildTool,
    CreateOptions,
    ModuleConfig,
    ModuleType,
    MonorepoContext,
    ProjectConfig,
)
from create_o3_app.validators import (
    parse_module_config,
    parse_project_config,
    validate_package_name,
    validate_project_name,
)

NAME_PREFIXES = ("openmrs-esm-", "esm-", "openmrs-")
DEV_SERVER_URL = "http://localhost:8080/openmrs/spa"

# Feature toggles a module gets when nobody is asked about them
MODULE_DEFAULTS: dict[str, bool] = {
    "offline": False,
    "error_boundary": False,
    "coverage_thresholds": True,
    "accessibility": True,
    "dependabot": True,
    "contributing": True,
    "turbo": False,
}


def normalize_project_name(name: str) -> str:
    """Drop the ``openmrs-esm-``, ``esm-`` and ``openmrs-`` prefixes, in that order."""
    for prefix in NAME_PREFIXES:
        if name.startswith(prefix):
            name = name[len(prefix):]
    return name


def has_project_type_flag(options: CreateOptions) -> bool:
    return bool(options.standalone or options.monorepo or options.new_monorepo)


def is_interactive(options: CreateOptions, settings: Optional[Settings] = None) -> bool:
    """Whether the user can be asked questions.

    Not in quiet mode, not under CI, stdin is a terminal, and the project
    type was not already chosen with a flag.
    """
    settings = settings or Settings.from_env()
    if options.quiet or settings.is_ci or os.environ.get("CI") == "true":
        return False
    if not sys.stdin.isatty():
        return False
    return not has_project_type_flag(options)


def _default_component_name(project_name: str) -> str:
    return "".join(word[:1].upper() + word[1:] for word in project_name.split("-"))


def resolve_project_config(
    project_name: Optional[str],
    options: CreateOptions,
    monorepo: MonorepoContext,
    *,
    settings: Optional[Settings] = None,
    logger: Optional[Logger] = None,
) -> ProjectConfig:
    settings = settings or Settings.from_env()
    logger = logger or Logger.from_options(options)
    interactive = is_interactive(options, settings)

    if not project_name and interactive:
        project_name = Prompt.ask(
            'Project name (e.g., "patient-chart" → @openmrs/esm-patient-chart)',
            console=logger.console,
        )
    if not project_name:
        raise ValidationError(
            "Project name is required",
            field="projectName",
            suggestions=["Pass the project name as the first argument: create-o3-app my-module"],
        )

    normalized = normalize_project_name(project_name)
    if normalized != project_name:
        logger.info(f'Normalized project name from "{project_name}" to "{normalized}"')
    project_name = normalized

    name_check = validate_project_name(project_name)
    if not name_check.success:
        raise ValidationError(
            f"Invalid project name: {project_name}",
            field="projectName",
            suggestions=name_check.errors,
        )

    default_package = settings.default_package_name(project_name)
    package_name = options.package_name or default_package
    if not validate_package_name(package_name).success:
        logger.warn(f'Invalid package name "{package_name}", using default: {default_package}')
        package_name = default_package

    if options.rspack:
        build_tool = BuildTool.RSPACK
    elif options.webpack:
        build_tool = BuildTool.WEBPACK
    else:
        build_tool = settings.default_build_tool

    is_monorepo = False
    is_new_monorepo = False
    if options.new_monorepo:
        is_monorepo = is_new_monorepo = True
    elif options.monorepo:
        is_monorepo = True
    elif options.standalone:
        pass
    elif monorepo.is_monorepo and interactive:
        is_monorepo = Confirm.ask(
            "Detected existing monorepo. Create module in existing monorepo?",
            default=True,
            console=logger.console,
        )
    else:
        logger.info("No project type specified. Defaulting to standalone module.")
        logger.debug("Use --standalone, --monorepo, or --new-monorepo to be explicit.")

    return parse_project_config(
        {
            "project_name": project_name,
            "package_name": package_name,
            "description": f"{project_name} frontend module for O3",
            "build_tool": build_tool,
            "is_monorepo": is_monorepo,
            "is_new_monorepo": is_new_monorepo,
            "package_location": (
                settings.default_package_location(project_name) if is_monorepo else None
            ),
            "git": options.git is not False,
            "ci": options.ci is not False,
        }
    )


def resolve_module_config(
    project: ProjectConfig,
    options: CreateOptions,
    *,
    logger: Optional[Logger] = None,
) -> ModuleConfig:
    """Build the module config: a single page route from flags or defaults."""
    logger = logger or Logger.from_options(options)

    if options.route and options.route_component:
        path, component = options.route, options.route_component
    else:
        path = f"/{project.project_name}"
        component = _default_component_name(project.project_name)

    route = {"path": path, "component_name": component, "online": True, "offline": True}
    logger.info(f"Your module will be available at: {DEV_SERVER_URL}{_leading_slash(path)}")
    return parse_module_config({"type": ModuleType.PAGE, "routes": [route], **MODULE_DEFAULTS})


def _leading_slash(path: str) -> str:
    return path if path.startswith("/") else f"/{path}"
