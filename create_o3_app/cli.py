"""Command-line entry point for ``create-o3-app``."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from create_o3_app import __version__
from create_o3_app.config import Settings
from create_o3_app.error_handler import handle_error
from create_o3_app.errors import CLIError, ValidationError
from create_o3_app.logger import Logger
from create_o3_app.models import ModuleConfig, ProjectConfig
from create_o3_app.monorepo import detect_monorepo
from create_o3_app.prompts import resolve_module_config, resolve_project_config
from create_o3_app.scaffolder import create_project
from create_o3_app.validators import parse_create_options, validate_project_name

DOCS_URL = "https://o3-docs.openmrs.org"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-o3-app",
        description="Scaffold an OpenMRS O3 frontend module",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-o3-app my-module --standalone\n"
            '  create-o3-app my-module --monorepo --route "/patients" --route-component "PatientList"\n'
            "  create-o3-app my-module --dry-run\n"
            '  create-o3-app my-module --package-name "@openmrs/esm-my-module" --rspack\n'
            "  create-o3-app my-module --new-monorepo\n"
        ),
    )
    parser.add_argument("project_name", nargs="?", help="Name of the project/directory to create")
    parser.add_argument("--package-name", help="npm package name (default: @openmrs/esm-<name>)")
    parser.add_argument("--rspack", action="store_true", default=None, help="Build with rspack")
    parser.add_argument("--webpack", action="store_true", default=None, help="Build with webpack")
    parser.add_argument(
        "--standalone", action="store_true", default=None,
        help="Create a standalone module (not in a monorepo)",
    )
    parser.add_argument(
        "--monorepo", action="store_true", default=None,
        help="Create the module inside the monorepo in the current directory",
    )
    parser.add_argument(
        "--new-monorepo", action="store_true", default=None,
        help="Create a new monorepo root with this module as its first package",
    )
    parser.add_argument("--route", help='Route path for the page (e.g. "/patients")')
    parser.add_argument("--route-component", help="Component name for the route (use with --route)")
    parser.add_argument(
        "--no-git", dest="git", action="store_false", default=None,
        help="Skip git initialization",
    )
    parser.add_argument(
        "--no-ci", dest="ci", action="store_false", default=None,
        help="Do not run the CI workflow on push and pull requests",
    )
    parser.add_argument("--dry-run", action="store_true", help="Preview changes without writing files")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--quiet", action="store_true", help="Suppress output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def options_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Collect the option bag, leaving out flags that were not given."""
    return {
        key: value
        for key, value in vars(args).items()
        if key != "project_name" and value is not None
    }


def print_success(
    logger: Logger,
    project: ProjectConfig,
    module: ModuleConfig,
    file_count: int,
) -> None:
    logger.raw(f"\n[green]Successfully created {project.project_name}![/green] ({file_count} files)\n")
    logger.raw("[yellow]Next steps:[/yellow]")
    if project.is_new_monorepo:
        steps = [f"cd {project.project_name}/{project.package_location}"]
    else:
        steps = [f"cd {project.output_location}"]
    steps.extend(["npm install", "npm start"])
    for index, step in enumerate(steps, start=1):
        logger.raw(f"[dim]   {index}. {step}[/dim]")
    if module.routes:
        logger.raw(f"\n[dim]See {DOCS_URL} for routing, extensions and configuration.[/dim]")


async def run(
    project_name: Optional[str],
    raw_options: dict[str, Any],
    *,
    cwd: str | Path | None = None,
    settings: Optional[Settings] = None,
) -> int:
    """Validate options, resolve configuration, and generate the project.

    Returns the process exit status.
    """
    try:
        options = parse_create_options(raw_options)
    except ValidationError as exc:
        handle_error(exc, Logger(), verbose=bool(raw_options.get("verbose")))
        return 1

    logger = Logger.from_options(options)
    settings = settings or Settings.from_env()
    base_dir = Path(cwd) if cwd is not None else Path.cwd()

    try:
        if project_name:
            name_check = validate_project_name(project_name)
            if not name_check.success:
                raise ValidationError(
                    "Invalid project name", field="projectName", suggestions=name_check.errors
                )

        logger.debug("Starting project creation", project_name, options.model_dump())
        if options.dry_run:
            logger.raw("[yellow]Dry run mode - no files will be created[/yellow]\n")

        monorepo = detect_monorepo(base_dir)
        logger.debug("Monorepo context", monorepo.model_dump())
        project = resolve_project_config(
            project_name, options, monorepo, settings=settings, logger=logger
        )
        logger.debug("Project config validated", project.model_dump())
        module = resolve_module_config(project, options, logger=logger)
        logger.debug("Module config validated", module.model_dump())

        file_count = await create_project(
            project, module, options, cwd=base_dir, settings=settings, logger=logger
        )
    except CLIError as exc:
        handle_error(exc, logger, verbose=options.verbose)
        return 1

    if options.dry_run:
        logger.success(f"Dry run completed - {file_count} files would be created")
    else:
        print_success(logger, project, module, file_count)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point for ``create-o3-app`` and ``python -m create_o3_app``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    status = asyncio.run(run(args.project_name, options_from_args(args)))
    sys.exit(status)


if __name__ == "__main__":
    main()
