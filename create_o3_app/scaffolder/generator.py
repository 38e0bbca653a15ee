"""Project generators.

Three placements are supported, each with its own generator:

* a standalone module rendered into ``<cwd>/<project_name>`` and then turned
  into a git repository with its dependencies installed;
* a module inside an existing monorepo, rendered into
  ``<cwd>/<package_location>`` and registered with the workspace manifest;
* a brand-new monorepo whose root manifest lists the module's location.

:func:`create_project` picks the right one from the ``ProjectConfig``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from create_o3_app.config import Settings
from create_o3_app.errors import FileSystemError, WRITE_SUGGESTIONS
from create_o3_app.git import initialize_git
from create_o3_app.logger import Logger
from create_o3_app.models import CreateOptions, ModuleConfig, ProjectConfig
from create_o3_app.package_manager import install_dependencies
from create_o3_app.scaffolder.templates import TemplateRenderer
from create_o3_app.utils import create_progress, dump_json, write_text
from create_o3_app.workspace import register_workspace


class ProjectGenerator:
    """Renders a module and runs the follow-up steps for its placement."""

    def __init__(
        self,
        project: ProjectConfig,
        module: ModuleConfig,
        options: CreateOptions,
        *,
        cwd: str | Path | None = None,
        settings: Optional[Settings] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self.project = project
        self.module = module
        self.options = options
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()
        self.settings = settings or Settings()
        self.logger = logger or Logger()
        self.renderer = TemplateRenderer(self.settings.template_dir, logger=self.logger)

    def _progress(self):
        return create_progress(self.logger.console, disable=self.logger.quiet)

    async def _render(self, base_dir: Path) -> int:
        return await self.renderer.render(self.project, self.module, self.options, base_dir)

    # -- Standalone --------------------------------------------------------

    async def generate_standalone_module(self) -> int:
        output_dir = self.cwd / self.project.project_name
        if output_dir.exists():
            self.logger.warn(f"Project directory already exists: {output_dir}")

        with self._progress() as progress:
            task = progress.add_task("[1/3] Generating files from template...")
            file_count = await self._render(self.cwd)
            progress.update(task, description=f"[1/3] Generated {file_count} files from template")

            if self.options.dry_run:
                if self.project.git:
                    self.logger.info("[DRY RUN] Would initialize git repository")
                self.logger.info("[DRY RUN] Would install dependencies")
                return file_count

            if self.project.git:
                progress.update(task, description="[2/3] Initializing git repository...")
                await initialize_git(output_dir, logger=self.logger)

            progress.update(task, description="[3/3] Installing dependencies...")
            await install_dependencies(output_dir, logger=self.logger)

        self.logger.success("Standalone module generated successfully!")
        return file_count

    # -- Existing monorepo -------------------------------------------------

    async def generate_monorepo_module(self) -> int:
        location = self.project.package_location
        if not location:
            raise ValueError("Package location is required for monorepo modules")

        with self._progress() as progress:
            task = progress.add_task("[1/2] Generating files from template...")
            file_count = await self._render(self.cwd)
            progress.update(task, description=f"[1/2] Generated {file_count} files from template")

            if self.options.dry_run:
                self.logger.info("[DRY RUN] Would update workspace configuration")
                return file_count

            progress.update(task, description="[2/2] Updating workspace configuration...")
            await register_workspace(self.cwd, location, logger=self.logger)

        self.logger.success("Monorepo module generated successfully!")
        return file_count

    # -- New monorepo ------------------------------------------------------

    async def generate_new_monorepo(self) -> int:
        root_dir = self.cwd / self.project.project_name
        location = self.project.package_location or self.settings.default_package_location(
            self.project.project_name
        )

        with self._progress() as progress:
            task = progress.add_task("[1/2] Creating monorepo root...")
            if self.options.dry_run:
                self.logger.info(f"[DRY RUN] Would create directory: {root_dir}")
                self.logger.info(
                    f"[DRY RUN] Would create root package.json with workspace: {location}"
                )
                self.logger.info("[DRY RUN] Would create root README.md and .gitignore")
            else:
                await self._write_monorepo_root(root_dir, location)

            progress.update(task, description="[2/2] Generating module from template...")
            file_count = await self._render(root_dir)

        if not self.options.dry_run:
            self.logger.success("New monorepo generated successfully!")
        return file_count

    async def _write_monorepo_root(self, root_dir: Path, location: str) -> None:
        root_files = {
            "package.json": dump_json(
                {
                    "name": self.project.project_name,
                    "private": True,
                    "workspaces": [location],
                }
            ),
            "README.md": (
                f"# {self.project.project_name}\n\n"
                "Monorepo created with create-o3-app.\n"
            ),
            ".gitignore": "node_modules\n.DS_Store\ndist\ncoverage\n",
        }
        for name, content in root_files.items():
            path = root_dir / name
            if path.exists():
                self.logger.debug(f"Keeping existing {path}")
                continue
            try:
                await write_text(path, content)
            except OSError as exc:
                raise FileSystemError(
                    f"Failed to create monorepo root file {path}: {exc}",
                    path=str(path),
                    operation="write",
                    suggestions=WRITE_SUGGESTIONS,
                ) from exc

    # -- Dispatch ----------------------------------------------------------

    async def generate(self) -> int:
        if self.project.is_new_monorepo:
            return await self.generate_new_monorepo()
        if self.project.is_monorepo:
            return await self.generate_monorepo_module()
        return await self.generate_standalone_module()


async def create_project(
    project: ProjectConfig,
    module: ModuleConfig,
    options: CreateOptions,
    *,
    cwd: str | Path | None = None,
    settings: Optional[Settings] = None,
    logger: Optional[Logger] = None,
) -> int:
    """Generate the project described by *project* and return the file count."""
    generator = ProjectGenerator(
        project, module, options, cwd=cwd, settings=settings, logger=logger
    )
    return await generator.generate()
