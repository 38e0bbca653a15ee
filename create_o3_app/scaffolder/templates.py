"""Jinja2 template rendering for O3 module scaffolding.

Provides the :class:`TemplateRenderer` which walks the template root,
expands per-route and per-extension templates once per entity, and writes
the rendered tree below the project's output directory.  Every discovered
file goes through Jinja2, whether or not it carries the ``.j2`` marker, so
conditional content works in any file.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional

import jinja2
from jinja2 import ChainableUndefined, Environment, FileSystemLoader

from create_o3_app.config import DEFAULT_TEMPLATE_DIR
from create_o3_app.errors import FileSystemError, TemplateError, WRITE_SUGGESTIONS
from create_o3_app.logger import Logger
from create_o3_app.models import CreateOptions, ModuleConfig, ProjectConfig
from create_o3_app.scaffolder.casing import CASE_HELPERS, kebab_case
from create_o3_app.scaffolder.conditions import is_present, when
from create_o3_app.scaffolder.context import TemplateContext, build_context


TEMPLATE_SUFFIX = ".j2"

EXCLUDED_DIRS = frozenset(
    {"node_modules", ".git", "dist", "build", ".next", ".cache", "coverage"}
)
EXCLUDED_FILES = frozenset(
    {".DS_Store", "package-lock.json", "yarn.lock", "pnpm-lock.yaml"}
)


# ---------------------------------------------------------------------------
# Per-entity templates
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EntityTemplate:
    """A template rendered once per element of a module collection.

    Attributes:
        source: Marker-stripped path relative to the template root.
        collection: ``ModuleConfig`` attribute holding the entities.
        output: Output path pattern; ``{name}`` is the kebab-cased
            component name of the entity.
    """

    source: str
    collection: str
    output: str


ENTITY_TEMPLATES: tuple[EntityTemplate, ...] = (
    EntityTemplate("src/page.component.tsx", "routes", "src/{name}.component.tsx"),
    EntityTemplate("src/page.scss", "routes", "src/{name}.scss"),
    EntityTemplate("src/extension.component.tsx", "extensions", "src/{name}.component.tsx"),
    EntityTemplate("src/extension.scss", "extensions", "src/{name}.scss"),
)

_ENTITY_BY_SOURCE = {tpl.source: tpl for tpl in ENTITY_TEMPLATES}


@dataclass(frozen=True)
class PlannedFile:
    """One output file: which template produces it, where, and with what context."""

    template: str
    output: Path
    context: TemplateContext


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders the O3 module template tree.

    The renderer is stateless between calls: each :meth:`render` rediscovers
    the template files and rebuilds the context from its arguments.
    """

    def __init__(
        self,
        template_dir: str | Path | None = None,
        logger: Optional[Logger] = None,
    ) -> None:
        if template_dir is None:
            template_dir = DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.logger = logger or Logger()
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=ChainableUndefined,
        )
        self.env.filters.update(CASE_HELPERS)
        self.env.filters["route_segment"] = _route_segment_filter
        self.env.filters["dependency_name"] = _dependency_name_filter
        self.env.tests["present"] = is_present
        self.env.globals["when"] = when

    # -- Discovery ---------------------------------------------------------

    def ensure_available(self) -> None:
        """Raise :class:`TemplateError` unless the template root is usable."""
        root = self.template_dir
        if root.is_dir() and (
            (root / "package.json").is_file()
            or (root / f"package.json{TEMPLATE_SUFFIX}").is_file()
        ):
            return
        raise TemplateError(
            f"Template directory not found or incomplete: {root}",
            template_path=str(root),
            suggestions=[
                "Reinstall create-o3-app to restore the bundled templates",
                "If O3_TEMPLATE_DIR is set, point it at a directory containing package.json",
            ],
        )

    def list_templates(self) -> list[str]:
        """Return every template file as a sorted POSIX path relative to the root.

        Dotfiles are included; denylisted directories and lockfiles are not.
        """
        found: list[str] = []
        for path in self.template_dir.rglob("*"):
            if not path.is_file():
                continue
            rel = PurePosixPath(path.relative_to(self.template_dir).as_posix())
            if _is_excluded(rel):
                continue
            found.append(str(rel))
        return sorted(found)

    # -- Planning ----------------------------------------------------------

    def plan(
        self,
        project: ProjectConfig,
        module: ModuleConfig,
        options: CreateOptions,
        base_dir: str | Path,
    ) -> list[PlannedFile]:
        """Work out every output file without rendering or writing anything."""
        self.ensure_available()
        context = build_context(project, module, options)
        out_root = Path(base_dir) / project.output_location

        planned: list[PlannedFile] = []
        for template in self.list_templates():
            stripped = strip_marker(template)
            entity = _ENTITY_BY_SOURCE.get(stripped)
            if entity is None:
                planned.append(PlannedFile(template, out_root / stripped, context))
                continue

            items = getattr(module, entity.collection)
            if not is_present(items):
                continue
            for item in items:
                output = entity.output.format(name=kebab_case(item.component_name))
                if entity.collection == "routes":
                    narrowed = context.narrow(current_route=item)
                else:
                    narrowed = context.narrow(current_extension=item)
                planned.append(PlannedFile(template, out_root / output, narrowed))
        return planned

    # -- Rendering ---------------------------------------------------------

    def render_template(self, template_path: str, context: TemplateContext) -> str:
        """Render a single template with the provided context."""
        try:
            template = self.env.get_template(template_path)
            return template.render(**context.to_template_vars())
        except jinja2.TemplateError as exc:
            raise TemplateError(
                f"Failed to render template {template_path}: {exc}",
                template_path=template_path,
                suggestions=["Check the template syntax near the reported line"],
            ) from exc

    def render_string(self, template_string: str, context: TemplateContext) -> str:
        """Render an inline template string with the provided context."""
        return self.env.from_string(template_string).render(**context.to_template_vars())

    async def render(
        self,
        project: ProjectConfig,
        module: ModuleConfig,
        options: CreateOptions,
        base_dir: str | Path,
    ) -> int:
        """Render the whole tree and return the number of files produced.

        In dry-run mode every template is still rendered, so template errors
        surface the same way, but nothing touches the file system.
        """
        planned = self.plan(project, module, options, base_dir)
        for item in planned:
            content = self.render_template(item.template, item.context)
            if options.dry_run:
                self.logger.info(f"[DRY RUN] Would create: {item.output}")
                continue
            await asyncio.to_thread(_write_file, item.output, content)
            self.logger.debug(f"Created {item.output}")
        return len(planned)


async def generate_files(
    project: ProjectConfig,
    module: ModuleConfig,
    options: CreateOptions,
    base_dir: str | Path,
    *,
    template_dir: str | Path | None = None,
    logger: Optional[Logger] = None,
) -> int:
    """Convenience wrapper around :meth:`TemplateRenderer.render`."""
    renderer = TemplateRenderer(template_dir=template_dir, logger=logger)
    return await renderer.render(project, module, options, base_dir)


def strip_marker(template_path: str) -> str:
    if template_path.endswith(TEMPLATE_SUFFIX):
        return template_path[: -len(TEMPLATE_SUFFIX)]
    return template_path


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------


def _route_segment_filter(path: str) -> str:
    """``/billing`` -> ``billing``."""
    return path.lstrip("/")


def _dependency_name_filter(specifier: str) -> str:
    """``webservices.rest>=2.2.0`` -> ``webservices.rest``."""
    for separator in (">=", "@"):
        if separator in specifier:
            return specifier.split(separator, 1)[0]
    return specifier


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _is_excluded(rel: PurePosixPath) -> bool:
    if rel.name in EXCLUDED_FILES:
        return True
    return any(part in EXCLUDED_DIRS for part in rel.parts[:-1])


def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileSystemError(
            f"Failed to create directory {path.parent}: {exc}",
            path=str(path.parent),
            operation="mkdir",
            suggestions=WRITE_SUGGESTIONS,
        ) from exc
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise FileSystemError(
            f"Failed to write file {path}: {exc}",
            path=str(path),
            operation="write",
            suggestions=WRITE_SUGGESTIONS,
        ) from exc
