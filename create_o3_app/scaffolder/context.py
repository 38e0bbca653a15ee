"""Template context record.

The context keeps project, module, and run-time options in separate named
sections so a module field can never shadow a project field.  Per-entity
rendering narrows the context with :meth:`TemplateContext.narrow` instead of
mutating it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Optional

from create_o3_app.models import (
    CreateOptions,
    ExtensionConfig,
    ModuleConfig,
    ProjectConfig,
    RouteConfig,
)
from create_o3_app.scaffolder.casing import CASE_HELPERS


@dataclass(frozen=True)
class TemplateContext:
    """Immutable data handed to every template."""

    project: ProjectConfig
    module: ModuleConfig
    options: CreateOptions
    helpers: Mapping[str, Callable[[str], str]] = field(
        default_factory=lambda: MappingProxyType(dict(CASE_HELPERS))
    )
    current_route: Optional[RouteConfig] = None
    current_extension: Optional[ExtensionConfig] = None

    def narrow(
        self,
        *,
        current_route: Optional[RouteConfig] = None,
        current_extension: Optional[ExtensionConfig] = None,
    ) -> "TemplateContext":
        """Return a copy focused on one route or one extension."""
        return replace(
            self,
            current_route=current_route,
            current_extension=current_extension,
        )

    def to_template_vars(self) -> dict[str, Any]:
        """Flatten into the variables a Jinja2 template sees.

        Project fields are also exposed at the top level (``project_name``,
        ``package_name``, ...); module fields are only reachable through
        ``module``.
        """
        return {
            **self.project.model_dump(),
            "project": self.project,
            "module": self.module,
            "options": self.options,
            "helpers": self.helpers,
            "current_route": self.current_route,
            "current_extension": self.current_extension,
        }


def build_context(
    project: ProjectConfig,
    module: ModuleConfig,
    options: Optional[CreateOptions] = None,
) -> TemplateContext:
    return TemplateContext(
        project=project,
        module=module,
        options=options or CreateOptions(),
    )
