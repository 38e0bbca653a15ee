"""Field rule sets for configuration values.

Every rule is plain data: an optional regular expression with its message,
length bounds, and a list of refinements (predicate + message).  The same
rules back both the single-field ``validate_*`` helpers in
:mod:`create_o3_app.validators` and the pydantic models in
:mod:`create_o3_app.models`, so a value is judged identically no matter which
entry point sees it first.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field

from pydantic_core import PydanticCustomError


# ---------------------------------------------------------------------------
# Rule definition
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Refinement:
    """An extra check applied after the pattern and length checks."""

    check: Callable[[str], bool]
    message: str


@dataclass(frozen=True)
class FieldRule:
    """Declarative validation rule for a single string field."""

    label: str
    pattern: re.Pattern[str] | None = None
    pattern_message: str = ""
    min_length: int | None = 1
    max_length: int | None = None
    refinements: tuple[Refinement, ...] = field(default_factory=tuple)

    def errors(self, value: object) -> list[str]:
        """Return every violation of this rule for *value* (empty if valid)."""
        if not isinstance(value, str):
            return [f"{self.label} must be a string"]

        problems: list[str] = []
        if self.min_length is not None and len(value) < self.min_length:
            problems.append(f"{self.label} is required")
        if self.max_length is not None and len(value) > self.max_length:
            problems.append(
                f"{self.label} is too long (max {self.max_length} characters)"
            )
        if self.pattern is not None and not self.pattern.fullmatch(value):
            problems.append(self.pattern_message)
        # Refinements only make sense once the basic shape is right.
        if not problems:
            for refinement in self.refinements:
                if not refinement.check(value):
                    problems.append(refinement.message)
        return problems

    def enforce(self, value: str) -> str:
        """Pydantic ``AfterValidator`` hook: raise on the first failing rule."""
        problems = self.errors(value)
        if problems:
            raise PydanticCustomError(
                "field_rule",
                "{reason}",
                {"reason": "; ".join(problems)},
            )
        return value


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_LOWER_HYPHEN = re.compile(r"^[a-z0-9-]+$")


def _lower_hyphen_rule(label: str) -> FieldRule:
    return FieldRule(
        label=label,
        pattern=_LOWER_HYPHEN,
        pattern_message=(
            f"{label} can only contain lowercase letters, numbers, and hyphens"
        ),
    )


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------

PROJECT_NAME = FieldRule(
    label="Project name",
    pattern=_LOWER_HYPHEN,
    pattern_message=(
        "Project name can only contain lowercase letters, numbers, and hyphens"
    ),
    max_length=214,
    refinements=(
        Refinement(
            check=lambda name: not name.startswith("-") and not name.endswith("-"),
            message="Project name cannot start or end with a hyphen",
        ),
    ),
)

PACKAGE_NAME = FieldRule(
    label="Package name",
    pattern=re.compile(
        r"^(@[a-z0-9-~][a-z0-9-._~]*/)?[a-z0-9-~][a-z0-9-._~]*$"
    ),
    pattern_message="Invalid package name format",
    max_length=214,
)

DESCRIPTION = FieldRule(label="Description", max_length=500)

TEMPLATE_VERSION = FieldRule(
    label="Template version",
    refinements=(
        Refinement(
            check=lambda v: v in ("latest", "next") or bool(re.fullmatch(r"[\w.-]+", v)),
            message='Template version must be "latest", "next", or a valid version/tag',
        ),
    ),
)

ROUTE_PATH = FieldRule(
    label="Route path",
    pattern=re.compile(r"^/?[a-z0-9/-]+$"),
    pattern_message=(
        "Route path can only contain lowercase letters, numbers, slashes, and hyphens"
    ),
    refinements=(
        Refinement(
            check=lambda path: not path.endswith("/"),
            message="Route path cannot end with a slash",
        ),
    ),
)

COMPONENT_NAME = FieldRule(
    label="Component name",
    pattern=re.compile(r"^[A-Z][a-zA-Z0-9]*$"),
    pattern_message="Component name must be PascalCase (e.g., MyComponent)",
)

EXTENSION_NAME = _lower_hyphen_rule("Extension name")
SLOT_NAME = _lower_hyphen_rule("Slot name")
PATH_ALIAS = _lower_hyphen_rule("Path alias")
WORKSPACE_NAME = _lower_hyphen_rule("Workspace name")
FEATURE_FLAG_NAME = _lower_hyphen_rule("Feature flag name")

BACKEND_DEPENDENCY = FieldRule(
    label="Backend dependency",
    pattern=re.compile(r"^[a-z0-9-_.]+(>=|@)[\d.]+$"),
    pattern_message=(
        'Backend dependency must be in format "module-name>=version" '
        'or "module-name@version"'
    ),
    min_length=None,
)

PACKAGE_LOCATION = FieldRule(
    label="Package location",
    pattern=re.compile(r"^[a-z0-9/_-]+$"),
    pattern_message=(
        "Package location can only contain lowercase letters, numbers, slashes, "
        "hyphens, and underscores"
    ),
    refinements=(
        Refinement(
            check=lambda path: not path.startswith("/") and not path.endswith("/"),
            message="Package location cannot start or end with a slash",
        ),
    ),
)

WORKSPACE_TITLE = FieldRule(label="Workspace title")
FEATURE_FLAG_LABEL = FieldRule(label="Feature flag label")
FEATURE_FLAG_DESCRIPTION = FieldRule(label="Feature flag description")

BUILD_TOOLS: tuple[str, ...] = ("webpack", "rspack")
BUILD_TOOL_MESSAGE = 'Build tool must be either "webpack" or "rspack"'


def check_build_tool(value: object) -> object:
    """Pydantic ``BeforeValidator`` for the build tool enum."""
    if value not in BUILD_TOOLS:
        raise PydanticCustomError("build_tool", BUILD_TOOL_MESSAGE)
    return value
