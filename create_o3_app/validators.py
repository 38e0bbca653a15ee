"""Result-returning validators for configuration values.

Every ``validate_*`` function returns a :class:`ValidationResult` and never
raises for bad input: invalid values are an expected outcome, not an
exceptional one.  Composite validators prefix each message with the dotted
path of the offending field (``routes.0.path: ...``).

The ``parse_*`` functions are the raising counterparts used once a value must
be turned into a typed model; they raise
:class:`create_o3_app.errors.ValidationError`.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel

from create_o3_app import rules
from create_o3_app.errors import ValidationError
from create_o3_app.models import CreateOptions, ModuleConfig, ProjectConfig
from create_o3_app.scaffolder.casing import kebab_case

# Kebab stems of the fixed component files every module ships
RESERVED_COMPONENT_STEMS = frozenset({"root"})


class ValidationResult(BaseModel):
    """Outcome of a validation pass."""

    success: bool
    errors: list[str] = []

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(success=True, errors=[])

    @classmethod
    def from_errors(cls, errors: list[str]) -> "ValidationResult":
        return cls(success=not errors, errors=errors)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Concatenate two results; the merge fails if either side failed."""
        return ValidationResult(
            success=self.success and other.success,
            errors=[*self.errors, *other.errors],
        )


# ---------------------------------------------------------------------------
# Single-field validators
# ---------------------------------------------------------------------------


def _check(rule: rules.FieldRule, value: object) -> ValidationResult:
    problems = rule.errors(value)
    return ValidationResult.from_errors(problems)


def validate_project_name(name: object) -> ValidationResult:
    """Validate a project directory name.

    Whitespace and uppercase letters get dedicated messages, since they are
    by far the most common mistakes.
    """
    problems = rules.PROJECT_NAME.errors(name)
    if not isinstance(name, str):
        return ValidationResult.from_errors(problems)

    messages: list[str] = []
    for problem in problems:
        if problem != rules.PROJECT_NAME.pattern_message:
            messages.append(problem)
            continue
        specific: list[str] = []
        if re.search(r"\s", name):
            specific.append(
                "Project name cannot contain spaces. "
                'Use kebab-case: "my-module" instead of "my module"'
            )
        if re.search(r"[A-Z]", name):
            specific.append(
                'Project name must be lowercase. Use "my-module" instead of "MyModule"'
            )
        messages.extend(specific or [problem])
    return ValidationResult.from_errors(messages)


def validate_package_name(name: object) -> ValidationResult:
    return _check(rules.PACKAGE_NAME, name)


def validate_description(description: object) -> ValidationResult:
    return _check(rules.DESCRIPTION, description)


def validate_build_tool(tool: object) -> ValidationResult:
    if tool in rules.BUILD_TOOLS:
        return ValidationResult.ok()
    return ValidationResult.from_errors([rules.BUILD_TOOL_MESSAGE])


def validate_template_version(version: object) -> ValidationResult:
    return _check(rules.TEMPLATE_VERSION, version)


def validate_route_path(path: object) -> ValidationResult:
    return _check(rules.ROUTE_PATH, path)


def validate_component_name(name: object) -> ValidationResult:
    return _check(rules.COMPONENT_NAME, name)


def validate_extension_name(name: object) -> ValidationResult:
    return _check(rules.EXTENSION_NAME, name)


def validate_slot_name(name: object) -> ValidationResult:
    return _check(rules.SLOT_NAME, name)


def validate_backend_dependency(dep: object) -> ValidationResult:
    return _check(rules.BACKEND_DEPENDENCY, dep)


def validate_path_alias(alias: object) -> ValidationResult:
    return _check(rules.PATH_ALIAS, alias)


def validate_workspace_name(name: object) -> ValidationResult:
    return _check(rules.WORKSPACE_NAME, name)


def validate_feature_flag_name(name: object) -> ValidationResult:
    return _check(rules.FEATURE_FLAG_NAME, name)


def validate_package_location(location: object) -> ValidationResult:
    return _check(rules.PACKAGE_LOCATION, location)


# ---------------------------------------------------------------------------
# Composite validators
# ---------------------------------------------------------------------------

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def _format_errors(exc: pydantic.ValidationError) -> list[str]:
    messages: list[str] = []
    for err in exc.errors(include_url=False):
        path = ".".join(str(part) for part in err["loc"])
        messages.append(f"{path}: {err['msg']}" if path else err["msg"])
    return messages


def _schema_pass(model: type[_ModelT], raw: object, what: str) -> ValidationResult:
    if isinstance(raw, model):
        return ValidationResult.ok()
    if not isinstance(raw, Mapping):
        return ValidationResult.from_errors([f"Invalid {what}: expected an object"])
    try:
        model.model_validate(dict(raw))
    except pydantic.ValidationError as exc:
        return ValidationResult.from_errors(_format_errors(exc))
    return ValidationResult.ok()


def validate_project_config(config: object) -> ValidationResult:
    """Validate a complete project configuration, including placement rules."""
    return _schema_pass(ProjectConfig, config, "project configuration")


def _component_name_conflicts(module: ModuleConfig) -> list[str]:
    errors: list[str] = []
    seen: dict[str, str] = {}
    for section, items in (("routes", module.routes), ("extensions", module.extensions)):
        for index, item in enumerate(items):
            name = item.component_name
            stem = kebab_case(name)
            if stem in RESERVED_COMPONENT_STEMS:
                errors.append(
                    f'{section}.{index}.componentName: component name "{name}" is reserved '
                    f"(src/{stem}.component.tsx is part of every module)"
                )
            elif name in seen:
                errors.append(
                    f"{section}.{index}.componentName: duplicate component name "
                    f'"{name}" (already used by {seen[name]})'
                )
            else:
                seen[name] = f"{section}.{index}"
    return errors


def validate_module_config(config: object) -> ValidationResult:
    """Validate a complete module configuration.

    Besides the per-field rules, component names must be unique across
    routes and extensions: each one names a generated source file.  Names
    that would overwrite a fixed source file such as ``root.component.tsx``
    are rejected too.
    """
    result = _schema_pass(ModuleConfig, config, "module configuration")
    if not result.success:
        return result
    module = config if isinstance(config, ModuleConfig) else ModuleConfig.model_validate(dict(config))
    return ValidationResult.from_errors(_component_name_conflicts(module))


def _flag(options: Mapping[str, Any], name: str) -> Any:
    """Read an option by snake_case name or its camelCase alias."""
    if name in options:
        return options[name]
    head, *rest = name.split("_")
    return options.get(head + "".join(part.capitalize() for part in rest))


def validate_flag_constraints(options: Mapping[str, Any]) -> ValidationResult:
    """Cross-field checks on the raw option bag."""
    errors: list[str] = []

    chosen = [
        flag
        for key, flag in (
            ("standalone", "--standalone"),
            ("monorepo", "--monorepo"),
            ("new_monorepo", "--new-monorepo"),
        )
        if _flag(options, key)
    ]
    if len(chosen) > 1:
        errors.append(
            f"Cannot specify multiple project type flags: {', '.join(chosen)}. "
            "Please choose only one: --standalone, --monorepo, or --new-monorepo."
        )

    has_route = bool(_flag(options, "route"))
    has_component = bool(_flag(options, "route_component"))
    if has_route and not has_component:
        errors.append(
            "--route requires --route-component. "
            'Please provide both: --route "/path" --route-component "ComponentName"'
        )
    if has_component and not has_route:
        errors.append(
            "--route-component requires --route. "
            'Please provide both: --route "/path" --route-component "ComponentName"'
        )

    if _flag(options, "verbose") and _flag(options, "quiet"):
        errors.append("Cannot specify both --verbose and --quiet. Please choose only one.")

    return ValidationResult.from_errors(errors)


def validate_create_options(options: object) -> ValidationResult:
    """Validate the option bag: schema pass plus cross-field constraints.

    Both passes always run and their errors are concatenated.
    """
    if isinstance(options, CreateOptions):
        options = options.model_dump()
    if not isinstance(options, Mapping):
        return ValidationResult.from_errors(["Invalid create options: expected an object"])
    schema = _schema_pass(CreateOptions, options, "create options")
    return schema.merge(validate_flag_constraints(options))


# ---------------------------------------------------------------------------
# Raising parsers
# ---------------------------------------------------------------------------


def parse_project_config(config: object) -> ProjectConfig:
    result = validate_project_config(config)
    if not result.success:
        raise ValidationError(
            "Invalid project configuration", field="projectConfig", suggestions=result.errors
        )
    return config if isinstance(config, ProjectConfig) else ProjectConfig.model_validate(dict(config))


def parse_module_config(config: object) -> ModuleConfig:
    result = validate_module_config(config)
    if not result.success:
        raise ValidationError(
            "Invalid module configuration", field="moduleConfig", suggestions=result.errors
        )
    return config if isinstance(config, ModuleConfig) else ModuleConfig.model_validate(dict(config))


def parse_create_options(options: object) -> CreateOptions:
    result = validate_create_options(options)
    if not result.success:
        raise ValidationError(
            "Invalid options provided", field="options", suggestions=result.errors
        )
    if isinstance(options, CreateOptions):
        return options
    return CreateOptions.model_validate(dict(options))
