"""Case conversion helpers exposed to templates.

All four functions are pure and idempotent on their own output.  They are
registered as Jinja2 filters (``{{ name | kebab_case }}``) and are also
available as callables under ``helpers`` in the template context.
"""

from __future__ import annotations

import re

_UPPER_AFTER_LETTER = re.compile(r"(?<=[A-Za-z])(?=[A-Z])")
_SEPARATORS = re.compile(r"[\s_]+")
_HYPHEN_LETTER = re.compile(r"-([a-z])")


def kebab_case(value: str) -> str:
    """``BillingList`` / ``billingList`` -> ``billing-list``.

    A hyphen goes before every uppercase letter that follows a letter, so the
    result does not depend on the case of the first character.
    """
    value = _UPPER_AFTER_LETTER.sub("-", value)
    return _SEPARATORS.sub("-", value).lower()


def camel_case(value: str) -> str:
    """``my-module`` -> ``myModule``."""
    value = _HYPHEN_LETTER.sub(lambda m: m.group(1).upper(), value)
    if value[:1].isupper():
        value = value[0].lower() + value[1:]
    return value


def pascal_case(value: str) -> str:
    """``my-module`` -> ``MyModule``."""
    camel = camel_case(value)
    return camel[:1].upper() + camel[1:]


def snake_case(value: str) -> str:
    """``my-module`` -> ``my_module``."""
    return value.replace("-", "_").lower()


CASE_HELPERS = {
    "kebab_case": kebab_case,
    "camel_case": camel_case,
    "pascal_case": pascal_case,
    "snake_case": snake_case,
}
