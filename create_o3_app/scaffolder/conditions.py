"""Presence rules for conditional template content.

Templates never decide truthiness on their own: every ``{% if x is present %}``
and every ``when("module.routes")`` goes through :func:`is_present`, and the
engine uses the same function to pick per-entity collections.  The rule is
the same for every output format:

* ``None``, ``False`` and Jinja undefined values are absent;
* empty strings, sequences, sets, and mappings are absent;
* numbers are present, zero included (``order: 0`` is a real value);
* everything else is present.
"""

from __future__ import annotations

from collections.abc import Mapping, Sized
from typing import Any

from jinja2 import Undefined, pass_context
from jinja2.runtime import Context


def is_present(value: Any) -> bool:
    if value is None or isinstance(value, Undefined):
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, Sized):
        return len(value) > 0
    return bool(value)


def lookup(source: Any, path: str) -> Any:
    """Resolve a dotted *path* through mappings and attributes.

    Returns ``None`` as soon as a segment cannot be resolved.
    """
    current = source
    for segment in path.split("."):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(segment)
        elif isinstance(current, (list, tuple)) and segment.isdigit():
            index = int(segment)
            current = current[index] if index < len(current) else None
        else:
            current = getattr(current, segment, None)
    return current


@pass_context
def when(context: Context, path: str) -> bool:
    """Jinja global: ``{% if when("module.feature_flags") %}``."""
    return is_present(lookup(context.get_all(), path))
