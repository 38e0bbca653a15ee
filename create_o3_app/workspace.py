"""Register a newly generated package with its monorepo's workspace manifest.

Two manifest shapes are supported: the ``packages:`` list of
``pnpm-workspace.yaml`` (edited as text so comments and ordering survive)
and the ``workspaces`` field of the root ``package.json`` (either a plain
array or ``{"packages": [...]}``).  Registration is idempotent.  Nothing in
here is fatal: failures are reported as warnings.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Optional

from create_o3_app.logger import Logger
from create_o3_app.utils import dump_json, read_json_object, write_text

_PACKAGES_KEY = re.compile(r"^packages:\s*(?:#.*)?$")
_INLINE_PACKAGES = re.compile(r"^packages:\s*\[(?P<items>.*)\]\s*(?:#.*)?$")
_LIST_ITEM = re.compile(r"^(?P<indent>\s*)-\s*(?P<value>.*?)\s*(?:#.*)?$")


def normalize_location(location: str) -> str:
    return location.rstrip("/")


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def merge_pnpm_workspace(content: str, location: str) -> Optional[str]:
    """Return *content* with *location* added to its ``packages:`` list.

    Returns ``None`` when the location is already listed.  Every other line
    is kept verbatim and in order, and a trailing newline is preserved.
    """
    location = normalize_location(location)
    entry = f'"{location}"'
    lines = content.splitlines()
    trailing_newline = content.endswith("\n") or not content

    for index, line in enumerate(lines):
        inline = _INLINE_PACKAGES.match(line)
        if inline:
            items = [
                _unquote(item.strip())
                for item in inline.group("items").split(",")
                if item.strip()
            ]
            if location in (normalize_location(item) for item in items):
                return None
            lines[index : index + 1] = [
                "packages:",
                *(f'  - "{item}"' for item in items),
                f"  - {entry}",
            ]
            return _join_lines(lines, trailing_newline)

        if not _PACKAGES_KEY.match(line):
            continue

        last_item: Optional[int] = None
        indent: Optional[str] = None
        cursor = index + 1
        while cursor < len(lines):
            current = lines[cursor]
            stripped = current.strip()
            if not stripped or stripped.startswith("#"):
                cursor += 1
                continue
            item = _LIST_ITEM.match(current)
            if not item:
                break
            if normalize_location(_unquote(item.group("value"))) == location:
                return None
            last_item = cursor
            indent = item.group("indent")
            cursor += 1

        insert_at = (last_item if last_item is not None else index) + 1
        if indent is None:
            indent = "  "
        lines.insert(insert_at, f"{indent}- {entry}")
        return _join_lines(lines, trailing_newline)

    lines.extend(["packages:", f"  - {entry}"])
    return _join_lines(lines, trailing_newline)


def _join_lines(lines: list[str], trailing_newline: bool) -> str:
    text = "\n".join(lines)
    return text + "\n" if trailing_newline else text


async def _register_pnpm(manifest: Path, location: str, logger: Logger) -> None:
    content = await asyncio.to_thread(manifest.read_text, encoding="utf-8")
    merged = merge_pnpm_workspace(content, location)
    if merged is None:
        logger.debug(f"{location} is already listed in {manifest.name}")
        return
    await write_text(manifest, merged)
    logger.success(f"Added {location} to pnpm workspace")


async def _register_package_json(manifest: Path, location: str, logger: Logger) -> None:
    data = await asyncio.to_thread(read_json_object, manifest)
    if data is None:
        logger.warn("No readable package.json found at monorepo root")
        return

    workspaces = data.get("workspaces")
    if isinstance(workspaces, list):
        entries = workspaces
    elif isinstance(workspaces, dict) and isinstance(workspaces.get("packages", []), list):
        entries = workspaces.setdefault("packages", [])
    else:
        logger.warn("package.json at monorepo root has no usable workspaces field")
        return

    if location in (normalize_location(e) for e in entries if isinstance(e, str)):
        logger.debug(f"{location} is already listed in workspaces")
        return

    entries.append(location)
    await write_text(manifest, dump_json(data))
    logger.success(f"Added {location} to workspaces")


async def register_workspace(
    monorepo_root: str | Path,
    package_location: str,
    logger: Optional[Logger] = None,
) -> None:
    """Add *package_location* to the workspace manifest under *monorepo_root*.

    The pnpm manifest is tried first; if it is missing or cannot be updated
    the ``package.json`` ``workspaces`` field is used instead.
    """
    logger = logger or Logger()
    root = Path(monorepo_root)
    location = normalize_location(package_location)

    pnpm_manifest = root / "pnpm-workspace.yaml"
    if pnpm_manifest.is_file():
        try:
            await _register_pnpm(pnpm_manifest, location, logger)
            return
        except (OSError, UnicodeDecodeError) as exc:
            logger.warn("Failed to update pnpm workspace configuration:", str(exc))

    manifest = root / "package.json"
    if not manifest.is_file():
        logger.warn("No package.json found at monorepo root")
        return

    try:
        await _register_package_json(manifest, location, logger)
    except OSError as exc:
        logger.warn("Failed to update workspace configuration:", str(exc))
