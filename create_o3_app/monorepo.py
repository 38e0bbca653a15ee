"""Monorepo detection.

Looks at a single directory snapshot and reports which workspace manager,
if any, owns it.  Detection never writes and never raises for malformed
manifests: an unreadable ``package.json`` is treated as absent.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from create_o3_app.models import MonorepoContext, MonorepoType
from create_o3_app.utils import read_json_object

PNPM_MARKER = "pnpm-workspace.yaml"
YARN_MARKER = ".yarnrc.yml"
MANIFEST = "package.json"


def detect_monorepo(cwd: str | Path) -> MonorepoContext:
    """Classify *cwd* as a pnpm, yarn, or npm workspace root, or none.

    The first matching rule wins:

    1. ``pnpm-workspace.yaml`` exists.
    2. A yarn marker (``.yarnrc.yml`` or ``packageManager: yarn@...``) and a
       ``workspaces`` field in ``package.json``.
    3. A ``workspaces`` field in ``package.json``.

    A ``workspaces`` field counts when it is an array or an object, even an
    empty one.
    """
    root = Path(cwd)

    if (root / PNPM_MARKER).is_file():
        return MonorepoContext(
            is_monorepo=True, type=MonorepoType.PNPM, root_path=str(root)
        )

    manifest = read_json_object(root / MANIFEST) or {}
    workspaces = manifest.get("workspaces")
    if not isinstance(workspaces, (list, dict)):
        return MonorepoContext(is_monorepo=False)

    package_manager = manifest.get("packageManager")
    is_yarn = (root / YARN_MARKER).is_file() or (
        isinstance(package_manager, str) and package_manager.startswith("yarn@")
    )
    if is_yarn:
        return MonorepoContext(
            is_monorepo=True,
            type=MonorepoType.YARN,
            root_path=str(root),
            workspace_pattern=first_workspace_pattern(workspaces),
        )

    return MonorepoContext(
        is_monorepo=True, type=MonorepoType.NPM, root_path=str(root)
    )


def first_workspace_pattern(workspaces: Any) -> Optional[str]:
    """First declared pattern of an array or ``{packages: [...]}`` field."""
    if isinstance(workspaces, dict):
        workspaces = workspaces.get("packages")
    if isinstance(workspaces, list) and workspaces and isinstance(workspaces[0], str):
        return workspaces[0]
    return None
