"""Package manager detection and dependency installation."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from create_o3_app.errors import PackageManagerError
from create_o3_app.logger import Logger
from create_o3_app.utils import read_json_object, run_command

LOCKFILES: tuple[tuple[str, str], ...] = (
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("package-lock.json", "npm"),
)


def detect_package_manager(cwd: str | Path) -> str:
    """Pick ``pnpm``, ``yarn``, or ``npm`` for *cwd*.

    Lockfiles decide first; otherwise a ``packageManager`` field starting
    with ``yarn`` selects yarn, and npm is the fallback.
    """
    root = Path(cwd)
    for lockfile, manager in LOCKFILES:
        if (root / lockfile).is_file():
            return manager

    manifest = read_json_object(root / "package.json") or {}
    declared = manifest.get("packageManager")
    if isinstance(declared, str) and declared.startswith("yarn"):
        return "yarn"
    return "npm"


async def install_dependencies(
    path: str | Path,
    logger: Optional[Logger] = None,
    timeout: int = 600,
) -> bool:
    """Run ``<pm> install`` in *path*; failures are warnings, not errors."""
    logger = logger or Logger()
    manager = detect_package_manager(path)
    command = [manager, "install"]
    logger.info(f"Installing dependencies with {manager}...")
    try:
        returncode, stdout, stderr = await run_command(command, cwd=path, timeout=timeout)
        if returncode != 0:
            raise PackageManagerError(
                stderr or stdout or f"{manager} install exited with {returncode}",
                package_manager=manager,
                command=" ".join(command),
            )
    except PackageManagerError as exc:
        logger.warn(f"Failed to install dependencies with {manager}")
        logger.info("You can install dependencies manually later.")
        logger.debug(f"{exc.command}: {exc.message}")
        return False
    logger.success(f"Dependencies installed with {manager}")
    return True
