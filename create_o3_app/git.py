"""Git repository initialisation for freshly generated modules."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from create_o3_app.errors import GitError
from create_o3_app.logger import Logger
from create_o3_app.utils import run_command

INITIAL_COMMIT_MESSAGE = "Initial commit: scaffold O3 module"


async def _git(args: list[str], cwd: Path) -> str:
    returncode, stdout, stderr = await run_command(["git", *args], cwd=cwd, timeout=60)
    if returncode != 0:
        raise GitError(
            stderr or stdout or f"git {args[0]} exited with {returncode}",
            command=f"git {' '.join(args)}",
        )
    return stdout


async def is_git_repository(path: str | Path) -> bool:
    returncode, stdout, _ = await run_command(
        ["git", "rev-parse", "--is-inside-work-tree"], cwd=path, timeout=30
    )
    return returncode == 0 and stdout == "true"


async def initialize_git(path: str | Path, logger: Optional[Logger] = None) -> bool:
    """Run ``git init`` and create the initial commit in *path*.

    Does nothing when *path* is already inside a work tree.  Any git
    failure is reported as a warning; returns ``True`` only when a new
    repository was created and committed.
    """
    logger = logger or Logger()
    project = Path(path)
    try:
        if await is_git_repository(project):
            logger.debug(f"{project} is already a git repository")
            return False
        await _git(["init"], project)
        await _git(["add", "."], project)
        await _git(["commit", "-m", INITIAL_COMMIT_MESSAGE], project)
    except GitError as exc:
        logger.warn("Failed to initialize git repository")
        logger.debug(f"{exc.command}: {exc.message}")
        return False
    logger.success("Git repository initialized")
    return True
