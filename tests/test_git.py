"""Tests for git initialisation (create_o3_app.git)."""

from __future__ import annotations

import shutil
from unittest.mock import AsyncMock, call, patch

import pytest

from create_o3_app.git import INITIAL_COMMIT_MESSAGE, initialize_git, is_git_repository

pytestmark = pytest.mark.unit

RUN = "create_o3_app.git.run_command"


class TestInitializeGit:
    @pytest.mark.asyncio
    async def test_runs_init_add_commit(self, tmp_path, logger):
        responses = [(128, "", "not a repo"), (0, "", ""), (0, "", ""), (0, "", "")]
        with patch(RUN, new_callable=AsyncMock, side_effect=responses) as run:
            assert await initialize_git(tmp_path, logger=logger) is True
        commands = [c.args[0] for c in run.await_args_list]
        assert commands == [
            ["git", "rev-parse", "--is-inside-work-tree"],
            ["git", "init"],
            ["git", "add", "."],
            ["git", "commit", "-m", INITIAL_COMMIT_MESSAGE],
        ]
        assert "Git repository initialized" in logger.out

    @pytest.mark.asyncio
    async def test_skips_existing_repository(self, tmp_path, logger):
        with patch(RUN, new_callable=AsyncMock, return_value=(0, "true", "")) as run:
            assert await initialize_git(tmp_path, logger=logger) is False
        assert run.await_count == 1

    @pytest.mark.asyncio
    async def test_failure_is_a_warning(self, tmp_path, logger):
        responses = [(128, "", ""), (0, "", ""), (0, "", ""), (1, "", "Author identity unknown")]
        with patch(RUN, new_callable=AsyncMock, side_effect=responses):
            assert await initialize_git(tmp_path, logger=logger) is False
        assert "Failed to initialize git repository" in logger.err
        assert "Author identity unknown" in logger.out

    @pytest.mark.asyncio
    async def test_missing_git_binary(self, tmp_path, logger):
        responses = [(127, "", "Command not found: git"), (127, "", "Command not found: git")]
        with patch(RUN, new_callable=AsyncMock, side_effect=responses):
            assert await initialize_git(tmp_path, logger=logger) is False
        assert "Failed to initialize git repository" in logger.err

    @pytest.mark.asyncio
    async def test_is_git_repository_false_for_plain_dir(self, tmp_path):
        with patch(RUN, new_callable=AsyncMock, return_value=(128, "", "fatal")):
            assert await is_git_repository(tmp_path) is False


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
class TestRealGit:
    @pytest.mark.asyncio
    async def test_creates_repository(self, tmp_path, logger, monkeypatch):
        monkeypatch.setenv("GIT_AUTHOR_NAME", "Test")
        monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.org")
        monkeypatch.setenv("GIT_COMMITTER_NAME", "Test")
        monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.org")
        monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(tmp_path / "gitconfig"))
        project = tmp_path / "billing"
        project.mkdir()
        (project / "README.md").write_text("# billing\n", encoding="utf-8")
        await initialize_git(project, logger=logger)
        assert (project / ".git").is_dir()
