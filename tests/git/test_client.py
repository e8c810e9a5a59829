"""Tests for the git client, with a fake runner and against real git."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from kaeter_ci.errors import GitCommandError
from kaeter_ci.git.client import GitClient
from kaeter_ci.git.diff import FileDiffer
from tests._fixtures.repo_builder import FakeRunner


def test_commit_message_uses_log_format(tmp_path: Path) -> None:
    runner = FakeRunner({("git", "log"): "[kaeter] message\n\nbody"})

    message = GitClient(runner=runner).commit_message(tmp_path, "abc123")

    assert message == "[kaeter] message\n\nbody"
    assert runner.commands() == [["git", "log", "-n", "1", "--pretty=format:%B", "abc123"]]


def test_top_level_strips_output(tmp_path: Path) -> None:
    runner = FakeRunner({("git", "rev-parse", "--show-toplevel"): f"{tmp_path}\n"})
    assert GitClient(runner=runner).top_level(tmp_path / "sub") == tmp_path


def test_missing_git_binary(tmp_path: Path) -> None:
    runner = FakeRunner({("git",): FileNotFoundError(2, "No such file", "git")})

    with pytest.raises(GitCommandError, match="executable not found"):
        GitClient(runner=runner).commit_message(tmp_path, "HEAD")


def _git(repo: Path, *args: str) -> str:
    completed = subprocess.run(
        ["git", *args], cwd=repo, check=True, text=True, capture_output=True
    )
    return completed.stdout.strip()


def _commit(repo: Path, relative: str, content: str, message: str) -> str:
    path = repo / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    _git(repo, "add", "-A")
    _git(repo, "commit", "-q", "-m", message)
    return _git(repo, "rev-parse", "HEAD")


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
def test_real_repository(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    _git(repo, "config", "user.email", "ci@example.com")
    _git(repo, "config", "user.name", "CI")
    first = _commit(repo, "README.md", "# Test Repo\n", "initial commit")
    (repo / "README.md").unlink()
    second = _commit(repo, "svc/main.go", "package main\n", "[unit][testing] add service")

    client = GitClient()
    files = FileDiffer().diff(repo, first, second)

    assert client.top_level(repo / "svc").resolve() == repo.resolve()
    assert client.commit_message(repo, second).strip() == "[unit][testing] add service"
    assert files.added == ("svc/main.go",)
    assert files.removed == ("README.md",)
    assert files.modified == ()
