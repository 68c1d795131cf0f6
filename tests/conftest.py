"""Pytest configuration and shared fixtures."""

import subprocess
from pathlib import Path

import pytest

# ============================================================================
# Git Repository Helpers
# ============================================================================


def run_git(path: Path, *args: str) -> str:
    """Run a git command in `path` and return its stripped stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=path,
        check=True,
        capture_output=True,
        text=True,
        timeout=10,
    )
    return result.stdout.strip()


def init_git_repo(
    path: Path,
    user_name: str = "Test User",
    user_email: str = "test@example.com",
) -> None:
    """Initialize a git repository with user configuration."""
    run_git(path, "init")
    run_git(path, "config", "user.name", user_name)
    run_git(path, "config", "user.email", user_email)
    run_git(path, "config", "commit.gpgsign", "false")


def commit_file(path: Path, rel_path: str, content: str, message: str = "Update") -> str:
    """Write a file, commit it, and return the new commit hash."""
    full_path = path / rel_path
    full_path.parent.mkdir(parents=True, exist_ok=True)
    full_path.write_text(content)
    run_git(path, "add", rel_path)
    run_git(path, "commit", "-m", message)
    return run_git(path, "rev-parse", "HEAD")


def publish(path: Path, commit_hash: str, branch: str = "origin/main") -> None:
    """Make a remote tracking branch point at `commit_hash`, as a fetch would."""
    run_git(path, "update-ref", f"refs/remotes/{branch}", commit_hash)


def numbered_lines(count: int, prefix: str = "line") -> str:
    return "".join(f"{prefix} {i}\n" for i in range(1, count + 1))


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """An empty git repository with an `origin` remote configured (never contacted)."""
    repo = tmp_path / "repo"
    repo.mkdir()
    init_git_repo(repo)
    run_git(repo, "remote", "add", "origin", "git@github.com:octo-org/octo-repo.git")
    return repo
