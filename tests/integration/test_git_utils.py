"""Integration tests for the git command wrappers.

These tests create real git repositories; remote branches are simulated with
`git update-ref refs/remotes/...`, so no network access is needed.
"""

from pathlib import Path

import pytest

from git_permalink_copier import git_utils

from conftest import commit_file, numbered_lines, publish, run_git


def test_get_repo_root(git_repo: Path):
    (git_repo / "sub").mkdir()
    assert git_utils.get_repo_root(git_repo / "sub").resolve() == git_repo.resolve()


def test_get_repo_root_outside_repo(tmp_path: Path):
    outside = tmp_path / "not_a_repo"
    outside.mkdir()
    with pytest.raises(RuntimeError, match="Not in a git repository"):
        git_utils.get_repo_root(outside)


def test_head_of_empty_repo_is_none(git_repo: Path):
    assert git_utils.get_head_commit(git_repo) is None


def test_head_commit(git_repo: Path):
    commit = commit_file(git_repo, "a.txt", "a\n")
    assert git_utils.get_head_commit(git_repo) == commit


def test_remote_branches_at_commit(git_repo: Path):
    first = commit_file(git_repo, "a.txt", "a\n")
    second = commit_file(git_repo, "a.txt", "b\n")
    publish(git_repo, first, "origin/main")
    publish(git_repo, first, "fork/main")
    run_git(git_repo, "symbolic-ref", "refs/remotes/origin/HEAD", "refs/remotes/origin/main")

    assert git_utils.get_remote_branches_at_commit(first, git_repo) == ["fork/main", "origin/main"]
    assert git_utils.get_remote_branches_at_commit(second, git_repo) == []


def test_remote_branches_for_bad_commit_is_empty(git_repo: Path):
    commit_file(git_repo, "a.txt", "a\n")
    assert git_utils.get_remote_branches_at_commit("not-a-commit", git_repo) == []


def test_commit_parents(git_repo: Path):
    root = commit_file(git_repo, "a.txt", "a\n")
    main_branch = run_git(git_repo, "rev-parse", "--abbrev-ref", "HEAD")
    child = commit_file(git_repo, "a.txt", "b\n")
    run_git(git_repo, "checkout", "-q", "-b", "side", root)
    side = commit_file(git_repo, "b.txt", "side\n")
    run_git(git_repo, "checkout", "-q", main_branch)
    run_git(git_repo, "merge", "-q", "--no-ff", "-m", "Merge side", "side")
    merge = git_utils.get_head_commit(git_repo)

    assert git_utils.get_commit_parents(root, git_repo) == []
    assert git_utils.get_commit_parents(child, git_repo) == [root]
    assert git_utils.get_commit_parents(merge, git_repo) == [child, side]
    assert git_utils.get_commit_parents("not-a-commit", git_repo) == []


def test_file_exists_at_commit(git_repo: Path):
    first = commit_file(git_repo, "a.txt", "a\n")
    commit_file(git_repo, "dir/b.txt", "b\n")
    assert git_utils.file_exists_at_commit(first, "a.txt", git_repo)
    assert not git_utils.file_exists_at_commit(first, "dir/b.txt", git_repo)


def test_zero_context_diff_against_working_tree(git_repo: Path):
    commit = commit_file(git_repo, "a.txt", numbered_lines(10))
    lines = numbered_lines(10).splitlines(keepends=True)
    del lines[2]
    lines.insert(6, "new line\n")
    (git_repo / "a.txt").write_text("".join(lines))

    diff = git_utils.get_zero_context_diff(commit, "a.txt", git_repo)
    assert "@@ -3 +2,0 @@" in diff
    assert "@@ -7,0 +7 @@" in diff


def test_zero_context_diff_unchanged_is_empty(git_repo: Path):
    commit = commit_file(git_repo, "a.txt", "a\n")
    assert git_utils.get_zero_context_diff(commit, "a.txt", git_repo) == ""


def test_zero_context_diff_failure_is_none(git_repo: Path):
    commit_file(git_repo, "a.txt", "a\n")
    assert git_utils.get_zero_context_diff("0" * 40, "a.txt", git_repo) is None


def test_get_remote_url(git_repo: Path):
    assert git_utils.get_remote_url("origin", git_repo) == "git@github.com:octo-org/octo-repo.git"
    with pytest.raises(RuntimeError, match="not configured"):
        git_utils.get_remote_url("nowhere", git_repo)


def test_repo_relative_path(git_repo: Path):
    path = git_repo / "src" / "app.py"
    assert git_utils.get_repo_relative_path(path, git_repo) == "src/app.py"
    with pytest.raises(RuntimeError, match="not inside the repository"):
        git_utils.get_repo_relative_path(git_repo.parent / "elsewhere.py", git_repo)


def test_zero_context_diff_of_latin1_file(git_repo: Path):
    (git_repo / "menu.txt").write_bytes(b"caf\xe9\nb\nc\n")
    run_git(git_repo, "add", "menu.txt")
    run_git(git_repo, "commit", "-m", "Add menu")
    commit = run_git(git_repo, "rev-parse", "HEAD")
    (git_repo / "menu.txt").write_bytes(b"new\ncaf\xe9 au lait\nb\nc\n")

    diff = git_utils.get_zero_context_diff(commit, "menu.txt", git_repo)
    assert "@@ -1 +1,2 @@" in diff


def test_repo_relative_path_keeps_symlink_name(git_repo: Path):
    (git_repo / "real").mkdir()
    (git_repo / "real" / "target.txt").write_text("t\n")
    (git_repo / "alias.txt").symlink_to(git_repo / "real" / "target.txt")
    assert git_utils.get_repo_relative_path(git_repo / "alias.txt", git_repo) == "alias.txt"


def test_repo_relative_path_through_symlinked_directory(git_repo: Path, tmp_path: Path):
    (git_repo / "src").mkdir()
    shortcut = tmp_path / "shortcut"
    shortcut.symlink_to(git_repo / "src")
    assert git_utils.get_repo_relative_path(shortcut / "app.py", git_repo) == "src/app.py"
