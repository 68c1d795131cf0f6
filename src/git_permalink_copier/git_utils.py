import logging
import subprocess
import sys
from pathlib import Path
from typing import Optional, List

from .constants import REMOTE_REFS_PREFIX, SSH_REMOTE_RE, HTTPS_REMOTE_RE

logger = logging.getLogger(__name__)


def _cmd_str(cmd: List[str]) -> str:
    return subprocess.list2cmdline(cmd)


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Returns the repo's root in the filesystem"""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            capture_output=True,
            text=True,
            check=True,
            cwd=cwd,
        )
        return Path(result.stdout.strip())
    except subprocess.CalledProcessError as e:
        stderr_output = e.stderr.strip() if e.stderr else "N/A"
        print(f"Error: Could not determine repository root. Command '{_cmd_str(e.cmd)}' failed (rc={e.returncode}). Stderr: '{stderr_output}'", file=sys.stderr)
        raise RuntimeError(f"Not in a git repository. Failed to run '{_cmd_str(e.cmd)}'.")
    except FileNotFoundError:
        raise RuntimeError("The 'git' executable was not found on PATH.")


def get_head_commit(repo_root: Optional[Path] = None) -> Optional[str]:
    """Resolves HEAD to a full commit hash, or None if there is no resolvable HEAD."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", "HEAD^{commit}"],
            capture_output=True,
            text=True,
            check=True,
            cwd=repo_root,
        )
    except subprocess.CalledProcessError as e:
        logger.debug("Could not resolve HEAD: '%s' failed (rc=%s)", _cmd_str(e.cmd), e.returncode)
        return None
    head = result.stdout.strip()
    return head or None


def get_remote_branches_at_commit(commit_hash: str, repo_root: Optional[Path] = None) -> List[str]:
    """
    Lists the remote tracking branches (e.g. `origin/main`) pointing exactly at a commit.

    `for-each-ref` sorts by refname, so the order is lexicographic.
    A failing command is treated the same as "no branches".
    """
    cmd = [
        "git",
        "for-each-ref",
        f"--points-at={commit_hash}",
        "--format=%(refname)",
        REMOTE_REFS_PREFIX,
    ]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=True, cwd=repo_root)
    except subprocess.CalledProcessError as e:
        stderr_output = e.stderr.strip() if e.stderr else "N/A"
        logger.debug("Branch query '%s' failed (rc=%s): %s", _cmd_str(cmd), e.returncode, stderr_output)
        return []

    branches = []
    prefix = REMOTE_REFS_PREFIX + "/"
    for line in result.stdout.splitlines():
        refname = line.strip()
        if not refname:
            continue
        if refname.startswith(prefix):
            refname = refname[len(prefix):]
        if refname.endswith("/HEAD"):
            continue
        branches.append(refname)
    return branches


def get_commit_parents(commit_hash: str, repo_root: Optional[Path] = None) -> List[str]:
    """Returns the parent hashes of a commit in parent order; empty for a root commit or on failure."""
    cmd = ["git", "log", "-1", "--format=%P", commit_hash]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=True, cwd=repo_root)
    except subprocess.CalledProcessError as e:
        stderr_output = e.stderr.strip() if e.stderr else "N/A"
        logger.debug("Parent query '%s' failed (rc=%s): %s", _cmd_str(cmd), e.returncode, stderr_output)
        return []
    return result.stdout.split()


def file_exists_at_commit(commit_hash: str, url_path: str, repo_root: Optional[Path] = None) -> bool:
    """Check if a file exists at a specific commit."""
    result = subprocess.run(
        ["git", "cat-file", "-e", f"{commit_hash}:{url_path}"],
        capture_output=True,
        cwd=repo_root,
    )
    return result.returncode == 0


def get_zero_context_diff(commit_hash: str, url_path: str, repo_root: Optional[Path] = None) -> Optional[str]:
    """
    Diffs a file as of `commit_hash` against its working-tree version, with no context lines.
    Returns the diff text (empty if identical), or None if the command failed.
    """
    cmd = ["git", "diff", "--no-color", "--no-ext-diff", "-U0", commit_hash, "--", url_path]
    try:
        # Changed lines come through in whatever encoding the file uses; only the ASCII hunk headers are read
        result = subprocess.run(
            cmd, capture_output=True, text=True, encoding="utf-8", errors="replace", check=True, cwd=repo_root
        )
    except subprocess.CalledProcessError as e:
        stderr_output = e.stderr.strip() if e.stderr else "N/A"
        print(f"Error: Failed to diff '{url_path}' against commit '{commit_hash}'. Command '{_cmd_str(e.cmd)}' failed (rc={e.returncode}). Stderr: '{stderr_output}'", file=sys.stderr)
        return None
    return result.stdout


def diff_command_line(commit_hash: str, url_path: str) -> str:
    """The diff command as it would be shown to the user."""
    return _cmd_str(["git", "diff", "-U0", commit_hash, "--", url_path])


def get_remote_url(remote_name: str, repo_root: Optional[Path] = None) -> str:
    """Get the URL of the named remote."""
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", remote_name],
            capture_output=True,
            text=True,
            check=True,
            cwd=repo_root,
        )

        remote_url = result.stdout.strip()
        if not remote_url:
            raise RuntimeError(f"Empty remote URL returned for '{remote_name}'")

        # We sometimes use the `insteadOf` directive to map to domains
        # that .ssh/config can recognize.  In those cases, we want to use
        # the URL as it was configured
        if not (SSH_REMOTE_RE.match(remote_url) or HTTPS_REMOTE_RE.match(remote_url)):
            result = subprocess.run(
                ["git", "config", "--get", f"remote.{remote_name}.url"],
                capture_output=True,
                text=True,
                check=True,
                cwd=repo_root,
            )
            remote_url = result.stdout.strip() or remote_url

        return remote_url
    except subprocess.CalledProcessError as e:
        stderr_output = e.stderr.strip() if e.stderr else "N/A"
        print(f"Error: Failed to get remote URL. Command '{_cmd_str(e.cmd)}' failed (rc={e.returncode}). Stderr: '{stderr_output}'", file=sys.stderr)
        raise RuntimeError(f"Remote '{remote_name}' is not configured.")


def get_repo_relative_path(file_path: Path, repo_root: Path) -> str:
    """Path of `file_path` relative to the repo root, with forward slashes."""
    absolute = file_path if file_path.is_absolute() else Path.cwd() / file_path
    # Symlinks in the final component are linked as named, not at their target
    resolved = absolute.parent.resolve() / absolute.name
    try:
        return resolved.relative_to(repo_root.resolve()).as_posix()
    except ValueError:
        raise RuntimeError(f"File '{file_path}' is not inside the repository at '{repo_root}'.")
