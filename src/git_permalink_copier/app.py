import logging
from functools import partial
from pathlib import Path
from typing import Optional

from . import git_utils
from .clipboard import copy_to_clipboard
from .commit_locator import LocateFailure, LocatedCommit, find_nearest_published_commit
from .global_prefs import GlobalPreferences
from .line_translator import TranslationFailure, TranslationFailureKind, translate_line_range
from .url_utils import build_permalink, parse_remote_url
from .web_utils import check_permalink_resolves, open_url_in_browser

logger = logging.getLogger(__name__)


class PermalinkError(RuntimeError):
    """A condition that stops the permalink from being produced, with a user-facing message."""


class NewFileError(PermalinkError):
    pass


class PermalinkApp:
    def __init__(self, global_prefs: GlobalPreferences, cwd: Optional[Path] = None):
        self.global_prefs = global_prefs
        self.repo_root = git_utils.get_repo_root(cwd)

    def locate_commit(self) -> LocatedCommit:
        head = git_utils.get_head_commit(self.repo_root)
        result = find_nearest_published_commit(
            head,
            list_remote_branches=partial(git_utils.get_remote_branches_at_commit, repo_root=self.repo_root),
            get_parents=partial(git_utils.get_commit_parents, repo_root=self.repo_root),
            max_depth=self.global_prefs.max_depth,
        )
        if isinstance(result, LocateFailure):
            raise PermalinkError(result.message)
        logger.debug(
            "Using %s (%d commit(s) behind HEAD) on %s", result.hash[:8], result.depth, result.remote_branch
        )
        return result

    def translate_lines(self, commit_hash: str, url_path: str, line_start: int, line_end: int):
        result = translate_line_range(
            commit_hash,
            url_path,
            line_start,
            line_end,
            file_exists_at_commit=partial(git_utils.file_exists_at_commit, repo_root=self.repo_root),
            get_diff=partial(git_utils.get_zero_context_diff, repo_root=self.repo_root),
            describe_diff_command=git_utils.diff_command_line,
        )
        if isinstance(result, TranslationFailure):
            if result.kind is TranslationFailureKind.NEW_FILE:
                raise NewFileError(result.message)
            detail = f" Command: '{result.command}'." if result.command else ""
            raise PermalinkError(result.message + detail)
        return result.start, result.end

    def build_link(self, file_path: Path, line_start: Optional[int] = None, line_end: Optional[int] = None) -> str:
        """Resolves the permalink for `file_path` (whole file when `line_start` is None)."""
        if line_start is not None:
            line_end = line_start if line_end is None else line_end
            if line_start < 1 or line_end < line_start:
                raise PermalinkError(f"Invalid line range {line_start}-{line_end}.")

        url_path = git_utils.get_repo_relative_path(file_path, self.repo_root)
        located = self.locate_commit()

        if located.remote_name is None:
            raise PermalinkError(f"Cannot tell which remote branch '{located.remote_branch}' belongs to.")
        remote_url = git_utils.get_remote_url(located.remote_name, self.repo_root)
        remote = parse_remote_url(remote_url)
        if remote is None:
            raise PermalinkError(f"Could not parse owner/repo from remote URL: {remote_url}")

        if line_start is not None:
            line_start, line_end = self.translate_lines(located.hash, url_path, line_start, line_end)
        return build_permalink(remote, located.hash, url_path, line_start, line_end)

    def run(self, file_path: Path, line_start: Optional[int] = None, line_end: Optional[int] = None) -> str:
        link = self.build_link(file_path, line_start, line_end)
        print(link)

        if self.global_prefs.verify and check_permalink_resolves(link):
            print("✅ Link resolves on the remote")
        if self.global_prefs.copy_to_clipboard:
            if copy_to_clipboard(link):
                print("📋 Copied to clipboard")
            else:
                print("⚠️ Could not copy to clipboard; copy the link above manually.")
        if self.global_prefs.open_in_browser:
            open_url_in_browser(link)
        return link
