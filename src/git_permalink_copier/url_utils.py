from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

from .constants import SSH_REMOTE_RE, HTTPS_REMOTE_RE


@dataclass(frozen=True)
class RemoteInfo:
    host: str
    owner: str
    repo: str

    @property
    def web_url(self) -> str:
        return f"https://{self.host}/{self.owner}/{self.repo}"


def parse_remote_url(remote_url: str) -> Optional[RemoteInfo]:
    """
    Extracts host/owner/repo from a remote URL.
    Handles `git@host:owner/repo[.git]` and `https://host/owner/repo[.git]`.
    Returns None for any other shape.
    """
    url = remote_url.strip()
    for pattern in (SSH_REMOTE_RE, HTTPS_REMOTE_RE):
        match = pattern.match(url)
        if match:
            host, owner, repo = match.groups()
            if host and owner and repo:
                return RemoteInfo(host=host, owner=owner, repo=repo)
    return None


def update_url_with_line_numbers(base_url: str, line_start: Optional[int], line_end: Optional[int]) -> str:
    """Updates a given URL with new line number fragments, removing old ones.
    """
    url_no_frag = base_url.split('#')[0]
    if line_start is not None and line_start > 0:
        if line_end is not None and line_end != line_start:
            return f"{url_no_frag}#L{line_start}-L{line_end}"
        return f"{url_no_frag}#L{line_start}"
    return url_no_frag  # Whole file, or the fragment was meant to be cleared.


def build_permalink(
    remote: RemoteInfo,
    commit_hash: str,
    url_path: str,
    line_start: Optional[int] = None,
    line_end: Optional[int] = None,
) -> str:
    """
    Builds a blob permalink of the form
    `https://host/owner/repo/blob/commit_hash/url_path#Lline_start-Lline_end`.
    """
    base_url = f"{remote.web_url}/blob/{commit_hash}/{quote(url_path)}"
    return update_url_with_line_numbers(base_url, line_start, line_end)
