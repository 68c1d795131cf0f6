"""
Finds the nearest ancestor of HEAD that is published on a remote.

A permalink must point at a commit the forge actually has, so starting from HEAD
we walk the ancestry graph breadth-first (following every parent of a merge) and
stop at the first commit that some remote tracking branch points at.
"""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, List, Optional, Set, Union

from .constants import DEFAULT_MAX_DEPTH

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchFrontierEntry:
    hash: str
    depth: int


@dataclass(frozen=True)
class LocatedCommit:
    hash: str
    remote_name: Optional[str]  # None when the branch name has no `<remote>/` prefix
    remote_branch: str
    depth: int = 0


class LocateFailureKind(Enum):
    NO_HEAD = "no_head"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class LocateFailure:
    kind: LocateFailureKind
    message: str


LocateResult = Union[LocatedCommit, LocateFailure]


def remote_name_of_branch(branch: str) -> Optional[str]:
    """`origin/feature/x` -> `origin`; None if there is no `/`."""
    remote, sep, _ = branch.partition("/")
    return remote if sep and remote else None


def find_nearest_published_commit(
    head: Optional[str],
    list_remote_branches: Callable[[str], List[str]],
    get_parents: Callable[[str], List[str]],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> LocateResult:
    """
    Breadth-first search from `head` for the closest commit a remote branch points at.

    Entries are dequeued in FIFO order, so depths never decrease and the first match
    is a shallowest one; ties go to whichever path was enqueued first (earlier parent
    at each merge). Paths are dropped once they reach `max_depth` or a root commit.

    `list_remote_branches` and `get_parents` are expected to return an empty list
    when their underlying query fails; such a commit simply yields no information.
    """
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")
    if not head:
        return LocateFailure(LocateFailureKind.NO_HEAD, "Not a git repository, or HEAD cannot be resolved.")

    queue: Deque[SearchFrontierEntry] = deque([SearchFrontierEntry(head, 0)])
    # Commits already enqueued; a commit reached again via another path is never shallower
    seen: Set[str] = {head}

    while queue:
        entry = queue.popleft()
        branches = list_remote_branches(entry.hash)
        if branches:
            branch = branches[0]
            logger.debug(
                "Found %s at depth %d on %s (candidates: %s)",
                entry.hash[:8], entry.depth, branch, ", ".join(branches),
            )
            return LocatedCommit(
                hash=entry.hash,
                remote_name=remote_name_of_branch(branch),
                remote_branch=branch,
                depth=entry.depth,
            )

        if entry.depth >= max_depth:
            logger.debug("Depth limit reached at %s", entry.hash[:8])
            continue

        parents = get_parents(entry.hash)
        if not parents:
            logger.debug("No parents for %s", entry.hash[:8])
            continue

        for parent in parents:
            if parent in seen:
                continue
            seen.add(parent)
            queue.append(SearchFrontierEntry(parent, entry.depth + 1))

    return LocateFailure(
        LocateFailureKind.EXHAUSTED,
        f"No remote branch head found within {max_depth} commits of HEAD.",
    )
