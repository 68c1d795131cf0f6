from dataclasses import dataclass
from typing import List

from .constants import DIFF_HUNK_HEADER_RE


@dataclass(frozen=True)
class DiffHunk:
    """
    One hunk of a zero-context unified diff.

    `*_s` is the line just before the hunk's span (its anchor), `*_c` the number of lines
    on that side and `*_e` the last line of the span. A side with a count of 0 is a single
    anchor point, so `s == e`.
    """
    old_s: int
    old_c: int
    old_e: int
    new_s: int
    new_c: int
    new_e: int


def _side(start: int, count: int):
    s = start if count == 0 else start - 1
    e = start + count - (0 if count == 0 else 1)
    return s, e


def parse_hunk_header(header: str) -> DiffHunk:
    match = DIFF_HUNK_HEADER_RE.match(header)
    if not match:
        raise ValueError(f"Not a diff hunk header: {header!r}")
    old_start, old_count, new_start, new_count = match.groups()
    old_c = int(old_count) if old_count is not None else 1
    new_c = int(new_count) if new_count is not None else 1
    old_s, old_e = _side(int(old_start), old_c)
    new_s, new_e = _side(int(new_start), new_c)
    return DiffHunk(old_s=old_s, old_c=old_c, old_e=old_e, new_s=new_s, new_c=new_c, new_e=new_e)


def parse_diff_hunks(diff_text: str) -> List[DiffHunk]:
    """
    Parses the hunk headers of a `-U0` diff, in file order. An empty list means no changes.

    Only newlines end a line; form feeds and other breaks can appear inside changed lines.
    """
    return [
        parse_hunk_header(line)
        for line in diff_text.split("\n")
        if DIFF_HUNK_HEADER_RE.match(line)
    ]
