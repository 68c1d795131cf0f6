"""
Maps line numbers of the working-tree version of a file back to the same lines
as of an older commit, using the hunks of a zero-context diff between the two.

Lines inside a hunk that only inserts text (old count of 0) have no counterpart in
the old file. They are carried as `AnchorOnly` (the old line just before the
insertion) and settled once both ends of the range are known, in `reconcile`.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from .diff_hunks import DiffHunk, parse_diff_hunks

logger = logging.getLogger(__name__)


class PositionKind(Enum):
    IN_HUNK = "in_hunk"
    BETWEEN = "between"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class HunkPosition:
    kind: PositionKind
    hunk1: Optional[DiffHunk] = None  # enclosing hunk, or nearest preceding one
    hunk2: Optional[DiffHunk] = None  # nearest following hunk (informational)


@dataclass(frozen=True)
class ExactLine:
    line: int


@dataclass(frozen=True)
class AnchorOnly:
    anchor: int


OldLine = Union[ExactLine, AnchorOnly]


@dataclass(frozen=True)
class TranslatedRange:
    start: int
    end: int


class TranslationFailureKind(Enum):
    NEW_FILE = "new_file"
    DIFF_FAILED = "diff_failed"


@dataclass(frozen=True)
class TranslationFailure:
    kind: TranslationFailureKind
    message: str
    command: Optional[str] = None


TranslationResult = Union[TranslatedRange, TranslationFailure]


def find_hunk_position(line: int, hunks: List[DiffHunk]) -> HunkPosition:
    """Classifies a new-file line as inside a hunk or between two (possibly absent) hunks."""
    if not hunks:
        return HunkPosition(PositionKind.BETWEEN)

    if line <= hunks[0].new_s:
        return HunkPosition(PositionKind.BETWEEN, None, hunks[0])

    for i, hunk in enumerate(hunks):
        if hunk.new_s < line <= hunk.new_e:
            return HunkPosition(PositionKind.IN_HUNK, hunk)
        following = hunks[i + 1] if i + 1 < len(hunks) else None
        if following is None:
            if line > hunk.new_e:
                return HunkPosition(PositionKind.BETWEEN, hunk, None)
        elif hunk.new_e < line <= following.new_s:
            return HunkPosition(PositionKind.BETWEEN, hunk, following)

    return HunkPosition(PositionKind.UNKNOWN)


def rectify_line(line: int, position: HunkPosition, is_start: bool) -> OldLine:
    """Old-file equivalent of one endpoint of a new-file range."""
    hunk = position.hunk1
    if position.kind is PositionKind.IN_HUNK and hunk is not None:
        # Start snaps to the first old line of the hunk, end to the last one
        if hunk.old_c == 0:
            return AnchorOnly(hunk.old_s if is_start else hunk.old_e)
        return ExactLine(hunk.old_s + 1 if is_start else hunk.old_e)

    if position.kind is PositionKind.BETWEEN and hunk is not None:
        return ExactLine(hunk.old_e + (line - hunk.new_e))

    # Before the first hunk, unchanged file, or unclassifiable
    return ExactLine(line)


def reconcile(start: OldLine, end: OldLine) -> Tuple[int, int]:
    """
    Turns the two translated endpoints into concrete old-file line numbers.

    If both ends fall inside insertions the range can come out inverted
    (start > end); that result is returned as is.
    """
    if isinstance(start, AnchorOnly) and isinstance(end, AnchorOnly):
        if start.anchor == end.anchor:
            # Line numbers are 1-based; an insertion at the top of the file has no line 0
            line = start.anchor or 1
            return line, line
        return start.anchor + 1, end.anchor
    if isinstance(start, AnchorOnly):
        return start.anchor + 1, end.line
    if isinstance(end, AnchorOnly):
        return start.line, end.anchor
    return start.line, end.line


def translate_hunks(line_start: int, line_end: int, hunks: List[DiffHunk]) -> TranslatedRange:
    if not hunks:
        return TranslatedRange(line_start, line_end)

    start_pos = find_hunk_position(line_start, hunks)
    end_pos = find_hunk_position(line_end, hunks)
    if PositionKind.UNKNOWN in (start_pos.kind, end_pos.kind):
        logger.warning("Could not place lines %d-%d among the diff hunks; keeping them as is", line_start, line_end)

    start, end = reconcile(
        rectify_line(line_start, start_pos, is_start=True),
        rectify_line(line_end, end_pos, is_start=False),
    )
    return TranslatedRange(start, end)


def translate_line_range(
    commit_hash: str,
    url_path: str,
    line_start: int,
    line_end: int,
    file_exists_at_commit: Callable[[str, str], bool],
    get_diff: Callable[[str, str], Optional[str]],
    describe_diff_command: Optional[Callable[[str, str], str]] = None,
) -> TranslationResult:
    """
    Translates `line_start`-`line_end` of the working-tree `url_path` to the file as of `commit_hash`.

    `get_diff` returns the `-U0` diff text of the commit's version against the working tree,
    or None when the diff command itself failed.
    """
    if line_start > line_end:
        raise ValueError(f"Invalid line range {line_start}-{line_end}")

    if not file_exists_at_commit(commit_hash, url_path):
        return TranslationFailure(
            TranslationFailureKind.NEW_FILE,
            f"'{url_path}' does not exist at commit {commit_hash[:8]}; it is a new file, so no line mapping is possible.",
        )

    diff_text = get_diff(commit_hash, url_path)
    if diff_text is None:
        command = describe_diff_command(commit_hash, url_path) if describe_diff_command else None
        return TranslationFailure(
            TranslationFailureKind.DIFF_FAILED,
            f"Could not diff '{url_path}' against commit {commit_hash[:8]}.",
            command,
        )

    hunks = parse_diff_hunks(diff_text)
    logger.debug("%d hunk(s) between %s and the working tree", len(hunks), commit_hash[:8])
    translated = translate_hunks(line_start, line_end, hunks)
    logger.debug("Lines %d-%d map to %d-%d", line_start, line_end, translated.start, translated.end)
    return translated
