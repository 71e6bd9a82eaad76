"""Three-way merge classification and conflict synthesis."""

from collections.abc import Mapping
from typing import Final

from twig.repository._models import MergeAction

CONFLICT_START: Final = b"<<<<<<< HEAD\n"
CONFLICT_SEPARATOR: Final = b"=======\n"
CONFLICT_END: Final = b">>>>>>>\n"


def classify(
    split: str | None,
    head: str | None,
    other: str | None,
    *,
    conflict_on_identical_changes: bool = False,
) -> MergeAction:
    """Decide what a merge does with one path.

    Each argument is the blob id the path maps to in that commit, or None
    when the commit does not track the path.

    Args:
        split: Blob id at the split point.
        head: Blob id at the current head.
        other: Blob id at the head of the branch being merged.
        conflict_on_identical_changes: Treat both sides changing the path
            to the same content as a conflict.

    Returns:
        The action to apply to the working tree and staging area.
    """
    if split is None:
        if head is None:
            return MergeAction.TAKE_OTHER if other is not None else MergeAction.NONE
        if other is None or (head == other and not conflict_on_identical_changes):
            return MergeAction.KEEP_HEAD
        return MergeAction.CONFLICT

    head_changed = head != split
    other_changed = other != split

    if head is None and other is None:
        return MergeAction.NONE
    if other is None:
        return MergeAction.CONFLICT if head_changed else MergeAction.REMOVE
    if head is None:
        return MergeAction.CONFLICT if other_changed else MergeAction.NONE

    if not other_changed:
        return MergeAction.KEEP_HEAD
    if not head_changed:
        return MergeAction.TAKE_OTHER
    if head == other and not conflict_on_identical_changes:
        return MergeAction.KEEP_HEAD
    return MergeAction.CONFLICT


def plan_merge(
    split: Mapping[str, str],
    head: Mapping[str, str],
    other: Mapping[str, str],
    *,
    conflict_on_identical_changes: bool = False,
) -> dict[str, MergeAction]:
    """Classify every path tracked by any of the three commits.

    Args:
        split: Tracked mapping of the split point.
        head: Tracked mapping of the current head.
        other: Tracked mapping of the branch being merged.
        conflict_on_identical_changes: See `classify`.

    Returns:
        Path to action, in sorted path order.
    """
    paths = sorted(set(split) | set(head) | set(other))
    return {
        path: classify(
            split.get(path),
            head.get(path),
            other.get(path),
            conflict_on_identical_changes=conflict_on_identical_changes,
        )
        for path in paths
    }


def _as_block(content: bytes | None) -> bytes:
    if not content:
        return b""
    return content if content.endswith(b"\n") else content + b"\n"


def conflict_content(head: bytes | None, other: bytes | None) -> bytes:
    """Build the content of a conflicted file.

    A missing side contributes nothing between its markers. A side that
    does not end in a newline gets one so every marker starts a line.

    Example:
        >>> conflict_content(b"ours\\n", None)
        b'<<<<<<< HEAD\\nours\\n=======\\n>>>>>>>\\n'
    """
    return b"".join(
        (
            CONFLICT_START,
            _as_block(head),
            CONFLICT_SEPARATOR,
            _as_block(other),
            CONFLICT_END,
        )
    )
