"""twig repository models.

This module defines the immutable commit record and the data structures
returned by repository operations.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, ClassVar, Final, Self

import pendulum
from pydantic import BaseModel, ConfigDict, Field

ROOT_MESSAGE: Final = "initial commit"
EPOCH_TIMESTAMP: Final = "1970-01-01T00:00:00Z"

_LOG_DATE_FORMAT: Final = "ddd MMM DD HH:mm:ss YYYY ZZ"


class Commit(BaseModel):
    """An immutable snapshot node in the commit graph.

    Attributes:
        message: The commit message.
        timestamp: ISO 8601 UTC timestamp of creation.
        tracked: Mapping of working-tree path to blob id.
        parent: First parent commit id, None only for the root commit.
        second_parent: Second parent commit id, set only on merge commits.
        branch: Active branch name recorded on merge commits.
        merged_branch: Merged branch name recorded on merge commits.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    message: str
    timestamp: str
    tracked: dict[str, str] = Field(default_factory=dict)
    parent: str | None = None
    second_parent: str | None = None
    branch: str | None = None
    merged_branch: str | None = None

    @classmethod
    def root(cls) -> Self:
        """Create the root commit shared by every repository."""
        return cls(message=ROOT_MESSAGE, timestamp=EPOCH_TIMESTAMP)

    @property
    def is_merge(self) -> bool:
        """Whether this commit has a second parent."""
        return self.second_parent is not None

    @property
    def parents(self) -> tuple[str, ...]:
        """Parent ids, first parent first."""
        return tuple(p for p in (self.parent, self.second_parent) if p is not None)

    def to_record(self) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
        """Return the JSON-compatible record the identifier is derived from."""
        return self.model_dump(mode="json")

    def formatted_date(self) -> str:
        """Render the timestamp as shown by `log` (e.g. Thu Jan 01 00:00:00 1970 +0000)."""
        moment = pendulum.parse(self.timestamp)
        return moment.format(_LOG_DATE_FORMAT)  # pyright: ignore[reportAttributeAccessIssue]


@dataclass(frozen=True, slots=True)
class LogEntry:
    """A commit paired with its identifier, as listed by log commands.

    Attributes:
        commit_id: The full commit identifier.
        commit: The commit record.
    """

    commit_id: str
    commit: Commit

    def render(self) -> str:
        """Render the entry in log format, including the trailing blank line."""
        lines = ["===", f"commit {self.commit_id}"]
        if self.commit.parent is not None and self.commit.second_parent is not None:
            lines.append(
                f"Merge: {self.commit.parent[:7]} {self.commit.second_parent[:7]}"
            )
        lines.append(f"Date: {self.commit.formatted_date()}")
        lines.append(self.commit.message)
        lines.append("")
        return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class RepoStatus:
    """Status snapshot of a twig repository.

    All collections are sorted.

    Attributes:
        active_branch: Name of the active branch.
        branches: Every branch name.
        staged: Paths staged for addition.
        removed: Paths staged for removal.
        modified: Tracked or staged paths whose working content differs.
        deleted: Tracked or staged paths missing from the working tree.
        untracked: Working paths neither tracked nor staged for addition.
    """

    active_branch: str
    branches: tuple[str, ...]
    staged: tuple[str, ...]
    removed: tuple[str, ...]
    modified: tuple[str, ...]
    deleted: tuple[str, ...]
    untracked: tuple[str, ...]

    def render(self) -> str:
        """Render the status report as printed by the `status` command."""
        unstaged = sorted(
            [f"{path} (modified)" for path in self.modified]
            + [f"{path} (deleted)" for path in self.deleted]
        )
        sections = [
            (
                "=== Branches ===",
                [
                    f"*{name}" if name == self.active_branch else name
                    for name in self.branches
                ],
            ),
            ("=== Staged Files ===", list(self.staged)),
            ("=== Removed Files ===", list(self.removed)),
            ("=== Modifications Not Staged For Commit ===", unstaged),
            ("=== Untracked Files ===", list(self.untracked)),
        ]
        blocks = ["\n".join([header, *entries]) for header, entries in sections]
        return "\n\n".join(blocks)


class MergeAction(StrEnum):
    """Per-path outcome of three-way classification."""

    KEEP_HEAD = "keep_head"
    TAKE_OTHER = "take_other"
    REMOVE = "remove"
    CONFLICT = "conflict"
    NONE = "none"


class MergeOutcome(StrEnum):
    """Overall outcome of a merge."""

    ANCESTOR = "ancestor"
    FAST_FORWARD = "fast_forward"
    MERGED = "merged"
    CONFLICTED = "conflicted"


@dataclass(frozen=True, slots=True)
class MergeResult:
    """Result of a merge operation.

    Attributes:
        outcome: What the merge did.
        split_point: Id of the split point of the two branches.
        commit_id: Id of the merge commit, or of the fast-forward target.
            None when the given branch was already an ancestor.
        conflicts: Paths that were written with conflict markers.
    """

    outcome: MergeOutcome
    split_point: str
    commit_id: str | None = None
    conflicts: frozenset[str] = frozenset()

    @property
    def message(self) -> str | None:
        """The user-facing report for this outcome, if any."""
        match self.outcome:
            case MergeOutcome.ANCESTOR:
                return "Given branch is an ancestor of the current branch."
            case MergeOutcome.FAST_FORWARD:
                return "Current branch fast-forwarded."
            case MergeOutcome.CONFLICTED:
                return "Encountered a merge conflict."
            case _:
                return None
