"""twig repository engine.

This package implements the version-control core: a content-addressed
object store, the branch table and staging area, commit-graph traversal,
working-tree synchronization and three-way merging.

Classes:
    Repository: Handle owning every component; entry point for operations.
    ObjectStore: Protocol for blob and commit storage.
    MemoryObjectStore / FileObjectStore: Object store implementations.
    RefStore: Protocol for branches, active branch and staging persistence.
    MemoryRefStore / FileRefStore: Ref store implementations.
    WorkingTree: Protocol for working-tree access.
    MemoryWorkingTree / FileWorkingTree: Working tree implementations.
    StagingArea: Pending additions and removals.

Models:
    Commit: Immutable snapshot node.
    LogEntry: Commit paired with its id, as listed by log commands.
    RepoStatus: Status snapshot.
    MergeResult: Result of a merge.

Example:
    >>> from twig.repository import Repository
    >>> repo = Repository.open(Path.cwd())
    >>> print(repo.status().render())
"""

from twig.repository._graph import find_split_point, first_parent_chain, history
from twig.repository._merge import classify, conflict_content, plan_merge
from twig.repository._models import (
    EPOCH_TIMESTAMP,
    ROOT_MESSAGE,
    Commit,
    LogEntry,
    MergeAction,
    MergeOutcome,
    MergeResult,
    RepoStatus,
)
from twig.repository._refs import FileRefStore, MemoryRefStore, RefStore
from twig.repository._repository import Repository
from twig.repository._staging import NO_BLOB, StagingArea
from twig.repository._store import (
    FileObjectStore,
    MemoryObjectStore,
    ObjectStore,
    blob_id,
    commit_id,
    resolve_commit,
)
from twig.repository._worktree import (
    FileWorkingTree,
    MemoryWorkingTree,
    WorkingTree,
    normalize_path,
)

__all__ = [
    "EPOCH_TIMESTAMP",
    "NO_BLOB",
    "ROOT_MESSAGE",
    "Commit",
    "FileObjectStore",
    "FileRefStore",
    "FileWorkingTree",
    "LogEntry",
    "MemoryObjectStore",
    "MemoryRefStore",
    "MemoryWorkingTree",
    "MergeAction",
    "MergeOutcome",
    "MergeResult",
    "ObjectStore",
    "RefStore",
    "RepoStatus",
    "Repository",
    "StagingArea",
    "WorkingTree",
    "blob_id",
    "classify",
    "commit_id",
    "conflict_content",
    "find_split_point",
    "first_parent_chain",
    "history",
    "normalize_path",
    "plan_merge",
    "resolve_commit",
]
