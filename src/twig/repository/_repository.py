# ruff: noqa: TC003  # Path needed at runtime for method signatures
"""twig repository handle.

The Repository owns an object store, a ref store and a working tree and
implements every version-control operation on top of them. There is no
module-level state: callers open a handle and pass it around.
"""

import re
from pathlib import Path
from typing import Final, Self

import pendulum
from structlog.typing import FilteringBoundLogger

from twig.config import BRANCH_NAME_PATTERN, Config
from twig.exceptions import (
    ObjectNotFoundError,
    PreconditionError,
    RepositoryExistsError,
    RepositoryNotInitializedError,
    UntrackedFileError,
    UserInputError,
)
from twig.repository._graph import find_split_point, first_parent_chain
from twig.repository._merge import conflict_content, plan_merge
from twig.repository._models import (
    Commit,
    LogEntry,
    MergeAction,
    MergeOutcome,
    MergeResult,
    RepoStatus,
)
from twig.repository._refs import FileRefStore, MemoryRefStore, RefStore
from twig.repository._staging import StagingArea
from twig.repository._store import (
    FileObjectStore,
    MemoryObjectStore,
    ObjectStore,
    blob_id,
    resolve_commit,
)
from twig.repository._worktree import (
    FileWorkingTree,
    MemoryWorkingTree,
    WorkingTree,
    normalize_path,
)
from twig.utils import create_null_logger, get_twig_dir, is_initialized

_BRANCH_NAME: Final = re.compile(BRANCH_NAME_PATTERN)


def _now() -> str:
    return pendulum.now("UTC").to_iso8601_string()


class Repository:
    """A twig repository: object store, branch table, index and working tree.

    Create a new repository with `init()` (on disk) or `in_memory()`, and
    open an existing one with `open()`. Every operation validates its
    preconditions before writing anything; a failed precondition raises
    a `TwigError` subclass and leaves the repository untouched.

    Example:
        >>> repo = Repository.in_memory(files={"a.txt": b"hello\\n"})
        >>> repo.add("a.txt")
        >>> commit_id = repo.commit("add a")
        >>> repo.head_commit().tracked["a.txt"] == blob_id("a.txt", b"hello\\n")
        True
    """

    __slots__: Final = ("_config", "_logger", "_refs", "_root", "_store", "_worktree")
    _config: Config
    _logger: FilteringBoundLogger
    _refs: RefStore
    _root: Path | None
    _store: ObjectStore
    _worktree: WorkingTree

    def __init__(
        self,
        *,
        store: ObjectStore,
        refs: RefStore,
        worktree: WorkingTree,
        config: Config | None = None,
        logger: FilteringBoundLogger | None = None,
        root: Path | None = None,
    ) -> None:
        """Assemble a repository from its components.

        Prefer the `init()`, `open()` and `in_memory()` factories.

        Args:
            store: Object store holding blobs and commits.
            refs: Ref store holding branches, active branch and staging.
            worktree: The working tree to synchronize.
            config: Configuration; defaults are used when None.
            logger: Structured logger; events are discarded when None.
            root: Worktree root directory for on-disk repositories.
        """
        self._store = store
        self._refs = refs
        self._worktree = worktree
        self._config = config if config is not None else Config.from_dict({})
        self._logger = logger if logger is not None else create_null_logger()
        self._root = root

    # =========================================================================
    # Factories
    # =========================================================================

    @classmethod
    def init(
        cls,
        root: Path,
        *,
        config: Config | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> Self:
        """Create a new on-disk repository in a directory.

        Creates `.twig/`, stores the root commit and points the default
        branch at it.

        Args:
            root: The worktree root directory.
            config: Configuration; defaults are used when None.
            logger: Structured logger.

        Returns:
            The new repository.

        Raises:
            RepositoryExistsError: If `root` already contains a repository.
        """
        twig_dir = get_twig_dir(root)
        if twig_dir.exists():
            raise RepositoryExistsError(path=twig_dir)

        store = FileObjectStore(twig_dir)
        store.initialize()
        refs = FileRefStore(twig_dir)
        refs.initialize()

        repo = cls(
            store=store,
            refs=refs,
            worktree=FileWorkingTree(root),
            config=config,
            logger=logger,
            root=root,
        )
        repo._initialize()
        return repo

    @classmethod
    def open(
        cls,
        root: Path,
        *,
        config: Config | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> Self:
        """Open an existing on-disk repository.

        Args:
            root: The worktree root directory.
            config: Configuration; defaults are used when None.
            logger: Structured logger.

        Returns:
            The repository.

        Raises:
            RepositoryNotInitializedError: If `root` has no `.twig/` directory.
        """
        if not is_initialized(root):
            raise RepositoryNotInitializedError(path=root)

        twig_dir = get_twig_dir(root)
        return cls(
            store=FileObjectStore(twig_dir),
            refs=FileRefStore(twig_dir),
            worktree=FileWorkingTree(root),
            config=config,
            logger=logger,
            root=root,
        )

    @classmethod
    def in_memory(
        cls,
        *,
        files: dict[str, bytes] | None = None,
        config: Config | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> Self:
        """Create a new repository held entirely in memory.

        Args:
            files: Initial working-tree content, path to bytes.
            config: Configuration; defaults are used when None.
            logger: Structured logger.

        Returns:
            The new, initialized repository.
        """
        repo = cls(
            store=MemoryObjectStore(),
            refs=MemoryRefStore(),
            worktree=MemoryWorkingTree(files=dict(files or {})),
            config=config,
            logger=logger,
        )
        repo._initialize()
        return repo

    def _initialize(self) -> None:
        root_id = self._store.put_commit(Commit.root())
        branch = self._config.repository.default_branch
        self._refs.set_branch(branch, root_id)
        self._refs.set_active_branch(branch)
        self._refs.save_staging(StagingArea())
        self._logger.info("repository_initialized", branch=branch, root_commit=root_id)

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def root(self) -> Path | None:
        """Worktree root directory, or None for in-memory repositories."""
        return self._root

    @property
    def store(self) -> ObjectStore:
        return self._store

    @property
    def refs(self) -> RefStore:
        return self._refs

    @property
    def worktree(self) -> WorkingTree:
        return self._worktree

    @property
    def config(self) -> Config:
        return self._config

    @property
    def active_branch(self) -> str:
        """Name of the active branch."""
        return self._refs.get_active_branch()

    @property
    def head_id(self) -> str:
        """Id of the commit the active branch points at."""
        active = self.active_branch
        head = self._refs.get_branch(active)
        if head is None:
            msg = f"Active branch {active} has no commit."
            raise ObjectNotFoundError(msg, object_id=active)
        return head

    def head_commit(self) -> Commit:
        """Return the commit the active branch points at."""
        return self._store.get_commit(self.head_id)

    def staging(self) -> StagingArea:
        """Return a copy of the current staging area."""
        return self._refs.load_staging()

    # =========================================================================
    # Staging and Commits
    # =========================================================================

    def add(self, path: str) -> None:
        """Stage the current content of a working file.

        If the content matches the head commit, any pending addition is
        dropped instead. Any pending removal of the path is always dropped.

        Args:
            path: Working-tree relative path.

        Raises:
            PreconditionError: If the working file does not exist.
        """
        key = normalize_path(path)
        if not self._worktree.exists(key):
            msg = "File does not exist."
            raise PreconditionError(msg)

        content = self._worktree.read(key)
        bid = blob_id(key, content)
        staging = self._refs.load_staging()

        if self.head_commit().tracked.get(key) == bid:
            staging.unstage_add(key)
            self._logger.debug("file_unchanged", path=key)
        else:
            _ = self._store.put_blob(key, content)
            staging.stage_add(key, bid)
            self._logger.info("file_staged", path=key, blob=bid)

        staging.unstage_remove(key)
        self._refs.save_staging(staging)

    def commit(self, message: str) -> str:
        """Record the staged changes as a new commit on the active branch.

        Args:
            message: The commit message.

        Returns:
            The new commit's id.

        Raises:
            PreconditionError: If the message is empty or nothing is staged.
        """
        if not message:
            msg = "Please enter a commit message."
            raise PreconditionError(msg)

        staging = self._refs.load_staging()
        if staging.is_empty():
            msg = "No changes added to the commit."
            raise PreconditionError(msg)

        head_id = self.head_id
        parent = self._store.get_commit(head_id)
        commit = Commit(
            message=message,
            timestamp=_now(),
            tracked=staging.apply_to(parent.tracked),
            parent=head_id,
        )
        cid = self._store.put_commit(commit)
        self._advance_active_branch(cid)
        self._logger.info(
            "commit_created",
            commit=cid,
            parent=head_id,
            added=sorted(staging.additions),
            removed=sorted(staging.removals),
        )
        return cid

    def remove(self, path: str) -> None:
        """Unstage a file and, if the head tracks it, stage its removal.

        A tracked file is also deleted from the working tree.

        Args:
            path: Working-tree relative path.

        Raises:
            PreconditionError: If the path is neither staged nor tracked.
        """
        key = normalize_path(path)
        staging = self._refs.load_staging()
        head = self.head_commit()

        if key not in staging.additions and key not in head.tracked:
            msg = "No reason to remove the file."
            raise PreconditionError(msg)

        staging.unstage_add(key)
        if key in head.tracked:
            staging.stage_remove(key, head.tracked[key])
            self._worktree.delete(key)
        self._refs.save_staging(staging)
        self._logger.info("file_removed", path=key, tracked=key in head.tracked)

    def _advance_active_branch(self, commit_id: str) -> None:
        self._refs.set_branch(self.active_branch, commit_id)
        self._refs.save_staging(StagingArea())

    # =========================================================================
    # History
    # =========================================================================

    def log(self) -> list[LogEntry]:
        """Return the first-parent history of the head, newest first."""
        return [
            LogEntry(commit_id=cid, commit=self._store.get_commit(cid))
            for cid in first_parent_chain(self._store, self.head_id)
        ]

    def global_log(self) -> list[LogEntry]:
        """Return every stored commit, in store order."""
        return [
            LogEntry(commit_id=cid, commit=self._store.get_commit(cid))
            for cid in self._store.commit_ids()
        ]

    def find(self, message: str) -> list[str]:
        """Return the ids of every commit whose message equals `message`.

        Raises:
            ObjectNotFoundError: If no commit has the message.
        """
        matches = [
            entry.commit_id
            for entry in self.global_log()
            if entry.commit.message == message
        ]
        if not matches:
            msg = "Found no commit with that message."
            raise ObjectNotFoundError(msg)
        return matches

    def status(self) -> RepoStatus:
        """Compute a status snapshot of branches, index and working tree."""
        head = self.head_commit()
        staging = self._refs.load_staging()
        working = set(self._worktree.paths())

        modified: set[str] = set()
        deleted: set[str] = set()

        expected = {
            path: bid
            for path, bid in head.tracked.items()
            if path not in staging.removals
        }
        expected.update(staging.additions)

        for path, bid in expected.items():
            if path not in working:
                deleted.add(path)
            elif blob_id(path, self._worktree.read(path)) != bid:
                modified.add(path)

        untracked = {
            path
            for path in working
            if path not in staging.additions
            and (path not in head.tracked or path in staging.removals)
        }

        return RepoStatus(
            active_branch=self.active_branch,
            branches=tuple(self._refs.branches()),
            staged=tuple(sorted(staging.additions)),
            removed=tuple(sorted(staging.removals)),
            modified=tuple(sorted(modified)),
            deleted=tuple(sorted(deleted)),
            untracked=tuple(sorted(untracked)),
        )

    # =========================================================================
    # Branches and Checkout
    # =========================================================================

    def create_branch(self, name: str) -> None:
        """Create a branch pointing at the current head.

        Raises:
            UserInputError: If the name is not a valid branch name.
            PreconditionError: If the branch already exists.
        """
        if not _BRANCH_NAME.match(name):
            msg = f"Invalid branch name: {name}"
            raise UserInputError(msg)
        if self._refs.get_branch(name) is not None:
            msg = "A branch with that name already exists."
            raise PreconditionError(msg)

        head_id = self.head_id
        self._refs.set_branch(name, head_id)
        self._logger.info("branch_created", branch=name, commit=head_id)

    def delete_branch(self, name: str) -> None:
        """Delete a branch pointer. Commits are never deleted.

        Raises:
            PreconditionError: If the branch does not exist or is active.
        """
        if self._refs.get_branch(name) is None:
            msg = "A branch with that name does not exist."
            raise PreconditionError(msg)
        if name == self.active_branch:
            msg = "Cannot remove the current branch."
            raise PreconditionError(msg)

        self._refs.delete_branch(name)
        self._logger.info("branch_deleted", branch=name)

    def checkout_branch(self, name: str) -> None:
        """Switch to a branch, synchronizing the working tree to its head.

        Raises:
            PreconditionError: If the branch is active or does not exist.
            UntrackedFileError: If an untracked file would be overwritten.
        """
        if name == self.active_branch:
            msg = "No need to checkout the current branch."
            raise PreconditionError(msg)
        target_id = self._refs.get_branch(name)
        if target_id is None:
            msg = "No such branch exists."
            raise PreconditionError(msg)

        self._reconcile_working_tree(self.head_commit(), self._store.get_commit(target_id))
        self._refs.set_active_branch(name)
        self._refs.save_staging(StagingArea())
        self._logger.info("branch_checked_out", branch=name, commit=target_id)

    def checkout_file(self, path: str) -> None:
        """Restore a working file from the head commit.

        Raises:
            ObjectNotFoundError: If the head does not track the file.
        """
        self._restore_file(self.head_id, normalize_path(path))

    def checkout_file_from_commit(self, commit_prefix: str, path: str) -> None:
        """Restore a working file from a commit given by full or abbreviated id.

        Raises:
            ObjectNotFoundError: If no commit matches the id, or the commit
                does not track the file.
        """
        key = normalize_path(path)
        self._restore_file(resolve_commit(self._store, commit_prefix), key)

    def _restore_file(self, commit_id: str, path: str) -> None:
        bid = self._store.get_commit(commit_id).tracked.get(path)
        if bid is None:
            msg = "File does not exist in that commit."
            raise ObjectNotFoundError(msg, object_id=commit_id)
        self._worktree.write(path, self._store.get_blob(bid))
        self._logger.info("file_restored", path=path, commit=commit_id)

    def reset(self, commit_prefix: str) -> str:
        """Move the active branch to a commit and synchronize the working tree.

        Args:
            commit_prefix: Full or abbreviated commit id.

        Returns:
            The full id of the commit reset to.

        Raises:
            ObjectNotFoundError: If no commit matches the id.
            UntrackedFileError: If an untracked file would be overwritten.
        """
        target_id = resolve_commit(self._store, commit_prefix)
        self._reconcile_working_tree(self.head_commit(), self._store.get_commit(target_id))
        self._advance_active_branch(target_id)
        self._logger.info("branch_reset", branch=self.active_branch, commit=target_id)
        return target_id

    def _reconcile_working_tree(self, current: Commit, target: Commit) -> None:
        """Make the working tree match `target`, starting from `current`.

        Files tracked by `target` are written; files tracked by `current`
        but not by `target` are deleted. Untracked files are left alone,
        unless `target` would overwrite one, in which case nothing changes.

        Raises:
            UntrackedFileError: If an untracked file would be overwritten.
        """
        in_the_way = frozenset(
            path
            for path in self._worktree.paths()
            if path not in current.tracked and path in target.tracked
        )
        if in_the_way:
            raise UntrackedFileError(paths=in_the_way)

        for path, bid in sorted(target.tracked.items()):
            self._worktree.write(path, self._store.get_blob(bid))
        for path in sorted(current.tracked):
            if path not in target.tracked:
                self._worktree.delete(path)

    # =========================================================================
    # Merge
    # =========================================================================

    def merge(self, name: str) -> MergeResult:
        """Merge a branch into the active branch.

        Checks out the given branch (a fast-forward) when the active branch
        head is the split point, and does nothing when the given branch is
        already an ancestor. Otherwise every path is merged three-way and a
        merge commit with two parents is created, even when some paths
        conflict.

        Args:
            name: Branch to merge in.

        Returns:
            What the merge did, with the ids involved.

        Raises:
            PreconditionError: If the branch does not exist, is active, or
                the staging area is not empty.
            UntrackedFileError: If the working tree has an untracked file.
        """
        other_id = self._refs.get_branch(name)
        if other_id is None:
            msg = "A branch with that name does not exist."
            raise PreconditionError(msg)
        active = self.active_branch
        if name == active:
            msg = "Cannot merge a branch with itself."
            raise PreconditionError(msg)
        staging = self._refs.load_staging()
        if not staging.is_empty():
            msg = "You have uncommitted changes."
            raise PreconditionError(msg)

        head_id = self.head_id
        head = self._store.get_commit(head_id)
        untracked = frozenset(
            path for path in self._worktree.paths() if path not in head.tracked
        )
        if untracked:
            raise UntrackedFileError(paths=untracked)

        split_id = find_split_point(self._store, head_id, other_id)
        if split_id == other_id:
            self._logger.info("merge_skipped", branch=name, reason="ancestor")
            return MergeResult(outcome=MergeOutcome.ANCESTOR, split_point=split_id)

        other = self._store.get_commit(other_id)
        if split_id == head_id:
            self._reconcile_working_tree(head, other)
            self._refs.set_active_branch(name)
            self._refs.save_staging(StagingArea())
            self._logger.info("merge_fast_forward", branch=name, commit=other_id)
            return MergeResult(
                outcome=MergeOutcome.FAST_FORWARD,
                split_point=split_id,
                commit_id=other_id,
            )

        split = self._store.get_commit(split_id)
        identical_conflicts = self._config.merge.conflict_on_identical_changes
        plan = plan_merge(
            split.tracked,
            head.tracked,
            other.tracked,
            conflict_on_identical_changes=identical_conflicts,
        )

        conflicts: set[str] = set()
        for path, action in plan.items():
            if action is MergeAction.TAKE_OTHER:
                bid = other.tracked[path]
                self._worktree.write(path, self._store.get_blob(bid))
                staging.stage_add(path, bid)
            elif action is MergeAction.REMOVE:
                self._worktree.delete(path)
                staging.stage_remove(path, head.tracked[path])
            elif action is MergeAction.CONFLICT:
                content = conflict_content(
                    self._blob_or_none(head.tracked.get(path)),
                    self._blob_or_none(other.tracked.get(path)),
                )
                self._worktree.write(path, content)
                staging.stage_add(path, self._store.put_blob(path, content))
                conflicts.add(path)

        commit = Commit(
            message=f"Merged {name} into {active}.",
            timestamp=_now(),
            tracked=staging.apply_to(head.tracked),
            parent=head_id,
            second_parent=other_id,
            branch=active,
            merged_branch=name,
        )
        cid = self._store.put_commit(commit)
        self._advance_active_branch(cid)

        if conflicts:
            self._logger.warning(
                "merge_conflict", branch=name, commit=cid, paths=sorted(conflicts)
            )
        else:
            self._logger.info("merge_completed", branch=name, commit=cid)

        return MergeResult(
            outcome=MergeOutcome.CONFLICTED if conflicts else MergeOutcome.MERGED,
            split_point=split_id,
            commit_id=cid,
            conflicts=frozenset(conflicts),
        )

    def _blob_or_none(self, bid: str | None) -> bytes | None:
        return None if bid is None else self._store.get_blob(bid)
