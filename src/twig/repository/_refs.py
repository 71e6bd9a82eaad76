# ruff: noqa: TC003  # Path needed at runtime for dataclass fields
"""Branch table and persisted index state.

A ref store holds the mutable parts of a repository: named branch pointers,
the active branch indicator, and the staging record. Every write replaces
a whole record.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from twig.exceptions import CorruptObjectError, StorageError
from twig.repository._staging import StagingArea
from twig.utils import (
    TEMP_PREFIX,
    atomic_write,
    read_json,
    read_text,
    write_json_atomic,
)

_ACTIVE_BRANCH_FILE: Final = "active-branch"
_BRANCHES_DIR: Final = "branches"
_STAGING_FILE: Final = "staging.json"


@runtime_checkable
class RefStore(Protocol):
    """Protocol for ref store implementations."""

    def branches(self) -> Mapping[str, str]:
        """Return every branch name mapped to its commit id, sorted by name."""
        ...

    def get_branch(self, name: str) -> str | None:
        """Return the commit id a branch points at, or None if it does not exist."""
        ...

    def set_branch(self, name: str, commit_id: str) -> None:
        """Create or move a branch pointer."""
        ...

    def delete_branch(self, name: str) -> None:
        """Remove a branch pointer. Missing branches are ignored."""
        ...

    def get_active_branch(self) -> str:
        """Return the name of the active branch."""
        ...

    def set_active_branch(self, name: str) -> None:
        """Make a branch the active branch."""
        ...

    def load_staging(self) -> StagingArea:
        """Return a fresh copy of the persisted staging area."""
        ...

    def save_staging(self, staging: StagingArea) -> None:
        """Persist the staging area, replacing the previous record."""
        ...


@dataclass(slots=True)
class MemoryRefStore:
    """Ref store kept entirely in memory."""

    refs: dict[str, str] = field(default_factory=dict)
    active_branch: str = "master"
    staging_record: dict[str, dict[str, str]] = field(
        default_factory=lambda: StagingArea().to_record()
    )

    def branches(self) -> Mapping[str, str]:
        return dict(sorted(self.refs.items()))

    def get_branch(self, name: str) -> str | None:
        return self.refs.get(name)

    def set_branch(self, name: str, commit_id: str) -> None:
        self.refs[name] = commit_id

    def delete_branch(self, name: str) -> None:
        _ = self.refs.pop(name, None)

    def get_active_branch(self) -> str:
        return self.active_branch

    def set_active_branch(self, name: str) -> None:
        self.active_branch = name

    def load_staging(self) -> StagingArea:
        return StagingArea.from_record(self.staging_record)

    def save_staging(self, staging: StagingArea) -> None:
        self.staging_record = staging.to_record()


class FileRefStore:
    """Ref store persisted under a repository directory.

    Layout:
        branches/<name>  commit id text
        active-branch    active branch name text
        staging.json     staging record
    """

    __slots__: Final = ("_twig_dir",)
    _twig_dir: Path

    def __init__(self, twig_dir: Path) -> None:
        """Initialize the store.

        Args:
            twig_dir: The `.twig/` directory of the repository.
        """
        self._twig_dir = twig_dir

    @property
    def _branches_dir(self) -> Path:
        return self._twig_dir / _BRANCHES_DIR

    def _branch_path(self, name: str) -> Path:
        return self._branches_dir / name

    def initialize(self) -> None:
        """Create the branch directory."""
        self._branches_dir.mkdir(parents=True, exist_ok=True)

    def branches(self) -> Mapping[str, str]:
        if not self._branches_dir.is_dir():
            return {}
        return {
            entry.name: read_text(entry)
            for entry in sorted(self._branches_dir.iterdir())
            if entry.is_file() and not entry.name.startswith(TEMP_PREFIX)
        }

    def get_branch(self, name: str) -> str | None:
        target = self._branch_path(name)
        if (
            not name
            or "/" in name
            or name.startswith(TEMP_PREFIX)
            or not target.is_file()
        ):
            return None
        return read_text(target)

    def set_branch(self, name: str, commit_id: str) -> None:
        atomic_write(self._branch_path(name), commit_id)

    def delete_branch(self, name: str) -> None:
        target = self._branch_path(name)
        try:
            target.unlink(missing_ok=True)
        except OSError as e:
            msg = f"Failed to delete branch {name}: {e}"
            raise StorageError(msg, path=target, operation="delete", cause=e) from e

    def get_active_branch(self) -> str:
        target = self._twig_dir / _ACTIVE_BRANCH_FILE
        name = read_text(target)
        if not name:
            msg = "Active branch record is empty"
            raise CorruptObjectError(msg, path=target)
        return name

    def set_active_branch(self, name: str) -> None:
        atomic_write(self._twig_dir / _ACTIVE_BRANCH_FILE, name)

    def load_staging(self) -> StagingArea:
        target = self._twig_dir / _STAGING_FILE
        if not target.is_file():
            return StagingArea()
        return StagingArea.from_record(read_json(target))

    def save_staging(self, staging: StagingArea) -> None:
        write_json_atomic(self._twig_dir / _STAGING_FILE, staging.to_record())
