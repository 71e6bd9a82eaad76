# ruff: noqa: TC003  # Path needed at runtime for dataclass fields
"""Working-tree access.

Working-tree paths are POSIX-style strings relative to the worktree root.
The `.twig/` directory is never part of the working tree.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Final, Protocol, runtime_checkable

from twig.exceptions import StorageError, UserInputError
from twig.utils import TWIG_DIR_NAME, atomic_write, read_bytes


def normalize_path(path: str) -> str:
    """Normalize a user-supplied path to a working-tree key.

    Args:
        path: Relative path, using either separator.

    Returns:
        The POSIX-style relative path.

    Raises:
        UserInputError: If the path is empty, absolute, escapes the worktree,
            or points into the repository directory.
    """
    pure = PurePosixPath(path.replace("\\", "/"))
    parts = [part for part in pure.parts if part not in ("", ".")]
    if not parts or pure.is_absolute() or ".." in parts or parts[0] == TWIG_DIR_NAME:
        msg = f"Invalid working-tree path: {path}"
        raise UserInputError(msg)
    return "/".join(parts)


@runtime_checkable
class WorkingTree(Protocol):
    """Protocol for working-tree implementations."""

    def exists(self, path: str) -> bool:
        """Check whether a regular file exists at the path."""
        ...

    def read(self, path: str) -> bytes:
        """Return the content of a working file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        ...

    def write(self, path: str, content: bytes) -> None:
        """Create or overwrite a working file, creating parent directories."""
        ...

    def delete(self, path: str) -> None:
        """Delete a working file if present."""
        ...

    def paths(self) -> Iterator[str]:
        """Iterate over every working file path, sorted."""
        ...


@dataclass(slots=True)
class MemoryWorkingTree:
    """Working tree kept in memory."""

    files: dict[str, bytes] = field(default_factory=dict)

    def exists(self, path: str) -> bool:
        return path in self.files

    def read(self, path: str) -> bytes:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path) from None

    def write(self, path: str, content: bytes) -> None:
        self.files[path] = content

    def delete(self, path: str) -> None:
        _ = self.files.pop(path, None)

    def paths(self) -> Iterator[str]:
        return iter(sorted(self.files))


class FileWorkingTree:
    """Working tree backed by a directory on disk."""

    __slots__: Final = ("_root",)
    _root: Path

    def __init__(self, root: Path) -> None:
        """Initialize the working tree.

        Args:
            root: The worktree root directory (the parent of `.twig/`).
        """
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, path: str) -> Path:
        return self._root.joinpath(*path.split("/"))

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def read(self, path: str) -> bytes:
        target = self._resolve(path)
        if not target.is_file():
            raise FileNotFoundError(path)
        return read_bytes(target)

    def write(self, path: str, content: bytes) -> None:
        atomic_write(self._resolve(path), content)

    def delete(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.unlink(missing_ok=True)
        except OSError as e:
            msg = f"Failed to delete file: {e}"
            raise StorageError(msg, path=target, operation="delete", cause=e) from e
        self._prune_empty_parents(target.parent)

    def _prune_empty_parents(self, directory: Path) -> None:
        while directory != self._root and directory.is_relative_to(self._root):
            try:
                directory.rmdir()
            except OSError:
                # Not empty, or already gone
                return
            directory = directory.parent

    def paths(self) -> Iterator[str]:
        found: list[str] = []
        for entry in self._root.rglob("*"):
            relative = entry.relative_to(self._root)
            if relative.parts[0] == TWIG_DIR_NAME or not entry.is_file():
                continue
            found.append(relative.as_posix())
        return iter(sorted(found))
