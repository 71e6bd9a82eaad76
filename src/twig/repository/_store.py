# ruff: noqa: TC003  # Path needed at runtime for dataclass fields
"""Content-addressed object store for blobs and commits.

Objects are write-once: storing an object whose identifier is already
present is a no-op, and nothing is ever deleted. Two implementations are
provided, one keeping objects in memory and one persisting them under
`.twig/objects/`.
"""

import hashlib
import string
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from pydantic import ValidationError

from twig.exceptions import (
    AmbiguousCommitError,
    CorruptObjectError,
    ObjectNotFoundError,
)
from twig.repository._models import Commit
from twig.utils import atomic_write, dumps_canonical, read_bytes, read_json

NO_SUCH_COMMIT: Final = "No commit with that id exists."

_COMMIT_SUFFIX: Final = ".json"
_HEX_DIGITS: Final = frozenset(string.hexdigits.lower())


def _sha1_hex(data: bytes) -> str:
    return hashlib.sha1(data, usedforsecurity=False).hexdigest()


def blob_id(path: str, content: bytes) -> str:
    """Compute the identifier of a blob.

    The path is folded into the identifier, so identical content stored
    under two paths yields two distinct blobs.

    Args:
        path: Working-tree relative path of the file.
        content: Raw file bytes.

    Returns:
        Hex SHA-1 of the content digest concatenated with the path digest.
    """
    content_digest = _sha1_hex(content)
    path_digest = _sha1_hex(path.encode("utf-8"))
    return _sha1_hex((content_digest + path_digest).encode("ascii"))


def commit_id(commit: Commit) -> str:
    """Compute the identifier of a commit from its canonical serialization."""
    return _sha1_hex(dumps_canonical(commit.to_record()))


@runtime_checkable
class ObjectStore(Protocol):
    """Protocol for object store implementations."""

    def put_blob(self, path: str, content: bytes) -> str:
        """Store file content, returning its blob id.

        Args:
            path: Working-tree relative path the content belongs to.
            content: Raw file bytes.

        Returns:
            The blob id. Storing an existing blob is a no-op.
        """
        ...

    def get_blob(self, blob_id: str) -> bytes:
        """Return the content of a blob.

        Raises:
            ObjectNotFoundError: If no blob has the id.
        """
        ...

    def has_blob(self, blob_id: str) -> bool:
        """Check whether a blob is stored."""
        ...

    def put_commit(self, commit: Commit) -> str:
        """Store a commit, returning its id."""
        ...

    def get_commit(self, commit_id: str) -> Commit:
        """Return a stored commit by full id.

        Raises:
            ObjectNotFoundError: If no commit has the id.
            CorruptObjectError: If the stored record cannot be decoded.
        """
        ...

    def has_commit(self, commit_id: str) -> bool:
        """Check whether a commit is stored."""
        ...

    def commit_ids(self) -> Iterator[str]:
        """Iterate over every stored commit id."""
        ...


def resolve_commit(store: ObjectStore, prefix: str) -> str:
    """Resolve an abbreviated commit id to a full stored id.

    A full id matches itself. Any prefix matching exactly one stored
    commit resolves to that commit.

    Args:
        store: The object store to search.
        prefix: A full or abbreviated commit id.

    Returns:
        The full commit id.

    Raises:
        ObjectNotFoundError: If no stored commit starts with the prefix.
        AmbiguousCommitError: If more than one stored commit does.
    """
    if not prefix or not set(prefix) <= _HEX_DIGITS:
        raise ObjectNotFoundError(NO_SUCH_COMMIT, object_id=prefix)
    if store.has_commit(prefix):
        return prefix

    matches = tuple(sorted(cid for cid in store.commit_ids() if cid.startswith(prefix)))
    if not matches:
        raise ObjectNotFoundError(NO_SUCH_COMMIT, object_id=prefix)
    if len(matches) > 1:
        msg = f"Commit id {prefix} is ambiguous."
        raise AmbiguousCommitError(msg, object_id=prefix, matches=matches)
    return matches[0]


@dataclass(slots=True)
class MemoryObjectStore:
    """Object store that keeps every object in memory.

    Example:
        >>> store = MemoryObjectStore()
        >>> bid = store.put_blob("a.txt", b"hello")
        >>> store.get_blob(bid)
        b'hello'
    """

    blobs: dict[str, bytes] = field(default_factory=dict)
    commits: dict[str, Commit] = field(default_factory=dict)

    def put_blob(self, path: str, content: bytes) -> str:
        bid = blob_id(path, content)
        _ = self.blobs.setdefault(bid, content)
        return bid

    def get_blob(self, blob_id: str) -> bytes:
        try:
            return self.blobs[blob_id]
        except KeyError:
            msg = f"No blob with id {blob_id} exists."
            raise ObjectNotFoundError(msg, object_id=blob_id) from None

    def has_blob(self, blob_id: str) -> bool:
        return blob_id in self.blobs

    def put_commit(self, commit: Commit) -> str:
        cid = commit_id(commit)
        _ = self.commits.setdefault(cid, commit)
        return cid

    def get_commit(self, commit_id: str) -> Commit:
        try:
            return self.commits[commit_id]
        except KeyError:
            raise ObjectNotFoundError(NO_SUCH_COMMIT, object_id=commit_id) from None

    def has_commit(self, commit_id: str) -> bool:
        return commit_id in self.commits

    def commit_ids(self) -> Iterator[str]:
        return iter(list(self.commits))


class FileObjectStore:
    """Object store persisted under a repository directory.

    Layout:
        objects/commits/<id>.json  canonical JSON commit records
        objects/blobs/<id>         raw blob bytes
    """

    __slots__: Final = ("_blobs_dir", "_commits_dir")
    _blobs_dir: Path
    _commits_dir: Path

    def __init__(self, twig_dir: Path) -> None:
        """Initialize the store.

        Args:
            twig_dir: The `.twig/` directory of the repository.
        """
        objects_dir = twig_dir / "objects"
        self._blobs_dir = objects_dir / "blobs"
        self._commits_dir = objects_dir / "commits"

    def initialize(self) -> None:
        """Create the object directories."""
        self._blobs_dir.mkdir(parents=True, exist_ok=True)
        self._commits_dir.mkdir(parents=True, exist_ok=True)

    def _commit_path(self, commit_id: str) -> Path:
        return self._commits_dir / f"{commit_id}{_COMMIT_SUFFIX}"

    def put_blob(self, path: str, content: bytes) -> str:
        bid = blob_id(path, content)
        target = self._blobs_dir / bid
        if not target.exists():
            atomic_write(target, content)
        return bid

    def get_blob(self, blob_id: str) -> bytes:
        target = self._blobs_dir / blob_id
        if not blob_id or not target.is_file():
            msg = f"No blob with id {blob_id} exists."
            raise ObjectNotFoundError(msg, object_id=blob_id)
        return read_bytes(target)

    def has_blob(self, blob_id: str) -> bool:
        return bool(blob_id) and (self._blobs_dir / blob_id).is_file()

    def put_commit(self, commit: Commit) -> str:
        cid = commit_id(commit)
        target = self._commit_path(cid)
        if not target.exists():
            atomic_write(target, dumps_canonical(commit.to_record()))
        return cid

    def get_commit(self, commit_id: str) -> Commit:
        target = self._commit_path(commit_id)
        if not commit_id or not target.is_file():
            raise ObjectNotFoundError(NO_SUCH_COMMIT, object_id=commit_id)

        data = read_json(target)
        try:
            return Commit.model_validate(data)
        except ValidationError as e:
            msg = f"Invalid commit record {target.name}: {e.error_count()} error(s)"
            raise CorruptObjectError(msg, path=target, cause=e) from e

    def has_commit(self, commit_id: str) -> bool:
        return bool(commit_id) and self._commit_path(commit_id).is_file()

    def commit_ids(self) -> Iterator[str]:
        if not self._commits_dir.is_dir():
            return
        for entry in sorted(self._commits_dir.iterdir()):
            if entry.is_file() and entry.suffix == _COMMIT_SUFFIX:
                yield entry.stem
