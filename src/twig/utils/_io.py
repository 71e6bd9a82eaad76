# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""File I/O utilities for twig records.

This module provides functions for reading and writing the byte, text and
JSON records that make up a repository. All write operations use atomic
patterns so a record is either fully replaced or left untouched.
"""

import tempfile
from pathlib import Path
from typing import Any, Final

import orjson

from twig.exceptions import CorruptObjectError, StorageError

# Temporary files start with a dot so they never collide with record names
TEMP_PREFIX: Final = "."

__all__ = [
    "TEMP_PREFIX",
    "atomic_write",
    "dumps_canonical",
    "read_bytes",
    "read_json",
    "read_text",
    "write_json_atomic",
]


def atomic_write(path: Path, content: bytes | str) -> None:
    """Write content to a file atomically.

    Writes to a dot-prefixed temporary file in the same directory, then
    renames to the target path. This ensures the file is either fully written or not at all.

    Args:
        path: Destination file path.
        content: Content to write (bytes or string).

    Raises:
        StorageError: If the write operation fails.
    """
    _ = path.parent.mkdir(parents=True, exist_ok=True)

    is_bytes = isinstance(content, bytes)
    mode = "wb" if is_bytes else "w"
    encoding = None if is_bytes else "utf-8"

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode=mode,
            dir=path.parent,
            delete=False,
            prefix=TEMP_PREFIX,
            suffix=".tmp",
            encoding=encoding,
        ) as f:
            _ = f.write(content)
            temp_path = Path(f.name)

        # Path.replace() is atomic on both POSIX and Windows
        _ = temp_path.replace(path)

    except OSError as e:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        msg = f"Failed to write file: {e}"
        raise StorageError(msg, path=path, operation="write", cause=e) from e


def read_bytes(path: Path) -> bytes:
    """Read a file's raw content.

    Args:
        path: Path to the file.

    Returns:
        The file content.

    Raises:
        StorageError: If the file cannot be read.
    """
    try:
        return path.read_bytes()
    except OSError as e:
        msg = f"Failed to read file: {e}"
        raise StorageError(msg, path=path, operation="read", cause=e) from e


def read_text(path: Path) -> str:
    """Read a single-valued text record, stripping surrounding whitespace.

    Args:
        path: Path to the file.

    Returns:
        The stripped file content.

    Raises:
        StorageError: If the file cannot be read.
    """
    return read_bytes(path).decode("utf-8").strip()


def dumps_canonical(data: dict[str, Any]) -> bytes:  # pyright: ignore[reportExplicitAny]
    """Serialize a dictionary to canonical JSON bytes.

    Keys are sorted and no whitespace is emitted, so equal dictionaries
    always produce identical bytes. Identifiers are hashed from this form.

    Args:
        data: Dictionary to serialize.

    Returns:
        The canonical JSON encoding.
    """
    return orjson.dumps(data, option=orjson.OPT_SORT_KEYS)


def read_json(
    path: Path,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Read and parse a JSON record.

    Args:
        path: Path to the JSON file.

    Returns:
        The parsed JSON data as a dictionary.

    Raises:
        StorageError: If the file cannot be read.
        CorruptObjectError: If the content is not a JSON object.
    """
    content = read_bytes(path)

    try:
        data = orjson.loads(content)
    except orjson.JSONDecodeError as e:
        msg = f"Invalid JSON in {path.name}: {e}"
        raise CorruptObjectError(msg, path=path, cause=e) from e

    if not isinstance(data, dict):
        msg = f"Expected JSON object in {path.name}, got {type(data).__name__}"
        raise CorruptObjectError(msg, path=path)

    return data


def write_json_atomic(
    path: Path,
    data: dict[str, Any],  # pyright: ignore[reportExplicitAny]
) -> None:
    """Write a dictionary as canonical JSON atomically.

    Args:
        path: Destination file path.
        data: Dictionary to serialize as JSON.

    Raises:
        StorageError: If serialization or the write operation fails.
    """
    try:
        content = dumps_canonical(data)
    except TypeError as e:
        msg = f"Failed to serialize JSON: {e}"
        raise StorageError(msg, path=path, operation="write", cause=e) from e

    atomic_write(path, content)
