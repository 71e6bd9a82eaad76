"""twig exceptions."""

from pathlib import Path
from typing import Any


class TwigError(Exception):
    """Base exception for twig errors."""


# =============================================================================
# Command Exceptions
# =============================================================================


class UserInputError(TwigError):
    """Raised when a command receives missing or malformed operands."""


class PreconditionError(TwigError):
    """Raised when a command's preconditions are not met.

    No repository state is modified when this is raised.
    """


class UntrackedFileError(PreconditionError):
    """Raised when an untracked working file would be overwritten.

    Attributes:
        paths: The untracked paths that are in the way.
    """

    def __init__(
        self,
        message: str = (
            "There is an untracked file in the way; "
            "delete it, or add and commit it first."
        ),
        *,
        paths: frozenset[str] = frozenset(),
    ) -> None:
        """Initialize with error message and offending paths.

        Args:
            message: Human-readable error message.
            paths: The untracked paths that are in the way.
        """
        super().__init__(message)
        self.paths: frozenset[str] = paths


# =============================================================================
# Object Store Exceptions
# =============================================================================


class ObjectNotFoundError(TwigError, KeyError):
    """Raised when a blob or commit cannot be found.

    Attributes:
        object_id: The identifier (or prefix) that was looked up.
    """

    def __init__(self, message: str, *, object_id: str | None = None) -> None:
        """Initialize with error message and object context.

        Args:
            message: Human-readable error message.
            object_id: The identifier (or prefix) that was looked up.
        """
        super().__init__(message)
        self.object_id: str | None = object_id

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class AmbiguousCommitError(ObjectNotFoundError):
    """Raised when an abbreviated commit id matches more than one commit.

    Attributes:
        matches: Every stored commit id starting with the prefix.
    """

    def __init__(
        self,
        message: str,
        *,
        object_id: str | None = None,
        matches: tuple[str, ...] = (),
    ) -> None:
        """Initialize with error message and the matching ids.

        Args:
            message: Human-readable error message.
            object_id: The prefix that was looked up.
            matches: Every stored commit id starting with the prefix.
        """
        super().__init__(message, object_id=object_id)
        self.matches: tuple[str, ...] = matches


class CorruptObjectError(TwigError):
    """Raised when a stored record cannot be decoded.

    Attributes:
        path: Path to the record, if it is file-backed.
        cause: The underlying exception.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and record context."""
        super().__init__(message)
        self.path: Path | None = path
        self.cause: Exception | None = cause


class StorageError(TwigError):
    """Raised when a record cannot be read from or written to disk.

    Attributes:
        path: Path to the file that caused the error.
        operation: The operation that failed ("read", "write", "delete").
        cause: The underlying exception that caused this error.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path,
        operation: str,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and I/O context.

        Args:
            message: Human-readable error message.
            path: Path to the file that caused the error.
            operation: The operation that failed.
            cause: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.path: Path = path
        self.operation: str = operation
        self.cause: Exception | None = cause


# =============================================================================
# Repository Exceptions
# =============================================================================


class RepositoryNotInitializedError(TwigError):
    """Raised when no twig repository exists at the expected location.

    Attributes:
        path: The working directory that was searched.
    """

    def __init__(
        self,
        message: str = "Not in an initialized Twig directory.",
        *,
        path: Path | None = None,
    ) -> None:
        """Initialize with error message and location context."""
        super().__init__(message)
        self.path: Path | None = path


class RepositoryExistsError(TwigError):
    """Raised by init when a repository already exists.

    Attributes:
        path: The existing repository directory.
    """

    def __init__(
        self,
        message: str = (
            "A Twig version-control system already exists in the current directory."
        ),
        *,
        path: Path | None = None,
    ) -> None:
        """Initialize with error message and location context."""
        super().__init__(message)
        self.path: Path | None = path


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(TwigError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source
