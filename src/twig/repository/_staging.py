"""Staging area (index) of pending additions and removals."""

from collections.abc import Mapping
from typing import Any, ClassVar, Final, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from twig.exceptions import CorruptObjectError

# Recorded for a removal whose prior blob is not known.
NO_BLOB: Final = ""


class StagingArea(BaseModel):
    """Pending changes layered on the head commit's snapshot.

    Attributes:
        additions: Path to blob id of every file staged for addition.
        removals: Path to the removed blob id (or NO_BLOB) of every file
            staged for removal.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    additions: dict[str, str] = Field(default_factory=dict)
    removals: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> Self:  # pyright: ignore[reportExplicitAny]
        """Rebuild a staging area from its persisted record.

        Raises:
            CorruptObjectError: If the record is malformed.
        """
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            msg = f"Invalid staging record: {e.error_count()} error(s)"
            raise CorruptObjectError(msg, cause=e) from e

    def to_record(self) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
        """Return the JSON-compatible record persisted between invocations."""
        return self.model_dump(mode="json")

    def stage_add(self, path: str, blob_id: str) -> None:
        self.additions[path] = blob_id

    def unstage_add(self, path: str) -> None:
        _ = self.additions.pop(path, None)

    def stage_remove(self, path: str, blob_id: str = NO_BLOB) -> None:
        self.removals[path] = blob_id

    def unstage_remove(self, path: str) -> None:
        _ = self.removals.pop(path, None)

    def clear(self) -> None:
        self.additions.clear()
        self.removals.clear()

    def is_empty(self) -> bool:
        return not self.additions and not self.removals

    def apply_to(self, tracked: Mapping[str, str]) -> dict[str, str]:
        """Apply the pending changes to a tracked mapping.

        Additions are inserted or overwrite existing entries, then removals
        are deleted. The input mapping is not modified.

        Args:
            tracked: A commit's path to blob id mapping.

        Returns:
            The new mapping.
        """
        result = dict(tracked)
        result.update(self.additions)
        for path in self.removals:
            _ = result.pop(path, None)
        return result
