"""Repository and merge configuration models."""

from typing import ClassVar, Final

from pydantic import BaseModel, ConfigDict, Field

BRANCH_NAME_PATTERN: Final = r"^[^/\s.][^/\s]*$"


class RepositoryConfig(BaseModel):
    """Repository configuration section.

    Attributes:
        default_branch: Name of the branch created by `init`.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    default_branch: str = Field(
        default="master", min_length=1, pattern=BRANCH_NAME_PATTERN
    )


class MergeConfig(BaseModel):
    """Merge configuration section.

    Attributes:
        conflict_on_identical_changes: Report a conflict when both branches
            changed a file to the same new content since the split point.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    conflict_on_identical_changes: bool = False
