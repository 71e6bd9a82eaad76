# pyright: reportUnusedCallResult=false
"""Commands that stage, commit and report working-tree changes."""

from typing import Annotated

from cyclopts import Parameter

from ._shared import detail, echo, open_repository, reporting_errors

__all__ = ["add", "commit", "rm", "status"]


def add(path: str, /) -> None:
    """Stage the current content of a file for the next commit.

    Args:
        path: File to stage, relative to the repository root.
    """
    with reporting_errors("add"):
        open_repository("add").add(path)


def commit(
    message: Annotated[str, Parameter(allow_leading_hyphen=True)] = "",
    /,
) -> None:
    """Record the staged changes as a new commit.

    Args:
        message: The commit message.
    """
    with reporting_errors("commit"):
        commit_id = open_repository("commit").commit(message)
        detail(f"[{commit_id[:7]}] {message}")


def rm(path: str, /) -> None:
    """Unstage a file and stage its removal if it is tracked.

    Args:
        path: File to remove, relative to the repository root.
    """
    with reporting_errors("rm"):
        open_repository("rm").remove(path)


def status() -> None:
    """Show branches, staged and removed files, and working-tree changes."""
    with reporting_errors("status"):
        echo(open_repository("status").status().render())
