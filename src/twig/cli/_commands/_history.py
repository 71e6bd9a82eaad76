# pyright: reportUnusedCallResult=false
"""Commands that inspect commit history."""

from typing import Annotated

from cyclopts import Parameter

from ._shared import echo, open_repository, reporting_errors

__all__ = ["find", "global_log", "log"]


def log() -> None:
    """Show the history of the current branch, following first parents."""
    with reporting_errors("log"):
        for entry in open_repository("log").log():
            echo(entry.render())


def global_log() -> None:
    """Show every commit ever made, in no particular order."""
    with reporting_errors("global-log"):
        for entry in open_repository("global-log").global_log():
            echo(entry.render())


def find(
    message: Annotated[str, Parameter(allow_leading_hyphen=True)],
    /,
) -> None:
    """Print the ids of all commits with exactly the given message.

    Args:
        message: The commit message to search for.
    """
    with reporting_errors("find"):
        for commit_id in open_repository("find").find(message):
            echo(commit_id)
