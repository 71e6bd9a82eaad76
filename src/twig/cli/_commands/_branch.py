# pyright: reportUnusedCallResult=false
"""Commands that manage branches and synchronize the working tree."""

from typing import Annotated

from cyclopts import Parameter

from twig.exceptions import UserInputError

from ._shared import detail, echo, open_repository, reporting_errors

__all__ = ["branch", "checkout", "merge", "reset", "rm_branch"]

INCORRECT_OPERANDS = "Incorrect operands."


def branch(name: str, /) -> None:
    """Create a branch pointing at the current head commit.

    Args:
        name: Name of the new branch.
    """
    with reporting_errors("branch"):
        open_repository("branch").create_branch(name)


def rm_branch(name: str, /) -> None:
    """Delete a branch pointer. Its commits are kept.

    Args:
        name: Name of the branch to delete.
    """
    with reporting_errors("rm-branch"):
        open_repository("rm-branch").delete_branch(name)


def checkout(
    target: str | None = None,
    /,
    *,
    file: Annotated[
        str | None,
        Parameter(name="--file", help="File to restore (written as `-- <file>`)"),
    ] = None,
) -> None:
    """Restore a file, or switch branches.

    Usage:
        twig checkout -- <file>              restore file from the head commit
        twig checkout <commit id> -- <file>  restore file from a commit
        twig checkout <branch>               switch to a branch

    Args:
        target: Commit id (with a file) or branch name (without).
        file: File to restore.
    """
    with reporting_errors("checkout"):
        repo = open_repository("checkout")
        if file is not None and target is None:
            repo.checkout_file(file)
        elif file is not None and target is not None:
            repo.checkout_file_from_commit(target, file)
        elif target is not None:
            repo.checkout_branch(target)
        else:
            raise UserInputError(INCORRECT_OPERANDS)


def reset(commit_id: str, /) -> None:
    """Check out every file of a commit and move the current branch to it.

    Args:
        commit_id: Full or abbreviated commit id.
    """
    with reporting_errors("reset"):
        resolved = open_repository("reset").reset(commit_id)
        detail(f"HEAD is now at {resolved[:7]}")


def merge(name: str, /) -> None:
    """Merge a branch into the current branch.

    Args:
        name: Branch to merge in.
    """
    with reporting_errors("merge"):
        result = open_repository("merge").merge(name)
        if result.message is not None:
            echo(result.message)
        for path in sorted(result.conflicts):
            detail(f"conflict: {path}")
