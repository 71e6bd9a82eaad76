"""twig CLI commands."""
# pyright: reportUnusedCallResult=false

from collections.abc import Callable
from typing import Annotated, Final

from cyclopts import App, Parameter

from ._branch import branch, checkout, merge, reset, rm_branch
from ._history import find, global_log, log
from ._init import init
from ._shared import (
    ExitCode,
    detail,
    echo,
    exit_with_error,
    get_error_console,
    open_repository,
    reporting_errors,
)
from ._staging import add, commit, rm, status

__all__ = [
    "COMMANDS",
    "ExitCode",
    "detail",
    "echo",
    "exit_with_error",
    "get_error_console",
    "open_repository",
    "register_commands",
    "reporting_errors",
]

COMMANDS: Final[dict[str, Callable[..., None]]] = {
    "init": init,
    "add": add,
    "commit": commit,
    "rm": rm,
    "log": log,
    "global-log": global_log,
    "find": find,
    "status": status,
    "checkout": checkout,
    "branch": branch,
    "rm-branch": rm_branch,
    "reset": reset,
    "merge": merge,
}


def register_commands(app: App) -> None:
    for name, handler in COMMANDS.items():
        app.command(handler, name=name)

    @app.default
    def _unknown(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    ) -> None:
        """Report a missing or unknown command."""
        if tokens:
            echo("No command with that name exists.")
        else:
            echo("Please enter a command.")
