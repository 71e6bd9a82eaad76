"""Shared CLI utilities for commands.

This module provides common utilities used across CLI command implementations:
- Standardized exit codes
- Plain-text output helpers
- Repository access with uniform error reporting
"""

from collections.abc import Iterator
from contextlib import contextmanager
from enum import IntEnum
from typing import Never

from rich.console import Console

from twig.cli._context import CLIContext
from twig.exceptions import CorruptObjectError, StorageError, TwigError
from twig.repository import Repository

__all__ = [
    "ExitCode",
    "detail",
    "echo",
    "exit_with_error",
    "get_error_console",
    "open_repository",
    "reporting_errors",
]


class ExitCode(IntEnum):
    """Exit codes for twig CLI commands.

    Command diagnostics (missing files, unknown branches, conflicts) exit
    with SUCCESS; only unrecoverable storage failures use INTERNAL_ERROR.
    """

    SUCCESS = 0
    INTERNAL_ERROR = 1


def get_error_console() -> Console:
    """Get a Rich console configured for error output to stderr."""
    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.INTERNAL_ERROR,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Args:
        message: The error message to display.
        code: The exit code to use (defaults to INTERNAL_ERROR).
        console: Optional Rich console for output. If not provided,
            a new stderr console will be created.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()

    console.print("[red]Error:[/red] ", end="")
    console.print(message, markup=False, highlight=False, soft_wrap=True)
    raise SystemExit(code)


def echo(text: str) -> None:
    """Print command output verbatim (no markup, highlighting or wrapping)."""
    CLIContext.get_current().console.print(
        text, markup=False, highlight=False, soft_wrap=True
    )


def detail(text: str) -> None:
    """Print a supplementary line, shown only with --verbose."""
    ctx = CLIContext.get_current()
    if ctx.verbose and not ctx.quiet:
        ctx.console.print(text, markup=False, highlight=False, soft_wrap=True, style="dim")


@contextmanager
def reporting_errors(command: str) -> Iterator[None]:
    """Report twig errors raised by a command body.

    Diagnostics are printed as-is and logged; the command then returns
    normally. Storage and corruption errors are fatal.

    Args:
        command: Command name bound to log entries.
    """
    ctx = CLIContext.get_current()
    logger = ctx.logger.bind(command=command)
    try:
        yield
    except (CorruptObjectError, StorageError) as e:
        logger.exception("command_fatal", error=str(e), error_type=type(e).__name__)
        exit_with_error(str(e), console=ctx.error_console)
    except TwigError as e:
        logger.info("command_rejected", error=str(e), error_type=type(e).__name__)
        echo(str(e))


def open_repository(command: str) -> Repository:
    """Open the repository at the context root for a command.

    Call inside `reporting_errors` so a missing repository is reported.

    Args:
        command: Command name bound to the repository's log entries.

    Returns:
        The opened repository.

    Raises:
        RepositoryNotInitializedError: If the root has no repository.
    """
    ctx = CLIContext.get_current()
    return Repository.open(
        ctx.root,
        config=ctx.config,
        logger=ctx.logger.bind(command=command),
    )
