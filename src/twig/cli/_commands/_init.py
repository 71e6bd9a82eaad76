# pyright: reportUnusedCallResult=false
"""The init command."""

from twig.cli._context import CLIContext
from twig.repository import Repository
from twig.utils import create_cli_logger, get_twig_cli_log_file

from ._shared import detail, reporting_errors

__all__ = ["init"]


def init() -> None:
    """Create a new twig repository in the current directory.

    The repository starts with a single root commit on the default branch.
    """
    ctx = CLIContext.get_current()
    with reporting_errors("init"):
        # No log file exists before init, so bind a file logger afterwards.
        log_file = ctx.config.logging.file or get_twig_cli_log_file(ctx.root)
        repo = Repository.init(ctx.root, config=ctx.config)
        logger = create_cli_logger(
            level=ctx.config.logging.level.value,
            log_format=ctx.config.logging.format.value,  # type: ignore[arg-type]
            log_file=log_file,
            command="init",
        )
        logger.info(
            "repository_initialized",
            root=str(ctx.root),
            branch=repo.active_branch,
            root_commit=repo.head_id,
        )
        detail(f"Initialized empty twig repository on branch {repo.active_branch}")
