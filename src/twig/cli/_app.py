"""The command-line interface for twig."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated, Final

from cyclopts import App, Parameter
from cyclopts.exceptions import CycloptsError
from rich.console import Console

from twig import __version__
from twig.config import safe_load_config
from twig.utils import create_cli_logger, get_twig_cli_log_file, is_initialized

from ._commands import echo, register_commands
from ._context import CLIContext

_HELP: Final = "A small, local, single-user version-control system."
INCORRECT_OPERANDS: Final = "Incorrect operands."


def normalize_tokens(tokens: Sequence[str]) -> list[str]:
    """Rewrite `checkout [<commit>] -- <file>` into option form.

    The `--` separator of the checkout command names the file to restore;
    it becomes `--file` so the parser does not treat it as end-of-options.

    Example:
        >>> normalize_tokens(["checkout", "--", "a.txt"])
        ['checkout', '--file', 'a.txt']
    """
    result = list(tokens)
    if "checkout" in result and "--" in result:
        separator = result.index("--")
        if separator > result.index("checkout"):
            result[separator] = "--file"
    return result


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
) -> App:
    """Build the twig CLI application.

    Args:
        console: Console for command output.
        error_console: Console for fatal errors.

    Returns:
        The application; run it with `run()`.
    """
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="twig",
        help=_HELP,
        version=__version__,
        console=console,
        error_console=error_console,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        verbose: Annotated[bool, Parameter(help="Enable verbose output")] = False,
        quiet: Annotated[bool, Parameter(help="Suppress non-essential output")] = False,
        no_color: Annotated[
            bool, Parameter(name="--no-color", help="Disable colored output")
        ] = False,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
        root: Annotated[
            Path | None, Parameter(name="--root", help="Path to the worktree root")
        ] = None,
    ) -> None:
        """Launch twig with global options.

        Args:
            tokens: Command tokens to pass to subcommands.
            verbose: Enable verbose output and debug logging.
            quiet: Suppress non-essential output.
            no_color: Disable colored output.
            config: Explicit path to config file.
            root: Worktree root directory. Defaults to the current directory.
        """
        work_root = root if root is not None else Path.cwd()

        cli_overrides: dict[str, object] | None = None
        if verbose:
            cli_overrides = {"logging": {"level": "debug"}}

        loaded_config, config_error = safe_load_config(
            config_path=config,
            project_root=work_root,
            cli_overrides=cli_overrides,
        )

        # Nothing may create .twig/ before init, so log only inside a repository
        log_file: str | Path | None = loaded_config.logging.file or None
        if log_file is None and is_initialized(work_root):
            log_file = get_twig_cli_log_file(work_root)

        cli_logger = create_cli_logger(
            level=loaded_config.logging.level.value,
            log_format=loaded_config.logging.format.value,  # type: ignore[arg-type]
            log_file=log_file,
        )

        if no_color:
            console.no_color = True
            error_console.no_color = True

        ctx = CLIContext(
            config=loaded_config,
            console=console,
            error_console=error_console,
            root=work_root,
            verbose=verbose,
            quiet=quiet,
            no_color=no_color,
            config_error=config_error,
            logger=cli_logger,
        )
        CLIContext.set_current(ctx)

        try:
            cli_logger.debug(
                "config_loaded",
                sources=[
                    str(source.path) if source.path is not None else source.name.value
                    for source in loaded_config.sources
                    if source.values
                ],
            )
            cli_logger.debug("command_invoked", tokens=list(tokens))
            app(tokens, print_error=False, exit_on_error=False)
        except CycloptsError as e:
            cli_logger.info("command_rejected", error=str(e), error_type=type(e).__name__)
            echo(INCORRECT_OPERANDS)
        finally:
            CLIContext.reset()

    register_commands(app)
    return app


app = create_app()


def run(tokens: Sequence[str] | None = None, *, cli: App | None = None) -> None:
    """Run the twig CLI.

    Args:
        tokens: Command-line tokens, without the program name. Defaults
            to the process arguments.
        cli: Application to run. Defaults to the module-level app.
    """
    target = cli if cli is not None else app
    argv = list(sys.argv[1:]) if tokens is None else list(tokens)
    try:
        target.meta(normalize_tokens(argv), print_error=False, exit_on_error=False)
    except CycloptsError:
        # Malformed global options; no command context exists yet
        target.console.print(INCORRECT_OPERANDS, markup=False, highlight=False)


def main() -> None:
    """Default entrypoint for the `twig` CLI."""
    run()


if __name__ == "__main__":
    main()
