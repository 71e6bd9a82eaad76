from collections.abc import Callable
from pathlib import Path

import pytest
from rich.console import Console

from twig.cli import create_app, run


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create an empty working directory and make it the current directory."""
    root = tmp_path / "work"
    root.mkdir()
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def twig_cli(console: Console, workdir: Path) -> Callable[..., None]:
    """Create CLI app for testing.

    Returns a callable that runs the CLI in `workdir` and suppresses
    SystemExit. Use twig_cli_with_exit_code to check the exit code.
    """
    app = create_app(console=console, error_console=console)

    def _run(*args: str) -> None:
        try:
            run(args, cli=app)
        except SystemExit:
            pass

    return _run


@pytest.fixture
def twig_cli_with_exit_code(console: Console, workdir: Path) -> Callable[..., int]:
    """Create CLI app for testing that returns the exit code."""
    app = create_app(console=console, error_console=console)

    def _run(*args: str) -> int:
        try:
            run(args, cli=app)
        except SystemExit as e:
            if e.code is None:
                return 0
            return e.code if isinstance(e.code, int) else 1
        else:
            return 0

    return _run
