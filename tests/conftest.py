"""Shared test fixtures for twig tests."""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pytest
from rich.console import Console

from twig.cli import CLIContext
from twig.repository import Repository


@dataclass(frozen=True, slots=True)
class TwigProject:
    """Paths for an initialized on-disk test repository."""

    root: Path
    twig_dir: Path


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep user config and TWIG_* variables from leaking into tests."""
    import os

    for key in list(os.environ):
        if key.startswith("TWIG_"):
            monkeypatch.delenv(key)
    monkeypatch.setattr(
        "twig.config._discovery.get_user_config_path",
        lambda: tmp_path / "user-config" / "config.toml",
    )


@pytest.fixture(autouse=True)
def _reset_cli_context() -> None:
    CLIContext.reset()


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )


@pytest.fixture
def memory_repo() -> Repository:
    """Create an initialized in-memory repository with an empty working tree."""
    return Repository.in_memory()


@pytest.fixture
def twig_project(tmp_path: Path) -> TwigProject:
    """Create an initialized on-disk repository.

    Structure:
        tmp_path/
            project/
                .twig/
    """
    root = tmp_path / "project"
    root.mkdir()
    Repository.init(root)
    return TwigProject(root=root, twig_dir=root / ".twig")


@pytest.fixture
def write_file() -> Callable[[Path, str, str], Path]:
    """Return a helper that writes text below a root, creating directories."""

    def _write(root: Path, relative: str, content: str) -> Path:
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    return _write
