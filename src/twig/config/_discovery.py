"""Config path discovery utilities.

This module determines which configuration sources apply to a working tree:
the platform-specific user config file and the project config file inside
`.twig/`.
"""

from pathlib import Path
from typing import Any

import platformdirs

from twig.utils import get_twig_config_file

from ._defaults import DEFAULT_CONFIG
from ._models._common import ConfigSource, ConfigSourceName


def get_user_config_path() -> Path:
    r"""Get platform-specific user config file path.

    - Linux: ``~/.config/twig/config.toml``
    - macOS: ``~/Library/Application Support/twig/config.toml``
    - Windows: ``%APPDATA%\twig\config.toml``

    The path is returned regardless of whether the file exists.

    Returns:
        Path to the user config file for the current platform.
    """
    return platformdirs.user_config_path("twig") / "config.toml"


def _file_exists(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


def discover_sources(
    project_root: Path | None = None,
    *,
    include_env: bool = True,
    include_cli: bool = False,
    cli_overrides: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
) -> list[ConfigSource]:
    """Discover all configuration sources.

    Args:
        project_root: Working tree root. Defaults to the current directory.
        include_env: Include environment variables as a source.
        include_cli: Include CLI overrides as a source.
        cli_overrides: Dictionary of CLI argument overrides. Only used
            if include_cli is True.

    Returns:
        List of ConfigSource objects in precedence order (highest first).
        File sources that don't exist are still included with exists=False.
    """
    resolved_root = project_root if project_root is not None else Path.cwd()
    sources: list[ConfigSource] = []

    if include_cli:
        sources.append(
            ConfigSource(
                name=ConfigSourceName.CLI,
                path=None,
                exists=bool(cli_overrides),
                values=cli_overrides or {},
            )
        )

    if include_env:
        sources.append(
            ConfigSource(
                name=ConfigSourceName.ENV,
                path=None,
                exists=True,  # Actual values parsed during loading phase
                values={},
            )
        )

    project_path = get_twig_config_file(resolved_root)
    sources.append(
        ConfigSource(
            name=ConfigSourceName.PROJECT,
            path=project_path,
            exists=_file_exists(project_path),
            values={},
        )
    )

    user_path = get_user_config_path()
    sources.append(
        ConfigSource(
            name=ConfigSourceName.USER,
            path=user_path,
            exists=_file_exists(user_path),
            values={},
        )
    )

    sources.append(
        ConfigSource(
            name=ConfigSourceName.DEFAULT,
            path=None,
            exists=True,
            values=DEFAULT_CONFIG,
        )
    )

    return sources
