from pathlib import Path
from typing import Final

TWIG_DIR_NAME: Final = ".twig"


def get_twig_dir(root: Path) -> Path:
    """Get the path to the .twig/ directory inside a working tree."""
    return root / TWIG_DIR_NAME


def get_twig_log_dir(root: Path) -> Path:
    """Get the path to the logs/ directory inside .twig/."""
    return get_twig_dir(root) / "logs"


def get_twig_cli_log_file(root: Path) -> Path:
    """Get the path to the CLI log file inside .twig/logs/."""
    return get_twig_log_dir(root) / "cli.log"


def get_twig_config_file(root: Path) -> Path:
    """Get the path to the project config file inside .twig/."""
    return get_twig_dir(root) / "config.toml"


def is_initialized(root: Path) -> bool:
    """Check whether a working tree contains a twig repository.

    Args:
        root: The working tree root.

    Returns:
        True if root/.twig/ is a directory.
    """
    return get_twig_dir(root).is_dir()
