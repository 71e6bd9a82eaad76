import os
import sys
from pathlib import Path

from twig.exceptions import ConfigError

from ._models import Config


def _fail_or_warn(error_msg: str, *, strict_mode: bool, warning: str) -> None:
    if strict_mode:
        print(f"Error: {error_msg}", file=sys.stderr)  # noqa: T201
        sys.exit(1)
    print(f"Warning: {warning}", file=sys.stderr)  # noqa: T201


def safe_load_config(
    *,
    config_path: Path | None = None,
    project_root: Path | None = None,
    cli_overrides: dict[str, object] | None = None,
) -> tuple[Config, str | None]:
    """Load configuration with error handling.

    Attempts to load configuration and handles errors based on the
    TWIG_STRICT_CONFIG environment variable:
    - If unset or "0": warn to stderr and return the default config
    - If "1": fail fast with sys.exit(1)

    When config_path is provided, the file must exist (explicit user request).

    Args:
        config_path: Explicit path to config file (--config flag).
        project_root: Working tree root override (--root flag).
        cli_overrides: CLI argument overrides to pass to Config.load().

    Returns:
        Tuple of (Config, error_message). On success, error_message is None.
        On failure (non-strict mode), returns the default Config with the
        error message.
    """
    strict_mode = os.environ.get("TWIG_STRICT_CONFIG", "0") == "1"

    try:
        if config_path is not None:
            if not config_path.exists():
                error_msg = f"Config file not found: {config_path}"
                print(f"Error: {error_msg}", file=sys.stderr)  # noqa: T201
                sys.exit(1)
            return Config.from_file(config_path), None

        config = Config.load(
            project_root=project_root,
            include_env=True,
            include_cli=cli_overrides is not None,
            cli_overrides=dict(cli_overrides) if cli_overrides else None,
        )
    except ConfigError as e:
        error_msg = str(e)
        _fail_or_warn(
            error_msg,
            strict_mode=strict_mode,
            warning=f"Failed to load config: {error_msg}",
        )
        return Config.from_dict({}), error_msg
    except OSError as e:
        error_msg = f"Failed to load config: {e}"
        _fail_or_warn(error_msg, strict_mode=strict_mode, warning=error_msg)
        return Config.from_dict({}), error_msg
    else:
        return config, None
