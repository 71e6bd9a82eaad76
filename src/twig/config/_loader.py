# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""TOML configuration file loading and merging."""

import json
import os
import tomllib
from pathlib import Path
from typing import Any, Final

from twig.exceptions import ConfigLoadError

ENV_PREFIX: Final = "TWIG_"

# Environment switches that are not configuration keys
_RESERVED_ENV_KEYS: Final = frozenset({"DEBUG", "STRICT_CONFIG"})


def read_toml_file(path: Path) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Read and parse a TOML file.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed TOML content as dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file cannot be parsed.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse TOML file: {e}"
        raise ConfigLoadError(
            msg,
            path=path,
            line=getattr(e, "lineno", None),
            column=getattr(e, "colno", None),
        ) from e


def deep_merge(
    base: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    override: dict[str, Any],  # pyright: ignore[reportExplicitAny]
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Deep merge two configuration dictionaries.

    Merges `override` into `base`, returning a new dictionary. Neither input
    is modified. Nested dictionaries are merged recursively; any other value
    in `override` replaces the base value.

    Args:
        base: Base configuration (lower precedence).
        override: Override configuration (higher precedence).

    Returns:
        Merged configuration dictionary.
    """
    result: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
        key: copy_value(value) for key, value in base.items()
    }

    for key, override_val in override.items():
        base_val = result.get(key)
        if isinstance(base_val, dict) and isinstance(override_val, dict):
            result[key] = deep_merge(base_val, override_val)
        else:
            result[key] = copy_value(override_val)

    return result


def copy_value(value: Any) -> Any:  # pyright: ignore[reportExplicitAny]
    """Create a deep copy of a configuration value.

    Args:
        value: The value to copy.

    Returns:
        A copy sharing no dicts or lists with the original.
    """
    if isinstance(value, dict):
        return {k: copy_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [copy_value(item) for item in value]
    return value


def parse_env_vars(
    prefix: str = ENV_PREFIX,
    environ: dict[str, str] | None = None,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Parse environment variables into config dictionary.

    Environment variable naming: the prefix, then the dotted key in upper
    case with dots replaced by double underscores. For example
    `merge.conflict_on_identical_changes` is read from
    `TWIG_MERGE__CONFLICT_ON_IDENTICAL_CHANGES`.

    Args:
        prefix: Environment variable prefix (default: "TWIG_").
        environ: Mapping to read instead of os.environ.

    Returns:
        Dictionary of parsed config values with nested structure.
    """
    source = os.environ if environ is None else environ
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for key, value in source.items():
        if not key.startswith(prefix):
            continue

        config_key = key[len(prefix) :]
        if not config_key or config_key in _RESERVED_ENV_KEYS:
            continue

        config_path = config_key.replace("__", ".").lower()
        set_nested_key(result, config_path, _parse_env_value(value))

    return result


def _parse_env_value(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Parse environment variable value with type inference.

    Order of type inference: boolean (true/false/1/0), integer, float,
    JSON array or object, then the raw string.
    """
    lower_value = value.lower()
    if lower_value in ("true", "false", "1", "0"):
        return lower_value in ("true", "1")

    try:
        return int(value)
    except ValueError:
        pass

    if "." in value:
        try:
            return float(value)
        except ValueError:
            pass

    if (value.startswith("[") and value.endswith("]")) or (
        value.startswith("{") and value.endswith("}")
    ):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value


def set_nested_key(
    d: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    key_path: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> None:
    """Set a value at a dotted key path in a nested dictionary.

    Creates intermediate dictionaries as needed, replacing non-dict values
    found along the way.

    Args:
        d: The dictionary to modify.
        key_path: Dotted key path (e.g., "logging.level").
        value: The value to set.

    Example:
        >>> d = {}
        >>> set_nested_key(d, "logging.level", "debug")
        >>> d
        {'logging': {'level': 'debug'}}
    """
    *parents, leaf = key_path.split(".")
    current = d

    for part in parents:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]

    current[leaf] = value
