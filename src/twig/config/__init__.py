"""twig configuration.

This module provides the public API for twig configuration management,
including loading, validation, and typed access to configuration values.

Example:
    >>> from twig.config import Config
    >>> config = Config.load()
    >>> config.repository.default_branch
    'master'
"""

from twig.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
)

from ._defaults import DEFAULT_CONFIG
from ._discovery import discover_sources, get_user_config_path
from ._load import safe_load_config
from ._loader import deep_merge, parse_env_vars, read_toml_file, set_nested_key
from ._models import (
    BRANCH_NAME_PATTERN,
    Config,
    ConfigSource,
    ConfigSourceName,
    LogFormat,
    LoggingConfig,
    LogLevel,
    MergeConfig,
    RepositoryConfig,
)
from ._validation import (
    ConfigSchema,
    ValidationIssue,
    parse_config,
    raise_if_validation_errors,
    validate_config,
)

__all__ = [
    "BRANCH_NAME_PATTERN",
    "DEFAULT_CONFIG",
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "ConfigSchema",
    "ConfigSource",
    "ConfigSourceName",
    "ConfigValidationError",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "MergeConfig",
    "RepositoryConfig",
    "ValidationIssue",
    "deep_merge",
    "discover_sources",
    "get_user_config_path",
    "parse_config",
    "parse_env_vars",
    "raise_if_validation_errors",
    "read_toml_file",
    "safe_load_config",
    "set_nested_key",
    "validate_config",
]
