"""Configuration models."""

from ._common import ConfigSource, ConfigSourceName, LogFormat, LogLevel
from ._config import Config
from ._logging import LoggingConfig
from ._repository import BRANCH_NAME_PATTERN, MergeConfig, RepositoryConfig

__all__ = [
    "BRANCH_NAME_PATTERN",
    "Config",
    "ConfigSource",
    "ConfigSourceName",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "MergeConfig",
    "RepositoryConfig",
]
