# pyright: reportExplicitAny=false, reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Configuration container with typed access.

This module provides the main Config class that serves as the primary
interface for accessing twig configuration values.
"""

from pathlib import Path
from typing import Any, ClassVar, Self, TypeVar, overload

import tomli_w
from pydantic import BaseModel, ConfigDict, PrivateAttr

from twig.config._defaults import DEFAULT_CONFIG
from twig.config._loader import copy_value, deep_merge, parse_env_vars, read_toml_file
from twig.config._models._common import ConfigSource, ConfigSourceName
from twig.config._models._logging import LoggingConfig
from twig.config._models._repository import MergeConfig, RepositoryConfig

T = TypeVar("T")


class Config(BaseModel):
    """Configuration container with typed access.

    This class provides immutable, type-safe access to twig configuration.
    Use factory methods to create instances rather than the constructor.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    _data: dict[str, Any] = PrivateAttr(default_factory=dict)
    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())
    _logging: LoggingConfig = PrivateAttr(default_factory=LoggingConfig)
    _repository: RepositoryConfig = PrivateAttr(default_factory=RepositoryConfig)
    _merge: MergeConfig = PrivateAttr(default_factory=MergeConfig)

    def __init__(
        self,
        *,
        _data: dict[str, Any] | None = None,
        _sources: tuple[ConfigSource, ...] = (),
    ) -> None:
        """Initialize configuration container.

        This constructor is intended for internal use. Use factory methods
        like from_dict(), from_file(), or load() to create Config instances.

        Args:
            _data: The complete merged configuration dictionary.
            _sources: Sources that contributed to this configuration.

        Raises:
            ConfigValidationError: If the data fails validation.
        """
        # Deferred import to avoid circular dependency
        from twig.config._validation import parse_config  # noqa: PLC0415

        super().__init__()
        self._data = _data if _data is not None else copy_value(DEFAULT_CONFIG)
        self._sources = _sources

        schema = parse_config(self._data)
        self._logging = schema.logging
        self._repository = schema.repository
        self._merge = schema.merge

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create configuration from a dictionary merged over the defaults.

        Args:
            data: Dictionary of configuration values.

        Returns:
            Configuration object from the dictionary.

        Raises:
            ConfigValidationError: If validation fails.
        """
        return cls(_data=deep_merge(DEFAULT_CONFIG, data))

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Load configuration from a specific file.

        Args:
            path: Path to the TOML config file.

        Returns:
            Configuration object from the specified file only.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If validation fails.
        """
        data = read_toml_file(path)
        source = ConfigSource(
            name=ConfigSourceName.PROJECT,
            path=path,
            exists=True,
            values=data,
        )
        return cls(_data=deep_merge(DEFAULT_CONFIG, data), _sources=(source,))

    @classmethod
    def load(
        cls,
        *,
        project_root: Path | None = None,
        include_env: bool = True,
        include_cli: bool = False,
        cli_overrides: dict[str, Any] | None = None,
    ) -> Self:
        """Load merged configuration from all sources.

        Discovers all configuration sources and merges them in precedence order
        (defaults -> user -> project -> env -> cli).

        Args:
            project_root: Working tree root. Defaults to the current directory.
            include_env: Include environment variables as a source.
            include_cli: Include CLI overrides.
            cli_overrides: Dict of CLI argument overrides. Only used if
                include_cli is True.

        Returns:
            Merged configuration object.

        Raises:
            ConfigLoadError: If config files cannot be loaded.
            ConfigValidationError: If merged config fails validation.
        """
        from twig.config._discovery import discover_sources  # noqa: PLC0415

        sources = discover_sources(
            project_root=project_root,
            include_env=include_env,
            include_cli=include_cli,
            cli_overrides=cli_overrides,
        )

        # Sources are discovered highest-to-lowest, so reverse for merging
        merged: dict[str, Any] = {}
        loaded_sources: list[ConfigSource] = []

        for source in reversed(sources):
            values: dict[str, Any] = {}

            if source.name in (ConfigSourceName.DEFAULT, ConfigSourceName.CLI):
                values = source.values
            elif source.name == ConfigSourceName.ENV:
                values = parse_env_vars()
            elif source.path and source.exists:
                values = read_toml_file(source.path)

            loaded_sources.append(
                ConfigSource(
                    name=source.name,
                    path=source.path,
                    exists=source.exists,
                    values=values,
                )
            )

            if values:
                merged = deep_merge(merged, values)

        return cls(_data=merged, _sources=tuple(reversed(loaded_sources)))

    @property
    def sources(self) -> list[ConfigSource]:
        """Return the sources that contributed to this configuration."""
        return list(self._sources)

    @property
    def logging(self) -> LoggingConfig:
        """Return the logging configuration section."""
        return self._logging

    @property
    def repository(self) -> RepositoryConfig:
        """Return the repository configuration section."""
        return self._repository

    @property
    def merge(self) -> MergeConfig:
        """Return the merge configuration section."""
        return self._merge

    @overload
    def get(self, key: str) -> Any: ...

    @overload
    def get(self, key: str, default: T) -> T: ...

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-notation key.

        Args:
            key: Dot-notation key (e.g., "logging.level").
            default: Default value if key not found.

        Returns:
            The configuration value, or default if not found.

        Examples:
            >>> config.get("repository.default_branch")
            'master'
            >>> config.get("nonexistent", "fallback")
            'fallback'
        """
        current: Any = self._data

        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        return current

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the merged configuration."""
        return copy_value(self._data)

    def to_toml(self) -> str:
        """Convert configuration to a TOML string."""
        return tomli_w.dumps(self.to_dict())
