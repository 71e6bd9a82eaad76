# pyright: reportAny=false, reportExplicitAny=false, reportUnknownArgumentType=false, reportUnknownMemberType=false, reportUnknownParameterType=false, reportUnknownVariableType=false
"""Configuration validation using Pydantic schemas.

This module validates merged twig configuration dictionaries against the
frozen Pydantic models from _models/.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, ValidationError

from twig.config._models._logging import LoggingConfig
from twig.config._models._repository import MergeConfig, RepositoryConfig
from twig.exceptions import ConfigValidationError

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """Represents a configuration validation issue.

    Attributes:
        key: Dotted path to the configuration key (e.g., "logging.level").
        message: Human-readable description of the issue.
        expected: Description of expected value or type, if available.
        actual: The actual value that caused the issue.
    """

    key: str
    message: str
    expected: str | None
    actual: Any


class ConfigSchema(BaseModel):
    """Pydantic schema for root configuration (unknown keys ignored)."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="ignore")

    logging: LoggingConfig = LoggingConfig()
    repository: RepositoryConfig = RepositoryConfig()
    merge: MergeConfig = MergeConfig()


def _pydantic_error_to_issue(error: "ErrorDetails") -> ValidationIssue:  # noqa: UP037
    loc = error.get("loc", ())
    key = ".".join(str(part) for part in loc)

    ctx = error.get("ctx")
    expected: str | None = None
    if ctx is not None:
        if "expected" in ctx:
            expected = str(ctx["expected"])
        elif "pattern" in ctx:
            expected = f"pattern: {ctx['pattern']}"

    return ValidationIssue(
        key=key,
        message=str(error.get("msg", "Validation error")),
        expected=expected,
        actual=error.get("input"),
    )


def parse_config(config: dict[str, Any]) -> ConfigSchema:
    """Validate a merged configuration dictionary and parse its sections.

    Args:
        config: The merged configuration dictionary.

    Returns:
        The parsed schema with typed sections.

    Raises:
        ConfigValidationError: If any value is invalid.
    """
    try:
        return ConfigSchema.model_validate(config)
    except ValidationError as e:
        issues = [_pydantic_error_to_issue(err) for err in e.errors()]
        raise_if_validation_errors(issues)
        raise  # pragma: no cover - errors() is never empty


def validate_config(config: dict[str, Any]) -> list[ValidationIssue]:
    """Validate a merged configuration dictionary.

    Args:
        config: The merged configuration dictionary to validate.

    Returns:
        List of ValidationIssue objects. Empty list indicates valid config.
    """
    try:
        _ = ConfigSchema.model_validate(config)
    except ValidationError as e:
        return [_pydantic_error_to_issue(err) for err in e.errors()]
    else:
        return []


def raise_if_validation_errors(
    issues: list[ValidationIssue],
    source: str | None = None,
) -> None:
    """Raise ConfigValidationError for the first issue, if any.

    Args:
        issues: List of ValidationIssue objects to check.
        source: Optional source string to record on the exception.

    Raises:
        ConfigValidationError: If issues is non-empty.
    """
    if issues:
        issue = issues[0]
        msg = f"Invalid configuration value for '{issue.key}'"
        raise ConfigValidationError(
            msg,
            key=issue.key,
            value=issue.actual,
            expected=issue.expected or issue.message,
            source=source,
        )
