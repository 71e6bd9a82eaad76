"""Logging utilities for twig.

This module provides standalone structlog logger factories that write
JSON-formatted or text-formatted logs to twig log files. Each logger is
self-contained and does not modify global structlog configuration.
"""

import logging
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogFormatType = Literal["json", "text"]


def _log_level_from_string(level: str, *, respect_env: bool = False) -> int:
    """Convert a log level string to a logging level integer.

    Args:
        level: Log level string (debug, info, warning, error).
        respect_env: If True, TWIG_DEBUG overrides to DEBUG level.

    Returns:
        The logging level as an integer.
    """
    if respect_env and getenv("TWIG_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.INFO)


def _create_logger(
    log_file_path: Path | None,
    *,
    log_level: int,
    log_format: LogFormatType = "json",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a standalone structlog logger writing to the specified file.

    Args:
        log_file_path: Path to the log file (opened in append mode). If None,
            events are processed but discarded.
        log_level: Minimum level that is emitted.
        log_format: Output format, either "json" or "text".

    Returns:
        A configured FilteringBoundLogger instance.
    """
    if log_file_path is None:
        raw_logger: object = structlog.ReturnLogger()
    else:
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        raw_logger = structlog.WriteLoggerFactory(file=log_file_path.open("a"))()

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Text format: "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    wrapper_class = structlog.make_filtering_bound_logger(log_level)

    # wrap_logger doesn't touch global structlog configuration
    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            raw_logger,
            processors=processors,
            wrapper_class=wrapper_class,
            context_class=dict,
        ),
    )


def create_cli_logger(
    *,
    level: str = "info",
    log_format: LogFormatType = "json",
    log_file: str | Path | None = None,
    command: str = "",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a logger for CLI commands.

    Creates a standalone structlog logger that writes structured logs to
    `log_file`, normally `.twig/logs/cli.log` of the current repository.
    Callers pass None when there is no repository yet, in which case log
    events are discarded so that nothing creates `.twig/` before `init`.

    The log level can be overridden by environment variables:
    - TWIG_DEBUG: If set, enables DEBUG level logging regardless of config

    Args:
        level: Log level threshold (debug, info, warning, error).
        log_format: Output format, either "json" or "text".
        log_file: Path to log file, or None to discard log output.
        command: Name of the CLI command for context (bound to all entries).

    Returns:
        A FilteringBoundLogger instance configured for CLI logging.
    """
    effective_file = Path(log_file) if log_file else None
    effective_level = _log_level_from_string(level, respect_env=True)

    logger = _create_logger(
        effective_file,
        log_level=effective_level,
        log_format=log_format,
    )

    if command:
        return logger.bind(command=command)
    return logger


def create_null_logger() -> "FilteringBoundLogger":  # noqa: UP037
    """Create a logger that discards every event.

    Used when a component is constructed without a logger.
    """
    return _create_logger(None, log_level=logging.CRITICAL)
