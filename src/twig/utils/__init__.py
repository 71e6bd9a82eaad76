"""Shared utilities for twig."""

from ._io import (
    TEMP_PREFIX,
    atomic_write,
    dumps_canonical,
    read_bytes,
    read_json,
    read_text,
    write_json_atomic,
)
from ._logging import LogFormatType, create_cli_logger, create_null_logger
from ._paths import (
    TWIG_DIR_NAME,
    get_twig_cli_log_file,
    get_twig_config_file,
    get_twig_dir,
    get_twig_log_dir,
    is_initialized,
)

__all__ = [
    "TEMP_PREFIX",
    "TWIG_DIR_NAME",
    "LogFormatType",
    "atomic_write",
    "create_cli_logger",
    "create_null_logger",
    "dumps_canonical",
    "get_twig_cli_log_file",
    "get_twig_config_file",
    "get_twig_dir",
    "get_twig_log_dir",
    "is_initialized",
    "read_bytes",
    "read_json",
    "read_text",
    "write_json_atomic",
]
