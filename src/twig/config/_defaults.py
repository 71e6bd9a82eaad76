"""Default configuration values.

This module defines the built-in default configuration values that are used
when no other configuration sources provide values.

Note: DEFAULT_CONFIG is intentionally a plain dict for type compatibility
with functions like deep_merge. The merge functions create copies, so mutation
of the original is not a concern in practice.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "logging": {
        "level": "info",
        "format": "json",
        "file": "",
    },
    "repository": {
        "default_branch": "master",
    },
    "merge": {
        "conflict_on_identical_changes": False,
    },
}
