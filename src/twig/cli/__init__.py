"""Utilities used by the twig CLI."""

from ._app import app, create_app, main, normalize_tokens, run
from ._context import CLIContext

__all__ = ["CLIContext", "app", "create_app", "main", "normalize_tokens", "run"]
