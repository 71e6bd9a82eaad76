"""twig: a small, local, single-user version-control system."""

__version__ = "0.1.0"
