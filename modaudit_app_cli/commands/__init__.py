"""CLI commands for modaudit-app-cli."""

from .fetch import fetch

__all__ = [
    "fetch",
]
