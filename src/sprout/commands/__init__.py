"""Command implementations exposed by the Sprout CLI."""

from .init import init_project

__all__ = ["init_project"]
