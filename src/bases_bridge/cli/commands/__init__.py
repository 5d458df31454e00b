"""CLI commands for bases-bridge."""

from . import bases, engine, search

__all__ = ["bases", "engine", "search"]
