"""Route group exports."""

from . import drafts, health, routes

__all__ = ["drafts", "health", "routes"]
