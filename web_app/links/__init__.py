"""Shorten and redirect routes (plain-text interface)."""

from .routes import router as links_router

__all__ = ["links_router"]
