"""Middleware for the yaus web app."""

from .logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
