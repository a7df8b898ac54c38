"""Common utilities for the yaus URL shortener."""

from .validators import is_valid_url, is_valid_locator
from .url_builder import build_short_url
from .logging_config import setup_logging

__all__ = [
    "is_valid_url",
    "is_valid_locator",
    "build_short_url",
    "setup_logging",
]
