"""Core business logic for the yaus URL shortener."""

from .locator import LocatorGenerator, derive_locator
from .service import ShortenerService, ShortenResult

__all__ = ["LocatorGenerator", "derive_locator", "ShortenerService", "ShortenResult"]
