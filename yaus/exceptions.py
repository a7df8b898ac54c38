"""Exceptions raised by the yaus core.

Not-found is never an exception: lookups return ``None`` for unknown locators.
"""

from typing import Optional


class YausError(Exception):
    """Base class for all yaus errors."""


class InvalidURLError(YausError, ValueError):
    """The long URL failed syntactic validation. No storage access was attempted."""


class StoreError(YausError):
    """Base class for locator store failures."""


class LocatorConflictError(StoreError):
    """Every candidate locator for a long URL is owned by a different long URL.

    This is a data-integrity event (truncated digest collision), not a
    transient fault.
    """

    def __init__(self, locator: str, long_url: str, existing_url: Optional[str] = None):
        self.locator = locator
        self.long_url = long_url
        self.existing_url = existing_url
        super().__init__(
            f"Locator '{locator}' for {long_url} is already owned by {existing_url or 'another URL'}"
        )


class StorageUnavailableError(StoreError):
    """The underlying storage could not be opened or reached."""


class StorageTimeoutError(StorageUnavailableError):
    """A storage operation did not complete within the configured timeout."""
