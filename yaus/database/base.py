"""Abstract base class for locator store implementations."""

import logging
from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any

from ..locator import LocatorGenerator
from .models import Resolution, UrlRecord


class LocatorStoreBase(ABC):
    """Abstract base class for the persistent long URL <-> locator mapping.

    Implementations are the sole owners of stored records. Records are
    created once and never updated or deleted.
    """

    database_name = "unknown"

    def __init__(
        self,
        db_config: str,
        generator: Optional[LocatorGenerator] = None,
        timeout_seconds: float = 5.0,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize store.

        Args:
            db_config: Storage location (file path, ``:memory:`` or DSN)
            generator: Candidate locator generator
            timeout_seconds: Upper bound for a single storage operation
            logger: Optional logger instance
        """
        self.db_config = db_config
        self.generator = generator or LocatorGenerator()
        self.timeout_seconds = timeout_seconds
        self.logger = logger or logging.getLogger(__name__)

    @abstractmethod
    async def initialize(self) -> None:
        """Create the schema if it does not exist."""
        pass

    @abstractmethod
    async def resolve_or_create(self, long_url: str) -> Resolution:
        """Return the locator for a long URL, creating the record if needed.

        The existence check and the insert form one atomic unit with respect
        to concurrent callers: for a given long URL exactly one caller
        observes ``CREATED``, every other caller observes ``EXISTING``.

        Args:
            long_url: The long URL (already validated)

        Returns:
            Resolution with the stored locator and status

        Raises:
            LocatorConflictError: If every candidate locator belongs to a different URL
            StorageUnavailableError: If the storage cannot be reached
        """
        pass

    @abstractmethod
    async def lookup(self, locator: str) -> Optional[str]:
        """Get the long URL for a locator.

        Args:
            locator: Exact, case-sensitive locator

        Returns:
            The long URL if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_record(self, locator: str) -> Optional[UrlRecord]:
        """Get the complete record for a locator."""
        pass

    @abstractmethod
    async def find_by_url(self, long_url: str) -> Optional[UrlRecord]:
        """Get the record for an exact long URL, if one was stored."""
        pass

    @abstractmethod
    async def list_recent(self, limit: int = 100) -> List[UrlRecord]:
        """List most recently created records, newest first."""
        pass

    @abstractmethod
    async def get_statistics(self) -> Dict[str, Any]:
        """Get store statistics.

        Returns:
            Dictionary with ``total_urls`` and ``database``
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the storage is reachable.

        Returns:
            True if healthy, False otherwise
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close storage connections."""
        pass
