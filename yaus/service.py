"""Business logic service for the yaus URL shortener."""

import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any, List

from .database import create_store
from .database.base import LocatorStoreBase
from .database.cache import RedisCache
from .database.models import ResolveStatus, UrlRecord
from .common.validators import is_valid_url
from .common.url_builder import build_short_url
from .exceptions import InvalidURLError
from .locator import LocatorGenerator


@dataclass(frozen=True)
class ShortenResult:
    """Outcome of shortening a long URL."""

    locator: str
    short_url: str
    long_url: str
    status: ResolveStatus
    record: Optional[UrlRecord] = None

    @property
    def created(self) -> bool:
        return self.status is ResolveStatus.CREATED


class ShortenerService:
    """Service layer for URL shortening business logic."""

    def __init__(
        self,
        store: LocatorStoreBase,
        base_url: str,
        path_prefix: str = "",
        cache: Optional[RedisCache] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize shortener service.

        Args:
            store: Locator store instance
            base_url: Host prefix for short URLs
            path_prefix: Optional path prefix for short URLs
            cache: Optional cache instance
            logger: Optional logger
        """
        self.store = store
        self.base_url = base_url
        self.path_prefix = path_prefix
        self.cache = cache
        self.logger = logger or logging.getLogger(__name__)

    def short_url_for(self, locator: str) -> str:
        return build_short_url(locator, self.base_url, self.path_prefix)

    async def shorten(self, long_url: str) -> ShortenResult:
        """Shorten a long URL, reusing the existing locator if it was seen before.

        Args:
            long_url: The long URL

        Returns:
            ShortenResult; ``status`` tells whether the record was just created

        Raises:
            InvalidURLError: If the URL fails validation (no storage access)
            LocatorConflictError: On an unresolvable locator collision
            StorageUnavailableError: If the store cannot be reached
        """
        is_valid, error = is_valid_url(long_url)
        if not is_valid:
            raise InvalidURLError(f"Invalid URL: {error}")

        resolution = await self.store.resolve_or_create(long_url)

        if self.cache:
            await self.cache.set(self.cache.get_cache_key(resolution.locator), long_url)

        if resolution.created:
            self.logger.info(f"Shortened {long_url} -> {resolution.locator}")
        else:
            self.logger.debug(f"Already shortened {long_url} -> {resolution.locator}")

        return ShortenResult(
            locator=resolution.locator,
            short_url=self.short_url_for(resolution.locator),
            long_url=long_url,
            status=resolution.status,
            record=resolution.record,
        )

    async def resolve(self, locator: str) -> Optional[str]:
        """Get the long URL for a locator.

        Args:
            locator: The locator to look up

        Returns:
            Long URL or None if not found
        """
        if self.cache:
            cached_url = await self.cache.get(self.cache.get_cache_key(locator))
            if cached_url:
                self.logger.debug(f"Cache hit for {locator}")
                return cached_url

        long_url = await self.store.lookup(locator)

        if long_url is None:
            self.logger.info(f"Locator not found: {locator}")
            return None

        if self.cache:
            await self.cache.set(self.cache.get_cache_key(locator), long_url)

        self.logger.debug(f"Resolved {locator} -> {long_url}")
        return long_url

    async def get_url_info(self, locator: str) -> Optional[Dict[str, Any]]:
        """Get public information about a locator, or None."""
        record = await self.store.get_record(locator)
        if record is None:
            return None

        return {
            **record.to_dict(),
            "created_at": record.created_at,
            "short_url": self.short_url_for(record.locator),
        }

    async def list_recent(self, limit: int = 100) -> List[UrlRecord]:
        return await self.store.list_recent(limit)

    async def get_statistics(self) -> Dict[str, Any]:
        """Get service statistics."""
        db_stats = await self.store.get_statistics()

        return {
            **db_stats,
            "cache_enabled": self.cache is not None and self.cache.enabled,
        }

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.store.health_check()
        cache_healthy = await self.cache.ping() if self.cache else True

        return {
            "database": db_healthy,
            "cache": cache_healthy,
            "overall": db_healthy and cache_healthy,
        }

    async def close(self) -> None:
        """Close service connections."""
        await self.store.close()
        if self.cache:
            await self.cache.close()


def build_service(config, logger: Optional[logging.Logger] = None) -> ShortenerService:
    """Construct the store, cache and service described by a ``Config``.

    Shared by the server and the CLI so both derive identical locators and
    short URLs. Nothing is opened here: call ``store.initialize()`` and
    ``cache.connect()`` before use.
    """
    generator = LocatorGenerator(
        length=config.locator_length,
        max_length=config.max_locator_length,
    )
    store = create_store(
        short_db=config.short_db,
        generator=generator,
        timeout_seconds=config.storage_timeout_seconds,
        pool_max_size=config.pool_max_size,
        logger=logger,
    )

    cache = None
    if config.redis_url:
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )

    return ShortenerService(
        store=store,
        base_url=config.base_url,
        path_prefix=config.path_prefix,
        cache=cache,
        logger=logger,
    )
