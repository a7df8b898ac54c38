"""Database layer for the yaus URL shortener."""

import logging
from typing import Optional

from .base import LocatorStoreBase
from .models import Resolution, ResolveStatus, UrlRecord
from .sqlite import LocatorStoreSQLite
from .postgres import LocatorStorePostgres
from ..locator import LocatorGenerator

POSTGRES_SCHEMES = ("postgres://", "postgresql://")


def create_store(
    short_db: Optional[str] = None,
    generator: Optional[LocatorGenerator] = None,
    timeout_seconds: float = 5.0,
    pool_max_size: int = 10,
    logger: Optional[logging.Logger] = None,
) -> LocatorStoreBase:
    """Create the store named by a storage location.

    Args:
        short_db: ``postgresql://`` DSN, SQLite file path, or None for in-memory
        generator: Candidate locator generator
        timeout_seconds: Storage operation timeout
        pool_max_size: Connection pool size (PostgreSQL only)
        logger: Optional logger

    Returns:
        Store instance (not yet initialized)
    """
    if short_db and short_db.startswith(POSTGRES_SCHEMES):
        return LocatorStorePostgres(
            db_config=short_db,
            generator=generator,
            timeout_seconds=timeout_seconds,
            pool_max_size=pool_max_size,
            logger=logger,
        )

    return LocatorStoreSQLite(
        db_config=short_db,
        generator=generator,
        timeout_seconds=timeout_seconds,
        logger=logger,
    )


__all__ = [
    "LocatorStoreBase",
    "LocatorStoreSQLite",
    "LocatorStorePostgres",
    "Resolution",
    "ResolveStatus",
    "UrlRecord",
    "create_store",
]
