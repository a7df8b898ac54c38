"""Pytest configuration and fixtures."""

import pytest
from typing import AsyncGenerator, Iterator
from httpx import ASGITransport, AsyncClient

from config import Config
from web_app import create_app
from yaus.database.sqlite import LocatorStoreSQLite
from yaus.locator import LocatorGenerator
from yaus.service import ShortenerService
from yaus.common.logging_config import setup_logging


class CollidingGenerator(LocatorGenerator):
    """Generator that derives the same digest for every URL."""

    def candidates(self, long_url: str) -> Iterator[str]:
        digest = "0" * 64
        for length in range(self.length, self.max_length + 1):
            yield digest[:length]


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def locator_generator():
    """Create locator generator."""
    return LocatorGenerator(length=7, max_length=12)


@pytest.fixture
async def test_store(locator_generator, logger) -> AsyncGenerator[LocatorStoreSQLite, None]:
    """Create an in-memory store instance."""
    store = LocatorStoreSQLite(
        db_config=None,
        generator=locator_generator,
        logger=logger,
    )
    await store.initialize()

    yield store

    await store.close()


@pytest.fixture
async def file_store(tmp_path, locator_generator, logger) -> AsyncGenerator[LocatorStoreSQLite, None]:
    """Create a store backed by a temporary SQLite file."""
    store = LocatorStoreSQLite(
        db_config=str(tmp_path / "urls.sqlite3"),
        generator=locator_generator,
        logger=logger,
    )
    await store.initialize()

    yield store

    await store.close()


@pytest.fixture
def config():
    """Create test configuration."""
    return Config(
        _env_file=None,
        short_db=None,
        base_url="http://yaus.pw",
    )


@pytest.fixture
async def service(test_store, config, logger) -> ShortenerService:
    """Create service instance."""
    return ShortenerService(
        store=test_store,
        base_url=config.base_url,
        cache=None,  # No cache for tests
        logger=logger,
    )


@pytest.fixture
async def app(test_store, service, config):
    """Create test FastAPI app."""
    return create_app(
        service_instance=service,
        config=config,
    )


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/a/b?c=1",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]


@pytest.fixture
def colliding_generator():
    """Factory for generators whose candidates collide across all URLs."""
    def factory(length: int = 7, max_length: int = 9) -> CollidingGenerator:
        return CollidingGenerator(length=length, max_length=max_length)
    return factory
