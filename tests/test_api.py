"""Tests for API endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

from web_app import create_app
from yaus.database.sqlite import LocatorStoreSQLite
from yaus.locator import derive_locator
from yaus.service import ShortenerService


@pytest.mark.asyncio
class TestShortenQuery:
    """Test GET /shorten."""

    async def test_shorten_created_then_existing(self, client, sample_urls):
        """201 with the short URL first, 200 with the same URL after."""
        first = await client.get("/shorten", params={"url": sample_urls[0]})
        second = await client.get("/shorten", params={"url": sample_urls[0]})

        assert first.status_code == 201
        assert first.text == f"http://yaus.pw/{derive_locator(sample_urls[0])}"
        assert second.status_code == 200
        assert second.text == first.text

    async def test_shorten_first_query_parameter(self, client, sample_urls):
        """Without a url parameter the first query value is used."""
        response = await client.get("/shorten", params={"u": sample_urls[1]})

        assert response.status_code == 201
        assert response.text.endswith(derive_locator(sample_urls[1]))

    async def test_shorten_missing_query(self, client):
        response = await client.get("/shorten")

        assert response.status_code == 400
        assert response.text == "URL missing in query"

    async def test_shorten_malformed_url(self, client):
        response = await client.get("/shorten", params={"url": "not a url"})

        assert response.status_code == 400
        assert response.text == "Malformed URL"


@pytest.mark.asyncio
class TestRedirect:
    """Test GET /{locator}."""

    async def test_redirect(self, client, sample_urls):
        """Known locators redirect permanently to the long URL."""
        await client.get("/shorten", params={"url": sample_urls[0]})

        response = await client.get(f"/{derive_locator(sample_urls[0])}")

        assert response.status_code == 301
        assert response.headers["location"] == sample_urls[0]

    async def test_redirect_not_found(self, client):
        response = await client.get("/abcdef0")

        assert response.status_code == 404
        assert response.text == "Not found"

    async def test_redirect_invalid_locator(self, client):
        """Locators outside the hex alphabet are simply not found."""
        response = await client.get("/nonexistent")

        assert response.status_code == 404


@pytest.mark.asyncio
class TestAPIEndpoints:
    """Test JSON API endpoints."""

    async def test_shorten_url(self, client, sample_urls):
        """Test POST /api/shorten."""
        response = await client.post("/api/shorten", json={"url": sample_urls[0]})

        assert response.status_code == 201
        data = response.json()
        assert data["locator"] == derive_locator(sample_urls[0])
        assert data["short_url"] == f"http://yaus.pw/{data['locator']}"
        assert data["long_url"] == sample_urls[0]
        assert data["status"] == "created"
        assert "created_at" in data

    async def test_shorten_url_existing(self, client, sample_urls):
        """Repeated POST /api/shorten answers 200 with the same locator."""
        first = await client.post("/api/shorten", json={"url": sample_urls[0]})
        second = await client.post("/api/shorten", json={"url": sample_urls[0]})

        assert second.status_code == 200
        assert second.json()["status"] == "existing"
        assert second.json()["locator"] == first.json()["locator"]
        assert second.json()["created_at"] == first.json()["created_at"]

    async def test_shorten_invalid_url(self, client):
        """Test POST /api/shorten with invalid URL."""
        response = await client.post("/api/shorten", json={"url": "not-a-url"})

        assert response.status_code == 400

    async def test_shorten_conflict(self, logger, config, colliding_generator):
        """An unresolvable collision answers 409."""
        store = LocatorStoreSQLite(generator=colliding_generator(7, 7), logger=logger)
        service = ShortenerService(store=store, base_url=config.base_url, logger=logger)
        app = create_app(service_instance=service, config=config)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            first = await client.post("/api/shorten", json={"url": "https://example.com/one"})
            second = await client.post("/api/shorten", json={"url": "https://example.com/two"})
            query = await client.get("/shorten", params={"url": "https://example.com/two"})

        assert first.status_code == 201
        assert second.status_code == 409
        assert query.status_code == 409
        await store.close()

    async def test_shorten_storage_unavailable(self, tmp_path, logger, config):
        """An unreachable store answers 503."""
        store = LocatorStoreSQLite(db_config=str(tmp_path / "missing" / "urls.sqlite3"), logger=logger)
        service = ShortenerService(store=store, base_url=config.base_url, logger=logger)
        app = create_app(service_instance=service, config=config)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            response = await client.post("/api/shorten", json={"url": "https://example.com"})
            health = await client.get("/api/health")

        assert response.status_code == 503
        assert health.json()["database"] == "unhealthy"

    @pytest.mark.parametrize("path", ["/api/urls", "/api/urls/abcdef0", "/api/stats", "/abcdef0"])
    async def test_reads_storage_unavailable(self, tmp_path, logger, config, path):
        """Read endpoints answer 503, not 500, when the store is unreachable."""
        store = LocatorStoreSQLite(db_config=str(tmp_path / "missing" / "urls.sqlite3"), logger=logger)
        service = ShortenerService(store=store, base_url=config.base_url, logger=logger)
        app = create_app(service_instance=service, config=config)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            response = await client.get(path)

        assert response.status_code == 503

    async def test_app_state_holds_service_and_config(self, app, service, config):
        assert app.state.service is service
        assert app.state.config is config
        assert not hasattr(app.state, "store")

    async def test_get_url_info(self, client, sample_urls):
        """Test GET /api/urls/{locator}."""
        create_response = await client.post("/api/shorten", json={"url": sample_urls[0]})
        locator = create_response.json()["locator"]

        response = await client.get(f"/api/urls/{locator}")

        assert response.status_code == 200
        data = response.json()
        assert data["locator"] == locator
        assert data["long_url"] == sample_urls[0]
        assert "id" not in data

    async def test_get_url_info_not_found(self, client):
        response = await client.get("/api/urls/nonexistent")

        assert response.status_code == 404

    async def test_list_urls(self, client, sample_urls):
        """Test GET /api/urls."""
        for url in sample_urls:
            await client.post("/api/shorten", json={"url": url})

        response = await client.get("/api/urls", params={"limit": 2})

        assert response.status_code == 200
        assert [u["long_url"] for u in response.json()] == [sample_urls[2], sample_urls[1]]

    async def test_health_check(self, client):
        """Test GET /api/health."""
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert data["cache"] == "healthy"

    async def test_statistics(self, client, sample_urls):
        """Test GET /api/stats."""
        await client.post("/api/shorten", json={"url": sample_urls[0]})

        response = await client.get("/api/stats")

        assert response.status_code == 200
        assert response.json() == {"total_urls": 1, "database": "sqlite", "cache_enabled": False}


@pytest.mark.asyncio
class TestRequestLogging:
    """Test the request logging middleware."""

    async def test_request_logged(self, client, sample_urls, caplog):
        await client.get("/shorten", params={"url": sample_urls[0]})

        with caplog.at_level("INFO", logger="yaus.web"):
            await client.get(f"/{derive_locator(sample_urls[0])}")

        records = [r for r in caplog.records if r.name == "yaus.web"]
        assert len(records) == 1
        assert records[0].status_code == 301
        assert records[0].method == "GET"
        assert f"to {sample_urls[0]}" in records[0].getMessage()


@pytest.mark.asyncio
class TestAcceptedURLs:
    """Any syntactically valid absolute URL can be shortened."""

    @pytest.mark.parametrize("url", [
        "ftp://files.example.com/pub/file.txt",
        "https://example.com/" + "x" * 20_000,
    ])
    async def test_shorten_accepts(self, client, url):
        response = await client.post("/api/shorten", json={"url": url})

        assert response.status_code == 201
        assert response.json()["locator"] == derive_locator(url)
