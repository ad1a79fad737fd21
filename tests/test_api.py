"""Tests for API endpoints."""

import gzip
import json

import pytest
from httpx import AsyncClient, ASGITransport
from unittest.mock import AsyncMock

from web_app import create_app
from shorturl.exceptions import StoreUnavailableError, GenerationExhaustedError


@pytest.fixture
def app(service, test_config, logger):
    """Create test FastAPI app."""
    return create_app(service_instance=service, config=test_config, logger=logger)


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


class TestPlainEndpoints:
    """Test the plain-text shorten, redirect and ping routes."""

    async def test_shorten_plain(self, client):
        response = await client.post("/", content="https://example.com/page")

        assert response.status_code == 201
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text.startswith("http://testserver/")
        assert len(response.text.rsplit("/", 1)[1]) == 8

    async def test_shorten_plain_conflict(self, client):
        first = await client.post("/", content="https://example.com/page")
        second = await client.post("/", content="https://example.com/page")

        assert second.status_code == 409
        assert second.text == first.text

    async def test_shorten_plain_invalid(self, client):
        response = await client.post("/", content="not-a-url")

        assert response.status_code == 400

    async def test_redirect(self, client):
        created = await client.post("/", content="https://example.com/page")
        short_id = created.text.rsplit("/", 1)[1]

        response = await client.get(f"/{short_id}")

        assert response.status_code == 307
        assert response.headers["location"] == "https://example.com/page"

    async def test_redirect_malformed_id(self, client):
        response = await client.get("/bad")

        assert response.status_code == 400

    async def test_redirect_unknown_id(self, client):
        response = await client.get("/AbCd1234")

        assert response.status_code == 400

    async def test_redirect_store_failure(self, client, service):
        service.store.get = AsyncMock(side_effect=StoreUnavailableError("connection lost"))

        response = await client.get("/AbCd1234")

        assert response.status_code == 500

    async def test_ping(self, client):
        response = await client.get("/ping")

        assert response.status_code == 200

    async def test_ping_store_down(self, client, service):
        service.store.ping = AsyncMock(side_effect=StoreUnavailableError("down"))

        response = await client.get("/ping")

        assert response.status_code == 500


class TestAPIEndpoints:
    """Test JSON API endpoints."""

    async def test_shorten_url(self, client):
        response = await client.post("/api/shorten", json={"url": "https://example.com/page"})

        assert response.status_code == 201
        assert response.json()["result"].startswith("http://testserver/")

    async def test_shorten_url_conflict(self, client):
        first = await client.post("/api/shorten", json={"url": "https://example.com/page"})
        second = await client.post("/api/shorten", json={"url": "https://example.com/page"})

        assert second.status_code == 409
        assert second.json()["result"] == first.json()["result"]

    async def test_shorten_invalid_url(self, client):
        response = await client.post("/api/shorten", json={"url": "not-a-url"})

        assert response.status_code == 400
        assert "not-a-url" in response.json()["message"]

    async def test_shorten_bad_json(self, client):
        response = await client.post(
            "/api/shorten",
            content="{broken",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400

    async def test_shorten_generation_exhausted_is_opaque(self, client, service):
        service._generate_unique_short_id = AsyncMock(side_effect=GenerationExhaustedError(10000))

        response = await client.post("/api/shorten", json={"url": "https://example.com/page"})

        assert response.status_code == 500
        assert response.json() == {"message": "internal server error"}

    async def test_shorten_batch(self, client):
        response = await client.post("/api/shorten/batch", json=[
            {"correlation_id": "c1", "original_url": "https://a.com"},
            {"correlation_id": "c2", "original_url": "https://b.com"},
        ])

        assert response.status_code == 201
        data = response.json()
        assert [item["correlation_id"] for item in data] == ["c1", "c2"]
        assert all(item["short_url"].startswith("http://testserver/") for item in data)

    async def test_shorten_batch_invalid(self, client, service):
        response = await client.post("/api/shorten/batch", json=[
            {"correlation_id": "c1", "original_url": "https://a.com"},
            {"correlation_id": "c2", "original_url": "not-a-url"},
        ])

        assert response.status_code == 400
        assert await service.store.get_user_urls("") == []

    async def test_shorten_batch_conflict(self, client):
        first = await client.post("/api/shorten", json={"url": "https://a.com"})

        response = await client.post("/api/shorten/batch", json=[
            {"correlation_id": "c1", "original_url": "https://a.com"},
            {"correlation_id": "c2", "original_url": "https://b.com"},
        ])

        assert response.status_code == 409
        assert response.json()[0]["short_url"] == first.json()["result"]

    async def test_owner_header_scopes_conflicts(self, client):
        alice = await client.post("/api/shorten", json={"url": "https://a.com"}, headers={"X-User-ID": "alice"})
        bob = await client.post("/api/shorten", json={"url": "https://a.com"}, headers={"X-User-ID": "bob"})

        assert alice.status_code == 201
        assert bob.status_code == 201
        assert alice.json()["result"] != bob.json()["result"]

    async def test_user_urls(self, client):
        await client.post("/api/shorten", json={"url": "https://a.com"}, headers={"X-User-ID": "alice"})
        await client.post("/", content="https://b.com", headers={"X-User-ID": "alice"})

        response = await client.get("/api/user/urls", headers={"X-User-ID": "alice"})

        assert response.status_code == 200
        assert sorted(item["original_url"] for item in response.json()) == ["https://a.com", "https://b.com"]

    async def test_user_urls_empty(self, client):
        response = await client.get("/api/user/urls", headers={"X-User-ID": "carol"})

        assert response.status_code == 204

    async def test_user_urls_requires_owner(self, client):
        response = await client.get("/api/user/urls")

        assert response.status_code == 401

    async def test_health(self, client):
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"

    async def test_large_batch_response_is_gzipped(self, client):
        items = [{"correlation_id": f"c{i}", "original_url": f"https://e.com/{i}"} for i in range(50)]

        response = await client.post(
            "/api/shorten/batch",
            json=items,
            headers={"Accept-Encoding": "gzip"},
        )

        assert response.status_code == 201
        assert response.headers.get("content-encoding") == "gzip"
        assert len(response.json()) == 50

    async def test_gzip_plain_request_body(self, client):
        response = await client.post(
            "/",
            content=gzip.compress(b"https://example.com/zipped"),
            headers={"Content-Encoding": "gzip"},
        )

        assert response.status_code == 201
        short_id = response.text.rsplit("/", 1)[-1]
        redirect = await client.get(f"/{short_id}", follow_redirects=False)
        assert redirect.headers["location"] == "https://example.com/zipped"

    async def test_gzip_json_request_body(self, client):
        payload = json.dumps({"url": "https://example.com/zipped-json"}).encode("utf-8")

        response = await client.post(
            "/api/shorten",
            content=gzip.compress(payload),
            headers={"Content-Encoding": "gzip", "Content-Type": "application/json"},
        )

        assert response.status_code == 201

    async def test_corrupt_gzip_body(self, client):
        response = await client.post(
            "/",
            content=b"definitely not gzip",
            headers={"Content-Encoding": "gzip"},
        )

        assert response.status_code == 400
