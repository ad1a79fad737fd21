"""Tests that the server handles many concurrent requests against one store."""

import asyncio

import pytest
from httpx import AsyncClient, ASGITransport

from web_app import create_app


@pytest.fixture
async def client(service, test_config, logger):
    app = create_app(service_instance=service, config=test_config, logger=logger)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


class TestConcurrentConnections:
    """Many simultaneous requests share one service and store."""

    async def test_concurrent_shorten_requests(self, client):
        concurrency = 50
        tasks = [
            client.post("/api/shorten", json={"url": f"https://example.com/page/{i}"})
            for i in range(concurrency)
        ]
        responses = await asyncio.gather(*tasks)

        assert all(r.status_code == 201 for r in responses)
        short_urls = {r.json()["result"] for r in responses}
        assert len(short_urls) == concurrency

    async def test_concurrent_redirects(self, client):
        created = await client.post("/", content="https://example.com/target")
        short_id = created.text.rsplit("/", 1)[1]

        responses = await asyncio.gather(*[client.get(f"/{short_id}") for _ in range(30)])

        assert all(r.status_code == 307 for r in responses)
        assert {r.headers["location"] for r in responses} == {"https://example.com/target"}

    async def test_concurrent_ping(self, client):
        responses = await asyncio.gather(*[client.get("/ping") for _ in range(30)])

        assert all(r.status_code == 200 for r in responses)
