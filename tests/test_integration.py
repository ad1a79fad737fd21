"""End-to-end tests over a file-backed store."""

import json

from httpx import AsyncClient, ASGITransport

from config import Config
from web_app import create_app
from shorturl.database import create_store, InMemoryStore, FileStore, PostgresStore
from shorturl.service import ShortenerService


class TestStoreSelection:
    """create_store picks the backend from configuration."""

    def test_memory_by_default(self, logger):
        store = create_store(Config(database_dsn=None, file_storage_path=None), logger)
        assert type(store) is InMemoryStore

    def test_file_when_path_set(self, tmp_path, logger):
        store = create_store(Config(database_dsn=None, file_storage_path=str(tmp_path / "s.json")), logger)
        assert type(store) is FileStore

    def test_postgres_wins(self, tmp_path, logger):
        config = Config(database_dsn="postgresql://localhost/db", file_storage_path=str(tmp_path / "s.json"))
        assert type(create_store(config, logger)) is PostgresStore


class TestIntegration:
    """End-to-end lifecycle."""

    async def test_full_url_lifecycle(self, tmp_path, logger):
        path = tmp_path / "links.json"
        config = Config(
            base_url="http://testserver",
            file_storage_path=str(path),
            database_dsn=None,
            redis_url=None,
        )

        store = create_store(config, logger)
        await store.connect()
        service = ShortenerService(store=store, logger=logger)
        app = create_app(service_instance=service, config=config, logger=logger)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            created = await client.post("/api/shorten", json={"url": "https://example.com/page"})
            assert created.status_code == 201
            short_url = created.json()["result"]
            short_id = short_url.rsplit("/", 1)[1]

            redirect = await client.get(f"/{short_id}")
            assert redirect.status_code == 307
            assert redirect.headers["location"] == "https://example.com/page"

            again = await client.post("/api/shorten", json={"url": "https://example.com/page"})
            assert again.status_code == 409
            assert again.json()["result"] == short_url

            bad = await client.post("/api/shorten/batch", json=[
                {"correlation_id": "c1", "original_url": "https://a.com"},
                {"correlation_id": "c2", "original_url": "not-a-url"},
            ])
            assert bad.status_code == 400

        await service.close()

        records = json.loads(path.read_text())
        assert [(r["short_url"], r["original_url"]) for r in records] == [(short_id, "https://example.com/page")]

        # State survives a restart
        reopened = create_store(config, logger)
        await reopened.connect()
        restarted = ShortenerService(store=reopened, logger=logger)
        assert await restarted.resolve(short_id) == "https://example.com/page"
