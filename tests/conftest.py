"""Pytest configuration and fixtures."""

import os
import pytest
from typing import AsyncGenerator

from config import Config
from shorturl.database.inmemory import InMemoryStore
from shorturl.database.file import FileStore
from shorturl.service import ShortenerService
from shorturl.shortcode import ShortCodeGenerator
from shorturl.common.logging_config import setup_logging


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def memory_store(logger) -> InMemoryStore:
    """Create in-memory store."""
    return InMemoryStore(logger=logger)


@pytest.fixture
async def file_store(tmp_path, logger) -> AsyncGenerator[FileStore, None]:
    """Create file store in a temporary directory."""
    store = FileStore(path=str(tmp_path / "links.json"), logger=logger)
    await store.connect()

    yield store

    await store.close()


@pytest.fixture
def short_code_generator():
    """Create short id generator."""
    return ShortCodeGenerator()


@pytest.fixture
def service(memory_store, short_code_generator, logger) -> ShortenerService:
    """Create service instance over the in-memory store."""
    return ShortenerService(
        store=memory_store,
        cache=None,
        short_code_generator=short_code_generator,
        logger=logger,
    )


@pytest.fixture
def test_config() -> Config:
    """Configuration pinned for tests, independent of the environment."""
    return Config(
        base_url="http://testserver",
        path_prefix="",
        database_dsn=None,
        file_storage_path=None,
        redis_url=None,
        owner_header="X-User-ID",
    )


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]


@pytest.fixture
def postgres_dsn():
    """Postgres DSN for backend tests; skips when not configured."""
    dsn = os.getenv("TEST_DATABASE_DSN")
    if not dsn:
        pytest.skip("TEST_DATABASE_DSN not set")
    return dsn


class SequenceRandom:
    """Deterministic random byte source returning queued chunks."""

    def __init__(self, *chunks: bytes):
        self.chunks = list(chunks)
        self.calls = 0

    def __call__(self, n: int) -> bytes:
        self.calls += 1
        if len(self.chunks) > 1:
            return self.chunks.pop(0)
        return self.chunks[0]
