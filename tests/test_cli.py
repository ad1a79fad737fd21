"""Tests for the command-line interface."""

import json

import pytest

from shorturl import cli


@pytest.fixture
def store_path(tmp_path, monkeypatch):
    monkeypatch.delenv("DATABASE_DSN", raising=False)
    monkeypatch.delenv("FILE_STORAGE_PATH", raising=False)
    return str(tmp_path / "links.json")


class TestCLI:
    """Test CLI commands against a file store."""

    async def test_shorten_then_get(self, store_path, capsys):
        assert await cli.main(["--file", store_path, "shorten", "https://example.com/page"]) == 0
        created = json.loads(capsys.readouterr().out)
        assert not created["conflict"]

        assert await cli.main(["--file", store_path, "get", created["short_id"]]) == 0
        resolved = json.loads(capsys.readouterr().out)
        assert resolved["original_url"] == "https://example.com/page"

    async def test_shorten_invalid(self, store_path, capsys):
        assert await cli.main(["--file", store_path, "shorten", "not-a-url"]) == 1
        assert "not-a-url" in json.loads(capsys.readouterr().err)["error"]

    async def test_batch_and_user_urls(self, store_path, tmp_path, capsys):
        batch_file = tmp_path / "batch.json"
        batch_file.write_text(json.dumps([
            {"correlation_id": "c1", "original_url": "https://a.com"},
            {"correlation_id": "c2", "original_url": "https://b.com"},
        ]))

        assert await cli.main(["--file", store_path, "batch", str(batch_file), "--user", "alice"]) == 0
        result = json.loads(capsys.readouterr().out)
        assert [item["correlation_id"] for item in result["items"]] == ["c1", "c2"]

        assert await cli.main(["--file", store_path, "user-urls", "alice"]) == 0
        listing = json.loads(capsys.readouterr().out)
        assert listing["count"] == 2

    async def test_migrate_requires_database(self, store_path, capsys):
        assert await cli.main(["--file", store_path, "migrate"]) == 1

    async def test_no_command(self, store_path, capsys):
        assert await cli.main([]) == 1
