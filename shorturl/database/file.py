"""File-backed storage backend for URL shortener."""

import os
import json
import asyncio
import logging
from typing import Optional, List

from .inmemory import InMemoryStore
from .models import ShortLink, BatchItem
from ..exceptions import URLConflictError, StoreUnavailableError


class FileStore(InMemoryStore):
    """In-memory store persisted to a JSON file.

    The file holds a flat array of ``{uuid, short_url, original_url,
    user_id}`` records. It is read once by :meth:`connect` and fully
    rewritten after every mutation, single inserts included. This keeps the
    on-disk format a plain array instead of an append log; it is slow for
    large stores.

    Inherits the probe-then-insert race of :class:`InMemoryStore`.
    """

    backend_name = "file"

    def __init__(self, path: str, logger: Optional[logging.Logger] = None):
        """Initialize file store.

        Args:
            path: Path of the JSON storage file
            logger: Optional logger instance
        """
        super().__init__(logger)
        self.path = path

    async def connect(self) -> None:
        """Load all records from the storage file.

        A missing file is an empty store. An unreadable or malformed file
        fails startup.
        """
        try:
            records = await asyncio.to_thread(self._read_records)
            links = {}
            for record in records:
                link = ShortLink.from_record(record)
                links.setdefault(link.owner_id, {})[link.short_id] = link.original_url
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            self.logger.error(f"Error loading storage file {self.path}: {e}")
            raise StoreUnavailableError(f"cannot load storage file {self.path}", e) from e

        async with self._lock:
            self._links = links

        self.logger.info(f"Loaded {len(records)} records from {self.path}")

    def _read_records(self) -> list:
        if not os.path.exists(self.path):
            return []
        with open(self.path, "r", encoding="utf-8") as f:
            content = f.read()
        if not content.strip():
            return []
        records = json.loads(content)
        if not isinstance(records, list):
            raise ValueError("storage file must contain a JSON array")
        return records

    def _snapshot(self) -> list:
        records = []
        for owner_id, links in self._links.items():
            for short_id, url in links.items():
                link = ShortLink(short_id, url, owner_id)
                records.append(link.to_record(str(len(records) + 1)))
        return records

    def _write_records(self, records: list) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(records, f)
        os.replace(tmp_path, self.path)

    async def _save(self) -> None:
        """Rewrite the whole storage file. Caller holds the lock."""
        records = self._snapshot()
        try:
            await asyncio.to_thread(self._write_records, records)
        except OSError as e:
            self.logger.error(f"Error writing storage file {self.path}: {e}")
            raise StoreUnavailableError(f"cannot write storage file {self.path}", e) from e
        self.logger.debug(f"Saved {len(records)} records to {self.path}")

    async def set(self, link: ShortLink) -> None:
        async with self._lock:
            existing = self._insert(link)
            if existing is None:
                try:
                    await self._save()
                except StoreUnavailableError:
                    self._links[link.owner_id].pop(link.short_id, None)
                    raise
        if existing is not None:
            raise URLConflictError(existing, link.original_url)

    async def set_batch(self, items: List[BatchItem]) -> List[BatchItem]:
        async with self._lock:
            previous = {owner_id: dict(links) for owner_id, links in self._links.items()}
            self._apply_batch(items)
            try:
                await self._save()
            except StoreUnavailableError:
                self._links = previous
                raise
        return items
