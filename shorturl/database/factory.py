"""Storage backend selection."""

import logging
from typing import Optional

from .base import ShortenerDBBase
from .file import FileStore
from .inmemory import InMemoryStore
from .postgres import PostgresStore


def create_store(config, logger: Optional[logging.Logger] = None) -> ShortenerDBBase:
    """Pick the storage backend for a configuration.

    A database DSN wins over a file path; with neither, links live in memory.
    The returned store is not connected yet; call ``await store.connect()``.

    Args:
        config: Application configuration
        logger: Optional logger instance

    Returns:
        Storage backend instance
    """
    logger = logger or logging.getLogger(__name__)

    if config.database_dsn:
        logger.info("Using Postgres storage")
        return PostgresStore(
            dsn=config.database_dsn,
            pool_max_size=config.db_pool_max_size,
            command_timeout_seconds=config.db_command_timeout_seconds,
            migrations_dir=config.migrations_dir,
            logger=logger,
        )

    if config.file_storage_path:
        logger.info(f"Using file storage at {config.file_storage_path}")
        return FileStore(path=config.file_storage_path, logger=logger)

    logger.info("Using in-memory storage")
    return InMemoryStore(logger=logger)
