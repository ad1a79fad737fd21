#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

The storage backend is chosen once at startup: Postgres when DATABASE_DSN is
set, a JSON file when FILE_STORAGE_PATH is set, memory otherwise. Memory and
file storage live inside one process, so run them with WORKERS=1.

Usage:
    python app.py

Environment variables:
    HOST / PORT - Address to listen on
    BASE_URL - Base URL for short links
    DATABASE_DSN - Postgres connection string (optional)
    FILE_STORAGE_PATH - JSON storage file (optional)
    REDIS_URL - Redis connection URL for lookup caching (optional)
    OWNER_HEADER - Header carrying the owner id (default X-User-ID)
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from shorturl.database import create_store, RedisCache
from shorturl.service import ShortenerService
from shorturl.shortcode import ShortCodeGenerator
from shorturl.common.logging_config import setup_logging
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting URL shortener service...")

    # Fails startup if the file cannot be loaded or migrations fail
    store = create_store(config, logger=logger)
    await store.connect()

    cache = None
    if config.redis_url:
        logger.info(f"Connecting to Redis at {config.redis_url}")
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )
        await cache.connect()
    else:
        logger.info("Redis caching disabled")

    service = ShortenerService(
        store=store,
        cache=cache,
        short_code_generator=ShortCodeGenerator(),
        logger=logger,
        max_generation_attempts=config.max_generation_attempts,
        max_batch_generation_attempts=config.max_batch_generation_attempts,
    )
    app.state.service = service

    logger.info(f"Service started with {store.backend_name} storage")

    yield

    logger.info("Shutting down URL shortener service...")
    await service.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("URL Shortener Service")
    logger.debug(f"Configuration: {config.model_dump(exclude={'database_dsn'})}")

    app = create_app(service_instance=None, config=config, logger=logger)
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        access_log=False,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
