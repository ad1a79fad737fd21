"""Schema migrations for the Postgres backend."""

import os
import logging
from typing import Optional, List

import asyncpg


DEFAULT_MIGRATIONS_DIR = os.path.join(os.path.dirname(__file__), "migrations")

CREATE_VERSIONS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version TEXT PRIMARY KEY,
    applied_at TIMESTAMPTZ NOT NULL DEFAULT now()
);
"""


def list_migrations(migrations_dir: str = DEFAULT_MIGRATIONS_DIR) -> List[str]:
    """List migration files in apply order.

    Args:
        migrations_dir: Directory holding ``NNNN_name.sql`` files

    Returns:
        Sorted list of file names
    """
    return sorted(name for name in os.listdir(migrations_dir) if name.endswith(".sql"))


async def apply_migrations(
    conn: asyncpg.Connection,
    migrations_dir: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
) -> List[str]:
    """Apply every migration not yet recorded in ``schema_migrations``.

    Each file runs in its own transaction together with its version row.

    Args:
        conn: Open database connection
        migrations_dir: Directory with migration files (defaults to the bundled ones)
        logger: Optional logger instance

    Returns:
        Versions applied by this call
    """
    logger = logger or logging.getLogger(__name__)
    migrations_dir = migrations_dir or DEFAULT_MIGRATIONS_DIR

    await conn.execute(CREATE_VERSIONS_TABLE_SQL)
    rows = await conn.fetch("SELECT version FROM schema_migrations")
    applied = {row["version"] for row in rows}

    newly_applied = []
    for name in list_migrations(migrations_dir):
        version = name[:-len(".sql")]
        if version in applied:
            continue

        with open(os.path.join(migrations_dir, name), "r", encoding="utf-8") as f:
            sql = f.read()

        logger.info(f"Applying migration {version}")
        async with conn.transaction():
            await conn.execute(sql)
            await conn.execute(
                "INSERT INTO schema_migrations (version) VALUES ($1)",
                version,
            )
        newly_applied.append(version)

    if not newly_applied:
        logger.debug("Database schema is up to date")
    return newly_applied
