"""
Command-line interface for URL shortener service.

Usage:
    shorturl shorten <url> [--user USER_ID]
    shorturl batch <file.json> [--user USER_ID]
    shorturl get <short_id> [--user USER_ID]
    shorturl user-urls <user_id>
    shorturl health
    shorturl migrate

Storage is picked from the same environment variables as the server
(DATABASE_DSN, FILE_STORAGE_PATH), or from --database-dsn / --file.
"""

import argparse
import asyncio
import json
import sys
from typing import Optional

from config import load_config
from .database import create_store, PostgresStore
from .service import ShortenerService
from .common.logging_config import setup_logging
from .common.url_builder import build_short_url
from .exceptions import ShortenerError, InvalidRequestError, NotFoundError


class ShortenerCLI:
    """Command-line interface for URL shortener."""

    def __init__(self, config, verbose: bool = False):
        """Initialize CLI."""
        self.config = config
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.store = None
        self.service = None

    async def initialize(self):
        """Open the configured store and build the service."""
        self.store = create_store(self.config, logger=self.logger)
        await self.store.connect()
        self.service = ShortenerService(
            store=self.store,
            logger=self.logger,
            max_generation_attempts=self.config.max_generation_attempts,
            max_batch_generation_attempts=self.config.max_batch_generation_attempts,
        )

    async def cleanup(self):
        """Cleanup resources."""
        if self.service:
            await self.service.close()

    def _short_url(self, short_id: str) -> str:
        return build_short_url(short_id, self.config.base_url, self.config.path_prefix)

    @staticmethod
    def _emit(payload: dict, error: bool = False) -> int:
        print(json.dumps(payload, indent=2), file=sys.stderr if error else sys.stdout)
        return 1 if error else 0

    async def shorten(self, url: str, user_id: Optional[str] = None) -> int:
        """Shorten a URL."""
        try:
            result = await self.service.shorten(url, owner_id=user_id)
        except ShortenerError as e:
            return self._emit({"success": False, "error": str(e)}, error=True)

        return self._emit({
            "success": True,
            "short_id": result.short_id,
            "short_url": self._short_url(result.short_id),
            "original_url": result.original_url,
            "conflict": result.conflict,
        })

    async def batch(self, path: str, user_id: Optional[str] = None) -> int:
        """Shorten every ``{correlation_id, original_url}`` entry of a JSON file."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                entries = json.load(f)
            pairs = [(entry["correlation_id"], entry["original_url"]) for entry in entries]
        except (OSError, ValueError, KeyError, TypeError) as e:
            return self._emit({"success": False, "error": f"Cannot read batch file: {e}"}, error=True)

        try:
            result = await self.service.shorten_batch(pairs, owner_id=user_id)
        except ShortenerError as e:
            return self._emit({"success": False, "error": str(e)}, error=True)

        return self._emit({
            "success": True,
            "conflict": result.conflict,
            "items": [
                {"correlation_id": item.correlation_id, "short_url": self._short_url(item.short_id)}
                for item in result.items
            ],
        })

    async def get(self, short_id: str, user_id: Optional[str] = None) -> int:
        """Get original URL for a short id."""
        try:
            original_url = await self.service.resolve(short_id, owner_id=user_id)
        except (InvalidRequestError, NotFoundError) as e:
            return self._emit({"success": False, "error": str(e)}, error=True)

        return self._emit({"success": True, "short_id": short_id, "original_url": original_url})

    async def user_urls(self, user_id: str) -> int:
        """List a user's short URLs."""
        try:
            links = await self.service.user_urls(user_id)
        except (InvalidRequestError, NotFoundError) as e:
            return self._emit({"success": False, "error": str(e)}, error=True)

        return self._emit({
            "success": True,
            "count": len(links),
            "urls": [
                {"short_url": self._short_url(link.short_id), "original_url": link.original_url}
                for link in links
            ],
        })

    async def health(self) -> int:
        """Check service health."""
        health_status = await self.service.health_check()
        self._emit({"success": health_status["overall"], "health": health_status})
        return 0 if health_status["overall"] else 1

    async def migrate(self) -> int:
        """Apply pending Postgres migrations."""
        if not isinstance(self.store, PostgresStore):
            return self._emit({"success": False, "error": "DATABASE_DSN is not configured"}, error=True)

        # connect() already applied migrations; report the resulting state
        applied, versions = await self.store.migrate()

        return self._emit({
            "success": True,
            "applied_now": applied,
            "versions": versions,
        })


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="URL Shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL into a file store
  %(prog)s --file links.json shorten https://example.com/long/url

  # Shorten a batch for a user
  %(prog)s batch urls.json --user alice

  # Resolve a short id
  %(prog)s get AbCd1234

  # Apply database migrations
  %(prog)s --database-dsn postgresql://localhost/shorturl migrate
        """
    )

    parser.add_argument("--database-dsn", help="Postgres connection string (default: DATABASE_DSN env)")
    parser.add_argument("--file", dest="file_storage_path", help="JSON storage file (default: FILE_STORAGE_PATH env)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--user", help="Owner id")

    batch_parser = subparsers.add_parser("batch", help="Shorten URLs listed in a JSON file")
    batch_parser.add_argument("path", help="JSON array of {correlation_id, original_url}")
    batch_parser.add_argument("--user", help="Owner id")

    get_parser = subparsers.add_parser("get", help="Get original URL")
    get_parser.add_argument("short_id", help="Short id to lookup")
    get_parser.add_argument("--user", help="Restrict lookup to this owner")

    user_parser = subparsers.add_parser("user-urls", help="List a user's short URLs")
    user_parser.add_argument("user_id", help="Owner id")

    subparsers.add_parser("health", help="Check storage health")
    subparsers.add_parser("migrate", help="Apply Postgres migrations")

    return parser


async def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    overrides = {}
    if args.database_dsn:
        overrides["database_dsn"] = args.database_dsn
    if args.file_storage_path:
        overrides["file_storage_path"] = args.file_storage_path

    cli = ShortenerCLI(load_config(**overrides), verbose=args.verbose)

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url, args.user)
        elif args.command == "batch":
            return await cli.batch(args.path, args.user)
        elif args.command == "get":
            return await cli.get(args.short_id, args.user)
        elif args.command == "user-urls":
            return await cli.user_urls(args.user_id)
        elif args.command == "health":
            return await cli.health()
        elif args.command == "migrate":
            return await cli.migrate()
        else:
            parser.print_help()
            return 1
    except ShortenerError as e:
        cli.logger.error(f"Command failed: {e}")
        return cli._emit({"success": False, "error": str(e)}, error=True)
    finally:
        await cli.cleanup()


def run():
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
