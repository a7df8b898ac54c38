#!/usr/bin/env python3
"""
Command-line interface for the yaus URL shortener.

Reads the same settings as the server (environment and ``.env``), so
locators and short URLs match what the server produces. ``--db``,
``--base-url`` and ``--redis-url`` override individual settings.

Usage:
    yaus init
    yaus shorten <url>
    yaus resolve <locator>
    yaus info <locator>
    yaus list [--limit N]
    yaus health
"""

import argparse
import asyncio
import json
import sys
from typing import Optional, List

from pydantic import ValidationError

from config import Config, load_config

from .common.logging_config import setup_logging
from .exceptions import YausError
from .service import ShortenerService, build_service


class YausCLI:
    """Command-line interface for yaus."""

    def __init__(self, config: Config, verbose: bool = False):
        """Initialize CLI."""
        self.config = config
        # stdout carries the JSON result
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING", stream=sys.stderr)
        self.service: Optional[ShortenerService] = None

    async def initialize(self):
        """Initialize store and service."""
        service = build_service(self.config, self.logger)
        # Assigned first so cleanup closes the store even if initialization fails
        self.service = service

        await service.store.initialize()
        if service.cache:
            await service.cache.connect()

    async def cleanup(self):
        """Cleanup resources."""
        if self.service:
            await self.service.close()

    def _print(self, payload: dict, error: bool = False) -> int:
        print(json.dumps(payload, indent=2), file=sys.stderr if error else sys.stdout)
        return 1 if error else 0

    async def init(self):
        """Schema was created by :meth:`initialize`; confirm the store answers."""
        healthy = await self.service.store.health_check()
        if not healthy:
            return self._print({"success": False, "error": "Database health check failed"}, error=True)
        return self._print({"success": True, "message": "Database initialized"})

    async def shorten(self, url: str):
        """Shorten a URL."""
        try:
            result = await self.service.shorten(url)
        except YausError as e:
            return self._print({"success": False, "error": str(e)}, error=True)

        return self._print({
            "success": True,
            "locator": result.locator,
            "short_url": result.short_url,
            "long_url": result.long_url,
            "status": result.status.value,
        })

    async def resolve(self, locator: str):
        """Get the long URL for a locator."""
        long_url = await self.service.resolve(locator)

        if long_url is None:
            return self._print({"success": False, "error": f"Locator '{locator}' not found"}, error=True)

        return self._print({"success": True, "locator": locator, "long_url": long_url})

    async def info(self, locator: str):
        """Get stored information for a locator."""
        info = await self.service.get_url_info(locator)

        if info is None:
            return self._print({"success": False, "error": f"Locator '{locator}' not found"}, error=True)

        info["created_at"] = info["created_at"].isoformat()
        return self._print({"success": True, **info})

    async def list_urls(self, limit: int = 100):
        """List recent URLs."""
        records = await self.service.list_recent(limit)

        return self._print({
            "success": True,
            "count": len(records),
            "urls": [record.to_dict() for record in records],
        })

    async def health(self):
        """Check service health."""
        health_status = await self.service.health_check()
        stats = await self.service.get_statistics()

        self._print({"success": True, "health": health_status, "statistics": stats})
        return 0 if health_status["overall"] else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yaus",
        description="yaus URL shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create the schema
  %(prog)s --db urls.sqlite3 init

  # Shorten a URL
  %(prog)s shorten https://example.com/long/url

  # Get the long URL back
  %(prog)s resolve 1f0c2a9

  # List recent URLs
  %(prog)s list --limit 10
        """
    )

    parser.add_argument(
        "--db",
        help="SQLite path or postgresql:// URL (overrides SHORT_DB; in-memory when neither is set)"
    )
    parser.add_argument(
        "--base-url",
        help="Host prefix for short URLs (overrides BASE_URL)"
    )
    parser.add_argument(
        "--redis-url",
        help="Redis connection URL (overrides REDIS_URL)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser("init", help="Create the database schema")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")

    resolve_parser = subparsers.add_parser("resolve", help="Get the long URL for a locator")
    resolve_parser.add_argument("locator", help="Locator to look up")

    info_parser = subparsers.add_parser("info", help="Get stored information for a locator")
    info_parser.add_argument("locator", help="Locator to look up")

    list_parser = subparsers.add_parser("list", help="List recent URLs")
    list_parser.add_argument("--limit", type=int, default=100, help="Maximum number to return")

    subparsers.add_parser("health", help="Check service health")

    return parser


def resolve_config(args: argparse.Namespace) -> Config:
    """Load settings and apply the command-line overrides that were given."""
    overrides = {
        "short_db": args.db,
        "base_url": args.base_url,
        "redis_url": args.redis_url,
    }
    return load_config().model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = resolve_config(args)
    except ValidationError as e:
        print(json.dumps({"success": False, "error": f"Invalid configuration: {e}"}, indent=2), file=sys.stderr)
        return 1

    cli = YausCLI(config=config, verbose=args.verbose)

    try:
        await cli.initialize()

        if args.command == "init":
            return await cli.init()
        elif args.command == "shorten":
            return await cli.shorten(args.url)
        elif args.command == "resolve":
            return await cli.resolve(args.locator)
        elif args.command == "info":
            return await cli.info(args.locator)
        elif args.command == "list":
            return await cli.list_urls(args.limit)
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1
    except YausError as e:
        return cli._print({"success": False, "error": str(e)}, error=True)
    finally:
        await cli.cleanup()


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
