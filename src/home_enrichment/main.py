"""Command-line entry point for property enrichment."""

import argparse
import asyncio
import json
import logging
import sys

from home_enrichment.config import Settings
from home_enrichment.db import CacheStorage
from home_enrichment.enrichment import (
    PropertyEnricher,
    generate_appliances,
    generate_systems,
    map_to_home_schema,
)
from home_enrichment.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _storage_from(settings: Settings) -> CacheStorage:
    return CacheStorage(
        settings.database_path,
        profile_ttl=settings.profile_cache_ttl,
        weather_ttl=settings.weather_cache_ttl,
    )


async def run_lookup(
    settings: Settings,
    *,
    address: str,
    city: str,
    state: str,
    zip_code: str,
    refresh: bool = False,
) -> dict[str, object]:
    """Enrich one address and return a JSON-ready report."""
    async with PropertyEnricher(settings) as enricher:
        if refresh:
            await enricher.invalidate(address, city, state, zip_code)
        profile = await enricher.enrich(address, city, state, zip_code)

    return {
        "profile": profile.model_dump(mode="json", exclude_none=True),
        "home": map_to_home_schema(profile).model_dump(mode="json", exclude_none=True),
        "systems": [s.model_dump(mode="json", exclude_none=True) for s in generate_systems(profile)],
        "appliances": [
            a.model_dump(mode="json", exclude_none=True) for a in generate_appliances(profile)
        ],
    }


async def run_cache_stats(settings: Settings) -> dict[str, object]:
    storage = _storage_from(settings)
    try:
        await storage.initialize()
        stats = await storage.get_stats()
    finally:
        await storage.close()
    return {family: s.model_dump() for family, s in stats.items()}


async def run_cache_sweep(settings: Settings) -> dict[str, int]:
    storage = _storage_from(settings)
    try:
        await storage.initialize()
        removed = await storage.sweep_expired()
    finally:
        await storage.close()
    logger.info("cache_sweep_complete", removed=removed)
    return removed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Home Enrichment - property data enrichment with cached public records"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug-level logging for troubleshooting",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    lookup = subparsers.add_parser("lookup", help="Enrich a single address")
    lookup.add_argument("address", help="Street address, e.g. '123 Main St'")
    lookup.add_argument("city")
    lookup.add_argument("state", help="Two-letter state code")
    lookup.add_argument("zip_code", metavar="zip")
    lookup.add_argument(
        "--refresh",
        action="store_true",
        help="Drop the cached profile first and query every source again",
    )

    subparsers.add_parser("cache-stats", help="Show entry counts per cache family")
    subparsers.add_parser("cache-sweep", help="Delete expired cache entries")

    serve = subparsers.add_parser("serve", help="Start the web API")
    serve.add_argument(
        "--no-sweeper",
        action="store_true",
        help="Skip the background cache sweeper",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    configure_logging(json_output=False, level=logging.DEBUG if args.debug else logging.INFO)

    try:
        settings = Settings()
    except Exception as e:
        logger.error("failed_to_load_settings", error=str(e))
        print(f"Error: Failed to load settings. {e}")
        print("Settings are read from HOME_ENRICHMENT_* environment variables or a .env file.")
        sys.exit(1)

    if args.command == "serve":
        import uvicorn

        from home_enrichment.web.app import create_app

        app = create_app(settings, run_sweeper=not args.no_sweeper)
        uvicorn.run(app, host=settings.web_host, port=settings.web_port, log_level="info")
        return

    result: object
    if args.command == "lookup":
        result = asyncio.run(
            run_lookup(
                settings,
                address=args.address,
                city=args.city,
                state=args.state,
                zip_code=args.zip_code,
                refresh=args.refresh,
            )
        )
    elif args.command == "cache-stats":
        result = asyncio.run(run_cache_stats(settings))
    else:
        result = asyncio.run(run_cache_sweep(settings))

    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
