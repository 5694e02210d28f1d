"""SQLite storage for the property-profile and zip-level caches."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import aiosqlite

from home_enrichment.db.cache import CacheFamily, Clock, TTLCache, utc_now
from home_enrichment.logging import get_logger
from home_enrichment.models import CacheStats, ClimateEstimate, PropertyProfile, WeatherSummary

logger = get_logger(__name__)

DEFAULT_PROFILE_TTL = timedelta(days=30)
DEFAULT_WEATHER_TTL = timedelta(days=90)


class CacheStorage:
    """SQLite-based storage owning every cache family."""

    def __init__(
        self,
        db_path: str,
        *,
        profile_ttl: timedelta = DEFAULT_PROFILE_TTL,
        weather_ttl: timedelta = DEFAULT_WEATHER_TTL,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize storage with database path.

        Args:
            db_path: Path to SQLite database file, or ":memory:" for in-memory.
            profile_ttl: Lifetime of address-level profile entries.
            weather_ttl: Lifetime of zip-level weather and climate entries.
            clock: Source of "now" for expiry decisions.
        """
        self.db_path = db_path
        self._conn: aiosqlite.Connection | None = None
        self._ensure_directory()
        self.profiles: TTLCache[PropertyProfile] = TTLCache(
            self._get_connection,
            family=CacheFamily.PROFILE,
            ttl=profile_ttl,
            model=PropertyProfile,
            clock=clock,
        )
        self.weather: TTLCache[WeatherSummary] = TTLCache(
            self._get_connection,
            family=CacheFamily.WEATHER,
            ttl=weather_ttl,
            model=WeatherSummary,
            clock=clock,
        )
        self.climate: TTLCache[ClimateEstimate] = TTLCache(
            self._get_connection,
            family=CacheFamily.CLIMATE,
            ttl=weather_ttl,
            model=ClimateEstimate,
            clock=clock,
        )

    def _ensure_directory(self) -> None:
        """Ensure the directory for the database exists."""
        if self.db_path != ":memory:":
            path = Path(self.db_path)
            path.parent.mkdir(parents=True, exist_ok=True)

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            self._conn = await aiosqlite.connect(self.db_path)
            self._conn.row_factory = aiosqlite.Row
            await self._conn.execute("PRAGMA journal_mode=WAL")
            await self._conn.execute("PRAGMA busy_timeout=5000")
            await self._conn.execute("PRAGMA synchronous=NORMAL")
        return self._conn

    async def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    async def initialize(self) -> None:
        """Initialize the database schema.

        Every family shares one table shape; the expiry index backs sweeps
        and stats.
        """
        conn = await self._get_connection()
        for family in CacheFamily:
            await conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {family.value} (
                    cache_key TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    source TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    expires_at TEXT NOT NULL
                )
            """)
            await conn.execute(f"""
                CREATE INDEX IF NOT EXISTS idx_{family.value}_expires_at
                ON {family.value}(expires_at)
            """)
        await conn.commit()

        logger.info("database_initialized", db_path=self.db_path)

    async def sweep_expired(self) -> dict[str, int]:
        """Run the maintenance sweep over every family.

        Returns:
            Removed-entry counts keyed by family table name.
        """
        return {
            CacheFamily.PROFILE.value: await self.profiles.sweep(),
            CacheFamily.WEATHER.value: await self.weather.sweep(),
            CacheFamily.CLIMATE.value: await self.climate.sweep(),
        }

    async def get_stats(self) -> dict[str, CacheStats]:
        """Entry counts keyed by family table name."""
        return {
            CacheFamily.PROFILE.value: await self.profiles.stats(),
            CacheFamily.WEATHER.value: await self.weather.stats(),
            CacheFamily.CLIMATE.value: await self.climate.stats(),
        }
