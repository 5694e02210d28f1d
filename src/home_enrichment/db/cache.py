"""TTL-bounded cache families backed by SQLite.

Every operation is best-effort: storage errors are logged and reported as a
miss (reads) or a no-op (writes), so a cache outage degrades enrichment to
"always fetch from source" instead of failing it.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Generic, TypeVar

import aiosqlite
from pydantic import BaseModel

from home_enrichment.logging import get_logger
from home_enrichment.models import CacheEntry, CacheStats

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

ConnectionGetter = Callable[[], Awaitable[aiosqlite.Connection]]
Clock = Callable[[], datetime]

# Closed connections and undecodable payloads count as storage errors
_CACHE_ERRORS = (aiosqlite.Error, ValueError)


class CacheFamily(StrEnum):
    """Cache families and the tables that hold them."""

    PROFILE = "property_cache"
    WEATHER = "zipcode_cache"
    CLIMATE = "zipcode_climate_cache"


def utc_now() -> datetime:
    return datetime.now(UTC)


def _ts(value: datetime) -> str:
    """Fixed-width ISO timestamp so stored values compare lexically."""
    return value.astimezone(UTC).isoformat(timespec="microseconds")


class TTLCache(Generic[ModelT]):
    """One cache family: normalized key -> pydantic payload with an absolute expiry."""

    def __init__(
        self,
        get_connection: ConnectionGetter,
        *,
        family: CacheFamily,
        ttl: timedelta,
        model: type[ModelT],
        clock: Clock = utc_now,
    ) -> None:
        self._get_connection = get_connection
        self.family = family
        self.ttl = ttl
        self._model = model
        self._clock = clock

    @property
    def _table(self) -> str:
        return self.family.value

    async def get(self, key: str) -> ModelT | None:
        """Return the cached payload, or None when absent, expired or unreadable.

        An expired row is deleted before the miss is reported.
        """
        try:
            conn = await self._get_connection()
            cursor = await conn.execute(
                f"SELECT payload, source, expires_at FROM {self._table} WHERE cache_key = ?",
                (key,),
            )
            row = await cursor.fetchone()
            if row is None:
                logger.debug("cache_miss", family=self.family.value, key=key)
                return None

            now = _ts(self._clock())
            if row["expires_at"] <= now:
                await conn.execute(
                    f"DELETE FROM {self._table} WHERE cache_key = ? AND expires_at <= ?",
                    (key, now),
                )
                await conn.commit()
                logger.info("cache_expired", family=self.family.value, key=key)
                return None

            payload = self._model.model_validate_json(row["payload"])
        except _CACHE_ERRORS:
            logger.warning("cache_read_failed", family=self.family.value, key=key, exc_info=True)
            return None

        logger.info("cache_hit", family=self.family.value, key=key, source=row["source"])
        return payload

    async def put(self, key: str, payload: ModelT, provenance: str) -> None:
        """Upsert an entry, refreshing its expiry to now + TTL.

        Args:
            key: Normalized cache key.
            payload: Model to store.
            provenance: Label of the source that produced the payload.
        """
        now = self._clock()
        expires_at = now + self.ttl
        try:
            conn = await self._get_connection()
            await conn.execute(
                f"""
                INSERT INTO {self._table}
                    (cache_key, payload, source, created_at, updated_at, expires_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(cache_key) DO UPDATE SET
                    payload = excluded.payload,
                    source = excluded.source,
                    updated_at = excluded.updated_at,
                    expires_at = excluded.expires_at
                """,
                (
                    key,
                    payload.model_dump_json(),
                    provenance,
                    _ts(now),
                    _ts(now),
                    _ts(expires_at),
                ),
            )
            await conn.commit()
        except _CACHE_ERRORS:
            logger.warning("cache_write_failed", family=self.family.value, key=key, exc_info=True)
            return

        logger.info(
            "cache_written",
            family=self.family.value,
            key=key,
            source=provenance,
            expires_at=_ts(expires_at),
        )

    async def get_entry(self, key: str) -> CacheEntry | None:
        """Return the raw row for a key, expired or not, without side effects."""
        try:
            conn = await self._get_connection()
            cursor = await conn.execute(
                f"""
                SELECT cache_key, payload, source, created_at, updated_at, expires_at
                FROM {self._table} WHERE cache_key = ?
                """,
                (key,),
            )
            row = await cursor.fetchone()
        except _CACHE_ERRORS:
            logger.warning("cache_read_failed", family=self.family.value, key=key, exc_info=True)
            return None
        if row is None:
            return None
        return CacheEntry(
            cache_key=row["cache_key"],
            payload=row["payload"],
            source=row["source"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
            expires_at=datetime.fromisoformat(row["expires_at"]),
        )

    async def is_valid(self, key: str) -> bool:
        """Whether an unexpired entry exists. Pure read: never deletes."""
        try:
            conn = await self._get_connection()
            cursor = await conn.execute(
                f"SELECT 1 FROM {self._table} WHERE cache_key = ? AND expires_at > ?",
                (key, _ts(self._clock())),
            )
            return await cursor.fetchone() is not None
        except _CACHE_ERRORS:
            logger.warning("cache_read_failed", family=self.family.value, key=key, exc_info=True)
            return False

    async def delete(self, key: str) -> bool:
        """Invalidate one key. Returns True if a row was removed."""
        try:
            conn = await self._get_connection()
            cursor = await conn.execute(
                f"DELETE FROM {self._table} WHERE cache_key = ?",
                (key,),
            )
            await conn.commit()
        except _CACHE_ERRORS:
            logger.warning("cache_delete_failed", family=self.family.value, key=key, exc_info=True)
            return False
        removed = cursor.rowcount > 0
        if removed:
            logger.info("cache_invalidated", family=self.family.value, key=key)
        return removed

    async def sweep(self) -> int:
        """Delete every entry whose expiry is at or before now.

        Returns:
            Number of entries removed (0 if the store is unavailable).
        """
        try:
            conn = await self._get_connection()
            cursor = await conn.execute(
                f"DELETE FROM {self._table} WHERE expires_at <= ?",
                (_ts(self._clock()),),
            )
            await conn.commit()
        except _CACHE_ERRORS:
            logger.warning("cache_sweep_failed", family=self.family.value, exc_info=True)
            return 0
        removed = cursor.rowcount
        logger.info("cache_swept", family=self.family.value, removed=removed)
        return removed

    async def stats(self) -> CacheStats:
        """Total, expired and valid entry counts. Pure read."""
        try:
            conn = await self._get_connection()
            cursor = await conn.execute(
                f"""
                SELECT
                    COUNT(*) AS total,
                    COALESCE(SUM(CASE WHEN expires_at <= ? THEN 1 ELSE 0 END), 0) AS expired
                FROM {self._table}
                """,
                (_ts(self._clock()),),
            )
            row = await cursor.fetchone()
        except _CACHE_ERRORS:
            logger.warning("cache_stats_failed", family=self.family.value, exc_info=True)
            return CacheStats()
        total = row["total"] if row else 0
        expired = row["expired"] if row else 0
        return CacheStats(
            total_entries=total,
            expired_entries=expired,
            valid_entries=total - expired,
        )
