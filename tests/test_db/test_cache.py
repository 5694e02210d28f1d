"""Tests for the TTL cache families."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import aiosqlite
import pytest
import pytest_asyncio

from home_enrichment.db import CacheFamily, CacheStorage, TTLCache
from home_enrichment.models import (
    CacheStats,
    PropertyProfile,
    SourceLabel,
    WeatherSummary,
)

KEY = "123 main st|san francisco|CA|94102"


class FakeClock:
    """Settable clock for expiry tests."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 6, 1, 12, 0, tzinfo=UTC))


@pytest_asyncio.fixture
async def storage(clock: FakeClock) -> AsyncGenerator[CacheStorage, None]:
    """In-memory storage driven by the fake clock."""
    storage = CacheStorage(":memory:", clock=clock)
    await storage.initialize()
    yield storage
    await storage.close()


@pytest.fixture
def profile() -> PropertyProfile:
    return PropertyProfile(
        year_built=1980,
        latitude=37.7749,
        longitude=-122.4194,
        sources=(SourceLabel.PROPERTY_RECORDS, SourceLabel.GEOCODING),
    )


class TestRoundTrip:
    async def test_put_then_get_returns_equal_payload(
        self, storage: CacheStorage, profile: PropertyProfile
    ) -> None:
        await storage.profiles.put(KEY, profile, "property-records")

        assert await storage.profiles.get(KEY) == profile

    async def test_get_missing_key_is_none(self, storage: CacheStorage) -> None:
        assert await storage.profiles.get("nowhere") is None

    async def test_families_are_independent(
        self, storage: CacheStorage, sample_weather: WeatherSummary
    ) -> None:
        await storage.weather.put("94102", sample_weather, "visual-crossing")

        assert await storage.weather.get("94102") == sample_weather
        assert await storage.profiles.get("94102") is None

    async def test_entry_records_provenance_and_expiry(
        self, storage: CacheStorage, profile: PropertyProfile, clock: FakeClock
    ) -> None:
        await storage.profiles.put(KEY, profile, "property-records")

        entry = await storage.profiles.get_entry(KEY)
        assert entry is not None
        assert entry.source == "property-records"
        assert entry.created_at == clock.now
        assert entry.expires_at == clock.now + timedelta(days=30)


class TestUpsert:
    async def test_second_put_replaces_payload_and_provenance(
        self, storage: CacheStorage, profile: PropertyProfile, clock: FakeClock
    ) -> None:
        await storage.profiles.put(KEY, profile, "property-records")
        created = clock.now
        clock.advance(timedelta(days=1))

        updated = profile.model_copy(update={"year_built": 1981})
        await storage.profiles.put(KEY, updated, "geocoding")

        assert await storage.profiles.get(KEY) == updated
        entry = await storage.profiles.get_entry(KEY)
        assert entry is not None
        assert entry.source == "geocoding"
        assert entry.created_at == created
        assert entry.updated_at == clock.now
        assert entry.expires_at == clock.now + timedelta(days=30)

        stats = await storage.profiles.stats()
        assert stats.total_entries == 1


class TestExpiry:
    async def test_expired_entry_reads_as_miss_and_is_deleted(
        self, storage: CacheStorage, profile: PropertyProfile, clock: FakeClock
    ) -> None:
        await storage.profiles.put(KEY, profile, "property-records")
        clock.advance(timedelta(days=31))

        assert await storage.profiles.get(KEY) is None
        assert await storage.profiles.get_entry(KEY) is None

    async def test_entry_expiring_exactly_now_is_absent(
        self, storage: CacheStorage, profile: PropertyProfile, clock: FakeClock
    ) -> None:
        await storage.profiles.put(KEY, profile, "property-records")
        clock.advance(timedelta(days=30))

        assert await storage.profiles.is_valid(KEY) is False
        assert await storage.profiles.get(KEY) is None

    async def test_stats_count_expired_then_sweep_removes_them(
        self,
        storage: CacheStorage,
        profile: PropertyProfile,
        sample_weather: WeatherSummary,
        clock: FakeClock,
    ) -> None:
        await storage.profiles.put(KEY, profile, "property-records")
        await storage.weather.put("94102", sample_weather, "visual-crossing")
        clock.advance(timedelta(days=31))
        await storage.profiles.put("fresh|x|CA|94103", profile, "geocoding")

        assert await storage.profiles.stats() == CacheStats(
            total_entries=2, expired_entries=1, valid_entries=1
        )
        # Weather lives for 90 days
        assert (await storage.weather.stats()).valid_entries == 1

        removed = await storage.sweep_expired()

        assert removed == {"property_cache": 1, "zipcode_cache": 0}
        assert await storage.profiles.stats() == CacheStats(
            total_entries=1, expired_entries=0, valid_entries=1
        )

    async def test_stats_is_a_pure_read(
        self, storage: CacheStorage, profile: PropertyProfile, clock: FakeClock
    ) -> None:
        await storage.profiles.put(KEY, profile, "property-records")
        clock.advance(timedelta(days=31))

        await storage.profiles.stats()
        await storage.profiles.is_valid(KEY)

        assert await storage.profiles.get_entry(KEY) is not None


class TestInvalidation:
    async def test_delete_removes_entry(
        self, storage: CacheStorage, profile: PropertyProfile
    ) -> None:
        await storage.profiles.put(KEY, profile, "property-records")

        assert await storage.profiles.delete(KEY) is True
        assert await storage.profiles.get(KEY) is None
        assert await storage.profiles.delete(KEY) is False


class TestStorageFailures:
    def _broken_cache(self) -> TTLCache[PropertyProfile]:
        get_connection = AsyncMock(side_effect=aiosqlite.OperationalError("database is locked"))
        return TTLCache(
            get_connection,
            family=CacheFamily.PROFILE,
            ttl=timedelta(days=30),
            model=PropertyProfile,
        )

    async def test_read_failure_is_a_miss(self) -> None:
        assert await self._broken_cache().get(KEY) is None

    async def test_write_failure_is_swallowed(self, profile: PropertyProfile) -> None:
        await self._broken_cache().put(KEY, profile, "property-records")

    async def test_maintenance_failures_return_zeros(self) -> None:
        cache = self._broken_cache()

        assert await cache.sweep() == 0
        assert await cache.stats() == CacheStats()
        assert await cache.delete(KEY) is False
        assert await cache.is_valid(KEY) is False

    async def test_closed_connection_is_a_miss(
        self, profile: PropertyProfile, clock: FakeClock
    ) -> None:
        storage = CacheStorage(":memory:", clock=clock)
        await storage.initialize()
        conn = await storage._get_connection()
        await conn.close()

        assert await storage.profiles.get(KEY) is None
        await storage.profiles.put(KEY, profile, "property-records")
        storage._conn = None

    async def test_corrupt_payload_is_a_miss(self, storage: CacheStorage) -> None:
        conn = await storage._get_connection()
        await conn.execute(
            "INSERT INTO property_cache VALUES (?, ?, ?, ?, ?, ?)",
            (
                KEY,
                "{not json",
                "property-records",
                "2025-06-01T12:00:00.000000+00:00",
                "2025-06-01T12:00:00.000000+00:00",
                "2099-01-01T00:00:00.000000+00:00",
            ),
        )
        await conn.commit()

        assert await storage.profiles.get(KEY) is None
