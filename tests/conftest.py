"""Shared pytest fixtures."""

import gc
import os
import threading
from collections.abc import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from hypothesis import HealthCheck, settings
from pydantic import SecretStr

from home_enrichment.config import Settings
from home_enrichment.db import CacheStorage
from home_enrichment.models import AddressQuery, ProfileFields, WeatherSummary

# Hypothesis settings profiles for different environments
settings.register_profile("fast", max_examples=10)
settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "fast"))


@pytest.fixture(autouse=True)
def _isolate_settings_from_dotenv(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent the local .env file and shell variables from leaking into Settings."""
    monkeypatch.setattr(
        Settings,
        "model_config",
        {**Settings.model_config, "env_file": None},
    )
    for name in list(os.environ):
        if name.startswith("HOME_ENRICHMENT_"):
            monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def _cleanup_aiosqlite_threads():
    """Safety net: detect and stop leaked aiosqlite worker threads.

    aiosqlite creates a non-daemon worker thread per connection. If a test
    leaks a connection (doesn't call ``await conn.close()``), the thread
    prevents clean process exit.
    """
    yield

    from aiosqlite.core import _STOP_RUNNING_SENTINEL, Connection

    leaked = False

    gc.collect()
    for obj in gc.get_objects():
        if isinstance(obj, Connection) and obj._connection is not None:
            leaked = True
            obj.stop()

    for thread in threading.enumerate():
        if "_connection_worker_thread" in (thread.name or "") and thread.is_alive():
            leaked = True
            tx = getattr(thread, "_args", (None,))[0]
            if tx is not None and hasattr(tx, "put_nowait"):
                tx.put_nowait((None, lambda: _STOP_RUNNING_SENTINEL))
                thread.join(timeout=1.0)

    if leaked:
        import warnings

        warnings.warn(
            "Test leaked aiosqlite connection(s); add 'await storage.close()' to fixture teardown",
            ResourceWarning,
            stacklevel=1,
        )


@pytest_asyncio.fixture
async def storage() -> AsyncGenerator[CacheStorage, None]:
    """Create an in-memory cache storage instance."""
    storage = CacheStorage(":memory:")
    await storage.initialize()
    yield storage
    await storage.close()


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """Shared HTTP client; pair with respx to mock provider responses."""
    async with httpx.AsyncClient() as c:
        yield c


@pytest.fixture
def api_settings() -> Settings:
    """Settings with every keyed source enabled."""
    return Settings(
        rentcast_api_key=SecretStr("rentcast-test-key"),
        census_api_key=SecretStr(""),
        usps_user_id=SecretStr("usps-test-user"),
        visual_crossing_api_key=SecretStr("vc-test-key"),
        database_path=":memory:",
    )


@pytest.fixture
def sf_query() -> AddressQuery:
    return AddressQuery(
        address="123 Main St",
        city="San Francisco",
        state="CA",
        zip_code="94102",
    )


@pytest.fixture
def sample_fragment() -> ProfileFields:
    return ProfileFields(
        year_built=1980,
        square_footage=1850,
        bedrooms=3,
        bathrooms=2.0,
        property_type="Single Family",
        latitude=37.7749,
        longitude=-122.4194,
    )


@pytest.fixture
def sample_weather() -> WeatherSummary:
    return WeatherSummary(
        average_rainfall=23.6,
        average_snowfall=0.0,
        average_temperature=58,
        max_temperature=103,
        min_temperature=34,
        storm_days_per_year=25,
        wind_speed_average=11.2,
        wind_speed_max=48,
        data_years="2015-2025",
    )
