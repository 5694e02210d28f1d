"""Property enrichment orchestrator.

Pipeline for one address:

1. Profile cache lookup; a hit returns immediately.
2. Property records (primary then fallback), geocoding and USPS validation
   run concurrently.
3. Once geocoding has matched: census neighborhood statistics and historical
   weather (zip cache first) run concurrently.
4. Optional scraping when no structural fact is known yet.
5. Write-back to the profile cache when the result is worth keeping.

Fragments merge fill-only in call order, so precedence is fixed regardless of
which provider answers first; ``sources`` records labels in completion order.
"""

import asyncio
import time
from collections.abc import Awaitable, Sequence
from types import TracebackType
from typing import Self

import httpx
from curl_cffi.requests import AsyncSession

from home_enrichment.config import Settings
from home_enrichment.db import CacheStorage
from home_enrichment.enrichment.merge import add_source, fill_missing, weather_fragment
from home_enrichment.enrichment.storm import classify_storm_frequency
from home_enrichment.logging import get_logger
from home_enrichment.models import (
    AddressQuery,
    Coordinates,
    PropertyProfile,
    ProfileFields,
    SourceLabel,
    TractQuery,
)
from home_enrichment.sources import (
    BaseSource,
    CensusACSSource,
    CensusGeocoderSource,
    CountyAssessorSource,
    RentCastSource,
    USPSAddressSource,
    VisualCrossingSource,
    ZillowScraper,
)
from home_enrichment.sources.zillow import SCRAPER_TIMEOUT
from home_enrichment.utils.address import profile_cache_key, zip_cache_key

logger = get_logger(__name__)

# A successful provider call: who answered, and what it contributed
Contribution = tuple[SourceLabel, ProfileFields]


class PropertyEnricher:
    """Builds a best-effort :class:`PropertyProfile` for a street address.

    Use as an async context manager; the HTTP client, scraper session and
    cache storage are closed on exit when the enricher created them.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        storage: CacheStorage | None = None,
        client: httpx.AsyncClient | None = None,
        scraper_session: AsyncSession | None = None,  # type: ignore[type-arg]
    ) -> None:
        """Initialize the enricher.

        Args:
            settings: Application settings (credentials, TTLs, timeouts).
            storage: Initialized cache storage; created from settings if omitted.
            client: Shared HTTP client for every API source.
            scraper_session: curl_cffi session for the scraper.
        """
        self._settings = settings
        self._owns_storage = storage is None
        self._storage = storage or CacheStorage(
            settings.database_path,
            profile_ttl=settings.profile_cache_ttl,
            weather_ttl=settings.weather_cache_ttl,
        )
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(follow_redirects=True)
        self._build_sources(scraper_session)

    def _build_sources(self, scraper_session: AsyncSession | None) -> None:  # type: ignore[type-arg]
        settings = self._settings
        timeout = settings.source_timeout_seconds
        client = self._client

        self._records_sources: list[BaseSource[AddressQuery, ProfileFields]] = []
        rentcast_key = settings.rentcast_api_key.get_secret_value()
        if rentcast_key:
            self._records_sources.append(RentCastSource(client, rentcast_key, timeout=timeout))
        else:
            logger.debug("source_disabled", source="rentcast", reason="missing_api_key")
        if settings.county_assessor_url:
            self._records_sources.append(
                CountyAssessorSource(client, settings.county_assessor_url, timeout=timeout)
            )
        else:
            logger.debug("source_disabled", source="county_assessor", reason="no_url_template")

        self._geocoder = CensusGeocoderSource(client, timeout=timeout)
        self._census = CensusACSSource(
            client, settings.census_api_key.get_secret_value(), timeout=timeout
        )

        self._usps: USPSAddressSource | None = None
        usps_user_id = settings.usps_user_id.get_secret_value()
        if usps_user_id:
            self._usps = USPSAddressSource(client, usps_user_id, timeout=timeout)
        else:
            logger.debug("source_disabled", source="usps", reason="missing_user_id")

        self._weather: VisualCrossingSource | None = None
        weather_key = settings.visual_crossing_api_key.get_secret_value()
        if weather_key:
            self._weather = VisualCrossingSource(client, weather_key, timeout=timeout)
        else:
            logger.debug("source_disabled", source="visual_crossing", reason="missing_api_key")

        self._scraper: ZillowScraper | None = None
        if settings.enable_web_scraping:
            self._scraper = ZillowScraper(
                client,
                session=scraper_session,
                timeout=max(timeout, SCRAPER_TIMEOUT),
            )

    @property
    def storage(self) -> CacheStorage:
        return self._storage

    async def initialize(self) -> None:
        """Create cache tables when this enricher owns the storage."""
        if self._owns_storage:
            await self._storage.initialize()

    async def close(self) -> None:
        """Release the resources this enricher created."""
        if self._scraper is not None:
            await self._scraper.close()
        if self._owns_client:
            await self._client.aclose()
        if self._owns_storage:
            await self._storage.close()

    async def __aenter__(self) -> Self:
        await self.initialize()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def enrich(self, address: str, city: str, state: str, zip_code: str) -> PropertyProfile:
        """Enrich one address.

        Never raises for provider or cache failures; a profile with empty
        ``sources`` means no provider had data for the address.
        """
        key = profile_cache_key(address, city, state, zip_code)
        cached = await self._storage.profiles.get(key)
        if cached is not None:
            return cached

        query = AddressQuery(address=address, city=city, state=state, zip_code=zip_code)
        started = time.monotonic()
        logger.info("enrichment_started", address=query.one_line)

        profile = await self._run_concurrently(
            PropertyProfile(),
            [self._fetch_records(query), self._geocode(query), self._validate(query)],
        )

        if (
            SourceLabel.GEOCODING in profile.sources
            and profile.latitude is not None
            and profile.longitude is not None
        ):
            coordinates = Coordinates(latitude=profile.latitude, longitude=profile.longitude)
            profile = await self._run_concurrently(
                profile,
                [self._neighborhood(profile), self._historical_weather(query, coordinates)],
            )

        if self._scraper is not None and not _has_structural_facts(profile):
            profile = await self._run_concurrently(profile, [self._scrape(query)])

        if profile.sources and profile.has_useful_data:
            await self._storage.profiles.put(key, profile, profile.sources[0])
        else:
            logger.info("enrichment_not_cached", address=query.one_line, sources=profile.sources)

        logger.info(
            "enrichment_complete",
            address=query.one_line,
            sources=[str(label) for label in profile.sources],
            fields=len(profile.populated_fields()),
            duration_ms=round((time.monotonic() - started) * 1000),
        )
        return profile

    async def invalidate(self, address: str, city: str, state: str, zip_code: str) -> bool:
        """Drop the cached profile for an address so the next lookup refetches."""
        return await self._storage.profiles.delete(
            profile_cache_key(address, city, state, zip_code)
        )

    async def _run_concurrently(
        self,
        profile: PropertyProfile,
        calls: Sequence[Awaitable[Contribution | None]],
    ) -> PropertyProfile:
        """Await calls together; merge in call order, label in completion order."""
        completed: list[SourceLabel] = []

        async def track(call: Awaitable[Contribution | None]) -> Contribution | None:
            result = await call
            if result is not None:
                completed.append(result[0])
            return result

        results = await asyncio.gather(*(track(call) for call in calls))
        for result in results:
            if result is not None:
                profile = fill_missing(profile, result[1])
        for label in completed:
            profile = add_source(profile, label)
        return profile

    async def _fetch_records(self, query: AddressQuery) -> Contribution | None:
        """Primary records first; the fallback only runs when it finds nothing."""
        for source in self._records_sources:
            fields = await source.fetch(query)
            if fields is not None and fields.populated_fields():
                return SourceLabel.PROPERTY_RECORDS, fields
        return None

    async def _geocode(self, query: AddressQuery) -> Contribution | None:
        fields = await self._geocoder.fetch(query)
        return (self._geocoder.label, fields) if fields is not None else None

    async def _validate(self, query: AddressQuery) -> Contribution | None:
        if self._usps is None:
            return None
        fields = await self._usps.fetch(query)
        return (self._usps.label, fields) if fields is not None else None

    async def _neighborhood(self, profile: PropertyProfile) -> Contribution | None:
        if not profile.fips_code or not profile.census_tract or len(profile.fips_code) != 5:
            logger.debug("census_skipped", reason="no_tract")
            return None
        tract = TractQuery(fips_code=profile.fips_code, census_tract=profile.census_tract)
        fields = await self._census.fetch(tract)
        return (self._census.label, fields) if fields is not None else None

    async def _historical_weather(
        self, query: AddressQuery, coordinates: Coordinates
    ) -> Contribution | None:
        """Zip-level weather: cache first, then the provider (written back to the cache)."""
        key = zip_cache_key(query.zip_code)
        weather = await self._storage.weather.get(key) if key else None
        label = SourceLabel.ZIPCODE_CACHE

        if weather is None:
            if self._weather is None:
                return None
            weather = await self._weather.fetch(coordinates)
            if weather is None:
                return None
            if key:
                await self._storage.weather.put(key, weather, weather.source)
            label = self._weather.label

        fields = weather_fragment(weather).model_copy(
            update={"storm_frequency": classify_storm_frequency(weather)}
        )
        return label, fields

    async def _scrape(self, query: AddressQuery) -> Contribution | None:
        if self._scraper is None:
            return None
        fields = await self._scraper.fetch(query)
        return (self._scraper.label, fields) if fields is not None else None


def _has_structural_facts(profile: ProfileFields) -> bool:
    return (
        profile.year_built is not None
        or profile.square_footage is not None
        or profile.bedrooms is not None
    )
