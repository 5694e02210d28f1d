"""Property and climate lookup plus cache maintenance routes."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from home_enrichment.db import CacheStorage
from home_enrichment.enrichment import (
    PropertyEnricher,
    climate_recommendations,
    determine_storm_frequency,
    estimate_climate,
    generate_appliances,
    generate_systems,
    map_to_home_schema,
)
from home_enrichment.logging import get_logger
from home_enrichment.utils.address import zip_cache_key

logger = get_logger(__name__)

router = APIRouter()


class LookupRequest(BaseModel):
    """Address to enrich; ``zipCode`` is accepted as an alias."""

    model_config = ConfigDict(populate_by_name=True)

    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = Field(default="", alias="zipCode")

    @property
    def is_complete(self) -> bool:
        return all(v.strip() for v in (self.address, self.city, self.state, self.zip_code))


class ClimateRequest(BaseModel):
    """Location for a climate lookup; ``zipCode`` is accepted as an alias."""

    model_config = ConfigDict(populate_by_name=True)

    city: str = ""
    state: str = ""
    zip_code: str = Field(default="", alias="zipCode")

    @property
    def is_complete(self) -> bool:
        return all(v.strip() for v in (self.city, self.state, self.zip_code))


def _get_storage(request: Request) -> CacheStorage:
    return request.app.state.storage  # type: ignore[no-any-return]


def _get_enricher(request: Request) -> PropertyEnricher:
    return request.app.state.enricher  # type: ignore[no-any-return]


@router.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse({"status": "ok"})


@router.post("/api/property/lookup")
async def lookup_property(request: Request, body: LookupRequest) -> JSONResponse:
    """Enrich an address and return the profile plus starter home records."""
    if not body.is_complete:
        return JSONResponse(
            {"error": "address, city, state and zip_code are required"},
            status_code=400,
        )

    profile = await _get_enricher(request).enrich(
        body.address, body.city, body.state, body.zip_code
    )
    found = bool(profile.sources) and profile.has_useful_data
    logger.info("lookup_served", found=found, sources=list(profile.sources))

    return JSONResponse(
        {
            "found": found,
            "sources": list(profile.sources),
            "profile": profile.model_dump(mode="json", exclude_none=True),
            "home": map_to_home_schema(profile).model_dump(mode="json", exclude_none=True),
            "systems": [
                s.model_dump(mode="json", exclude_none=True) for s in generate_systems(profile)
            ],
            "appliances": [
                a.model_dump(mode="json", exclude_none=True) for a in generate_appliances(profile)
            ],
        }
    )


@router.post("/api/climate/lookup")
async def lookup_climate(request: Request, body: ClimateRequest) -> JSONResponse:
    """Regional climate estimate for a zip, cached per zip like historical weather.

    The storm bucket comes from cached historical weather for the zip when
    there is any, falling back to the regional estimate.
    """
    if not body.is_complete:
        return JSONResponse(
            {"error": "city, state and zip_code are required"},
            status_code=400,
        )

    storage = _get_storage(request)
    key = zip_cache_key(body.zip_code)
    climate = await storage.climate.get(key)
    from_cache = climate is not None
    if climate is None:
        climate = estimate_climate(body.state)
        await storage.climate.put(key, climate, climate.source)

    weather = await storage.weather.get(key)
    storm_frequency = determine_storm_frequency(weather, climate)
    logger.info(
        "climate_lookup_served",
        zip_code=key,
        from_cache=from_cache,
        measured_weather=weather is not None,
    )

    return JSONResponse(
        {
            "success": True,
            "from_cache": from_cache,
            "storm_frequency": storm_frequency,
            "data": climate.model_dump(mode="json"),
            "recommendations": climate_recommendations(climate, storm_frequency),
        }
    )


@router.get("/api/cache/stats")
async def cache_stats(request: Request) -> JSONResponse:
    stats = await _get_storage(request).get_stats()
    return JSONResponse({family: s.model_dump() for family, s in stats.items()})


@router.post("/api/cache/sweep")
async def cache_sweep(request: Request) -> JSONResponse:
    """Delete expired entries from every cache family."""
    removed = await _get_storage(request).sweep_expired()
    return JSONResponse({"removed": removed})
