"""US Census adapters: address geocoder and ACS neighborhood statistics."""

from datetime import date
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from home_enrichment.logging import get_logger
from home_enrichment.models import AddressQuery, ProfileFields, SourceLabel, TractQuery
from home_enrichment.sources.base import DEFAULT_TIMEOUT, BaseSource
from home_enrichment.sources.parsing import clean_text, parse_coordinate, parse_int

logger = get_logger(__name__)

GEOCODER_URL = "https://geocoding.geo.census.gov/geocoder/geographies/address"
ACS_URL_TEMPLATE = "https://api.census.gov/data/{year}/acs/acs5"

# Median home value, median household income, total population
ACS_VARIABLES = ("B25077_001E", "B19013_001E", "B01001_001E")


# ---------------------------------------------------------------------------
# Geocoder response models
# ---------------------------------------------------------------------------


class GeocoderCoordinates(BaseModel):
    model_config = ConfigDict(extra="ignore")

    x: Any = None
    y: Any = None


class GeocoderTract(BaseModel):
    model_config = ConfigDict(extra="ignore")

    state: str | None = Field(default=None, validation_alias="STATE")
    county: str | None = Field(default=None, validation_alias="COUNTY")
    tract: str | None = Field(default=None, validation_alias="TRACT")
    name: str | None = Field(default=None, validation_alias="NAME")


class GeocoderCounty(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, validation_alias="NAME")


class GeocoderGeographies(BaseModel):
    model_config = ConfigDict(extra="ignore")

    census_tracts: list[GeocoderTract] = Field(
        default_factory=list, validation_alias="Census Tracts"
    )
    counties: list[GeocoderCounty] = Field(default_factory=list, validation_alias="Counties")


class GeocoderMatch(BaseModel):
    model_config = ConfigDict(extra="ignore")

    coordinates: GeocoderCoordinates | None = None
    geographies: GeocoderGeographies | None = None

    def to_profile_fields(self) -> ProfileFields | None:
        """Coordinates plus jurisdiction codes, or None if either block is missing."""
        if self.coordinates is None or self.geographies is None:
            return None
        if not self.geographies.census_tracts:
            return None

        latitude = parse_coordinate(self.coordinates.y, limit=90)
        longitude = parse_coordinate(self.coordinates.x, limit=180)
        if latitude is None or longitude is None:
            return None

        tract = self.geographies.census_tracts[0]
        fips_code = f"{tract.state}{tract.county}" if tract.state and tract.county else None
        county_name = (
            self.geographies.counties[0].name if self.geographies.counties else tract.name
        )
        return ProfileFields(
            latitude=latitude,
            longitude=longitude,
            fips_code=fips_code,
            census_tract=clean_text(tract.tract),
            county=clean_text(county_name),
        )


class GeocoderResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    address_matches: list[GeocoderMatch] = Field(
        default_factory=list, validation_alias="addressMatches"
    )


class CensusGeocoderSource(BaseSource[AddressQuery, ProfileFields]):
    """Credential-free geocoder returning coordinates, FIPS code and census tract."""

    name = "census_geocoder"

    @property
    def label(self) -> SourceLabel:
        return SourceLabel.GEOCODING

    async def _fetch(self, query: AddressQuery) -> ProfileFields | None:
        response = await self._client.get(
            GEOCODER_URL,
            params={
                "street": query.street,
                "city": query.city,
                "state": query.state,
                "zip": query.zip_code,
                "benchmark": "Public_AR_Current",
                "vintage": "Current_Current",
                "format": "json",
            },
        )
        response.raise_for_status()

        result = response.json().get("result") or {}
        matches = GeocoderResponse.model_validate(result).address_matches
        if not matches:
            logger.info("geocoder_no_match", address=query.one_line)
            return None
        return matches[0].to_profile_fields()


# ---------------------------------------------------------------------------
# American Community Survey
# ---------------------------------------------------------------------------


def acs_year(today: date | None = None) -> int:
    """Most recent 5-year ACS release: the previous calendar year."""
    return (today or date.today()).year - 1


def parse_acs_rows(rows: Any) -> ProfileFields | None:
    """Map an ACS table (header row, then data rows) onto neighborhood fields.

    ACS publishes large negative sentinels for suppressed estimates; those and
    unparseable cells leave the field unset.
    """
    if not isinstance(rows, list) or len(rows) < 2:
        return None
    header, row = rows[0], rows[1]
    if not isinstance(header, list) or not isinstance(row, list):
        return None
    values = dict(zip(header, row, strict=False))
    return ProfileFields(
        median_home_value=parse_int(values.get("B25077_001E")),
        median_income=parse_int(values.get("B19013_001E")),
        population_density=parse_int(values.get("B01001_001E")),
    )


class CensusACSSource(BaseSource[TractQuery, ProfileFields]):
    """Neighborhood statistics for the census tract geocoding resolved."""

    name = "census_acs"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str = "",
        *,
        timeout: float = DEFAULT_TIMEOUT,
        year: int | None = None,
    ) -> None:
        super().__init__(client, timeout=timeout)
        self._api_key = api_key
        self._year = year

    @property
    def label(self) -> SourceLabel:
        return SourceLabel.CENSUS

    async def _fetch(self, query: TractQuery) -> ProfileFields | None:
        params = {
            "get": ",".join(ACS_VARIABLES),
            "for": f"tract:{query.census_tract}",
            "in": f"state:{query.state_fips} county:{query.county_fips}",
        }
        if self._api_key:
            params["key"] = self._api_key

        year = self._year or acs_year()
        response = await self._client.get(ACS_URL_TEMPLATE.format(year=year), params=params)
        response.raise_for_status()
        # The ACS API answers "no data" with an empty 204 body
        if not response.content:
            return None
        return parse_acs_rows(response.json())
