"""Pydantic models for property profiles, weather, cache and inventory records."""

from datetime import datetime
from enum import StrEnum
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SourceLabel(StrEnum):
    """Provenance labels recorded in a profile's ``sources``."""

    PROPERTY_RECORDS = "property-records"
    GEOCODING = "geocoding"
    CENSUS = "census"
    USPS_VALIDATION = "usps-validation"
    HISTORICAL_WEATHER = "historical-weather"
    ZIPCODE_CACHE = "zipcode-cache"
    WEB_SCRAPER = "web-scraper"


class StormFrequency(StrEnum):
    """Storm exposure bucket derived from historical weather."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    SEVERE = "severe"


class HomeType(StrEnum):
    """Closed set of home types used by the home-registration flow."""

    SINGLE_FAMILY = "single-family"
    TOWNHOUSE = "townhouse"
    CONDO = "condo"
    APARTMENT = "apartment"
    MOBILE_HOME = "mobile-home"
    OTHER = "other"
    # No classification attempted (empty input)
    UNKNOWN = "unknown"


SQUARE_FEET_PER_ACRE: Final = 43560


class AddressQuery(BaseModel):
    """Address components handed to every source adapter."""

    model_config = ConfigDict(frozen=True)

    address: str
    city: str
    state: str
    zip_code: str

    @field_validator("address", "city", "zip_code")
    @classmethod
    def collapse_whitespace(cls, v: str) -> str:
        return " ".join(v.split())

    @field_validator("state")
    @classmethod
    def normalize_state(cls, v: str) -> str:
        """Normalize state to uppercase without surrounding whitespace."""
        return v.strip().upper()

    @property
    def street(self) -> str:
        """First comma-separated segment of the address (drops unit/city tails)."""
        return self.address.split(",")[0].strip()

    @property
    def one_line(self) -> str:
        """Fully-qualified single-line address."""
        return f"{self.street}, {self.city}, {self.state} {self.zip_code}"


class TractQuery(BaseModel):
    """Census geography identifying a neighborhood."""

    model_config = ConfigDict(frozen=True)

    fips_code: str = Field(min_length=5, max_length=5, description="State + county FIPS")
    census_tract: str = Field(min_length=1)

    @property
    def state_fips(self) -> str:
        return self.fips_code[:2]

    @property
    def county_fips(self) -> str:
        return self.fips_code[2:]


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class ProfileFields(BaseModel):
    """A profile fragment: every attribute is unknown until a source sets it."""

    model_config = ConfigDict(frozen=True)

    # Structural
    year_built: int | None = None
    square_footage: int | None = None
    lot_size: float | None = Field(default=None, description="Lot size in acres")
    bedrooms: int | None = None
    bathrooms: float | None = None
    property_type: str | None = None
    stories: int | None = None
    garage_spaces: int | None = None
    units: int | None = None

    # Financial
    assessed_value: float | None = None
    market_value: float | None = None
    tax_amount: float | None = None
    tax_year: int | None = None
    last_sale_price: float | None = None
    last_sale_date: str | None = None

    # Building systems
    heating_type: str | None = None
    heating_fuel: str | None = None
    cooling_type: str | None = None
    water_heater_type: str | None = None
    water_heater_fuel: str | None = None
    roof_type: str | None = None
    foundation_type: str | None = None
    construction_type: str | None = None
    exterior_wall_type: str | None = None

    # Appliances
    stove_fuel: str | None = None
    dryer_fuel: str | None = None
    washer_type: str | None = None

    # Features and listing details
    interior_features: tuple[str, ...] | None = None
    exterior_features: tuple[str, ...] | None = None
    has_pool: bool | None = None
    has_fireplace: bool | None = None
    has_basement: bool | None = None
    basement_type: str | None = None
    zoning_code: str | None = None
    school_district: str | None = None
    property_image_url: str | None = None
    zillow_url: str | None = None

    # Neighborhood
    median_home_value: int | None = None
    median_income: int | None = None
    population_density: int | None = None

    # Geographic
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    fips_code: str | None = Field(default=None, description="State + county FIPS code")
    census_tract: str | None = None
    county: str | None = None

    # Climate
    storm_frequency: StormFrequency | None = None
    average_rainfall: float | None = Field(default=None, description="Inches per year")
    average_snowfall: float | None = Field(default=None, description="Inches per year")

    def populated_fields(self) -> set[str]:
        """Names of the profile attributes this fragment sets."""
        return {name for name in ProfileFields.model_fields if getattr(self, name) is not None}

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class PropertyProfile(ProfileFields):
    """Merged enrichment result returned to callers.

    An empty ``sources`` is the normal "insufficient public data" outcome.
    """

    sources: tuple[SourceLabel, ...] = ()

    @property
    def has_useful_data(self) -> bool:
        """Whether the profile carries a fact worth caching."""
        return (
            self.year_built is not None
            or self.square_footage is not None
            or self.bedrooms is not None
            or self.has_coordinates
        )


class WeatherSummary(BaseModel):
    """Yearly climate figures reduced from a window of daily observations."""

    model_config = ConfigDict(frozen=True)

    average_rainfall: float = Field(description="Inches per year")
    average_snowfall: float = Field(description="Inches per year")
    average_temperature: int | None = Field(default=None, description="Fahrenheit")
    max_temperature: int | None = None
    min_temperature: int | None = None
    storm_days_per_year: int = 0
    wind_speed_average: float = Field(default=0.0, description="mph")
    wind_speed_max: int = Field(default=0, description="mph")
    hurricane_events: int = 0
    tornado_events: int = 0
    hail_events: int = 0
    source: str = "visual-crossing"
    data_years: str = ""


class ClimateEstimate(BaseModel):
    """Regional climate pattern estimated from the state alone."""

    model_config = ConfigDict(frozen=True)

    storm_frequency: StormFrequency
    average_rainfall: float = Field(description="Inches per year")
    average_snowfall: float = Field(description="Inches per year")
    wind_zone: str
    hurricane_risk: bool = False
    tornado_risk: bool = False
    hail_risk: bool = False
    source: str = "climate-estimate"


class CacheStats(BaseModel):
    """Entry counts for one cache family."""

    model_config = ConfigDict(frozen=True)

    total_entries: int = 0
    expired_entries: int = 0
    valid_entries: int = 0


class CacheEntry(BaseModel):
    """A stored cache row."""

    model_config = ConfigDict(frozen=True)

    cache_key: str
    payload: str
    source: str
    created_at: datetime
    updated_at: datetime
    expires_at: datetime


class SystemType(StrEnum):
    HVAC = "HVAC"
    WATER_HEATER = "WATER_HEATER"
    ROOF = "ROOF"
    PLUMBING = "PLUMBING"
    ELECTRICAL = "ELECTRICAL"


class ApplianceType(StrEnum):
    RANGE = "RANGE"
    WASHER = "WASHER"
    DRYER = "DRYER"
    WATER_HEATER = "WATER_HEATER"


class Condition(StrEnum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"


class SystemRecord(BaseModel):
    """Starter home-system record seeded from an enriched profile."""

    model_config = ConfigDict(frozen=True)

    system_type: SystemType
    material: str | None = None
    expected_lifespan: int | None = Field(default=None, description="Years")
    condition: Condition | None = None
    notes: str | None = None


class ApplianceRecord(BaseModel):
    """Starter appliance record seeded from an enriched profile."""

    model_config = ConfigDict(frozen=True)

    appliance_type: ApplianceType
    fuel_type: str | None = None
    notes: str | None = None


class HomeDetails(BaseModel):
    """Profile subset written onto a newly registered home."""

    model_config = ConfigDict(frozen=True)

    year_built: int | None = None
    square_footage: int | None = None
    lot_size: float | None = None
    home_type: HomeType | None = None
