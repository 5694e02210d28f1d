"""Application configuration using pydantic-settings."""

from datetime import timedelta

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HOME_ENRICHMENT_",
        extra="ignore",
    )

    # Property records (optional, primary source for structural facts)
    rentcast_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="RentCast API key",
    )
    county_assessor_url: str = Field(
        default="",
        description=(
            "County assessor lookup URL template, formatted with "
            "{address}, {city}, {state} and {zip_code}"
        ),
    )

    # Census (geocoder needs no key; ACS works without one at low volume)
    census_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="US Census Data API key",
    )

    # Address standardization (optional)
    usps_user_id: SecretStr = Field(
        default=SecretStr(""),
        description="USPS Web Tools user ID for the address Verify API",
    )

    # Historical weather (optional)
    visual_crossing_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Visual Crossing weather API key",
    )

    # Last-resort scraping
    enable_web_scraping: bool = Field(
        default=False,
        description="Scrape Zillow listing pages when no records source has data",
    )

    # Caching
    profile_cache_ttl_days: int = Field(
        default=30,
        ge=1,
        description="Days an address-level property profile stays cached",
    )
    weather_cache_ttl_days: int = Field(
        default=90,
        ge=1,
        description="Days zip-level weather data stays cached",
    )
    cache_sweep_interval_minutes: int = Field(
        default=60,
        ge=1,
        description="Minutes between background sweeps of expired cache entries",
    )

    # Per-provider request bound
    source_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=60,
        description="Timeout applied to each individual source call",
    )

    # Web API
    web_port: int = Field(default=8000, description="Web server port")
    web_host: str = Field(default="0.0.0.0", description="Web server host")

    # Database
    database_path: str = Field(default="data/enrichment.db")

    @property
    def profile_cache_ttl(self) -> timedelta:
        return timedelta(days=self.profile_cache_ttl_days)

    @property
    def weather_cache_ttl(self) -> timedelta:
        return timedelta(days=self.weather_cache_ttl_days)
