"""Visual Crossing historical weather adapter."""

from collections.abc import Callable, Sequence
from datetime import date
from typing import Any

import httpx
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from home_enrichment.logging import get_logger
from home_enrichment.models import Coordinates, SourceLabel, WeatherSummary
from home_enrichment.sources.base import DEFAULT_TIMEOUT, BaseSource

logger = get_logger(__name__)

VISUAL_CROSSING_TIMELINE_URL = (
    "https://weather.visualcrossing.com/VisualCrossingWebServices/rest/services/timeline"
)
WEATHER_ELEMENTS = "datetime,precip,snow,temp,tempmax,tempmin,windspeed,windgust,conditions"
HISTORY_YEARS = 10
DAYS_PER_YEAR = 365.25
# Daily precipitation (inches) that counts as a storm day regardless of conditions
STORM_PRECIP_INCHES = 0.5
_STORM_WORDS = ("storm", "thunder", "rain")


class WeatherDay(BaseModel):
    """One day of the timeline response; missing readings stay None."""

    model_config = ConfigDict(extra="ignore")

    precip: float | None = None
    snow: float | None = None
    temp: float | None = None
    temp_max: float | None = Field(
        default=None, validation_alias=AliasChoices("tempmax", "maxTemp")
    )
    temp_min: float | None = Field(
        default=None, validation_alias=AliasChoices("tempmin", "minTemp")
    )
    windspeed: float | None = None
    windgust: float | None = None
    conditions: str | None = None

    @property
    def is_storm_day(self) -> bool:
        conditions = (self.conditions or "").lower()
        return any(word in conditions for word in _STORM_WORDS) or (
            (self.precip or 0.0) > STORM_PRECIP_INCHES
        )


def summarize_weather_days(
    days: Sequence[WeatherDay], *, data_years: str = ""
) -> WeatherSummary | None:
    """Reduce daily observations into yearly climate figures.

    Totals are spread over ``len(days) / 365.25`` years; rainfall, snowfall and
    average wind are rounded to one decimal, everything else to whole units.
    """
    if not days:
        return None

    years = len(days) / DAYS_PER_YEAR
    temps = [day.temp for day in days if day.temp is not None]
    highs = [day.temp_max for day in days if day.temp_max is not None]
    lows = [day.temp_min for day in days if day.temp_min is not None]
    winds = [
        speed
        for day in days
        for speed in (day.windspeed, day.windgust)
        if speed is not None
    ]
    conditions = [(day.conditions or "").lower() for day in days]

    total_rainfall = sum(day.precip or 0.0 for day in days)
    total_snowfall = sum(day.snow or 0.0 for day in days)
    total_wind = sum(day.windspeed or 0.0 for day in days)
    storm_days = sum(1 for day in days if day.is_storm_day)

    return WeatherSummary(
        average_rainfall=round(total_rainfall / years, 1),
        average_snowfall=round(total_snowfall / years, 1),
        average_temperature=round(sum(temps) / len(temps)) if temps else None,
        max_temperature=round(max(highs)) if highs else None,
        min_temperature=round(min(lows)) if lows else None,
        storm_days_per_year=round(storm_days / years),
        wind_speed_average=round(total_wind / len(days), 1),
        wind_speed_max=round(max(winds)) if winds else 0,
        hurricane_events=sum(1 for text in conditions if "hurricane" in text),
        tornado_events=sum(1 for text in conditions if "tornado" in text),
        hail_events=sum(1 for text in conditions if "hail" in text),
        data_years=data_years,
    )


def history_window(today: date, years: int = HISTORY_YEARS) -> tuple[date, date]:
    """Start and end dates covering the last ``years`` years up to ``today``."""
    try:
        start = today.replace(year=today.year - years)
    except ValueError:
        # Feb 29 with no leap day in the start year
        start = today.replace(year=today.year - years, day=28)
    return start, today


class VisualCrossingSource(BaseSource[Coordinates, WeatherSummary]):
    """Ten years of daily weather for a point, reduced to a :class:`WeatherSummary`."""

    name = "visual_crossing"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        today: Callable[[], date] = date.today,
    ) -> None:
        super().__init__(client, timeout=timeout)
        self._api_key = api_key
        self._today = today

    @property
    def label(self) -> SourceLabel:
        return SourceLabel.HISTORICAL_WEATHER

    async def _fetch(self, query: Coordinates) -> WeatherSummary | None:
        start, end = history_window(self._today())
        url = (
            f"{VISUAL_CROSSING_TIMELINE_URL}/{query.latitude},{query.longitude}"
            f"/{start.isoformat()}/{end.isoformat()}"
        )
        response = await self._client.get(
            url,
            params={
                "unitGroup": "us",
                "include": "days",
                "key": self._api_key,
                "elements": WEATHER_ELEMENTS,
            },
        )
        if response.status_code == 401:
            logger.warning("visual_crossing_unauthorized")
            return None
        if response.status_code == 429:
            logger.warning("visual_crossing_rate_limited")
            return None
        response.raise_for_status()

        payload: Any = response.json()
        raw_days = payload.get("days") if isinstance(payload, dict) else None
        if not raw_days:
            return None
        days = [WeatherDay.model_validate(day) for day in raw_days]
        summary = summarize_weather_days(days, data_years=f"{start.year}-{end.year}")
        if summary is not None:
            logger.info(
                "weather_summarized",
                days=len(days),
                storm_days_per_year=summary.storm_days_per_year,
            )
        return summary
