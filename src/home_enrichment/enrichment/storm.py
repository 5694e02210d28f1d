"""Pure storm-frequency classification from weather or a regional estimate."""

from typing import Final

from home_enrichment.models import ClimateEstimate, StormFrequency, WeatherSummary

# Storm-day thresholds (days per year)
SEVERE_HURRICANE_STORM_DAYS: Final = 60
HIGH_STORM_DAYS: Final = 50
HIGH_TORNADO_STORM_DAYS: Final = 40
HIGH_HURRICANE_STORM_DAYS: Final = 30
MODERATE_STORM_DAYS: Final = 30

# Event-count thresholds over the observation window
SEVERE_HURRICANES: Final = 2
HIGH_TORNADOES: Final = 3
MODERATE_HAIL_EVENTS: Final = 5

# Max sustained wind or gust (mph)
MODERATE_WIND_MPH: Final = 60


def classify_storm_frequency(weather: WeatherSummary) -> StormFrequency:
    """Bucket storm exposure, checking the most severe tier first.

    Examples:
        - 2 hurricanes -> severe
        - 1 tornado and 45 storm days -> high
        - 6 hail events, nothing else -> moderate
        - 10 storm days, calm wind -> low
    """
    hurricanes = weather.hurricane_events
    tornadoes = weather.tornado_events
    storm_days = weather.storm_days_per_year

    if hurricanes >= SEVERE_HURRICANES or (
        hurricanes >= 1 and storm_days > SEVERE_HURRICANE_STORM_DAYS
    ):
        return StormFrequency.SEVERE
    if (
        tornadoes >= HIGH_TORNADOES
        or storm_days > HIGH_STORM_DAYS
        or (tornadoes >= 1 and storm_days > HIGH_TORNADO_STORM_DAYS)
        or (hurricanes >= 1 and storm_days > HIGH_HURRICANE_STORM_DAYS)
    ):
        return StormFrequency.HIGH
    if (
        storm_days > MODERATE_STORM_DAYS
        or tornadoes >= 1
        or weather.hail_events >= MODERATE_HAIL_EVENTS
        or weather.wind_speed_max > MODERATE_WIND_MPH
    ):
        return StormFrequency.MODERATE
    return StormFrequency.LOW


def determine_storm_frequency(
    weather: WeatherSummary | None = None,
    climate: ClimateEstimate | None = None,
) -> StormFrequency:
    """Measured weather wins over a regional estimate; moderate when neither is known."""
    if weather is not None:
        return classify_storm_frequency(weather)
    if climate is not None:
        return climate.storm_frequency
    return StormFrequency.MODERATE
