"""State-level climate estimates and the maintenance advice derived from them.

Estimates are coarse regional patterns rather than measurements. They carry
the ``climate-estimate`` source and are never merged into an enriched profile.
"""

from typing import Final

from home_enrichment.models import ClimateEstimate, StormFrequency

HURRICANE_STATES: Final = frozenset({"FL", "LA", "TX", "NC", "SC", "GA", "AL", "MS"})
TORNADO_STATES: Final = frozenset({"TX", "OK", "KS", "NE", "IA", "MO", "AR", "MS", "AL", "TN"})
HAIL_STATES: Final = frozenset({"TX", "OK", "KS", "NE", "CO", "WY"})

# Storm exposure tiers; the high tier also covers the Ohio Valley tornado belt
SEVERE_STORM_STATES: Final = frozenset({"FL", "LA"})
HIGH_STORM_STATES: Final = HURRICANE_STATES | TORNADO_STATES | {"KY", "IL", "IN", "OH"}
MODERATE_STORM_STATES: Final = frozenset(
    {"CA", "NY", "NJ", "PA", "VA", "MD", "DE", "CT", "MA", "RI", "NH", "ME", "VT"}
)

# Inches per year
RAINFALL_BY_STATE: Final[dict[str, float]] = {
    # Southeast
    "FL": 54,
    "LA": 60,
    "AL": 56,
    "MS": 56,
    "GA": 50,
    "SC": 49,
    "NC": 50,
    # Northeast
    "NY": 42,
    "PA": 42,
    "NJ": 45,
    "MA": 47,
    "CT": 50,
    "RI": 47,
    # Pacific Northwest
    "WA": 38,
    "OR": 28,
    # Southwest
    "AZ": 13,
    "NV": 9,
    "UT": 15,
    "NM": 14,
    # Midwest
    "IL": 39,
    "IN": 41,
    "OH": 39,
    "MI": 32,
    "WI": 32,
    "MN": 27,
    # Plains
    "TX": 28,
    "OK": 36,
    "KS": 28,
    "NE": 23,
    # Mountain states
    "CO": 17,
    "WY": 13,
    "MT": 15,
    "ID": 18,
    # Statewide average; varies widely by region
    "CA": 22,
}
SNOWFALL_BY_STATE: Final[dict[str, float]] = {
    "ME": 77,
    "VT": 89,
    "NH": 71,
    "NY": 61,
    "MI": 60,
    "WI": 46,
    "MN": 54,
    "CO": 67,
    "UT": 51,
    "WY": 47,
    "MT": 48,
    "ID": 47,
    "MA": 43,
    "CT": 37,
    "PA": 38,
    "OH": 28,
    "IN": 25,
    "IL": 26,
    # Little or none
    "FL": 0,
    "CA": 0,
    "AZ": 0,
    "NV": 0,
    "TX": 2,
    "LA": 0,
    "GA": 1,
    "SC": 1,
    "NC": 5,
}
WIND_ZONE_BY_STATE: Final = {
    "FL": "Zone 3 (High wind)",
    "LA": "Zone 3 (High wind)",
    "TX": "Zone 2 (Moderate wind)",
    "CA": "Zone 2 (Moderate wind)",
    "CO": "Zone 2 (Moderate wind)",
    "WY": "Zone 2 (Moderate wind)",
}

DEFAULT_RAINFALL: Final = 30.0
DEFAULT_SNOWFALL: Final = 10.0
DEFAULT_WIND_ZONE: Final = "Zone 1 (Standard)"

HIGH_RAINFALL_INCHES: Final = 45
HEAVY_SNOWFALL_INCHES: Final = 40


def estimate_storm_frequency(state: str) -> StormFrequency:
    state = state.strip().upper()
    if state in SEVERE_STORM_STATES:
        return StormFrequency.SEVERE
    if state in HIGH_STORM_STATES:
        return StormFrequency.HIGH
    if state in MODERATE_STORM_STATES:
        return StormFrequency.MODERATE
    return StormFrequency.LOW


def estimate_climate(state: str) -> ClimateEstimate:
    """Estimate a state's climate from regional patterns.

    Unknown states get the national defaults: 30 in of rain, 10 in of snow,
    the standard wind zone and low storm exposure.
    """
    state = state.strip().upper()
    return ClimateEstimate(
        storm_frequency=estimate_storm_frequency(state),
        average_rainfall=RAINFALL_BY_STATE.get(state, DEFAULT_RAINFALL),
        average_snowfall=SNOWFALL_BY_STATE.get(state, DEFAULT_SNOWFALL),
        wind_zone=WIND_ZONE_BY_STATE.get(state, DEFAULT_WIND_ZONE),
        hurricane_risk=state in HURRICANE_STATES,
        tornado_risk=state in TORNADO_STATES,
        hail_risk=state in HAIL_STATES,
    )


def climate_recommendations(
    climate: ClimateEstimate, storm_frequency: StormFrequency | None = None
) -> list[str]:
    """Maintenance advice for a climate.

    Args:
        climate: Regional estimate supplying the hazard flags and precipitation.
        storm_frequency: Overrides the estimate's bucket, e.g. one measured
            from historical weather.
    """
    frequency = storm_frequency or climate.storm_frequency
    recommendations: list[str] = []

    if frequency in (StormFrequency.SEVERE, StormFrequency.HIGH):
        recommendations.append("High storm risk area: consider quarterly roof inspections")
        recommendations.append("Clean gutters more often (monthly during storm season)")
    if climate.hurricane_risk:
        recommendations.append(
            "Hurricane-prone area: make sure the roof is wind-rated and properly secured"
        )
        recommendations.append("Prepare storm shutters and emergency supplies")
    if climate.tornado_risk:
        recommendations.append("Tornado-prone area: keep a safe room or basement prepared")
    if climate.average_rainfall > HIGH_RAINFALL_INCHES:
        recommendations.append("High rainfall area: gutters need more frequent maintenance")
    if climate.average_snowfall > HEAVY_SNOWFALL_INCHES:
        recommendations.append("Heavy snowfall area: inspect the roof more often for snow load")
        recommendations.append("Keep insulation and the heating system well maintained")

    return recommendations
