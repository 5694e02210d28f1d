"""Fill-only merging of profile fragments."""

from home_enrichment.models import PropertyProfile, ProfileFields, SourceLabel, WeatherSummary


def fill_missing(profile: PropertyProfile, fragment: ProfileFields) -> PropertyProfile:
    """Copy the fragment's facts into fields the profile has not set yet.

    Facts already present always win, so merging the same fragment twice is a
    no-op and the first-merged source takes precedence.
    """
    updates = {
        name: getattr(fragment, name)
        for name in fragment.populated_fields()
        if getattr(profile, name) is None
    }
    if not updates:
        return profile
    return profile.model_copy(update=updates)


def add_source(profile: PropertyProfile, label: SourceLabel) -> PropertyProfile:
    """Append a provenance label unless it is already recorded."""
    if label in profile.sources:
        return profile
    return profile.model_copy(update={"sources": (*profile.sources, label)})


def weather_fragment(weather: WeatherSummary) -> ProfileFields:
    """The climate facts a weather summary contributes to a profile."""
    return ProfileFields(
        average_rainfall=weather.average_rainfall,
        average_snowfall=weather.average_snowfall,
    )
