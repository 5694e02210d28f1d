"""Normalization of free-text provider property types."""

from home_enrichment.models import HomeDetails, HomeType, ProfileFields


def normalize_property_type(text: str | None) -> HomeType:
    """Map a provider's property type onto the closed :class:`HomeType` set.

    Matching is case-insensitive and ignores surrounding whitespace; more
    specific types are checked first so "Townhouse" never reads as a house.

    Examples:
        - ``"Single Family"`` / ``"Single-Family Home"`` / ``"House"`` -> single-family
        - ``"Townhouse"`` / ``"Town House"`` -> townhouse
        - ``"Condominium"`` -> condo
        - ``"MobileHome"`` -> mobile-home
        - ``"Yurt"`` -> other
        - ``""`` / ``None`` -> unknown
    """
    if text is None:
        return HomeType.UNKNOWN
    value = " ".join(text.split()).lower()
    if not value:
        return HomeType.UNKNOWN

    if "townhouse" in value or "town house" in value or "townhome" in value:
        return HomeType.TOWNHOUSE
    if "condo" in value:
        return HomeType.CONDO
    if "apartment" in value:
        return HomeType.APARTMENT
    if "mobile" in value or "manufactured" in value:
        return HomeType.MOBILE_HOME
    if "single" in value or "house" in value:
        return HomeType.SINGLE_FAMILY
    return HomeType.OTHER


def map_to_home_schema(profile: ProfileFields) -> HomeDetails:
    """Select the profile facts written onto a newly registered home.

    A profile without a property type leaves ``home_type`` unset rather than
    recording "unknown".
    """
    home_type = normalize_property_type(profile.property_type)
    return HomeDetails(
        year_built=profile.year_built,
        square_footage=profile.square_footage,
        lot_size=profile.lot_size,
        home_type=None if home_type is HomeType.UNKNOWN else home_type,
    )
