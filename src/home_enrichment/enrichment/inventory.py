"""Starter system and appliance records seeded from an enriched profile.

These are advisory defaults for a new home's inventory; the owner confirms or
edits them afterwards.
"""

from datetime import date
from typing import Final

from home_enrichment.models import (
    ApplianceRecord,
    ApplianceType,
    Condition,
    ProfileFields,
    SystemRecord,
    SystemType,
)

# Roof material keyword(s) -> (material, expected lifespan in years)
ROOF_MATERIALS: Final = (
    (("asphalt", "shingle"), "asphalt", 20),
    (("metal",), "metal", 40),
    (("tile",), "tile", 50),
)
DEFAULT_ROOF_LIFESPAN: Final = 20
ROOF_FAIR_FRACTION: Final = 0.7

PLUMBING_LIFESPAN: Final = 50
ELECTRICAL_LIFESPAN: Final = 50


def _age_condition(
    age: int | None, *, fair_after: float, good_after: float | None = None
) -> Condition:
    """Condition by home age; unknown or brand-new homes get the best bucket."""
    if age and age > fair_after:
        return Condition.FAIR
    if good_after is None:
        return Condition.GOOD
    if age and age > good_after:
        return Condition.GOOD
    return Condition.EXCELLENT


def _hvac(profile: ProfileFields, age: int | None) -> SystemRecord | None:
    if not (profile.heating_type or profile.cooling_type):
        return None
    notes = []
    if profile.heating_type:
        notes.append(f"Heating: {profile.heating_type}")
    if profile.heating_fuel:
        notes.append(f"Fuel: {profile.heating_fuel}")
    if profile.cooling_type:
        notes.append(f"Cooling: {profile.cooling_type}")
    return SystemRecord(
        system_type=SystemType.HVAC,
        notes=", ".join(notes),
        expected_lifespan=10 if age and age > 15 else 15,
        condition=_age_condition(age, fair_after=20, good_after=10),
    )


def _water_heater(profile: ProfileFields, age: int | None) -> SystemRecord | None:
    if not (profile.water_heater_type or profile.water_heater_fuel):
        return None
    notes = []
    if profile.water_heater_type:
        notes.append(f"Type: {profile.water_heater_type}")
    if profile.water_heater_fuel:
        notes.append(f"Fuel: {profile.water_heater_fuel}")
    tankless = "tankless" in (profile.water_heater_type or "").lower()
    return SystemRecord(
        system_type=SystemType.WATER_HEATER,
        notes=", ".join(notes),
        expected_lifespan=20 if tankless else 10,
        condition=_age_condition(age, fair_after=10),
    )


def _roof(profile: ProfileFields, age: int | None) -> SystemRecord | None:
    if not profile.roof_type:
        return None
    roof = profile.roof_type.lower()
    material, lifespan = None, None
    for keywords, name, years in ROOF_MATERIALS:
        if any(keyword in roof for keyword in keywords):
            material, lifespan = name, years
            break
    fair_after = (lifespan or DEFAULT_ROOF_LIFESPAN) * ROOF_FAIR_FRACTION
    return SystemRecord(
        system_type=SystemType.ROOF,
        material=material,
        notes=f"Type: {profile.roof_type}",
        expected_lifespan=lifespan,
        condition=Condition.FAIR if age and age > fair_after else Condition.GOOD,
    )


def _plumbing(profile: ProfileFields, age: int | None) -> SystemRecord | None:
    if not profile.construction_type:
        return None
    return SystemRecord(
        system_type=SystemType.PLUMBING,
        notes=f"Construction: {profile.construction_type}",
        expected_lifespan=PLUMBING_LIFESPAN,
        condition=_age_condition(age, fair_after=40),
    )


def _electrical(year_built: int | None, age: int | None) -> SystemRecord | None:
    if age is None:
        return None
    return SystemRecord(
        system_type=SystemType.ELECTRICAL,
        notes=f"Home built in {year_built}",
        expected_lifespan=ELECTRICAL_LIFESPAN,
        condition=_age_condition(age, fair_after=40, good_after=20),
    )


def generate_systems(
    profile: ProfileFields,
    year_built: int | None = None,
    *,
    current_year: int | None = None,
) -> list[SystemRecord]:
    """Seed HVAC, water heater, roof, plumbing and electrical records.

    Args:
        profile: Enriched profile (or fragment).
        year_built: Year the home was built; falls back to ``profile.year_built``.
        current_year: Year to compute the home's age against (defaults to today).

    Returns:
        One record per system the profile gives evidence for, in a fixed order.
    """
    year_built = year_built if year_built is not None else profile.year_built
    current_year = current_year or date.today().year
    age = current_year - year_built if year_built is not None else None

    candidates = (
        _hvac(profile, age),
        _water_heater(profile, age),
        _roof(profile, age),
        _plumbing(profile, age),
        _electrical(year_built, age),
    )
    return [record for record in candidates if record is not None]


def _mentions(features: tuple[str, ...] | None, *words: str) -> bool:
    return any(word in feature.lower() for feature in features or () for word in words)


def generate_appliances(profile: ProfileFields) -> list[ApplianceRecord]:
    """Seed range, washer, dryer and tank water heater records."""
    appliances: list[ApplianceRecord] = []
    features = profile.interior_features

    if profile.stove_fuel:
        appliances.append(
            ApplianceRecord(
                appliance_type=ApplianceType.RANGE,
                fuel_type=profile.stove_fuel,
                notes=f"{profile.stove_fuel} stove/range",
            )
        )

    if profile.washer_type or _mentions(features, "washer", "laundry"):
        appliances.append(
            ApplianceRecord(
                appliance_type=ApplianceType.WASHER,
                notes=f"Type: {profile.washer_type}" if profile.washer_type else "Washer",
            )
        )

    if profile.dryer_fuel or _mentions(features, "dryer", "laundry"):
        appliances.append(
            ApplianceRecord(
                appliance_type=ApplianceType.DRYER,
                fuel_type=profile.dryer_fuel,
                notes=f"{profile.dryer_fuel} dryer" if profile.dryer_fuel else "Dryer",
            )
        )

    # Tankless units are tracked as a system only
    water_heater = profile.water_heater_type
    if water_heater and "tankless" not in water_heater.lower():
        fuel = f" ({profile.water_heater_fuel})" if profile.water_heater_fuel else ""
        appliances.append(
            ApplianceRecord(
                appliance_type=ApplianceType.WATER_HEATER,
                fuel_type=profile.water_heater_fuel,
                notes=f"{water_heater} water heater{fuel}",
            )
        )

    return appliances
