"""Response models and field mapping for property-records providers.

RentCast and county assessor endpoints return the same loosely-typed record
shape: numbers may arrive as strings, several attributes go by more than one
name, and a lookup may return one object or a list of candidates.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from home_enrichment.models import SQUARE_FEET_PER_ACRE, ProfileFields
from home_enrichment.sources.parsing import (
    as_text_tuple,
    clean_text,
    first_present,
    parse_coordinate,
    parse_flag,
    parse_float,
    parse_int,
    parse_positive_int,
)

ZILLOW_HOMEDETAILS_URL = "https://www.zillow.com/homedetails/{zpid}"

_RECORD_CONFIG = ConfigDict(
    extra="ignore",
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
)


class RecordFeatures(BaseModel):
    """Nested ``features`` block of a property record."""

    model_config = _RECORD_CONFIG

    floor_count: Any = None
    garage_spaces: Any = None
    heating_type: Any = None
    cooling_type: Any = None
    roof_type: Any = None
    foundation_type: Any = None
    exterior_type: Any = None
    pool: Any = None
    fireplace: Any = None
    unit_count: Any = None


class PropertyRecord(BaseModel):
    """A single property record.

    Values stay raw here; :meth:`to_profile_fields` parses them so one bad
    cell only drops that field.
    """

    model_config = _RECORD_CONFIG

    # Structural
    year_built: Any = None
    square_footage: Any = None
    living_area: Any = None
    lot_size: Any = None
    bedrooms: Any = None
    bathrooms: Any = None
    property_type: Any = None
    home_type: Any = None
    stories: Any = None
    garage_spaces: Any = None
    garage: Any = None
    units: Any = None
    number_of_units: Any = None

    # Financial
    assessed_value: Any = None
    market_value: Any = None
    estimated_value: Any = None
    tax_amount: Any = None
    annual_tax_amount: Any = None
    tax_year: Any = None
    last_sale_price: Any = None
    last_sale_date: Any = None

    # Building systems
    construction_type: Any = None
    roof_type: Any = None
    foundation_type: Any = None
    heating_type: Any = None
    heating: Any = None
    heating_fuel: Any = None
    heating_fuel_type: Any = None
    cooling_type: Any = None
    cooling: Any = None
    water_heater_type: Any = None
    water_heater: Any = None
    water_heater_fuel: Any = None
    water_heater_fuel_type: Any = None
    exterior_wall_type: Any = None
    exterior_material: Any = None

    # Appliances
    stove_fuel: Any = None
    range_fuel: Any = None
    oven_fuel: Any = None
    dryer_fuel: Any = None
    dryer_fuel_type: Any = None
    washer_type: Any = None

    # Features and listing details
    interior_features: Any = None
    exterior_features: Any = None
    has_pool: Any = None
    has_fireplace: Any = None
    has_basement: Any = None
    basement_type: Any = None
    zoning_code: Any = None
    zoning: Any = None
    school_district: Any = None
    image_url: Any = None
    photo_url: Any = None
    image: Any = None
    zpid: Any = None
    zillow_url: Any = None
    features: Any = None

    # Geographic
    latitude: Any = None
    longitude: Any = None
    county: Any = None

    def _lot_size_acres(self) -> float | None:
        lot_size = parse_float(self.lot_size)
        if not lot_size:
            return None
        # Values above one acre are reported in square feet
        return lot_size / SQUARE_FEET_PER_ACRE if lot_size > 1 else lot_size

    def _zillow_url(self) -> str | None:
        explicit = clean_text(self.zillow_url)
        if explicit:
            return explicit
        zpid = clean_text(self.zpid)
        return ZILLOW_HOMEDETAILS_URL.format(zpid=zpid) if zpid else None

    def to_profile_fields(self) -> ProfileFields:
        """Map the record onto a profile fragment, resolving synonyms in order."""
        features = (
            RecordFeatures.model_validate(self.features)
            if isinstance(self.features, dict)
            else RecordFeatures()
        )
        interior = as_text_tuple(self.interior_features)
        features_text = " ".join(interior or ()).lower()

        stove_fuel = clean_text(first_present(self.stove_fuel, self.range_fuel, self.oven_fuel))
        dryer_fuel = clean_text(first_present(self.dryer_fuel, self.dryer_fuel_type))

        return ProfileFields(
            year_built=parse_positive_int(self.year_built),
            square_footage=parse_positive_int(first_present(self.square_footage, self.living_area)),
            lot_size=self._lot_size_acres(),
            bedrooms=parse_int(self.bedrooms),
            bathrooms=parse_float(self.bathrooms),
            property_type=clean_text(first_present(self.property_type, self.home_type)),
            stories=parse_positive_int(first_present(self.stories, features.floor_count)),
            garage_spaces=parse_int(
                first_present(self.garage_spaces, self.garage, features.garage_spaces)
            ),
            units=parse_positive_int(
                first_present(self.units, self.number_of_units, features.unit_count)
            ),
            assessed_value=parse_float(self.assessed_value),
            market_value=parse_float(first_present(self.market_value, self.estimated_value)),
            tax_amount=parse_float(first_present(self.tax_amount, self.annual_tax_amount)),
            tax_year=parse_positive_int(self.tax_year),
            last_sale_price=parse_float(self.last_sale_price),
            last_sale_date=clean_text(self.last_sale_date),
            construction_type=clean_text(self.construction_type),
            roof_type=clean_text(first_present(self.roof_type, features.roof_type)),
            foundation_type=clean_text(first_present(self.foundation_type, features.foundation_type)),
            heating_type=clean_text(
                first_present(self.heating_type, self.heating, features.heating_type)
            ),
            heating_fuel=clean_text(first_present(self.heating_fuel, self.heating_fuel_type)),
            cooling_type=clean_text(
                first_present(self.cooling_type, self.cooling, features.cooling_type)
            ),
            water_heater_type=clean_text(first_present(self.water_heater_type, self.water_heater)),
            water_heater_fuel=clean_text(
                first_present(self.water_heater_fuel, self.water_heater_fuel_type)
            ),
            exterior_wall_type=clean_text(
                first_present(self.exterior_wall_type, self.exterior_material, features.exterior_type)
            ),
            stove_fuel=stove_fuel or infer_fuel(features_text, ("stove", "range")),
            dryer_fuel=dryer_fuel or infer_fuel(features_text, ("dryer",)),
            washer_type=clean_text(self.washer_type),
            interior_features=interior,
            exterior_features=as_text_tuple(self.exterior_features),
            has_pool=parse_flag(first_present(self.has_pool, features.pool)),
            has_fireplace=parse_flag(first_present(self.has_fireplace, features.fireplace)),
            has_basement=parse_flag(self.has_basement),
            basement_type=clean_text(self.basement_type),
            zoning_code=clean_text(first_present(self.zoning_code, self.zoning)),
            school_district=clean_text(self.school_district),
            property_image_url=clean_text(first_present(self.image_url, self.photo_url, self.image)),
            zillow_url=self._zillow_url(),
            latitude=parse_coordinate(self.latitude, limit=90),
            longitude=parse_coordinate(self.longitude, limit=180),
            county=clean_text(self.county),
        )


def infer_fuel(features_text: str, appliance_words: tuple[str, ...]) -> str | None:
    """Infer "Gas" or "Electric" from lowercased feature text.

    ``infer_fuel("gas range, granite counters", ("stove", "range"))`` -> ``"Gas"``
    """
    for fuel in ("gas", "electric"):
        if any(f"{fuel} {word}" in features_text for word in appliance_words):
            return fuel.capitalize()
    return None


def map_records_payload(data: Any) -> ProfileFields | None:
    """Map a decoded records response (object or list of candidates).

    Returns:
        A fragment for the first candidate, or None when the payload is
        empty or not a record.
    """
    if isinstance(data, list):
        data = data[0] if data else None
    if not isinstance(data, dict) or not data:
        return None
    return PropertyRecord.model_validate(data).to_profile_fields()
