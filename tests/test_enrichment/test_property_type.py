"""Tests for property-type normalization and the home-schema mapping."""

import pytest

from home_enrichment.enrichment.property_type import map_to_home_schema, normalize_property_type
from home_enrichment.models import HomeType, ProfileFields


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Single Family", HomeType.SINGLE_FAMILY),
        ("Single-Family Home", HomeType.SINGLE_FAMILY),
        ("  HOUSE ", HomeType.SINGLE_FAMILY),
        ("Townhouse", HomeType.TOWNHOUSE),
        ("Town House", HomeType.TOWNHOUSE),
        ("townhome", HomeType.TOWNHOUSE),
        ("Condominium", HomeType.CONDO),
        ("Condo", HomeType.CONDO),
        ("Apartment", HomeType.APARTMENT),
        ("MobileHome", HomeType.MOBILE_HOME),
        ("Manufactured", HomeType.MOBILE_HOME),
        ("Yurt", HomeType.OTHER),
        ("Land", HomeType.OTHER),
        ("", HomeType.UNKNOWN),
        ("   ", HomeType.UNKNOWN),
        (None, HomeType.UNKNOWN),
    ],
)
def test_normalize_property_type(text: str | None, expected: HomeType) -> None:
    assert normalize_property_type(text) is expected


class TestMapToHomeSchema:
    def test_copies_structural_facts(self) -> None:
        profile = ProfileFields(
            year_built=1980,
            square_footage=1850,
            lot_size=0.12,
            property_type="Single Family",
            bedrooms=3,
        )

        home = map_to_home_schema(profile)

        assert home.year_built == 1980
        assert home.square_footage == 1850
        assert home.lot_size == 0.12
        assert home.home_type is HomeType.SINGLE_FAMILY

    def test_missing_type_leaves_home_type_unset(self) -> None:
        assert map_to_home_schema(ProfileFields(year_built=1980)).home_type is None

    def test_unrecognized_type_is_other(self) -> None:
        assert map_to_home_schema(ProfileFields(property_type="Yurt")).home_type is HomeType.OTHER
