"""Tests for property-record field mapping."""

import pytest

from home_enrichment.sources.records import infer_fuel, map_records_payload


class TestMapRecordsPayload:
    def test_string_year_built_is_parsed(self) -> None:
        fields = map_records_payload({"yearBuilt": "1980"})
        assert fields is not None
        assert fields.year_built == 1980

    def test_list_response_uses_first_candidate(self) -> None:
        fields = map_records_payload([{"bedrooms": 3}, {"bedrooms": 5}])
        assert fields is not None
        assert fields.bedrooms == 3

    @pytest.mark.parametrize("payload", [None, [], {}, "not a record", [None]])
    def test_empty_or_non_record_payload_is_none(self, payload: object) -> None:
        assert map_records_payload(payload) is None

    def test_synonyms_fill_in_order(self) -> None:
        fields = map_records_payload(
            {
                "livingArea": "1,850",
                "homeType": "Condo",
                "garage": 2,
                "estimatedValue": 950000,
                "annualTaxAmount": "11,200.50",
                "heating": "Forced Air",
                "coolingType": "Central",
                "cooling": "Window",
                "rangeFuel": "Gas",
                "dryerFuelType": "Electric",
                "zoning": "RH-1",
                "numberOfUnits": "1",
                "exteriorMaterial": "Stucco",
                "photoUrl": "https://img.example.com/1.jpg",
            }
        )
        assert fields is not None
        assert fields.square_footage == 1850
        assert fields.property_type == "Condo"
        assert fields.garage_spaces == 2
        assert fields.market_value == 950000.0
        assert fields.tax_amount == 11200.5
        assert fields.heating_type == "Forced Air"
        assert fields.cooling_type == "Central"
        assert fields.stove_fuel == "Gas"
        assert fields.dryer_fuel == "Electric"
        assert fields.zoning_code == "RH-1"
        assert fields.units == 1
        assert fields.exterior_wall_type == "Stucco"
        assert fields.property_image_url == "https://img.example.com/1.jpg"

    def test_primary_name_wins_over_synonym(self) -> None:
        fields = map_records_payload({"squareFootage": 2000, "livingArea": 1500})
        assert fields is not None
        assert fields.square_footage == 2000

    def test_lot_size_in_square_feet_converts_to_acres(self) -> None:
        fields = map_records_payload({"lotSize": 43560})
        assert fields is not None
        assert fields.lot_size == pytest.approx(1.0)

    def test_lot_size_already_in_acres_is_kept(self) -> None:
        fields = map_records_payload({"lotSize": "0.25"})
        assert fields is not None
        assert fields.lot_size == 0.25

    def test_unparseable_values_leave_fields_unset(self) -> None:
        fields = map_records_payload(
            {"yearBuilt": "unknown", "squareFootage": "n/a", "bedrooms": -1, "bathrooms": {}}
        )
        assert fields is not None
        assert fields.year_built is None
        assert fields.square_footage is None
        assert fields.bedrooms is None
        assert fields.bathrooms is None

    def test_out_of_range_coordinates_are_dropped(self) -> None:
        fields = map_records_payload({"latitude": 137.0, "longitude": -122.4})
        assert fields is not None
        assert fields.latitude is None
        assert fields.longitude == -122.4

    def test_zpid_builds_zillow_url(self) -> None:
        fields = map_records_payload({"zpid": 15063493})
        assert fields is not None
        assert fields.zillow_url == "https://www.zillow.com/homedetails/15063493"

    def test_nested_features_block(self) -> None:
        fields = map_records_payload(
            {
                "features": {
                    "floorCount": 2,
                    "garageSpaces": 1,
                    "roofType": "Asphalt",
                    "heatingType": "Forced Air",
                    "pool": True,
                    "fireplace": False,
                    "cooling": True,
                }
            }
        )
        assert fields is not None
        assert fields.stories == 2
        assert fields.garage_spaces == 1
        assert fields.roof_type == "Asphalt"
        assert fields.heating_type == "Forced Air"
        assert fields.has_pool is True
        assert fields.has_fireplace is False
        assert fields.cooling_type is None

    def test_fuel_inferred_from_interior_features(self) -> None:
        fields = map_records_payload(
            {"interiorFeatures": ["Gas Range", "Electric Dryer Hookup", "Hardwood Floors"]}
        )
        assert fields is not None
        assert fields.stove_fuel == "Gas"
        assert fields.dryer_fuel == "Electric"
        assert fields.interior_features == ("Gas Range", "Electric Dryer Hookup", "Hardwood Floors")

    def test_explicit_fuel_beats_feature_text(self) -> None:
        fields = map_records_payload(
            {"stoveFuel": "Electric", "interiorFeatures": "gas stove"}
        )
        assert fields is not None
        assert fields.stove_fuel == "Electric"
        assert fields.interior_features == ("gas stove",)


class TestInferFuel:
    @pytest.mark.parametrize(
        ("text", "words", "expected"),
        [
            ("gas stove", ("stove", "range"), "Gas"),
            ("electric range, quartz", ("stove", "range"), "Electric"),
            ("gas dryer", ("dryer",), "Gas"),
            ("induction cooktop", ("stove", "range"), None),
        ],
    )
    def test_examples(self, text: str, words: tuple[str, ...], expected: str | None) -> None:
        assert infer_fuel(text, words) == expected
