"""Tests for field-level parsing helpers."""

import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

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


class TestParseFloat:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (1850, 1850.0),
            ("1,850", 1850.0),
            ("$640,000", 640000.0),
            (" 2.5 ", 2.5),
            ("n/a", None),
            ("", None),
            (None, None),
            (True, None),
            (-666666666, None),
            (math.nan, None),
            ([1], None),
        ],
    )
    def test_examples(self, value: object, expected: float | None) -> None:
        assert parse_float(value) == expected

    @given(st.floats(min_value=0, max_value=1e12, allow_nan=False))
    def test_non_negative_floats_round_trip(self, value: float) -> None:
        assert parse_float(value) == value


class TestParseInt:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("1980", 1980), ("1980.0", 1980), (3.7, 3), (0, 0), ("abc", None)],
    )
    def test_examples(self, value: object, expected: int | None) -> None:
        assert parse_int(value) == expected

    def test_positive_treats_zero_as_missing(self) -> None:
        assert parse_positive_int(0) is None
        assert parse_positive_int("0") is None
        assert parse_positive_int("12") == 12


class TestParseCoordinate:
    def test_accepts_signed_values(self) -> None:
        assert parse_coordinate("-122.4194", limit=180) == -122.4194

    @pytest.mark.parametrize("value", [91, "north", None, True, math.inf])
    def test_rejects_invalid_latitude(self, value: object) -> None:
        assert parse_coordinate(value, limit=90) is None


class TestText:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (" Stucco ", "Stucco"),
            ("   ", None),
            (None, None),
            (False, None),
            ({}, None),
            (42, "42"),
        ],
    )
    def test_clean_text(self, value: object, expected: str | None) -> None:
        assert clean_text(value) == expected

    def test_as_text_tuple(self) -> None:
        assert as_text_tuple(["Deck", " ", None, "Patio"]) == ("Deck", "Patio")
        assert as_text_tuple("Deck") == ("Deck",)
        assert as_text_tuple([]) is None
        assert as_text_tuple(None) is None

    def test_first_present_skips_blanks_but_keeps_false(self) -> None:
        assert first_present(None, "  ", False, "x") is False
        assert first_present(None, "") is None


class TestParseFlag:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (True, True),
            ("Yes", True),
            ("n", False),
            (0, False),
            (1, True),
            ("maybe", None),
            (None, None),
        ],
    )
    def test_examples(self, value: object, expected: bool | None) -> None:
        assert parse_flag(value) == expected
