"""Tests for cache key normalization."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from home_enrichment.utils.address import collapse_whitespace, profile_cache_key, zip_cache_key


class TestProfileCacheKey:
    def test_case_and_whitespace_variants_share_a_key(self) -> None:
        assert profile_cache_key("123 Main St", "Austin", "tx", "78701") == profile_cache_key(
            " 123 MAIN ST ", "austin", "TX", "78701"
        )

    def test_key_format(self) -> None:
        key = profile_cache_key("123 Main St", "Austin", "tx", "78701")
        assert key == "123 main st|austin|TX|78701"

    def test_internal_whitespace_runs_collapse(self) -> None:
        key = profile_cache_key("123   Main\tSt", "San  Francisco", " ca ", " 94102 ")
        assert key == "123 main st|san francisco|CA|94102"

    def test_different_zip_gives_different_key(self) -> None:
        assert profile_cache_key("1 A St", "X", "CA", "94102") != profile_cache_key(
            "1 A St", "X", "CA", "94103"
        )

    @given(
        address=st.text(alphabet="abcdefgh 0123456789", min_size=1, max_size=30),
        city=st.text(alphabet="abcdefgh ", min_size=1, max_size=20),
    )
    def test_upper_and_padded_input_normalizes_identically(self, address: str, city: str) -> None:
        assert profile_cache_key(address, city, "tx", "78701") == profile_cache_key(
            f"  {address.upper()} ", f"{city.upper()}  ", "TX", "78701 "
        )


class TestZipCacheKey:
    @pytest.mark.parametrize(
        ("zip_code", "expected"),
        [
            ("94102", "94102"),
            (" 94102 ", "94102"),
            ("94102-1234", "94102"),
            ("9 4102", "94102"),
        ],
    )
    def test_normalizes_to_five_digit_zip(self, zip_code: str, expected: str) -> None:
        assert zip_cache_key(zip_code) == expected


class TestCollapseWhitespace:
    def test_trims_and_collapses(self) -> None:
        assert collapse_whitespace("  a \n\t b  ") == "a b"
