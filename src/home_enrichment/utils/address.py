"""Address normalization utilities for cache keys."""

import re

_WHITESPACE = re.compile(r"\s+")

CACHE_KEY_SEPARATOR = "|"


def collapse_whitespace(text: str) -> str:
    """Trim and collapse every whitespace run to a single space."""
    return _WHITESPACE.sub(" ", text).strip()


def profile_cache_key(address: str, city: str, state: str, zip_code: str) -> str:
    """Build the address-level profile cache key.

    Two addresses differing only in case or incidental whitespace map to the
    same key:

    - ``("123 Main St", "Austin", "tx", "78701")`` -> ``"123 main st|austin|TX|78701"``
    - ``(" 123 MAIN  ST ", "austin", "TX", "78701")`` -> same

    Args:
        address: Street address.
        city: City name.
        state: Two-letter state code (any case).
        zip_code: Postal code.

    Returns:
        Normalized cache key.
    """
    parts = (
        collapse_whitespace(address).lower(),
        collapse_whitespace(city).lower(),
        collapse_whitespace(state).upper(),
        zip_code.strip(),
    )
    return collapse_whitespace(CACHE_KEY_SEPARATOR.join(parts))


def zip_cache_key(zip_code: str) -> str:
    """Build the zip-level weather cache key.

    Internal whitespace is dropped and ZIP+4 codes collapse onto their
    5-digit ZIP, since weather is shared across the whole ZIP.
    """
    return _WHITESPACE.sub("", zip_code)[:5]
