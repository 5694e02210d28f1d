"""Field-level parsing helpers shared by source adapters.

Each helper returns None when a value is missing or cannot be parsed, so a
single bad cell leaves one field unset instead of failing the whole fragment.
"""

import math
import re
from collections.abc import Iterable
from typing import Any

_NUMBER_NOISE = re.compile(r"[,$\s]")


def first_present(*values: Any) -> Any:
    """Return the first value that is neither None nor an empty string."""
    for value in values:
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def parse_float(value: Any) -> float | None:
    """Parse a non-negative finite number from an int, float or numeric string.

    Examples:
        - ``"1,850"`` -> ``1850.0``
        - ``"2.5"`` -> ``2.5``
        - ``"n/a"`` -> ``None``
        - ``-666666666`` -> ``None`` (provider "not available" sentinel)
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        cleaned = _NUMBER_NOISE.sub("", value)
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def parse_int(value: Any) -> int | None:
    """Parse a non-negative integer; decimals are truncated (``"1980.0"`` -> 1980)."""
    number = parse_float(value)
    return int(number) if number is not None else None


def parse_positive_int(value: Any) -> int | None:
    """Like :func:`parse_int`, but zero counts as missing."""
    number = parse_int(value)
    return number if number else None


def parse_coordinate(value: Any, *, limit: float) -> float | None:
    """Parse a signed latitude/longitude, rejecting values outside ``±limit``."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or abs(number) > limit:
        return None
    return number


def clean_text(value: Any) -> str | None:
    """Return a stripped string, or None for blanks, flags and containers."""
    if value is None or isinstance(value, bool | dict | list):
        return None
    text = str(value).strip()
    return text or None


def as_text_tuple(value: Any) -> tuple[str, ...] | None:
    """Normalize a string or list of strings into a tuple of non-empty strings."""
    if value is None:
        return None
    items: Iterable[Any] = value if isinstance(value, list | tuple) else [value]
    texts = tuple(text for item in items if (text := clean_text(item)))
    return texts or None


def parse_flag(value: Any) -> bool | None:
    """Interpret provider booleans (``true``, ``"Yes"``, ``1``); unknown -> None."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "y", "1"}:
            return True
        if lowered in {"false", "no", "n", "0"}:
            return False
    return None
