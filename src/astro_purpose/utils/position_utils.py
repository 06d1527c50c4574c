"""Shared position conversion utilities.

Low-level math for converting between astrological position formats.
Used by the chart calculator, the cycle table builder and any module that
compares or formats ecliptic longitudes.
"""

from typing import Any

from ..constants import ZODIAC_SIGNS, SIGN_ELEMENTS


SIGN_ORDER = ZODIAC_SIGNS


def normalize_longitude(longitude: float) -> float:
    """Normalise an ecliptic longitude to [0, 360)."""
    longitude = longitude % 360.0
    # -1e-15 % 360.0 rounds to 360.0 in floating point
    if longitude >= 360.0:
        longitude = 0.0
    return longitude


def sign_index(longitude: float) -> int:
    """Return the 0-based sign index (Aries = 0) for any longitude."""
    return int(normalize_longitude(longitude) // 30) % 12


def sign_for_longitude(longitude: float) -> str:
    """Return the zodiac sign name holding a longitude.

    Example:
        sign_for_longitude(293.8) -> "Capricorn"
        sign_for_longitude(-10.0) -> "Pisces"
    """
    return ZODIAC_SIGNS[sign_index(longitude)]


def element_for_sign(sign: str) -> str:
    """Return the classical element ('fire', 'earth', 'air', 'water') of a sign."""
    if sign not in SIGN_ELEMENTS:
        raise ValueError(f"Unknown sign: {sign}")
    return SIGN_ELEMENTS[sign]


def decimal_to_dms(decimal_degrees: float) -> tuple[int, int, float]:
    """Convert decimal degrees to (degrees, minutes, seconds).

    Args:
        decimal_degrees: Decimal degree value within a sign (0.0–30.0)
            or any non-negative float.

    Returns:
        (degrees: int, minutes: int, seconds: float)

    Example:
        decimal_to_dms(14.66) -> (14, 39, 36.0)
    """
    degrees = int(decimal_degrees)
    remaining = (decimal_degrees - degrees) * 60
    minutes = int(remaining)
    seconds = (remaining - minutes) * 60
    return degrees, minutes, seconds


def format_degree(degree_in_sign: float) -> str:
    """Format a degree within a sign as D°MM' (e.g. 14°39')."""
    deg, minutes, _ = decimal_to_dms(degree_in_sign)
    return f"{deg}°{minutes:02d}'"


def longitude_to_sign_info(longitude: float) -> dict[str, Any]:
    """Convert an absolute ecliptic longitude (0-360°) to sign metadata.

    Returns a dict with:
        sign              str   — e.g. "Aquarius"
        sign_index        int   — 0 (Aries) .. 11 (Pisces)
        degree            float — degrees within the sign (0–<30)
        formatted         str   — e.g. "14°39'"
        absolute_position float — normalised longitude value
    """
    longitude = normalize_longitude(longitude)
    index = sign_index(longitude)
    degree_in_sign = longitude - index * 30.0

    return {
        "sign": ZODIAC_SIGNS[index],
        "sign_index": index,
        "degree": degree_in_sign,
        "formatted": format_degree(degree_in_sign),
        "absolute_position": longitude,
    }


def sign_to_absolute_position(sign: str, degree_in_sign: float) -> float:
    """Convert a sign name + degree-within-sign to absolute ecliptic position (0–360°).

    Args:
        sign: Full sign name (e.g., 'Aquarius')
        degree_in_sign: Decimal degrees within the sign (0.0–30.0)

    Returns:
        Absolute ecliptic longitude in degrees (0.0–360.0)

    Raises:
        ValueError: If sign is not a recognised zodiac sign name.

    Example:
        sign_to_absolute_position("Aquarius", 14.66) -> 314.66
    """
    if sign not in SIGN_ORDER:
        raise ValueError(f"Unknown sign: {sign}")
    return SIGN_ORDER.index(sign) * 30 + degree_in_sign


def angular_separation(lon1: float, lon2: float) -> float:
    """Return the shortest arc between two longitudes, in [0, 180]."""
    diff = abs(normalize_longitude(lon1) - normalize_longitude(lon2))
    if diff > 180:
        diff = 360 - diff
    return diff


def signed_difference(lon1: float, lon2: float) -> float:
    """Return lon1 − lon2 folded into (−180, 180]."""
    diff = normalize_longitude(lon1 - lon2)
    if diff > 180:
        diff -= 360
    return diff
