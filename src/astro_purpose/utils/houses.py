"""House assignment for ecliptic longitudes.

A body belongs to house *i* when its longitude lies in the sector that starts
at cusp *i* (inclusive) and ends at cusp *i + 1* (exclusive), measured forward
around the zodiac. Sectors that straddle 0° Aries are handled by measuring the
arc modulo 360.
"""

from typing import Sequence

from .position_utils import normalize_longitude


def house_for_longitude(longitude: float, cusps: Sequence[float]) -> int:
    """Return the house number (1..12) containing a longitude.

    Args:
        longitude: Ecliptic longitude in degrees (any range).
        cusps: Twelve cusp longitudes, first house first.

    Returns:
        House number 1..12. Exactly one house is returned for every longitude;
        a longitude sitting on a cusp belongs to the house that cusp opens.

    Raises:
        ValueError: If ``cusps`` does not hold twelve values.
    """
    if len(cusps) != 12:
        raise ValueError(f"Expected 12 house cusps, got {len(cusps)}")

    lon = normalize_longitude(longitude)
    for i in range(12):
        start = normalize_longitude(cusps[i])
        end = normalize_longitude(cusps[(i + 1) % 12])
        width = (end - start) % 360.0
        if width and (lon - start) % 360.0 < width:
            return i + 1

    # Degenerate cusps (zero-width or out-of-order sectors): take the nearest
    # cusp at or behind the longitude.
    distances = [(lon - normalize_longitude(c)) % 360.0 for c in cusps]
    return distances.index(min(distances)) + 1


def bodies_by_house(placements: dict[str, int]) -> dict[int, list[str]]:
    """Invert a body → house mapping into house → bodies (all twelve houses present)."""
    populated: dict[int, list[str]] = {n: [] for n in range(1, 13)}
    for body, house in placements.items():
        populated[house].append(body)
    return populated
