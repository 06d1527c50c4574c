"""Timezone lookup for birth coordinates."""

import logging

from timezonefinder import TimezoneFinder

from ..models.birth_event import Coordinates
from .time_resolver import load_zone

logger = logging.getLogger(__name__)

# Module-level instance: initialization loads polygon data once
_tf = TimezoneFinder()

OCEAN_FALLBACK_ZONE = "UTC"


def get_timezone_for_coords(lat: float, lon: float) -> str:
    """
    Return the IANA timezone for a birth place.

    The zone comes from timezonefinder's polygons and is checked against the
    installed tz database before it is handed to the time resolver. Points
    with no polygon fall back to UTC.

    Args:
        lat: Latitude in decimal degrees
        lon: Longitude in decimal degrees

    Returns:
        IANA timezone string, e.g. 'America/New_York', 'Asia/Bangkok', 'UTC'

    Raises:
        InvalidInput: Coordinates out of range.
        InvalidTimeZone: The zone found is missing from the tz database.
    """
    place = Coordinates(lat, lon)
    name = _tf.timezone_at(lat=place.latitude, lng=place.longitude)
    if not name:
        logger.info(
            "No timezone polygon at %.4f, %.4f; using %s",
            place.latitude, place.longitude, OCEAN_FALLBACK_ZONE,
        )
        name = OCEAN_FALLBACK_ZONE
    load_zone(name)
    return name
