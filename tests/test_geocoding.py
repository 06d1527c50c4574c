"""
Tests for geocoding.py: get_timezone_for_coords.

timezonefinder is offline and deterministic; only the fallback paths swap in
a canned finder.
"""

import pytest

from astro_purpose.exceptions import InvalidInput, InvalidTimeZone
from astro_purpose.utils import geocoding
from astro_purpose.utils.geocoding import get_timezone_for_coords
from astro_purpose.utils.time_resolver import load_zone


class TestGetTimezoneForCoords:
    def test_new_york(self):
        assert get_timezone_for_coords(lat=40.7128, lon=-74.0060) == "America/New_York"

    def test_bangkok(self):
        assert get_timezone_for_coords(lat=13.7563, lon=100.5018) == "Asia/Bangkok"

    def test_london(self):
        assert get_timezone_for_coords(lat=51.5074, lon=-0.1278) == "Europe/London"

    def test_open_ocean_returns_a_timezone(self):
        # timezonefinder has ocean timezone polygons, so it returns Etc/GMT+N, not UTC
        tz = get_timezone_for_coords(lat=0.0, lon=-170.0)
        assert tz
        assert tz == "UTC" or tz.startswith("Etc/")

    @pytest.mark.parametrize("lat,lon", [(40.7128, -74.0060), (-33.8688, 151.2093), (0.0, -170.0)])
    def test_result_is_loadable(self, lat, lon):
        load_zone(get_timezone_for_coords(lat=lat, lon=lon))


class FixedFinder:
    """Stands in for TimezoneFinder with a canned answer."""

    def __init__(self, answer):
        self.answer = answer

    def timezone_at(self, lat, lng):
        return self.answer


class TestZoneValidation:
    def test_latitude_out_of_range(self):
        with pytest.raises(InvalidInput, match="latitude"):
            get_timezone_for_coords(lat=91.0, lon=0.0)

    def test_longitude_out_of_range(self):
        with pytest.raises(InvalidInput, match="longitude"):
            get_timezone_for_coords(lat=0.0, lon=200.0)

    def test_no_polygon_falls_back_to_utc(self, monkeypatch):
        monkeypatch.setattr(geocoding, "_tf", FixedFinder(None))
        assert get_timezone_for_coords(lat=0.0, lon=0.0) == "UTC"

    def test_zone_missing_from_database(self, monkeypatch):
        monkeypatch.setattr(geocoding, "_tf", FixedFinder("Nowhere/Atlantis"))
        with pytest.raises(InvalidTimeZone, match="Nowhere/Atlantis"):
            get_timezone_for_coords(lat=0.0, lon=0.0)
