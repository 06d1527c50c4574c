"""Unit tests for birth input validation and time resolution."""

from datetime import timezone

import pytest

from astro_purpose.exceptions import InvalidCivilTime, InvalidInput, InvalidTimeZone
from astro_purpose.models.birth_event import BirthEvent, normalize_house_system, parse_time
from astro_purpose.utils.time_resolver import TimeResolver, load_zone


class TestBirthEvent:

    def test_valid_event(self, nyc_event):
        assert nyc_event.house_system == "P"
        assert nyc_event.date_string() == "1988-01-14"
        assert nyc_event.time_string() == "10:22"

    def test_from_strings(self):
        event = BirthEvent.from_strings("1988-01-14", "10:22", 40.7128, -74.006, "America/New_York", "Koch")
        assert (event.year, event.month, event.day, event.hour, event.minute) == (1988, 1, 14, 10, 22)
        assert event.house_system == "K"

    def test_impossible_date(self):
        with pytest.raises(InvalidInput, match="Invalid date"):
            BirthEvent(2001, 2, 30, 12, 0, 0.0, 0.0, "UTC")

    def test_bad_latitude(self):
        with pytest.raises(InvalidInput, match="latitude"):
            BirthEvent(2001, 2, 3, 12, 0, 91.0, 0.0, "UTC")

    def test_bad_longitude(self):
        with pytest.raises(InvalidInput, match="longitude"):
            BirthEvent(2001, 2, 3, 12, 0, 0.0, -181.0, "UTC")

    def test_missing_timezone(self):
        with pytest.raises(InvalidInput, match="Timezone"):
            BirthEvent(2001, 2, 3, 12, 0, 0.0, 0.0, " ")

    def test_bad_date_string(self):
        with pytest.raises(InvalidInput, match="YYYY-MM-DD"):
            BirthEvent.from_strings("14/01/1988", "10:22", 0.0, 0.0, "UTC")

    def test_invalid_input_is_a_value_error(self):
        with pytest.raises(ValueError):
            BirthEvent(2001, 13, 3, 12, 0, 0.0, 0.0, "UTC")


class TestParsing:

    def test_parse_time(self):
        assert parse_time("10:22") == (10, 22)
        assert parse_time("00:00:30") == (0, 0)

    @pytest.mark.parametrize("value", ["25:00", "12:60", "noon", "12"])
    def test_parse_time_rejects(self, value):
        with pytest.raises(InvalidInput, match="HH:MM"):
            parse_time(value)

    def test_house_system_by_code_or_name(self):
        assert normalize_house_system("p") == "P"
        assert normalize_house_system("Whole Sign") == "W"
        assert normalize_house_system("Equal") == "E"

    def test_unknown_house_system(self):
        with pytest.raises(InvalidInput, match="house system"):
            normalize_house_system("Q")


class TestTimeResolver:

    @pytest.fixture
    def resolver(self, bridge):
        return TimeResolver(bridge)

    def test_standard_time_offset(self, resolver, nyc_event):
        instant = resolver.resolve(nyc_event)
        assert instant.utc.hour == 15
        assert instant.utc.minute == 22
        assert instant.utc.tzinfo == timezone.utc
        assert instant.utc_offset_hours == -5.0

    def test_julian_days(self, resolver):
        instant = resolver.resolve_civil(2000, 1, 1, 12, 0, "UTC")
        # UT1 differs from UTC by DUT1, under a second
        assert instant.jd_ut == pytest.approx(2451545.0, abs=1e-5)
        # Delta T around 2000 is about 64 seconds
        assert (instant.jd_et - instant.jd_ut) * 86400 == pytest.approx(64, abs=2)

    def test_dst_gap_raises(self, resolver):
        with pytest.raises(InvalidCivilTime, match="does not exist"):
            resolver.resolve_civil(2021, 3, 14, 2, 30, "America/New_York")

    def test_dst_fold_takes_first_occurrence(self, resolver):
        instant = resolver.resolve_civil(2021, 11, 7, 1, 30, "America/New_York")
        # First 01:30 is still EDT (UTC-4)
        assert instant.utc.hour == 5
        assert instant.utc_offset_hours == -4.0

    def test_unknown_zone(self, resolver):
        with pytest.raises(InvalidTimeZone):
            resolver.resolve_civil(2000, 1, 1, 12, 0, "Mars/Olympus_Mons")

    def test_load_zone_strips_whitespace(self):
        assert str(load_zone(" Europe/London ")) == "Europe/London"

    def test_naive_utc_moment(self, resolver):
        from datetime import datetime
        instant = resolver.resolve_utc(datetime(2000, 1, 1, 12, 0))
        assert instant.utc.tzinfo == timezone.utc
        assert instant.jd_ut == pytest.approx(2451545.0, abs=1e-5)
