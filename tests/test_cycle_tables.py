"""Tests for deriving the Venus Star Point and Mars phase tables."""

import json
from datetime import date

import pytest
import swisseph as swe

from conftest import FakeBridge

from astro_purpose.constants import MARS_PHASE_NAMES
from astro_purpose.utils.cycle_tables import (
    MARS_TABLE_FILE,
    VSP_TABLE_FILE,
    build_mars_phase_table,
    build_vsp_table,
    write_tables,
)


class TestVspTable:

    def test_linear_conjunctions(self):
        # Venus gains 1°/day on the Sun: one conjunction every 360 days from J2000
        bridge = FakeBridge({swe.SUN: (0.0, 1.0), swe.VENUS: (0.0, 2.0)})
        events = build_vsp_table(bridge, date(2000, 1, 1), date(2001, 12, 31))
        assert [e.date for e in events] == [
            date(2000, 1, 1), date(2000, 12, 26), date(2001, 12, 21),
        ]
        assert all(e.star_type == "Evening Star" for e in events)

    def test_retrograde_venus_is_morning_star(self):
        bridge = FakeBridge({swe.SUN: (0.0, 1.0), swe.VENUS: (0.0, -0.5)})
        events = build_vsp_table(bridge, date(2000, 1, 1), date(2000, 2, 1))
        assert len(events) == 1
        assert events[0].star_type == "Morning Star"

    def test_real_inferior_conjunction_1988(self, bridge):
        events = build_vsp_table(bridge, date(1988, 1, 1), date(1988, 12, 31))
        assert len(events) == 1
        vsp = events[0]
        assert abs((vsp.date - date(1988, 6, 12)).days) <= 1
        assert vsp.sign == "Gemini"
        assert vsp.star_type == "Morning Star"


class TestMarsTable:

    @pytest.fixture
    def events(self):
        # Sun−Mars elongation grows 0.5°/day from 0° at J2000
        bridge = FakeBridge({swe.SUN: (10.0, 1.0), swe.MARS: (10.0, 0.5)})
        return build_mars_phase_table(bridge, date(2000, 1, 1), date(2002, 1, 1))

    def test_one_full_cycle_plus_next_inception(self, events):
        assert [e.phase for e in events] == MARS_PHASE_NAMES + ["Inception"]

    def test_phase_dates(self, events):
        assert events[0].date == date(2000, 1, 1)
        # Preparation at 15° elongation, 30 days after the conjunction
        assert events[1].date == date(2000, 1, 31)
        # Re-Orientation (opposition) at 180°, 360 days in
        assert events[7].date == date(2000, 12, 26)

    def test_cycle_named_by_mars_sign_at_conjunction(self, events):
        assert {e.cycle for e in events} == {"Aries"}

    def test_dates_ascending(self, events):
        dates = [e.date for e in events]
        assert dates == sorted(dates)


class TestWriteTables:

    def test_round_trip_json(self, tmp_path):
        bridge = FakeBridge({swe.SUN: (0.0, 1.0), swe.VENUS: (0.0, 2.0), swe.MARS: (0.0, 0.5)})
        vsp = build_vsp_table(bridge, date(2000, 1, 1), date(2000, 6, 1))
        mars = build_mars_phase_table(bridge, date(2000, 1, 1), date(2000, 6, 1))

        vsp_path, mars_path = write_tables(tmp_path / "tables", vsp, mars)

        assert vsp_path.name == VSP_TABLE_FILE
        assert mars_path.name == MARS_TABLE_FILE
        payload = json.loads(vsp_path.read_text())
        assert "generated" in payload
        assert payload["events"][0]["date"] == "2000-01-01"
        assert json.loads(mars_path.read_text())["events"][0]["phase"] == "Inception"
