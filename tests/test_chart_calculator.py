"""Tests for ChartCalculator against the Moshier ephemeris and a fake bridge."""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest
import swisseph as swe

from conftest import FakeBridge

from astro_purpose.config import Settings
from astro_purpose.exceptions import HouseCalculationError, InvalidCivilTime
from astro_purpose.models.birth_event import BirthEvent
from astro_purpose.utils.chart_calculator import ChartCalculator, south_node_from


class TestNatalChart:

    def test_sun_in_capricorn(self, nyc_chart):
        assert nyc_chart.planets["Sun"].sign == "Capricorn"
        assert 23.0 < nyc_chart.planets["Sun"].degree < 25.0

    def test_tracked_bodies(self, nyc_chart):
        expected = {
            "Sun", "Moon", "Mercury", "Venus", "Mars", "Jupiter",
            "Saturn", "Uranus", "Neptune", "Pluto", "North Node", "South Node",
        }
        assert set(nyc_chart.planets) == expected
        assert nyc_chart.warnings == ()

    def test_nodes_are_opposite(self, nyc_chart):
        north = nyc_chart.planets["North Node"].longitude
        south = nyc_chart.planets["South Node"].longitude
        assert abs(((south - north) % 360.0) - 180.0) < 1e-9

    def test_houses_and_angles(self, nyc_chart):
        houses = nyc_chart.houses
        assert houses.system == "P"
        assert houses.system_name == "Placidus"
        assert len(houses.cusps) == 12
        assert houses.cusps[0] == pytest.approx(houses.ascendant)
        assert houses.descendant == pytest.approx((houses.ascendant + 180.0) % 360.0)
        assert houses.vertex is not None

    def test_every_body_in_one_house(self, nyc_chart):
        for name, house in nyc_chart.placements().items():
            assert 1 <= house <= 12, name

    def test_aspects_found(self, nyc_chart):
        assert nyc_chart.aspects
        for aspect in nyc_chart.aspects:
            assert aspect.orb >= 0.0

    def test_to_dict(self, nyc_chart):
        data = nyc_chart.to_dict()
        assert data["input"]["date"] == "1988-01-14"
        assert data["planets"]["Sun"]["sign"] == "Capricorn"
        assert set(data["houses"]["cusps"]) == {str(i) for i in range(1, 13)}
        assert data["metadata"]["ephemeris"] == "moshier"

    def test_deterministic(self, calculator, nyc_event):
        assert calculator.calculate(nyc_event) == calculator.calculate(nyc_event)

    def test_concurrent_calculations_agree(self, calculator, nyc_event):
        expected = calculator.calculate(nyc_event)
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: calculator.calculate(nyc_event), range(16)))
        assert all(result == expected for result in results)

    def test_whole_sign_cusps_on_sign_boundaries(self, calculator):
        event = BirthEvent(1988, 1, 14, 10, 22, 40.7128, -74.006, "America/New_York", "W")
        chart = calculator.calculate(event)
        for cusp in chart.houses.cusps:
            assert cusp % 30.0 == pytest.approx(0.0, abs=1e-9)


class TestErrors:

    def test_polar_placidus(self, calculator):
        event = BirthEvent(1990, 6, 1, 12, 0, 78.2232, 15.6267, "Arctic/Longyearbyen", "P")
        with pytest.raises(HouseCalculationError):
            calculator.calculate(event)

    def test_polar_whole_sign_succeeds(self, calculator):
        event = BirthEvent(1990, 6, 1, 12, 0, 78.2232, 15.6267, "Arctic/Longyearbyen", "W")
        chart = calculator.calculate(event)
        assert len(chart.houses.cusps) == 12

    def test_dst_gap(self, calculator):
        event = BirthEvent(2021, 3, 14, 2, 30, 40.7128, -74.006, "America/New_York")
        with pytest.raises(InvalidCivilTime):
            calculator.calculate(event)

    def test_failing_body_becomes_warning(self):
        calculator = ChartCalculator(FakeBridge(failing={swe.PLUTO}), Settings())
        event = BirthEvent(2000, 1, 1, 12, 0, 0.0, 0.0, "UTC")
        chart = calculator.calculate(event)
        assert "Pluto" not in chart.planets
        assert "Sun" in chart.planets
        assert [w.body for w in chart.warnings] == ["Pluto"]
        assert "fake failure" in chart.warnings[0].reason

    def test_chiron_reported_when_unavailable(self):
        calculator = ChartCalculator(
            FakeBridge(failing={swe.CHIRON}), Settings(include_chiron=True)
        )
        positions, warnings = calculator.calculate_positions(2451545.0)
        assert "Chiron" not in positions
        assert [w.body for w in warnings] == ["Chiron"]


class TestHelpers:

    def test_south_node_mirror(self, nyc_chart):
        north = nyc_chart.planets["North Node"]
        south = south_node_from(north)
        assert south.name == "South Node"
        assert south.latitude == -north.latitude

    def test_current_planets(self, calculator):
        planets = calculator.current_planets(datetime(2024, 4, 8, 18, 0, tzinfo=timezone.utc))
        # Total solar eclipse day: Sun and Moon conjunct in Aries
        assert planets["Sun"].sign == "Aries"
        assert planets["Moon"].sign == "Aries"
        assert abs(planets["Sun"].longitude - planets["Moon"].longitude) < 1.0
