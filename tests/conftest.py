"""Shared fixtures.

Two kinds of ephemeris are available to tests:

- ``bridge`` / ``calculator``: the real Swiss Ephemeris in Moshier mode (no
  data files needed).
- ``FakeBridge``: a deterministic stand-in where every body moves at a fixed
  rate, used where exact, hand-checkable positions matter.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from astro_purpose.config import Settings
from astro_purpose.exceptions import EphemerisError
from astro_purpose.models.birth_event import BirthEvent, Instant
from astro_purpose.models.cycles import MarsPhaseEvent, VspEvent
from astro_purpose.utils.chart_calculator import ChartCalculator
from astro_purpose.utils.ephemeris import EphemerisBridge, EphemerisContext, RawPosition
from astro_purpose.utils.reference_data import ReferenceData

J2000_JD = 2451545.0
J2000 = datetime(2000, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeBridge:
    """Linear-motion ephemeris keyed by Swiss Ephemeris body id.

    ``motions`` maps body id -> (longitude at J2000, degrees per day). Bodies
    not listed sit still at 30° × body id. ET and UT are the same.
    """

    def __init__(self, motions=None, failing=(), node_type="true"):
        self.context = EphemerisContext(ephe_path=None, node_type=node_type, flags=0)
        self.motions = dict(motions or {})
        self.failing = set(failing)
        self.solar_hits = None
        self.lunar_hits = None
        self.search_starts = []

    def get_mode(self):
        return "moshier"

    @property
    def version(self):
        return "fake"

    def calc(self, jd_et, body):
        if body in self.failing:
            raise EphemerisError(f"Failed to calculate body {body}: fake failure")
        lon0, speed = self.motions.get(body, ((30.0 * body) % 360.0, 0.0))
        lon = (lon0 + speed * (jd_et - J2000_JD)) % 360.0
        return RawPosition(longitude=lon, latitude=0.0, distance=1.0, speed=speed)

    def obliquity(self, jd_ut):
        return 23.44

    def houses(self, jd_ut, latitude, longitude, code):
        cusps = tuple(float(30 * i) for i in range(12))
        return cusps, (0.0, 270.0, 0.0, 180.0)

    def civil_to_jd(self, year, month, day, hour, minute, second=0.0):
        moment = datetime(year, month, day, hour, minute, tzinfo=timezone.utc)
        moment += timedelta(seconds=second)
        jd = J2000_JD + (moment - J2000).total_seconds() / 86400.0
        return jd, jd

    def jd_to_civil(self, jd_ut):
        return J2000 + timedelta(days=jd_ut - J2000_JD)

    def ut_to_et(self, jd_ut):
        return jd_ut

    def _next_hit(self, hits, kind):
        if hits is None:
            raise EphemerisError(f"{kind} eclipse search failed: fake has no eclipses")
        hit = hits.pop(0)
        if isinstance(hit, Exception):
            raise hit
        return hit

    def solar_eclipse_before(self, jd_ut):
        self.search_starts.append(jd_ut)
        return self._next_hit(self.solar_hits, "Solar")

    def lunar_eclipse_before(self, jd_ut):
        self.search_starts.append(jd_ut)
        return self._next_hit(self.lunar_hits, "Lunar")


def fake_instant(jd):
    """An Instant for a FakeBridge Julian Day."""
    moment = J2000 + timedelta(days=jd - J2000_JD)
    return Instant(local=moment, utc=moment, jd_et=jd, jd_ut=jd)


# ---------------------------------------------------------------------------
# Real ephemeris (Moshier)
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def context():
    return EphemerisContext.create()


@pytest.fixture(scope="session")
def bridge(context):
    return EphemerisBridge(context)


@pytest.fixture
def calculator(bridge):
    return ChartCalculator(bridge, Settings())


@pytest.fixture
def nyc_event():
    """1988-01-14 10:22 in New York."""
    return BirthEvent(
        year=1988, month=1, day=14, hour=10, minute=22,
        latitude=40.7128, longitude=-74.0060,
        timezone="America/New_York",
    )


@pytest.fixture
def nyc_chart(calculator, nyc_event):
    return calculator.calculate(nyc_event)


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

SAMPLE_VSP_EVENTS = [
    VspEvent(date(1901, 2, 10), 321.5, "Morning Star"),
    VspEvent(date(1901, 11, 29), 247.2, "Evening Star"),
    VspEvent(date(1902, 9, 1), 158.4, "Morning Star"),
    VspEvent(date(1903, 6, 20), 88.9, "Evening Star"),
    VspEvent(date(1904, 4, 5), 15.3, "Morning Star"),
    VspEvent(date(1905, 1, 22), 302.0, "Evening Star"),
    VspEvent(date(1905, 11, 12), 229.1, "Morning Star"),
]

SAMPLE_MARS_EVENTS = [
    MarsPhaseEvent(date(2000, 1, 1), "Leo", "Inception"),
    MarsPhaseEvent(date(2000, 2, 1), "Leo", "Preparation"),
    MarsPhaseEvent(date(2000, 4, 1), "Leo", "Emergence"),
    MarsPhaseEvent(date(2002, 1, 1), "Virgo", "Inception"),
    MarsPhaseEvent(date(2002, 2, 1), "Virgo", "Preparation"),
]


@pytest.fixture(scope="session")
def texts_only():
    """Packaged interpretation texts with empty event tables."""
    return ReferenceData.from_tables()


@pytest.fixture(scope="session")
def sample_reference():
    """Packaged texts with small synthetic event tables."""
    return ReferenceData.from_tables(SAMPLE_VSP_EVENTS, SAMPLE_MARS_EVENTS)


@pytest.fixture
def fake_bridge():
    return FakeBridge()

