"""Unit tests for aspect detection."""

import pytest

from astro_purpose.models.chart import BodyPosition
from astro_purpose.utils.aspects import (
    NATAL_ORBS,
    TRANSIT_ORBS,
    aspect_between,
    find_aspects,
    identify_aspect,
    is_applying,
)


def body(name, lon, speed=0.0):
    return BodyPosition.create(name, lon, speed=speed)


class TestIdentifyAspect:

    def test_exact_trine(self):
        assert identify_aspect(120.0) == ("trine", 120.0, 0.0)

    def test_within_orb(self):
        name, exact, orb = identify_aspect(95.5)
        assert name == "square"
        assert exact == 90.0
        assert orb == pytest.approx(5.5)

    def test_outside_every_orb(self):
        assert identify_aspect(105.0) is None

    def test_transit_orbs_are_tighter(self):
        assert identify_aspect(95.5, NATAL_ORBS)[0] == "square"
        assert identify_aspect(96.5, TRANSIT_ORBS) is None

    def test_minor_aspects(self):
        assert identify_aspect(151.0)[0] == "quincunx"
        assert identify_aspect(31.0)[0] == "semisextile"
        assert identify_aspect(44.0)[0] == "semisquare"
        assert identify_aspect(136.0)[0] == "sesquiquadrate"

    def test_missing_orb_skips_aspect(self):
        assert identify_aspect(120.0, {"conjunction": 8.0}) is None


class TestApplying:

    def test_faster_body_closing_in(self):
        # Moon at 10° moving toward Sun at 15°
        assert is_applying(10.0, 13.0, 15.0, 1.0, 0.0)

    def test_faster_body_moving_away(self):
        assert not is_applying(20.0, 13.0, 15.0, 1.0, 0.0)

    def test_static_bodies_are_not_applying(self):
        assert not is_applying(10.0, 0.0, 100.0, 0.0, 90.0)


class TestFindAspects:

    def test_pairs_reported_once(self):
        aspects = find_aspects([body("Sun", 0.0), body("Moon", 120.0), body("Mars", 240.0)])
        assert len(aspects) == 3
        assert {a.aspect for a in aspects} == {"trine"}

    @pytest.mark.parametrize("lon_a,lon_b", [(10.0, 101.0), (355.0, 62.0), (200.0, 18.0)])
    def test_detection_is_symmetric(self, lon_a, lon_b):
        ab = aspect_between(body("A", lon_a, 1.0), body("B", lon_b, 0.5))
        ba = aspect_between(body("B", lon_b, 0.5), body("A", lon_a, 1.0))
        assert (ab is None) == (ba is None)
        if ab is not None:
            assert ab.aspect == ba.aspect
            assert ab.orb == pytest.approx(ba.orb)
            assert ab.applying == ba.applying

    def test_aspect_involves(self):
        aspect = aspect_between(body("Sun", 0.0), body("Moon", 90.0))
        assert aspect.involves("Sun")
        assert aspect.involves("Moon")
        assert not aspect.involves("Mars")
        assert aspect.to_dict()["body1"] == "Sun"
