"""Tests for Venus Star Point and Mars phase lookups on synthetic tables."""

from datetime import date, datetime, timedelta, timezone

import pytest

from astro_purpose.models.cycles import VspEvent
from astro_purpose.models.results import UnavailableReason
from astro_purpose.utils.cycle_lookup import (
    CycleTable,
    MarsPhaseEngine,
    VenusStarEngine,
    as_utc_date,
    dominant_element,
)


@pytest.fixture
def venus(sample_reference):
    return VenusStarEngine(sample_reference)


@pytest.fixture
def mars(sample_reference):
    return MarsPhaseEngine(sample_reference)


class TestCycleTable:

    def test_sorted_on_construction(self):
        table = CycleTable([
            VspEvent(date(2001, 1, 1), 0.0, "Morning Star"),
            VspEvent(date(2000, 1, 1), 0.0, "Morning Star"),
        ])
        assert table.first_date == date(2000, 1, 1)

    def test_empty_table(self):
        table = CycleTable([])
        assert table.first_date is None
        assert table.find_prenatal(date(2000, 1, 1)) is None
        assert table.find_postnatal(date(2000, 1, 1)) is None

    def test_in_range_inclusive(self, venus):
        events = venus.vsps_in_range(date(1901, 11, 29), date(1903, 6, 20))
        assert [e.date for e in events] == [date(1901, 11, 29), date(1902, 9, 1), date(1903, 6, 20)]

    def test_next_after_skips_same_day(self):
        table = CycleTable([
            VspEvent(date(2000, 1, 1), 0.0, "Morning Star"),
            VspEvent(date(2001, 1, 1), 0.0, "Morning Star"),
        ])
        assert table.next_after(date(2000, 1, 1)).date == date(2001, 1, 1)
        assert table.next_after(date(2001, 1, 1)) is None

    def test_aware_datetime_uses_utc_date(self):
        late_evening = datetime(2000, 1, 1, 22, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert as_utc_date(late_evening) == date(2000, 1, 2)


class TestVenusStarPoint:

    def test_prenatal_vsp(self, venus):
        result = venus.prenatal_vsp(date(1903, 1, 1))
        assert result.available
        vsp = result.value
        assert vsp.event.date == date(1902, 9, 1)
        assert vsp.event.sign == "Virgo"
        assert vsp.days_before_birth == (date(1903, 1, 1) - date(1902, 9, 1)).days
        assert vsp.interpretation.greatest_assets
        assert vsp.interpretation.star_type.startswith("Morning Star")

    def test_before_table_start(self, venus):
        result = venus.prenatal_vsp(date(1900, 6, 1))
        assert not result.available
        assert result.reason is UnavailableReason.NO_DATA_BEFORE_TABLE_START
        assert "1901-02-10" in result.message

    def test_birth_on_vsp_date_returns_previous(self, venus):
        result = venus.prenatal_vsp(date(1902, 9, 1), strictly_before=True)
        assert result.value.event.date == date(1901, 11, 29)

    def test_birth_on_vsp_date_inclusive(self, venus):
        result = venus.prenatal_vsp(date(1902, 9, 1), strictly_before=False)
        assert result.value.event.date == date(1902, 9, 1)
        assert result.value.days_before_birth == 0

    def test_to_dict(self, venus):
        data = venus.prenatal_vsp(date(1903, 1, 1)).to_dict()
        assert data["available"] is True
        assert data["value"]["sign"] == "Virgo"


class TestVenusStar:

    def test_five_points(self, venus):
        star = venus.venus_star(date(1903, 1, 1)).value
        assert star.points["top"].date == date(1902, 9, 1)
        assert star.points["left_arm"].date == date(1901, 11, 29)
        assert star.points["right_arm"].date == date(1901, 2, 10)
        assert star.points["left_leg"].date == date(1903, 6, 20)
        assert star.points["right_leg"].date == date(1904, 4, 5)
        assert star.sign_pattern == ("Aquarius", "Sagittarius", "Virgo", "Gemini", "Aries")

    def test_birth_on_vsp_date_excludes_that_point(self, venus):
        birth = date(1902, 9, 1)
        star = venus.venus_star(birth).value
        assert star.points["top"].date == date(1901, 11, 29)
        assert star.points["left_leg"] == venus.table[venus.table.find_postnatal(birth)]
        assert star.points["left_leg"].date == date(1903, 6, 20)
        assert star.points["right_leg"].date == date(1904, 4, 5)
        assert star.sign_pattern == ("Aquarius", "Sagittarius", "Gemini", "Aries")

    def test_legs_missing_after_table_end(self, venus):
        star = venus.venus_star(date(1905, 12, 1)).value
        assert star.points["top"].date == date(1905, 11, 12)
        assert star.points["left_leg"] is None
        assert star.points["right_leg"] is None

    def test_missing_arms_near_table_start(self, venus):
        star = venus.venus_star(date(1901, 6, 1)).value
        assert star.points["right_arm"] is None
        assert star.points["left_arm"] is None
        assert len(star.sign_pattern) == 3

    def test_dominant_element_within_pattern(self, venus):
        star = venus.venus_star(date(1903, 1, 1)).value
        tally = star.dominant_element
        assert tally.count <= len(star.sign_pattern)
        assert tally.count == max(tally.counts.values())

    def test_upcoming(self, venus):
        result = venus.next_vsp(date(1905, 1, 1))
        assert result.value.event.date == date(1905, 1, 22)
        assert result.value.days_until == 21

    def test_upcoming_after_table_end(self, venus):
        result = venus.next_vsp(date(1906, 1, 1))
        assert result.reason is UnavailableReason.NO_DATA_AFTER_TABLE_END


class TestDominantElement:

    def test_clear_majority(self):
        tally = dominant_element(["Aries", "Leo", "Taurus", "Sagittarius"])
        assert tally.element == "fire"
        assert tally.count == 3
        assert tally.total == 4

    def test_tie_goes_to_first_seen(self):
        assert dominant_element(["Taurus", "Gemini", "Libra", "Virgo"]).element == "earth"
        assert dominant_element(["Gemini", "Taurus", "Virgo", "Libra"]).element == "air"

    def test_empty(self):
        tally = dominant_element([])
        assert tally.element is None
        assert tally.count == 0


class TestMarsPhase:

    def test_prenatal_phase(self, mars):
        result = mars.prenatal_phase(date(2000, 3, 1))
        phase = result.value
        assert phase.event.phase == "Preparation"
        assert phase.event.cycle == "Leo"
        assert phase.interpretation.description
        assert phase.interpretation.keywords

    def test_before_table_start(self, mars):
        result = mars.prenatal_phase(date(1999, 1, 1))
        assert result.reason is UnavailableReason.NO_DATA_BEFORE_TABLE_START

    def test_cycle_context(self, mars):
        context = mars.cycle_context(date(2000, 3, 1)).value
        assert context.cycle == "Leo"
        assert [p.event.phase for p in context.phases] == ["Inception", "Preparation", "Emergence"]
        assert [p.is_current_phase for p in context.phases] == [False, True, False]
        assert [p.is_prenatal for p in context.phases] == [True, True, False]
        # 2000 is a leap year: Jan 31 + Feb 29 days
        assert context.days_into_cycle == 60
        # Cycle runs until the Virgo cycle opens on 2002-01-01
        assert context.total_cycle_days == 731
        assert context.cycle_progress == pytest.approx(100.0 * 60 / 731)

    def test_progress_clamped_in_last_cycle(self, mars):
        # Last cycle has no successor; birth after its final phase
        context = mars.cycle_context(date(2003, 1, 1)).value
        assert context.cycle == "Virgo"
        assert 0.0 <= context.cycle_progress <= 100.0
        assert context.cycle_progress == 100.0

    def test_next_phase(self, mars):
        result = mars.next_phase(date(2001, 6, 1))
        assert result.value.event.phase == "Inception"
        assert result.value.event.cycle == "Virgo"

    def test_phase_names(self):
        names = MarsPhaseEngine.phase_names()
        assert names[0] == "Inception"
        assert names[-1] == "Transition"
        assert len(names) == 13
