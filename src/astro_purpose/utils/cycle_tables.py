"""Derives the Venus Star Point and Mars phase event tables from the ephemeris.

Both tables are sequences of dated events found by sampling an elongation
angle at a fixed step and refining each crossing by bisection.

Venus Star Points are the Venus–Sun conjunctions. An inferior conjunction
(Venus retrograde) is a Morning Star point: Venus reappears before sunrise.
A superior conjunction is an Evening Star point.

Mars phases follow the Sun−Mars elongation, which grows steadily from 0° at
the conjunction to 360° at the next one because the Sun always outpaces Mars.
Each phase begins at a fixed elongation (see MARS_PHASE_BOUNDARIES); a cycle
is named after Mars' sign at the conjunction that opens it.
"""

from __future__ import annotations

import json
import logging
import math
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Callable, Iterable, Optional

import swisseph as swe

from ..constants import EVENING_STAR, MARS_PHASE_BOUNDARIES, MORNING_STAR
from ..models.cycles import MarsPhaseEvent, VspEvent
from .ephemeris import EphemerisBridge
from .position_utils import normalize_longitude, sign_for_longitude, signed_difference

logger = logging.getLogger(__name__)

VSP_TABLE_FILE = "vsp-dates.json"
MARS_TABLE_FILE = "mars-phase-dates.json"

SAMPLE_STEP_DAYS = 2.0
TOLERANCE_DAYS = 1e-4
# Far enough back to always contain the conjunction that opens the first cycle
MARS_PREROLL_DAYS = 800.0


def _bisect(fn: Callable[[float], float], lo: float, hi: float) -> float:
    """Root of fn between lo and hi, given fn(lo) < 0 <= fn(hi) or the reverse."""
    f_lo = fn(lo)
    while hi - lo > TOLERANCE_DAYS:
        mid = (lo + hi) / 2.0
        f_mid = fn(mid)
        if (f_mid < 0) == (f_lo < 0):
            lo, f_lo = mid, f_mid
        else:
            hi = mid
    return (lo + hi) / 2.0


def _start_jd(bridge: EphemerisBridge, day: date) -> float:
    jd_et, _ = bridge.civil_to_jd(day.year, day.month, day.day, 0, 0, 0.0)
    return jd_et


def _et_to_date(bridge: EphemerisBridge, jd_et: float) -> date:
    delta_t = bridge.ut_to_et(jd_et) - jd_et
    return bridge.jd_to_civil(jd_et - delta_t).date()


# ------------------------------------------------------------------
# Venus Star Points
# ------------------------------------------------------------------

def build_vsp_table(
    bridge: EphemerisBridge,
    start: date,
    end: date,
    step: float = SAMPLE_STEP_DAYS,
) -> list[VspEvent]:
    """Every Venus–Sun conjunction between two dates, oldest first."""

    def elongation(jd: float) -> float:
        sun = bridge.calc(jd, swe.SUN)
        venus = bridge.calc(jd, swe.VENUS)
        return signed_difference(venus.longitude, sun.longitude)

    events: list[VspEvent] = []
    jd = _start_jd(bridge, start)
    end_jd = _start_jd(bridge, end)
    prev = elongation(jd)

    while jd < end_jd:
        next_jd = min(jd + step, end_jd)
        cur = elongation(next_jd)
        # Venus never strays more than ~47° from the Sun, so a sign change
        # with both values small is a conjunction, not a wrap at ±180°.
        if (prev < 0) != (cur < 0) and abs(prev) < 90 and abs(cur) < 90:
            root = _bisect(elongation, jd, next_jd)
            venus = bridge.calc(root, swe.VENUS)
            events.append(VspEvent(
                date=_et_to_date(bridge, root),
                longitude=normalize_longitude(venus.longitude),
                star_type=MORNING_STAR if venus.speed < 0 else EVENING_STAR,
            ))
        jd, prev = next_jd, cur

    return events


# ------------------------------------------------------------------
# Mars phases
# ------------------------------------------------------------------

def build_mars_phase_table(
    bridge: EphemerisBridge,
    start: date,
    end: date,
    step: float = SAMPLE_STEP_DAYS,
) -> list[MarsPhaseEvent]:
    """Every Mars phase boundary between two dates, oldest first.

    Events before the first conjunction in the scanned range carry no cycle
    name, so the scan starts early and discards them.
    """

    def cycle_angle(jd: float) -> float:
        sun = bridge.calc(jd, swe.SUN)
        mars = bridge.calc(jd, swe.MARS)
        return normalize_longitude(sun.longitude - mars.longitude)

    start_jd = _start_jd(bridge, start)
    end_jd = _start_jd(bridge, end)
    jd = start_jd - MARS_PREROLL_DAYS
    prev = cycle_angle(jd)
    unwrapped = prev

    events: list[MarsPhaseEvent] = []
    cycle: Optional[str] = None

    while jd < end_jd:
        next_jd = min(jd + step, end_jd)
        cur = cycle_angle(next_jd)
        next_unwrapped = unwrapped + normalize_longitude(cur - prev)

        for phase, boundary in MARS_PHASE_BOUNDARIES:
            crossed = (
                math.floor((next_unwrapped - boundary) / 360.0)
                > math.floor((unwrapped - boundary) / 360.0)
            )
            if not crossed:
                continue
            root = _bisect(
                lambda t, b=boundary: signed_difference(cycle_angle(t), b),
                jd,
                next_jd,
            )
            mars = bridge.calc(root, swe.MARS)
            if boundary == 0.0:
                cycle = sign_for_longitude(mars.longitude)
            if cycle is None or root < start_jd:
                continue
            events.append(MarsPhaseEvent(
                date=_et_to_date(bridge, root),
                cycle=cycle,
                phase=phase,
                longitude=normalize_longitude(mars.longitude),
            ))

        jd, prev, unwrapped = next_jd, cur, next_unwrapped

    return events


# ------------------------------------------------------------------
# Persistence
# ------------------------------------------------------------------

def write_tables(
    directory: Path,
    vsp_events: Iterable[VspEvent],
    mars_events: Iterable[MarsPhaseEvent],
) -> tuple[Path, Path]:
    """Write both tables as JSON files in directory (created if needed)."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    generated = datetime.now(timezone.utc).isoformat(timespec="seconds")

    vsp_path = directory / VSP_TABLE_FILE
    with open(vsp_path, "w") as f:
        json.dump(
            {"generated": generated, "events": [e.to_dict() for e in vsp_events]},
            f,
            indent=2,
        )

    mars_path = directory / MARS_TABLE_FILE
    with open(mars_path, "w") as f:
        json.dump(
            {"generated": generated, "events": [e.to_dict() for e in mars_events]},
            f,
            indent=2,
        )

    logger.info("Wrote cycle tables to %s", directory)
    return vsp_path, mars_path
