"""Venus Star Point and Mars phase lookups against the dated event tables."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from datetime import date, datetime, timezone
from typing import Generic, Optional, Sequence, TypeVar, Union

from ..constants import ELEMENTS, MARS_PHASE_NAMES
from ..models.cycles import (
    CyclePhase,
    ElementTally,
    MarsCycleContext,
    MarsPhaseEvent,
    MarsPhaseInterpretation,
    MarsPhaseResult,
    UpcomingEvent,
    VenusStar,
    VspEvent,
    VspInterpretation,
    VspResult,
)
from ..models.results import Available, Result, Unavailable, UnavailableReason
from .position_utils import element_for_sign
from .reference_data import ReferenceData

E = TypeVar("E", VspEvent, MarsPhaseEvent)

DateLike = Union[date, datetime]


def as_utc_date(value: DateLike) -> date:
    """Calendar date of a moment in UTC (naive datetimes are taken as UTC)."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


class CycleTable(Generic[E]):
    """Ascending, date-keyed event table with binary-search lookups."""

    def __init__(self, events: Sequence[E]):
        self.events: tuple[E, ...] = tuple(sorted(events, key=lambda e: e.date))
        self._dates = [e.date for e in self.events]

    def __len__(self) -> int:
        return len(self.events)

    def __getitem__(self, index: int) -> E:
        return self.events[index]

    @property
    def first_date(self) -> Optional[date]:
        return self._dates[0] if self._dates else None

    def find_prenatal(self, target: DateLike, strictly_before: bool = True) -> Optional[int]:
        """Index of the last event before the target date (or on it, when not strict)."""
        day = as_utc_date(target)
        if strictly_before:
            idx = bisect_left(self._dates, day)
        else:
            idx = bisect_right(self._dates, day)
        return idx - 1 if idx > 0 else None

    def find_postnatal(self, target: DateLike) -> Optional[int]:
        """Index of the first event strictly after the target date."""
        idx = bisect_right(self._dates, as_utc_date(target))
        return idx if idx < len(self._dates) else None

    def in_range(self, start: DateLike, end: DateLike) -> list[E]:
        """Events dated start..end inclusive."""
        lo = bisect_left(self._dates, as_utc_date(start))
        hi = bisect_right(self._dates, as_utc_date(end))
        return list(self.events[lo:hi])

    def get(self, index: int) -> Optional[E]:
        return self.events[index] if 0 <= index < len(self.events) else None

    def next_after(self, moment: DateLike) -> Optional[E]:
        """First event dated after the moment's UTC date, or None past the table end."""
        idx = self.find_postnatal(moment)
        return None if idx is None else self.events[idx]


def _before_start(table: CycleTable, label: str, target: DateLike) -> Unavailable:
    first = table.first_date
    coverage = f"table starts {first.isoformat()}" if first else "table is empty"
    return Unavailable(
        UnavailableReason.NO_DATA_BEFORE_TABLE_START,
        f"No {label} before {as_utc_date(target).isoformat()} ({coverage})",
    )


def _upcoming(table: CycleTable, label: str, now: Optional[DateLike]) -> Result:
    today = as_utc_date(now or datetime.now(timezone.utc))
    event = table.next_after(today)
    if event is None:
        return Unavailable(
            UnavailableReason.NO_DATA_AFTER_TABLE_END,
            f"No {label} after {today.isoformat()} in the table",
        )
    return Available(UpcomingEvent(event=event, days_until=(event.date - today).days))


def dominant_element(signs: Sequence[str]) -> ElementTally:
    """Most frequent element among signs; ties go to the element met first."""
    counts = {element: 0 for element in ELEMENTS}
    first_seen: dict[str, int] = {}
    for position, sign in enumerate(signs):
        element = element_for_sign(sign)
        counts[element] += 1
        first_seen.setdefault(element, position)

    if not first_seen:
        return ElementTally(element=None, count=0, total=0, counts=counts)

    best = max(first_seen, key=lambda el: (counts[el], -first_seen[el]))
    return ElementTally(element=best, count=counts[best], total=len(signs), counts=counts)


# ------------------------------------------------------------------
# Venus Star Point
# ------------------------------------------------------------------

class VenusStarEngine:
    """Venus Star Point lookups.

    Usage:
        engine = VenusStarEngine(reference)
        result = engine.prenatal_vsp(instant.utc)
        if result.available:
            print(result.value.event.sign)
    """

    def __init__(self, reference: ReferenceData):
        self.reference = reference
        self.table: CycleTable[VspEvent] = CycleTable(reference.vsp_events)

    def interpret(self, event: VspEvent) -> VspInterpretation:
        sign_text = self.reference.vsp_interpretations.get("signs", {}).get(event.sign, {})
        star_text = self.reference.vsp_interpretations.get("star_types", {}).get(event.star_type, "")
        return VspInterpretation(
            greatest_assets=sign_text.get("greatest_assets", ""),
            greatest_liabilities=sign_text.get("greatest_liabilities", ""),
            venus_gift=sign_text.get("venus_gift", ""),
            star_type=f"{event.star_type}: {star_text}" if star_text else event.star_type,
        )

    def prenatal_vsp(self, birth: DateLike, strictly_before: bool = True) -> Result:
        """The last Venus Star Point before birth, with its interpretation."""
        idx = self.table.find_prenatal(birth, strictly_before)
        if idx is None:
            return _before_start(self.table, "Venus Star Point", birth)
        event = self.table[idx]
        return Available(VspResult(
            event=event,
            interpretation=self.interpret(event),
            days_before_birth=(as_utc_date(birth) - event.date).days,
        ))

    def venus_star(self, birth: DateLike) -> Result:
        """The five-pointed Venus star around a birth.

        The top is the prenatal point and the arms the two points before it.
        The legs are the first two points dated after the birth day, so a
        point falling on the birth day itself belongs to neither side.
        """
        idx = self.table.find_prenatal(birth, strictly_before=True)
        if idx is None:
            return _before_start(self.table, "Venus Star Point", birth)
        post = self.table.find_postnatal(birth)
        if post is None:
            post = len(self.table)

        points = {
            "right_arm": self.table.get(idx - 2),
            "left_arm": self.table.get(idx - 1),
            "top": self.table[idx],
            "left_leg": self.table.get(post),
            "right_leg": self.table.get(post + 1),
        }
        # dict order above is chronological
        sign_pattern = tuple(event.sign for event in points.values() if event is not None)

        return Available(VenusStar(
            points=points,
            sign_pattern=sign_pattern,
            dominant_element=dominant_element(sign_pattern),
        ))

    def vsps_in_range(self, start: DateLike, end: DateLike) -> list[VspEvent]:
        return self.table.in_range(start, end)

    def next_vsp(self, now: Optional[DateLike] = None) -> Result:
        return _upcoming(self.table, "Venus Star Point", now)


# ------------------------------------------------------------------
# Mars phase
# ------------------------------------------------------------------

class MarsPhaseEngine:
    """Mars phase lookups and cycle reconstruction."""

    def __init__(self, reference: ReferenceData):
        self.reference = reference
        self.table: CycleTable[MarsPhaseEvent] = CycleTable(reference.mars_events)

    @staticmethod
    def phase_names() -> list[str]:
        return list(MARS_PHASE_NAMES)

    def interpret(self, event: MarsPhaseEvent) -> MarsPhaseInterpretation:
        texts = self.reference.mars_interpretations
        phase_text = texts.get("phases", {}).get(event.phase, {})
        return MarsPhaseInterpretation(
            description=phase_text.get("description", ""),
            keywords=tuple(phase_text.get("keywords", ())),
            cycle_influence=texts.get("cycles", {}).get(event.cycle, ""),
        )

    def _result(self, idx: int, birth: DateLike) -> MarsPhaseResult:
        event = self.table[idx]
        return MarsPhaseResult(
            event=event,
            interpretation=self.interpret(event),
            days_before_birth=(as_utc_date(birth) - event.date).days,
        )

    def prenatal_phase(self, birth: DateLike, strictly_before: bool = True) -> Result:
        """The Mars phase in force at birth."""
        idx = self.table.find_prenatal(birth, strictly_before)
        if idx is None:
            return _before_start(self.table, "Mars phase", birth)
        return Available(self._result(idx, birth))

    def cycle_context(self, birth: DateLike) -> Result:
        """Reconstruct the Mars cycle holding the birth and place the birth in it."""
        idx = self.table.find_prenatal(birth, strictly_before=True)
        if idx is None:
            return _before_start(self.table, "Mars phase", birth)

        birth_day = as_utc_date(birth)
        cycle = self.table[idx].cycle

        start = idx
        while start > 0 and self.table[start - 1].cycle == cycle:
            start -= 1
        end = idx
        while end + 1 < len(self.table) and self.table[end + 1].cycle == cycle:
            end += 1

        phases = tuple(
            CyclePhase(
                event=self.table[i],
                is_prenatal=self.table[i].date < birth_day,
                is_current_phase=i == idx,
            )
            for i in range(start, end + 1)
        )

        cycle_start = self.table[start].date
        # The cycle runs until the next cycle opens; fall back to its last phase.
        following = self.table.get(end + 1)
        cycle_end = following.date if following else self.table[end].date

        total_days = (cycle_end - cycle_start).days
        days_into = (birth_day - cycle_start).days
        progress = 100.0 * days_into / total_days if total_days > 0 else 0.0
        progress = min(100.0, max(0.0, progress))

        return Available(MarsCycleContext(
            cycle=cycle,
            current=self._result(idx, birth),
            phases=phases,
            days_into_cycle=days_into,
            total_cycle_days=total_days,
            cycle_progress=progress,
        ))

    def next_phase(self, now: Optional[DateLike] = None) -> Result:
        return _upcoming(self.table, "Mars phase", now)
