"""Time-indexed searches: progressions, prenatal eclipses, planetary phases, transits."""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, timezone
from typing import Optional, Union

import swisseph as swe

from ..config import Settings
from ..constants import DAYS_PER_YEAR, LUNAR_PHASES, SYNODIC_PHASES
from ..exceptions import EphemerisError
from ..models.birth_event import Coordinates, Instant
from ..models.chart import BodyPosition, ChartResult
from ..models.results import Available, Result, Unavailable, UnavailableReason
from ..models.temporal import (
    EclipseEvent,
    LunarPhase,
    PlanetaryPhase,
    ProgressedChart,
    TransitAspect,
    TransitResult,
)
from .aspects import identify_aspect, is_applying
from .chart_calculator import ChartCalculator
from .ephemeris import EclipseHit
from .position_utils import angular_separation, normalize_longitude
from .reference_data import ReferenceData

logger = logging.getLogger(__name__)

# Heuristic eclipse window. The Moon gains up to ~15° a day on the Sun, so a
# daily sample always lands within 7.5° of the syzygy.
SYZYGY_TOLERANCE = 7.5
# Sun within this distance of a lunar node at syzygy (solar ecliptic limit)
NODE_LIMIT = 18.0

PHASE_PAIRS: list[tuple[str, str, str]] = [
    ("mars_sun", "Mars", "Sun"),
    ("saturn_jupiter", "Saturn", "Jupiter"),
    ("venus_mars", "Venus", "Mars"),
    ("mercury_sun", "Mercury", "Sun"),
]


def classify_solar(flags: int, magnitude: Optional[float]) -> str:
    """Total, annular or partial, from the library's type bits or the magnitude."""
    if flags & (swe.ECL_TOTAL | swe.ECL_ANNULAR_TOTAL):
        return "total"
    if flags & swe.ECL_ANNULAR:
        return "annular"
    if flags & swe.ECL_PARTIAL:
        return "partial"
    if magnitude is not None and magnitude > 0.99:
        return "total"
    if magnitude is not None and magnitude > 0.9:
        return "annular"
    return "partial"


def classify_lunar(flags: int, magnitude: Optional[float]) -> str:
    """Total, partial or penumbral, from the type bits or the umbral magnitude."""
    if flags & swe.ECL_TOTAL:
        return "total"
    if flags & swe.ECL_PARTIAL:
        return "partial"
    if flags & swe.ECL_PENUMBRAL:
        return "penumbral"
    if magnitude is not None and magnitude > 1.0:
        return "total"
    if magnitude is not None and magnitude > 0:
        return "partial"
    return "penumbral"


def lunar_phase(sun: BodyPosition, moon: BodyPosition, texts=None) -> LunarPhase:
    """Eight-fold lunar phase from the Moon's elongation ahead of the Sun."""
    angle = normalize_longitude(moon.longitude - sun.longitude)
    name = LUNAR_PHASES[int(angle // 45) % 8]
    descriptions = texts.get("lunar_phases", {}) if texts else {}
    return LunarPhase(
        name=name,
        angle=angle,
        cycle_percent=angle / 360.0 * 100.0,
        waxing=angle < 180.0,
        illumination=(1.0 - math.cos(math.radians(angle))) / 2.0 * 100.0,
        description=descriptions.get(name, ""),
    )


def transit_summary(aspects: list[TransitAspect]) -> str:
    if not aspects:
        return "No major transits currently active."

    exact = [a for a in aspects if a.exact]
    tight = [a for a in aspects if a.orb < 2.0]

    def describe(a: TransitAspect) -> str:
        return f"{a.transit} {a.aspect} natal {a.natal}"

    summary = ""
    if exact:
        summary += f"Exact transits: {', '.join(describe(a) for a in exact)}. "
    if tight and len(tight) != len(exact):
        summary += f"Close transits: {', '.join(describe(a) for a in tight[:5])}."

    return summary.strip() or "Several transits active with moderate orbs."


class TemporalSearchEngine:
    """Searches that walk the ephemeris forwards or backwards in time.

    Usage:
        engine = TemporalSearchEngine(calculator, reference)
        eclipses = engine.prenatal_eclipses(chart.instant)
        progressed = engine.progressions(chart.instant, date(2025, 1, 1))
    """

    def __init__(
        self,
        calculator: ChartCalculator,
        reference: ReferenceData,
        settings: Optional[Settings] = None,
    ):
        self.calculator = calculator
        self.bridge = calculator.bridge
        self.reference = reference
        self.settings = settings or calculator.settings

    # ------------------------------------------------------------------
    # Secondary progressions
    # ------------------------------------------------------------------

    def progressions(
        self,
        birth: Instant,
        target: Union[date, datetime],
        coordinates: Optional[Coordinates] = None,
        house_system: str = "P",
    ) -> ProgressedChart:
        """Day-for-a-year progressed chart for a target date.

        One day after birth stands for one year of life, so the progressed
        Julian Day is birth + (elapsed days / 365.25). Houses are included
        only when coordinates are given.
        """
        if not isinstance(target, datetime):
            target = datetime(target.year, target.month, target.day, tzinfo=timezone.utc)
        target_instant = self.calculator.time_resolver.resolve_utc(target)

        years = (target_instant.jd_ut - birth.jd_ut) / DAYS_PER_YEAR
        progressed_ut = birth.jd_ut + years
        progressed_et = birth.jd_et + years

        planets, _ = self.calculator.calculate_positions(progressed_et)
        houses = None
        if coordinates is not None:
            houses = self.calculator.calculate_houses(
                progressed_ut, coordinates.latitude, coordinates.longitude, house_system
            )

        phase = None
        if "Sun" in planets and "Moon" in planets:
            phase = lunar_phase(planets["Sun"], planets["Moon"], self.reference.phase_texts)

        return ProgressedChart(
            target=target_instant.utc,
            years_elapsed=years,
            progressed_jd=progressed_ut,
            progressed_date=self.bridge.jd_to_civil(progressed_ut),
            planets=planets,
            houses=houses,
            lunar_phase=phase,
        )

    # ------------------------------------------------------------------
    # Prenatal eclipses
    # ------------------------------------------------------------------

    def prenatal_eclipses(self, birth: Instant) -> dict[str, Result]:
        return {
            "solar": self.prenatal_eclipse(birth, "solar"),
            "lunar": self.prenatal_eclipse(birth, "lunar"),
        }

    def prenatal_eclipse(self, birth: Instant, kind: str) -> Result:
        """Most recent solar or lunar eclipse before birth.

        The library's backward search is tried up to eclipse_max_attempts
        times, stepping back eclipse_step_days after each failure. If that
        finds nothing a day-by-day scan looks for a syzygy near a lunar node;
        its result is flagged approximate.
        """
        if kind not in ("solar", "lunar"):
            raise ValueError(f"Unknown eclipse kind: {kind!r}. Expected 'solar' or 'lunar'")

        search = (
            self.bridge.solar_eclipse_before if kind == "solar"
            else self.bridge.lunar_eclipse_before
        )

        jd = birth.jd_ut
        for attempt in range(1, self.settings.eclipse_max_attempts + 1):
            try:
                hit = search(jd)
            except EphemerisError as exc:
                logger.warning("%s eclipse search attempt %d failed: %s", kind, attempt, exc)
                jd -= self.settings.eclipse_step_days
                continue
            if hit.jd_ut < birth.jd_ut:
                return Available(self._exact_eclipse(kind, hit, birth))
            # resume just before the rejected hit
            jd = min(jd, hit.jd_ut) - 1

        logger.warning("Exact %s eclipse search exhausted; falling back to daily scan", kind)
        try:
            found = self._scan_for_eclipse(kind, birth)
        except EphemerisError as exc:
            logger.warning("Heuristic %s eclipse scan failed: %s", kind, exc)
            found = None

        if found is None:
            return Unavailable(
                UnavailableReason.ECLIPSE_SEARCH_EXHAUSTED,
                f"No {kind} eclipse found before birth",
            )
        return Available(found)

    def _sun_longitude(self, jd_ut: float) -> float:
        return self.bridge.calc(self.bridge.ut_to_et(jd_ut), swe.SUN).longitude

    def _exact_eclipse(self, kind: str, hit: EclipseHit, birth: Instant) -> EclipseEvent:
        classify = classify_solar if kind == "solar" else classify_lunar
        moment = self.bridge.jd_to_civil(hit.jd_ut)
        return EclipseEvent(
            kind=kind,
            classification=classify(hit.flags, hit.magnitude),
            jd_ut=hit.jd_ut,
            moment=moment,
            days_before_birth=int(birth.jd_ut - hit.jd_ut),
            sun_longitude=self._sun_longitude(hit.jd_ut),
            magnitude=hit.magnitude,
            approximate=False,
            method="ephemeris",
        )

    def _scan_for_eclipse(self, kind: str, birth: Instant) -> Optional[EclipseEvent]:
        target = 0.0 if kind == "solar" else 180.0
        node_body = self.bridge.context.node_body

        def syzygy_offset(jd_ut: float) -> tuple[float, float, float]:
            jd_et = self.bridge.ut_to_et(jd_ut)
            sun = self.bridge.calc(jd_et, swe.SUN).longitude
            moon = self.bridge.calc(jd_et, swe.MOON).longitude
            node = self.bridge.calc(jd_et, node_body).longitude
            offset = abs(angular_separation(sun, moon) - target)
            node_distance = min(angular_separation(sun, node), angular_separation(sun, node + 180.0))
            return offset, node_distance, sun

        for day in range(1, self.settings.eclipse_fallback_days + 1):
            jd_ut = birth.jd_ut - day
            offset, node_distance, _ = syzygy_offset(jd_ut)
            if offset > SYZYGY_TOLERANCE or node_distance > NODE_LIMIT:
                continue

            # Settle on the closest day around the hit, staying before birth.
            candidates = [jd_ut - 1, jd_ut]
            if jd_ut + 1 < birth.jd_ut:
                candidates.append(jd_ut + 1)
            best = min(candidates, key=lambda jd: syzygy_offset(jd)[0])
            _, _, sun = syzygy_offset(best)

            return EclipseEvent(
                kind=kind,
                classification="approximate",
                jd_ut=best,
                moment=self.bridge.jd_to_civil(best),
                days_before_birth=int(birth.jd_ut - best),
                sun_longitude=sun,
                magnitude=None,
                approximate=True,
                method="heuristic",
            )
        return None

    # ------------------------------------------------------------------
    # Planetary phases
    # ------------------------------------------------------------------

    def planetary_phases(self, planets: dict[str, BodyPosition]) -> dict[str, PlanetaryPhase]:
        """Synodic phase of each tracked pair present in the positions."""
        texts = self.reference.phase_texts.get("planetary_phases", {})
        star_texts = self.reference.phase_texts.get("mercury_star", {})
        phases = {}

        for key, first, second in PHASE_PAIRS:
            if first not in planets or second not in planets:
                continue
            angle = normalize_longitude(planets[first].longitude - planets[second].longitude)
            index = int(angle // 45) % 8
            descriptions = texts.get(key, ())
            description = descriptions[index] if index < len(descriptions) else ""

            morning_star = None
            if key == "mercury_sun":
                # West of the Sun: Mercury rises before it
                morning_star = angle > 180.0
                star = star_texts.get("morning" if morning_star else "evening")
                if star:
                    description = f"{description}. {star}" if description else star

            phases[key] = PlanetaryPhase(
                pair=key,
                first=first,
                second=second,
                angle=angle,
                phase=SYNODIC_PHASES[index],
                description=description,
                morning_star=morning_star,
            )
        return phases

    # ------------------------------------------------------------------
    # Transits
    # ------------------------------------------------------------------

    def transits(
        self,
        natal: ChartResult,
        at: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> TransitResult:
        """Aspects from current (or given) positions to the natal chart, tightest first."""
        resolver = self.calculator.time_resolver
        instant = resolver.resolve_utc(at) if at else resolver.now()
        positions, _ = self.calculator.calculate_positions(instant.jd_et)
        limit = self.settings.transit_limit if limit is None else limit

        transit_meanings = self.reference.phase_texts.get("transit_meanings", {})
        natal_meanings = self.reference.phase_texts.get("natal_meanings", {})

        aspects = []
        for transit in positions.values():
            for body in natal.planets.values():
                separation = angular_separation(transit.longitude, body.longitude)
                found = identify_aspect(separation, self.settings.transit_orbs)
                if found is None:
                    continue
                name, exact_angle, orb = found
                aspects.append(TransitAspect(
                    transit=transit.name,
                    natal=body.name,
                    aspect=name,
                    exact_angle=exact_angle,
                    orb=orb,
                    applying=is_applying(
                        transit.longitude, transit.speed, body.longitude, 0.0, exact_angle
                    ),
                    transit_retrograde=transit.retrograde,
                    significance=(
                        f"{transit_meanings.get(transit.name, transit.name)} affecting "
                        f"{natal_meanings.get(body.name, body.name)} ({name})"
                    ),
                ))

        aspects.sort(key=lambda a: a.orb)
        aspects = aspects[:limit]
        return TransitResult(
            moment=instant.utc,
            positions=positions,
            aspects=tuple(aspects),
            summary=transit_summary(aspects),
        )
