"""Natal chart calculation: bodies, houses, angles and aspects."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..config import Settings
from ..constants import CHIRON, CHIRON_ID, NORTH_NODE, PLANET_IDS, PLANET_NAMES, SOUTH_NODE
from ..exceptions import EphemerisError
from ..models.birth_event import BirthEvent, Coordinates, Instant
from ..models.chart import BodyPosition, ChartResult, HouseCusps, PartialBodyFailure
from .aspects import find_aspects
from .ephemeris import EphemerisBridge, house_system_code, house_system_name
from .position_utils import normalize_longitude
from .time_resolver import TimeResolver

logger = logging.getLogger(__name__)


class ChartCalculator:
    """Calculates charts through an EphemerisBridge.

    Usage:
        calculator = ChartCalculator(bridge, settings)
        chart = calculator.calculate(birth_event)
    """

    def __init__(self, bridge: EphemerisBridge, settings: Optional[Settings] = None):
        self.bridge = bridge
        self.settings = settings or Settings()
        self.time_resolver = TimeResolver(bridge)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def calculate(self, event: BirthEvent) -> ChartResult:
        """Resolve the birth instant and calculate the full chart.

        Raises:
            InvalidInput: Bad timezone or non-existent wall time.
            HouseCalculationError: Houses cannot be computed at this location.
        """
        instant = self.time_resolver.resolve(event)
        return self.calculate_chart(instant, event.coordinates, event.house_system, event)

    def calculate_chart(
        self,
        instant: Instant,
        coordinates: Coordinates,
        house_system: str = "P",
        event: Optional[BirthEvent] = None,
    ) -> ChartResult:
        planets, warnings = self.calculate_positions(instant.jd_et)
        houses = self.calculate_houses(
            instant.jd_ut, coordinates.latitude, coordinates.longitude, house_system
        )
        aspects = find_aspects(planets.values(), self.settings.orbs)

        return ChartResult(
            event=event,
            instant=instant,
            planets=planets,
            houses=houses,
            aspects=tuple(aspects),
            warnings=tuple(warnings),
            ephemeris_mode=self.bridge.get_mode(),
        )

    def calculate_positions(
        self, jd_et: float
    ) -> tuple[dict[str, BodyPosition], list[PartialBodyFailure]]:
        """Positions of every tracked body; failed bodies are skipped and reported."""
        planets: dict[str, BodyPosition] = {}
        warnings: list[PartialBodyFailure] = []

        for body_id, name in self._tracked_bodies():
            try:
                raw = self.bridge.calc(jd_et, body_id)
            except EphemerisError as exc:
                logger.warning("Skipping %s: %s", name, exc)
                warnings.append(PartialBodyFailure(body=name, reason=str(exc)))
                continue
            planets[name] = BodyPosition.create(
                name, raw.longitude, raw.latitude, raw.distance, raw.speed
            )
            if name == NORTH_NODE:
                planets[SOUTH_NODE] = south_node_from(planets[NORTH_NODE])

        return planets, warnings

    def calculate_houses(
        self, jd_ut: float, latitude: float, longitude: float, house_system: str = "P"
    ) -> HouseCusps:
        code = house_system_code(house_system)
        cusps, ascmc = self.bridge.houses(jd_ut, latitude, longitude, code)
        vertex = ascmc[3] if len(ascmc) > 3 else None
        return HouseCusps(
            cusps=tuple(normalize_longitude(c) for c in cusps),
            ascendant=normalize_longitude(ascmc[0]),
            mc=normalize_longitude(ascmc[1]),
            system=code,
            system_name=house_system_name(code),
            vertex=normalize_longitude(vertex) if vertex is not None else None,
        )

    def current_planets(self, now: Optional[datetime] = None) -> dict[str, BodyPosition]:
        """Geocentric positions for a moment (default: now), without houses."""
        instant = self.time_resolver.resolve_utc(now) if now else self.time_resolver.now()
        planets, _ = self.calculate_positions(instant.jd_et)
        return planets

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _tracked_bodies(self) -> list[tuple[int, str]]:
        bodies = list(zip(PLANET_IDS, PLANET_NAMES))
        bodies.append((self.bridge.context.node_body, NORTH_NODE))
        if self.settings.include_chiron:
            bodies.append((CHIRON_ID, CHIRON))
        return bodies


def south_node_from(north: BodyPosition) -> BodyPosition:
    """The South Node mirrors the North Node: +180° longitude, latitude negated."""
    return BodyPosition.create(
        SOUTH_NODE,
        north.longitude + 180.0,
        -north.latitude,
        north.distance,
        north.speed,
    )
