"""One object wiring the engines together, shared by the MCP tools."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional, Union

from .config import ConfigManager, Settings
from .models.birth_event import BirthEvent
from .models.chart import BodyPosition, ChartResult
from .models.ikigai import IkigaiAnalysis
from .models.results import Result
from .models.temporal import PlanetaryPhase, ProgressedChart, TransitResult
from .utils.chart_calculator import ChartCalculator
from .utils.cycle_lookup import MarsPhaseEngine, VenusStarEngine
from .utils.ephemeris import EphemerisBridge, EphemerisContext
from .utils.ikigai import IkigaiMapper
from .utils.reference_data import ReferenceData
from .utils.temporal import TemporalSearchEngine

logger = logging.getLogger(__name__)


class AstroService:
    """Facade over chart, cycle, Ikigai and temporal calculations.

    Usage:
        service = AstroService.from_config()
        event = BirthEvent.from_strings("1988-01-14", "10:22", 40.7128, -74.006, "America/New_York")
        reading = service.comprehensive(event)
    """

    def __init__(self, context: EphemerisContext, reference: ReferenceData, settings: Settings):
        self.context = context
        self.reference = reference
        self.settings = settings
        self.bridge = EphemerisBridge(context)
        self.calculator = ChartCalculator(self.bridge, settings)
        self.venus = VenusStarEngine(reference)
        self.mars = MarsPhaseEngine(reference)
        self.ikigai_mapper = IkigaiMapper(reference)
        self.temporal = TemporalSearchEngine(self.calculator, reference, settings)

    @classmethod
    def from_config(cls, config: Optional[ConfigManager] = None) -> "AstroService":
        """Build the service from the user's configuration file.

        The ephemeris context is created first because deriving missing cycle
        tables needs it.
        """
        config = config or ConfigManager()
        settings = config.to_settings()
        context = EphemerisContext.create(settings.ephe_path, settings.node_type)
        reference = ReferenceData.load(
            data_dir=settings.data_dir,
            bridge=EphemerisBridge(context),
            start_year=settings.table_start_year,
            end_year=settings.table_end_year,
        )
        logger.info(
            "Service ready: %s ephemeris, %d VSP events, %d Mars phase events",
            context.get_mode(), len(reference.vsp_events), len(reference.mars_events),
        )
        return cls(context, reference, settings)

    # ------------------------------------------------------------------
    # Charts
    # ------------------------------------------------------------------

    def chart(self, event: BirthEvent) -> ChartResult:
        return self.calculator.calculate(event)

    def current_planets(self, now: Optional[datetime] = None) -> dict[str, BodyPosition]:
        return self.calculator.current_planets(now)

    def _birth_moment(self, event: BirthEvent) -> datetime:
        return self.calculator.time_resolver.resolve(event).utc

    # ------------------------------------------------------------------
    # Cycles
    # ------------------------------------------------------------------

    def venus_star_point(self, event: BirthEvent, strictly_before: bool = True) -> Result:
        return self.venus.prenatal_vsp(self._birth_moment(event), strictly_before)

    def venus_star(self, event: BirthEvent) -> Result:
        return self.venus.venus_star(self._birth_moment(event))

    def mars_phase(self, event: BirthEvent, strictly_before: bool = True) -> Result:
        return self.mars.prenatal_phase(self._birth_moment(event), strictly_before)

    def mars_cycle(self, event: BirthEvent) -> Result:
        return self.mars.cycle_context(self._birth_moment(event))

    def upcoming_events(self, now: Optional[datetime] = None) -> dict[str, Result]:
        return {
            "venus_star_point": self.venus.next_vsp(now),
            "mars_phase": self.mars.next_phase(now),
        }

    # ------------------------------------------------------------------
    # Purpose
    # ------------------------------------------------------------------

    def ikigai(self, event: BirthEvent) -> IkigaiAnalysis:
        return self.ikigai_mapper.analyze(self.chart(event))

    def comprehensive(self, event: BirthEvent) -> dict[str, Any]:
        """Chart, Venus star, Mars cycle and Ikigai for one birth, with a summary."""
        chart = self.chart(event)
        birth = chart.instant.utc
        analysis = self.ikigai_mapper.analyze(chart)
        return {
            "chart": chart,
            "venus_star_point": self.venus.prenatal_vsp(birth),
            "venus_star": self.venus.venus_star(birth),
            "mars_cycle": self.mars.cycle_context(birth),
            "ikigai": analysis,
            "business_ideas": self.ikigai_mapper.suggest_business_ideas(analysis),
            "summary": self.ikigai_mapper.summarize(analysis),
        }

    # ------------------------------------------------------------------
    # Timing
    # ------------------------------------------------------------------

    def progressions(
        self,
        event: BirthEvent,
        target: Union[date, datetime],
        include_houses: bool = True,
    ) -> ProgressedChart:
        instant = self.calculator.time_resolver.resolve(event)
        return self.temporal.progressions(
            instant,
            target,
            coordinates=event.coordinates if include_houses else None,
            house_system=event.house_system,
        )

    def prenatal_eclipses(self, event: BirthEvent) -> dict[str, Result]:
        return self.temporal.prenatal_eclipses(self.calculator.time_resolver.resolve(event))

    def planetary_phases(self, event: BirthEvent) -> dict[str, PlanetaryPhase]:
        instant = self.calculator.time_resolver.resolve(event)
        planets, _ = self.calculator.calculate_positions(instant.jd_et)
        return self.temporal.planetary_phases(planets)

    def transits(
        self,
        event: BirthEvent,
        at: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> TransitResult:
        return self.temporal.transits(self.chart(event), at=at, limit=limit)
