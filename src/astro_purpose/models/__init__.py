"""Domain value types for astro-purpose-mcp."""

from .birth_event import BirthEvent, Coordinates, Instant, normalize_house_system, parse_time
from .chart import Aspect, BodyPosition, ChartResult, HouseCusps, PartialBodyFailure
from .cycles import (
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
from .ikigai import (
    BusinessIdea,
    IkigaiAnalysis,
    Influence,
    Insight,
    Intersection,
    IntersectionPlanet,
    QuadrantReading,
    SoulPurpose,
)
from .results import Available, Result, Unavailable, UnavailableReason
from .temporal import (
    EclipseEvent,
    LunarPhase,
    PlanetaryPhase,
    ProgressedChart,
    TransitAspect,
    TransitResult,
)

__all__ = [
    # Birth input
    'BirthEvent',
    'Coordinates',
    'Instant',
    'normalize_house_system',
    'parse_time',
    # Chart
    'Aspect',
    'BodyPosition',
    'ChartResult',
    'HouseCusps',
    'PartialBodyFailure',
    # Cycles
    'CyclePhase',
    'ElementTally',
    'MarsCycleContext',
    'MarsPhaseEvent',
    'MarsPhaseInterpretation',
    'MarsPhaseResult',
    'UpcomingEvent',
    'VenusStar',
    'VspEvent',
    'VspInterpretation',
    'VspResult',
    # Ikigai
    'BusinessIdea',
    'IkigaiAnalysis',
    'Influence',
    'Insight',
    'Intersection',
    'IntersectionPlanet',
    'QuadrantReading',
    'SoulPurpose',
    # Results
    'Available',
    'Result',
    'Unavailable',
    'UnavailableReason',
    # Temporal
    'EclipseEvent',
    'LunarPhase',
    'PlanetaryPhase',
    'ProgressedChart',
    'TransitAspect',
    'TransitResult',
]
