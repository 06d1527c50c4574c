"""Cycle table records and the results derived from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from ..utils.position_utils import format_degree, longitude_to_sign_info


@dataclass(frozen=True)
class VspEvent:
    """A Venus–Sun conjunction (Venus Star Point)."""

    date: date
    longitude: float
    star_type: str

    @property
    def sign(self) -> str:
        return longitude_to_sign_info(self.longitude)["sign"]

    @property
    def degree(self) -> float:
        return longitude_to_sign_info(self.longitude)["degree"]

    @property
    def position(self) -> str:
        return f"{format_degree(self.degree)} {self.sign}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "longitude": round(self.longitude, 4),
            "position": self.position,
            "sign": self.sign,
            "type": self.star_type,
        }


@dataclass(frozen=True)
class MarsPhaseEvent:
    """The start of one Mars–Sun phase; ``cycle`` names the synodic cycle by sign."""

    date: date
    cycle: str
    phase: str
    longitude: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "date": self.date.isoformat(),
            "cycle": self.cycle,
            "phase": self.phase,
        }
        if self.longitude is not None:
            data["longitude"] = round(self.longitude, 4)
        return data


# ------------------------------------------------------------------
# Venus Star Point results
# ------------------------------------------------------------------

@dataclass(frozen=True)
class VspInterpretation:
    greatest_assets: str
    greatest_liabilities: str
    venus_gift: str
    star_type: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "greatest_assets": self.greatest_assets,
            "greatest_liabilities": self.greatest_liabilities,
            "venus_gift": self.venus_gift,
            "star_type": self.star_type,
        }


@dataclass(frozen=True)
class VspResult:
    event: VspEvent
    interpretation: VspInterpretation
    days_before_birth: int

    def to_dict(self) -> dict[str, Any]:
        data = self.event.to_dict()
        data["interpretation"] = self.interpretation.to_dict()
        data["days_before_birth"] = self.days_before_birth
        return data


@dataclass(frozen=True)
class ElementTally:
    element: Optional[str]
    count: int
    total: int
    counts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "element": self.element,
            "count": self.count,
            "total": self.total,
            "counts": dict(self.counts),
        }


@dataclass(frozen=True)
class VenusStar:
    """The five Venus Star Points around a birth.

    Points are keyed top (prenatal VSP), left_arm and right_arm (the two
    before it), left_leg and right_leg (the two after birth). Any point may be
    missing near the ends of the table.
    """

    points: dict[str, Optional[VspEvent]]
    sign_pattern: tuple[str, ...]
    dominant_element: ElementTally

    def to_dict(self) -> dict[str, Any]:
        return {
            "points": {
                name: event.to_dict() if event else None
                for name, event in self.points.items()
            },
            "sign_pattern": list(self.sign_pattern),
            "dominant_element": self.dominant_element.to_dict(),
        }


# ------------------------------------------------------------------
# Mars phase results
# ------------------------------------------------------------------

@dataclass(frozen=True)
class MarsPhaseInterpretation:
    description: str
    keywords: tuple[str, ...]
    cycle_influence: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "keywords": list(self.keywords),
            "cycle_influence": self.cycle_influence,
        }


@dataclass(frozen=True)
class MarsPhaseResult:
    event: MarsPhaseEvent
    interpretation: MarsPhaseInterpretation
    days_before_birth: int

    def to_dict(self) -> dict[str, Any]:
        data = self.event.to_dict()
        data["interpretation"] = self.interpretation.to_dict()
        data["days_before_birth"] = self.days_before_birth
        return data


@dataclass(frozen=True)
class CyclePhase:
    event: MarsPhaseEvent
    is_prenatal: bool
    is_current_phase: bool

    def to_dict(self) -> dict[str, Any]:
        data = self.event.to_dict()
        data["is_prenatal"] = self.is_prenatal
        data["is_current_phase"] = self.is_current_phase
        return data


@dataclass(frozen=True)
class MarsCycleContext:
    cycle: str
    current: MarsPhaseResult
    phases: tuple[CyclePhase, ...]
    days_into_cycle: int
    total_cycle_days: int
    cycle_progress: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "cycle": self.cycle,
            "current_phase": self.current.to_dict(),
            "phases": [p.to_dict() for p in self.phases],
            "days_into_cycle": self.days_into_cycle,
            "total_cycle_days": self.total_cycle_days,
            "cycle_progress": round(self.cycle_progress, 2),
        }


@dataclass(frozen=True)
class UpcomingEvent:
    """A table event after a reference date, with the whole days until it."""

    event: Any
    days_until: int

    def to_dict(self) -> dict[str, Any]:
        data = self.event.to_dict()
        data["days_until"] = self.days_until
        return data
