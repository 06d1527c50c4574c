"""Results of time-indexed searches: progressions, eclipses, phases, transits."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from .chart import BodyPosition, HouseCusps
from ..utils.position_utils import longitude_to_sign_info


@dataclass(frozen=True)
class LunarPhase:
    name: str
    angle: float
    cycle_percent: float
    waxing: bool
    illumination: float
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.name,
            "angle": round(self.angle, 2),
            "cycle_percent": round(self.cycle_percent, 2),
            "waxing": self.waxing,
            "illumination": round(self.illumination, 1),
            "description": self.description,
        }


@dataclass(frozen=True)
class ProgressedChart:
    target: datetime
    years_elapsed: float
    progressed_jd: float
    progressed_date: datetime
    planets: dict[str, BodyPosition]
    houses: Optional[HouseCusps]
    lunar_phase: Optional[LunarPhase]

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_date": self.target.isoformat(),
            "years_elapsed": round(self.years_elapsed, 4),
            "progressed_jd": self.progressed_jd,
            "progressed_date": self.progressed_date.isoformat(),
            "planets": {name: p.to_dict() for name, p in self.planets.items()},
            "houses": self.houses.to_dict() if self.houses else None,
            "lunar_phase": self.lunar_phase.to_dict() if self.lunar_phase else None,
        }


@dataclass(frozen=True)
class EclipseEvent:
    kind: str  # "solar" or "lunar"
    classification: str
    jd_ut: float
    moment: datetime
    days_before_birth: int
    sun_longitude: float
    magnitude: Optional[float]
    approximate: bool
    method: str

    @property
    def sign(self) -> str:
        return longitude_to_sign_info(self.eclipse_longitude)["sign"]

    @property
    def eclipse_longitude(self) -> float:
        """Longitude of the eclipse point: the Sun for solar, the Moon for lunar."""
        if self.kind == "lunar":
            return (self.sun_longitude + 180.0) % 360.0
        return self.sun_longitude

    def to_dict(self) -> dict[str, Any]:
        info = longitude_to_sign_info(self.eclipse_longitude)
        return {
            "kind": self.kind,
            "type": self.classification,
            "date": self.moment.isoformat(),
            "jd_ut": self.jd_ut,
            "days_before_birth": self.days_before_birth,
            "sign": info["sign"],
            "degree": info["formatted"],
            "longitude": round(info["absolute_position"], 4),
            "magnitude": round(self.magnitude, 4) if self.magnitude is not None else None,
            "approximate": self.approximate,
            "method": self.method,
        }


@dataclass(frozen=True)
class PlanetaryPhase:
    pair: str
    first: str
    second: str
    angle: float
    phase: str
    description: str
    morning_star: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "pair": self.pair,
            "bodies": [self.first, self.second],
            "angle": round(self.angle, 2),
            "phase": self.phase,
            "description": self.description,
        }
        if self.morning_star is not None:
            data["is_morning_star"] = self.morning_star
            data["is_evening_star"] = not self.morning_star
        return data


@dataclass(frozen=True)
class TransitAspect:
    transit: str
    natal: str
    aspect: str
    exact_angle: float
    orb: float
    applying: bool
    transit_retrograde: bool
    significance: str

    @property
    def exact(self) -> bool:
        return self.orb < 1.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "transit": self.transit,
            "natal": self.natal,
            "aspect": self.aspect,
            "exact_angle": self.exact_angle,
            "orb": round(self.orb, 2),
            "exact": self.exact,
            "applying": self.applying,
            "transit_retrograde": self.transit_retrograde,
            "significance": self.significance,
        }


@dataclass(frozen=True)
class TransitResult:
    moment: datetime
    positions: dict[str, BodyPosition]
    aspects: tuple[TransitAspect, ...]
    summary: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.moment.isoformat(),
            "transit_positions": {
                name: p.to_dict() for name, p in self.positions.items()
            },
            "aspects": [a.to_dict() for a in self.aspects],
            "summary": self.summary,
        }
