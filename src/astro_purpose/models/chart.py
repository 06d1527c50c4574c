"""Chart value types: body positions, house cusps, aspects and the chart itself."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .birth_event import BirthEvent, Instant
from ..utils.houses import house_for_longitude
from ..utils.position_utils import longitude_to_sign_info, normalize_longitude


@dataclass(frozen=True)
class BodyPosition:
    """Geocentric ecliptic position of one body at one instant."""

    name: str
    longitude: float
    latitude: float
    distance: float
    speed: float

    @classmethod
    def create(
        cls,
        name: str,
        longitude: float,
        latitude: float = 0.0,
        distance: float = 0.0,
        speed: float = 0.0,
    ) -> "BodyPosition":
        return cls(name, normalize_longitude(longitude), latitude, distance, speed)

    @property
    def retrograde(self) -> bool:
        return self.speed < 0

    @property
    def sign(self) -> str:
        return longitude_to_sign_info(self.longitude)["sign"]

    @property
    def sign_index(self) -> int:
        return longitude_to_sign_info(self.longitude)["sign_index"]

    @property
    def degree(self) -> float:
        return longitude_to_sign_info(self.longitude)["degree"]

    @property
    def formatted(self) -> str:
        return longitude_to_sign_info(self.longitude)["formatted"]

    def to_dict(self) -> dict[str, Any]:
        info = longitude_to_sign_info(self.longitude)
        info.update({
            "latitude": self.latitude,
            "distance": self.distance,
            "speed": self.speed,
            "is_retrograde": self.retrograde,
        })
        return info


@dataclass(frozen=True)
class HouseCusps:
    """Twelve house cusps plus the chart angles.

    ``cusps[0]`` is the first-house cusp. Descendant and IC are derived as the
    points opposite the Ascendant and MC.
    """

    cusps: tuple[float, ...]
    ascendant: float
    mc: float
    system: str
    system_name: str
    vertex: Optional[float] = None

    @property
    def descendant(self) -> float:
        return normalize_longitude(self.ascendant + 180.0)

    @property
    def ic(self) -> float:
        return normalize_longitude(self.mc + 180.0)

    def house_of(self, longitude: float) -> int:
        """Return the house number (1..12) holding an ecliptic longitude."""
        return house_for_longitude(longitude, self.cusps)

    def angles(self) -> dict[str, float]:
        angles = {
            "ascendant": self.ascendant,
            "mc": self.mc,
            "descendant": self.descendant,
            "ic": self.ic,
        }
        if self.vertex is not None:
            angles["vertex"] = self.vertex
        return angles

    def to_dict(self) -> dict[str, Any]:
        return {
            "system": self.system,
            "system_name": self.system_name,
            "cusps": {
                str(i + 1): longitude_to_sign_info(cusp)
                for i, cusp in enumerate(self.cusps)
            },
            "angles": {
                name: longitude_to_sign_info(value)
                for name, value in self.angles().items()
            },
        }


@dataclass(frozen=True)
class Aspect:
    body_a: str
    body_b: str
    aspect: str
    exact_angle: float
    actual_angle: float
    orb: float
    applying: bool

    def involves(self, body: str) -> bool:
        return body in (self.body_a, self.body_b)

    def to_dict(self) -> dict[str, Any]:
        return {
            "body1": self.body_a,
            "body2": self.body_b,
            "aspect": self.aspect,
            "exact_angle": self.exact_angle,
            "actual_angle": round(self.actual_angle, 4),
            "orb": round(self.orb, 4),
            "applying": self.applying,
        }


@dataclass(frozen=True)
class PartialBodyFailure:
    """A body the ephemeris could not compute; the chart is returned without it."""

    body: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"body": self.body, "reason": self.reason}


@dataclass(frozen=True)
class ChartResult:
    event: Optional[BirthEvent]
    instant: Instant
    planets: dict[str, BodyPosition]
    houses: HouseCusps
    aspects: tuple[Aspect, ...] = ()
    warnings: tuple[PartialBodyFailure, ...] = field(default_factory=tuple)
    ephemeris_mode: str = "moshier"

    @property
    def angles(self) -> dict[str, float]:
        return self.houses.angles()

    def placements(self) -> dict[str, int]:
        """Map each body name to the house it occupies."""
        return {
            name: self.houses.house_of(position.longitude)
            for name, position in self.planets.items()
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "input": self.event.to_dict() if self.event else None,
            "instant": self.instant.to_dict(),
            "planets": {name: pos.to_dict() for name, pos in self.planets.items()},
            "houses": self.houses.to_dict(),
            "aspects": [a.to_dict() for a in self.aspects],
            "placements": self.placements(),
            "warnings": [w.to_dict() for w in self.warnings],
            "metadata": {
                "house_system": self.houses.system_name,
                "ephemeris": self.ephemeris_mode,
            },
        }
