"""Ikigai analysis value types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


QUADRANTS = (
    "what_you_love",
    "what_youre_good_at",
    "what_the_world_needs",
    "what_you_can_be_paid_for",
)

INTERSECTIONS = {
    "passion": ("what_you_love", "what_youre_good_at"),
    "mission": ("what_you_love", "what_the_world_needs"),
    "profession": ("what_youre_good_at", "what_you_can_be_paid_for"),
    "vocation": ("what_the_world_needs", "what_you_can_be_paid_for"),
}


@dataclass(frozen=True)
class Influence:
    planet: str
    sign: str
    house: int
    role: str
    question: str
    gift: str
    shadow: str
    house_theme: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "planet": self.planet,
            "sign": self.sign,
            "house": self.house,
            "role": self.role,
            "question": self.question,
            "sign_interpretation": {"gift": self.gift, "shadow": self.shadow},
            "house_interpretation": self.house_theme,
        }


@dataclass(frozen=True)
class Insight:
    kind: str  # "gift", "shadow" or "house"
    text: str
    planet: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = {"type": self.kind, "text": self.text}
        if self.planet:
            data["planet"] = self.planet
        return data


@dataclass(frozen=True)
class QuadrantReading:
    key: str
    description: str
    primary_influences: tuple[Influence, ...]
    insights: tuple[Insight, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "primary_influences": [i.to_dict() for i in self.primary_influences],
            "insights": [i.to_dict() for i in self.insights],
        }


@dataclass(frozen=True)
class IntersectionPlanet:
    planet: str
    role: str
    sign: Optional[str]

    def to_dict(self) -> dict[str, Any]:
        return {"planet": self.planet, "role": self.role, "sign": self.sign}


@dataclass(frozen=True)
class Intersection:
    name: str
    quadrants: tuple[str, str]
    planets: tuple[IntersectionPlanet, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "quadrants": list(self.quadrants),
            "planets": [p.to_dict() for p in self.planets],
        }


@dataclass(frozen=True)
class SoulPurpose:
    sign: str
    house: int
    sign_direction: str
    house_direction: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "sign": self.sign,
            "house": self.house,
            "sign_direction": self.sign_direction,
            "house_direction": self.house_direction,
        }


@dataclass(frozen=True)
class BusinessIdea:
    planet: str
    sign: str
    quadrant: str
    idea: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "planet": self.planet,
            "sign": self.sign,
            "quadrant": self.quadrant,
            "idea": self.idea,
        }


@dataclass(frozen=True)
class IkigaiAnalysis:
    quadrants: dict[str, QuadrantReading]
    intersections: dict[str, Intersection]
    soul_purpose: Optional[SoulPurpose]

    def __getitem__(self, key: str) -> QuadrantReading:
        return self.quadrants[key]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            key: reading.to_dict() for key, reading in self.quadrants.items()
        }
        data["intersections"] = {
            name: inter.to_dict() for name, inter in self.intersections.items()
        }
        data["soul_purpose"] = self.soul_purpose.to_dict() if self.soul_purpose else None
        return data
