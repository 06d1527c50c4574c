"""Maps chart placements into the four Ikigai quadrants.

Each quadrant is fed by a fixed list of planets and houses (ikigai-mapping.json).
A planet's sign supplies its gift and shadow, its house supplies the arena it
works in. Quadrants share planets; the shared planets are the intersections
(passion, mission, profession, vocation).
"""

from __future__ import annotations

import logging

from ..constants import NORTH_NODE
from ..models.chart import ChartResult
from ..models.ikigai import (
    INTERSECTIONS,
    QUADRANTS,
    BusinessIdea,
    IkigaiAnalysis,
    Influence,
    Insight,
    Intersection,
    IntersectionPlanet,
    QuadrantReading,
    SoulPurpose,
)
from .houses import house_for_longitude
from .reference_data import ReferenceData

logger = logging.getLogger(__name__)

_QUADRANT_LABELS = {
    "what_you_love": "What you love",
    "what_youre_good_at": "What you're good at",
    "what_the_world_needs": "What the world needs",
    "what_you_can_be_paid_for": "What you can be paid for",
}


def _ordinal(n: int) -> str:
    suffix = "th" if 10 <= n % 100 <= 20 else {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


class IkigaiMapper:
    """Builds an IkigaiAnalysis from a chart.

    Usage:
        mapper = IkigaiMapper(reference)
        analysis = mapper.analyze(chart)
        print(mapper.summarize(analysis))
    """

    def __init__(self, reference: ReferenceData):
        self.mapping = reference.ikigai_mapping
        self.texts = reference.ikigai_interpretations

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def analyze(self, chart: ChartResult) -> IkigaiAnalysis:
        cusps = chart.houses.cusps
        quadrants = {
            key: self._quadrant(key, chart, cusps) for key in QUADRANTS
        }
        intersections = {
            name: self._intersection(name, pair, chart)
            for name, pair in INTERSECTIONS.items()
        }
        return IkigaiAnalysis(
            quadrants=quadrants,
            intersections=intersections,
            soul_purpose=self._soul_purpose(chart, cusps),
        )

    def _component(self, key: str):
        return self.mapping.get("components", {}).get(key, {})

    def _quadrant(self, key: str, chart: ChartResult, cusps) -> QuadrantReading:
        component = self._component(key)
        influences = []
        insights = []

        for planet in component.get("primary_planets", ()):
            position = chart.planets.get(planet)
            if position is None:
                # Missing body: the quadrant is simply sparser
                continue
            house = house_for_longitude(position.longitude, cusps)
            influence = self._influence(planet, position.sign, house)
            influences.append(influence)
            insights.append(Insight("gift", influence.gift, planet))
            insights.append(Insight("shadow", influence.shadow, planet))

        for house in component.get("primary_houses", ()):
            theme = self._house_theme(house)
            insights.append(Insight("house", f"House {house} themes: {theme}"))

        return QuadrantReading(
            key=key,
            description=component.get("description", ""),
            primary_influences=tuple(influences),
            insights=tuple(insights),
        )

    def _influence(self, planet: str, sign: str, house: int) -> Influence:
        role_info = self.mapping.get("planetary_roles", {}).get(planet, {})
        role = role_info.get("role", planet.lower())
        expression = self.texts.get("sign_expressions", {}).get(sign, {})
        theme = self._house_theme(house)
        return Influence(
            planet=planet,
            sign=sign,
            house=house,
            role=role,
            question=role_info.get("question", ""),
            gift=f"{planet} in {sign}: your {role} shines through {expression.get('gift', sign)}",
            shadow=f"{planet} in {sign}: watch for {expression.get('shadow', 'excess')}",
            house_theme=f"{planet} in the {_ordinal(house)} house brings {role} into {theme}",
        )

    def _house_theme(self, house: int) -> str:
        return (
            self.mapping.get("house_significance", {})
            .get(str(house), {})
            .get("theme", f"house {house}")
        )

    def _intersection(self, name: str, pair: tuple[str, str], chart: ChartResult) -> Intersection:
        first = self._component(pair[0]).get("primary_planets", ())
        second = set(self._component(pair[1]).get("primary_planets", ()))
        roles = self.mapping.get("planetary_roles", {})
        planets = tuple(
            IntersectionPlanet(
                planet=planet,
                role=roles.get(planet, {}).get("role", planet.lower()),
                sign=chart.planets[planet].sign if planet in chart.planets else None,
            )
            for planet in first
            if planet in second
        )
        return Intersection(name=name, quadrants=pair, planets=planets)

    def _soul_purpose(self, chart: ChartResult, cusps):
        node = chart.planets.get(NORTH_NODE)
        if node is None:
            return None
        house = house_for_longitude(node.longitude, cusps)
        return SoulPurpose(
            sign=node.sign,
            house=house,
            sign_direction=self.texts.get("north_node_in_sign", {}).get(node.sign, ""),
            house_direction=self.texts.get("north_node_in_house", {}).get(str(house), ""),
        )

    # ------------------------------------------------------------------
    # Narrative
    # ------------------------------------------------------------------

    def summarize(self, analysis: IkigaiAnalysis) -> str:
        """A short narrative paragraph over the analysis."""
        parts = []

        sp = analysis.soul_purpose
        if sp:
            parts.append(
                f"Your soul's direction points toward {sp.sign} themes "
                f"expressed through the {_ordinal(sp.house)} house."
            )

        love = analysis["what_you_love"].primary_influences
        if love:
            expression = self.texts.get("sign_expressions", {}).get(love[0].sign, {})
            parts.append(
                f"What you love is shaped by {love[0].planet} in {love[0].sign}, "
                f"giving you {expression.get('gift', 'unique gifts')}."
            )

        good_at = analysis["what_youre_good_at"].primary_influences
        if good_at:
            parts.append(
                f"Your natural talents flow through {good_at[0].planet} in {good_at[0].sign}."
            )

        mission = analysis.intersections.get("mission")
        if mission and mission.planets:
            planet = mission.planets[0]
            parts.append(
                f"Your mission bridges love and purpose through {planet.planet}'s {planet.role} energy."
            )

        return " ".join(parts)

    def suggest_business_ideas(self, analysis: IkigaiAnalysis) -> list[BusinessIdea]:
        """Business directions from the signs feeding the earning and skill quadrants."""
        ideas_by_sign = self.texts.get("business_ideas", {})
        ideas = []
        seen = set()
        for key in ("what_you_can_be_paid_for", "what_youre_good_at"):
            for influence in analysis[key].primary_influences:
                idea = ideas_by_sign.get(influence.sign)
                if not idea or influence.sign in seen:
                    continue
                seen.add(influence.sign)
                ideas.append(BusinessIdea(
                    planet=influence.planet,
                    sign=influence.sign,
                    quadrant=_QUADRANT_LABELS[key],
                    idea=idea,
                ))
        return ideas
