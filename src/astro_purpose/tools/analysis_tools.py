"""Markdown reports for chart, cycle, purpose and timing results."""

from typing import Any, Dict, Optional

from ..models.chart import ChartResult
from ..models.ikigai import IkigaiAnalysis
from ..models.results import Result, Unavailable
from ..models.temporal import PlanetaryPhase, ProgressedChart, TransitResult
from ..utils.houses import bodies_by_house
from ..utils.position_utils import longitude_to_sign_info


def _position(longitude: float) -> str:
    info = longitude_to_sign_info(longitude)
    return f"{info['formatted']} {info['sign']}"


def format_unavailable(label: str, result: Unavailable) -> str:
    return f"**{label}:** unavailable ({result.reason.value}) {result.message}".rstrip()


# ============================================================================
# Chart
# ============================================================================

def find_planets_in_houses(chart: ChartResult) -> Dict[str, Any]:
    """
    Determine which house each body of a chart is in.

    Args:
        chart: A calculated ChartResult

    Returns:
        Dictionary containing:
        - placements: Dict mapping body -> house number
        - houses_populated: Dict mapping house number (str) -> list of bodies
        - metadata: Info about the calculation
    """
    placements = chart.placements()
    by_house = bodies_by_house(placements)
    houses_populated = {str(house): bodies for house, bodies in by_house.items()}

    return {
        "placements": placements,
        "houses_populated": houses_populated,
        "metadata": {
            "house_system": chart.houses.system_name,
            "total_planets": len(placements),
            "houses_with_planets": sum(1 for bodies in houses_populated.values() if bodies)
        }
    }


def format_house_report(house_result: Dict[str, Any]) -> str:
    """
    Format house placement results into a readable report.

    Args:
        house_result: Output from find_planets_in_houses()

    Returns:
        Formatted string report
    """
    report = "# House Placements\n\n"

    metadata = house_result["metadata"]
    report += f"House System: {metadata['house_system']}\n"
    report += f"Total Planets: {metadata['total_planets']}\n"
    report += f"Houses with Planets: {metadata['houses_with_planets']}\n\n"

    report += "## By House\n\n"

    for house_num in range(1, 13):
        planets = house_result["houses_populated"].get(str(house_num), [])
        if planets:
            report += f"**House {house_num}**: {', '.join(planets)}\n"
        else:
            report += f"**House {house_num}**: (empty)\n"

    report += "\n## By Planet\n\n"

    for planet, house_num in sorted(house_result["placements"].items()):
        report += f"**{planet}**: House {house_num}\n"

    return report


def format_chart_report(chart: ChartResult) -> str:
    """Full natal chart: angles, bodies with houses, cusps and major aspects."""
    lines = ["# Natal Chart"]
    if chart.event is not None:
        event = chart.event
        lines.append(f"**Born:** {event.date_string()} at {event.time_string()} ({event.timezone})")
        lines.append(f"**Location:** {event.latitude:.4f}, {event.longitude:.4f}")
    lines.append(f"**UTC:** {chart.instant.utc.isoformat()}")
    lines.append(f"**House System:** {chart.houses.system_name}")
    lines.append(f"**Ephemeris:** {chart.ephemeris_mode}")
    lines.append("")

    lines.append("## Angles")
    for name, longitude in chart.angles.items():
        lines.append(f"- **{name.title()}**: {_position(longitude)}")
    lines.append("")

    placements = chart.placements()
    lines.append("## Planets")
    for name, body in chart.planets.items():
        retro = " ℞" if body.retrograde else ""
        lines.append(f"- **{name}**: {body.formatted} {body.sign}{retro} (H{placements[name]})")
    lines.append("")

    lines.append("## House Cusps")
    for i, cusp in enumerate(chart.houses.cusps, 1):
        lines.append(f"- **House {i}**: {_position(cusp)}")
    lines.append("")

    if chart.aspects:
        lines.append("## Aspects")
        for aspect in sorted(chart.aspects, key=lambda a: a.orb):
            lines.append(f"- {aspect.body_a} {aspect.aspect} {aspect.body_b} (orb {aspect.orb:.2f}°)")
        lines.append("")

    if chart.warnings:
        lines.append("## Warnings")
        for warning in chart.warnings:
            lines.append(f"- {warning.body} omitted: {warning.reason}")
        lines.append("")

    return "\n".join(lines)


def format_planets_report(planets: Dict[str, Any], title: str = "Current Planetary Positions") -> str:
    lines = [f"# {title}", ""]
    for name, body in planets.items():
        retro = " ℞" if body.retrograde else ""
        lines.append(f"- **{name}**: {body.formatted} {body.sign}{retro}")
    return "\n".join(lines)


# ============================================================================
# Cycles
# ============================================================================

def format_vsp_report(result: Result) -> str:
    if not result.available:
        return format_unavailable("Venus Star Point", result)
    vsp = result.value
    lines = [
        "## Venus Star Point",
        f"**Position:** {vsp.event.position} ({vsp.event.star_type})",
        f"**Date:** {vsp.event.date.isoformat()} ({vsp.days_before_birth} days before birth)",
        f"**Greatest assets:** {vsp.interpretation.greatest_assets}",
        f"**Greatest liabilities:** {vsp.interpretation.greatest_liabilities}",
        f"**Venus gift:** {vsp.interpretation.venus_gift}",
        f"**Star type:** {vsp.interpretation.star_type}",
    ]
    return "\n".join(lines)


def format_venus_star_report(result: Result) -> str:
    if not result.available:
        return format_unavailable("Venus Star", result)
    star = result.value
    lines = ["## Venus Star"]
    for point, event in star.points.items():
        label = point.replace("_", " ").title()
        if event is None:
            lines.append(f"- **{label}**: outside table range")
        else:
            lines.append(f"- **{label}**: {event.position} on {event.date.isoformat()} ({event.star_type})")
    tally = star.dominant_element
    lines.append(f"**Sign pattern:** {' → '.join(star.sign_pattern)}")
    if tally.element:
        lines.append(f"**Dominant element:** {tally.element} ({tally.count} of {tally.total})")
    return "\n".join(lines)


def format_mars_report(result: Result) -> str:
    """Mars cycle context: the phase in force at birth plus the phases of its cycle."""
    if not result.available:
        return format_unavailable("Mars Phase", result)
    context = result.value
    current = context.current
    lines = [
        "## Mars Phase",
        f"**Phase:** {current.event.phase} of the {current.event.cycle} cycle",
        f"**Began:** {current.event.date.isoformat()} ({current.days_before_birth} days before birth)",
        f"**Meaning:** {current.interpretation.description}",
    ]
    if current.interpretation.keywords:
        lines.append(f"**Keywords:** {', '.join(current.interpretation.keywords)}")
    if current.interpretation.cycle_influence:
        lines.append(f"**Cycle influence:** {current.interpretation.cycle_influence}")
    lines.append(
        f"**Cycle progress:** {context.cycle_progress:.1f}% "
        f"(day {context.days_into_cycle} of {context.total_cycle_days})"
    )
    lines.append("")
    lines.append("### Phases in this cycle")
    for phase in context.phases:
        marker = " ← birth" if phase.is_current_phase else ""
        lines.append(f"- {phase.event.date.isoformat()}: {phase.event.phase}{marker}")
    return "\n".join(lines)


def format_upcoming_report(events: Dict[str, Result]) -> str:
    lines = ["# Upcoming Cycle Events", ""]
    labels = {"venus_star_point": "Next Venus Star Point", "mars_phase": "Next Mars phase"}
    for key, result in events.items():
        label = labels.get(key, key)
        if not result.available:
            lines.append(f"- {format_unavailable(label, result)}")
            continue
        upcoming = result.value
        event = upcoming.event
        what = event.position if hasattr(event, "position") else f"{event.phase} ({event.cycle} cycle)"
        lines.append(
            f"- **{label}:** {what} on {event.date.isoformat()} (in {upcoming.days_until} days)"
        )
    return "\n".join(lines)


# ============================================================================
# Purpose
# ============================================================================

def format_ikigai_report(
    analysis: IkigaiAnalysis,
    summary: str = "",
    ideas: Optional[list] = None,
) -> str:
    lines = ["# Ikigai Analysis", ""]
    if summary:
        lines.extend([summary, ""])

    for reading in analysis.quadrants.values():
        lines.append(f"## {reading.key.replace('_', ' ').title()}")
        if reading.description:
            lines.append(f"_{reading.description}_")
        for influence in reading.primary_influences:
            lines.append(
                f"- **{influence.planet}** in {influence.sign}, house {influence.house} "
                f"({influence.role})"
            )
            lines.append(f"  - Gift: {influence.gift}")
            lines.append(f"  - Shadow: {influence.shadow}")
            lines.append(f"  - {influence.house_theme}")
        lines.append("")

    lines.append("## Intersections")
    for intersection in analysis.intersections.values():
        planets = ", ".join(
            f"{p.planet} in {p.sign}" if p.sign else p.planet for p in intersection.planets
        ) or "none"
        lines.append(f"- **{intersection.name.title()}**: {planets}")
    lines.append("")

    sp = analysis.soul_purpose
    if sp:
        lines.append("## Soul Purpose (North Node)")
        lines.append(f"**North Node:** {sp.sign}, house {sp.house}")
        if sp.sign_direction:
            lines.append(f"- {sp.sign_direction}")
        if sp.house_direction:
            lines.append(f"- {sp.house_direction}")
        lines.append("")

    if ideas:
        lines.append("## Business Directions")
        for idea in ideas:
            lines.append(f"- **{idea.planet} in {idea.sign}** ({idea.quadrant}): {idea.idea}")
        lines.append("")

    return "\n".join(lines)


def format_comprehensive_report(reading: Dict[str, Any]) -> str:
    sections = [
        format_chart_report(reading["chart"]),
        format_vsp_report(reading["venus_star_point"]),
        format_venus_star_report(reading["venus_star"]),
        format_mars_report(reading["mars_cycle"]),
        format_ikigai_report(reading["ikigai"], reading["summary"], reading["business_ideas"]),
    ]
    return "\n\n".join(sections)


# ============================================================================
# Timing
# ============================================================================

def format_progressions_report(progressed: ProgressedChart) -> str:
    lines = [
        "# Secondary Progressions",
        f"**Target date:** {progressed.target.date().isoformat()}",
        f"**Years elapsed:** {progressed.years_elapsed:.2f}",
        f"**Progressed date:** {progressed.progressed_date.isoformat()}",
        "",
        "## Progressed Planets",
    ]
    for name, body in progressed.planets.items():
        retro = " ℞" if body.retrograde else ""
        lines.append(f"- **{name}**: {body.formatted} {body.sign}{retro}")
    lines.append("")

    if progressed.houses is not None:
        lines.append("## Progressed Angles")
        lines.append(f"- **Ascendant**: {_position(progressed.houses.ascendant)}")
        lines.append(f"- **MC**: {_position(progressed.houses.mc)}")
        lines.append("")

    phase = progressed.lunar_phase
    if phase is not None:
        direction = "waxing" if phase.waxing else "waning"
        lines.append("## Progressed Lunar Phase")
        lines.append(
            f"**{phase.name}** ({direction}, {phase.illumination:.0f}% illuminated, "
            f"{phase.cycle_percent:.1f}% through the cycle)"
        )
        if phase.description:
            lines.append(phase.description)

    return "\n".join(lines)


def format_eclipse_report(eclipses: Dict[str, Result]) -> str:
    lines = ["# Prenatal Eclipses", ""]
    for kind, result in eclipses.items():
        label = f"Prenatal {kind} eclipse"
        if not result.available:
            lines.append(f"- {format_unavailable(label, result)}")
            continue
        eclipse = result.value
        lines.append(f"## {label.capitalize()}")
        lines.append(f"**Date:** {eclipse.moment.isoformat()} ({eclipse.days_before_birth} days before birth)")
        lines.append(f"**Type:** {eclipse.classification}")
        lines.append(f"**Position:** {_position(eclipse.eclipse_longitude)}")
        if eclipse.magnitude is not None:
            lines.append(f"**Magnitude:** {eclipse.magnitude:.4f}")
        if eclipse.approximate:
            lines.append("_Approximate: found by scanning for a New/Full Moon near the lunar nodes._")
        lines.append("")
    return "\n".join(lines)


def format_phases_report(phases: Dict[str, PlanetaryPhase]) -> str:
    lines = ["# Planetary Phases", ""]
    if not phases:
        lines.append("No planetary pairs available.")
    for phase in phases.values():
        lines.append(f"## {phase.first}–{phase.second}: {phase.phase}")
        lines.append(f"**Angle:** {phase.angle:.2f}°")
        if phase.morning_star is not None:
            lines.append(f"**Mercury:** {'morning' if phase.morning_star else 'evening'} star")
        if phase.description:
            lines.append(phase.description)
        lines.append("")
    return "\n".join(lines)


def format_transit_report(result: TransitResult) -> str:
    lines = [
        f"# Transits for {result.moment.strftime('%Y-%m-%d %H:%M')} UTC",
        "",
        result.summary,
        "",
    ]
    if result.aspects:
        lines.append("## Aspects to the Natal Chart (tightest first)")
        for aspect in result.aspects:
            motion = "applying" if aspect.applying else "separating"
            retro = " ℞" if aspect.transit_retrograde else ""
            lines.append(
                f"- **{aspect.transit}{retro}** {aspect.aspect} natal **{aspect.natal}** "
                f"(orb {aspect.orb:.2f}°, {motion})"
            )
            lines.append(f"  - {aspect.significance}")
    return "\n".join(lines)
