"""Progression, eclipse, planetary-phase and transit MCP tools."""

from datetime import date, datetime, timezone

from mcp.types import Tool, TextContent

from ..exceptions import EphemerisError, InvalidInput
from .analysis_tools import (
    format_eclipse_report,
    format_phases_report,
    format_progressions_report,
    format_transit_report,
)
from .chart_tools import birth_event_from_arguments, birth_schema, error_response


def _parse_date(value: str, field: str) -> date:
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (ValueError, AttributeError) as e:
        raise InvalidInput(f"Invalid {field}: {value!r}. Expected YYYY-MM-DD.") from e


# ============================================================================
# Tool Definitions
# ============================================================================

def get_timing_tools() -> list[Tool]:
    """Return list of timing tool definitions."""
    return [
        Tool(
            name="get_progressions",
            description=(
                "Calculate secondary progressions (one day after birth per year of life) "
                "for a target date, including the progressed lunar phase."
            ),
            inputSchema=birth_schema(
                target_date={
                    "type": "string",
                    "description": "Date to progress to, YYYY-MM-DD (default today)"
                }
            )
        ),
        Tool(
            name="get_prenatal_eclipses",
            description=(
                "Find the last solar and lunar eclipses before birth, with type, "
                "position and magnitude. Results found by the fallback scan are "
                "marked approximate."
            ),
            inputSchema=birth_schema()
        ),
        Tool(
            name="get_planetary_phases",
            description=(
                "Synodic phases at birth for Mars–Sun, Saturn–Jupiter, Venus–Mars "
                "and Mercury–Sun, including Mercury's morning/evening star status."
            ),
            inputSchema=birth_schema()
        ),
        Tool(
            name="get_transits",
            description=(
                "Aspects from current (or given) planetary positions to the natal "
                "chart, tightest first, with a short summary."
            ),
            inputSchema=birth_schema(
                transit_date={
                    "type": "string",
                    "description": "Date of the transits, YYYY-MM-DD (default now)"
                },
                limit={
                    "type": "integer",
                    "description": "Maximum number of aspects to return (default 20)",
                    "minimum": 1,
                    "maximum": 100
                }
            )
        ),
    ]


# ============================================================================
# Tool Handlers
# ============================================================================

async def handle_get_progressions(service, arguments: dict) -> list[TextContent]:
    event = birth_event_from_arguments(arguments, service.settings.house_system)
    target_str = (arguments.get("target_date") or "").strip()
    target = _parse_date(target_str, "target_date") if target_str else datetime.now(timezone.utc)
    progressed = service.progressions(event, target)
    return [TextContent(type="text", text=format_progressions_report(progressed))]


async def handle_get_prenatal_eclipses(service, arguments: dict) -> list[TextContent]:
    event = birth_event_from_arguments(arguments, service.settings.house_system)
    return [TextContent(type="text", text=format_eclipse_report(service.prenatal_eclipses(event)))]


async def handle_get_planetary_phases(service, arguments: dict) -> list[TextContent]:
    event = birth_event_from_arguments(arguments, service.settings.house_system)
    return [TextContent(type="text", text=format_phases_report(service.planetary_phases(event)))]


async def handle_get_transits(service, arguments: dict) -> list[TextContent]:
    event = birth_event_from_arguments(arguments, service.settings.house_system)
    at = None
    transit_str = (arguments.get("transit_date") or "").strip()
    if transit_str:
        day = _parse_date(transit_str, "transit_date")
        at = datetime(day.year, day.month, day.day, 12, tzinfo=timezone.utc)
    limit = arguments.get("limit")
    result = service.transits(event, at=at, limit=int(limit) if limit else None)
    return [TextContent(type="text", text=format_transit_report(result))]


# ============================================================================
# Tool name registry + dispatcher
# ============================================================================

TIMING_TOOL_NAMES = {
    "get_progressions",
    "get_prenatal_eclipses",
    "get_planetary_phases",
    "get_transits",
}


async def handle_timing_tool(name: str, arguments: dict, service) -> list[TextContent]:
    """Route timing tool calls to the appropriate handler."""
    try:
        if name == "get_progressions":
            return await handle_get_progressions(service, arguments)
        elif name == "get_prenatal_eclipses":
            return await handle_get_prenatal_eclipses(service, arguments)
        elif name == "get_planetary_phases":
            return await handle_get_planetary_phases(service, arguments)
        elif name == "get_transits":
            return await handle_get_transits(service, arguments)
        else:
            return [TextContent(type="text", text=f"Unknown timing tool: {name}")]
    except (InvalidInput, EphemerisError) as e:
        return error_response(e)
