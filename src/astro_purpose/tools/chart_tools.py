"""Natal chart MCP tools.

Every tool that takes a birth accepts the same arguments (see
BIRTH_PROPERTIES). The timezone may be omitted, in which case it is looked
up from the coordinates.
"""

import json
import logging
from typing import Any

from mcp.types import Tool, TextContent

from ..exceptions import EphemerisError, HouseCalculationError, InvalidInput
from ..models.birth_event import BirthEvent
from ..utils.geocoding import get_timezone_for_coords
from .analysis_tools import (
    find_planets_in_houses,
    format_chart_report,
    format_house_report,
    format_planets_report,
)

logger = logging.getLogger(__name__)


BIRTH_PROPERTIES = {
    "date": {
        "type": "string",
        "description": "Birth date in YYYY-MM-DD format"
    },
    "time": {
        "type": "string",
        "description": "Birth time in HH:MM format (24-hour, local time). Defaults to 12:00"
    },
    "latitude": {
        "type": "number",
        "description": "Birth latitude in decimal degrees (north positive)"
    },
    "longitude": {
        "type": "number",
        "description": "Birth longitude in decimal degrees (east positive)"
    },
    "timezone": {
        "type": "string",
        "description": (
            "IANA timezone name (e.g., 'America/New_York'). "
            "Looked up from the coordinates when omitted."
        )
    },
    "house_system": {
        "type": "string",
        "description": "House system code or name (P=Placidus, K=Koch, W=Whole Sign, ...)"
    },
}

BIRTH_REQUIRED = ["date", "latitude", "longitude"]


def birth_schema(**extra: Any) -> dict:
    """Input schema with the birth arguments plus any tool-specific properties."""
    return {
        "type": "object",
        "properties": {**BIRTH_PROPERTIES, **extra},
        "required": list(BIRTH_REQUIRED),
    }


def birth_event_from_arguments(arguments: dict, default_house_system: str = "P") -> BirthEvent:
    """
    Build a BirthEvent from tool arguments.

    Args:
        arguments: Tool arguments (date, time, latitude, longitude, timezone, house_system)
        default_house_system: Used when the arguments name none

    Returns:
        Validated BirthEvent

    Raises:
        InvalidInput: Missing or malformed arguments
    """
    missing = [key for key in BIRTH_REQUIRED if arguments.get(key) in (None, "")]
    if missing:
        raise InvalidInput(f"Missing required argument(s): {', '.join(missing)}")

    try:
        latitude = float(arguments["latitude"])
        longitude = float(arguments["longitude"])
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"Latitude and longitude must be numbers: {e}") from e

    timezone = (arguments.get("timezone") or "").strip()
    if not timezone:
        timezone = get_timezone_for_coords(latitude, longitude)
        logger.info("No timezone given; using %s for %.4f, %.4f", timezone, latitude, longitude)

    return BirthEvent.from_strings(
        arguments["date"],
        arguments.get("time") or "12:00",
        latitude,
        longitude,
        timezone,
        arguments.get("house_system") or default_house_system,
    )


def error_response(e: Exception) -> list[TextContent]:
    """Map the error taxonomy onto the text replies the tools return."""
    if isinstance(e, InvalidInput):
        return [TextContent(type="text", text=f"Invalid input: {e}")]
    if isinstance(e, HouseCalculationError):
        return [TextContent(type="text", text=f"House calculation error: {e}")]
    if isinstance(e, EphemerisError):
        return [TextContent(type="text", text=f"Ephemeris error: {e}")]
    return [TextContent(type="text", text=f"Error: {e}")]


# ============================================================================
# Tool Definitions
# ============================================================================

def get_chart_tools() -> list[Tool]:
    """Return list of chart tool definitions."""
    return [
        Tool(
            name="calculate_chart",
            description=(
                "Calculate a natal chart: planets, lunar nodes, angles, house cusps "
                "and major aspects for a birth date, time and place."
            ),
            inputSchema=birth_schema(
                format={
                    "type": "string",
                    "enum": ["markdown", "json"],
                    "description": "Output format (default markdown)"
                }
            )
        ),
        Tool(
            name="get_current_planets",
            description="Get current geocentric planetary positions (no houses).",
            inputSchema={
                "type": "object",
                "properties": {},
            }
        ),
        Tool(
            name="find_house_placements",
            description=(
                "Determine which house each planet occupies in a natal chart, "
                "grouped by house and by planet."
            ),
            inputSchema=birth_schema()
        ),
    ]


# ============================================================================
# Tool Handlers
# ============================================================================

async def handle_calculate_chart(service, arguments: dict) -> list[TextContent]:
    """Calculate and format a natal chart."""
    event = birth_event_from_arguments(arguments, service.settings.house_system)
    chart = service.chart(event)
    if arguments.get("format") == "json":
        return [TextContent(type="text", text=json.dumps(chart.to_dict(), indent=2))]
    return [TextContent(type="text", text=format_chart_report(chart))]


async def handle_get_current_planets(service, arguments: dict) -> list[TextContent]:
    planets = service.current_planets()
    return [TextContent(type="text", text=format_planets_report(planets))]


async def handle_find_house_placements(service, arguments: dict) -> list[TextContent]:
    event = birth_event_from_arguments(arguments, service.settings.house_system)
    result = find_planets_in_houses(service.chart(event))
    return [TextContent(type="text", text=format_house_report(result))]


# ============================================================================
# Tool name registry + dispatcher
# ============================================================================

CHART_TOOL_NAMES = {
    "calculate_chart",
    "get_current_planets",
    "find_house_placements",
}


async def handle_chart_tool(name: str, arguments: dict, service) -> list[TextContent]:
    """Route chart tool calls to the appropriate handler."""
    try:
        if name == "calculate_chart":
            return await handle_calculate_chart(service, arguments)
        elif name == "get_current_planets":
            return await handle_get_current_planets(service, arguments)
        elif name == "find_house_placements":
            return await handle_find_house_placements(service, arguments)
        else:
            return [TextContent(type="text", text=f"Unknown chart tool: {name}")]
    except (InvalidInput, EphemerisError) as e:
        return error_response(e)
