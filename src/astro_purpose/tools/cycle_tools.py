"""Venus Star Point and Mars phase MCP tools."""

from datetime import datetime, timezone

from mcp.types import Tool, TextContent

from ..exceptions import EphemerisError, InvalidInput
from .analysis_tools import (
    format_mars_report,
    format_upcoming_report,
    format_venus_star_report,
    format_vsp_report,
)
from .chart_tools import birth_event_from_arguments, birth_schema, error_response


# ============================================================================
# Tool Definitions
# ============================================================================

def get_cycle_tools() -> list[Tool]:
    """Return list of cycle tool definitions."""
    return [
        Tool(
            name="get_venus_star",
            description=(
                "Find the prenatal Venus Star Point (the last Venus–Sun conjunction "
                "before birth) with its interpretation, and the five-pointed Venus "
                "star around the birth with its dominant element."
            ),
            inputSchema=birth_schema(
                include_on_birth_date={
                    "type": "boolean",
                    "description": (
                        "Count a Venus Star Point falling on the birth date itself "
                        "as prenatal (default false)"
                    )
                }
            )
        ),
        Tool(
            name="get_mars_phase",
            description=(
                "Find the Mars phase in force at birth, the Mars cycle it belongs to, "
                "every phase of that cycle and how far through the cycle the birth fell."
            ),
            inputSchema=birth_schema()
        ),
        Tool(
            name="get_upcoming_cycle_events",
            description="Get the next Venus Star Point and the next Mars phase change.",
            inputSchema={
                "type": "object",
                "properties": {
                    "date": {
                        "type": "string",
                        "description": "Reference date in YYYY-MM-DD format (default today)"
                    }
                },
            }
        ),
    ]


# ============================================================================
# Tool Handlers
# ============================================================================

async def handle_get_venus_star(service, arguments: dict) -> list[TextContent]:
    event = birth_event_from_arguments(arguments, service.settings.house_system)
    strictly_before = not arguments.get("include_on_birth_date", False)
    vsp = service.venus_star_point(event, strictly_before=strictly_before)
    star = service.venus_star(event)
    text = "# Venus Star\n\n" + format_vsp_report(vsp) + "\n\n" + format_venus_star_report(star)
    return [TextContent(type="text", text=text)]


async def handle_get_mars_phase(service, arguments: dict) -> list[TextContent]:
    event = birth_event_from_arguments(arguments, service.settings.house_system)
    text = "# Mars Cycle\n\n" + format_mars_report(service.mars_cycle(event))
    return [TextContent(type="text", text=text)]


async def handle_get_upcoming_cycle_events(service, arguments: dict) -> list[TextContent]:
    date_str = (arguments.get("date") or "").strip()
    now = None
    if date_str:
        try:
            now = datetime.strptime(date_str, "%Y-%m-%d").replace(tzinfo=timezone.utc)
        except ValueError as e:
            raise InvalidInput(f"Invalid date format: {date_str!r}. Expected YYYY-MM-DD.") from e
    return [TextContent(type="text", text=format_upcoming_report(service.upcoming_events(now)))]


# ============================================================================
# Tool name registry + dispatcher
# ============================================================================

CYCLE_TOOL_NAMES = {
    "get_venus_star",
    "get_mars_phase",
    "get_upcoming_cycle_events",
}


async def handle_cycle_tool(name: str, arguments: dict, service) -> list[TextContent]:
    """Route cycle tool calls to the appropriate handler."""
    try:
        if name == "get_venus_star":
            return await handle_get_venus_star(service, arguments)
        elif name == "get_mars_phase":
            return await handle_get_mars_phase(service, arguments)
        elif name == "get_upcoming_cycle_events":
            return await handle_get_upcoming_cycle_events(service, arguments)
        else:
            return [TextContent(type="text", text=f"Unknown cycle tool: {name}")]
    except (InvalidInput, EphemerisError) as e:
        return error_response(e)
