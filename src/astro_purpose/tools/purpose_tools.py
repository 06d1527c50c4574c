"""Ikigai and comprehensive-reading MCP tools."""

import json

from mcp.types import Tool, TextContent

from ..exceptions import EphemerisError, InvalidInput
from .analysis_tools import format_comprehensive_report, format_ikigai_report
from .chart_tools import birth_event_from_arguments, birth_schema, error_response


# ============================================================================
# Tool Definitions
# ============================================================================

def get_purpose_tools() -> list[Tool]:
    """Return list of purpose tool definitions."""
    return [
        Tool(
            name="get_ikigai",
            description=(
                "Map a natal chart onto the four Ikigai quadrants (what you love, "
                "what you're good at, what the world needs, what you can be paid for), "
                "their intersections, the North Node soul purpose and business directions."
            ),
            inputSchema=birth_schema()
        ),
        Tool(
            name="get_comprehensive_reading",
            description=(
                "Full purpose reading in one call: natal chart, Venus Star Point and "
                "Venus star, Mars cycle, Ikigai analysis and a short narrative summary."
            ),
            inputSchema=birth_schema(
                format={
                    "type": "string",
                    "enum": ["markdown", "json"],
                    "description": "Output format (default markdown)"
                }
            )
        ),
    ]


# ============================================================================
# Tool Handlers
# ============================================================================

async def handle_get_ikigai(service, arguments: dict) -> list[TextContent]:
    event = birth_event_from_arguments(arguments, service.settings.house_system)
    mapper = service.ikigai_mapper
    analysis = service.ikigai(event)
    text = format_ikigai_report(
        analysis,
        mapper.summarize(analysis),
        mapper.suggest_business_ideas(analysis),
    )
    return [TextContent(type="text", text=text)]


async def handle_get_comprehensive_reading(service, arguments: dict) -> list[TextContent]:
    event = birth_event_from_arguments(arguments, service.settings.house_system)
    reading = service.comprehensive(event)
    if arguments.get("format") == "json":
        data = {
            key: (
                [item.to_dict() for item in value] if isinstance(value, list)
                else value if isinstance(value, str)
                else value.to_dict()
            )
            for key, value in reading.items()
        }
        return [TextContent(type="text", text=json.dumps(data, indent=2))]
    return [TextContent(type="text", text=format_comprehensive_report(reading))]


# ============================================================================
# Tool name registry + dispatcher
# ============================================================================

PURPOSE_TOOL_NAMES = {
    "get_ikigai",
    "get_comprehensive_reading",
}


async def handle_purpose_tool(name: str, arguments: dict, service) -> list[TextContent]:
    """Route purpose tool calls to the appropriate handler."""
    try:
        if name == "get_ikigai":
            return await handle_get_ikigai(service, arguments)
        elif name == "get_comprehensive_reading":
            return await handle_get_comprehensive_reading(service, arguments)
        else:
            return [TextContent(type="text", text=f"Unknown purpose tool: {name}")]
    except (InvalidInput, EphemerisError) as e:
        return error_response(e)
