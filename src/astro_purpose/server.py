"""MCP server for astro-purpose-mcp."""

import asyncio
import logging
import sys
from typing import Any, Optional

from mcp.server import Server
from mcp.types import Tool, TextContent

from .config import ConfigManager
from .exceptions import AstroError
from .service import AstroService
from .tools.chart_tools import CHART_TOOL_NAMES, get_chart_tools, handle_chart_tool
from .tools.cycle_tools import CYCLE_TOOL_NAMES, get_cycle_tools, handle_cycle_tool
from .tools.purpose_tools import PURPOSE_TOOL_NAMES, get_purpose_tools, handle_purpose_tool
from .tools.timing_tools import TIMING_TOOL_NAMES, get_timing_tools, handle_timing_tool

logger = logging.getLogger(__name__)


# Initialize MCP server
app = Server("astro-purpose-mcp")

# Global state
config: Optional[ConfigManager] = None
service: Optional[AstroService] = None


def init_config() -> ConfigManager:
    """Load the configuration file (lazy singleton)."""
    global config
    if config is None:
        config = ConfigManager()
    return config


def init_service() -> AstroService:
    """Initialize the calculation service (lazy singleton).

    The first call creates the ephemeris context and loads, or derives, the
    cycle tables, so it can take a few seconds.
    """
    global service
    if service is None:
        service = AstroService.from_config(init_config())
    return service


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List available MCP tools."""
    core_tools = [
        Tool(
            name="check_ephemeris",
            description=(
                "Check the current ephemeris mode and precision level. "
                "Reports whether the built-in Moshier ephemeris (~1 arcminute) or "
                "Swiss Ephemeris data files (~0.001 arcsecond) are active, "
                "shows the pysweph version and the loaded cycle table coverage."
            ),
            inputSchema={
                "type": "object",
                "properties": {},
            }
        ),
    ]
    return (
        core_tools
        + get_chart_tools()
        + get_cycle_tools()
        + get_purpose_tools()
        + get_timing_tools()
    )


def format_ephemeris_status(svc: AstroService) -> str:
    mode = svc.bridge.get_mode()
    reference = svc.reference

    lines = [
        f"Ephemeris mode: {mode}",
        f"pysweph version: {svc.bridge.version}",
    ]
    if mode == "moshier":
        lines.append("Precision: ~1 arcminute (Moshier built-in, no files needed)")
        lines.append("Set ephe_path in the config (or SE_EPHE_PATH) to use .se1 files.")
    else:
        lines.append("Precision: ~0.001 arcsecond (Swiss Ephemeris files)")
        lines.append(f"Ephemeris path: {svc.context.ephe_path}")

    lines.append(f"Lunar node: {svc.context.node_type}")
    for label, events in (("Venus Star Points", reference.vsp_events),
                          ("Mars phase events", reference.mars_events)):
        if events:
            lines.append(
                f"{label}: {len(events)} ({events[0].date.isoformat()} to {events[-1].date.isoformat()})"
            )
        else:
            lines.append(f"{label}: none loaded")
    return "\n".join(lines)


@app.call_tool()
async def call_tool(name: str, arguments: Any) -> list[TextContent]:
    """Handle tool calls."""
    arguments = arguments or {}

    try:
        if name == "check_ephemeris":
            return [TextContent(type="text", text=format_ephemeris_status(init_service()))]

        elif name in CHART_TOOL_NAMES:
            return await handle_chart_tool(name, arguments, init_service())

        elif name in CYCLE_TOOL_NAMES:
            return await handle_cycle_tool(name, arguments, init_service())

        elif name in PURPOSE_TOOL_NAMES:
            return await handle_purpose_tool(name, arguments, init_service())

        elif name in TIMING_TOOL_NAMES:
            return await handle_timing_tool(name, arguments, init_service())

        else:
            return [TextContent(type="text", text=f"Unknown tool: {name}")]

    except AstroError as e:
        logger.warning("Tool %s failed: %s", name, e)
        return [TextContent(type="text", text=f"Error: {e}")]
    except Exception as e:
        logger.exception("Unexpected error in tool %s", name)
        return [TextContent(type="text", text=f"Error: {e}")]


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr; stdout carries the MCP protocol."""
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def main():
    """Run the MCP server."""
    from mcp.server.stdio import stdio_server

    configure_logging(init_config().to_settings().log_level)

    async with stdio_server() as (read_stream, write_stream):
        await app.run(
            read_stream,
            write_stream,
            app.create_initialization_options()
        )


def run():
    """Console entry point; pip-generated wrappers call it without awaiting."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
