"""MCP tool groups and report formatting."""

from .analysis_tools import (
    find_planets_in_houses,
    format_chart_report,
    format_house_report,
)
from .chart_tools import CHART_TOOL_NAMES, get_chart_tools, handle_chart_tool
from .cycle_tools import CYCLE_TOOL_NAMES, get_cycle_tools, handle_cycle_tool
from .purpose_tools import PURPOSE_TOOL_NAMES, get_purpose_tools, handle_purpose_tool
from .timing_tools import TIMING_TOOL_NAMES, get_timing_tools, handle_timing_tool

__all__ = [
    'find_planets_in_houses',
    'format_chart_report',
    'format_house_report',
    'CHART_TOOL_NAMES',
    'get_chart_tools',
    'handle_chart_tool',
    'CYCLE_TOOL_NAMES',
    'get_cycle_tools',
    'handle_cycle_tool',
    'PURPOSE_TOOL_NAMES',
    'get_purpose_tools',
    'handle_purpose_tool',
    'TIMING_TOOL_NAMES',
    'get_timing_tools',
    'handle_timing_tool',
]
