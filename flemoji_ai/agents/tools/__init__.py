"""Agent tool definitions and registry."""

from .registry import ToolArgs, ToolRegistry, get_default_registry
from .discovery_tools import DISCOVERY_TOOL_NAMES
from .playback_tools import PLAYBACK_TOOL_NAMES
from .analytics_tools import ANALYTICS_TOOL_NAMES

__all__ = [
    "ToolArgs",
    "ToolRegistry",
    "get_default_registry",
    "DISCOVERY_TOOL_NAMES",
    "PLAYBACK_TOOL_NAMES",
    "ANALYTICS_TOOL_NAMES",
]
