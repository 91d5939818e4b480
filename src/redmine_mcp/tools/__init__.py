"""MCP tool registry for Redmine.

Each group module exposes a static TOOLS list; this module composes them into
the single registry served by the MCP server.
"""
from typing import Any, Optional

from mcp.types import TextContent, Tool

from ..client import RedmineClient
from . import issues, projects, users, time_entries, wiki, search
from .base import ToolDefinition, UnknownToolError

TOOL_GROUPS = (issues, projects, users, time_entries, wiki, search)


def _build_registry() -> dict[str, ToolDefinition]:
    registry: dict[str, ToolDefinition] = {}
    for group in TOOL_GROUPS:
        for definition in group.TOOLS:
            if definition.name in registry:
                raise ValueError(f"Duplicate tool name: {definition.name}")
            registry[definition.name] = definition
    return registry


REGISTRY = _build_registry()


def get_tools() -> list[Tool]:
    """Get the list of all MCP tools for Redmine."""
    return [definition.to_tool() for definition in REGISTRY.values()]


def get_tool(name: str) -> ToolDefinition:
    try:
        return REGISTRY[name]
    except KeyError:
        raise UnknownToolError(f"Unknown tool: {name}") from None


async def call_tool(
    name: str,
    arguments: Optional[dict[str, Any]],
    client: RedmineClient
) -> list[TextContent]:
    """Validate arguments and run the named tool."""
    return await get_tool(name).run(arguments or {}, client)


__all__ = [
    "TOOL_GROUPS",
    "REGISTRY",
    "ToolDefinition",
    "UnknownToolError",
    "get_tools",
    "get_tool",
    "call_tool",
]
