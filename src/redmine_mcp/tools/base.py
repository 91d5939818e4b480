"""Building blocks shared by all tool groups."""
from dataclasses import dataclass
from typing import Annotated, Awaitable, Callable, Type

from mcp.types import TextContent, Tool
from pydantic import BaseModel, ConfigDict, Field, WithJsonSchema

from ..client import RedmineClient

DEFAULT_LIMIT = 25
MAX_LIMIT = 100

# Redmine accepts a numeric id or a string identifier; both are sent as strings
IdOrIdentifier = Annotated[
    str, WithJsonSchema({"anyOf": [{"type": "string"}, {"type": "integer"}]})
]


class UnknownToolError(KeyError):
    """Raised when a tool name is not registered."""
    pass


class ToolInput(BaseModel):
    """Base for tool argument models.

    Unknown arguments are ignored, and numbers are accepted where Redmine takes
    an id-or-identifier string.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class PaginatedInput(ToolInput):
    """Arguments shared by every listing tool."""

    limit: int = Field(
        DEFAULT_LIMIT, ge=1, le=MAX_LIMIT,
        description=f"Max results to return (1-{MAX_LIMIT}, default {DEFAULT_LIMIT})"
    )
    offset: int = Field(0, ge=0, description="Offset for pagination (default 0)")


ToolHandler = Callable[[BaseModel, RedmineClient], Awaitable[list[TextContent]]]


@dataclass(frozen=True)
class ToolDefinition:
    """A named MCP tool: description, argument model and handler."""

    name: str
    description: str
    input_model: Type[ToolInput]
    handler: ToolHandler

    def to_tool(self) -> Tool:
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_model.model_json_schema()
        )

    async def run(self, arguments: dict, client: RedmineClient) -> list[TextContent]:
        """Validate arguments, then call the handler.

        Raises pydantic.ValidationError before any request is made when the
        arguments do not match the tool's schema.
        """
        params = self.input_model.model_validate(arguments or {})
        return await self.handler(params, client)


def text_result(text: str) -> list[TextContent]:
    return [TextContent(type="text", text=text)]
