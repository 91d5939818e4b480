"""Time entry tools: list logged time and log new time."""
import logging
from typing import Optional

from mcp.types import TextContent
from pydantic import ConfigDict, Field

from .. import formatters
from ..client import RedmineClient
from ..models import TimeEntry
from .base import ToolDefinition, ToolInput, PaginatedInput, text_result, IdOrIdentifier

logger = logging.getLogger("redmine-mcp.tools.time_entries")


class ListTimeEntriesInput(PaginatedInput):
    model_config = ConfigDict(populate_by_name=True)

    project_id: Optional[IdOrIdentifier] = Field(None, description="Filter by project ID or identifier")
    user_id: Optional[int] = Field(None, description="Filter by user ID")
    # "from" is a Python keyword
    from_date: Optional[str] = Field(None, alias="from", description="Start date filter (YYYY-MM-DD)")
    to: Optional[str] = Field(None, description="End date filter (YYYY-MM-DD)")


class CreateTimeEntryInput(ToolInput):
    """Either issue_id or project_id is needed; Redmine enforces it."""

    issue_id: Optional[int] = Field(
        None, description="Issue ID to log time against (either issue_id or project_id required)"
    )
    project_id: Optional[IdOrIdentifier] = Field(
        None, description="Project ID to log time against (either issue_id or project_id required)"
    )
    hours: float = Field(..., gt=0, description="Number of hours spent")
    activity_id: Optional[int] = Field(None, description="Time entry activity ID")
    comments: Optional[str] = Field(None, description="Description of the work done")
    spent_on: Optional[str] = Field(
        None, description="Date the time was spent (YYYY-MM-DD, defaults to today)"
    )


async def handle_list_time_entries(params: ListTimeEntriesInput, client: RedmineClient) -> list[TextContent]:
    data = await client.get("/time_entries.json", params.model_dump(by_alias=True))
    entries = [TimeEntry.model_validate(item) for item in data.get("time_entries", [])]
    logger.info(f"Successfully listed {len(entries)} time entries")

    return text_result(formatters.format_list(entries, data, params.offset, params.limit))


async def handle_create_time_entry(params: CreateTimeEntryInput, client: RedmineClient) -> list[TextContent]:
    """Log time against an issue or project."""
    data = await client.post("/time_entries.json", {"time_entry": params.model_dump(exclude_none=True)})
    entry = TimeEntry.model_validate(data["time_entry"])
    logger.info(f"Successfully logged {entry.hours}h as time entry {entry.id}")

    return text_result(formatters.format_json(entry))


TOOLS = [
    ToolDefinition(
        name="list-time-entries",
        description="List time entries from Redmine with optional filters",
        input_model=ListTimeEntriesInput,
        handler=handle_list_time_entries,
    ),
    ToolDefinition(
        name="create-time-entry",
        description="Log time in Redmine",
        input_model=CreateTimeEntryInput,
        handler=handle_create_time_entry,
    ),
]
