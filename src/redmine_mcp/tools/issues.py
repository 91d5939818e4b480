"""Issue tools: list, get, create and update Redmine issues."""
import logging
from typing import Optional

from mcp.types import TextContent
from pydantic import Field

from .. import formatters
from ..client import RedmineClient
from ..models import Issue
from .base import ToolDefinition, ToolInput, PaginatedInput, text_result, IdOrIdentifier

logger = logging.getLogger("redmine-mcp.tools.issues")

ISSUE_INCLUDES = "children, attachments, relations, changesets, journals, watchers, allowed_statuses"


class ListIssuesInput(PaginatedInput):
    project_id: Optional[IdOrIdentifier] = Field(None, description="Project ID or identifier to filter by")
    status_id: Optional[IdOrIdentifier] = Field(
        None,
        description="Status filter: 'open', 'closed', '*' for all, or a specific status ID"
    )
    tracker_id: Optional[int] = Field(None, description="Tracker ID to filter by")
    assigned_to_id: Optional[IdOrIdentifier] = Field(
        None, description="Assignee user ID, or 'me' for current user"
    )
    query_id: Optional[int] = Field(None, description="Saved query ID to use")
    sort: Optional[str] = Field(
        None,
        description="Sort field and direction, e.g. 'updated_on:desc', 'priority:asc'"
    )


class GetIssueInput(ToolInput):
    issue_id: int = Field(..., description="Issue ID")
    include: Optional[str] = Field(
        None,
        description=f"Comma-separated list of associations to include: {ISSUE_INCLUDES}"
    )


class CreateIssueInput(ToolInput):
    project_id: IdOrIdentifier = Field(..., description="Project ID or identifier (required)")
    subject: str = Field(..., description="Issue subject/title")
    description: Optional[str] = Field(None, description="Issue description (supports Textile/Markdown)")
    tracker_id: Optional[int] = Field(None, description="Tracker ID")
    status_id: Optional[int] = Field(None, description="Status ID")
    priority_id: Optional[int] = Field(None, description="Priority ID")
    assigned_to_id: Optional[int] = Field(None, description="User ID to assign to")
    category_id: Optional[int] = Field(None, description="Issue category ID")
    fixed_version_id: Optional[int] = Field(None, description="Target version ID")
    parent_issue_id: Optional[int] = Field(None, description="Parent issue ID")
    estimated_hours: Optional[float] = Field(None, description="Estimated hours")
    start_date: Optional[str] = Field(None, description="Start date (YYYY-MM-DD)")
    due_date: Optional[str] = Field(None, description="Due date (YYYY-MM-DD)")
    is_private: Optional[bool] = Field(None, description="Whether the issue is private")


class UpdateIssueInput(ToolInput):
    issue_id: int = Field(..., description="Issue ID to update")
    subject: Optional[str] = Field(None, description="New subject/title")
    description: Optional[str] = Field(None, description="New description")
    status_id: Optional[int] = Field(None, description="New status ID")
    priority_id: Optional[int] = Field(None, description="New priority ID")
    assigned_to_id: Optional[int] = Field(None, description="New assignee user ID")
    tracker_id: Optional[int] = Field(None, description="New tracker ID")
    category_id: Optional[int] = Field(None, description="New category ID")
    fixed_version_id: Optional[int] = Field(None, description="New target version ID")
    done_ratio: Optional[int] = Field(None, ge=0, le=100, description="Completion percentage (0-100)")
    estimated_hours: Optional[float] = Field(None, description="New estimated hours")
    notes: Optional[str] = Field(None, description="Comment/note to add to the issue")
    private_notes: Optional[bool] = Field(None, description="Whether the note is private")


async def handle_list_issues(params: ListIssuesInput, client: RedmineClient) -> list[TextContent]:
    """List issues with optional filters.

    Closed issues are only returned when status_id is 'closed' or '*'
    (Redmine lists open issues by default).
    """
    data = await client.get("/issues.json", params.model_dump())
    issues = [Issue.model_validate(item) for item in data.get("issues", [])]
    logger.info(f"Successfully listed {len(issues)} of {data.get('total_count', len(issues))} issues")

    return text_result(formatters.format_list(issues, data, params.offset, params.limit))


async def handle_get_issue(params: GetIssueInput, client: RedmineClient) -> list[TextContent]:
    """Get a single issue, optionally with associations such as journals."""
    data = await client.get(f"/issues/{params.issue_id}.json", {"include": params.include})
    issue = Issue.model_validate(data["issue"])
    logger.info(f"Successfully retrieved issue #{issue.id}: {issue.subject}")

    return text_result(formatters.format_json(issue))


async def handle_create_issue(params: CreateIssueInput, client: RedmineClient) -> list[TextContent]:
    """Create an issue; Redmine answers with the created resource."""
    data = await client.post("/issues.json", {"issue": params.model_dump(exclude_none=True)})
    issue = Issue.model_validate(data["issue"])
    logger.info(f"Successfully created issue #{issue.id} in project {params.project_id}")

    return text_result(formatters.format_json(issue))


async def handle_update_issue(params: UpdateIssueInput, client: RedmineClient) -> list[TextContent]:
    """Update an issue and optionally add a note.

    Redmine answers a successful update with an empty body, so the tool
    returns a confirmation rather than the updated issue.
    """
    fields = params.model_dump(exclude_none=True, exclude={"issue_id"})
    await client.put(f"/issues/{params.issue_id}.json", {"issue": fields})
    logger.info(f"Successfully updated issue #{params.issue_id} (fields: {', '.join(fields) or 'none'})")

    return text_result(formatters.format_confirmation("Issue", params.issue_id))


TOOLS = [
    ToolDefinition(
        name="list-issues",
        description="List issues from Redmine with optional filters",
        input_model=ListIssuesInput,
        handler=handle_list_issues,
    ),
    ToolDefinition(
        name="get-issue",
        description="Get a single Redmine issue by ID with full details",
        input_model=GetIssueInput,
        handler=handle_get_issue,
    ),
    ToolDefinition(
        name="create-issue",
        description="Create a new issue in Redmine",
        input_model=CreateIssueInput,
        handler=handle_create_issue,
    ),
    ToolDefinition(
        name="update-issue",
        description="Update an existing Redmine issue",
        input_model=UpdateIssueInput,
        handler=handle_update_issue,
    ),
]
