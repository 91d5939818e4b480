"""Project tools: list projects and fetch one by id or identifier."""
import logging
from typing import Optional

from mcp.types import TextContent
from pydantic import Field

from .. import formatters
from ..client import RedmineClient
from ..models import Project
from .base import ToolDefinition, ToolInput, PaginatedInput, text_result, IdOrIdentifier

logger = logging.getLogger("redmine-mcp.tools.projects")

PROJECT_INCLUDES = "trackers, issue_categories, enabled_modules, time_entry_activities"


class ListProjectsInput(PaginatedInput):
    include: Optional[str] = Field(None, description=f"Comma-separated associations: {PROJECT_INCLUDES}")


class GetProjectInput(ToolInput):
    project_id: IdOrIdentifier = Field(..., description="Project numeric ID or string identifier")
    include: Optional[str] = Field(None, description=f"Comma-separated associations: {PROJECT_INCLUDES}")


async def handle_list_projects(params: ListProjectsInput, client: RedmineClient) -> list[TextContent]:
    """List all projects visible to the authenticated user."""
    data = await client.get("/projects.json", params.model_dump())
    projects = [Project.model_validate(item) for item in data.get("projects", [])]
    logger.info(f"Successfully listed {len(projects)} projects")

    return text_result(formatters.format_list(projects, data, params.offset, params.limit))


async def handle_get_project(params: GetProjectInput, client: RedmineClient) -> list[TextContent]:
    data = await client.get(f"/projects/{params.project_id}.json", {"include": params.include})
    project = Project.model_validate(data["project"])
    logger.info(f"Successfully retrieved project {project.identifier}: {project.name}")

    return text_result(formatters.format_json(project))


TOOLS = [
    ToolDefinition(
        name="list-projects",
        description="List all accessible projects in Redmine",
        input_model=ListProjectsInput,
        handler=handle_list_projects,
    ),
    ToolDefinition(
        name="get-project",
        description="Get a single Redmine project by ID or identifier",
        input_model=GetProjectInput,
        handler=handle_get_project,
    ),
]
