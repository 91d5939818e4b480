"""User tools: the current user and the (admin-only) user list."""
import logging
from typing import Optional

from mcp.types import TextContent
from pydantic import Field

from .. import formatters
from ..client import RedmineClient
from ..models import User
from .base import ToolDefinition, ToolInput, PaginatedInput, text_result

logger = logging.getLogger("redmine-mcp.tools.users")

CURRENT_USER_INCLUDES = "memberships,groups"


class GetCurrentUserInput(ToolInput):
    pass


class ListUsersInput(PaginatedInput):
    status: Optional[int] = Field(
        None,
        description="Filter by status: 0=anonymous, 1=active, 2=registered, 3=locked"
    )
    name: Optional[str] = Field(None, description="Filter by name or login (partial match)")
    group_id: Optional[int] = Field(None, description="Filter by group ID")


async def handle_get_current_user(params: GetCurrentUserInput, client: RedmineClient) -> list[TextContent]:
    """Get the authenticated user with memberships and groups."""
    data = await client.get("/users/current.json", {"include": CURRENT_USER_INCLUDES})
    user = User.model_validate(data["user"])
    logger.info(f"Successfully retrieved current user: {user.login}")

    return text_result(formatters.format_json(user))


async def handle_list_users(params: ListUsersInput, client: RedmineClient) -> list[TextContent]:
    """List users.

    Redmine only allows administrators to list users; for anyone else the
    call fails with Redmine's own 403.
    """
    data = await client.get("/users.json", params.model_dump())
    users = [User.model_validate(item) for item in data.get("users", [])]
    logger.info(f"Successfully listed {len(users)} users")

    return text_result(formatters.format_list(users, data, params.offset, params.limit))


TOOLS = [
    ToolDefinition(
        name="get-current-user",
        description="Get the currently authenticated Redmine user",
        input_model=GetCurrentUserInput,
        handler=handle_get_current_user,
    ),
    ToolDefinition(
        name="list-users",
        description="List Redmine users (requires admin privileges)",
        input_model=ListUsersInput,
        handler=handle_list_users,
    ),
]
