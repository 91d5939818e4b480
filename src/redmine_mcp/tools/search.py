"""Search tool: full-text search across issues, wiki pages, news and more."""
import logging
from typing import Optional

from mcp.types import TextContent
from pydantic import Field

from .. import formatters
from ..client import RedmineClient
from ..models import SearchResult
from .base import ToolDefinition, PaginatedInput, text_result, IdOrIdentifier

logger = logging.getLogger("redmine-mcp.tools.search")


class SearchInput(PaginatedInput):
    query: str = Field(..., description="Search query string")
    scope: Optional[IdOrIdentifier] = Field(None, description="Limit search to a specific project ID or identifier")
    titles_only: bool = Field(False, description="Search only in titles (default: false)")
    open_issues: bool = Field(False, description="Only return open issues (default: false)")


def search_path(scope: Optional[str]) -> str:
    return f"/projects/{scope}/search.json" if scope else "/search.json"


async def handle_search(params: SearchInput, client: RedmineClient) -> list[TextContent]:
    """Search Redmine, optionally within one project.

    Redmine reads the boolean filters as present-or-absent flags, so they are
    sent as 1 when set and omitted otherwise.
    """
    query = {
        "q": params.query,
        "limit": params.limit,
        "offset": params.offset,
        "titles_only": 1 if params.titles_only else None,
        "open_issues": 1 if params.open_issues else None,
    }
    data = await client.get(search_path(params.scope), query)
    results = [SearchResult.model_validate(item) for item in data.get("results", [])]
    logger.info(f"Search for {params.query!r} returned {len(results)} results")

    return text_result(formatters.format_list(results, data, params.offset, params.limit))


TOOLS = [
    ToolDefinition(
        name="search-redmine",
        description="Search across Redmine for issues, projects, wiki pages, and more",
        input_model=SearchInput,
        handler=handle_search,
    ),
]
