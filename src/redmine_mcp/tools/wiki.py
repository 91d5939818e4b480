"""Wiki tools: read a page and list a project's pages."""
import logging
from typing import Optional
from urllib.parse import quote

from mcp.types import TextContent
from pydantic import Field

from .. import formatters
from ..client import RedmineClient
from ..models import WikiPage, WikiPageIndex
from .base import ToolDefinition, ToolInput, text_result, IdOrIdentifier

logger = logging.getLogger("redmine-mcp.tools.wiki")

# Title Redmine uses for a project's wiki start page
MAIN_PAGE_TITLE = "Wiki"


class GetWikiPageInput(ToolInput):
    project_id: IdOrIdentifier = Field(..., description="Project ID or identifier")
    title: str = Field(
        ..., description=f"Wiki page title (use '{MAIN_PAGE_TITLE}' for the main page)"
    )
    version: Optional[int] = Field(None, description="Specific version number to retrieve")


class ListWikiPagesInput(ToolInput):
    project_id: IdOrIdentifier = Field(..., description="Project ID or identifier")


def wiki_page_path(project_id: str, title: str, version: Optional[int] = None) -> str:
    """Build the API path of a wiki page, or of one of its versions."""
    encoded_title = quote(title, safe="!~*'()")
    if version:
        return f"/projects/{project_id}/wiki/{encoded_title}/{version}.json"
    return f"/projects/{project_id}/wiki/{encoded_title}.json"


async def handle_get_wiki_page(params: GetWikiPageInput, client: RedmineClient) -> list[TextContent]:
    data = await client.get(wiki_page_path(params.project_id, params.title, params.version))
    page = WikiPage.model_validate(data["wiki_page"])
    logger.info(f"Successfully retrieved wiki page {params.project_id}/{page.title} (version {page.version})")

    return text_result(formatters.format_json(page))


async def handle_list_wiki_pages(params: ListWikiPagesInput, client: RedmineClient) -> list[TextContent]:
    """List every wiki page of a project (Redmine does not paginate the index)."""
    data = await client.get(f"/projects/{params.project_id}/wiki/index.json")
    pages = [WikiPageIndex.model_validate(item) for item in data.get("wiki_pages", [])]
    logger.info(f"Successfully listed {len(pages)} wiki pages for project {params.project_id}")

    return text_result(formatters.format_json([page.to_payload() for page in pages]))


TOOLS = [
    ToolDefinition(
        name="get-wiki-page",
        description="Get a wiki page from a Redmine project",
        input_model=GetWikiPageInput,
        handler=handle_get_wiki_page,
    ),
    ToolDefinition(
        name="list-wiki-pages",
        description="List all wiki pages in a Redmine project",
        input_model=ListWikiPagesInput,
        handler=handle_list_wiki_pages,
    ),
]
