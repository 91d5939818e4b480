"""Shared formatting functions for MCP responses."""
import json
from typing import Any, Iterable, Optional

from .models import ListResult, RedmineModel


def format_json(payload: Any) -> str:
    """Pretty-print a payload as JSON for the tool output."""
    if isinstance(payload, RedmineModel):
        payload = payload.to_payload()
    return json.dumps(payload, indent=2, ensure_ascii=False)


def format_list(
    items: Iterable[RedmineModel],
    data: dict,
    offset: int = 0,
    limit: Optional[int] = None
) -> str:
    """Format a paginated listing as {items, total_count, offset, limit}.

    Counters come from Redmine's envelope; when Redmine omits them the item
    count and the requested offset/limit are used instead.
    """
    payloads = [item.to_payload() for item in items]
    result = ListResult(
        items=payloads,
        total_count=data.get("total_count", len(payloads)),
        offset=data.get("offset", offset),
        limit=data.get("limit", limit if limit is not None else len(payloads)),
    )
    return format_json(result.model_dump())


def format_confirmation(resource: str, resource_id: Any, action: str = "updated") -> str:
    """Format a confirmation for writes that return no body."""
    return f"{resource} #{resource_id} {action} successfully."
