"""Pydantic models for Redmine API resources.

These are transient DTOs built from Redmine JSON responses. They accept fields
they do not declare (associations requested through ``include``, plugin fields)
and are dumped with only the fields Redmine actually returned, so the tools
relay Redmine's data without adding or dropping anything.

Only identifying fields are required. Everything else is optional, since a
write that Redmine already applied must not be reported as a failure because
its echo omits a field.
"""
from typing import Optional, Union, Any

from pydantic import BaseModel, ConfigDict, Field


class RedmineModel(BaseModel):
    """Base for all Redmine resources."""

    model_config = ConfigDict(extra="allow")

    def to_payload(self) -> dict[str, Any]:
        """Dump back to JSON-compatible data, keeping only returned fields."""
        return self.model_dump(mode="json", exclude_unset=True)


class IdName(RedmineModel):
    """Minimal reference to a related resource (project, tracker, user, ...)."""

    id: int
    name: Optional[str] = None


class CustomField(RedmineModel):
    id: int
    name: Optional[str] = None
    value: Union[str, list[str], None] = None


# Issues

class JournalDetail(RedmineModel):
    """A single field change recorded in an issue journal."""

    property: Optional[str] = None
    name: Optional[str] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None


class Journal(RedmineModel):
    id: int
    user: Optional[IdName] = None
    notes: Optional[str] = None
    created_on: Optional[str] = None
    details: list[JournalDetail] = Field(default_factory=list)


class Issue(RedmineModel):
    id: int
    project: Optional[IdName] = None
    tracker: Optional[IdName] = None
    status: Optional[IdName] = None
    priority: Optional[IdName] = None
    author: Optional[IdName] = None
    assigned_to: Optional[IdName] = None
    category: Optional[IdName] = None
    fixed_version: Optional[IdName] = None
    subject: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[str] = None
    due_date: Optional[str] = None
    done_ratio: Optional[int] = None
    is_private: Optional[bool] = None
    estimated_hours: Optional[float] = None
    spent_hours: Optional[float] = None
    created_on: Optional[str] = None
    updated_on: Optional[str] = None
    closed_on: Optional[str] = None
    journals: Optional[list[Journal]] = None
    custom_fields: Optional[list[CustomField]] = None


# Projects

class EnabledModule(RedmineModel):
    id: int
    name: Optional[str] = None


class Project(RedmineModel):
    id: int
    name: Optional[str] = None
    identifier: Optional[str] = None
    description: Optional[str] = None
    status: Optional[int] = None
    is_public: Optional[bool] = None
    homepage: Optional[str] = None
    created_on: Optional[str] = None
    updated_on: Optional[str] = None
    parent: Optional[IdName] = None
    trackers: Optional[list[IdName]] = None
    issue_categories: Optional[list[IdName]] = None
    enabled_modules: Optional[list[EnabledModule]] = None
    custom_fields: Optional[list[CustomField]] = None


# Users

class User(RedmineModel):
    id: int
    login: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    mail: Optional[str] = None
    created_on: Optional[str] = None
    updated_on: Optional[str] = None
    last_login_on: Optional[str] = None
    api_key: Optional[str] = None
    status: Optional[int] = None
    custom_fields: Optional[list[CustomField]] = None


# Time entries

class TimeEntry(RedmineModel):
    id: int
    project: Optional[IdName] = None
    issue: Optional[IdName] = None
    user: Optional[IdName] = None
    activity: Optional[IdName] = None
    hours: Optional[float] = None
    comments: Optional[str] = None
    spent_on: Optional[str] = None
    created_on: Optional[str] = None
    updated_on: Optional[str] = None
    custom_fields: Optional[list[CustomField]] = None


# Wiki

class WikiPage(RedmineModel):
    title: str
    text: Optional[str] = None
    version: Optional[int] = None
    author: Optional[IdName] = None
    comments: Optional[str] = None
    created_on: Optional[str] = None
    updated_on: Optional[str] = None


class WikiPageIndex(RedmineModel):
    """Lightweight wiki page entry returned by the wiki index."""

    title: str
    version: Optional[int] = None
    created_on: Optional[str] = None
    updated_on: Optional[str] = None


# Search

class SearchResult(RedmineModel):
    id: int
    title: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    datetime: Optional[str] = None


class ListResult(BaseModel):
    """Paginated listing returned by every list tool."""

    items: list[dict[str, Any]]
    total_count: int
    offset: int
    limit: int
