"""Shared fixtures: a fake Redmine served through httpx.MockTransport."""
import json
from typing import Any, Callable, Optional, Union

import httpx
import pytest

from redmine_mcp.client import RedmineClient
from redmine_mcp.config import RedmineConfig

BASE_URL = "https://redmine.example.com"
API_KEY = "a1b2c3d4e5f6-secret-api-key"

Responder = Union[httpx.Response, Callable[[httpx.Request], Any]]


class FakeRedmine:
    """Records every request and answers with canned responses keyed by method and path."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Callable[[httpx.Request], Any]] = {}

    def respond(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: Optional[Any] = None,
        text: Optional[str] = None,
        handler: Optional[Callable[[httpx.Request], Any]] = None
    ) -> None:
        if handler is None:
            def handler(request, status=status, json=json, text=text):
                if json is not None:
                    return httpx.Response(status, json=json)
                return httpx.Response(status, text=text or "")
        self._routes[(method, path)] = handler

    def handler(self, request: httpx.Request):
        self.requests.append(request)
        route = self._routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"errors": [f"No route for {request.method} {request.url.path}"]})
        return route(request)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last_request.content)


def make_client(fake: FakeRedmine, timeout_ms: int = 30000, **config) -> RedmineClient:
    config.setdefault("url", BASE_URL)
    if "username" not in config:
        config.setdefault("api_key", API_KEY)
    return RedmineClient(
        RedmineConfig(**config),
        timeout_ms=timeout_ms,
        transport=httpx.MockTransport(fake.handler)
    )


def make_issue(**overrides) -> dict:
    issue = {
        "id": 42,
        "project": {"id": 1, "name": "Platform"},
        "tracker": {"id": 1, "name": "Bug"},
        "status": {"id": 1, "name": "New"},
        "priority": {"id": 2, "name": "Normal"},
        "author": {"id": 5, "name": "Ada Lovelace"},
        "subject": "Login page crashes",
        "description": "Steps to reproduce...",
        "start_date": "2024-03-01",
        "done_ratio": 0,
        "is_private": False,
        "estimated_hours": None,
        "created_on": "2024-03-01T10:00:00Z",
        "updated_on": "2024-03-02T09:30:00Z",
        "closed_on": None,
    }
    issue.update(overrides)
    return issue


def make_project(**overrides) -> dict:
    project = {
        "id": 1,
        "name": "Platform",
        "identifier": "platform",
        "description": "Core platform work",
        "status": 1,
        "is_public": True,
        "created_on": "2023-01-10T08:00:00Z",
        "updated_on": "2024-02-01T08:00:00Z",
    }
    project.update(overrides)
    return project


def make_user(**overrides) -> dict:
    user = {
        "id": 5,
        "login": "ada",
        "firstname": "Ada",
        "lastname": "Lovelace",
        "mail": "ada@example.com",
        "created_on": "2023-01-10T08:00:00Z",
        "last_login_on": "2024-03-02T07:00:00Z",
    }
    user.update(overrides)
    return user


def make_time_entry(**overrides) -> dict:
    entry = {
        "id": 900,
        "project": {"id": 1, "name": "Platform"},
        "issue": {"id": 42},
        "user": {"id": 5, "name": "Ada Lovelace"},
        "activity": {"id": 9, "name": "Development"},
        "hours": 1.5,
        "comments": "Investigated crash",
        "spent_on": "2024-03-02",
        "created_on": "2024-03-02T12:00:00Z",
        "updated_on": "2024-03-02T12:00:00Z",
    }
    entry.update(overrides)
    return entry


@pytest.fixture
def redmine() -> FakeRedmine:
    return FakeRedmine()


@pytest.fixture
def client(redmine: FakeRedmine) -> RedmineClient:
    return make_client(redmine)
