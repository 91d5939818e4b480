"""Tests for the Redmine HTTP client: auth, query strings, errors and timeouts."""
import asyncio
import base64
import json

import httpx
import pytest

from redmine_mcp.client import RedmineClient
from redmine_mcp.config import RedmineConfig
from redmine_mcp.errors import RedmineApiError

from conftest import API_KEY, BASE_URL, FakeRedmine, make_client


class TestAuthHeaders:
    """Test the fixed header set built at construction."""

    def test_api_key_header(self):
        """API key auth sends X-Redmine-API-Key and no Authorization header."""
        client = RedmineClient(RedmineConfig(url=BASE_URL, api_key="key123"))

        headers = client.headers
        assert headers["X-Redmine-API-Key"] == "key123"
        assert "Authorization" not in headers
        assert headers["Content-Type"] == "application/json"
        assert headers["Accept"] == "application/json"

    def test_basic_auth_header(self):
        """Basic auth sends base64(username:password)."""
        client = RedmineClient(RedmineConfig(url=BASE_URL, username="ada", password="pw"))

        expected = base64.b64encode(b"ada:pw").decode("ascii")
        assert client.headers["Authorization"] == f"Basic {expected}"
        assert "X-Redmine-API-Key" not in client.headers

    def test_api_key_wins_over_basic_auth(self):
        """When both are configured only the API key header is sent."""
        client = RedmineClient(
            RedmineConfig(url=BASE_URL, api_key="key123", username="ada", password="pw")
        )

        assert client.headers["X-Redmine-API-Key"] == "key123"
        assert "Authorization" not in client.headers

    def test_headers_are_read_only_copy(self):
        client = RedmineClient(RedmineConfig(url=BASE_URL, api_key="key123"))
        client.headers["X-Redmine-API-Key"] = "tampered"
        assert client.headers["X-Redmine-API-Key"] == "key123"

    @pytest.mark.asyncio
    async def test_headers_sent_on_request(self, redmine, client):
        redmine.respond("GET", "/users/current.json", json={"user": {}})

        await client.get("/users/current.json")

        assert redmine.last_request.headers["X-Redmine-API-Key"] == API_KEY
        assert redmine.last_request.headers["Accept"] == "application/json"


class TestQueryParams:
    """Test query-string construction."""

    def test_unset_values_are_dropped(self):
        params = RedmineClient.build_params({
            "project_id": None,
            "status_id": "",
            "offset": 0,
            "limit": 25,
            "sort": "updated_on:desc",
        })

        assert params == {"offset": "0", "limit": "25", "sort": "updated_on:desc"}

    def test_no_params(self):
        assert RedmineClient.build_params(None) == {}
        assert RedmineClient.build_params({}) == {}

    @pytest.mark.asyncio
    async def test_query_string_on_the_wire(self, redmine, client):
        redmine.respond("GET", "/issues.json", json={"issues": []})

        await client.get("/issues.json", {"project_id": "platform", "tracker_id": None, "q": ""})

        request = redmine.last_request
        assert str(request.url).startswith(f"{BASE_URL}/issues.json")
        assert request.url.params["project_id"] == "platform"
        assert "tracker_id" not in request.url.params
        assert "q" not in request.url.params


class TestResponses:
    """Test successful response handling."""

    @pytest.mark.asyncio
    async def test_json_body_is_parsed(self, redmine, client):
        redmine.respond("GET", "/projects/1.json", json={"project": {"id": 1}})

        result = await client.get("/projects/1.json")

        assert result == {"project": {"id": 1}}

    @pytest.mark.asyncio
    async def test_empty_body_yields_empty_object(self, redmine, client):
        """PUT/DELETE answer with no body; that is a success, not a parse error."""
        redmine.respond("PUT", "/issues/42.json", status=204)
        redmine.respond("DELETE", "/issues/42.json", status=200, text="")

        assert await client.put("/issues/42.json", {"issue": {"notes": "hi"}}) == {}
        assert await client.delete("/issues/42.json") == {}

    @pytest.mark.asyncio
    async def test_request_body_is_json_encoded(self, redmine, client):
        redmine.respond("POST", "/issues.json", status=201, json={"issue": {"id": 1}})

        await client.post("/issues.json", {"issue": {"subject": "Fix bug"}})

        assert redmine.last_request.method == "POST"
        assert redmine.last_json() == {"issue": {"subject": "Fix bug"}}

    @pytest.mark.asyncio
    async def test_malformed_json_is_fatal(self, redmine, client):
        redmine.respond("GET", "/issues.json", text="<html>not json</html>")

        with pytest.raises(json.JSONDecodeError):
            await client.get("/issues.json")


class TestApplicationErrors:
    """Test non-2xx responses."""

    @pytest.mark.asyncio
    async def test_errors_list_is_joined(self, redmine, client):
        redmine.respond("POST", "/issues.json", status=422, json={"errors": ["A", "B"]})

        with pytest.raises(RedmineApiError) as exc_info:
            await client.post("/issues.json", {"issue": {}})

        error = exc_info.value
        assert error.status_code == 422
        assert error.detail == "A, B"
        assert "A, B" in str(error)
        assert "422" in str(error)

    @pytest.mark.asyncio
    async def test_single_error_value(self, redmine, client):
        redmine.respond("GET", "/issues.json", status=400, json={"errors": "Bad filter"})

        with pytest.raises(RedmineApiError) as exc_info:
            await client.get("/issues.json")

        assert exc_info.value.detail == "Bad filter"

    @pytest.mark.asyncio
    async def test_non_json_body_is_attached(self, redmine, client):
        redmine.respond("GET", "/issues/7.json", status=500, text="Internal failure")

        with pytest.raises(RedmineApiError) as exc_info:
            await client.get("/issues/7.json")

        assert exc_info.value.status_code == 500
        assert "Internal failure" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_empty_error_body_has_no_detail(self, redmine, client):
        redmine.respond("GET", "/issues/7.json", status=404)

        with pytest.raises(RedmineApiError) as exc_info:
            await client.get("/issues/7.json")

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail is None
        assert str(exc_info.value) == "Redmine API error: 404 Not Found"


class TestTransportFailures:
    """Test timeouts and connection failures."""

    @pytest.mark.asyncio
    async def test_timeout_is_408(self):
        fake = FakeRedmine()

        async def slow(request):
            await asyncio.sleep(5)
            return httpx.Response(200, json={})

        fake.respond("GET", "/issues.json", handler=slow)
        client = make_client(fake, timeout_ms=50)

        with pytest.raises(RedmineApiError) as exc_info:
            await client.get("/issues.json")

        error = exc_info.value
        assert error.status_code == 408
        assert error.is_timeout
        assert "50ms" in str(error)

    @pytest.mark.asyncio
    async def test_httpx_timeout_is_408(self):
        fake = FakeRedmine()

        def read_timeout(request):
            raise httpx.ReadTimeout("timed out", request=request)

        fake.respond("GET", "/projects.json", handler=read_timeout)
        client = make_client(fake, timeout_ms=1000)

        with pytest.raises(RedmineApiError) as exc_info:
            await client.get("/projects.json")

        assert exc_info.value.status_code == 408
        assert "1000ms" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_connection_refused_is_status_0(self):
        fake = FakeRedmine()

        def refused(request):
            raise httpx.ConnectError("[Errno 111] Connection refused", request=request)

        fake.respond("GET", "/issues.json", handler=refused)
        client = make_client(fake)

        with pytest.raises(RedmineApiError) as exc_info:
            await client.get("/issues.json")

        error = exc_info.value
        assert error.status_code == 0
        assert error.is_transport_error
        assert "Connection refused" in str(error)


class TestCredentialsNeverLeak:
    """Test that error messages never contain credentials."""

    @pytest.mark.asyncio
    async def test_api_key_absent_from_failures(self):
        fake = FakeRedmine()

        async def slow(request):
            await asyncio.sleep(5)

        def refused(request):
            # Simulate a diagnostic that echoes request headers
            raise httpx.ConnectError(
                f"refused (key={request.headers['X-Redmine-API-Key']})", request=request
            )

        def unauthorized(request):
            return httpx.Response(401, text=f"Invalid key {request.headers['X-Redmine-API-Key']}")

        fake.respond("GET", "/slow.json", handler=slow)
        fake.respond("GET", "/refused.json", handler=refused)
        fake.respond("GET", "/unauthorized.json", handler=unauthorized)
        client = make_client(fake, timeout_ms=50)

        messages = []
        for path in ("/slow.json", "/refused.json", "/unauthorized.json"):
            with pytest.raises(RedmineApiError) as exc_info:
                await client.get(path)
            messages.append(str(exc_info.value))

        assert len(messages) == 3
        for message in messages:
            assert API_KEY not in message

    @pytest.mark.asyncio
    async def test_password_absent_from_failures(self):
        fake = FakeRedmine()

        def unauthorized(request):
            return httpx.Response(
                401, text=f"Rejected {request.headers['Authorization']} for hunter2"
            )

        fake.respond("GET", "/users/current.json", handler=unauthorized)
        client = make_client(fake, username="ada", password="hunter2")

        with pytest.raises(RedmineApiError) as exc_info:
            await client.get("/users/current.json")

        message = str(exc_info.value)
        token = base64.b64encode(b"ada:hunter2").decode("ascii")
        assert exc_info.value.status_code == 401
        assert "hunter2" not in message
        assert token not in message


class TestShortSecrets:
    """Test redaction of short passwords."""

    @pytest.mark.asyncio
    async def test_short_password_does_not_mangle_diagnostics(self):
        fake = FakeRedmine()

        def unresolvable(request):
            raise httpx.ConnectError("[Errno -2] Name or service not known", request=request)

        fake.respond("GET", "/issues.json", handler=unresolvable)
        client = make_client(fake, username="ada", password="e")

        with pytest.raises(RedmineApiError) as exc_info:
            await client.get("/issues.json")

        assert "Name or service not known" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_short_password_redacted_as_whole_token(self):
        fake = FakeRedmine()

        def unauthorized(request):
            return httpx.Response(401, text="Rejected password pw1 for user ada")

        fake.respond("GET", "/users/current.json", handler=unauthorized)
        client = make_client(fake, username="ada", password="pw1")

        with pytest.raises(RedmineApiError) as exc_info:
            await client.get("/users/current.json")

        message = str(exc_info.value)
        assert "pw1" not in message
        assert "Rejected password *** for user ada" in message
