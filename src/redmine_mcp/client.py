"""Async HTTP client for the Redmine REST API.

Handles authentication (API key or basic auth), request/response formatting,
timeouts and error normalization. Every failure surfaces as a RedmineApiError
whose message never contains credentials.
"""
import asyncio
import base64
import json
import logging
import re
from typing import Any, Mapping, Optional

import httpx

from .config import RedmineConfig, DEFAULT_TIMEOUT_MS
from .errors import RedmineApiError, TRANSPORT_ERROR_STATUS, TIMEOUT_STATUS

logger = logging.getLogger("redmine-mcp.client")

REDACTED = "***"
# Shorter secrets are only redacted as whole tokens so ordinary words survive
MIN_SUBSTRING_SECRET_LENGTH = 8


class RedmineClient:
    """HTTP client for the Redmine REST API.

    The configuration is fixed at construction. Each request opens its own
    short-lived httpx.AsyncClient, so concurrent tool calls never share state.
    """

    def __init__(
        self,
        config: RedmineConfig,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = config.url.rstrip("/")
        self.timeout_ms = timeout_ms
        self._transport = transport
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        self._secrets: list[str] = []

        # API key wins when both auth modes are configured
        if config.api_key:
            self._headers["X-Redmine-API-Key"] = config.api_key
            self._secrets.append(config.api_key)
        elif config.username and config.password:
            token = base64.b64encode(
                f"{config.username}:{config.password}".encode("utf-8")
            ).decode("ascii")
            self._headers["Authorization"] = f"Basic {token}"
            self._secrets.extend([token, config.password])

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    async def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Perform a GET request to the Redmine API."""
        return await self._request("GET", path, params=params)

    async def post(self, path: str, body: Any) -> Any:
        """Perform a POST request to the Redmine API."""
        return await self._request("POST", path, body=body)

    async def put(self, path: str, body: Any) -> Any:
        """Perform a PUT request to the Redmine API."""
        return await self._request("PUT", path, body=body)

    async def delete(self, path: str) -> Any:
        """Perform a DELETE request to the Redmine API."""
        return await self._request("DELETE", path)

    def build_url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @staticmethod
    def build_params(params: Optional[Mapping[str, Any]]) -> dict[str, str]:
        """Drop unset values and coerce the rest to query-string strings."""
        if not params:
            return {}
        query = {}
        for key, value in params.items():
            if value is None or value == "":
                continue
            if isinstance(value, bool):
                query[key] = "true" if value else "false"
            else:
                query[key] = str(value)
        return query

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        body: Any = None
    ) -> Any:
        """Perform one HTTP round trip bounded by the configured timeout."""
        logger.debug(f"{method} {path}")
        try:
            return await asyncio.wait_for(
                self._send(method, path, params, body),
                timeout=self.timeout_ms / 1000
            )
        except RedmineApiError:
            raise
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning(f"{method} {path} timed out after {self.timeout_ms}ms")
            raise RedmineApiError(
                f"Request to Redmine timed out after {self.timeout_ms}ms",
                TIMEOUT_STATUS
            )
        except httpx.RequestError as e:
            cause = self._redact(str(e) or type(e).__name__)
            logger.error(f"{method} {path} failed: {type(e).__name__}: {cause}")
            raise RedmineApiError(
                f"Failed to connect to Redmine: {cause}",
                TRANSPORT_ERROR_STATUS
            )

    async def _send(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]],
        body: Any
    ) -> Any:
        async with httpx.AsyncClient(
            headers=self._headers,
            timeout=self.timeout_ms / 1000,
            transport=self._transport
        ) as client:
            response = await client.request(
                method,
                self.build_url(path),
                params=self.build_params(params),
                json=body
            )

        if not response.is_success:
            detail = self._error_detail(response)
            logger.error(f"{method} {path} returned {response.status_code}")
            raise RedmineApiError(
                f"Redmine API error: {response.status_code} {response.reason_phrase}",
                response.status_code,
                detail
            )

        # PUT and DELETE usually answer with an empty body
        if not response.content.strip():
            return {}

        try:
            return response.json()
        except json.JSONDecodeError:
            logger.error(f"{method} {path} returned a body that is not valid JSON")
            raise

    def _error_detail(self, response: httpx.Response) -> Optional[str]:
        """Extract Redmine's error messages from a failed response, if any."""
        try:
            text = response.text
        except Exception as e:
            logger.warning(f"Could not read error response body: {type(e).__name__}")
            return None

        if not text:
            return None

        try:
            payload = json.loads(text)
        except ValueError:
            return self._redact(text)

        if isinstance(payload, dict) and payload.get("errors") is not None:
            errors = payload["errors"]
            if isinstance(errors, list):
                detail = ", ".join(str(error) for error in errors)
            else:
                detail = str(errors)
            return self._redact(detail)

        return self._redact(text)

    def _redact(self, text: str) -> str:
        for secret in self._secrets:
            if len(secret) >= MIN_SUBSTRING_SECRET_LENGTH:
                text = text.replace(secret, REDACTED)
            else:
                pattern = rf"(?<![A-Za-z0-9]){re.escape(secret)}(?![A-Za-z0-9])"
                text = re.sub(pattern, REDACTED, text)
        return text
