"""Error types shared by the Redmine client and the MCP tools."""
from typing import Optional

# Status codes used for failures that never reached a Redmine response
TRANSPORT_ERROR_STATUS = 0
TIMEOUT_STATUS = 408


class ConfigurationError(ValueError):
    """Raised at startup when required configuration is missing or invalid."""
    pass


class RedmineApiError(Exception):
    """Raised for every failed call to the Redmine API.

    The kind of failure is carried by ``status_code``:
    - 0: transport failure (DNS, connection refused, TLS)
    - 408: the request exceeded the configured timeout
    - anything else: the HTTP status returned by Redmine

    Messages never include credentials.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        detail: Optional[str] = None
    ):
        super().__init__(f"{message} - {detail}" if detail else message)
        self.message = message
        self.status_code = status_code
        self.detail = detail

    @property
    def is_transport_error(self) -> bool:
        return self.status_code == TRANSPORT_ERROR_STATUS

    @property
    def is_timeout(self) -> bool:
        return self.status_code == TIMEOUT_STATUS
