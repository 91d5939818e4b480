"""Redmine MCP Server - Model Context Protocol integration for Redmine.

This package exposes a Redmine instance to AI assistants as a set of MCP tools.

Modules:
- config: environment configuration loading and validation
- client: async HTTP client for the Redmine REST API
- models: Redmine resource DTOs
- formatters: response formatting utilities
- tools: MCP tool definitions and handlers, one module per resource group
- server: stdio MCP server implementation
"""

__version__ = "1.0.0"

from . import formatters
from . import tools
from .client import RedmineClient
from .errors import RedmineApiError, ConfigurationError

__all__ = [
    "formatters",
    "tools",
    "RedmineClient",
    "RedmineApiError",
    "ConfigurationError",
    "__version__",
]
