"""Redmine MCP Server - Expose a Redmine instance to AI assistants."""
import sys
import signal
import asyncio
import logging
import traceback
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent
from pydantic import ValidationError

from . import tools
from .client import RedmineClient
from .config import get_settings, load_config
from .errors import ConfigurationError, RedmineApiError

logger = logging.getLogger("redmine-mcp")


def configure_logging(level: str = "INFO") -> None:
    """Log to stderr; stdout carries the MCP protocol."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
        force=True
    )


def build_server(client: RedmineClient) -> Server:
    """Create the MCP server with every Redmine tool registered."""
    app = Server("redmine-mcp")

    @app.list_tools()
    async def list_tools() -> list[Tool]:
        """List available MCP tools for Redmine."""
        return tools.get_tools()

    @app.call_tool()
    async def call_tool(name: str, arguments: Any) -> list[TextContent]:
        """Run a tool call.

        Failures are logged and re-raised so the SDK reports them to the
        caller as a tool error instead of failing the session.
        """
        logger.info(f"Tool call: {name} with arguments: {arguments}")
        try:
            return await tools.call_tool(name, arguments, client)

        except tools.UnknownToolError:
            logger.warning(f"Unknown tool requested: {name}")
            raise

        except ValidationError as e:
            if e.title == tools.get_tool(name).input_model.__name__:
                logger.warning(f"Invalid arguments for {name}: {e.error_count()} validation error(s)")
            else:
                # Redmine answered 2xx, so any write has already been applied
                logger.error(f"Unexpected Redmine response shape during {name} call: {e}")
            raise

        except RedmineApiError as e:
            logger.error(f"Redmine API error during {name} call:")
            logger.error(f"  Status: {e.status_code}")
            logger.error(f"  Message: {e}")
            raise

        except Exception as e:
            logger.error(f"Unexpected error during {name} call:")
            logger.error(f"  Error type: {type(e).__name__}")
            logger.error(f"  Error message: {str(e)}")
            logger.error(f"  Traceback:\n{traceback.format_exc()}")
            raise

    return app


async def serve(client: RedmineClient) -> None:
    """Run the MCP server over stdio until the client disconnects."""
    app = build_server(client)
    async with stdio_server() as (read_stream, write_stream):
        await app.run(read_stream, write_stream, app.create_initialization_options())


def _handle_sigterm(signum, frame):
    raise KeyboardInterrupt


def main() -> None:
    """Load configuration and run the server."""
    try:
        settings = get_settings()
        configure_logging(settings.log_level)
        config = load_config(settings)
    except (ConfigurationError, ValidationError) as e:
        configure_logging()
        logger.error(f"Failed to start redmine-mcp server: {e}")
        sys.exit(1)

    client = RedmineClient(config, timeout_ms=settings.redmine_timeout_ms)

    logger.info("redmine-mcp server started")
    logger.info(f"Connected to: {config.url}")
    logger.info(f"Auth method: {config.auth_method}")

    signal.signal(signal.SIGTERM, _handle_sigterm)
    try:
        asyncio.run(serve(client))
    except KeyboardInterrupt:
        logger.info("redmine-mcp server shutting down...")


if __name__ == "__main__":
    main()
