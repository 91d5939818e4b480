"""Allow running the server with ``python -m redmine_mcp``."""
from .server import main

main()
