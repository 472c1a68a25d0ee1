"""MCP server for nomad-safe-spots.

Registers all tools and runs via stdio transport.
"""

import logging
import sys

from mcp.server.fastmcp import FastMCP

from .catalog import build_catalog
from .config import get_settings
from .tools.catalog import register_catalog_tools
from .tools.edit import register_edit_tools
from .tools.favorites import register_favorites_tools
from .tools.reviews import register_review_tools
from .tools.status import register_status_tools

mcp = FastMCP(
    "nomad-safe-spots",
    instructions="Browse, rate, and add crowdsourced safe overnight parking spots",
)

# One catalog per MCP server process
catalog = build_catalog()

# Register all tool groups
register_catalog_tools(mcp, catalog)
register_favorites_tools(mcp, catalog)
register_edit_tools(mcp, catalog)
register_review_tools(mcp, catalog)
register_status_tools(mcp, catalog)


def main():
    # stdout carries the stdio transport
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
