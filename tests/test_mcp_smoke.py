"""MCP server smoke test: verifies the server starts and responds to initialize."""

import sys
import pytest
from mcp.client.stdio import stdio_client, StdioServerParameters
from mcp import ClientSession


@pytest.mark.anyio
async def test_mcp_server_initializes():
    """Server starts and responds to MCP initialize with correct name."""
    params = StdioServerParameters(
        command=sys.executable,
        args=["-m", "safe_spots"],
    )
    async with stdio_client(params) as (read, write):
        async with ClientSession(read, write) as session:
            result = await session.initialize()

            assert result.serverInfo.name == "nomad-safe-spots"


@pytest.mark.anyio
async def test_mcp_server_exposes_expected_tools():
    """Server exposes the expected MCP tools."""
    params = StdioServerParameters(
        command=sys.executable,
        args=["-m", "safe_spots"],
    )
    async with stdio_client(params) as (read, write):
        async with ClientSession(read, write) as session:
            await session.initialize()
            tools = await session.list_tools()

        tool_names = {t.name for t in tools.tools}
        assert "load_catalog" in tool_names
        assert "list_spots" in tool_names
        assert "toggle_favorite" in tool_names
        assert "start_add_spot" in tool_names
        assert "submit_spot" in tool_names
        assert "add_review" in tool_names
