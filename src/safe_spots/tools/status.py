"""Status tool and resource: get_status, state://catalog."""

import json
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..catalog import SpotCatalog


def register_status_tools(mcp: FastMCP, catalog: SpotCatalog):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def get_status() -> str:
        """Return a summary of the current catalog state.

        Shows load status, active filters, viewer location, favorites, the
        add/edit session phase, and the review form.
        """
        return json.dumps(catalog.summary(), indent=2)

    @mcp.resource("state://catalog", mime_type="application/json")
    def catalog_state() -> str:
        """Current catalog summary as JSON."""
        return json.dumps(catalog.summary(), indent=2)
