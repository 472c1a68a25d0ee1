"""Favorites tools: toggle_favorite, list_favorites."""

import json

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..catalog import SpotCatalog


def register_favorites_tools(mcp: FastMCP, catalog: SpotCatalog):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=False))
    def toggle_favorite(spot_id: str) -> str:
        """Star or un-star a spot. Favorites are stored locally and sort first.

        Args:
            spot_id: Spot identifier.
        """
        starred = catalog.toggle_favorite(spot_id)
        return f"Spot {spot_id} {'added to' if starred else 'removed from'} favorites."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def list_favorites() -> str:
        """List starred spot ids."""
        return json.dumps(list(catalog.favorites))
