"""Browsing tools: load_catalog, list_spots, get_spot, select_spot, set_filters, viewer location."""

import json
import logging

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..catalog import SpotCatalog
from ..core.geo import maps_link
from ..core.models import RankedSpot
from ..core.normalize import format_noise_level, format_spot_type
from ..errors import SpotValidationError
from ._prereqs import require_state

logger = logging.getLogger(__name__)


def spot_view(spot: RankedSpot, reviews: list | None = None) -> dict:
    """JSON-ready spot with display labels, distance, and rating stats."""
    view = spot.model_dump(mode="json")
    view["type_label"] = format_spot_type(spot.spot_type)
    view["noise_label"] = format_noise_level(spot.noise_level)
    view["maps_url"] = maps_link(spot.lat, spot.lng)
    if spot.distance_km is not None:
        view["distance_km"] = round(spot.distance_km, 1)
    if spot.avg_rating is not None:
        view["avg_rating"] = round(spot.avg_rating, 2)
    if reviews is not None:
        view["reviews"] = [r.model_dump(mode="json") for r in reviews]
    return view


def register_catalog_tools(mcp: FastMCP, catalog: SpotCatalog):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=True))
    async def load_catalog() -> str:
        """Load all spots and reviews from the remote store.

        **Next:** list_spots, optionally after set_filters or set_viewer_location.
        """
        ok = await catalog.load()
        if not ok:
            return f"Error: {catalog.state.status_message}: {catalog.state.error_message}"
        return (
            f"Loaded {len(catalog.state.spots)} spot(s) and "
            f"{len(catalog.state.reviews)} review(s)."
        )

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def list_spots(limit: int = 50) -> str:
        """List spots after filtering, favorites first, then nearest, then best rated.

        **Requires:** load_catalog.

        Args:
            limit: Maximum number of spots to return (default 50).
        """
        try:
            require_state(catalog, loaded=True)
        except ValueError as e:
            return f"Error: {e}"
        ranked = catalog.ranked_spots()
        return json.dumps(
            {
                "total": len(ranked),
                "filters": catalog.state.filters.as_dict(),
                "spots": [spot_view(s) for s in ranked[:max(limit, 0)]],
            },
            indent=2,
        )

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def get_spot(spot_id: str) -> str:
        """Show one spot with its reviews, newest first.

        Args:
            spot_id: Spot identifier.
        """
        spot = catalog.get_spot(spot_id)
        if spot is None:
            return f"Error: No spot with id {spot_id!r}."
        return json.dumps(spot_view(spot, catalog.reviews_for(spot_id)), indent=2)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def select_spot(spot_id: str | None = None) -> str:
        """Select a spot as the target for add_review. Pass nothing to clear.

        Args:
            spot_id: Spot identifier, or omit to clear the selection.
        """
        try:
            spot = catalog.select_spot(spot_id)
        except SpotValidationError as e:
            return f"Error: {e}"
        if spot is None:
            return "Selection cleared."
        return f"Selected {spot.name} ({spot.id})."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def set_filters(
        spot_type: str | None = None,
        spot_types: list[str] | None = None,
        overnight_only: bool | None = None,
        favorites_only: bool | None = None,
    ) -> str:
        """Change which spots list_spots returns. Omitted arguments keep their value.

        All active filters must pass (they combine as an intersection).

        Args:
            spot_type: One spot type (forest_road, campground, store, rest_area,
                trailhead, other) or "any".
            spot_types: Multi-select list of spot types; empty list clears it.
            overnight_only: Only spots where overnight parking is allowed.
            favorites_only: Only starred spots.
        """
        changes = {
            k: v for k, v in {
                "spot_type": spot_type,
                "spot_types": spot_types,
                "overnight_only": overnight_only,
                "favorites_only": favorites_only,
            }.items() if v is not None
        }
        filters = catalog.set_filters(**changes)
        return f"Filters: {json.dumps(filters.as_dict())}"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def set_viewer_location(lat: float, lng: float) -> str:
        """Set your current location so spots are ranked by distance.

        Args:
            lat: Latitude in degrees.
            lng: Longitude in degrees.
        """
        try:
            loc = catalog.set_viewer_location(lat, lng)
        except ValueError as e:
            return f"Error: Invalid location — {e}"
        return f"Viewer location set to {loc.lat:.5f}, {loc.lng:.5f}."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def clear_viewer_location() -> str:
        """Forget your location; distances become unknown."""
        catalog.clear_viewer_location()
        return "Viewer location cleared."
