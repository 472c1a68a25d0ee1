"""Add/edit tools: start_add_spot, start_edit_spot, pick_location, update_spot_form,
stage_photos, submit_spot, cancel_edit."""

import logging
import mimetypes
from pathlib import Path

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..catalog import SpotCatalog
from ..core.models import StagedPhoto
from ..errors import SpotValidationError
from ._prereqs import require_state

logger = logging.getLogger(__name__)


def read_staged_photo(path: str) -> StagedPhoto:
    """Read a local image file for upload. Raises ValueError if unreadable."""
    p = Path(path).expanduser()
    if not p.is_file():
        raise ValueError(f"Photo not found: {path}")
    content_type = mimetypes.guess_type(p.name)[0] or "application/octet-stream"
    if not content_type.startswith("image/"):
        raise ValueError(f"{p.name} does not look like an image ({content_type})")
    return StagedPhoto(filename=p.name, content=p.read_bytes(), content_type=content_type)


def register_edit_tools(mcp: FastMCP, catalog: SpotCatalog):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def start_add_spot() -> str:
        """Start adding a new spot. Clears any half-finished form.

        **Next:** pick_location, update_spot_form (name is required), then submit_spot.
        """
        try:
            catalog.start_add_spot()
        except SpotValidationError as e:
            return f"Error: {e}"
        return "Adding a new spot. Pick a location with pick_location."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def start_edit_spot(spot_id: str) -> str:
        """Start editing an existing spot; the form is pre-filled with its values.

        **Requires:** load_catalog.
        **Next:** update_spot_form and/or pick_location, then submit_spot.

        Args:
            spot_id: Spot identifier.
        """
        try:
            require_state(catalog, loaded=True)
            catalog.start_edit_spot(spot_id)
        except ValueError as e:
            return f"Error: {e}"
        return f"Editing {catalog.session.form.name} ({spot_id})."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=True))
    def pick_location(lat: float, lng: float) -> str:
        """Choose the spot's location. Re-picking replaces the previous choice.

        **Requires:** start_add_spot or start_edit_spot.

        Args:
            lat: Latitude in degrees.
            lng: Longitude in degrees.
        """
        try:
            require_state(catalog, session=True)
            accepted = catalog.pick_location(lat, lng)
        except ValueError as e:
            return f"Error: {e}"
        if not accepted:
            return "Error: Location can't change while a submission is in progress."
        return f"Location set to {lat:.5f}, {lng:.5f}."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def update_spot_form(
        name: str | None = None,
        description: str | None = None,
        spot_type: str | None = None,
        overnight_allowed: bool | None = None,
        has_bathroom: bool | None = None,
        cell_signal: int | None = None,
        safety_rating: int | None = None,
        noise_level: str | None = None,
        photo_urls: str | None = None,
    ) -> str:
        """Set fields on the spot being added or edited. Omitted fields keep their value.

        **Requires:** start_add_spot or start_edit_spot.

        Args:
            name: Spot name (required before submitting).
            description: Free text.
            spot_type: forest_road, campground, store, rest_area, trailhead, or other.
            overnight_allowed: Whether overnight parking is allowed.
            has_bathroom: Whether a bathroom is available.
            cell_signal: 0 to 5 bars.
            safety_rating: 1 to 5.
            noise_level: silent, very_quiet, quiet, some_road, steady_noise, party, or noisy.
            photo_urls: Comma-separated photo URLs.
        """
        fields = {
            k: v for k, v in {
                "name": name,
                "description": description,
                "spot_type": spot_type,
                "overnight_allowed": overnight_allowed,
                "has_bathroom": has_bathroom,
                "cell_signal": cell_signal,
                "safety_rating": safety_rating,
                "noise_level": noise_level,
                "photo_urls": photo_urls,
            }.items() if v is not None
        }
        try:
            require_state(catalog, session=True)
            catalog.update_spot_form(**fields)
        except ValueError as e:
            return f"Error: {e}"
        return f"Updated: {', '.join(sorted(fields)) or 'nothing'}."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def stage_photos(paths: list[str]) -> str:
        """Stage local photo files to upload with the next submit_spot.

        Files upload one at a time in the given order. Replaces previously staged files.

        Args:
            paths: Local image file paths.
        """
        try:
            require_state(catalog, session=True)
            photos = [read_staged_photo(p) for p in paths]
            catalog.stage_photos(photos)
        except (OSError, ValueError) as e:
            return f"Error: {e}"
        return f"Staged {len(photos)} photo(s)."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=True))
    async def submit_spot() -> str:
        """Save the spot: upload staged photos, then create or update the record.

        If any photo upload fails nothing is saved and the form is kept, so
        submit_spot can simply be called again.
        """
        result = await catalog.submit_spot()
        if not result.ok:
            return f"Error: {result.message}"
        return f"{result.message} ({result.spot.name}, id {result.spot.id})"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def cancel_edit() -> str:
        """Discard the spot being added or edited."""
        if not catalog.cancel_edit():
            return "Error: Can't cancel while a submission is in progress."
        return "Discarded."
