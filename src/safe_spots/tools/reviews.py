"""Review tools: list_reviews, add_review."""

import json

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..catalog import SpotCatalog
from ..core.reviews import spot_stats


def register_review_tools(mcp: FastMCP, catalog: SpotCatalog):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def list_reviews(spot_id: str) -> str:
        """List a spot's reviews, newest first, with count and average rating.

        Args:
            spot_id: Spot identifier.
        """
        reviews = catalog.reviews_for(spot_id)
        stats = spot_stats(reviews)
        return json.dumps(
            {
                "spot_id": spot_id,
                "review_count": stats.review_count,
                "avg_rating": stats.avg_rating,
                "reviews": [r.model_dump(mode="json") for r in reviews],
            },
            indent=2,
        )

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=True))
    async def add_review(
        rating: int | str,
        comment: str,
        nickname: str = "",
        spot_id: str | None = None,
    ) -> str:
        """Rate and review a spot.

        **Requires:** select_spot first, or pass spot_id.

        Args:
            rating: 1 to 5.
            comment: Short comment (required).
            nickname: Optional display name.
            spot_id: Spot to review. Default: the selected spot.
        """
        if catalog.state.saving_review:
            return "Error: A review is already being saved."
        catalog.update_review_form(rating=rating, comment=comment, nickname=nickname)
        result = await catalog.add_review(spot_id)
        if not result.ok:
            return f"Error: {result.message}"
        return f"Review saved for spot {result.review.spot_id} ({result.review.rating}/5)."
