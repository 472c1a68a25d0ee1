"""Catalog state for the nomad-safe-spots MCP server.

Holds the spot table, review table, active filters, viewer location, the
selected spot, and the review form. Owned by ``SpotCatalog``; the shell only
reads snapshots of it.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from safe_spots.models import Coordinate, Review, Spot


class SpotFilters(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    spot_type: str = "any"
    spot_types: list[str] = Field(default_factory=list)
    overnight_only: bool = False
    favorites_only: bool = False

    @field_validator("spot_type", mode="before")
    @classmethod
    def default_to_any(cls, v: Optional[str]) -> str:
        return (v or "any").strip() or "any"

    def as_dict(self) -> dict:
        return {
            "spot_type": self.spot_type,
            "spot_types": list(self.spot_types),
            "overnight_only": self.overnight_only,
            "favorites_only": self.favorites_only,
        }


class SpotForm(BaseModel):
    """Field values being composed in an add/edit session."""
    model_config = ConfigDict(validate_assignment=True)

    name: str = ""
    description: str = ""
    overnight_allowed: bool = False
    has_bathroom: bool = False
    cell_signal: int | str = 3
    safety_rating: int | str = 4
    noise_level: str = "quiet"
    spot_type: str = "forest_road"
    photo_urls: str = ""

    @classmethod
    def from_spot(cls, spot: Spot) -> "SpotForm":
        return cls(
            name=spot.name,
            description=spot.description,
            overnight_allowed=spot.overnight_allowed,
            has_bathroom=spot.has_bathroom,
            cell_signal=spot.cell_signal,
            safety_rating=spot.safety_rating,
            noise_level=spot.noise_level,
            spot_type=spot.spot_type,
            photo_urls=", ".join(spot.photo_urls),
        )


class ReviewForm(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    rating: int | str = 5
    comment: str = ""
    nickname: str = ""


class CatalogState(BaseModel):
    spots: list[Spot] = []
    reviews: list[Review] = []
    filters: SpotFilters = Field(default_factory=SpotFilters)
    viewer_location: Optional[Coordinate] = None
    selected_spot_id: Optional[str] = None
    review_form: ReviewForm = Field(default_factory=ReviewForm)
    saving_review: bool = False
    review_error: str = ""
    status: Literal["idle", "loading", "ready", "error"] = "idle"
    status_message: str = ""
    error_message: str = ""
