"""Pydantic domain models for spots and reviews."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

SPOT_TYPES = ("forest_road", "campground", "store", "rest_area", "trailhead", "other")

NOISE_LEVELS = (
    "silent",
    "very_quiet",
    "quiet",
    "some_road",
    "steady_noise",
    "party",
    "noisy",
)

CELL_SIGNAL_RANGE = (0, 5)
SAFETY_RATING_RANGE = (1, 5)
REVIEW_RATING_RANGE = (1, 5)


class Coordinate(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class Spot(BaseModel):
    """Canonical in-memory spot record, as produced by ``normalize_spot``."""

    id: str
    name: str
    description: str = ""
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    spot_type: str = "other"
    overnight_allowed: bool = False
    has_bathroom: bool = False
    cell_signal: int = Field(default=3, ge=CELL_SIGNAL_RANGE[0], le=CELL_SIGNAL_RANGE[1])
    safety_rating: int = Field(default=4, ge=SAFETY_RATING_RANGE[0], le=SAFETY_RATING_RANGE[1])
    noise_level: str = "unknown"
    photo_urls: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lng=self.lng)


class Review(BaseModel):
    id: str
    spot_id: str
    rating: int = Field(ge=REVIEW_RATING_RANGE[0], le=REVIEW_RATING_RANGE[1])
    comment: str
    nickname: Optional[str] = None
    created_at: Optional[datetime] = None
