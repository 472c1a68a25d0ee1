"""Pydantic return models for core computation functions."""

from typing import Optional

from pydantic import BaseModel, Field

from safe_spots.models import Review, Spot


class SpotStats(BaseModel):
    """Derived review statistics for one spot."""
    review_count: int = Field(default=0, ge=0)
    avg_rating: Optional[float] = None


class RankedSpot(Spot):
    """Spot enriched with review statistics and distance from the viewer."""
    avg_rating: Optional[float] = None
    review_count: int = Field(default=0, ge=0)
    distance_km: Optional[float] = None
    is_favorite: bool = False


class StagedPhoto(BaseModel):
    """A local photo file waiting to be uploaded with the next submission."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


class UploadOutcome(BaseModel):
    """Result of consuming an ordered list of upload tasks.

    ``urls`` holds the public URLs of the files uploaded before the first
    failure (or of all files on success). When ``failed_file`` is set the
    remaining tasks were never started.
    """
    urls: list[str] = Field(default_factory=list)
    failed_file: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failed_file is None


class SubmitResult(BaseModel):
    """Return type for a spot or review submission attempt."""
    ok: bool
    message: str = ""
    field: Optional[str] = None
    spot: Optional[Spot] = None
    review: Optional[Review] = None
