"""Validate and persist a single review."""

from typing import Optional

from safe_spots.models import REVIEW_RATING_RANGE, Review
from ..errors import SpotValidationError
from ..state import ReviewForm
from .normalize import clamp_int, normalize_review, to_int
from .store import SpotStore


def build_review_payload(spot_id: Optional[str], form: ReviewForm) -> dict:
    """Return the store payload, or raise SpotValidationError."""
    if not spot_id:
        raise SpotValidationError("spot", "Select a spot first.")

    lo, hi = REVIEW_RATING_RANGE
    rating = to_int(form.rating)
    if rating is None or not lo <= rating <= hi:
        raise SpotValidationError("rating", f"Rating {lo}–{hi} is required.")

    comment = form.comment.strip()
    if not comment:
        raise SpotValidationError("comment", "Please add a short comment.")

    return {
        "spot_id": spot_id,
        "rating": clamp_int(rating, lo, hi),
        "comment": comment,
        "nickname": form.nickname.strip() or None,
    }


async def submit_review(store: SpotStore, spot_id: Optional[str], form: ReviewForm) -> Review:
    """Validate locally, then insert. Raises SpotValidationError or StoreError."""
    payload = build_review_payload(spot_id, form)
    raw = await store.insert_review(payload)
    return normalize_review(raw)
