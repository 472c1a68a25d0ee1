"""Index reviews by spot and derive per-spot rating statistics."""

from collections.abc import Iterable

from safe_spots.models import Review
from .models import SpotStats


def index_reviews(reviews: Iterable[Review]) -> dict[str, list[Review]]:
    """Group reviews by spot id, preserving delivery order (newest first).

    Reviews without a spot id are skipped.
    """
    by_spot: dict[str, list[Review]] = {}
    for review in reviews:
        if not review.spot_id:
            continue
        by_spot.setdefault(review.spot_id, []).append(review)
    return by_spot


def spot_stats(reviews: list[Review]) -> SpotStats:
    """Review count and mean rating; the mean is None when there are no reviews."""
    if not reviews:
        return SpotStats(review_count=0, avg_rating=None)
    total = sum(r.rating for r in reviews)
    return SpotStats(review_count=len(reviews), avg_rating=total / len(reviews))


def aggregate_reviews(reviews: Iterable[Review]) -> dict[str, SpotStats]:
    """Map each reviewed spot id to its statistics."""
    return {spot_id: spot_stats(revs) for spot_id, revs in index_reviews(reviews).items()}
