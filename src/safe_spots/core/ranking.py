"""Filter, enrich, and sort spots into the list the shell renders."""

from collections.abc import Container, Iterable
from functools import cmp_to_key
from typing import Optional

from safe_spots.models import Coordinate, Review, Spot
from ..state import SpotFilters
from .geo import haversine_km
from .models import RankedSpot, SpotStats
from .reviews import aggregate_reviews

ANY_TYPE = "any"


def passes_filters(spot: Spot, filters: SpotFilters, favorites: Container[str]) -> bool:
    """True when the spot satisfies every active predicate."""
    if filters.spot_type not in ("", ANY_TYPE) and spot.spot_type != filters.spot_type:
        return False
    if filters.spot_types and spot.spot_type not in filters.spot_types:
        return False
    if filters.overnight_only and not spot.overnight_allowed:
        return False
    if filters.favorites_only and spot.id not in favorites:
        return False
    return True


def enrich(
    spot: Spot,
    stats: Optional[SpotStats],
    favorites: Container[str],
    viewer_location: Optional[Coordinate],
) -> RankedSpot:
    stats = stats or SpotStats()
    return RankedSpot(
        **spot.model_dump(),
        avg_rating=stats.avg_rating,
        review_count=stats.review_count,
        distance_km=haversine_km(viewer_location, spot.coordinate),
        is_favorite=spot.id in favorites,
    )


def compare_ranked(a: RankedSpot, b: RankedSpot) -> int:
    """Favorites first, then nearer, then better rated, then by name.

    Unknown distances or ratings do not discriminate; the comparison falls
    through to the next key.
    """
    if a.is_favorite != b.is_favorite:
        return -1 if a.is_favorite else 1

    if a.distance_km is not None and b.distance_km is not None:
        if a.distance_km != b.distance_km:
            return -1 if a.distance_km < b.distance_km else 1

    if a.avg_rating is not None and b.avg_rating is not None:
        if a.avg_rating != b.avg_rating:
            return -1 if a.avg_rating > b.avg_rating else 1

    if a.name != b.name:
        return -1 if a.name < b.name else 1
    return 0


def rank(
    spots: Iterable[Spot],
    reviews: Iterable[Review],
    filters: SpotFilters,
    favorites: Container[str],
    viewer_location: Optional[Coordinate] = None,
) -> list[RankedSpot]:
    """Produce the ordered, render-ready spot list.

    Pure function of its inputs: call it again whenever spots, reviews,
    filters, favorites, or the viewer location change.
    """
    stats = aggregate_reviews(reviews)
    survivors = [s for s in spots if passes_filters(s, filters, favorites)]
    enriched = [enrich(s, stats.get(s.id), favorites, viewer_location) for s in survivors]
    return sorted(enriched, key=cmp_to_key(compare_ranked))
