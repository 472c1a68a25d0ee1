"""Tests for the filter -> enrich -> sort ranking pipeline."""
import pytest

from safe_spots.core.ranking import rank
from safe_spots.models import Coordinate, Review, Spot
from safe_spots.state import SpotFilters


def spot(id, name, lat=45.0, lng=-121.0, spot_type="forest_road", overnight=True):
    return Spot(id=id, name=name, lat=lat, lng=lng, spot_type=spot_type, overnight_allowed=overnight)


def reviews_for(spot_id, *ratings):
    return [Review(id=f"{spot_id}-{i}", spot_id=spot_id, rating=r, comment="c") for i, r in enumerate(ratings)]


VIEWER = Coordinate(lat=45.0, lng=-121.0)


def test_favorite_dominates_distance_and_rating():
    # A: favorite, ~5 km, rated 4. B: not favorite, ~1 km, rated 5.
    a = spot("A", "Alpha", lat=45.045)
    b = spot("B", "Bravo", lat=45.009)
    reviews = reviews_for("A", 4) + reviews_for("B", 5)
    ranked = rank([b, a], reviews, SpotFilters(), {"A"}, VIEWER)
    assert [s.id for s in ranked] == ["A", "B"]
    assert ranked[0].is_favorite is True
    assert ranked[0].distance_km == pytest.approx(5.0, abs=0.1)


def test_nearer_spot_first():
    near = spot("N", "Zulu", lat=45.01)
    far = spot("F", "Alpha", lat=45.5)
    ranked = rank([far, near], [], SpotFilters(), set(), VIEWER)
    assert [s.id for s in ranked] == ["N", "F"]


def test_rating_used_when_distance_unknown():
    c = spot("C", "Zulu")
    d = spot("D", "Alpha")
    reviews = reviews_for("C", 5, 4) + reviews_for("D", 3)
    ranked = rank([d, c], reviews, SpotFilters(), set(), None)
    assert [s.id for s in ranked] == ["C", "D"]
    assert ranked[0].distance_km is None
    assert ranked[0].avg_rating == pytest.approx(4.5)


def test_name_breaks_ties():
    ranked = rank([spot("2", "beta"), spot("1", "Beta"), spot("3", "alpha")], [], SpotFilters(), set(), None)
    assert [s.name for s in ranked] == ["Beta", "alpha", "beta"]


def test_unrated_spot_falls_through_to_name():
    rated = spot("R", "Zulu")
    unrated = spot("U", "Alpha")
    ranked = rank([rated, unrated], reviews_for("R", 5), SpotFilters(), set(), None)
    assert [s.id for s in ranked] == ["U", "R"]
    assert ranked[0].avg_rating is None
    assert ranked[0].review_count == 0


def test_overnight_and_category_filters_intersect():
    spots = [
        spot("1", "a", spot_type="store", overnight=True),
        spot("2", "b", spot_type="store", overnight=False),
        spot("3", "c", spot_type="campground", overnight=True),
    ]
    ranked = rank(spots, [], SpotFilters(spot_type="store", overnight_only=True), set(), None)
    assert [s.id for s in ranked] == ["1"]


def test_any_category_passes_all():
    spots = [spot("1", "a", spot_type="store"), spot("2", "b", spot_type="casino")]
    assert len(rank(spots, [], SpotFilters(spot_type="any"), set(), None)) == 2


def test_multi_select_categories():
    spots = [
        spot("1", "a", spot_type="store"),
        spot("2", "b", spot_type="rest_area"),
        spot("3", "c", spot_type="campground"),
    ]
    ranked = rank(spots, [], SpotFilters(spot_types=["store", "rest_area"]), set(), None)
    assert {s.id for s in ranked} == {"1", "2"}


def test_favorites_only():
    spots = [spot("1", "a"), spot("2", "b")]
    ranked = rank(spots, [], SpotFilters(favorites_only=True), {"2"}, None)
    assert [s.id for s in ranked] == ["2"]


def test_idempotent():
    spots = [spot(str(i), f"s{i}", lat=45 + i / 100) for i in range(6)]
    reviews = reviews_for("1", 2) + reviews_for("4", 5)
    args = (spots, reviews, SpotFilters(), {"3"}, VIEWER)
    assert rank(*args) == rank(*args)


def test_inputs_not_mutated():
    spots = [spot("1", "b"), spot("2", "a")]
    before = [s.model_copy() for s in spots]
    rank(spots, [], SpotFilters(), set(), VIEWER)
    assert spots == before
