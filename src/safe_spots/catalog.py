"""SpotCatalog: the engine the shell holds a reference to.

Owns the spot table, the review table, the favorites store, and the edit
session. The rendering layer reads derived snapshots (``ranked_spots``,
``reviews_for``, ``summary``) and calls the intent methods; it never mutates
these structures directly.
"""

import asyncio
import logging
from typing import Any, Optional

from .config import Settings, get_settings
from .core.edit_session import SpotEditSession
from .core.favorites import FavoritesStore, JsonFileFavorites
from .core.models import RankedSpot, StagedPhoto, SubmitResult
from .core.normalize import normalize_review, normalize_spot
from .core.ranking import rank
from .core.review_submission import submit_review
from .core.reviews import index_reviews
from .core.store import SpotStore, SupabaseStore
from .errors import SpotValidationError, StoreError
from .models import Coordinate, Review, Spot
from .state import CatalogState, ReviewForm, SpotFilters

logger = logging.getLogger(__name__)


class SpotCatalog:

    def __init__(
        self,
        store: SpotStore,
        favorites: FavoritesStore,
        submit_timeout_s: Optional[float] = None,
    ):
        self.store = store
        self.favorites = favorites
        self.state = CatalogState()
        self.session = SpotEditSession(submit_timeout_s=submit_timeout_s)

    # ---- loading ----

    async def load(self) -> bool:
        """Fetch spots and reviews. On failure both tables are left empty."""
        self.state.status = "loading"
        self.state.status_message = "Loading spots and reviews…"
        try:
            results = await asyncio.gather(
                self.store.list_spots(), self.store.list_reviews(), return_exceptions=True
            )
            for result in results:
                if isinstance(result, BaseException):
                    raise result
            raw_spots, raw_reviews = results
        except StoreError as exc:
            logger.error("Error loading catalog: %s", exc)
            self._load_failed(str(exc))
            return False
        except Exception as exc:
            logger.exception("Unexpected error loading catalog")
            self._load_failed(str(exc) or exc.__class__.__name__)
            return False

        self.state.spots = [normalize_spot(r) for r in raw_spots]
        self.state.reviews = [normalize_review(r) for r in raw_reviews]
        self.state.status = "ready"
        self.state.status_message = "Loaded spots & reviews."
        self.state.error_message = ""
        logger.info("Loaded %d spot(s), %d review(s)", len(self.state.spots), len(self.state.reviews))
        return True

    def _load_failed(self, message: str) -> None:
        self.state.spots = []
        self.state.reviews = []
        self.state.status = "error"
        self.state.status_message = "Error loading spots and reviews"
        self.state.error_message = message

    # ---- derived views ----

    def ranked_spots(self) -> list[RankedSpot]:
        """Filtered, enriched, sorted spots for the current inputs."""
        s = self.state
        return rank(s.spots, s.reviews, s.filters, self.favorites, s.viewer_location)

    def get_spot(self, spot_id: str) -> Optional[RankedSpot]:
        """Enriched spot by id, regardless of the active filters."""
        s = self.state
        matches = [sp for sp in s.spots if sp.id == spot_id]
        if not matches:
            return None
        return rank(matches, s.reviews, SpotFilters(), self.favorites, s.viewer_location)[0]

    def reviews_for(self, spot_id: str) -> list[Review]:
        return index_reviews(self.state.reviews).get(spot_id, [])

    @property
    def selected_spot(self) -> Optional[RankedSpot]:
        if self.state.selected_spot_id is None:
            return None
        return self.get_spot(self.state.selected_spot_id)

    # ---- browsing intents ----

    def select_spot(self, spot_id: Optional[str]) -> Optional[RankedSpot]:
        if spot_id is not None and self.get_spot(spot_id) is None:
            raise SpotValidationError("spot", f"No spot with id {spot_id!r}.")
        self.state.selected_spot_id = spot_id
        self.state.review_error = ""
        return self.selected_spot

    def set_filters(self, **changes: Any) -> SpotFilters:
        self.state.filters = SpotFilters(**{**self.state.filters.as_dict(), **changes})
        return self.state.filters

    def set_viewer_location(self, lat: float, lng: float) -> Coordinate:
        self.state.viewer_location = Coordinate(lat=lat, lng=lng)
        return self.state.viewer_location

    def clear_viewer_location(self) -> None:
        self.state.viewer_location = None

    def is_favorite(self, spot_id: str) -> bool:
        return self.favorites.is_favorite(spot_id)

    def toggle_favorite(self, spot_id: str) -> bool:
        return self.favorites.toggle(spot_id)

    # ---- edit session intents ----

    def start_add_spot(self) -> None:
        self.session.start_create()

    def start_edit_spot(self, spot_id: str) -> None:
        spot = next((sp for sp in self.state.spots if sp.id == spot_id), None)
        if spot is None:
            raise SpotValidationError("spot", f"No spot with id {spot_id!r}.")
        self.session.start_edit(spot)

    def pick_location(self, lat: float, lng: float) -> bool:
        return self.session.pick_location(lat, lng)

    def update_spot_form(self, **fields: Any) -> None:
        self.session.update_form(**fields)

    def stage_photos(self, photos: list[StagedPhoto]) -> None:
        self.session.stage_photos(photos)

    def cancel_edit(self) -> bool:
        return self.session.cancel()

    def _upsert_local(self, spot: Spot) -> None:
        spots = self.state.spots
        for i, existing in enumerate(spots):
            if existing.id == spot.id:
                spots[i] = spot
                return
        spots.insert(0, spot)

    async def submit_spot(self) -> SubmitResult:
        result = await self.session.submit(self.store)
        if result.ok and result.spot is not None:
            self._upsert_local(result.spot)
            self.state.selected_spot_id = result.spot.id
            self.state.status_message = result.message
        return result

    # ---- reviews ----

    def update_review_form(self, **fields: Any) -> ReviewForm:
        self.state.review_form = ReviewForm(**{**self.state.review_form.model_dump(), **fields})
        return self.state.review_form

    async def add_review(self, spot_id: Optional[str] = None) -> SubmitResult:
        """Submit the review form for ``spot_id`` (default: the selected spot)."""
        if self.state.saving_review:
            return SubmitResult(ok=False, message="A review is already being saved.", field="session")
        target = spot_id if spot_id is not None else self.state.selected_spot_id
        if target is not None and self.get_spot(target) is None:
            target = None

        self.state.review_error = ""
        self.state.saving_review = True
        try:
            review = await submit_review(self.store, target, self.state.review_form)
        except SpotValidationError as exc:
            self.state.review_error = exc.message
            return SubmitResult(ok=False, message=exc.message, field=exc.field)
        except StoreError as exc:
            logger.error("Saving review failed: %s", exc)
            self.state.review_error = str(exc)
            return SubmitResult(ok=False, message=str(exc))
        finally:
            self.state.saving_review = False

        self.state.reviews.insert(0, review)
        self.state.review_form = ReviewForm()
        return SubmitResult(ok=True, message="Review added.", review=review)

    def summary(self) -> dict:
        s = self.state
        return {
            "catalog": {
                "status": s.status,
                "message": s.status_message,
                "error": s.error_message or None,
                "spots": len(s.spots),
                "reviews": len(s.reviews),
                "visible_spots": len(self.ranked_spots()),
            },
            "filters": s.filters.as_dict(),
            "viewer_location": s.viewer_location.model_dump() if s.viewer_location else None,
            "selected_spot_id": s.selected_spot_id,
            "favorites": list(self.favorites),
            "edit_session": self.session.summary(),
            "review_form": {
                **s.review_form.model_dump(),
                "saving": s.saving_review,
                "error": s.review_error or None,
            },
        }


def build_catalog(settings: Optional[Settings] = None) -> SpotCatalog:
    """Construct the process-wide catalog and load persisted favorites."""
    settings = settings or get_settings()
    if not settings.supabase_url:
        logger.warning("SAFE_SPOTS_SUPABASE_URL is not set; loading the catalog will fail")
    store = SupabaseStore(
        base_url=settings.supabase_url,
        api_key=settings.supabase_key,
        bucket=settings.photo_bucket,
        timeout=settings.http_timeout_s,
    )
    favorites = FavoritesStore(JsonFileFavorites(settings.favorites_path))
    favorites.load()
    return SpotCatalog(store, favorites, submit_timeout_s=settings.submit_timeout_s)
