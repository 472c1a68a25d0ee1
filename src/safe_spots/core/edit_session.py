"""Add/edit workflow for a single spot.

Phases::

    IDLE -> LOCATION_PENDING (create) | LOCATION_SET (edit)
    LOCATION_PENDING -> LOCATION_SET            (pick_location)
    LOCATION_SET | FAILED -> SUBMITTING         (submit, after local validation)
    SUBMITTING -> SUCCESS | FAILED
    any phase but SUBMITTING -> IDLE            (cancel)

FAILED keeps every field, the location and the staged photos, so a retry
needs no re-entry.
"""

import asyncio
import logging
from collections.abc import Sequence
from enum import Enum
from typing import Any, Optional

from safe_spots.models import CELL_SIGNAL_RANGE, SAFETY_RATING_RANGE, Coordinate, Spot
from ..errors import SpotValidationError, StoreError
from ..state import SpotForm
from .models import StagedPhoto, SubmitResult
from .normalize import DEFAULT_NOISE_LEVEL, DEFAULT_SPOT_TYPE, clamp_int, normalize_spot, parse_url_list
from .store import SpotStore
from .uploads import upload_in_order

logger = logging.getLogger(__name__)


class EditPhase(str, Enum):
    IDLE = "idle"
    LOCATION_PENDING = "location_pending"
    LOCATION_SET = "location_set"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


ACTIVE_PHASES = {
    EditPhase.LOCATION_PENDING,
    EditPhase.LOCATION_SET,
    EditPhase.SUBMITTING,
    EditPhase.FAILED,
}


class SpotEditSession:
    """Transient composing state for creating or editing one spot."""

    def __init__(self, submit_timeout_s: Optional[float] = None):
        self.submit_timeout_s = submit_timeout_s
        self.phase = EditPhase.IDLE
        self.editing_spot_id: Optional[str] = None
        self.form = SpotForm()
        self.pending_location: Optional[Coordinate] = None
        self.staged_photos: list[StagedPhoto] = []
        self.error: str = ""
        self.error_field: Optional[str] = None

    @property
    def mode(self) -> Optional[str]:
        if not self.is_active:
            return None
        return "edit" if self.editing_spot_id is not None else "create"

    @property
    def is_active(self) -> bool:
        return self.phase in ACTIVE_PHASES

    @property
    def submitting(self) -> bool:
        return self.phase == EditPhase.SUBMITTING

    def _reset(self) -> None:
        self.editing_spot_id = None
        self.form = SpotForm()
        self.pending_location = None
        self.staged_photos = []
        self._clear_error()

    def _clear_error(self) -> None:
        self.error = ""
        self.error_field = None

    def _require_not_submitting(self) -> None:
        if self.submitting:
            raise SpotValidationError("session", "A submission is already in progress.")

    def _require_active(self) -> None:
        if not self.is_active:
            raise SpotValidationError("session", "Start adding or editing a spot first.")

    def start_create(self) -> None:
        self._require_not_submitting()
        self._reset()
        self.phase = EditPhase.LOCATION_PENDING

    def start_edit(self, spot: Spot) -> None:
        self._require_not_submitting()
        self._reset()
        self.editing_spot_id = spot.id
        self.form = SpotForm.from_spot(spot)
        self.pending_location = spot.coordinate
        self.phase = EditPhase.LOCATION_SET

    def pick_location(self, lat: float, lng: float) -> bool:
        """Accept a map pick while composing. Returns False when ignored."""
        if not self.is_active or self.submitting:
            return False
        self.pending_location = Coordinate(lat=lat, lng=lng)
        self.phase = EditPhase.LOCATION_SET
        self._clear_error()
        return True

    def update_form(self, **fields: Any) -> None:
        self._require_active()
        self._require_not_submitting()
        unknown = set(fields) - set(SpotForm.model_fields)
        if unknown:
            raise SpotValidationError("form", f"Unknown spot field(s): {', '.join(sorted(unknown))}")
        for key, value in fields.items():
            setattr(self.form, key, value)

    def stage_photos(self, photos: Sequence[StagedPhoto]) -> None:
        """Replace the staged local photo files."""
        self._require_active()
        self._require_not_submitting()
        self.staged_photos = list(photos)

    def cancel(self) -> bool:
        if self.submitting:
            return False
        self._reset()
        self.phase = EditPhase.IDLE
        return True

    def validate(self) -> None:
        """Raise SpotValidationError for failures detectable without the store."""
        self._require_active()
        if self.pending_location is None:
            raise SpotValidationError("location", "Tap on the map to choose a location.")
        if not self.form.name.strip():
            raise SpotValidationError("name", "Please give this spot a name.")

    def build_payload(self) -> dict:
        """Store payload from the form, before uploaded photo URLs are appended."""
        form = self.form
        return {
            "name": form.name.strip(),
            "description": form.description.strip(),
            "lat": self.pending_location.lat,
            "lng": self.pending_location.lng,
            "overnight_allowed": form.overnight_allowed,
            "has_bathroom": form.has_bathroom,
            "cell_signal": clamp_int(form.cell_signal, *CELL_SIGNAL_RANGE),
            "safety_rating": clamp_int(form.safety_rating, *SAFETY_RATING_RANGE),
            "noise_level": form.noise_level or DEFAULT_NOISE_LEVEL,
            "spot_type": form.spot_type or DEFAULT_SPOT_TYPE,
            "photo_urls": parse_url_list(form.photo_urls),
        }

    def _fail(self, message: str, field: Optional[str] = None) -> SubmitResult:
        self.phase = EditPhase.FAILED
        self.error = message
        self.error_field = field
        return SubmitResult(ok=False, message=message, field=field)

    async def _upload_and_write(self, store: SpotStore) -> SubmitResult:
        payload = self.build_payload()

        outcome = await upload_in_order(store, self.staged_photos)
        if not outcome.ok:
            return self._fail(f"Failed to upload one of the photos: {outcome.error}", "photos")
        payload["photo_urls"] = payload["photo_urls"] + outcome.urls

        if self.editing_spot_id is not None:
            raw = await store.update_spot(self.editing_spot_id, payload)
        else:
            raw = await store.insert_spot(payload)
        return SubmitResult(ok=True, spot=normalize_spot(raw))

    async def submit(self, store: SpotStore) -> SubmitResult:
        """Validate, upload staged photos in order, then insert or update the spot.

        A second call while one is in flight is a no-op.
        """
        if self.submitting:
            return SubmitResult(ok=False, message="A submission is already in progress.", field="session")
        try:
            self.validate()
        except SpotValidationError as exc:
            self.error = exc.message
            self.error_field = exc.field
            return SubmitResult(ok=False, message=exc.message, field=exc.field)

        editing = self.editing_spot_id is not None
        self.phase = EditPhase.SUBMITTING
        self._clear_error()
        try:
            if self.submit_timeout_s:
                result = await asyncio.wait_for(self._upload_and_write(store), self.submit_timeout_s)
            else:
                result = await self._upload_and_write(store)
        except StoreError as exc:
            logger.error("Saving spot failed: %s", exc)
            return self._fail(str(exc))
        except TimeoutError:
            logger.error("Saving spot timed out after %ss", self.submit_timeout_s)
            return self._fail(f"Saving timed out after {self.submit_timeout_s:g}s.")
        except Exception as exc:
            logger.exception("Unexpected error saving spot")
            return self._fail(str(exc) or exc.__class__.__name__)

        if not result.ok:
            return result

        self._reset()
        self.phase = EditPhase.SUCCESS
        result.message = "Spot updated successfully." if editing else "Spot added!"
        return result

    def summary(self) -> dict:
        return {
            "phase": self.phase.value,
            "mode": self.mode,
            "editing_spot_id": self.editing_spot_id,
            "location": self.pending_location.model_dump() if self.pending_location else None,
            "form": self.form.model_dump(),
            "staged_photos": [p.filename for p in self.staged_photos],
            "error": self.error or None,
            "error_field": self.error_field,
        }
