"""Canonicalize persisted spot and review records.

Records in the store have drifted across schema versions: ``photo_urls`` may
be an array, a JSON-encoded array, or a bare comma-joined string, and numeric
fields may be missing, textual, or out of range. Everything here substitutes
documented defaults instead of raising, so a single bad row never blocks the
catalog from loading.
"""

import json
import logging
import math
import re
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any, Optional

from safe_spots.models import (
    CELL_SIGNAL_RANGE,
    REVIEW_RATING_RANGE,
    SAFETY_RATING_RANGE,
    Review,
    Spot,
)

logger = logging.getLogger(__name__)

DEFAULT_CELL_SIGNAL = 3
DEFAULT_SAFETY_RATING = 4
DEFAULT_SPOT_TYPE = "other"
DEFAULT_NOISE_LEVEL = "unknown"
DEFAULT_SPOT_NAME = "Unnamed spot"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_TRUTHY = {"true", "t", "1", "yes", "y", "on"}

NOISE_LEVEL_LABELS = {
    "silent": "Silent",
    "very_quiet": "Very quiet",
    "quiet": "Quiet",
    "some_road": "Some road noise",
    "some_road_noise": "Some road noise",
    "steady_noise": "Loud but steady",
    "party": "Party / unpredictable",
    "medium": "Medium",
    "noisy": "Noisy",
}

SPOT_TYPE_LABELS = {
    "forest_road": ("🌲", "Forest road"),
    "campground": ("🏕️", "Campground"),
    "store": ("🛒", "Store"),
    "rest_area": ("🛣️", "Rest area"),
    "trailhead": ("🥾", "Trailhead"),
    "other": ("📍", "Other"),
}


def parse_url_list(text: Optional[str]) -> list[str]:
    """Split comma-separated text, trimming whitespace and dropping empties."""
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


def normalize_photo_urls(raw: Any) -> list[str]:
    """Always yield a list of URL strings, whatever the stored encoding."""
    if raw is None:
        return []
    if isinstance(raw, str):
        if not raw.strip():
            return []
        try:
            parsed = json.loads(raw)
        except ValueError:
            parsed = None
        if isinstance(parsed, list) and all(isinstance(u, str) for u in parsed):
            return list(parsed)
        return parse_url_list(raw)
    if isinstance(raw, Sequence):
        return [u for u in raw if isinstance(u, str)]
    logger.debug("Unrecognized photo_urls value of type %s", type(raw).__name__)
    return []


def to_int(value: Any) -> Optional[int]:
    """Parse a leading integer the way a form field would, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


def clamp_int(value: Any, lo: int, hi: int, default: Optional[int] = None) -> int:
    """Clamp a loosely-typed integer into [lo, hi].

    Non-numeric values become ``default``, or ``lo`` when no default is given.
    """
    n = to_int(value)
    if n is None:
        return lo if default is None else default
    return min(max(n, lo), hi)


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(f) or math.isinf(f) else f


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


def _to_text(value: Any) -> str:
    return "" if value is None else str(value)


def _to_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            logger.debug("Unparseable created_at %r", value)
    return None


def _clamp_coord(value: Any, limit: float) -> float:
    f = _to_float(value)
    if f is None:
        return 0.0
    return min(max(f, -limit), limit)


def normalize_spot(raw: Mapping | Spot) -> Spot:
    """Convert a raw store row (or an existing Spot) into a canonical Spot."""
    if isinstance(raw, Spot):
        raw = raw.model_dump()

    lat = raw.get("lat")
    lng = raw.get("lng", raw.get("lon"))
    if _to_float(lat) is None or _to_float(lng) is None:
        logger.warning("Spot %s has no usable coordinate", raw.get("id"))

    name = _to_text(raw.get("name")).strip() or DEFAULT_SPOT_NAME

    return Spot(
        id=_to_text(raw.get("id")),
        name=name,
        description=_to_text(raw.get("description")),
        lat=_clamp_coord(lat, 90.0),
        lng=_clamp_coord(lng, 180.0),
        spot_type=_to_text(raw.get("spot_type")) or DEFAULT_SPOT_TYPE,
        overnight_allowed=_to_bool(raw.get("overnight_allowed")),
        has_bathroom=_to_bool(raw.get("has_bathroom")),
        cell_signal=clamp_int(raw.get("cell_signal"), *CELL_SIGNAL_RANGE, default=DEFAULT_CELL_SIGNAL),
        safety_rating=clamp_int(
            raw.get("safety_rating"), *SAFETY_RATING_RANGE, default=DEFAULT_SAFETY_RATING
        ),
        noise_level=_to_text(raw.get("noise_level")) or DEFAULT_NOISE_LEVEL,
        photo_urls=normalize_photo_urls(raw.get("photo_urls")),
        created_at=_to_datetime(raw.get("created_at")),
    )


def normalize_review(raw: Mapping | Review) -> Review:
    """Convert a raw review row into a canonical Review."""
    if isinstance(raw, Review):
        raw = raw.model_dump()
    nickname = _to_text(raw.get("nickname")).strip() or None
    if to_int(raw.get("rating")) is None:
        logger.debug(
            "Review %s has no usable rating; counting it as %d", raw.get("id"), REVIEW_RATING_RANGE[0]
        )
    return Review(
        id=_to_text(raw.get("id")),
        spot_id=_to_text(raw.get("spot_id")),
        rating=clamp_int(raw.get("rating"), *REVIEW_RATING_RANGE),
        comment=_to_text(raw.get("comment")),
        nickname=nickname,
        created_at=_to_datetime(raw.get("created_at")),
    )


def format_noise_level(level: Optional[str]) -> str:
    """Display label for a noise level; unknown tags pass through as-is."""
    if not level or level == DEFAULT_NOISE_LEVEL:
        return "Unknown"
    return NOISE_LEVEL_LABELS.get(level, level)


def format_spot_type(spot_type: Optional[str]) -> str:
    """Display label with icon, e.g. ``"🌲 Forest road"``."""
    icon, label = SPOT_TYPE_LABELS.get(spot_type or DEFAULT_SPOT_TYPE, ("📍", spot_type))
    return f"{icon} {label}"
