"""Great-circle distance between spots and the viewer."""

import math
from typing import Optional

from safe_spots.models import Coordinate

EARTH_RADIUS_KM = 6371.0

GOOGLE_MAPS_URL = "https://www.google.com/maps?q={lat},{lng}"


def haversine_km(a: Optional[Coordinate], b: Optional[Coordinate]) -> Optional[float]:
    """Haversine distance in km, or None when either point is unknown."""
    if a is None or b is None:
        return None
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)

    sin_d_lat = math.sin(d_lat / 2)
    sin_d_lng = math.sin(d_lng / 2)
    h = sin_d_lat * sin_d_lat + math.cos(lat1) * math.cos(lat2) * sin_d_lng * sin_d_lng
    # Rounding can push h a hair outside [0, 1] near antipodes
    h = min(1.0, max(0.0, h))
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def maps_link(lat: float, lng: float) -> str:
    """External maps URL that opens the given point."""
    return GOOGLE_MAPS_URL.format(lat=lat, lng=lng)
