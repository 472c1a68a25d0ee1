"""Shared fixtures: an in-memory store that records every call."""
import pytest

from safe_spots.errors import StoreError


class FakeStore:
    """SpotStore double. ``fail_on`` names methods that raise StoreError;
    ``fail_upload_at`` is the 1-based upload call that fails."""

    def __init__(self, spots=None, reviews=None, fail_on=(), fail_upload_at=None):
        self.spots = list(spots or [])
        self.reviews = list(reviews or [])
        self.fail_on = set(fail_on)
        self.fail_upload_at = fail_upload_at
        self.calls = []
        self.uploaded = []
        self._next_id = 100

    def _record(self, name, *args):
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise StoreError(f"{name} failed: permission denied")

    @property
    def writes(self):
        return [c for c in self.calls if c[0] in ("insert_spot", "update_spot")]

    async def list_spots(self):
        self._record("list_spots")
        return list(self.spots)

    async def list_reviews(self):
        self._record("list_reviews")
        return list(self.reviews)

    async def insert_spot(self, payload):
        self._record("insert_spot", payload)
        self._next_id += 1
        row = {**payload, "id": str(self._next_id), "created_at": "2025-06-01T12:00:00+00:00"}
        self.spots.insert(0, row)
        return row

    async def update_spot(self, spot_id, payload):
        self._record("update_spot", spot_id, payload)
        return {**payload, "id": spot_id, "created_at": "2025-01-01T12:00:00+00:00"}

    async def insert_review(self, payload):
        self._record("insert_review", payload)
        self._next_id += 1
        return {**payload, "id": f"r{self._next_id}", "created_at": "2025-06-01T12:00:00+00:00"}

    async def upload_file(self, content, suggested_name, content_type="application/octet-stream"):
        self.calls.append(("upload_file", suggested_name))
        n = sum(1 for c in self.calls if c[0] == "upload_file")
        if self.fail_upload_at == n:
            raise StoreError("The object exceeded the maximum allowed size")
        url = f"https://cdn.example.com/spot-photos/{suggested_name}"
        self.uploaded.append(url)
        return url


class MemoryFavorites:
    def __init__(self, ids=(), fail_save=False, fail_load=False):
        self.saved = list(ids)
        self.fail_save = fail_save
        self.fail_load = fail_load
        self.save_calls = 0

    def load(self):
        if self.fail_load:
            raise OSError("disk unavailable")
        return list(self.saved)

    def save(self, ids):
        self.save_calls += 1
        if self.fail_save:
            raise OSError("read-only file system")
        self.saved = list(ids)


RAW_SPOTS = [
    {
        "id": 1, "name": "Forest Rd 12", "description": "Flat pullout",
        "lat": 45.50, "lng": -121.70, "spot_type": "forest_road",
        "overnight_allowed": True, "has_bathroom": False, "cell_signal": 2,
        "safety_rating": 5, "noise_level": "silent",
        "photo_urls": "http://a.example/1.jpg, http://a.example/2.jpg",
        "created_at": "2025-03-01T10:00:00+00:00",
    },
    {
        "id": 2, "name": "Walmart Hood River", "description": "",
        "lat": 45.70, "lng": -121.50, "spot_type": "store",
        "overnight_allowed": True, "has_bathroom": True, "cell_signal": 5,
        "safety_rating": 3, "noise_level": "some_road_noise",
        "photo_urls": None, "created_at": "2025-02-01T10:00:00+00:00",
    },
    {
        "id": 3, "name": "Lost Lake CG", "description": "Paid sites",
        "lat": 45.49, "lng": -121.82, "spot_type": "campground",
        "overnight_allowed": False, "has_bathroom": True, "cell_signal": 0,
        "safety_rating": 4, "noise_level": "quiet",
        "photo_urls": '["http://b.example/x.jpg"]', "created_at": "2025-01-01T10:00:00+00:00",
    },
]

RAW_REVIEWS = [
    {"id": 11, "spot_id": 1, "rating": 5, "comment": "Great", "nickname": "van_life", "created_at": "2025-03-05T00:00:00+00:00"},
    {"id": 12, "spot_id": 1, "rating": 3, "comment": "Dusty", "nickname": None, "created_at": "2025-03-04T00:00:00+00:00"},
    {"id": 13, "spot_id": 2, "rating": 4, "comment": "Fine", "nickname": "", "created_at": "2025-03-03T00:00:00+00:00"},
]


@pytest.fixture
def fake_store():
    return FakeStore(spots=RAW_SPOTS, reviews=RAW_REVIEWS)


@pytest.fixture
def memory_favorites():
    return MemoryFavorites()


@pytest.fixture
def catalog(fake_store, memory_favorites):
    from safe_spots.catalog import SpotCatalog
    from safe_spots.core.favorites import FavoritesStore

    favorites = FavoritesStore(memory_favorites)
    favorites.load()
    return SpotCatalog(fake_store, favorites)


@pytest.fixture
def anyio_backend():
    # The code under test is asyncio-only (asyncio.gather / asyncio.wait_for).
    return "asyncio"
