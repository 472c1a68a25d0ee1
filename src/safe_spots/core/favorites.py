"""Viewer-local set of starred spot ids, persisted after every change."""

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class FavoritesBackend(Protocol):
    def load(self) -> list[str]: ...

    def save(self, ids: list[str]) -> None: ...


class JsonFileFavorites:
    """Stores favorite ids as a JSON array in a local file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> list[str]:
        if not self.path.exists():
            return []
        with open(self.path) as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON array in {self.path}")
        return [str(x) for x in data]

    def save(self, ids: list[str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(ids, f)


class FavoritesStore:
    """In-memory favorites set backed by a durable store.

    The in-memory set is the source of truth for the running process; load
    and save failures are logged and otherwise ignored.
    """

    def __init__(self, backend: FavoritesBackend):
        self._backend = backend
        self._ids: set[str] = set()

    def load(self) -> None:
        try:
            ids = self._backend.load()
        except Exception as exc:
            logger.warning("Could not load favorites: %s", exc)
            return
        self._ids = set(ids)
        logger.debug("Loaded %d favorite(s)", len(self._ids))

    def save(self) -> None:
        try:
            self._backend.save(sorted(self._ids))
        except Exception as exc:
            logger.warning("Error saving favorites: %s", exc)

    def is_favorite(self, spot_id: str) -> bool:
        return spot_id in self._ids

    def toggle(self, spot_id: str) -> bool:
        """Flip membership of ``spot_id`` and persist. Returns the new membership."""
        if spot_id in self._ids:
            self._ids.discard(spot_id)
        else:
            self._ids.add(spot_id)
        self.save()
        return spot_id in self._ids

    def ids(self) -> frozenset[str]:
        return frozenset(self._ids)

    def __contains__(self, spot_id: object) -> bool:
        return spot_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._ids))

    def __len__(self) -> int:
        return len(self._ids)
