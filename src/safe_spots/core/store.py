"""Remote store contract and its hosted PostgREST/object-storage client."""

import logging
from typing import Any, Protocol

import httpx

from ..errors import StoreError

logger = logging.getLogger(__name__)

SPOT_COLUMNS = (
    "id,name,description,lat,lng,overnight_allowed,has_bathroom,cell_signal,"
    "noise_level,safety_rating,spot_type,created_at,photo_urls"
)
REVIEW_COLUMNS = "id,spot_id,rating,comment,nickname,created_at"


class SpotStore(Protocol):
    """Read/write operations the catalog needs from the remote store.

    Every method raises ``StoreError`` on failure.
    """

    async def list_spots(self) -> list[dict]: ...

    async def list_reviews(self) -> list[dict]: ...

    async def insert_spot(self, payload: dict) -> dict: ...

    async def update_spot(self, spot_id: str, payload: dict) -> dict: ...

    async def insert_review(self, payload: dict) -> dict: ...

    async def upload_file(
        self, content: bytes, suggested_name: str, content_type: str = "application/octet-stream"
    ) -> str: ...


def _json_body(response: httpx.Response, table: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        logger.warning("Non-JSON response from %s: %.200s", table, response.text)
        raise StoreError(f"Unexpected non-JSON response from {table}") from exc


def _error_message(response: httpx.Response) -> str:
    """Pull the store's own error message out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("message", "error_description", "error", "msg"):
            if body.get(key):
                return str(body[key])
    return response.text or f"HTTP {response.status_code}"


class SupabaseStore:
    """SpotStore backed by a hosted Supabase project (REST + Storage APIs)."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        bucket: str = "spot-photos",
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.bucket = bucket
        self.timeout = timeout

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "User-Agent": "nomad-safe-spots/0.1",
        }

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.base_url}{path}"
        headers = {**self._headers, **kwargs.pop("headers", {})}
        async with httpx.AsyncClient(timeout=self.timeout, headers=headers) as client:
            try:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                message = _error_message(exc.response)
                logger.warning(
                    "%s %s returned HTTP %s: %s", method, path, exc.response.status_code, message
                )
                raise StoreError(message) from exc
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                logger.warning("%s %s failed: %s", method, path, exc)
                raise StoreError(str(exc) or exc.__class__.__name__) from exc
        return response

    async def _select(self, table: str, columns: str) -> list[dict]:
        response = await self._request(
            "GET",
            f"/rest/v1/{table}",
            params={"select": columns, "order": "created_at.desc"},
        )
        rows = _json_body(response, table)
        if not isinstance(rows, list):
            raise StoreError(f"Unexpected response listing {table}")
        return rows

    @staticmethod
    def _single(rows: Any, table: str) -> dict:
        if isinstance(rows, list):
            if not rows:
                raise StoreError(f"No {table} row returned")
            return rows[0]
        if isinstance(rows, dict):
            return rows
        raise StoreError(f"Unexpected response writing {table}")

    async def list_spots(self) -> list[dict]:
        return await self._select("spots", SPOT_COLUMNS)

    async def list_reviews(self) -> list[dict]:
        return await self._select("reviews", REVIEW_COLUMNS)

    async def insert_spot(self, payload: dict) -> dict:
        response = await self._request(
            "POST", "/rest/v1/spots", json=payload, headers={"Prefer": "return=representation"}
        )
        return self._single(_json_body(response, "spots"), "spots")

    async def update_spot(self, spot_id: str, payload: dict) -> dict:
        response = await self._request(
            "PATCH",
            "/rest/v1/spots",
            params={"id": f"eq.{spot_id}"},
            json=payload,
            headers={"Prefer": "return=representation"},
        )
        return self._single(_json_body(response, "spots"), "spots")

    async def insert_review(self, payload: dict) -> dict:
        response = await self._request(
            "POST", "/rest/v1/reviews", json=payload, headers={"Prefer": "return=representation"}
        )
        return self._single(_json_body(response, "reviews"), "reviews")

    def public_url(self, object_name: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{object_name}"

    async def upload_file(
        self, content: bytes, suggested_name: str, content_type: str = "application/octet-stream"
    ) -> str:
        await self._request(
            "POST",
            f"/storage/v1/object/{self.bucket}/{suggested_name}",
            content=content,
            headers={
                "Content-Type": content_type,
                "Cache-Control": "max-age=3600",
                "x-upsert": "false",
            },
        )
        return self.public_url(suggested_name)
