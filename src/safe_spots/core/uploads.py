"""Sequential photo uploads that stop at the first failure.

Uploads run strictly one after another, in staging order. When one fails,
the remaining files are never sent and files already uploaded are left in
object storage untouched (nothing references them, since the spot record is
only written after every upload succeeds).
"""

import logging
import secrets
import string
import time
from collections.abc import Sequence
from pathlib import PurePath
from typing import Optional

from ..errors import StoreError
from .models import StagedPhoto, UploadOutcome
from .store import SpotStore

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def _random_base36(length: int = 11) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def make_object_name(filename: str, now_ms: Optional[int] = None) -> str:
    """Collision-resistant object name keeping the original file extension."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    ext = PurePath(filename).suffix.lstrip(".") or "bin"
    return f"{now_ms}-{_random_base36()}.{ext}"


async def upload_in_order(store: SpotStore, photos: Sequence[StagedPhoto]) -> UploadOutcome:
    """Upload each staged photo in turn; short-circuit on the first failure."""
    urls: list[str] = []
    for index, photo in enumerate(photos):
        object_name = make_object_name(photo.filename)
        try:
            url = await store.upload_file(photo.content, object_name, photo.content_type)
        except StoreError as exc:
            logger.warning(
                "Upload %d/%d (%s) failed, skipping %d remaining: %s",
                index + 1, len(photos), photo.filename, len(photos) - index - 1, exc,
            )
            return UploadOutcome(urls=urls, failed_file=photo.filename, error=str(exc))
        urls.append(url)
    return UploadOutcome(urls=urls)
