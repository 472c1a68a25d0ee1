"""Settings for the nomad-safe-spots server.

Read priority: constructor arguments, then environment variables
(``SAFE_SPOTS_*``), then ``.env``, then the defaults below.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_favorites_path() -> Path:
    return Path.home() / ".cache" / "nomad-safe-spots" / "favorites.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SAFE_SPOTS_", env_file=".env", extra="ignore")

    supabase_url: str = ""
    supabase_key: str = ""
    photo_bucket: str = "spot-photos"
    favorites_path: Path = Field(default_factory=_default_favorites_path)
    http_timeout_s: float = Field(default=30.0, gt=0)
    submit_timeout_s: Optional[float] = Field(default=None, gt=0)
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
