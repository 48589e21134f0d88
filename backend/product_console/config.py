from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings
from functools import lru_cache

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Product Console API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Remote persistence API (products, uploads, reference data)
    api_base_url: str = "http://localhost:3000/api"
    api_token: str = ""
    http_timeout_seconds: float = 30.0

    # Attachment uploads
    upload_concurrency: int = 1              # 1 = one file at a time
    max_upload_size_mb: int = 5
    allowed_upload_types: list[str] = ["image/"]

    # Lookup lists (categories, locations, suppliers) are refetched after this
    reference_cache_ttl_seconds: float = 60.0

    # Child collections: "full_replace" (omission deletes server-side)
    # or "explicit_delete" (one delete call per removed child id)
    child_deletion_policy: Literal["full_replace", "explicit_delete"] = "full_replace"

    # Where the caller navigates after a successful save
    products_list_path: str = "/products"

    # Edit sessions untouched for this long are abandoned and dropped
    session_idle_timeout_seconds: float = 1800.0

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore — outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_pipeline: str = "INFO"         # upload + submission pipeline
    log_level_remote: str = "INFO"           # remote API adapters

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    def model_post_init(self, __context: object) -> None:
        """Clamp upload concurrency to at least one worker."""
        if self.upload_concurrency < 1:
            object.__setattr__(self, "upload_concurrency", 1)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
