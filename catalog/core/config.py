"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes"}


@dataclass(frozen=True)
class Settings:
    port: int = 8080
    max_upload_mb: int = 50
    seed_sample_data: bool = True
    log_level: str = "INFO"
    api_url: str = "http://localhost:8080"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("%s=%r is not an integer; using %d.", name, raw, default)
        return default
    if value <= 0:
        logger.warning("%s must be positive, got %d; using %d.", name, value, default)
        return default
    return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    port = _int_from_env("PORT", 8080)
    max_upload_mb = _int_from_env("MAX_UPLOAD_MB", 50)
    seed_sample_data = os.getenv("SEED_SAMPLE_DATA", "true").strip().lower() in _TRUTHY
    log_level = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    api_url = (os.getenv("ASSET_API_URL") or f"http://localhost:{port}").rstrip("/")

    if not seed_sample_data:
        logger.info("SEED_SAMPLE_DATA is disabled; the asset store starts empty.")

    return Settings(
        port=port,
        max_upload_mb=max_upload_mb,
        seed_sample_data=seed_sample_data,
        log_level=log_level,
        api_url=api_url,
    )
