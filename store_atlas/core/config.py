"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    database_url: str
    api_port: int = 8080
    geocoder_base_url: str = "https://nominatim.openstreetmap.org"
    geocoder_user_agent: str = "store-atlas/1.0"
    geocoder_timeout: float = 10.0
    geocoder_min_delay: float = 1.0
    cluster_threshold: float = 4.0
    page_size: int = 24
    public_store_url: str = "https://stores.sedifex.com/store"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    database_url = os.getenv("DATABASE_URL", "")
    api_port = int(os.getenv("API_PORT") or os.getenv("PORT") or "8080")
    geocoder_base_url = os.getenv("GEOCODER_BASE_URL", "https://nominatim.openstreetmap.org").rstrip("/")
    geocoder_user_agent = os.getenv("GEOCODER_USER_AGENT", "").strip() or "store-atlas/1.0"
    geocoder_timeout = float(os.getenv("GEOCODER_TIMEOUT", "10"))
    geocoder_min_delay = float(os.getenv("GEOCODER_MIN_DELAY", "1.0"))
    cluster_threshold = float(os.getenv("CLUSTER_THRESHOLD", "4"))
    page_size = int(os.getenv("DIRECTORY_PAGE_SIZE", "24"))
    public_store_url = os.getenv("PUBLIC_STORE_URL", "https://stores.sedifex.com/store").rstrip("/")

    if not database_url:
        logger.warning("DATABASE_URL is not set; database operations will fail.")
    if page_size <= 0:
        logger.warning("DIRECTORY_PAGE_SIZE=%s is not positive; falling back to 24.", page_size)
        page_size = 24

    return Settings(
        database_url=database_url,
        api_port=api_port,
        geocoder_base_url=geocoder_base_url,
        geocoder_user_agent=geocoder_user_agent,
        geocoder_timeout=geocoder_timeout,
        geocoder_min_delay=geocoder_min_delay,
        cluster_threshold=cluster_threshold,
        page_size=page_size,
        public_store_url=public_store_url,
    )
