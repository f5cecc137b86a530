"""Client utilities for a Nominatim-compatible geocoding service."""

import logging
from typing import Any, Dict, List

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://nominatim.openstreetmap.org"


class NominatimError(RuntimeError):
    """Raised when the service answers with a payload that is not a candidate list."""


def search(
    query: str,
    user_agent: str,
    base_url: str = _BASE_URL,
    timeout: float = 10,
    limit: int = 1,
) -> List[Dict[str, Any]]:
    """Run a free-text search and return the raw candidate list.

    The public Nominatim instance rejects anonymous clients, so every request
    carries ``user_agent`` as its ``User-Agent`` header. HTTP failures surface
    as ``requests.RequestException``.
    """
    params = {"format": "json", "limit": limit, "q": query}
    headers = {"User-Agent": user_agent}
    response = _SESSION.get(f"{base_url}/search", params=params, headers=headers, timeout=timeout)
    response.raise_for_status()
    payload = response.json()
    if not isinstance(payload, list):
        logger.error("search returned a non-list payload for query=%s: %s", query, str(payload)[:200])
        raise NominatimError(f"unexpected payload type {type(payload).__name__}")
    logger.debug("search query=%s returned %d candidates", query, len(payload))
    return payload
