"""Database helpers for the store directory."""

import logging
from collections import defaultdict
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import psycopg2
from psycopg2 import extras, pool

from store_atlas.core.config import get_settings

logger = logging.getLogger(__name__)

_connection_pool: Optional[pool.SimpleConnectionPool] = None


def init_pool(minconn: int = 1, maxconn: int = 5) -> pool.SimpleConnectionPool:
    """Initialise and return the shared connection pool."""
    global _connection_pool
    if _connection_pool is None:
        settings = get_settings()
        if not settings.database_url:
            raise RuntimeError("DATABASE_URL is required for database connections")
        _connection_pool = pool.SimpleConnectionPool(
            minconn,
            maxconn,
            dsn=settings.database_url,
            connect_timeout=10,
        )
        logger.info("Database connection pool initialised")
    return _connection_pool


@contextmanager
def get_connection():
    """Context manager yielding a pooled connection."""
    pg_pool = init_pool()
    conn = pg_pool.getconn()
    try:
        yield conn
    finally:
        pg_pool.putconn(conn)


_SELECT_STORES = """
SELECT
    id,
    name,
    display_name,
    email,
    phone,
    whatsapp_phone,
    status,
    contract_status,
    address_line1,
    city,
    region,
    country,
    public_description,
    created_at,
    updated_at,
    latitude,
    longitude,
    geocoded_at
FROM stores
ORDER BY id;
"""

_SELECT_STORE = _SELECT_STORES.replace("ORDER BY id;", "WHERE id = %(store_id)s;")

_SELECT_PRODUCTS = """
SELECT
    id,
    store_id,
    title,
    name,
    label,
    category,
    type,
    kind,
    description,
    price,
    currency,
    unit
FROM store_products
WHERE store_id = ANY(%(store_ids)s)
ORDER BY store_id, id;
"""

_UPDATE_COORDINATES = """
UPDATE stores SET
    latitude = %(latitude)s,
    longitude = %(longitude)s,
    geocoded_at = %(geocoded_at)s
WHERE id = %(store_id)s;
"""


def fetch_stores() -> List[Dict[str, Any]]:
    """Return every store row as a dictionary."""
    with get_connection() as conn:
        with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
            cur.execute(_SELECT_STORES)
            rows = [dict(row) for row in cur.fetchall()]
    logger.debug("Fetched %d store rows", len(rows))
    return rows


def fetch_store(store_id: str) -> Optional[Dict[str, Any]]:
    """Return a single store row, or ``None`` when no store has ``store_id``."""
    with get_connection() as conn:
        with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
            cur.execute(_SELECT_STORE, {"store_id": str(store_id)})
            row = cur.fetchone()
    return dict(row) if row is not None else None


def fetch_products(store_ids: Iterable[str]) -> Dict[str, List[Dict[str, Any]]]:
    """Return product rows grouped by store id for the given stores."""
    ids = [str(store_id) for store_id in store_ids]
    grouped: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
    if not ids:
        return grouped

    with get_connection() as conn:
        with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
            cur.execute(_SELECT_PRODUCTS, {"store_ids": ids})
            for row in cur.fetchall():
                grouped[str(row["store_id"])].append(dict(row))
    return grouped


def update_store_coordinates(store_id: str, latitude: float, longitude: float, geocoded_at: datetime) -> None:
    """Write resolved coordinates onto a single store row."""
    if not store_id:
        raise ValueError("store_id is required to persist coordinates")

    params = {
        "store_id": str(store_id),
        "latitude": latitude,
        "longitude": longitude,
        "geocoded_at": geocoded_at,
    }
    with get_connection() as conn:
        try:
            with conn.cursor() as cur:
                cur.execute(_UPDATE_COORDINATES, params)
                updated = cur.rowcount
            if updated == 0:
                raise LookupError(f"store {store_id} does not exist")
            conn.commit()
        except (psycopg2.Error, LookupError):
            conn.rollback()
            raise
    logger.debug("Persisted coordinates for store %s", store_id)
