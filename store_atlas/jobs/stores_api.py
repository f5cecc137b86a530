"""HTTP entrypoint serving the store listing, directory and map payloads."""

from __future__ import annotations

import logging
import math
import os
from typing import Any, List, Optional

from flask import Flask, jsonify, request

from store_atlas.core.config import get_settings
from store_atlas.core.db import update_store_coordinates
from store_atlas.core.stores import load_store, load_stores
from store_atlas.directory.map_layer import build_map
from store_atlas.directory.query import country_options, filter_stores, paginate, summarize
from store_atlas.etl.transform import to_store_payload
from store_atlas.geo.resolver import CoordinateCache, GeocodeResolver
from store_atlas.models import StoreRecord

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

LOAD_ERROR = "Unable to load stores right now. Please retry."

# ---------- App & resolver ----------
app = Flask(__name__)
_resolver: Optional[GeocodeResolver] = None


def get_resolver() -> GeocodeResolver:
    """Return the resolver owned by this process; its cache lives as long as the app."""
    global _resolver
    if _resolver is None:
        _resolver = GeocodeResolver.from_settings(
            get_settings(),
            cache=CoordinateCache(),
            persist=update_store_coordinates,
        )
    return _resolver


# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; does not touch the database."""
    resolver = get_resolver()
    return (
        jsonify(
            {
                "status": "ok",
                "geocode_cache_size": len(resolver.cache),
                "geocode_lookups": resolver.stats.lookups,
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.get("/api/stores")
def list_stores() -> Any:
    stores, error = _load_or_error()
    if error is not None:
        return error
    return jsonify({"stores": [to_store_payload(store) for store in stores]}), 200


@app.get("/api/stores/<store_id>")
def get_store(store_id: str) -> Any:
    try:
        store = load_store(store_id, get_resolver())
    except Exception as exc:  # noqa: BLE001
        logger.exception("Failed to load store %s: %s", store_id, exc)
        return jsonify({"error": LOAD_ERROR}), 500
    if store is None:
        return jsonify({"error": f"store {store_id} not found"}), 404
    return jsonify({"store": to_store_payload(store)}), 200


@app.get("/api/directory")
def directory() -> Any:
    """Filtered, paginated listing. Query params: q, country, page."""
    page_raw = request.args.get("page", "1")
    try:
        page_number = int(page_raw)
    except (TypeError, ValueError):
        return jsonify({"error": "page must be an integer"}), 400

    stores, error = _load_or_error()
    if error is not None:
        return error

    filtered = filter_stores(stores, request.args.get("q", ""), request.args.get("country", ""))
    page = paginate(filtered, page_number, get_settings().page_size)
    return (
        jsonify(
            {
                "stores": [to_store_payload(store) for store in page.items],
                "page": page.page,
                "total_pages": page.total_pages,
                "total": page.total,
                "summary": summarize(filtered),
                "country_options": country_options(stores),
            }
        ),
        200,
    )


@app.get("/api/map")
def store_map() -> Any:
    """Clustered pins for the filtered listing. Query params: q, country, threshold."""
    settings = get_settings()
    threshold = settings.cluster_threshold
    threshold_raw = request.args.get("threshold")
    if threshold_raw is not None:
        try:
            threshold = float(threshold_raw)
        except (TypeError, ValueError):
            return jsonify({"error": "threshold must be numeric"}), 400
        if not math.isfinite(threshold) or threshold < 0:
            return jsonify({"error": "threshold must be a non-negative number"}), 400

    stores, error = _load_or_error()
    if error is not None:
        return error

    filtered = filter_stores(stores, request.args.get("q", ""), request.args.get("country", ""))
    clusters = build_map(filtered, threshold=threshold, store_url=settings.public_store_url)
    return jsonify({"clusters": clusters, "count": len(clusters)}), 200


# ---------- Internals ----------


def _load_or_error() -> tuple[List[StoreRecord], Optional[Any]]:
    try:
        return load_stores(get_resolver()), None
    except Exception as exc:  # noqa: BLE001
        logger.exception("Failed to load stores: %s", exc)
        return [], (jsonify({"error": LOAD_ERROR}), 500)


def main() -> None:
    port = get_settings().api_port
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
