"""Load the store listing with coordinates and products attached."""

import logging
from typing import List, Optional

from store_atlas.core import db
from store_atlas.etl.transform import to_store_record
from store_atlas.geo.resolver import GeocodeResolver
from store_atlas.models import StoreRecord

logger = logging.getLogger(__name__)


def load_stores(resolver: Optional[GeocodeResolver] = None) -> List[StoreRecord]:
    """Read every store, resolve missing coordinates and attach products.

    Records are resolved one at a time, in store order. A record whose
    address cannot be geocoded keeps ``None`` coordinates and is still
    returned. Record-store read errors propagate to the caller.
    """
    rows = db.fetch_stores()
    products_by_store = db.fetch_products(str(row.get("id")) for row in rows)

    stores: List[StoreRecord] = []
    for row in rows:
        record = to_store_record(row, products_by_store.get(str(row.get("id")), []))
        if resolver is not None:
            resolver.resolve_record(record)
        stores.append(record)

    located = sum(1 for store in stores if store.latitude is not None and store.longitude is not None)
    logger.info("Loaded %d stores (%d with coordinates)", len(stores), located)
    return stores


def load_store(store_id: str, resolver: Optional[GeocodeResolver] = None) -> Optional[StoreRecord]:
    """Read one store by id and resolve only its coordinates; ``None`` if it does not exist."""
    row = db.fetch_store(store_id)
    if row is None:
        return None

    record_id = str(row.get("id"))
    products_by_store = db.fetch_products([record_id])
    record = to_store_record(row, products_by_store.get(record_id, []))
    if resolver is not None:
        resolver.resolve_record(record)
    return record
