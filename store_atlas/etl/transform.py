"""Utilities for transforming record-store rows into models and API payloads."""

import logging
import math
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from store_atlas.models import StoreProduct, StoreRecord

logger = logging.getLogger(__name__)

_STORE_TEXT_FIELDS = (
    "name",
    "display_name",
    "email",
    "phone",
    "whatsapp_phone",
    "status",
    "contract_status",
    "address_line1",
    "city",
    "region",
    "country",
    "public_description",
)


def to_nullable_string(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def _to_datetime(value: Any) -> Optional[datetime]:
    return value if isinstance(value, datetime) else None


def _first_string(row: Dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = to_nullable_string(row.get(key))
        if value:
            return value
    return None


def to_store_product(row: Dict[str, Any]) -> Optional[StoreProduct]:
    """Map a product row, falling back across the alternative field names.

    Rows with no title, category or description carry nothing to show and
    are dropped.
    """
    title = _first_string(row, "title", "name", "label")
    category = _first_string(row, "category", "type", "kind")
    description = to_nullable_string(row.get("description"))

    if not title and not category and not description:
        logger.debug("Skipping empty product row %s", row.get("id"))
        return None

    return StoreProduct(
        id=str(row.get("id")),
        title=title,
        category=category,
        description=description,
        price=to_number(row.get("price")),
        currency=_first_string(row, "currency", "unit"),
    )


def to_store_products(rows: Iterable[Dict[str, Any]]) -> List[StoreProduct]:
    products = (to_store_product(row) for row in rows or [])
    return [product for product in products if product is not None]


def to_store_record(row: Dict[str, Any], products: Optional[Iterable[Dict[str, Any]]] = None) -> StoreRecord:
    text = {name: to_nullable_string(row.get(name)) for name in _STORE_TEXT_FIELDS}
    if text["address_line1"] is None:
        text["address_line1"] = to_nullable_string(row.get("addressLine1"))

    return StoreRecord(
        id=str(row.get("id")),
        **text,
        created_at=_to_datetime(row.get("created_at")),
        updated_at=_to_datetime(row.get("updated_at")),
        latitude=to_number(row.get("latitude")),
        longitude=to_number(row.get("longitude")),
        geocoded_at=_to_datetime(row.get("geocoded_at")),
        products=to_store_products(products or []),
        raw=row,
    )


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def to_store_payload(record: StoreRecord) -> Dict[str, Any]:
    """Serialize a record for the listing endpoint; unresolved coordinates are ``None``."""
    payload: Dict[str, Any] = {"id": record.id}
    payload.update({name: getattr(record, name) for name in _STORE_TEXT_FIELDS})
    payload.update(
        {
            "created_at": _isoformat(record.created_at),
            "updated_at": _isoformat(record.updated_at),
            "latitude": record.latitude,
            "longitude": record.longitude,
            "geocoded_at": _isoformat(record.geocoded_at),
            "products": [
                {
                    "id": product.id,
                    "title": product.title,
                    "category": product.category,
                    "description": product.description,
                    "price": product.price,
                    "currency": product.currency,
                }
                for product in record.products
            ],
        }
    )
    return payload
