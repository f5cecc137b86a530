"""Search, filter and pagination over the in-memory store listing."""

import math
from dataclasses import dataclass
from typing import Dict, Generic, Iterable, List, Optional, Sequence, TypeVar

from store_atlas.models import StoreRecord

T = TypeVar("T")

PAGE_SIZE = 24


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    page: int
    total_pages: int
    total: int


def display_title(store: StoreRecord) -> str:
    return store.display_name or store.name or "Store"


def _searchable(store: StoreRecord) -> Iterable[str]:
    fields = (store.display_name, store.name, store.city, store.country, store.public_description)
    return (value.lower() for value in fields if value)


def filter_stores(stores: Iterable[StoreRecord], search: Optional[str] = "", country: Optional[str] = "") -> List[StoreRecord]:
    """Keep stores matching the free-text term and the country, both case-insensitive."""
    query_text = (search or "").strip().lower()
    country_key = (country or "").strip().lower()

    matches = []
    for store in stores:
        if query_text and not any(query_text in value for value in _searchable(store)):
            continue
        if country_key and (store.country or "").strip().lower() != country_key:
            continue
        matches.append(store)
    return matches


def paginate(items: Sequence[T], page: int = 1, page_size: int = PAGE_SIZE) -> Page[T]:
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    total = len(items)
    total_pages = max(1, math.ceil(total / page_size))
    page = min(max(1, page), total_pages)
    start = (page - 1) * page_size
    return Page(items=list(items[start : start + page_size]), page=page, total_pages=total_pages, total=total)


def country_options(stores: Iterable[StoreRecord]) -> List[Dict[str, str]]:
    """Distinct countries as ``{"value", "label"}`` pairs; the first spelling seen is the label."""
    entries: Dict[str, str] = {}
    for store in stores:
        label = (store.country or "").strip()
        if not label:
            continue
        entries.setdefault(label.lower(), label)
    return [{"value": value, "label": label} for value, label in sorted(entries.items(), key=lambda item: item[1])]


def is_active(store: StoreRecord) -> bool:
    return "active" in (store.contract_status or store.status or "").lower()


def summarize(stores: Sequence[StoreRecord]) -> Dict[str, int]:
    countries = {(store.country or "").strip().lower() for store in stores}
    countries.discard("")
    return {
        "total": len(stores),
        "active": sum(1 for store in stores if is_active(store)),
        "countries": len(countries),
    }
