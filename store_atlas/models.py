"""Core data models shared by the listing, geocoding and map layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(slots=True)
class StoreProduct:
    id: str
    title: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[str] = None


@dataclass(slots=True)
class StoreRecord:
    """Normalized snapshot of a storefront row from the record store."""

    id: str
    name: Optional[str] = None
    display_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    whatsapp_phone: Optional[str] = None
    status: Optional[str] = None
    contract_status: Optional[str] = None
    address_line1: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    public_description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    geocoded_at: Optional[datetime] = None
    products: List[StoreProduct] = field(default_factory=list)
    raw: Optional[Dict[str, Any]] = field(default=None, repr=False)


@dataclass(frozen=True, slots=True)
class GeocodeResult:
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class ProjectedPoint:
    """A point on the padded percentage canvas, tagged with the record it came from."""

    x: float
    y: float
    ref: Any = None
