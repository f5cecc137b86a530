"""Address to coordinate resolution backed by a two-tier cache.

Tier 1 is a :class:`CoordinateCache` held in process memory for the life of the
resolver. Tier 2 is the ``latitude``/``longitude`` pair persisted on the owning
store record. Only when both miss is the external geocoding service called.
Any coordinates resolved for a record that has none stored, whether from the
service or from tier 1, are written back onto it, so each distinct address is
looked up at most once per process and, once persisted, never again.

Failed lookups are not cached: the next call for the same address tries again.
Resolution is serialized by a per-resolver lock, so threads sharing one
resolver never look up the same address concurrently.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import partial
from typing import Any, Callable, Dict, Iterable, List, Optional

import requests

from store_atlas.core.config import Settings
from store_atlas.geo.address import normalize
from store_atlas.models import GeocodeResult, StoreRecord
from store_atlas.vendors import nominatim
from store_atlas.vendors.nominatim import NominatimError

logger = logging.getLogger(__name__)

Lookup = Callable[[str], List[Dict[str, Any]]]
Persist = Callable[[str, float, float, datetime], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def parse_coordinates(latitude: Any, longitude: Any) -> Optional[GeocodeResult]:
    """Build a :class:`GeocodeResult` from raw values, or ``None`` if they are not usable.

    Accepts numbers or numeric strings. Both values must be finite and inside
    the valid latitude/longitude ranges.
    """
    lat = _to_float(latitude)
    lon = _to_float(longitude)
    if lat is None or lon is None:
        return None
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return GeocodeResult(latitude=lat, longitude=lon)


def persisted_coordinates(record: Optional[StoreRecord]) -> Optional[GeocodeResult]:
    """Read the tier-2 coordinates stored on ``record``."""
    if record is None:
        return None
    return parse_coordinates(record.latitude, record.longitude)


class CoordinateCache:
    """In-process address -> :class:`GeocodeResult` map.

    Entries live as long as the cache object and are never evicted or
    overwritten; distinct store addresses are few compared to a process
    lifetime. Only successful resolutions are stored.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, GeocodeResult] = {}

    def get(self, address: str) -> Optional[GeocodeResult]:
        return self._entries.get(address)

    def put(self, address: str, result: GeocodeResult) -> None:
        self._entries.setdefault(address, result)

    def __contains__(self, address: object) -> bool:
        return address in self._entries

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class ResolverStats:
    cache_hits: int = 0
    persisted_hits: int = 0
    lookups: int = 0
    failures: int = 0
    persist_failures: int = 0


class GeocodeResolver:
    """Resolve addresses to coordinates through the cache tiers and an external lookup.

    ``lookup`` receives the address and returns the service's candidate list.
    ``persist`` receives ``(store_id, latitude, longitude, resolved_at)`` and
    writes the coordinates back onto the record; it is optional so the
    resolver can run read-only.
    """

    def __init__(
        self,
        lookup: Lookup,
        cache: Optional[CoordinateCache] = None,
        persist: Optional[Persist] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._lookup = lookup
        self.cache = cache if cache is not None else CoordinateCache()
        self._persist = persist
        self._clock = clock
        self.stats = ResolverStats()
        self._lock = threading.RLock()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        cache: Optional[CoordinateCache] = None,
        persist: Optional[Persist] = None,
    ) -> "GeocodeResolver":
        lookup = partial(
            nominatim.search,
            user_agent=settings.geocoder_user_agent,
            base_url=settings.geocoder_base_url,
            timeout=settings.geocoder_timeout,
        )
        return cls(lookup=lookup, cache=cache, persist=persist)

    def resolve(self, address: Optional[str], record: Optional[StoreRecord] = None) -> Optional[GeocodeResult]:
        if not address:
            return None
        with self._lock:
            return self._resolve_locked(address, record)

    def _resolve_locked(self, address: str, record: Optional[StoreRecord]) -> Optional[GeocodeResult]:
        cached = self.cache.get(address)
        if cached is not None:
            self.stats.cache_hits += 1
            self._write_back(record, cached)
            return cached

        persisted = persisted_coordinates(record)
        if persisted is not None:
            self.stats.persisted_hits += 1
            self.cache.put(address, persisted)
            return persisted

        result = self._lookup_coordinates(address)
        if result is None:
            self.stats.failures += 1
            return None

        self.cache.put(address, result)
        self._write_back(record, result)
        return result

    def resolve_record(self, record: StoreRecord) -> Optional[GeocodeResult]:
        """Resolve and attach coordinates for a single record.

        A record that already carries valid coordinates keeps them untouched.
        """
        existing = persisted_coordinates(record)
        if existing is not None:
            return existing

        result = self.resolve(normalize(record), record)
        if result is not None:
            record.latitude = result.latitude
            record.longitude = result.longitude
        return result

    def resolve_records(self, records: Iterable[StoreRecord]) -> Dict[str, GeocodeResult]:
        """Resolve records one after another; returns results keyed by record id."""
        resolved: Dict[str, GeocodeResult] = {}
        for record in records:
            result = self.resolve_record(record)
            if result is not None:
                resolved[record.id] = result
        logger.info(
            "Resolved %d records (cache_hits=%d persisted_hits=%d lookups=%d failures=%d)",
            len(resolved),
            self.stats.cache_hits,
            self.stats.persisted_hits,
            self.stats.lookups,
            self.stats.failures,
        )
        return resolved

    def _lookup_coordinates(self, address: str) -> Optional[GeocodeResult]:
        self.stats.lookups += 1
        try:
            candidates = self._lookup(address)
        except (requests.RequestException, NominatimError, ValueError) as exc:
            logger.warning("Geocoding failed for %r: %s", address, exc)
            return None

        if not candidates:
            logger.warning("Geocoding returned no candidates for %r", address)
            return None

        first = candidates[0]
        if not isinstance(first, dict):
            logger.warning("Geocoding returned a malformed candidate for %r: %s", address, first)
            return None

        lat_raw, lon_raw = first.get("lat"), first.get("lon")
        if not lat_raw or not lon_raw:
            logger.warning("Geocoding candidate for %r has no coordinates", address)
            return None

        result = parse_coordinates(lat_raw, lon_raw)
        if result is None:
            logger.warning("Geocoding candidate for %r has unusable coordinates lat=%r lon=%r", address, lat_raw, lon_raw)
        return result

    def _write_back(self, record: Optional[StoreRecord], result: GeocodeResult) -> None:
        # Records that already hold coordinates are never overwritten.
        if self._persist is None or record is None or persisted_coordinates(record) is not None:
            return
        resolved_at = self._clock()
        try:
            self._persist(record.id, result.latitude, result.longitude, resolved_at)
        except Exception as exc:  # noqa: BLE001
            self.stats.persist_failures += 1
            logger.warning("Unable to persist coordinates for store %s: %s", record.id, exc)
            return
        record.geocoded_at = resolved_at
        logger.debug("Persisted coordinates for store %s", record.id)
