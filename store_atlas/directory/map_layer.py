"""Turn located stores into clustered, render-ready map pins."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

from store_atlas.directory.query import display_title
from store_atlas.geo.address import normalize
from store_atlas.geo.clustering import Cluster, cluster_points
from store_atlas.geo.projection import project
from store_atlas.geo.resolver import persisted_coordinates
from store_atlas.models import StoreRecord

logger = logging.getLogger(__name__)

PUBLIC_STORE_URL = "https://stores.sedifex.com/store"
SUMMARY_LOCATIONS = 3


@dataclass(frozen=True)
class MapPin:
    store: StoreRecord
    location: str
    x: float
    y: float


def build_pins(stores: Iterable[StoreRecord]) -> List[MapPin]:
    """Project every store that has both an address and valid coordinates."""
    pins: List[MapPin] = []
    for store in stores:
        location = normalize(store)
        coordinates = persisted_coordinates(store)
        if not location or coordinates is None:
            continue
        point = project(coordinates.latitude, coordinates.longitude)
        pins.append(MapPin(store=store, location=location, x=point.x, y=point.y))
    return pins


def render_cluster(index: int, cluster: Cluster, store_url: str = PUBLIC_STORE_URL) -> Dict[str, Any]:
    first = cluster.members[0]
    count = cluster.count
    title = display_title(first.store)

    if count > 1:
        summary = " · ".join(pin.location for pin in cluster.members[:SUMMARY_LOCATIONS])
        return {
            "id": f"cluster-{index}-{first.store.id}",
            "x": cluster.x,
            "y": cluster.y,
            "count": count,
            "title": f"{count} stores",
            "label": f"{count} stores near {first.location}",
            "summary": summary,
            "store_ids": [pin.store.id for pin in cluster.members],
            "url": None,
        }

    return {
        "id": f"cluster-{index}-{first.store.id}",
        "x": cluster.x,
        "y": cluster.y,
        "count": 1,
        "title": title,
        "label": f"{title} near {first.location}",
        "summary": first.location,
        "store_ids": [first.store.id],
        "url": f"{store_url}/{first.store.id}",
    }


def build_map(stores: Iterable[StoreRecord], threshold: float = 4.0, store_url: str = PUBLIC_STORE_URL) -> List[Dict[str, Any]]:
    pins = build_pins(stores)
    clusters = cluster_points(pins, threshold=threshold)
    logger.debug("Clustered %d pins into %d clusters (threshold=%s)", len(pins), len(clusters), threshold)
    return [render_cluster(index, cluster, store_url) for index, cluster in enumerate(clusters)]
