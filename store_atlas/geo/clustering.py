"""Greedy single-pass clustering of projected map pins.

Each point joins the *first* existing cluster (in creation order) whose
centroid lies within ``threshold`` of it, not the nearest one. The result
therefore depends on input order: feeding the same points in a different order
can change both membership and the number of clusters. This keeps the pass at
O(n * k) without a spatial index, which is fine for the tens to low hundreds
of pins a listing page shows.

Centroids are running means updated on every merge and never recomputed from
the member list, so they drift with the order members arrive in.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, List


@dataclass
class Cluster:
    x: float
    y: float
    members: List[Any] = field(default_factory=list)

    @classmethod
    def start(cls, point: Any) -> "Cluster":
        return cls(x=point.x, y=point.y, members=[point])

    @property
    def count(self) -> int:
        return len(self.members)

    def distance_to(self, point: Any) -> float:
        return math.hypot(self.x - point.x, self.y - point.y)

    def add(self, point: Any) -> None:
        count = len(self.members)
        self.x = (self.x * count + point.x) / (count + 1)
        self.y = (self.y * count + point.y) / (count + 1)
        self.members.append(point)


def cluster_points(points: Iterable[Any], threshold: float = 4.0) -> List[Cluster]:
    """Group points (anything with ``x``/``y``) into clusters, in one forward pass."""
    clusters: List[Cluster] = []
    for point in points:
        for cluster in clusters:
            if cluster.distance_to(point) <= threshold:
                cluster.add(point)
                break
        else:
            clusters.append(Cluster.start(point))
    return clusters
