"""Equirectangular projection onto the padded percentage canvas."""

from typing import Any

from store_atlas.models import ProjectedPoint

CANVAS_MIN = 3.0
CANVAS_MAX = 97.0


def clamp(value: float, lower: float = CANVAS_MIN, upper: float = CANVAS_MAX) -> float:
    return min(upper, max(lower, value))


def project(latitude: float, longitude: float, ref: Any = None) -> ProjectedPoint:
    """Map ``(latitude, longitude)`` to ``x, y`` percentages kept inside ``[3, 97]``."""
    x = ((longitude + 180.0) / 360.0) * 100.0
    y = ((90.0 - latitude) / 180.0) * 100.0
    return ProjectedPoint(x=clamp(x), y=clamp(y), ref=ref)
