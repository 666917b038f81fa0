"""Planar proximity search over (latitude, longitude) pairs.

Coordinates are treated as points on a plane, so distance is plain Euclidean
with no great-circle correction.
"""
import math
from typing import Any, Iterable, List, NamedTuple, Optional

from storefront.core.config import settings
from storefront.core.errors import LocationUnavailable

STORE_RADIUS = settings.STORE_RADIUS


class Location(NamedTuple):
    latitude: float
    longitude: float


def location_of(item: Any) -> Optional[Location]:
    """Location of anything exposing ``latitude``/``longitude``, or None if either is missing."""
    if item is None:
        return None
    if isinstance(item, Location):
        return item
    latitude = getattr(item, "latitude", None)
    longitude = getattr(item, "longitude", None)
    if latitude is None or longitude is None:
        return None
    return Location(float(latitude), float(longitude))


def distance(a: Location, b: Location) -> float:
    return math.hypot(a.latitude - b.latitude, a.longitude - b.longitude)


def require_location(origin: Any) -> Location:
    location = location_of(origin)
    if location is None:
        raise LocationUnavailable()
    return location


def within_radius(origin: Any, candidates: Iterable[Any], radius: float = STORE_RADIUS) -> List[Any]:
    """
    Filter candidates to those no further than ``radius`` from ``origin``

    Args:
        origin: A Location, or any object with latitude/longitude
        candidates: Objects with latitude/longitude, e.g. Store rows
        radius: Inclusive cutoff distance

    Returns:
        Matching candidates in their input order
    """
    center = require_location(origin)
    nearby = []
    for candidate in candidates:
        where = location_of(candidate)
        if where is None:
            continue
        if distance(center, where) <= radius:
            nearby.append(candidate)
    return nearby
