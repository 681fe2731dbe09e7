"""
Street-length helpers for network documents that omit edge weights.

The solver never looks at vertex positions; these functions only turn a pair
of endpoint positions into a length in metres.
"""

from math import asin, cos, hypot, radians, sin, sqrt
from typing import Tuple

from .types import Coordinate

EARTH_RADIUS_M = 6371000


def haversine(coord1: Coordinate, coord2: Coordinate) -> float:
    """
    Great-circle distance in metres between two (lat, lon) points.

    Example:
        >>> haversine((42.8142, -73.9396), (42.8152, -73.9396))  # one block north
        111.19...
    """
    phi1, phi2 = radians(coord1[0]), radians(coord2[0])
    half_dphi = (phi2 - phi1) / 2
    half_dlambda = radians(coord2[1] - coord1[1]) / 2

    h = sin(half_dphi) ** 2 + cos(phi1) * cos(phi2) * sin(half_dlambda) ** 2
    return 2 * EARTH_RADIUS_M * asin(sqrt(h))


def planar_distance(point1: Tuple[float, float], point2: Tuple[float, float]) -> float:
    """Euclidean distance between two projected (x, y) points."""
    return hypot(point2[0] - point1[0], point2[1] - point1[1])
