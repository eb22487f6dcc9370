"""Geodesic math: distances, bearings, movement and route interpolation."""

from .distance import (
    Coordinate,
    bearing_degrees,
    bearing_radians,
    distance_km,
    haversine_distance_m,
    is_within_proximity,
)
from .movement import (
    destination_point,
    interpolate_along_path,
    precompute_cumulative_distances,
    step_toward,
)

__all__ = [
    "Coordinate",
    "bearing_degrees",
    "bearing_radians",
    "destination_point",
    "distance_km",
    "haversine_distance_m",
    "interpolate_along_path",
    "is_within_proximity",
    "precompute_cumulative_distances",
    "step_toward",
]
