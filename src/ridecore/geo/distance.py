"""Centralized geographic distance and bearing calculations.

This module provides Haversine distance calculations for determining
proximity between geographic coordinates. Used for arrival detection
while simulating a driver moving toward pickup and destination.
"""

from math import atan2, cos, degrees, radians, sin, sqrt

EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS_M = EARTH_RADIUS_KM * 1000

# ~9e-6 degrees per meter (1 / 111,320 m per degree of latitude)
_LAT_DEGREES_PER_METER: float = 1.0 / 111_320

Coordinate = tuple[float, float]


def haversine_distance_m(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Calculate the great-circle distance between two points in meters.

    Args:
        lat1: Latitude of first point in degrees
        lon1: Longitude of first point in degrees
        lat2: Latitude of second point in degrees
        lon2: Longitude of second point in degrees

    Returns:
        Distance between the two points in meters
    """
    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_M * c


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two (lat, lon) coordinates in kilometers.

    Symmetric in its arguments and exactly 0.0 for identical points.
    """
    return haversine_distance_m(a[0], a[1], b[0], b[1]) / 1000.0


def bearing_radians(a: Coordinate, b: Coordinate) -> float:
    """Initial bearing from a to b in radians (0 = north, clockwise positive).

    The result lies in (-pi, pi].
    """
    lat1, lon1 = radians(a[0]), radians(a[1])
    lat2, lon2 = radians(b[0]), radians(b[1])

    dlon = lon2 - lon1

    y = sin(dlon) * cos(lat2)
    x = cos(lat1) * sin(lat2) - sin(lat1) * cos(lat2) * cos(dlon)

    return atan2(y, x)


def bearing_degrees(a: Coordinate, b: Coordinate) -> float:
    """Compass heading from a to b in degrees within [0, 360)."""
    return (degrees(bearing_radians(a, b)) + 360) % 360


def is_within_proximity(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    threshold_m: float = 50.0,
) -> bool:
    """Check if two geographic points are within a given distance threshold.

    Used to decide whether the driver has reached the pickup or the
    destination.

    Args:
        lat1: Latitude of first point in degrees
        lon1: Longitude of first point in degrees
        lat2: Latitude of second point in degrees
        lon2: Longitude of second point in degrees
        threshold_m: Maximum distance in meters to be considered "within proximity"

    Returns:
        True if the points are within threshold_m meters of each other
    """
    # Flat-Earth bounding box pre-check. The threshold is expanded by 1% so the
    # box never rejects a point Haversine would accept. A degree of longitude
    # shrinks with cos(lat), so the longitude bound is widened accordingly and
    # skipped near the poles.
    lat_threshold = threshold_m * _LAT_DEGREES_PER_METER * 1.01
    if abs(lat2 - lat1) > lat_threshold:
        return False
    cos_lat = min(cos(radians(lat1)), cos(radians(lat2)))
    # Longitude difference across the antimeridian, in [-180, 180)
    dlon = (lon2 - lon1 + 180.0) % 360.0 - 180.0
    if cos_lat > 0.01 and abs(dlon) > lat_threshold / cos_lat:
        return False

    return haversine_distance_m(lat1, lon1, lat2, lon2) <= threshold_m
