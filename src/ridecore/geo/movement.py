"""Driver movement along great circles and along route polylines."""

import bisect
import math

from ridecore.core.exceptions import ValidationError
from ridecore.geo.distance import (
    EARTH_RADIUS_KM,
    Coordinate,
    bearing_radians,
    distance_km,
    haversine_distance_m,
)

# Remaining distance below which a step lands exactly on the target
SNAP_DISTANCE_KM = 0.05


def destination_point(origin: Coordinate, bearing_rad: float, distance: float) -> Coordinate:
    """Point reached from origin after travelling `distance` km along `bearing_rad`.

    Forward spherical formula on a sphere of radius EARTH_RADIUS_KM. The
    returned longitude is normalized to [-180, 180).
    """
    angular = distance / EARTH_RADIUS_KM
    lat1 = math.radians(origin[0])
    lon1 = math.radians(origin[1])

    lat2 = math.asin(
        math.sin(lat1) * math.cos(angular)
        + math.cos(lat1) * math.sin(angular) * math.cos(bearing_rad)
    )
    lon2 = lon1 + math.atan2(
        math.sin(bearing_rad) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * math.sin(lat2),
    )

    lon_deg = (math.degrees(lon2) + 540) % 360 - 180
    return math.degrees(lat2), lon_deg


def step_toward(
    current: Coordinate,
    target: Coordinate,
    speed_kmh: float,
    interval_seconds: float,
    snap_distance_km: float = SNAP_DISTANCE_KM,
) -> Coordinate:
    """Advance `current` toward `target` at constant speed for one interval.

    The step length is speed_kmh * interval_seconds / 3600 km. The result is
    exactly `target` when the remaining distance is under `snap_distance_km`
    or when the step would reach or overshoot it, so repeated calls settle on
    the target without oscillating around it.
    """
    remaining = distance_km(current, target)
    if remaining < snap_distance_km:
        return target

    step = speed_kmh * interval_seconds / 3600.0
    if step >= remaining:
        return target

    return destination_point(current, bearing_radians(current, target), step)


def precompute_cumulative_distances(polyline: list[Coordinate]) -> list[float]:
    """Precompute cumulative Haversine distances along a polyline.

    Returns a list of length len(polyline) - 1 where entry i is the
    cumulative distance from polyline[0] to polyline[i+1] in meters.
    Returns empty list for polylines shorter than 2 points.
    """
    if len(polyline) < 2:
        return []

    cumulative: list[float] = []
    total = 0.0
    for i in range(len(polyline) - 1):
        d = haversine_distance_m(
            polyline[i][0],
            polyline[i][1],
            polyline[i + 1][0],
            polyline[i + 1][1],
        )
        total += d
        cumulative.append(total)
    return cumulative


def interpolate_along_path(
    coordinates: list[Coordinate],
    progress: float,
    cumulative_distances: list[float] | None = None,
) -> Coordinate:
    """Point at the given fraction of the path's arc length.

    Segments are weighted by their Haversine length and the position inside
    the containing segment is interpolated linearly. Progress <= 0 returns
    the first point and progress >= 1 returns the last point unmodified.
    """
    if not coordinates:
        raise ValidationError("Cannot interpolate along an empty path")

    if progress <= 0.0:
        return coordinates[0]
    if progress >= 1.0:
        return coordinates[-1]

    if cumulative_distances is None:
        cumulative_distances = precompute_cumulative_distances(coordinates)

    if not cumulative_distances or cumulative_distances[-1] == 0.0:
        return coordinates[0]

    target_distance = cumulative_distances[-1] * progress

    # bisect_left finds the first segment whose end reaches the target
    idx = bisect.bisect_left(cumulative_distances, target_distance)
    idx = min(idx, len(coordinates) - 2)

    prev_cumulative = cumulative_distances[idx - 1] if idx > 0 else 0.0
    segment_distance = cumulative_distances[idx] - prev_cumulative

    if segment_distance == 0.0:
        return coordinates[idx]

    segment_progress = (target_distance - prev_cumulative) / segment_distance
    start, end = coordinates[idx], coordinates[idx + 1]
    return (
        start[0] + (end[0] - start[0]) * segment_progress,
        start[1] + (end[1] - start[1]) * segment_progress,
    )
