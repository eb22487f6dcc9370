"""Tests for driver movement and path interpolation."""

import pytest

from ridecore.core.exceptions import ValidationError
from ridecore.geo.distance import bearing_radians, distance_km
from ridecore.geo.movement import (
    destination_point,
    interpolate_along_path,
    precompute_cumulative_distances,
    step_toward,
)


@pytest.mark.unit
class TestDestinationPoint:
    def test_zero_distance_returns_origin(self) -> None:
        lat, lon = destination_point((-23.5505, -46.6333), 1.0, 0.0)
        assert lat == pytest.approx(-23.5505)
        assert lon == pytest.approx(-46.6333)

    def test_travels_requested_distance(self) -> None:
        origin = (-23.5505, -46.6333)
        target = (-23.5614, -46.6559)
        point = destination_point(origin, bearing_radians(origin, target), 1.0)
        assert distance_km(origin, point) == pytest.approx(1.0, rel=1e-6)

    def test_longitude_normalized_across_antimeridian(self) -> None:
        _, lon = destination_point((0.0, 179.999), 1.5707963267948966, 1.0)
        assert -180.0 <= lon < 180.0
        assert lon < 0


@pytest.mark.unit
class TestStepToward:
    def test_step_length_matches_speed_and_interval(self) -> None:
        current = (0.0, 0.0)
        target = (0.0, 0.01)
        new = step_toward(current, target, speed_kmh=30.0, interval_seconds=2.0)
        # 30 km/h for 2 s is 1/60 km
        assert distance_km(current, new) == pytest.approx(30.0 * 2.0 / 3600.0, rel=1e-6)
        assert distance_km(new, target) < distance_km(current, target)

    def test_snaps_when_within_snap_distance(self) -> None:
        target = (0.0, 0.0)
        current = (0.0, 0.0004)  # ~44m
        assert step_toward(current, target, 30.0, 2.0) == target

    def test_snaps_instead_of_overshooting(self) -> None:
        target = (0.0, 0.0)
        current = (0.0, 0.001)  # ~111m, step is ~278m at 500 km/h
        assert step_toward(current, target, 500.0, 2.0) == target

    def test_at_target_stays_at_target(self) -> None:
        target = (-23.5505, -46.6333)
        assert step_toward(target, target, 30.0, 2.0) == target

    @pytest.mark.parametrize(
        ("start", "target", "speed", "interval"),
        [
            ((0.0, -0.01), (0.0, 0.0), 30.0, 2.0),
            ((-23.5605, -46.6433), (-23.5505, -46.6333), 30.0, 2.0),
            ((51.5, -0.12), (51.52, -0.1), 45.0, 1.0),
            ((-23.5505, -46.6333), (-23.5614, -46.6559), 60.0, 5.0),
        ],
    )
    def test_repeated_steps_terminate_exactly_at_target(self, start, target, speed, interval):
        position = start
        initial = distance_km(start, target)
        step = speed * interval / 3600.0
        max_steps = int(initial / step) + 2

        for _ in range(max_steps):
            previous_remaining = distance_km(position, target)
            position = step_toward(position, target, speed, interval)
            if position == target:
                break
            # Monotone approach, no oscillation
            assert distance_km(position, target) < previous_remaining

        assert position == target
        assert step_toward(position, target, speed, interval) == target


@pytest.mark.unit
class TestPrecomputeCumulativeDistances:
    def test_short_polylines_are_empty(self) -> None:
        assert precompute_cumulative_distances([]) == []
        assert precompute_cumulative_distances([(0.0, 0.0)]) == []

    def test_monotonic_and_sized(self) -> None:
        path = [(0.0, 0.0), (0.0, 0.01), (0.01, 0.01), (0.01, 0.02)]
        cumulative = precompute_cumulative_distances(path)
        assert len(cumulative) == len(path) - 1
        assert cumulative == sorted(cumulative)
        assert cumulative[0] == pytest.approx(distance_km(path[0], path[1]) * 1000)


@pytest.mark.unit
class TestInterpolateAlongPath:
    @pytest.fixture
    def path(self):
        return [(0.0, 0.0), (0.0, 0.01), (0.0, 0.03)]

    def test_empty_path_raises(self) -> None:
        with pytest.raises(ValidationError):
            interpolate_along_path([], 0.5)

    def test_single_point(self) -> None:
        assert interpolate_along_path([(1.0, 2.0)], 0.5) == (1.0, 2.0)

    @pytest.mark.parametrize("progress", [-0.5, 0.0])
    def test_start(self, path, progress) -> None:
        assert interpolate_along_path(path, progress) == path[0]

    @pytest.mark.parametrize("progress", [1.0, 1.5])
    def test_end(self, path, progress) -> None:
        assert interpolate_along_path(path, progress) == path[-1]

    def test_weighted_by_segment_length(self, path) -> None:
        # First segment is a third of the total length
        lat, lon = interpolate_along_path(path, 1 / 3)
        assert lat == pytest.approx(0.0)
        assert lon == pytest.approx(0.01, abs=1e-6)

    def test_midpoint_lies_in_second_segment(self, path) -> None:
        _, lon = interpolate_along_path(path, 0.5)
        assert lon == pytest.approx(0.015, abs=1e-6)

    def test_uses_precomputed_distances(self, path) -> None:
        cumulative = precompute_cumulative_distances(path)
        assert interpolate_along_path(path, 0.5, cumulative) == interpolate_along_path(path, 0.5)

    def test_degenerate_path_returns_first_point(self) -> None:
        path = [(1.0, 1.0), (1.0, 1.0), (1.0, 1.0)]
        assert interpolate_along_path(path, 0.5) == (1.0, 1.0)
