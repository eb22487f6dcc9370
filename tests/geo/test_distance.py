"""Tests for distance and bearing calculations."""

import math

import pytest

from ridecore.geo.distance import (
    _LAT_DEGREES_PER_METER,
    EARTH_RADIUS_M,
    bearing_degrees,
    bearing_radians,
    distance_km,
    haversine_distance_m,
    is_within_proximity,
)


@pytest.mark.unit
class TestHaversineDistanceM:
    def test_same_point_returns_zero(self) -> None:
        lat, lon = -23.5505, -46.6333
        assert haversine_distance_m(lat, lon, lat, lon) == 0.0

    def test_known_distance_sao_paulo_to_rio(self) -> None:
        """São Paulo to Rio de Janeiro is roughly 360km."""
        distance = haversine_distance_m(-23.5505, -46.6333, -22.9068, -43.1729)
        assert 350_000 <= distance <= 370_000

    def test_short_distance_accuracy(self) -> None:
        # ~0.0009 degrees of latitude is ~100m
        distance = haversine_distance_m(-23.5505, -46.6333, -23.5496, -46.6333)
        assert 90 <= distance <= 110

    def test_quarter_meridian(self) -> None:
        distance = haversine_distance_m(0.0, 0.0, 90.0, 0.0)
        assert distance == pytest.approx(EARTH_RADIUS_M * math.pi / 2, rel=1e-9)


@pytest.mark.unit
class TestDistanceKm:
    @pytest.mark.parametrize(
        "point",
        [(0.0, 0.0), (-23.5505, -46.6333), (51.5074, -0.1278), (89.9, 179.9)],
    )
    def test_identical_points_are_zero(self, point) -> None:
        assert distance_km(point, point) == 0.0

    @pytest.mark.parametrize(
        ("a", "b"),
        [
            ((-23.5505, -46.6333), (-23.5614, -46.6559)),
            ((0.0, 0.0), (0.0, 0.01)),
            ((51.5074, -0.5), (51.5074, 0.5)),
            ((10.0, 179.9), (10.0, -179.9)),
        ],
    )
    def test_symmetric(self, a, b) -> None:
        assert distance_km(a, b) == pytest.approx(distance_km(b, a), rel=1e-12)

    def test_hundredth_degree_of_longitude_at_equator(self) -> None:
        assert distance_km((0.0, 0.0), (0.0, 0.01)) == pytest.approx(1.112, abs=0.001)

    def test_across_antimeridian_is_short(self) -> None:
        assert distance_km((0.0, 179.99), (0.0, -179.99)) < 2.5


@pytest.mark.unit
class TestBearing:
    def test_due_north(self) -> None:
        assert bearing_radians((0.0, 0.0), (1.0, 0.0)) == pytest.approx(0.0, abs=1e-12)
        assert bearing_degrees((0.0, 0.0), (1.0, 0.0)) == pytest.approx(0.0, abs=1e-9)

    def test_due_east(self) -> None:
        assert bearing_radians((0.0, 0.0), (0.0, 1.0)) == pytest.approx(math.pi / 2)
        assert bearing_degrees((0.0, 0.0), (0.0, 1.0)) == pytest.approx(90.0)

    def test_due_south(self) -> None:
        assert abs(bearing_radians((1.0, 0.0), (0.0, 0.0))) == pytest.approx(math.pi)
        assert bearing_degrees((1.0, 0.0), (0.0, 0.0)) == pytest.approx(180.0)

    def test_due_west_is_normalized_to_positive_degrees(self) -> None:
        assert bearing_radians((0.0, 0.0), (0.0, -1.0)) == pytest.approx(-math.pi / 2)
        assert bearing_degrees((0.0, 0.0), (0.0, -1.0)) == pytest.approx(270.0)

    def test_degrees_range(self) -> None:
        for target in [(1.0, 1.0), (-1.0, 1.0), (-1.0, -1.0), (1.0, -1.0)]:
            assert 0.0 <= bearing_degrees((0.0, 0.0), target) < 360.0


@pytest.mark.unit
class TestIsWithinProximity:
    def test_same_point(self) -> None:
        assert is_within_proximity(-23.5505, -46.6333, -23.5505, -46.6333) is True

    def test_within_threshold(self) -> None:
        # ~30m north
        assert is_within_proximity(-23.5505, -46.6333, -23.55023, -46.6333) is True

    def test_outside_threshold(self) -> None:
        # ~100m north
        assert is_within_proximity(-23.5505, -46.6333, -23.5496, -46.6333) is False

    def test_custom_threshold(self) -> None:
        assert is_within_proximity(
            -23.5505, -46.6333, -23.5496, -46.6333, threshold_m=150.0
        ) is True

    def test_bounding_box_rejects_far_latitude(self) -> None:
        lat_offset = 100 * _LAT_DEGREES_PER_METER * 2
        assert is_within_proximity(0.0, 0.0, lat_offset, 0.0, threshold_m=100.0) is False

    def test_longitude_box_widened_at_high_latitude(self) -> None:
        # At 60°N a degree of longitude is half as long as at the equator
        lon_offset = 80 * _LAT_DEGREES_PER_METER * 2
        assert haversine_distance_m(60.0, 0.0, 60.0, lon_offset) < 100.0
        assert is_within_proximity(60.0, 0.0, 60.0, lon_offset, threshold_m=100.0) is True

    def test_agrees_with_haversine_near_boundary(self) -> None:
        lat2 = -23.5505 + 49.9 * _LAT_DEGREES_PER_METER
        distance = haversine_distance_m(-23.5505, -46.6333, lat2, -46.6333)
        assert is_within_proximity(-23.5505, -46.6333, lat2, -46.6333) is (distance <= 50.0)

    def test_across_antimeridian(self) -> None:
        # ~44m apart on either side of the 180th meridian
        assert haversine_distance_m(0.0, 179.9998, 0.0, -179.9998) < 50.0
        assert is_within_proximity(0.0, 179.9998, 0.0, -179.9998) is True
        assert is_within_proximity(0.0, -179.9998, 0.0, 179.9998) is True
