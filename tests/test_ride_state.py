"""Tests for the ride state machine."""

from datetime import timedelta

import pytest

from ridecore.core.exceptions import StateError
from ridecore.ride import TERMINAL_STATUSES, VALID_TRANSITIONS, RideStatus


class TestRideStatusEnum:
    def test_ride_status_values(self):
        assert [s.value for s in RideStatus] == [
            "requested",
            "accepted",
            "arriving",
            "in_progress",
            "completed",
            "cancelled",
        ]

    def test_ride_status_to_event_type(self):
        assert RideStatus.REQUESTED.to_event_type() == "ride.requested"
        assert RideStatus.IN_PROGRESS.to_event_type() == "ride.in_progress"

    def test_terminal_statuses(self):
        assert TERMINAL_STATUSES == {RideStatus.COMPLETED, RideStatus.CANCELLED}
        assert RideStatus.COMPLETED.is_terminal
        assert not RideStatus.ARRIVING.is_terminal


class TestValidTransitions:
    @pytest.mark.parametrize(
        ("start", "end"),
        [
            (RideStatus.REQUESTED, RideStatus.ACCEPTED),
            (RideStatus.REQUESTED, RideStatus.ARRIVING),
            (RideStatus.ACCEPTED, RideStatus.ARRIVING),
            (RideStatus.ARRIVING, RideStatus.IN_PROGRESS),
            (RideStatus.IN_PROGRESS, RideStatus.COMPLETED),
        ],
    )
    def test_forward_transitions(self, ride_factory, start, end):
        ride = ride_factory.ride(status=start)
        later = ride.created_at + timedelta(seconds=10)

        ride.transition_to(end, later)

        assert ride.status == end
        assert ride.updated_at == later

    @pytest.mark.parametrize(
        "start",
        [
            RideStatus.REQUESTED,
            RideStatus.ACCEPTED,
            RideStatus.ARRIVING,
            RideStatus.IN_PROGRESS,
        ],
    )
    def test_cancel_from_any_active_status(self, ride_factory, start):
        ride = ride_factory.ride(status=start)
        ride.cancel("changed-mind", ride.created_at)

        assert ride.status == RideStatus.CANCELLED
        assert ride.cancellation_reason == "changed-mind"

    def test_terminal_states_have_no_transitions(self):
        for status in TERMINAL_STATUSES:
            assert VALID_TRANSITIONS[status] == set()


class TestInvalidTransitions:
    def test_cannot_skip_to_completed(self, ride_factory):
        ride = ride_factory.ride()
        with pytest.raises(StateError, match="Invalid transition from requested to completed"):
            ride.transition_to(RideStatus.COMPLETED, ride.created_at)
        assert ride.status == RideStatus.REQUESTED

    def test_cannot_go_backwards(self, ride_factory):
        ride = ride_factory.ride(status=RideStatus.IN_PROGRESS)
        with pytest.raises(StateError):
            ride.transition_to(RideStatus.ARRIVING, ride.created_at)

    @pytest.mark.parametrize("terminal", [RideStatus.COMPLETED, RideStatus.CANCELLED])
    def test_terminal_state_is_final(self, ride_factory, terminal):
        ride = ride_factory.ride(status=terminal)
        with pytest.raises(StateError, match="terminal state") as exc_info:
            ride.cancel("other", ride.created_at)

        assert exc_info.value.details == {"ride_id": ride.ride_id}
        assert ride.status == terminal
        assert ride.cancellation_reason is None
