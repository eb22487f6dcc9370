"""Ride lifecycle simulation driven by a periodic driver position tick."""

import logging
from dataclasses import dataclass
from datetime import datetime

import simpy

from ridecore.drivers.models import Driver
from ridecore.events.bus import EventBus
from ridecore.events.schemas import DriverLocationEvent, RideStateChangedEvent
from ridecore.geo.distance import (
    Coordinate,
    bearing_degrees,
    distance_km,
    is_within_proximity,
)
from ridecore.geo.movement import step_toward
from ridecore.ride import Ride, RideStatus
from ridecore.ride_logging import log_ride_context
from ridecore.settings import SimulationSettings
from ridecore.trips.clock import SimulationClock
from ridecore.trips.scheduler import ScheduledTask, TaskScheduler

logger = logging.getLogger(__name__)

# Statuses during which the driver heads for pickup
PICKUP_PHASE = frozenset({RideStatus.REQUESTED, RideStatus.ACCEPTED, RideStatus.ARRIVING})
PAST_PICKUP = frozenset({RideStatus.ARRIVING, RideStatus.IN_PROGRESS, RideStatus.COMPLETED})


@dataclass
class TickResult:
    ride: Ride
    driver_position: Coordinate


class RideSimulator:
    """Moves a simulated driver and advances the current ride's status.

    One ride is simulated at a time. Position and status are only written
    from the SimPy thread, which serializes every mutation of the ride.
    """

    def __init__(
        self,
        env: simpy.Environment,
        event_bus: EventBus | None = None,
        settings: SimulationSettings | None = None,
        clock: SimulationClock | None = None,
        scheduler: TaskScheduler | None = None,
    ):
        self._env = env
        self._event_bus = event_bus or EventBus()
        self._settings = settings or SimulationSettings()
        self._clock = clock or SimulationClock(env)
        self._scheduler = scheduler or TaskScheduler(env)

        self._ride: Ride | None = None
        self._driver_position: Coordinate | None = None
        self._arrived_at_pickup = False
        self._arrived_at_destination = False
        self._boarding_task: ScheduledTask | None = None
        self._tick_task: ScheduledTask | None = None

    @property
    def ride(self) -> Ride | None:
        return self._ride

    @property
    def driver_position(self) -> Coordinate | None:
        return self._driver_position

    @property
    def arrived_at_pickup(self) -> bool:
        return self._arrived_at_pickup

    @property
    def arrived_at_destination(self) -> bool:
        return self._arrived_at_destination

    @property
    def boarding_pending(self) -> bool:
        return self._boarding_task is not None and self._boarding_task.active

    @property
    def running(self) -> bool:
        return self._tick_task is not None and self._tick_task.active

    def start_ride(self, ride: Ride, driver_start: Coordinate | None = None) -> None:
        """Make `ride` the simulated ride.

        A ride with a new id drops any pending boarding timer and the arrival
        flags of the previous ride. Its own flags follow its status, and a ride
        handed over in `arriving` gets a fresh boarding timer.
        """
        is_new_ride = self._ride is None or self._ride.ride_id != ride.ride_id
        if is_new_ride:
            self._cancel_boarding()
            self._arrived_at_pickup = ride.status in PAST_PICKUP
            self._arrived_at_destination = ride.status == RideStatus.COMPLETED

        self._ride = ride
        if driver_start is not None:
            self._driver_position = driver_start
        elif ride.driver is not None and ride.driver.location is not None:
            self._driver_position = ride.driver.location
        else:
            offset = self._settings.initial_driver_offset_deg
            self._driver_position = (ride.pickup[0] - offset, ride.pickup[1] - offset)

        with log_ride_context(ride.ride_id):
            logger.info(
                "Simulating ride %s from %s (driver at %s)",
                ride.ride_id,
                ride.status.value,
                self._driver_position,
            )
        self._publish_state(ride, previous=None)

        if is_new_ride and ride.status == RideStatus.ARRIVING:
            # Handed over at pickup, so boarding starts now
            self._schedule_boarding(ride.ride_id)

    def assign_driver(
        self, driver: Driver, estimated_arrival: datetime, now: datetime | None = None
    ) -> None:
        """Accept the current ride on behalf of `driver`."""
        ride = self._ride
        if ride is None or ride.status != RideStatus.REQUESTED:
            return

        ride.driver = driver
        ride.estimated_arrival = estimated_arrival
        if driver.location is not None:
            self._driver_position = driver.location
        self._transition(ride, RideStatus.ACCEPTED, now or self._clock.current_time())

    def start(self) -> None:
        """Begin the periodic position tick."""
        if self.running:
            return
        self._tick_task = self._scheduler.call_every(
            self._settings.tick_interval_seconds, self._on_tick, name="driver-tick"
        )

    def stop(self) -> None:
        if self._tick_task is not None:
            self._tick_task.cancel()
            self._tick_task = None

    def tick(self, now: datetime | None = None) -> TickResult | None:
        """Advance the driver one interval and apply any resulting transition.

        Transitions are checked against the position computed in this tick.
        Returns None when there is nothing to simulate.
        """
        ride = self._ride
        position = self._driver_position
        if ride is None or position is None:
            return None

        timestamp = now or self._clock.current_time()

        with log_ride_context(ride.ride_id):
            if ride.is_terminal:
                return TickResult(ride=ride, driver_position=position)

            target = self._movement_target(ride)
            if ride.status == RideStatus.ARRIVING:
                # Held at pickup while the passenger boards
                new_position = ride.pickup
            elif target is not None:
                new_position = step_toward(
                    position,
                    target,
                    self._settings.driver_speed_kmh,
                    self._settings.tick_interval_seconds,
                    snap_distance_km=self._settings.arrival_threshold_km,
                )
            else:
                new_position = position

            self._driver_position = new_position
            self._event_bus.publish(
                DriverLocationEvent(
                    correlation_id=ride.ride_id,
                    ride_id=ride.ride_id,
                    driver_id=ride.driver.id if ride.driver else None,
                    timestamp=self._clock.format_timestamp(timestamp),
                    location=new_position,
                    heading=bearing_degrees(position, new_position)
                    if new_position != position
                    else None,
                    ride_status=ride.status.value,
                    distance_to_target_km=distance_km(new_position, target) if target else None,
                )
            )

            self._evaluate_transitions(ride, new_position, timestamp)
            return TickResult(ride=ride, driver_position=new_position)

    def cancel_ride(self, ride_id: str, reason: str | None, now: datetime | None = None) -> bool:
        """Cancel the current ride. Unknown or finished rides are rejected."""
        ride = self._ride
        if ride is None or ride.ride_id != ride_id or ride.is_terminal:
            logger.warning("Rejected cancellation of ride %s", ride_id)
            return False

        with log_ride_context(ride.ride_id):
            self._cancel_boarding()
            previous = ride.status
            timestamp = now or self._clock.current_time()
            ride.cancel(reason, timestamp)
            logger.info(
                "Ride %s cancelled during %s (reason=%s)", ride.ride_id, previous.value, reason
            )
            self._publish_state(ride, previous=previous, timestamp=timestamp)
            self.stop()
        return True

    def _movement_target(self, ride: Ride) -> Coordinate | None:
        if ride.status in PICKUP_PHASE:
            return ride.pickup
        if ride.status == RideStatus.IN_PROGRESS:
            return ride.destination
        return None

    def _is_within_threshold(self, position: Coordinate, target: Coordinate) -> bool:
        return is_within_proximity(
            position[0],
            position[1],
            target[0],
            target[1],
            threshold_m=self._settings.arrival_threshold_km * 1000,
        )

    def _evaluate_transitions(self, ride: Ride, position: Coordinate, timestamp: datetime) -> None:
        if (
            ride.status in (RideStatus.REQUESTED, RideStatus.ACCEPTED)
            and not self._arrived_at_pickup
            and self._is_within_threshold(position, ride.pickup)
        ):
            self._arrived_at_pickup = True
            self._transition(ride, RideStatus.ARRIVING, timestamp)
            self._schedule_boarding(ride.ride_id)
        elif (
            ride.status == RideStatus.IN_PROGRESS
            and not self._arrived_at_destination
            and self._is_within_threshold(position, ride.destination)
        ):
            self._arrived_at_destination = True
            self._transition(ride, RideStatus.COMPLETED, timestamp)

    def _schedule_boarding(self, ride_id: str) -> None:
        self._cancel_boarding()
        self._boarding_task = self._scheduler.call_later(
            self._settings.boarding_delay_seconds,
            lambda: self._complete_boarding(ride_id),
            name="boarding",
        )

    def _complete_boarding(self, ride_id: str) -> None:
        self._boarding_task = None
        ride = self._ride
        if ride is None or ride.ride_id != ride_id or ride.status != RideStatus.ARRIVING:
            return
        with log_ride_context(ride_id):
            self._transition(ride, RideStatus.IN_PROGRESS, self._clock.current_time())

    def _cancel_boarding(self) -> None:
        if self._boarding_task is not None:
            self._boarding_task.cancel()
            self._boarding_task = None

    def _transition(self, ride: Ride, new_status: RideStatus, timestamp: datetime) -> None:
        previous = ride.status
        ride.transition_to(new_status, timestamp)
        logger.info("Ride %s: %s -> %s", ride.ride_id, previous.value, new_status.value)
        self._publish_state(ride, previous=previous, timestamp=timestamp)

        if ride.is_terminal:
            self._cancel_boarding()
            self.stop()

    def _on_tick(self) -> None:
        self.tick()

    def _publish_state(
        self, ride: Ride, previous: RideStatus | None, timestamp: datetime | None = None
    ) -> None:
        fmt = self._clock.format_timestamp
        self._event_bus.publish(
            RideStateChangedEvent(
                correlation_id=ride.ride_id,
                event_type=ride.status.to_event_type(),  # type: ignore[arg-type]
                ride_id=ride.ride_id,
                timestamp=fmt(timestamp),
                previous_status=previous.value if previous else None,
                status=ride.status.value,
                created_at=fmt(ride.created_at),
                updated_at=fmt(ride.updated_at),
                estimated_arrival=fmt(ride.estimated_arrival) if ride.estimated_arrival else None,
                fare=ride.fare,
                driver_id=ride.driver.id if ride.driver else None,
                driver_location=self._driver_position,
                cancellation_reason=ride.cancellation_reason,
            )
        )
