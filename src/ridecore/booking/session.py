"""Booking session: the operations a rider performs, backed by the booking store."""

import logging
import random
from collections.abc import Iterable
from datetime import timedelta
from uuid import uuid4

import simpy

from ridecore.booking.state import (
    AddToRideHistory,
    BookingState,
    ResetBooking,
    SelectPaymentMethod,
    SelectRideType,
    SetAvailableRideTypes,
    SetCancellationReasons,
    SetCurrentRide,
    SetDestinationLocation,
    SetError,
    SetLoadingPrices,
    SetLoadingRoute,
    SetPaymentMethods,
    SetPickupLocation,
    SetPriceEstimates,
    SetPriceFactors,
    SetRequestingRide,
    SetRouteData,
)
from ridecore.booking.store import BookingStore
from ridecore.catalog import (
    CANCELLATION_REASONS,
    DEFAULT_PAYMENT_METHODS,
    DEFAULT_RIDE_TYPES,
    RIDE_TYPE_VEHICLES,
    default_payment_method,
)
from ridecore.core.exceptions import RideCoreError
from ridecore.drivers.dispatch import DriverDispatcher, eta_minutes
from ridecore.drivers.fleet import generate_fleet
from ridecore.drivers.models import DriverRating, DriverStatus
from ridecore.drivers.repository import DriverRepository, InMemoryDriverRepository
from ridecore.events.bus import EventBus
from ridecore.events.schemas import RideStateChangedEvent
from ridecore.geo.distance import Coordinate, distance_km
from ridecore.geo.route_provider import RouteData, RouteProvider, StraightLineRouteProvider
from ridecore.pricing.fare import FareCalculator, PriceFactors, estimate_prices
from ridecore.ride import CancellationReason, PaymentMethod, Ride, RideStatus, RideType
from ridecore.ride_logging import log_ride_context
from ridecore.settings import Settings
from ridecore.trips.clock import SimulationClock
from ridecore.trips.ride_simulator import RideSimulator

logger = logging.getLogger(__name__)

# Pickup ETA used when the ride type does not advertise one
DEFAULT_PICKUP_MINUTES = 5

LOCATIONS_REQUIRED = "Both pickup and destination locations are required"
RIDE_TYPE_REQUIRED = "Please select a ride type"
PAYMENT_METHOD_REQUIRED = "Please select a payment method"
RIDE_ALREADY_ACTIVE = "A ride is already in progress"
INVALID_RIDE_ID = "Invalid ride ID"
INVALID_CANCELLATION_REASON = "Please select a valid cancellation reason"

_DRIVER_STATUS_FOR_RIDE: dict[RideStatus, DriverStatus] = {
    RideStatus.ACCEPTED: DriverStatus.EN_ROUTE,
    RideStatus.ARRIVING: DriverStatus.ARRIVING,
    RideStatus.IN_PROGRESS: DriverStatus.ON_RIDE,
    RideStatus.COMPLETED: DriverStatus.AVAILABLE,
    RideStatus.CANCELLED: DriverStatus.AVAILABLE,
}


class BookingSession:
    """One rider's booking flow and the ride it is currently simulating.

    User-facing validation problems are reported through ``state.error``;
    route provider failures are recorded there as well and then re-raised.
    """

    def __init__(
        self,
        env: simpy.Environment,
        route_provider: RouteProvider | None = None,
        driver_repository: DriverRepository | None = None,
        settings: Settings | None = None,
        event_bus: EventBus | None = None,
        clock: SimulationClock | None = None,
        rng: random.Random | None = None,
    ):
        self._env = env
        self._settings = settings or Settings()
        self.event_bus = event_bus or EventBus()
        self.clock = clock or SimulationClock(env)
        self.store = BookingStore(
            BookingState(price_factors=PriceFactors.from_settings(self._settings.pricing))
        )
        self.simulator = RideSimulator(
            env,
            event_bus=self.event_bus,
            settings=self._settings.simulation,
            clock=self.clock,
        )
        self.route_provider = route_provider or StraightLineRouteProvider(
            self._settings.simulation.driver_speed_kmh
        )
        self.dispatcher = DriverDispatcher(
            driver_repository or InMemoryDriverRepository(generate_fleet()), rng=rng
        )
        self._fare_calculator = FareCalculator()
        self.driver_ratings: list[DriverRating] = []

        self.event_bus.subscribe(self._on_ride_state_changed, RideStateChangedEvent)

    @property
    def state(self) -> BookingState:
        return self.store.state

    @property
    def ride_history(self) -> tuple[Ride, ...]:
        return self.store.state.ride_history

    def load_catalogs(
        self,
        ride_types: Iterable[RideType] = DEFAULT_RIDE_TYPES,
        payment_methods: Iterable[PaymentMethod] = DEFAULT_PAYMENT_METHODS,
        cancellation_reasons: Iterable[CancellationReason] = CANCELLATION_REASONS,
    ) -> None:
        methods = tuple(payment_methods)
        self.store.dispatch(SetAvailableRideTypes(tuple(ride_types)))
        self.store.dispatch(SetPaymentMethods(methods))
        self.store.dispatch(SetCancellationReasons(tuple(cancellation_reasons)))

        default = default_payment_method(methods)
        if default is not None:
            self.store.dispatch(SelectPaymentMethod(default))

    def set_pickup_location(self, location: Coordinate | None) -> None:
        self.store.dispatch(SetPickupLocation(location))

    def set_destination_location(self, location: Coordinate | None) -> None:
        self.store.dispatch(SetDestinationLocation(location))

    def select_ride_type(self, ride_type: RideType | None) -> None:
        self.store.dispatch(SelectRideType(ride_type))

    def select_payment_method(self, payment_method: PaymentMethod | None) -> None:
        self.store.dispatch(SelectPaymentMethod(payment_method))

    def set_price_factors(self, factors: PriceFactors) -> None:
        """Replace pricing inputs (e.g. a surge update) and refresh estimates."""
        self.store.dispatch(SetPriceFactors(factors))
        self._update_price_estimates()

    def calculate_route(self) -> RouteData | None:
        """Fetch the route between the selected locations and price every ride type."""
        state = self.state
        if state.pickup_location is None or state.destination_location is None:
            self.store.dispatch(SetError(LOCATIONS_REQUIRED))
            return None

        self.store.dispatch(SetLoadingRoute(True))
        try:
            route = self.route_provider.get_route_sync(
                state.pickup_location, state.destination_location
            )
        except RideCoreError as e:
            logger.error("Route calculation failed: %s", e)
            self.store.dispatch(SetError(f"Failed to calculate route: {e.message}"))
            raise
        finally:
            self.store.dispatch(SetLoadingRoute(False))

        self.store.dispatch(SetRouteData(route.distance_km, route.duration_minutes, route))
        self._update_price_estimates()

        state = self.state
        if state.selected_ride_type is None and state.available_ride_types:
            self.store.dispatch(SelectRideType(state.available_ride_types[0]))
        return route

    def request_ride(
        self,
        pickup: Coordinate | None = None,
        destination: Coordinate | None = None,
        ride_type: RideType | None = None,
        payment_method: PaymentMethod | None = None,
    ) -> Ride | None:
        """Create a ride and start simulating it.

        Arguments default to the session's current selections. Returns None
        and sets ``state.error`` when a required selection is missing.
        """
        state = self.state
        pickup = pickup or state.pickup_location
        destination = destination or state.destination_location
        ride_type = ride_type or state.selected_ride_type
        payment_method = payment_method or state.selected_payment_method

        if pickup is None or destination is None:
            self.store.dispatch(SetError(LOCATIONS_REQUIRED))
            return None
        if ride_type is None:
            self.store.dispatch(SetError(RIDE_TYPE_REQUIRED))
            return None
        if payment_method is None:
            self.store.dispatch(SetError(PAYMENT_METHOD_REQUIRED))
            return None
        if state.current_ride is not None and not state.current_ride.is_terminal:
            self.store.dispatch(SetError(RIDE_ALREADY_ACTIVE))
            return None

        self.store.dispatch(SetRequestingRide(True))
        try:
            route = self._route_for(pickup, destination)
            fare = self._fare_for(pickup, destination, ride_type, route)
            now = self.clock.current_time()
            pickup_minutes = ride_type.estimated_pickup_minutes or DEFAULT_PICKUP_MINUTES

            ride = Ride(
                ride_id=f"ride-{uuid4().hex[:12]}",
                pickup=pickup,
                destination=destination,
                fare=fare,
                created_at=now,
                updated_at=now,
                estimated_arrival=now + timedelta(minutes=pickup_minutes),
                ride_type=ride_type,
                payment_method=payment_method,
                route=route,
            )

            with log_ride_context(ride.ride_id):
                logger.info(
                    "Ride %s requested: type=%s fare=%.2f", ride.ride_id, ride_type.id, fare
                )
                self.store.dispatch(SetError(None))
                self.store.dispatch(SetCurrentRide(ride))
                self.simulator.start_ride(ride)
                self._assign_driver(ride)
                self.simulator.start()
            return ride
        finally:
            self.store.dispatch(SetRequestingRide(False))

    def cancel_ride(self, ride_id: str, reason: str | None = None) -> bool:
        """Cancel the current ride.

        Unknown or finished rides are rejected, as is a reason id missing from
        the loaded cancellation reasons (the default catalog if none are loaded).
        """
        current = self.state.current_ride
        if current is None or current.ride_id != ride_id or current.is_terminal:
            self.store.dispatch(SetError(INVALID_RIDE_ID))
            return False

        reasons = self.state.cancellation_reasons or CANCELLATION_REASONS
        if reason is not None and reason not in {r.id for r in reasons}:
            self.store.dispatch(SetError(INVALID_CANCELLATION_REASON))
            return False

        if not self.simulator.cancel_ride(ride_id, reason):
            self.store.dispatch(SetError(INVALID_RIDE_ID))
            return False
        return True

    def rate_driver(self, rating: int, comment: str | None = None) -> bool:
        """Rate the driver of the most recent completed ride."""
        ride = next(
            (r for r in self.ride_history if r.status == RideStatus.COMPLETED and r.driver),
            None,
        )
        if ride is None or ride.driver is None:
            self.store.dispatch(SetError("No driver to rate"))
            return False
        if not 1 <= rating <= 5:
            self.store.dispatch(SetError("Rating must be between 1 and 5"))
            return False

        driver_rating = DriverRating(
            driver_id=ride.driver.id,
            ride_id=ride.ride_id,
            rating=rating,
            comment=comment,
            timestamp=self.clock.current_time(),
        )
        self.dispatcher.submit_rating(driver_rating)
        self.driver_ratings.insert(0, driver_rating)
        return True

    def reset_booking(self) -> None:
        current = self.state.current_ride
        if current is not None and not current.is_terminal:
            self.cancel_ride(current.ride_id, "other")
        self.store.dispatch(ResetBooking())

    def run_until_finished(self, timeout_seconds: float = 3600.0) -> Ride | None:
        """Advance simulated time until the current ride ends or the timeout passes.

        Returns the finished ride, or None if it was still active.
        """
        ride = self.state.current_ride
        if ride is None:
            return None

        deadline = self._env.now + timeout_seconds
        while not ride.is_terminal and self._env.peek() <= deadline:
            self._env.step()
        return ride if ride.is_terminal else None

    def _route_for(self, pickup: Coordinate, destination: Coordinate) -> RouteData | None:
        state = self.state
        if (
            state.route_data is not None
            and state.pickup_location == pickup
            and state.destination_location == destination
        ):
            return state.route_data
        return None

    def _fare_for(
        self,
        pickup: Coordinate,
        destination: Coordinate,
        ride_type: RideType,
        route: RouteData | None,
    ) -> float:
        state = self.state
        if route is not None and ride_type.id in state.price_estimates:
            return state.price_estimates[ride_type.id]

        if route is not None:
            distance, duration = route.distance_km, route.duration_minutes
        else:
            distance = distance_km(pickup, destination)
            duration = distance / self._settings.simulation.driver_speed_kmh * 60
        return self._fare_calculator.calculate(distance, duration, ride_type, state.price_factors)

    def _update_price_estimates(self) -> None:
        state = self.state
        if (
            state.route_distance_km is None
            or state.route_duration_min is None
            or not state.available_ride_types
        ):
            return

        self.store.dispatch(SetLoadingPrices(True))
        try:
            estimates = estimate_prices(
                state.route_distance_km,
                state.route_duration_min,
                state.available_ride_types,
                state.price_factors,
            )
            self.store.dispatch(SetPriceEstimates(estimates))
        finally:
            self.store.dispatch(SetLoadingPrices(False))

    def _assign_driver(self, ride: Ride) -> None:
        driver = self.dispatcher.find_nearby_driver(
            ride.pickup, ride.ride_id, RIDE_TYPE_VEHICLES.get(ride.ride_type.id)
        )
        if driver is None or driver.location is None:
            logger.info("Ride %s waiting without an assigned driver", ride.ride_id)
            return

        minutes = eta_minutes(
            distance_km(driver.location, ride.pickup),
            self._settings.simulation.driver_speed_kmh,
        )
        estimated_arrival = self.clock.current_time() + timedelta(minutes=minutes)
        self.simulator.assign_driver(driver, estimated_arrival)

    def _on_ride_state_changed(self, event: RideStateChangedEvent) -> None:
        ride = self.simulator.ride
        if ride is None or ride.ride_id != event.ride_id:
            return

        driver_status = _DRIVER_STATUS_FOR_RIDE.get(ride.status)
        if ride.driver is not None and driver_status is not None:
            self.dispatcher.update_status(
                ride.driver.id, driver_status, location=self.simulator.driver_position
            )

        current = self.state.current_ride
        if current is None or current.ride_id != ride.ride_id:
            return

        if ride.is_terminal:
            self.store.dispatch(SetCurrentRide(None))
            self.store.dispatch(AddToRideHistory(ride.model_copy(deep=True)))
        else:
            self.store.dispatch(SetCurrentRide(ride))
