"""Booking state, actions and the pure reducer over them."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from ridecore.geo.distance import Coordinate
from ridecore.geo.route_provider import RouteData
from ridecore.pricing.fare import PriceFactors
from ridecore.ride import CancellationReason, PaymentMethod, Ride, RideType


class BookingState(BaseModel):
    """Immutable snapshot of a booking session."""

    model_config = ConfigDict(frozen=True)

    pickup_location: Coordinate | None = None
    destination_location: Coordinate | None = None

    route_distance_km: float | None = None
    route_duration_min: float | None = None
    route_data: RouteData | None = None

    available_ride_types: tuple[RideType, ...] = ()
    selected_ride_type: RideType | None = None

    price_estimates: dict[str, float] = Field(default_factory=dict)
    price_factors: PriceFactors = Field(
        default_factory=lambda: PriceFactors(
            base_price=2.5,
            per_km_rate=1.25,
            per_minute_rate=0.35,
            minimum_fare=5.0,
            surge_pricing=1.0,
        )
    )

    payment_methods: tuple[PaymentMethod, ...] = ()
    selected_payment_method: PaymentMethod | None = None

    cancellation_reasons: tuple[CancellationReason, ...] = ()

    current_ride: Ride | None = None
    ride_history: tuple[Ride, ...] = ()

    is_loading_route: bool = False
    is_loading_prices: bool = False
    is_requesting_ride: bool = False
    error: str | None = None


@dataclass(frozen=True)
class SetPickupLocation:
    location: Coordinate | None


@dataclass(frozen=True)
class SetDestinationLocation:
    location: Coordinate | None


@dataclass(frozen=True)
class SetRouteData:
    distance_km: float
    duration_min: float
    route_data: RouteData | None


@dataclass(frozen=True)
class SetAvailableRideTypes:
    ride_types: tuple[RideType, ...]


@dataclass(frozen=True)
class SelectRideType:
    ride_type: RideType | None


@dataclass(frozen=True)
class SetPriceEstimates:
    estimates: dict[str, float]


@dataclass(frozen=True)
class SetPriceFactors:
    factors: PriceFactors


@dataclass(frozen=True)
class SetPaymentMethods:
    payment_methods: tuple[PaymentMethod, ...]


@dataclass(frozen=True)
class SelectPaymentMethod:
    payment_method: PaymentMethod | None


@dataclass(frozen=True)
class SetCancellationReasons:
    reasons: tuple[CancellationReason, ...]


@dataclass(frozen=True)
class SetCurrentRide:
    ride: Ride | None


@dataclass(frozen=True)
class AddToRideHistory:
    ride: Ride


@dataclass(frozen=True)
class SetLoadingRoute:
    value: bool


@dataclass(frozen=True)
class SetLoadingPrices:
    value: bool


@dataclass(frozen=True)
class SetRequestingRide:
    value: bool


@dataclass(frozen=True)
class SetError:
    message: str | None


@dataclass(frozen=True)
class ResetBooking:
    pass


BookingAction = (
    SetPickupLocation
    | SetDestinationLocation
    | SetRouteData
    | SetAvailableRideTypes
    | SelectRideType
    | SetPriceEstimates
    | SetPriceFactors
    | SetPaymentMethods
    | SelectPaymentMethod
    | SetCancellationReasons
    | SetCurrentRide
    | AddToRideHistory
    | SetLoadingRoute
    | SetLoadingPrices
    | SetRequestingRide
    | SetError
    | ResetBooking
)


def booking_reducer(state: BookingState, action: BookingAction) -> BookingState:
    """Return the state that results from applying `action` to `state`.

    `state` is never modified. Unknown actions return it unchanged.
    """
    match action:
        case SetPickupLocation(location=location):
            return state.model_copy(update={"pickup_location": location})
        case SetDestinationLocation(location=location):
            return state.model_copy(update={"destination_location": location})
        case SetRouteData(distance_km=distance, duration_min=duration, route_data=route_data):
            return state.model_copy(
                update={
                    "route_distance_km": distance,
                    "route_duration_min": duration,
                    "route_data": route_data,
                }
            )
        case SetAvailableRideTypes(ride_types=ride_types):
            return state.model_copy(update={"available_ride_types": tuple(ride_types)})
        case SelectRideType(ride_type=ride_type):
            return state.model_copy(update={"selected_ride_type": ride_type})
        case SetPriceEstimates(estimates=estimates):
            return state.model_copy(update={"price_estimates": dict(estimates)})
        case SetPriceFactors(factors=factors):
            return state.model_copy(update={"price_factors": factors})
        case SetPaymentMethods(payment_methods=methods):
            return state.model_copy(update={"payment_methods": tuple(methods)})
        case SelectPaymentMethod(payment_method=method):
            return state.model_copy(update={"selected_payment_method": method})
        case SetCancellationReasons(reasons=reasons):
            return state.model_copy(update={"cancellation_reasons": tuple(reasons)})
        case SetCurrentRide(ride=ride):
            return state.model_copy(update={"current_ride": ride})
        case AddToRideHistory(ride=ride):
            # Newest first
            return state.model_copy(update={"ride_history": (ride, *state.ride_history)})
        case SetLoadingRoute(value=value):
            return state.model_copy(update={"is_loading_route": value})
        case SetLoadingPrices(value=value):
            return state.model_copy(update={"is_loading_prices": value})
        case SetRequestingRide(value=value):
            return state.model_copy(update={"is_requesting_ride": value})
        case SetError(message=message):
            return state.model_copy(update={"error": message})
        case ResetBooking():
            return BookingState(
                price_factors=state.price_factors,
                available_ride_types=state.available_ride_types,
                payment_methods=state.payment_methods,
                cancellation_reasons=state.cancellation_reasons,
                ride_history=state.ride_history,
            )
        case _:
            return state
