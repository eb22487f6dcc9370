"""Ride state machine and booking models."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ridecore.core.exceptions import StateError
from ridecore.drivers.models import Driver
from ridecore.geo.distance import Coordinate
from ridecore.geo.route_provider import RouteData


class RideStatus(str, Enum):
    """Ride lifecycle states."""

    REQUESTED = "requested"
    ACCEPTED = "accepted"
    ARRIVING = "arriving"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    def to_event_type(self) -> str:
        """Convert status to event type (e.g., 'ride.requested')."""
        return f"ride.{self.value}"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({RideStatus.COMPLETED, RideStatus.CANCELLED})

VALID_TRANSITIONS: dict[RideStatus, set[RideStatus]] = {
    RideStatus.REQUESTED: {RideStatus.ACCEPTED, RideStatus.ARRIVING, RideStatus.CANCELLED},
    RideStatus.ACCEPTED: {RideStatus.ARRIVING, RideStatus.CANCELLED},
    RideStatus.ARRIVING: {RideStatus.IN_PROGRESS, RideStatus.CANCELLED},
    RideStatus.IN_PROGRESS: {RideStatus.COMPLETED, RideStatus.CANCELLED},
    RideStatus.COMPLETED: set(),
    RideStatus.CANCELLED: set(),
}


class RideType(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    capacity: int = Field(ge=1)
    icon: str
    price_multiplier: float = Field(gt=0)
    estimated_pickup_minutes: int | None = None


class PaymentMethod(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    type: Literal["card", "paypal", "cash", "apple_pay", "google_pay"]
    label: str
    last_four: str | None = None
    expiry_date: str | None = None
    is_default: bool = False


class CancellationReason(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    reason: str


class Ride(BaseModel):
    """Ride with state machine logic.

    Rides are mutated in place while active; every change stamps
    ``updated_at``. Once completed or cancelled no further transition is
    accepted.
    """

    ride_id: str
    status: RideStatus = Field(default=RideStatus.REQUESTED)
    pickup: Coordinate
    destination: Coordinate
    fare: float = Field(ge=0)
    created_at: datetime
    updated_at: datetime
    estimated_arrival: datetime | None = None
    ride_type: RideType
    payment_method: PaymentMethod
    route: RouteData | None = None
    driver: Driver | None = None
    cancellation_reason: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def transition_to(self, new_status: RideStatus, timestamp: datetime) -> None:
        """Transition to a new status with validation."""
        if self.status.is_terminal:
            raise StateError(
                f"Cannot transition from terminal state {self.status.value}",
                details={"ride_id": self.ride_id},
            )

        if new_status not in VALID_TRANSITIONS[self.status]:
            raise StateError(
                f"Invalid transition from {self.status.value} to {new_status.value}",
                details={"ride_id": self.ride_id},
            )

        self.status = new_status
        self.updated_at = timestamp

    def cancel(self, reason: str | None, timestamp: datetime) -> None:
        """Cancel the ride, recording the reason id."""
        self.transition_to(RideStatus.CANCELLED, timestamp)
        self.cancellation_reason = reason
