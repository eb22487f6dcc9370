from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class CorrelationMixin(BaseModel):
    """Mixin adding tracing fields to events."""

    correlation_id: str | None = Field(
        default=None, description="Primary correlation ID (the ride id)"
    )


class RideStateChangedEvent(CorrelationMixin):
    """Event for ride status transitions"""

    event_id: UUID = Field(default_factory=uuid4)
    event_type: Literal[
        "ride.requested",
        "ride.accepted",
        "ride.arriving",
        "ride.in_progress",
        "ride.completed",
        "ride.cancelled",
    ]
    ride_id: str
    timestamp: str
    previous_status: str | None
    status: str
    created_at: str
    updated_at: str
    estimated_arrival: str | None = None
    fare: float
    driver_id: str | None = None
    driver_location: tuple[float, float] | None = None
    cancellation_reason: str | None = None


class DriverLocationEvent(CorrelationMixin):
    """Simulated driver position sampled on each tick"""

    event_id: UUID = Field(default_factory=uuid4)
    ride_id: str
    driver_id: str | None
    timestamp: str
    location: tuple[float, float]
    heading: float | None
    ride_status: str
    distance_to_target_km: float | None = None
