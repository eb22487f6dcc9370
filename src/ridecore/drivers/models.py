"""Driver, vehicle and rating models."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from ridecore.geo.distance import Coordinate

VehicleType = Literal["sedan", "suv", "luxury", "xl", "eco"]


class DriverStatus(str, Enum):
    OFFLINE = "offline"
    AVAILABLE = "available"
    EN_ROUTE = "en_route"
    ARRIVING = "arriving"
    ON_RIDE = "on_ride"
    BREAK = "break"


class Vehicle(BaseModel):
    id: str
    make: str
    model: str
    color: str
    license_plate: str
    year: int
    type: VehicleType


class Driver(BaseModel):
    id: str
    name: str
    phone_number: str
    email: str
    rating: float = Field(ge=0.0, le=5.0)
    total_rides: int = Field(default=0, ge=0)
    vehicle: Vehicle
    status: DriverStatus = DriverStatus.AVAILABLE
    location: Coordinate | None = None
    current_ride_id: str | None = None


class DriverRating(BaseModel):
    driver_id: str
    ride_id: str
    rating: int = Field(ge=1, le=5)
    comment: str | None = None
    timestamp: datetime
