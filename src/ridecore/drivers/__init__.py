"""Driver fleet: models, repository, dispatch and seed data."""

from .dispatch import DriverDispatcher, eta_minutes
from .fleet import generate_fleet
from .models import Driver, DriverRating, DriverStatus, Vehicle
from .repository import DriverRepository, InMemoryDriverRepository

__all__ = [
    "Driver",
    "DriverDispatcher",
    "DriverRating",
    "DriverRepository",
    "DriverStatus",
    "InMemoryDriverRepository",
    "Vehicle",
    "eta_minutes",
    "generate_fleet",
]
