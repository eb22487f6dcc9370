"""Ride events and the in-process event bus."""

from .bus import EventBus
from .schemas import DriverLocationEvent, RideStateChangedEvent

__all__ = ["DriverLocationEvent", "EventBus", "RideStateChangedEvent"]
