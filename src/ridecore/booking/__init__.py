"""Rider booking flow: immutable state, reducer, store and session."""

from .session import BookingSession
from .state import BookingState, booking_reducer
from .store import BookingStore

__all__ = ["BookingSession", "BookingState", "BookingStore", "booking_reducer"]
