import logging
from collections.abc import Callable

from ridecore.booking.state import BookingAction, BookingState, booking_reducer

logger = logging.getLogger(__name__)

Listener = Callable[[BookingState, BookingAction], None]


class BookingStore:
    """Holds the current BookingState and notifies listeners on every dispatch."""

    def __init__(self, initial_state: BookingState | None = None) -> None:
        self._state = initial_state or BookingState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> BookingState:
        return self._state

    def dispatch(self, action: BookingAction) -> BookingState:
        self._state = booking_reducer(self._state, action)
        for listener in list(self._listeners):
            try:
                listener(self._state, action)
            except Exception:
                logger.exception("Booking listener failed for %s", type(action).__name__)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
