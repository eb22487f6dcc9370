"""Repository interface for the driver fleet with an in-memory implementation.

The simulator and the dispatcher only depend on ``find``, ``update`` and
``list``, so a persistent store can be swapped in without touching them.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from typing import Protocol

from ridecore.drivers.models import Driver


class DriverRepository(Protocol):
    def find(self, driver_id: str) -> Driver | None: ...

    def update(self, driver: Driver) -> None: ...

    def list(self) -> list[Driver]: ...


class InMemoryDriverRepository:
    """Thread-safe in-memory driver store.

    Stored drivers are copies: callers mutate the object they got back and
    persist the change through ``update``.
    """

    def __init__(self, drivers: Iterable[Driver] = ()) -> None:
        self._lock = threading.Lock()
        self._drivers: dict[str, Driver] = {d.id: d.model_copy(deep=True) for d in drivers}

    def find(self, driver_id: str) -> Driver | None:
        with self._lock:
            driver = self._drivers.get(driver_id)
            return driver.model_copy(deep=True) if driver else None

    def update(self, driver: Driver) -> None:
        with self._lock:
            self._drivers[driver.id] = driver.model_copy(deep=True)

    def list(self) -> list[Driver]:
        with self._lock:
            return [d.model_copy(deep=True) for d in self._drivers.values()]
