import logging
import math
import random

from ridecore.core.exceptions import NotFoundError
from ridecore.drivers.models import Driver, DriverRating, DriverStatus
from ridecore.drivers.repository import DriverRepository
from ridecore.geo.distance import Coordinate

logger = logging.getLogger(__name__)

AVERAGE_SPEED_KMH = 30.0
# Half-width in degrees of the box around pickup where a matched driver appears
NEARBY_OFFSET_DEG = 0.005


def eta_minutes(distance: float, speed_kmh: float = AVERAGE_SPEED_KMH) -> int:
    """Whole minutes needed to cover `distance` km at `speed_kmh`, rounded up."""
    return math.ceil(distance / speed_kmh * 60)


class DriverDispatcher:
    """Matches rides to fleet drivers and keeps driver status in sync."""

    def __init__(self, repository: DriverRepository, rng: random.Random | None = None) -> None:
        self._repository = repository
        self._rng = rng or random.Random()

    def find_nearby_driver(
        self,
        pickup: Coordinate,
        ride_id: str,
        vehicle_type: str | None = None,
    ) -> Driver | None:
        """Assign a random available driver to the ride.

        The driver is placed at a random offset around pickup and marked
        en route. Returns None when no driver (of the requested vehicle type)
        is available.
        """
        candidates = [d for d in self._repository.list() if d.status == DriverStatus.AVAILABLE]
        if vehicle_type:
            candidates = [d for d in candidates if d.vehicle.type == vehicle_type]

        if not candidates:
            logger.info("No drivers available (vehicle_type=%s)", vehicle_type)
            return None

        driver = self._rng.choice(candidates)
        driver.location = (
            pickup[0] + self._rng.uniform(-NEARBY_OFFSET_DEG, NEARBY_OFFSET_DEG),
            pickup[1] + self._rng.uniform(-NEARBY_OFFSET_DEG, NEARBY_OFFSET_DEG),
        )
        driver.status = DriverStatus.EN_ROUTE
        driver.current_ride_id = ride_id
        self._repository.update(driver)
        logger.info("Driver %s assigned to ride %s", driver.id, ride_id)
        return driver

    def update_status(
        self,
        driver_id: str,
        status: DriverStatus,
        location: Coordinate | None = None,
    ) -> Driver | None:
        driver = self._repository.find(driver_id)
        if driver is None:
            return None

        driver.status = status
        if location is not None:
            driver.location = location
        if status == DriverStatus.AVAILABLE:
            driver.current_ride_id = None
        self._repository.update(driver)
        return driver

    def submit_rating(self, rating: DriverRating) -> Driver:
        """Fold a rating into the driver's running average.

        The average is weighted by total rides and rounded to one decimal.
        """
        driver = self._repository.find(rating.driver_id)
        if driver is None:
            raise NotFoundError(
                f"Driver {rating.driver_id} not found", details={"driver_id": rating.driver_id}
            )

        total_points = driver.rating * driver.total_rides + rating.rating
        driver.total_rides += 1
        driver.rating = round(total_points / driver.total_rides, 1)
        self._repository.update(driver)
        return driver
