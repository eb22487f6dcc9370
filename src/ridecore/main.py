"""
Ridecore demo entry point

Books one ride between two fixed points, simulates it on a SimPy
environment until it completes, then rates the driver.
"""

import logging
import os
import sys

import simpy

from ridecore.booking import BookingSession
from ridecore.events import RideStateChangedEvent
from ridecore.geo.route_provider import MapboxDirectionsClient, RouteProvider
from ridecore.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# Downtown Sao Paulo to Avenida Paulista
DEMO_PICKUP = (-23.5505, -46.6333)
DEMO_DESTINATION = (-23.5614, -46.6559)

# Simulated seconds allowed for the demo ride
DEMO_TIMEOUT_SECONDS = 2 * 3600


def create_route_provider(settings: Settings) -> RouteProvider | None:
    """Mapbox client when a token is configured, otherwise the session default."""
    if not settings.route_provider.access_token:
        logger.info("No Mapbox token configured, using straight-line routes")
        return None
    return MapboxDirectionsClient(
        access_token=settings.route_provider.access_token,
        base_url=settings.route_provider.base_url,
        profile=settings.route_provider.profile,
        timeout=settings.route_provider.timeout_seconds,
    )


def main() -> None:
    settings = get_settings()

    from ridecore.ride_logging import setup_logging

    # LOG_FORMAT env var takes precedence, then settings.simulation.log_format
    log_format = os.environ.get("LOG_FORMAT") or settings.simulation.log_format
    setup_logging(
        level=settings.simulation.log_level,
        json_output=log_format == "json",
        environment=os.environ.get("DEPLOYMENT_ENV", "development"),
    )

    env = simpy.Environment()
    session = BookingSession(
        env,
        route_provider=create_route_provider(settings),
        settings=settings,
    )
    session.event_bus.subscribe(
        lambda event: logger.info(
            "Ride %s is now %s (driver=%s)", event.ride_id, event.status, event.driver_id
        ),
        RideStateChangedEvent,
    )

    session.load_catalogs()
    session.set_pickup_location(DEMO_PICKUP)
    session.set_destination_location(DEMO_DESTINATION)
    session.calculate_route()

    for ride_type_id, fare in session.state.price_estimates.items():
        logger.info("Estimate for %s: %.2f", ride_type_id, fare)

    ride = session.request_ride()
    if ride is None:
        logger.error("Ride request failed: %s", session.state.error)
        sys.exit(1)

    finished = session.run_until_finished(DEMO_TIMEOUT_SECONDS)
    if finished is None:
        logger.error("Ride %s did not finish within the demo window", ride.ride_id)
        sys.exit(1)

    logger.info(
        "Ride %s %s after %.0f simulated seconds, fare %.2f",
        finished.ride_id,
        finished.status.value,
        env.now,
        finished.fare,
    )
    if session.rate_driver(5, "Smooth ride"):
        logger.info("Driver rated")


if __name__ == "__main__":
    main()
