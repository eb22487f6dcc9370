from datetime import UTC, datetime
from typing import TYPE_CHECKING
from unittest.mock import Mock

import pytest
import simpy

from ridecore.drivers.faker_provider import create_faker_instance
from ridecore.events.bus import EventBus
from ridecore.ride_logging import LogContext
from ridecore.settings import SimulationSettings
from ridecore.trips.clock import SimulationClock
from tests.factories import RideFactory

if TYPE_CHECKING:
    from faker.proxy import Faker

# Fixed simulation epoch so timestamps are reproducible
SIM_START = datetime(2025, 1, 15, 8, 0, 0, tzinfo=UTC)


@pytest.fixture
def simpy_env() -> simpy.Environment:
    return simpy.Environment()


@pytest.fixture
def clock(simpy_env: simpy.Environment) -> SimulationClock:
    return SimulationClock(simpy_env, start_time=SIM_START)


@pytest.fixture
def fake() -> "Faker":
    """Seeded Faker instance for deterministic test data."""
    return create_faker_instance(seed=42)


@pytest.fixture
def ride_factory() -> RideFactory:
    return RideFactory(created_at=SIM_START)


@pytest.fixture
def sim_settings() -> SimulationSettings:
    return SimulationSettings()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def mock_route_provider():
    """Mock route provider for booking tests."""
    return Mock()


@pytest.fixture(autouse=True)
def clear_log_context():
    LogContext.clear()
    yield
    LogContext.clear()
