"""Tests for the exception hierarchy."""

import pytest

from ridecore.core.exceptions import (
    ConfigurationError,
    NetworkError,
    NotFoundError,
    PermanentError,
    RideCoreError,
    ServiceUnavailableError,
    StateError,
    TransientError,
    ValidationError,
)
from ridecore.geo.route_provider import (
    NoRouteFoundError,
    RouteConfigurationError,
    RouteRequestError,
    RouteServiceError,
    RouteTimeoutError,
)


@pytest.mark.unit
class TestExceptionHierarchy:
    @pytest.mark.parametrize("exc_class", [NetworkError, ServiceUnavailableError])
    def test_transient_errors(self, exc_class):
        assert issubclass(exc_class, TransientError)
        assert issubclass(exc_class, RideCoreError)

    @pytest.mark.parametrize(
        "exc_class", [ValidationError, NotFoundError, StateError, ConfigurationError]
    )
    def test_permanent_errors(self, exc_class):
        assert issubclass(exc_class, PermanentError)
        assert not issubclass(exc_class, TransientError)

    @pytest.mark.parametrize(
        ("exc_class", "base"),
        [
            (RouteTimeoutError, TransientError),
            (RouteServiceError, TransientError),
            (RouteRequestError, PermanentError),
            (NoRouteFoundError, ValidationError),
            (RouteConfigurationError, ConfigurationError),
        ],
    )
    def test_route_errors(self, exc_class, base):
        assert issubclass(exc_class, base)


@pytest.mark.unit
class TestRideCoreError:
    def test_message_and_details(self):
        error = StateError("Invalid transition", details={"ride_id": "ride-001"})

        assert str(error) == "Invalid transition"
        assert error.message == "Invalid transition"
        assert error.details == {"ride_id": "ride-001"}

    def test_details_default_to_empty(self):
        assert NotFoundError("missing").details == {}

    def test_catchable_as_base(self):
        with pytest.raises(RideCoreError):
            raise NetworkError("timeout")
