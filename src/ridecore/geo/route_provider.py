import logging
from collections.abc import Callable
from typing import Any, Protocol

import httpx
import polyline
import requests
from pydantic import BaseModel, Field

from ridecore.core.exceptions import (
    ConfigurationError,
    NetworkError,
    PermanentError,
    ServiceUnavailableError,
    ValidationError,
)
from ridecore.geo.distance import Coordinate, distance_km

logger = logging.getLogger(__name__)

# Average urban speed used when no routing service is involved
STRAIGHT_LINE_SPEED_KMH = 30.0


class RouteStep(BaseModel):
    instruction: str
    distance_meters: float = Field(ge=0)
    duration_seconds: float = Field(ge=0)


class RouteData(BaseModel):
    geometry: list[Coordinate]
    distance_meters: float = Field(ge=0)
    duration_seconds: float = Field(ge=0)
    steps: list[RouteStep] = Field(default_factory=list)

    @property
    def distance_km(self) -> float:
        return self.distance_meters / 1000.0

    @property
    def duration_minutes(self) -> float:
        return self.duration_seconds / 60.0


class RouteConfigurationError(ConfigurationError):
    """Route provider is not configured (e.g. missing access token)."""

    pass


class NoRouteFoundError(ValidationError):
    """No route found between coordinates. Inherits from ValidationError (non-retryable)."""

    pass


class RouteRequestError(PermanentError):
    """Route provider rejected the request (non-2xx, non-5xx response)."""

    pass


class RouteServiceError(ServiceUnavailableError):
    """Route provider error (5xx or connection failure)."""

    pass


class RouteTimeoutError(NetworkError):
    """Route provider request timeout."""

    pass


class RouteProvider(Protocol):
    def get_route_sync(self, origin: Coordinate, destination: Coordinate) -> RouteData: ...


def decode_polyline(encoded: str, precision: int = 5) -> list[Coordinate]:
    """Decode polyline string to list of (lat, lon) tuples."""
    coords = polyline.decode(encoded, precision)
    return [(lat, lon) for lat, lon in coords]


def describe_maneuver(maneuver: dict[str, Any]) -> str:
    """Human-readable instruction for a Directions API maneuver."""
    if maneuver.get("instruction"):
        return str(maneuver["instruction"])

    kind = maneuver.get("type", "")
    modifier = maneuver.get("modifier", "")

    if kind == "depart":
        return "Start at pickup location"
    if kind == "arrive":
        return "Arrive at destination"
    if kind == "turn":
        return f"Turn {modifier}"
    if kind == "merge":
        return f"Merge {modifier}"
    if kind == "ramp":
        return f"Take ramp {modifier}"
    if kind == "continue":
        return "Continue straight"
    return f"{kind} {modifier}".strip() or "Continue"


def parse_route(data: dict[str, Any]) -> RouteData:
    """Convert a Directions API payload into RouteData.

    Raises NoRouteFoundError when the payload carries no route.
    """
    routes = data.get("routes") or []
    if data.get("code") == "NoRoute" or not routes:
        raise NoRouteFoundError("No routes found between the specified locations")

    route = routes[0]
    steps: list[RouteStep] = []
    for leg in route.get("legs") or []:
        for step in leg.get("steps") or []:
            instruction = describe_maneuver(step["maneuver"]) if step.get("maneuver") else "Continue"
            steps.append(
                RouteStep(
                    instruction=instruction,
                    distance_meters=float(step.get("distance") or 0),
                    duration_seconds=float(step.get("duration") or 0),
                )
            )

    if not steps:
        steps.append(
            RouteStep(
                instruction="Drive to destination",
                distance_meters=float(route.get("distance") or 0),
                duration_seconds=float(route.get("duration") or 0),
            )
        )

    return RouteData(
        geometry=decode_polyline(route["geometry"]),
        distance_meters=float(route["distance"]),
        duration_seconds=float(route["duration"]),
        steps=steps,
    )


class MapboxDirectionsClient:
    """Directions API client. Errors propagate to the caller; nothing is retried here."""

    def __init__(
        self,
        access_token: str,
        base_url: str = "https://api.mapbox.com",
        profile: str = "driving-traffic",
        timeout: float = 5.0,
    ):
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.profile = profile
        self.timeout = timeout

    def _build_request(
        self, origin: Coordinate, destination: Coordinate
    ) -> tuple[str, dict[str, str]]:
        if not self.access_token:
            raise RouteConfigurationError(
                "Route provider access token not configured. Set MAPBOX_ACCESS_TOKEN."
            )

        origin_lat, origin_lon = origin
        dest_lat, dest_lon = destination

        url = (
            f"{self.base_url}/directions/v5/mapbox/{self.profile}/"
            f"{origin_lon},{origin_lat};{dest_lon},{dest_lat}"
        )
        params = {
            "geometries": "polyline",
            "overview": "full",
            "steps": "true",
            "access_token": self.access_token,
        }
        return url, params

    @staticmethod
    def _check_status(status_code: int, body: str) -> None:
        if status_code >= 500:
            raise RouteServiceError(
                f"Route provider server error: {status_code}",
                details={"status_code": status_code},
            )
        if status_code >= 300:
            raise RouteRequestError(
                f"Failed to fetch route: {status_code}. {body}",
                details={"status_code": status_code},
            )

    @staticmethod
    def _parse_body(read_json: Callable[[], Any]) -> RouteData:
        try:
            return parse_route(read_json())
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            raise RouteServiceError(f"Malformed route provider response: {e}") from e

    async def get_route(self, origin: Coordinate, destination: Coordinate) -> RouteData:
        """Get route between two coordinates."""
        url, params = self._build_request(origin, destination)

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params)
        except httpx.TimeoutException as e:
            raise RouteTimeoutError(f"Request timed out after {self.timeout}s") from e
        except httpx.NetworkError as e:
            raise RouteServiceError(f"Network error: {e}") from e

        self._check_status(response.status_code, response.text)
        return self._parse_body(response.json)

    def get_route_sync(self, origin: Coordinate, destination: Coordinate) -> RouteData:
        """Synchronous route fetching for callers running inside the SimPy loop."""
        url, params = self._build_request(origin, destination)

        try:
            response = requests.get(url, params=params, timeout=self.timeout)
        except requests.Timeout as e:
            raise RouteTimeoutError(f"Request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise RouteServiceError(f"Network error: {e}") from e

        self._check_status(response.status_code, response.text)
        route = self._parse_body(response.json)
        logger.debug(
            "Route fetched: distance=%.0fm duration=%.0fs steps=%d",
            route.distance_meters,
            route.duration_seconds,
            len(route.steps),
        )
        return route


class StraightLineRouteProvider:
    """Offline two-point route at a constant average speed."""

    def __init__(self, speed_kmh: float = STRAIGHT_LINE_SPEED_KMH):
        self.speed_kmh = speed_kmh

    def get_route_sync(self, origin: Coordinate, destination: Coordinate) -> RouteData:
        distance = distance_km(origin, destination)
        duration_seconds = distance / self.speed_kmh * 3600.0
        return RouteData(
            geometry=[origin, destination],
            distance_meters=distance * 1000.0,
            duration_seconds=duration_seconds,
            steps=[
                RouteStep(
                    instruction="Start at pickup location",
                    distance_meters=0,
                    duration_seconds=0,
                ),
                RouteStep(
                    instruction="Drive to destination",
                    distance_meters=distance * 1000.0,
                    duration_seconds=duration_seconds,
                ),
            ],
        )
