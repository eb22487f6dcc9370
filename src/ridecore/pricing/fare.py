from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from ridecore.core.exceptions import ValidationError

if TYPE_CHECKING:
    from ridecore.ride import RideType
    from ridecore.settings import PricingSettings


class PriceFactors(BaseModel):
    """Pricing inputs shared by every ride type."""

    model_config = ConfigDict(frozen=True)

    base_price: float = Field(ge=0)
    per_km_rate: float = Field(ge=0)
    per_minute_rate: float = Field(ge=0)
    minimum_fare: float = Field(ge=0)
    surge_pricing: float = Field(default=1.0, ge=1.0)

    @classmethod
    def from_settings(cls, settings: "PricingSettings") -> "PriceFactors":
        return cls(
            base_price=settings.base_price,
            per_km_rate=settings.per_km_rate,
            per_minute_rate=settings.per_minute_rate,
            minimum_fare=settings.minimum_fare,
            surge_pricing=settings.surge_pricing,
        )


class FareBreakdown(BaseModel):
    """Detailed breakdown of fare components."""

    base_fee: float = Field(ge=0)
    distance_charge: float = Field(ge=0)
    time_charge: float = Field(ge=0)
    subtotal: float = Field(ge=0)
    price_multiplier: float = Field(gt=0)
    surge_multiplier: float = Field(ge=1.0)
    minimum_applied: bool
    total_fare: float = Field(ge=0)


def round_fare(amount: float) -> float:
    """Round half-up to cents."""
    return float(Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class FareCalculator:
    """Calculates ride fares from distance, duration, ride type and price factors."""

    def breakdown(
        self,
        distance_km: float,
        duration_min: float,
        ride_type: "RideType",
        factors: PriceFactors,
    ) -> FareBreakdown:
        """
        Calculate fare for a ride.

        The ride-type multiplier and surge are applied to the subtotal before
        the minimum fare floor. The floor itself is not scaled by the ride type.
        """
        if distance_km < 0:
            raise ValidationError("Distance must be non-negative")
        if duration_min < 0:
            raise ValidationError("Duration must be non-negative")
        if factors.surge_pricing < 1.0:
            raise ValidationError("Surge multiplier must be >= 1.0")

        distance_charge = distance_km * factors.per_km_rate
        time_charge = duration_min * factors.per_minute_rate
        subtotal = factors.base_price + distance_charge + time_charge

        with_multiplier = subtotal * ride_type.price_multiplier
        with_surge = with_multiplier * factors.surge_pricing
        final = max(with_surge, factors.minimum_fare)

        return FareBreakdown(
            base_fee=factors.base_price,
            distance_charge=distance_charge,
            time_charge=time_charge,
            subtotal=subtotal,
            price_multiplier=ride_type.price_multiplier,
            surge_multiplier=factors.surge_pricing,
            minimum_applied=with_surge < factors.minimum_fare,
            total_fare=round_fare(final),
        )

    def calculate(
        self,
        distance_km: float,
        duration_min: float,
        ride_type: "RideType",
        factors: PriceFactors,
    ) -> float:
        return self.breakdown(distance_km, duration_min, ride_type, factors).total_fare


_calculator = FareCalculator()


def calculate_fare(
    distance_km: float,
    duration_min: float,
    ride_type: "RideType",
    factors: PriceFactors,
) -> float:
    """Fare for one ride type; pure function of its four inputs."""
    return _calculator.calculate(distance_km, duration_min, ride_type, factors)


def estimate_prices(
    distance_km: float,
    duration_min: float,
    ride_types: Iterable["RideType"],
    factors: PriceFactors,
) -> dict[str, float]:
    """Fare per ride type id."""
    return {rt.id: calculate_fare(distance_km, duration_min, rt, factors) for rt in ride_types}
