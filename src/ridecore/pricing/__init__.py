"""Deterministic fare pricing."""

from .fare import FareBreakdown, FareCalculator, PriceFactors, calculate_fare, estimate_prices

__all__ = ["FareBreakdown", "FareCalculator", "PriceFactors", "calculate_fare", "estimate_prices"]
