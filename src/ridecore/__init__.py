"""Ride lifecycle simulation and fare estimation core."""

__version__ = "0.1.0"
