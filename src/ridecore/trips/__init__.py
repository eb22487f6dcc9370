"""Ride lifecycle simulation on a SimPy environment."""

from .clock import SimulationClock
from .ride_simulator import RideSimulator, TickResult
from .scheduler import ScheduledTask, TaskScheduler

__all__ = ["RideSimulator", "ScheduledTask", "SimulationClock", "TaskScheduler", "TickResult"]
