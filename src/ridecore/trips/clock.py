from datetime import UTC, datetime, timedelta

import simpy


class SimulationClock:
    """Maps SimPy seconds onto UTC wall-clock datetimes."""

    def __init__(self, env: simpy.Environment, start_time: datetime | None = None):
        self._env = env
        self._start_time = (start_time or datetime.now(UTC)).astimezone(UTC)

    @property
    def start_time(self) -> datetime:
        return self._start_time

    def current_time(self) -> datetime:
        """Convert SimPy now to datetime."""
        return self._start_time + timedelta(seconds=self._env.now)

    def format_timestamp(self, dt: datetime | None = None) -> str:
        """Format datetime as ISO 8601 UTC string."""
        if dt is None:
            dt = self.current_time()
        return dt.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
