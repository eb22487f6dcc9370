"""Cancellable one-shot and recurring tasks on a SimPy environment."""

from collections.abc import Callable, Generator
from typing import Any

import simpy


class ScheduledTask:
    """Handle to a pending callback. Cancelling is idempotent."""

    def __init__(self, env: simpy.Environment, name: str) -> None:
        self._env = env
        self.name = name
        self._process: simpy.Process | None = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def active(self) -> bool:
        return (
            not self._cancelled
            and self._process is not None
            and self._process.is_alive
        )

    def cancel(self) -> None:
        self._cancelled = True
        process = self._process
        # A callback may cancel its own task; SimPy forbids self-interrupts,
        # the cancelled flag ends the loop instead.
        if (
            process is not None
            and process.is_alive
            and process is not self._env.active_process
        ):
            process.interrupt()


class TaskScheduler:
    """Schedules callbacks in simulated time.

    Everything runs on the single SimPy thread, so callbacks never overlap.
    """

    def __init__(self, env: simpy.Environment) -> None:
        self.env = env

    def call_later(
        self, delay: float, callback: Callable[[], None], name: str = "delayed"
    ) -> ScheduledTask:
        task = ScheduledTask(self.env, name)
        task._process = self.env.process(self._run_later(task, delay, callback))
        return task

    def call_every(
        self, interval: float, callback: Callable[[], None], name: str = "interval"
    ) -> ScheduledTask:
        """Run `callback` every `interval` seconds, first after one interval."""
        if interval <= 0:
            raise ValueError("Interval must be positive")
        task = ScheduledTask(self.env, name)
        task._process = self.env.process(self._run_every(task, interval, callback))
        return task

    def _run_later(
        self, task: ScheduledTask, delay: float, callback: Callable[[], None]
    ) -> Generator[Any, Any, None]:
        try:
            yield self.env.timeout(delay)
        except simpy.Interrupt:
            return
        if not task.cancelled:
            callback()

    def _run_every(
        self, task: ScheduledTask, interval: float, callback: Callable[[], None]
    ) -> Generator[Any, Any, None]:
        try:
            while not task.cancelled:
                yield self.env.timeout(interval)
                if task.cancelled:
                    return
                callback()
        except simpy.Interrupt:
            return
