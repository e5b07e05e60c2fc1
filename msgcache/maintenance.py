"""
Common utilities for background maintenance tasks.

This module exposes helpers for running a maintenance job periodically on a
daemon thread and stopping it when its owner shuts down. The message cache
registers its expiry sweep here rather than managing threads itself.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Handle for a job running every ``interval`` seconds on a daemon thread."""

    def __init__(self, task_fn: Callable[[], object], interval: float, name: str) -> None:
        self.interval = interval
        self.name = name
        self._task_fn = task_fn
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._periodic, name=name, daemon=True)

    def _periodic(self) -> None:
        # wait() doubles as the delay before the first cycle
        while not self._stop.wait(self.interval):
            try:
                self._task_fn()
            except Exception as exc:
                logger.error("Maintenance cycle %s failed: %s", self.name, exc)

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._stop.set()

    def join(self, timeout: float | None = None) -> None:
        # a job stopping its own task cannot wait for itself
        if threading.current_thread() is self._thread:
            return
        self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()


def startup(task_fn: Callable[[], object], interval: float, *, name: str = "maintenance") -> PeriodicTask:
    """
    Schedule ``task_fn`` to run periodically every ``interval`` seconds.

    The task function is invoked in a loop until cancelled. Any exceptions
    raised by the task function are logged but do not stop the periodic
    execution.

    Returns the started :class:`PeriodicTask` handle.
    """
    if interval <= 0:
        raise ValueError(f"interval must be > 0, got {interval}")

    task = PeriodicTask(task_fn, interval, name)
    task.start()
    logger.info("Started %s (interval=%ss)", name, interval)
    return task


def shutdown(task: PeriodicTask | None, timeout: float | None = 5.0) -> None:
    """
    Stop a maintenance task started with :func:`startup`.

    Tolerant of ``None``; waits up to ``timeout`` seconds for the thread to exit.
    """
    if not task:
        return

    task.cancel()
    task.join(timeout)
    logger.info("Stopped %s", task.name)
