"""Deterministic scheduler for async-mode roots.

Async roots never render on their own: they register a callback here and
wait for test code to flush. Flushing hands the callback a deadline; the
work loop stops at the first unit-of-work boundary where the deadline has
no time left and reschedules itself.

Components can record progress with ``yield_value(v)``; flush functions
return the values yielded while they ran, so tests can assert how far
rendering got.

Usage:
    from testrender.reconciler.scheduling import scheduler

    scheduler.yield_value("A")
    assert scheduler.flush_all() == ["A"]
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

logger = logging.getLogger(__name__)


class Deadline:
    """Time budget handed to a scheduled callback."""

    def __init__(self, time_remaining: Callable[[], float], did_timeout: bool = False) -> None:
        self._time_remaining = time_remaining
        self.did_timeout = did_timeout

    def time_remaining(self) -> float:
        return self._time_remaining()


class Scheduler:
    """Holds at most one pending callback and the list of yielded values."""

    def __init__(self) -> None:
        self._scheduled_callback: Callable[[Deadline], Any] | None = None
        self._yielded_values: list[Any] | None = None
        self._now: Callable[[], float] = time.perf_counter

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------

    def now(self) -> float:
        return self._now()

    def set_now_implementation(self, implementation: Callable[[], float]) -> None:
        self._now = implementation

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def schedule_callback(self, callback: Callable[[Deadline], Any]) -> int:
        self._scheduled_callback = callback
        return 0

    def cancel_callback(self) -> None:
        self._scheduled_callback = None

    def has_pending_callback(self) -> bool:
        return self._scheduled_callback is not None

    def _run_next(self, deadline: Deadline) -> None:
        callback = self._scheduled_callback
        self._scheduled_callback = None
        callback(deadline)

    # ------------------------------------------------------------------
    # Flushing
    # ------------------------------------------------------------------

    def flush_all(self) -> list[Any]:
        """Run scheduled work to completion; return the values yielded."""
        self._yielded_values = None
        while self._scheduled_callback is not None:
            self._run_next(Deadline(lambda: 1))
        values = self._yielded_values or []
        self._yielded_values = None
        logger.debug("flush_all yielded %d value(s)", len(values))
        return values

    def flush_through(self, expected_values: list[Any]) -> list[Any]:
        """Run scheduled work until as many values as expected were yielded."""
        self._yielded_values = []
        did_stop = False

        def time_remaining() -> float:
            nonlocal did_stop
            if len(self._yielded_values) >= len(expected_values):
                did_stop = True
                return 0
            return 1

        while self._scheduled_callback is not None and not did_stop:
            self._run_next(Deadline(time_remaining))
        values = self._yielded_values
        self._yielded_values = []
        return values

    def yield_value(self, value: Any) -> None:
        if self._yielded_values is None:
            self._yielded_values = [value]
        else:
            self._yielded_values.append(value)

    def with_clean_yields(self, fn: Callable[[], Any]) -> list[Any]:
        """Run ``fn`` with an empty yield log; return what it yielded."""
        self._yielded_values = []
        fn()
        values = self._yielded_values
        self._yielded_values = []
        return values

    def clear_yields(self) -> list[Any]:
        values = self._yielded_values or []
        self._yielded_values = []
        return values


scheduler = Scheduler()
