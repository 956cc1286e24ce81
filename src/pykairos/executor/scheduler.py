"""
Scheduler - two-tier run loop for deferred work.

Design Principle: Single Responsibility (SOLID)
Scheduler has ONE job: decide the order in which Work Items run.
It knows nothing about computations, deferreds or executors; those are
built on top of enqueue_micro().

Ordering rule:
- Drain the micro queue completely, including items enqueued while draining
- Run exactly one macro item
- Repeat until both queues are empty

Key Benefit:
Any collaborator (a debounced callback, an event bus dispatch, a response
handler) gets deterministic ordering by enqueuing through one instance.
There is no process-wide scheduler; whoever composes the system owns it.
"""

import logging
import os
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

from pykairos.core import (
    Priority,
    SchedulerError,
    SchedulerItemError,
    SchedulerState,
    WorkItem,
)

logger = logging.getLogger(__name__)

__all__ = ["Scheduler", "RunSummary", "ErrorSink", "log_item_error"]

ErrorSink = Callable[[SchedulerItemError], None]


def log_item_error(error: SchedulerItemError) -> None:
    """Default error sink: log the failure with its traceback."""
    logger.error(f"{error}", exc_info=error.cause)


@dataclass(frozen=True)
class RunSummary:
    """
    Counters for one call to Scheduler.run().

    Attributes:
        micro_items: Micro items executed (including failed ones)
        macro_items: Macro items executed (including failed ones)
        failures: Items that raised and were reported to the error sink
        remaining: Items still queued when run() returned; non-zero only
                   when a per-run budget was configured
    """

    micro_items: int = 0
    macro_items: int = 0
    failures: int = 0
    remaining: int = 0

    @property
    def total(self) -> int:
        """Total items executed."""
        return self.micro_items + self.macro_items

    @property
    def drained(self) -> bool:
        """True if run() returned because both queues were empty."""
        return self.remaining == 0


class Scheduler:
    """
    Ordered micro/macro work queues with a draining run loop.

    Design Patterns:
    - State Machine: IDLE → DRAIN_MICRO → RUN_ONE_MACRO → ... → IDLE
    - Builder: with_error_sink(), with_max_items_per_run(), from_env()

    Default configuration drains completely and logs item failures.

    Usage:
        scheduler = Scheduler()

        scheduler.enqueue_micro(lambda: print("b"))
        scheduler.enqueue_macro(lambda: print("e"))

        summary = scheduler.run()
        print(f"Ran {summary.total} items")
    """

    def __init__(
        self,
        error_sink: ErrorSink | None = None,
        max_items_per_run: int | None = None,
        name: str = "scheduler",
    ):
        """
        Initialize an idle scheduler with empty queues.

        From Dave Cheney: "Avoid package level state"
        Queues belong to the instance, so tests can run independent schedulers.

        Args:
            error_sink: Receives a SchedulerItemError for each failing item
                        (default: log_item_error)
            max_items_per_run: Stop run() after this many items (default: no limit)
            name: Name used in log lines
        """
        self._micro: deque[WorkItem] = deque()
        self._macro: deque[WorkItem] = deque()
        self._error_sink: ErrorSink = error_sink or log_item_error
        self._max_items_per_run = _check_budget(max_items_per_run)
        self._state = SchedulerState.IDLE
        self.name = name

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def with_error_sink(self, sink: ErrorSink) -> "Scheduler":
        """
        Route Work Item failures to a custom sink.

        Args:
            sink: Callable receiving each SchedulerItemError

        Returns:
            This scheduler, for chaining

        Example:
            errors = []
            scheduler = Scheduler().with_error_sink(errors.append)
        """
        self._error_sink = sink
        return self

    def with_max_items_per_run(self, limit: int | None) -> "Scheduler":
        """
        Bound the number of items a single run() may execute.

        The run loop stops after `limit` items and leaves the rest queued;
        the next run() continues where it stopped. None drains completely.

        Returns:
            This scheduler, for chaining
        """
        self._max_items_per_run = _check_budget(limit)
        return self

    def from_env(self) -> "Scheduler":
        """
        Read configuration from environment variables.

        KAIROS_MAX_ITEMS_PER_RUN: per-run item budget. Unset or empty leaves
        the current setting unchanged.

        Returns:
            This scheduler, for chaining

        Raises:
            ValueError: If the variable is set but is not a positive integer
        """
        raw = os.getenv("KAIROS_MAX_ITEMS_PER_RUN")
        if raw:
            try:
                limit = int(raw)
            except ValueError as e:
                raise ValueError(f"KAIROS_MAX_ITEMS_PER_RUN must be an integer, got {raw!r}") from e
            self._max_items_per_run = _check_budget(limit)
        return self

    @property
    def max_items_per_run(self) -> int | None:
        return self._max_items_per_run

    # -------------------------------------------------------------------------
    # Enqueue
    # -------------------------------------------------------------------------

    def enqueue_micro(self, item: Callable[[], object], label: str | None = None) -> None:
        """Append a callable to the micro queue."""
        self.enqueue(item, Priority.MICRO, label)

    def enqueue_macro(self, item: Callable[[], object], label: str | None = None) -> None:
        """Append a callable to the macro queue."""
        self.enqueue(item, Priority.MACRO, label)

    def enqueue(
        self, item: Callable[[], object], priority: Priority, label: str | None = None
    ) -> None:
        """
        Append a callable to the queue for `priority`.

        Never blocks and never runs the item. Safe to call from inside a
        running Work Item; the new item is observed by the current loop.

        Args:
            item: Zero-argument callable, or an existing WorkItem
            priority: MICRO or MACRO
            label: Optional name for logs (ignored when item is a WorkItem)

        Raises:
            TypeError: If item is not callable
        """
        if isinstance(item, WorkItem):
            if item.priority != priority:
                item = WorkItem(fn=item.fn, priority=priority, label=item.label)
        else:
            item = WorkItem(fn=item, priority=priority, label=label)

        if priority == Priority.MICRO:
            self._micro.append(item)
        else:
            self._macro.append(item)

    # -------------------------------------------------------------------------
    # Run loop
    # -------------------------------------------------------------------------

    def run(self) -> RunSummary:
        """
        Drain both queues.

        Algorithm:
        1. While the micro queue is non-empty, pop and execute the earliest
           item. Items it enqueues land in the same queues, so new micro
           items are drained in this same phase.
        2. If the macro queue is non-empty, pop and execute exactly one
           item, then go back to 1.
        3. Return when both queues are empty after a micro phase.

        A failing item is reported to the error sink and the loop continues.

        Returns:
            RunSummary with per-class counts

        Raises:
            SchedulerError: If called from inside a running Work Item
        """
        if self._state.is_running:
            raise SchedulerError(f"{self.name}: run() called while already running")

        budget = self._max_items_per_run
        micro_count = 0
        macro_count = 0
        failures = 0

        logger.debug(
            f"{self.name}: run start (micro={len(self._micro)}, macro={len(self._macro)})"
        )

        try:
            while True:
                self._state = SchedulerState.DRAIN_MICRO
                while self._micro:
                    if budget is not None and micro_count + macro_count >= budget:
                        break
                    if not self._execute(self._micro.popleft()):
                        failures += 1
                    micro_count += 1

                if budget is not None and micro_count + macro_count >= budget:
                    break
                if not self._macro:
                    break

                self._state = SchedulerState.RUN_ONE_MACRO
                if not self._execute(self._macro.popleft()):
                    failures += 1
                macro_count += 1
        finally:
            self._state = SchedulerState.IDLE

        summary = RunSummary(
            micro_items=micro_count,
            macro_items=macro_count,
            failures=failures,
            remaining=len(self),
        )
        logger.debug(f"{self.name}: run finished {summary}")
        return summary

    def _execute(self, item: WorkItem) -> bool:
        """Run one item to completion. Returns False if it raised."""
        try:
            item()
            return True
        except Exception as e:
            error = SchedulerItemError(item, e)
            try:
                self._error_sink(error)
            except Exception as sink_error:
                logger.exception(f"{self.name}: error sink raised while reporting {error}: {sink_error}")
            return False

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    @property
    def state(self) -> SchedulerState:
        """Current run loop phase."""
        return self._state

    @property
    def micro_pending(self) -> int:
        return len(self._micro)

    @property
    def macro_pending(self) -> int:
        return len(self._macro)

    def is_idle(self) -> bool:
        """True if not running and nothing is queued."""
        return self._state == SchedulerState.IDLE and len(self) == 0

    def __len__(self) -> int:
        """Total queued items across both classes."""
        return len(self._micro) + len(self._macro)

    def __repr__(self) -> str:
        return (
            f"Scheduler(name={self.name!r}, state={self._state}, "
            f"micro={len(self._micro)}, macro={len(self._macro)})"
        )


def _check_budget(limit: int | None) -> int | None:
    if limit is not None and limit < 1:
        raise ValueError(f"max_items_per_run must be a positive integer, got {limit}")
    return limit
