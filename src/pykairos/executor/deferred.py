"""
Deferred - single-settlement result bound to a Scheduler.

A Deferred is the Outer Result returned by Executor.run(), and can also be
created directly by collaborators that want to hand a computation something
to wait on (a response handler, a debounced callback).

Settlement rules:
- PENDING → FULFILLED or PENDING → REJECTED, at most once
- Later resolve()/reject() calls are no-ops and return False
- Subscribers are never called from inside resolve()/reject(); each callback
  is dispatched as a micro Work Item on the owning scheduler

Because Deferred implements on_settle(), it satisfies the Thenable protocol
and can be yielded by other computations.
"""

import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pykairos.core import DeferredState, InvalidStateError
from pykairos.executor.outcome import Fulfilled, Rejected, Settlement
from pykairos.executor.scheduler import Scheduler

logger = logging.getLogger(__name__)

__all__ = ["Deferred"]

R = TypeVar("R")


class Deferred(Generic[R]):
    """
    A value that settles exactly once, later, to a value or an error.

    Usage:
        scheduler = Scheduler()
        reply = Deferred(scheduler, label="reply")

        reply.on_settle(print, lambda e: print("failed:", e))
        scheduler.enqueue_macro(lambda: reply.resolve("pong"))

        scheduler.run()   # prints "pong"
    """

    def __init__(self, scheduler: Scheduler, label: str | None = None):
        """
        Create a pending Deferred.

        Args:
            scheduler: Scheduler used to dispatch subscriber callbacks
            label: Optional name used in log lines
        """
        self._scheduler = scheduler
        self._settlement: Settlement | None = None
        self._subscribers: list[tuple[Callable[[R], Any], Callable[[Any], Any]]] = []
        self.label = label

    @classmethod
    def resolved(cls, scheduler: Scheduler, value: R, label: str | None = None) -> "Deferred[R]":
        """Create a Deferred already fulfilled with `value`."""
        deferred = cls(scheduler, label)
        deferred.resolve(value)
        return deferred

    @classmethod
    def rejected(cls, scheduler: Scheduler, error: Any, label: str | None = None) -> "Deferred[R]":
        """Create a Deferred already rejected with `error`."""
        deferred = cls(scheduler, label)
        deferred.reject(error)
        return deferred

    # -------------------------------------------------------------------------
    # Settlement
    # -------------------------------------------------------------------------

    def resolve(self, value: R) -> bool:
        """
        Fulfil with `value`.

        Returns:
            True if this call settled the Deferred, False if it was already settled
        """
        return self._settle(Fulfilled(value))

    def reject(self, error: Any) -> bool:
        """
        Reject with `error`.

        Returns:
            True if this call settled the Deferred, False if it was already settled
        """
        return self._settle(Rejected(error))

    def _settle(self, settlement: Settlement) -> bool:
        if self._settlement is not None:
            logger.debug(f"{self!r}: ignoring {settlement}, already {self._settlement}")
            return False

        self._settlement = settlement
        subscribers, self._subscribers = self._subscribers, []
        for on_value, on_error in subscribers:
            self._dispatch(on_value, on_error)
        return True

    # -------------------------------------------------------------------------
    # Thenable contract
    # -------------------------------------------------------------------------

    def on_settle(self, on_value: Callable[[R], Any], on_error: Callable[[Any], Any]) -> None:
        """
        Subscribe to settlement.

        Exactly one callback is invoked exactly once, from a micro Work Item.
        Subscribing to an already settled Deferred dispatches immediately.
        """
        if self._settlement is None:
            self._subscribers.append((on_value, on_error))
        else:
            self._dispatch(on_value, on_error)

    def _dispatch(self, on_value: Callable[[R], Any], on_error: Callable[[Any], Any]) -> None:
        settlement = self._settlement
        if isinstance(settlement, Fulfilled):
            self._scheduler.enqueue_micro(lambda: on_value(settlement.value), label=self._tag("value"))
        else:
            self._scheduler.enqueue_micro(lambda: on_error(settlement.error), label=self._tag("error"))

    def _tag(self, kind: str) -> str:
        return f"{self.label or 'deferred'}:{kind}"

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    @property
    def state(self) -> DeferredState:
        if self._settlement is None:
            return DeferredState.PENDING
        if isinstance(self._settlement, Fulfilled):
            return DeferredState.FULFILLED
        return DeferredState.REJECTED

    @property
    def is_settled(self) -> bool:
        return self._settlement is not None

    @property
    def settlement(self) -> Settlement | None:
        """Fulfilled(value), Rejected(error), or None while pending."""
        return self._settlement

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    def result(self) -> R:
        """
        Return the value, or raise the rejection error.

        Raises:
            InvalidStateError: If still pending
            YieldedRejection: If rejected with a non-exception reason
        """
        if self._settlement is None:
            raise InvalidStateError(f"{self!r} has not settled")
        return self._settlement.unwrap()

    def __repr__(self) -> str:
        return f"Deferred(label={self.label!r}, state={self.state})"
