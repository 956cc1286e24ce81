"""Exception hierarchy for pykairos.

Every error raised by the library derives from KairosError so callers can
catch library failures without catching unrelated exceptions.

From Dave Cheney: "Errors are values"
Each class carries the context needed to act on it, not just a message.
"""

from typing import Any

__all__ = [
    "KairosError",
    "SchedulerError",
    "SchedulerItemError",
    "YieldedRejection",
    "UnhandledComputationError",
    "InvalidStateError",
]


class KairosError(Exception):
    """Base class for all pykairos errors."""

    pass


class SchedulerError(KairosError):
    """
    The scheduler was used incorrectly.

    Raised for re-entrant calls to Scheduler.run() from inside a Work Item.
    """

    pass


class SchedulerItemError(KairosError):
    """A Work Item raised while the scheduler was executing it.

    Never raised by the run loop itself: instances are handed to the
    scheduler's error sink and the loop moves on to the next item.

    Attributes:
        item: The WorkItem that failed
        cause: The exception the item raised (also set as __cause__)
    """

    def __init__(self, item: Any, cause: BaseException):
        super().__init__(f"work item {item.describe()} failed: {type(cause).__name__}: {cause}")
        self.item = item
        self.cause = cause
        self.__cause__ = cause

    def __repr__(self) -> str:
        """Readable representation for debugging."""
        return f"SchedulerItemError(item={self.item!r}, cause={self.cause!r})"


class YieldedRejection(KairosError):
    """An awaited Deferred Resolution was rejected with a non-exception reason.

    Generators can only have exceptions thrown into them, so a reason such as
    a string or a dict is wrapped before delivery. The computation can catch
    this type and inspect `reason`.

    Example:
        ```python
        def job():
            try:
                yield rejecting_thenable
            except YieldedRejection as e:
                return e.reason
        ```
    """

    def __init__(self, reason: Any):
        super().__init__(f"awaited resolution rejected: {reason!r}")
        self.reason = reason

    def __repr__(self) -> str:
        return f"YieldedRejection(reason={self.reason!r})"


class UnhandledComputationError(KairosError):
    """An error escaped a computation's outermost frame.

    Raised by Executor.run_until_complete(). The escaped error is available
    as `error` and as __cause__.

    Attributes:
        run_id: Identifier of the executor invocation
        error: The error that rejected the outer result
    """

    def __init__(self, run_id: str, error: BaseException):
        super().__init__(f"computation {run_id} failed: {type(error).__name__}: {error}")
        self.run_id = run_id
        self.error = error

    def __repr__(self) -> str:
        return f"UnhandledComputationError(run_id={self.run_id!r}, error={self.error!r})"


class InvalidStateError(KairosError):
    """The result of a Deferred was read before it settled."""

    pass
