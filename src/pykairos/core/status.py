"""
Status enums for deferred execution tracking.

Following Dave Cheney's principle: "Make zero values useful"
The first member of each enum is the state a fresh object starts in.
"""

from enum import Enum


class Priority(Enum):
    """
    Scheduling class of a Work Item.

    MICRO items drain exhaustively before each single MACRO item runs.
    Neither class implies a concrete host API (no real timers, no I/O).
    """

    MICRO = "MICRO"
    """High priority. Drained completely, including items enqueued while draining."""

    MACRO = "MACRO"
    """Low priority. Exactly one item runs per full micro-drain cycle."""

    def __str__(self) -> str:
        return self.value


class SchedulerState(Enum):
    """
    Phase of the scheduler run loop.

    Lifecycle:
    IDLE → DRAIN_MICRO → RUN_ONE_MACRO → DRAIN_MICRO → ... → IDLE
    """

    IDLE = "IDLE"
    """Not inside run()."""

    DRAIN_MICRO = "DRAIN_MICRO"
    """Popping micro items until the micro queue is empty."""

    RUN_ONE_MACRO = "RUN_ONE_MACRO"
    """Executing the single macro item of this cycle."""

    @property
    def is_running(self) -> bool:
        """Check if the run loop is active."""
        return self != SchedulerState.IDLE

    def __str__(self) -> str:
        return self.value


class DeferredState(Enum):
    """
    Status of a Deferred.

    Lifecycle:
    PENDING → FULFILLED | REJECTED

    The transition happens at most once.
    """

    PENDING = "PENDING"

    FULFILLED = "FULFILLED"
    """Settled with a value."""

    REJECTED = "REJECTED"
    """Settled with an error."""

    @property
    def is_settled(self) -> bool:
        """Check if this status is terminal."""
        return self in (DeferredState.FULFILLED, DeferredState.REJECTED)

    def __str__(self) -> str:
        return self.value
