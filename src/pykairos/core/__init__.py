"""
Core types for the pykairos deferred execution library.

This module contains the fundamental types used throughout pykairos:
- Priority: Scheduling class of a Work Item (MICRO, MACRO)
- SchedulerState: Phase of the scheduler run loop
- DeferredState: Settlement state of a Deferred
- WorkItem: Immutable zero-argument unit of deferred execution
- Thenable: Protocol for anything that settles once to a value or error
- KairosError and its subclasses
"""

from pykairos.core.status import DeferredState, Priority, SchedulerState
from pykairos.core.work_item import WorkItem
from pykairos.core.thenable import Thenable, is_thenable
from pykairos.core.errors import (
    InvalidStateError,
    KairosError,
    SchedulerError,
    SchedulerItemError,
    UnhandledComputationError,
    YieldedRejection,
)

__all__ = [
    "Priority",
    "SchedulerState",
    "DeferredState",
    "WorkItem",
    "Thenable",
    "is_thenable",
    "KairosError",
    "SchedulerError",
    "SchedulerItemError",
    "YieldedRejection",
    "UnhandledComputationError",
    "InvalidStateError",
]
