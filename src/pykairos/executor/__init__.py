"""
Executor module - runtime engine for deferred, ordered execution.

This module contains the execution components:
- scheduler: Two-tier micro/macro run loop (Scheduler class)
- deferred: Single-settlement result bound to a scheduler
- outcome: Settlement state machine (Fulfilled/Rejected)
- computation: Computation protocol and generator adapter
- instance: Generator-driven executor (Executor class)
"""

from pykairos.executor.computation import (
    Computation,
    GeneratorComputation,
    StepResult,
    as_computation,
)
from pykairos.executor.deferred import Deferred
from pykairos.executor.instance import Executor, run_computation
from pykairos.executor.outcome import (
    Fulfilled,
    Rejected,
    Settlement,
    is_fulfilled,
    is_rejected,
)
from pykairos.executor.scheduler import ErrorSink, RunSummary, Scheduler, log_item_error

__all__ = [
    # Scheduler
    "Scheduler",
    "RunSummary",
    "ErrorSink",
    "log_item_error",
    # Deferred and settlement state machine
    "Deferred",
    "Fulfilled",
    "Rejected",
    "Settlement",
    "is_fulfilled",
    "is_rejected",
    # Computations
    "Computation",
    "GeneratorComputation",
    "StepResult",
    "as_computation",
    # Executor
    "Executor",
    "run_computation",
]
