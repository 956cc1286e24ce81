"""
Kairos: Deferred, Ordered Execution for Python

Pure Python implementation of microtask/macrotask scheduling and
generator-driven await-style control flow.

Design Pattern: Façade Pattern (Chapter 10)
This module provides a simplified interface to the kairos package,
hiding the split between scheduling, settlement and computation driving.

From Dave Cheney: "A good package starts with its name"
Package "kairos" (Greek: the opportune moment) describes what it provides:
running each piece of work at the right time.

Example:
    ```python
    from pykairos import Deferred, Executor, Scheduler

    scheduler = Scheduler()
    executor = Executor(scheduler)

    def job():
        reply = Deferred(scheduler)
        scheduler.enqueue_macro(lambda: reply.resolve(2))
        step1 = yield reply          # waits for the macro item
        step2 = yield step1 * 3      # plain values resume on the next micro hop
        return step2 + 4

    print(executor.run_until_complete(job()))   # 10
    ```
"""

# Core types
from pykairos.core import (
    DeferredState,
    Priority,
    SchedulerState,
    Thenable,
    WorkItem,
    is_thenable,
    # Errors
    InvalidStateError,
    KairosError,
    SchedulerError,
    SchedulerItemError,
    UnhandledComputationError,
    YieldedRejection,
)

# Execution
# Following Dave Cheney: "The name of an identifier includes its package name"
# pykairos.Scheduler, pykairos.Executor (no Task prefix needed)
from pykairos.executor.scheduler import Scheduler, RunSummary, log_item_error
from pykairos.executor.deferred import Deferred
from pykairos.executor.outcome import (
    Fulfilled,
    Rejected,
    Settlement,
    is_fulfilled,
    is_rejected,
)
from pykairos.executor.computation import (
    Computation,
    GeneratorComputation,
    StepResult,
    as_computation,
)
from pykairos.executor.instance import Executor, run_computation

# Decorators
from pykairos.decorators import to_async

# Version
__version__ = "0.1.0"

__all__ = [
    # Core types
    "Priority",
    "SchedulerState",
    "DeferredState",
    "WorkItem",
    "Thenable",
    "is_thenable",

    # Errors
    "KairosError",
    "SchedulerError",
    "SchedulerItemError",
    "YieldedRejection",
    "UnhandledComputationError",
    "InvalidStateError",

    # Scheduler
    "Scheduler",
    "RunSummary",
    "log_item_error",

    # Settlement
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
    "to_async",

    # Metadata
    "__version__",
]
