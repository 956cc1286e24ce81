"""
Executor - drive a suspend/resume computation to a single result.

The Executor turns a generator (or any Computation) whose yield points
produce plain values or thenables into one Deferred, giving await-style
control flow on top of callback-based resolution.

Each resumption is a micro Work Item on the shared Scheduler, so steps of
one computation are strictly sequential while steps of several computations
interleave according to the scheduler's draining rule.

From Dave Cheney:
"The name of an identifier includes its package name"
pykairos.Executor is clear - no need for GeneratorExecutor or AsyncRunner.
"""

import logging
from collections.abc import Callable
from typing import Any

from uuid_extensions import uuid7

from pykairos.core import (
    InvalidStateError,
    UnhandledComputationError,
    YieldedRejection,
    is_thenable,
)
from pykairos.executor.computation import Computation, StepResult, as_computation
from pykairos.executor.deferred import Deferred
from pykairos.executor.outcome import Rejected
from pykairos.executor.scheduler import Scheduler

logger = logging.getLogger(__name__)

__all__ = ["Executor", "run_computation"]


class Executor:
    """
    Run computations on a Scheduler.

    Usage:
        scheduler = Scheduler()
        executor = Executor(scheduler)

        def job():
            a = yield 10
            b = yield a + 5
            return b

        outer = executor.run(job())
        scheduler.run()
        assert outer.result() == 15
    """

    def __init__(self, scheduler: Scheduler):
        """
        Args:
            scheduler: Scheduler used for every resumption step
        """
        self._scheduler = scheduler

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    def run(self, computation: Any, label: str | None = None) -> Deferred:
        """
        Start driving `computation` and return its Outer Result.

        The first step runs synchronously inside this call. A computation
        that raises before its first yield is therefore already rejected when
        run() returns, with no scheduling hops; one that returns before its
        first yield is already fulfilled and its subscribers are notified on
        the next micro hop.

        Args:
            computation: A generator object or a Computation
            label: Optional name for logs (default: a time-ordered run id)

        Returns:
            Deferred that settles once with the return value or the escaped error

        Raises:
            TypeError: If computation is not a generator or Computation
        """
        return self._start(computation, label).outer

    def run_until_complete(self, computation: Any, label: str | None = None) -> Any:
        """
        Run `computation`, drain the scheduler, and return its value.

        Convenience for scripts and tests where the caller owns the loop.

        Returns:
            The computation's return value

        Raises:
            UnhandledComputationError: If an error escaped the computation
            InvalidStateError: If the queues drained while the result was pending
        """
        run = self._start(computation, label)
        while not run.outer.is_settled and len(self._scheduler) > 0:
            self._scheduler.run()

        settlement = run.outer.settlement
        if settlement is None:
            raise InvalidStateError(
                f"computation {run.run_id} is still pending after the scheduler drained"
            )
        if isinstance(settlement, Rejected):
            error = _as_exception(settlement.error)
            raise UnhandledComputationError(run.run_id, error) from error
        return settlement.value

    def _start(self, computation: Any, label: str | None) -> "_Run":
        run_id = str(uuid7())
        outer: Deferred = Deferred(self._scheduler, label=label or run_id)
        run = _Run(self._scheduler, as_computation(computation), outer, run_id)
        logger.debug(f"Executor starting computation {run_id} ({outer.label})")
        run.step(run.computation.advance, None)
        return run

    def __repr__(self) -> str:
        return f"Executor(scheduler={self._scheduler!r})"


class _Run:
    """State of one Executor invocation."""

    def __init__(self, scheduler: Scheduler, computation: Computation, outer: Deferred, run_id: str):
        self.scheduler = scheduler
        self.computation = computation
        self.outer = outer
        self.run_id = run_id
        self.steps = 0

    def step(self, resume: Callable[[Any], StepResult], arg: Any) -> None:
        """Resume the computation once and arrange the next resumption."""
        self.steps += 1
        try:
            result = resume(arg)
        except Exception as e:
            logger.debug(f"Computation {self.run_id} raised at step {self.steps}: {e!r}")
            self.outer.reject(e)
            return

        if result.finished:
            logger.debug(f"Computation {self.run_id} finished after {self.steps} steps")
            self.outer.resolve(result.value)
            return

        self.wait_for(result.value)

    def wait_for(self, produced: Any) -> None:
        """Subscribe to a yielded value and schedule the resumption it settles to."""
        if not is_thenable(produced):
            self.schedule(self.computation.advance, produced)
            return

        delivered = False

        def on_value(value: Any) -> None:
            nonlocal delivered
            if delivered:
                logger.warning(
                    f"Computation {self.run_id}: thenable {produced!r} settled more than once, "
                    f"ignoring value {value!r}"
                )
                return
            delivered = True
            self.schedule(self.computation.advance, value)

        def on_error(reason: Any) -> None:
            nonlocal delivered
            if delivered:
                logger.warning(
                    f"Computation {self.run_id}: thenable {produced!r} settled more than once, "
                    f"ignoring error {reason!r}"
                )
                return
            delivered = True
            self.schedule(self.computation.throw, _as_exception(reason))

        try:
            produced.on_settle(on_value, on_error)
        except Exception as e:
            on_error(e)

    def schedule(self, resume: Callable[[Any], StepResult], arg: Any) -> None:
        self.scheduler.enqueue_micro(
            lambda: self.step(resume, arg), label=f"{self.run_id}:step{self.steps + 1}"
        )


def _as_exception(reason: Any) -> BaseException:
    if isinstance(reason, BaseException):
        return reason
    return YieldedRejection(reason)


def run_computation(scheduler: Scheduler, computation: Any) -> Deferred:
    """
    Convenience function for one-off computations.

    Example:
        ```python
        outer = run_computation(scheduler, job())
        scheduler.run()
        print(outer.result())
        ```
    """
    return Executor(scheduler).run(computation)
