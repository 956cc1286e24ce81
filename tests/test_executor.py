"""
Test the generator-driven Executor.

Verifies:
- Plain values and thenables resume the computation with their settled value
- Rejections are delivered into the computation, single delivery
- Only errors escaping the computation reject the outer result
- Resumptions go through the scheduler's micro queue
"""

import logging

import pytest

from pykairos import (
    Deferred,
    DeferredState,
    Executor,
    InvalidStateError,
    StepResult,
    UnhandledComputationError,
    YieldedRejection,
    run_computation,
)

# =============================================================================
# Test Computations
# =============================================================================


def basic_async_flow(scheduler):
    """Two already-resolved deferreds."""
    result1 = yield Deferred.resolved(scheduler, 1)
    result2 = yield Deferred.resolved(scheduler, result1 + 2)
    return result2


def sync_values():
    a = yield 10
    b = yield a + 5
    return b


def multiple_yields(scheduler):
    """Deferreds settled later by macro items, with a plain value in between."""
    first = Deferred(scheduler)
    scheduler.enqueue_macro(lambda: first.resolve(2))
    step1 = yield first

    step2 = yield step1 * 3

    third = Deferred(scheduler)
    scheduler.enqueue_macro(lambda: third.resolve(step2 + 4))
    step3 = yield third
    return step3


# =============================================================================
# Success paths
# =============================================================================


def test_plain_values_complete_with_fifteen(scheduler, executor):
    outer = executor.run(sync_values())
    scheduler.run()

    assert outer.state == DeferredState.FULFILLED
    assert outer.result() == 15


def test_resolved_deferreds(scheduler, executor):
    outer = executor.run(basic_async_flow(scheduler))
    scheduler.run()

    assert outer.result() == 3


def test_deferreds_settled_by_macro_items(scheduler, executor):
    outer = executor.run(multiple_yields(scheduler))
    scheduler.run()

    assert outer.result() == 10


def test_foreign_thenable(scheduler, executor, manual_thenable):
    def job():
        value = yield manual_thenable
        return value.upper()

    outer = executor.run(job())
    scheduler.run()
    assert not outer.is_settled

    manual_thenable.resolve("ready")
    scheduler.run()
    assert outer.result() == "READY"


def test_outer_result_can_be_yielded_by_another_computation(scheduler, executor):
    def inner():
        value = yield 20
        return value + 1

    def outer_job():
        value = yield executor.run(inner())
        return value * 2

    outer = executor.run(outer_job())
    scheduler.run()

    assert outer.result() == 42


def test_immediate_return_is_settled_before_any_hop(scheduler, executor, log):
    def immediate():
        return "done"
        yield

    outer = executor.run(immediate())
    outer.on_settle(log.append, log.append)

    assert outer.result() == "done"
    assert log == []
    assert scheduler.micro_pending == 1

    summary = scheduler.run()
    assert log == ["done"]
    assert summary.total == 1


def test_yielding_none_resumes_with_none(scheduler, executor):
    def job():
        value = yield None
        return value

    outer = executor.run(job())
    scheduler.run()

    assert outer.result() is None


def test_custom_computation_object(scheduler, executor):
    class Countdown:
        def __init__(self, n):
            self.n = n

        def advance(self, value=None):
            self.n -= 1
            return StepResult(value=self.n, finished=self.n == 0)

        def throw(self, error):
            raise error

    outer = executor.run(Countdown(3))
    summary = scheduler.run()

    assert outer.result() == 0
    assert summary.micro_items == 2


# =============================================================================
# Error paths
# =============================================================================


def test_rejection_caught_inside_computation_gives_fallback(scheduler, executor):
    def job():
        try:
            yield Deferred.rejected(scheduler, ConnectionError("offline"))
        except ConnectionError:
            return "fallback"
        return "unreachable"

    outer = executor.run(job())
    scheduler.run()

    assert outer.result() == "fallback"


def test_body_error_before_yield_rejects_with_zero_hops(scheduler, executor):
    error = ValueError("bad input")

    def broken():
        raise error
        yield

    outer = executor.run(broken())

    assert outer.state == DeferredState.REJECTED
    assert outer.settlement.error is error
    assert len(scheduler) == 0


def test_uncaught_rejection_rejects_outer_result(scheduler, executor):
    error = TimeoutError("slow")

    def job():
        yield Deferred.rejected(scheduler, error)
        return "unreachable"

    outer = executor.run(job())
    scheduler.run()

    assert outer.settlement.error is error


def test_rejection_is_delivered_once(scheduler, executor, log):
    """A recovered rejection resumes the computation exactly once."""

    def job():
        try:
            yield Deferred.rejected(scheduler, KeyError("k"))
        except KeyError:
            log.append("caught")
        value = yield "next"
        log.append(value)
        return "end"

    outer = executor.run(job())
    scheduler.run()

    assert outer.result() == "end"
    assert log == ["caught", "next"]


def test_non_exception_reason_is_wrapped(scheduler, executor, manual_thenable):
    def job():
        try:
            yield manual_thenable
        except YieldedRejection as e:
            return e.reason

    outer = executor.run(job())
    manual_thenable.reject({"status": 503})
    scheduler.run()

    assert outer.result() == {"status": 503}


def test_thenable_settling_twice_is_ignored(scheduler, executor, manual_thenable, caplog):
    def job():
        value = yield manual_thenable
        second = yield "plain"
        return (value, second)

    outer = executor.run(job())
    with caplog.at_level(logging.WARNING, logger="pykairos.executor.instance"):
        manual_thenable.resolve(1)
        manual_thenable.reject(RuntimeError("late"))
    scheduler.run()

    assert outer.result() == (1, "plain")
    assert any("more than once" in record.getMessage() for record in caplog.records)


def test_raising_on_settle_is_treated_as_rejection(scheduler, executor):
    class Exploding:
        def on_settle(self, on_value, on_error):
            raise OSError("cannot subscribe")

    def job():
        try:
            yield Exploding()
        except OSError as e:
            return str(e)

    outer = executor.run(job())
    scheduler.run()

    assert outer.result() == "cannot subscribe"


def test_error_in_recovery_code_rejects_outer(scheduler, executor):
    def job():
        try:
            yield Deferred.rejected(scheduler, KeyError("k"))
        except KeyError:
            raise RuntimeError("recovery failed")

    outer = executor.run(job())
    scheduler.run()

    assert isinstance(outer.settlement.error, RuntimeError)
    assert isinstance(outer.settlement.error.__context__, KeyError)


def test_computation_errors_are_not_scheduler_errors(scheduler, executor, errors):
    def job():
        yield 1
        raise ValueError("after yield")

    outer = executor.run(job())
    scheduler.run()

    assert outer.state == DeferredState.REJECTED
    assert errors == []


def test_run_rejects_non_computation(executor):
    with pytest.raises(TypeError):
        executor.run(sync_values)


# =============================================================================
# Ordering
# =============================================================================


def test_plain_value_resumption_goes_through_micro_queue(scheduler, executor, log):
    def job():
        log.append("start")
        yield 1
        log.append("resumed")

    executor.run(job())
    assert log == ["start"]

    scheduler.enqueue_micro(lambda: log.append("other micro"))
    scheduler.enqueue_macro(lambda: log.append("macro"))
    scheduler.run()

    assert log == ["start", "resumed", "other micro", "macro"]


def test_steps_of_two_computations_interleave(scheduler, executor, log):
    def job(name):
        for i in range(3):
            log.append(f"{name}{i}")
            yield i

    executor.run(job("a"))
    executor.run(job("b"))
    scheduler.run()

    assert log == ["a0", "b0", "a1", "b1", "a2", "b2"]


def test_pending_computation_never_settles(scheduler, executor):
    def waits_forever():
        yield Deferred(scheduler)

    outer = executor.run(waits_forever())
    scheduler.run()

    assert outer.state == DeferredState.PENDING


# =============================================================================
# run_until_complete
# =============================================================================


def test_run_until_complete_returns_value(executor):
    assert executor.run_until_complete(sync_values()) == 15


def test_run_until_complete_raises_unhandled(executor):
    def job():
        yield 1
        raise LookupError("gone")

    with pytest.raises(UnhandledComputationError) as exc_info:
        executor.run_until_complete(job())

    assert isinstance(exc_info.value.error, LookupError)
    assert exc_info.value.__cause__ is exc_info.value.error


def test_run_until_complete_pending_raises(scheduler, executor):
    def waits_forever():
        yield Deferred(scheduler)

    with pytest.raises(InvalidStateError):
        executor.run_until_complete(waits_forever())


def test_run_until_complete_with_budget(scheduler, executor):
    scheduler.with_max_items_per_run(1)

    assert executor.run_until_complete(multiple_yields(scheduler)) == 10


def test_run_computation_helper(scheduler):
    outer = run_computation(scheduler, sync_values())
    scheduler.run()

    assert outer.result() == 15
    assert repr(Executor(scheduler)).startswith("Executor(")


def test_label_defaults_to_run_id(executor):
    first = executor.run(sync_values())
    second = executor.run(sync_values(), label="named")

    assert first.label
    assert second.label == "named"
    assert first.label != executor.run(sync_values()).label
