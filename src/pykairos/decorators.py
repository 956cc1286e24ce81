"""
Decorator for turning generator functions into Deferred-returning functions.

Usage:
    scheduler = Scheduler()
    executor = Executor(scheduler)

    @to_async(executor)
    def fetch_total(order):
        price = yield lookup_price(order)      # thenable
        tax = yield price * 0.2                # plain value
        return price + tax

    outer = fetch_total(order)                 # Deferred, first step already run
    scheduler.run()
    print(outer.result())
"""

import functools
import inspect
from collections.abc import Callable
from typing import Any

from pykairos.executor.deferred import Deferred
from pykairos.executor.instance import Executor

__all__ = ["to_async"]


def to_async(executor: Executor) -> Callable[[Callable[..., Any]], Callable[..., Deferred]]:
    """
    Decorate a generator function so calling it runs it on `executor`.

    The decorated function takes the generator function's arguments, creates
    the generator, and returns the Outer Result from Executor.run(). Bound
    methods work as usual because the wrapper forwards every argument.

    Args:
        executor: Executor that drives each call

    Raises:
        TypeError: At decoration time, if the target is not a generator function
    """

    def decorator(fn: Callable[..., Any]) -> Callable[..., Deferred]:
        if not inspect.isgeneratorfunction(fn):
            raise TypeError(f"@to_async requires a generator function, got {fn!r}")

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Deferred:
            return executor.run(fn(*args, **kwargs), label=fn.__qualname__)

        return wrapper

    return decorator
