"""
Computation protocol and generator adapter.

A Computation is a paused program that can be resumed with a value or with
an error. The Executor only talks to this protocol, so any state machine
exposing advance()/throw() can be driven, not just Python generators.

Python generators map onto the protocol directly:
- advance(value) → gen.send(value)
- throw(error)   → gen.throw(error)
- StopIteration  → StepResult(value=e.value, finished=True)
"""

from collections.abc import Generator
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

__all__ = ["StepResult", "Computation", "GeneratorComputation", "as_computation"]


@dataclass(frozen=True)
class StepResult:
    """
    Outcome of one resumption.

    Attributes:
        value: The yielded value, or the return value when finished
        finished: True once the computation has returned
    """

    value: Any
    finished: bool = False

    def __str__(self) -> str:
        if self.finished:
            return f"StepResult(returned={self.value!r})"
        return f"StepResult(yielded={self.value!r})"


@runtime_checkable
class Computation(Protocol):
    """
    A program paused at a yield point.

    Both methods either return a StepResult or raise the error that escaped
    the program body.
    """

    def advance(self, value: Any = None) -> StepResult:
        """Resume with `value` as the result of the pending yield."""
        ...

    def throw(self, error: BaseException) -> StepResult:
        """Resume by raising `error` at the pending yield."""
        ...


class GeneratorComputation:
    """
    Adapt a Python generator to the Computation protocol.

    Usage:
        def job():
            a = yield 10
            b = yield a + 5
            return b

        comp = GeneratorComputation(job())
        comp.advance()     # StepResult(yielded=10)
        comp.advance(10)   # StepResult(yielded=15)
        comp.advance(15)   # StepResult(returned=15)
    """

    def __init__(self, generator: Generator[Any, Any, Any]):
        self._generator = generator

    def advance(self, value: Any = None) -> StepResult:
        try:
            produced = self._generator.send(value)
        except StopIteration as e:
            return StepResult(value=e.value, finished=True)
        return StepResult(value=produced)

    def throw(self, error: BaseException) -> StepResult:
        try:
            produced = self._generator.throw(error)
        except StopIteration as e:
            return StepResult(value=e.value, finished=True)
        return StepResult(value=produced)

    @property
    def name(self) -> str:
        return getattr(self._generator, "__qualname__", None) or type(self._generator).__name__

    def __repr__(self) -> str:
        return f"GeneratorComputation({self.name})"


def as_computation(obj: Any) -> Computation:
    """
    Normalize a generator or Computation into a Computation.

    Raises:
        TypeError: If obj is neither. Passing a generator *function* instead
                   of a generator object is the common mistake.
    """
    if isinstance(obj, Generator):
        return GeneratorComputation(obj)
    if isinstance(obj, Computation):
        return obj
    if callable(obj):
        raise TypeError(
            f"expected a generator or Computation, got callable {obj!r}; "
            f"did you forget to call it?"
        )
    raise TypeError(f"expected a generator or Computation, got {type(obj).__name__}")
