"""
WorkItem - a single unit of deferred execution.

Design: Value Object
A WorkItem is created once by an enqueue call and never mutated. The
scheduler pops it, calls it, and drops the reference.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pykairos.core.status import Priority

__all__ = ["WorkItem"]


@dataclass(frozen=True)
class WorkItem:
    """
    A zero-argument callable tagged with its scheduling class.

    Attributes:
        fn: Callable invoked with no arguments; its return value is ignored
        priority: MICRO or MACRO
        label: Optional name used in log lines and error reports

    Example:
        ```python
        item = WorkItem(fn=lambda: print("tick"), priority=Priority.MACRO, label="tick")
        item()
        ```
    """

    fn: Callable[[], Any]
    priority: Priority
    label: str | None = None

    def __post_init__(self) -> None:
        if not callable(self.fn):
            raise TypeError(f"work item must be callable, got {type(self.fn).__name__}")

    def __call__(self) -> None:
        self.fn()

    def describe(self) -> str:
        """Short name for logs: the label, or the callable's qualified name."""
        if self.label is not None:
            return f"{self.priority}:{self.label}"
        name = getattr(self.fn, "__qualname__", None) or repr(self.fn)
        return f"{self.priority}:{name}"

    def __str__(self) -> str:
        return f"WorkItem({self.describe()})"
