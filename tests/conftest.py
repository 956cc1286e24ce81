"""
Pytest configuration and fixtures for pykairos tests.

Provides reusable fixtures for schedulers, executors and hand-driven
thenables.
"""

from collections.abc import Callable
from typing import Any

import pytest
from hypothesis import strategies as st

from pykairos import Executor, Priority, Scheduler, SchedulerItemError


class ManualThenable:
    """Foreign thenable settled by the test, not by the library.

    Subscribers are called synchronously from resolve()/reject(), the way a
    naive third-party future would do it.
    """

    def __init__(self):
        self.subscribers: list[tuple[Callable[[Any], None], Callable[[Any], None]]] = []

    def on_settle(self, on_value, on_error):
        self.subscribers.append((on_value, on_error))

    def resolve(self, value):
        for on_value, _ in self.subscribers:
            on_value(value)

    def reject(self, reason):
        for _, on_error in self.subscribers:
            on_error(reason)


@pytest.fixture
def errors() -> list[SchedulerItemError]:
    """Collected scheduler item failures."""
    return []


@pytest.fixture
def scheduler(errors) -> Scheduler:
    """Scheduler whose item failures are recorded in `errors`."""
    return Scheduler(name="test").with_error_sink(errors.append)


@pytest.fixture
def executor(scheduler) -> Executor:
    return Executor(scheduler)


@pytest.fixture
def log() -> list[str]:
    """Ordered record of observable events."""
    return []


@pytest.fixture
def manual_thenable() -> ManualThenable:
    return ManualThenable()


# Hypothesis strategies for property-based testing


@st.composite
def enqueue_plan_strategy(draw):
    """A list of (priority, tag) pairs to enqueue before run()."""
    size = draw(st.integers(min_value=0, max_value=40))
    priorities = draw(
        st.lists(st.sampled_from([Priority.MICRO, Priority.MACRO]), min_size=size, max_size=size)
    )
    return [(priority, index) for index, priority in enumerate(priorities)]


# Register strategies for easy import
pytest.enqueue_plan_strategy = enqueue_plan_strategy
