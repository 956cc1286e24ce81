"""
Thenable protocol: the minimal Deferred Resolution contract.

Design: Protocol-based (PEP 544) for structural typing
No inheritance required - any object with an on_settle() method qualifies,
so third-party future types can be yielded to the Executor through a small
adapter.

From Dave Cheney:
"Let functions define the behavior they require" - the Executor only needs
on_settle(), not a full promise API.
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

__all__ = ["Thenable", "is_thenable"]


@runtime_checkable
class Thenable(Protocol):
    """
    Anything that settles exactly once, later, to a value or an error.

    Contract:
        on_settle(on_value, on_error) must eventually invoke exactly one of
        the two callbacks exactly once. Subscribing more than once is allowed;
        each subscription is notified independently.

    Usage:
        class Ticket:
            def on_settle(self, on_value, on_error):
                on_value("ready")

        assert isinstance(Ticket(), Thenable)
    """

    def on_settle(
        self,
        on_value: Callable[[Any], None],
        on_error: Callable[[Any], None],
    ) -> None:
        """
        Subscribe to settlement.

        Args:
            on_value: Called with the value on success
            on_error: Called with the reason on failure
        """
        ...


def is_thenable(value: Any) -> bool:
    """
    Check whether a value satisfies the Thenable contract.

    Classes themselves are never thenables, even when they define on_settle.

    Example:
        ```python
        is_thenable(42)                        # False
        is_thenable(Deferred(scheduler))       # True
        ```
    """
    if isinstance(value, type):
        return False
    return callable(getattr(value, "on_settle", None))
