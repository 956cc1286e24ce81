"""
Settlement outcomes of a Deferred.

This module defines the Settlement state machine for settled results.

**Design Pattern**: State Machine using Union types

From Dave Cheney's principle: "If your function can fail, you must tell the caller."
Settlement makes success and failure explicit values instead of hiding the
failure in a raised exception.

Example:
    ```python
    settlement = deferred.settlement

    match settlement:
        case Fulfilled(value):
            print(f"Done: {value}")
        case Rejected(error):
            print(f"Failed: {error}")
        case None:
            print("Still pending")
    ```
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pykairos.core import YieldedRejection

__all__ = [
    "Fulfilled",
    "Rejected",
    "Settlement",
    "is_fulfilled",
    "is_rejected",
]

R = TypeVar("R")


@dataclass(frozen=True)
class Fulfilled(Generic[R]):
    """
    Settled successfully.

    Attributes:
        value: The resolved value (may be None)
    """

    value: R

    def unwrap(self) -> R:
        """Return the value."""
        return self.value

    def __str__(self) -> str:
        return f"Fulfilled({self.value!r})"


@dataclass(frozen=True)
class Rejected:
    """
    Settled with an error.

    The error is usually an exception, but thenables outside this library
    may reject with any reason.

    Attributes:
        error: The rejection reason
    """

    error: Any

    def unwrap(self) -> Any:
        """Raise the error (wrapping non-exception reasons)."""
        if isinstance(self.error, BaseException):
            raise self.error
        raise YieldedRejection(self.error)

    def __str__(self) -> str:
        if isinstance(self.error, BaseException):
            return f"Rejected({type(self.error).__name__}: {self.error})"
        return f"Rejected({self.error!r})"


# Settlement is a Union type representing a settled Deferred.
#
# Pattern matching (Python 3.10+):
#     match settlement:
#         case Fulfilled(value):
#             handle_value(value)
#         case Rejected(error):
#             handle_error(error)
#
Settlement = Fulfilled[R] | Rejected


def is_fulfilled(settlement: Settlement | None) -> bool:
    """
    Type guard to check if a settlement is Fulfilled.

    Example:
        ```python
        if is_fulfilled(deferred.settlement):
            print(deferred.settlement.value)
        ```
    """
    return isinstance(settlement, Fulfilled)


def is_rejected(settlement: Settlement | None) -> bool:
    """Type guard to check if a settlement is Rejected."""
    return isinstance(settlement, Rejected)
