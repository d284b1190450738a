#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Result types for explicit success/failure of a single execution step.

A step either produces an analysis result or fails with a human-readable
message. Wrapping both in a Result lets the execution engine record the
outcome without letting the exception escape the run.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar


T = TypeVar('T')

UNKNOWN_ERROR = "Unknown error"


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of one (node, symbol) step.

    Attributes:
        success: Whether the step succeeded
        value: The analysis result (present if success=True)
        error: Error message (present if success=False)

    Example:
        >>> outcome = Result.capture(provider.resolve, "valuation-summary", "TCS")
        >>> if outcome:
        ...     render(outcome.value)
        ... else:
        ...     show_error(outcome.error)
    """
    success: bool
    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, value: T) -> 'Result[T]':
        """Create a successful result."""
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: str) -> 'Result[T]':
        """Create a failed result."""
        return cls(success=False, error=error or UNKNOWN_ERROR)

    @classmethod
    def from_exception(cls, exc: BaseException) -> 'Result[T]':
        """
        Create a failed result from an exception.

        The message is str(exc); exceptions with no message fall back to
        "Unknown error".
        """
        message = str(exc).strip()
        return cls.fail(message or UNKNOWN_ERROR)

    @classmethod
    def capture(cls, func: Callable[..., T], *args: Any, **kwargs: Any) -> 'Result[T]':
        """
        Call func and wrap its return value or raised exception.

        Only Exception subclasses are captured; KeyboardInterrupt and
        SystemExit propagate.
        """
        try:
            return cls.ok(func(*args, **kwargs))
        except Exception as e:
            return cls.from_exception(e)

    def is_ok(self) -> bool:
        """Check if the result is successful."""
        return self.success

    def is_error(self) -> bool:
        """Check if the result is a failure."""
        return not self.success

    def unwrap(self) -> T:
        """
        Get the value, raising if the result is a failure.

        Raises:
            ValueError: If the result is a failure
        """
        if not self.success:
            raise ValueError(f"Cannot unwrap failed result: {self.error}")
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get the value, or a default if the result is a failure."""
        return self.value if self.success else default

    def __bool__(self) -> bool:
        """Allow using Result in boolean context."""
        return self.success
