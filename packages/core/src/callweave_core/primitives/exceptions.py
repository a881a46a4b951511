"""Exceptions for callweave-core."""

from __future__ import annotations


class CallweaveError(Exception):
    """Root exception for the entire callweave toolkit."""


class InterceptionConfigurationError(CallweaveError, ValueError):
    """Raised when a chain, policy or builder is configured with invalid input.

    Configuration errors surface immediately, at configuration time, never
    while a call is in flight.
    """


class ContractError(CallweaveError, TypeError):
    """Raised when a contract cannot be turned into a descriptor table."""


class InvocationShapeError(CallweaveError, TypeError):
    """Raised when a target returns a value that does not match its declared shape.

    Usage: the future-call policy raises this when a method declared as
    returning an awaitable hands back something that cannot be awaited.
    """

    def __init__(self, method_name: str, expected: str, actual: object) -> None:
        self.method_name = method_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{method_name}() was expected to return {expected}, "
            f"got {type(actual).__name__}"
        )


class NoOutcomeError(CallweaveError):
    """Raised when an invocation outcome is read before anything was recorded."""
