"""InvocationOutcome — in-flight result-or-failure record for one call."""

from __future__ import annotations

from typing import Any

from .exceptions import NoOutcomeError


class InvocationOutcome:
    """Holds at most one of: nothing yet, a result, or a failure.

    The most recent ``set_*`` call wins: recording a result clears any
    failure and recording a failure clears any result.
    """

    __slots__ = ("_failure", "_has_failure", "_has_result", "_result")

    def __init__(self) -> None:
        self._result: Any = None
        self._failure: BaseException | None = None
        self._has_result = False
        self._has_failure = False

    @property
    def has_result(self) -> bool:
        return self._has_result

    @property
    def has_failure(self) -> bool:
        return self._has_failure

    @property
    def result(self) -> Any:
        return self._result

    @property
    def failure(self) -> BaseException | None:
        return self._failure

    def set_result(self, result: Any) -> None:
        self._result = result
        self._has_result = True
        self._failure = None
        self._has_failure = False

    def set_failure(self, failure: BaseException) -> None:
        if failure is None:
            raise ValueError("failure must not be None")
        self._failure = failure
        self._has_failure = True
        self._result = None
        self._has_result = False

    def unwrap(self) -> Any:
        """Return the recorded result or re-raise the recorded failure."""
        if self._has_failure:
            assert self._failure is not None
            raise self._failure
        if self._has_result:
            return self._result
        raise NoOutcomeError("The invocation completed without a result")

    def __repr__(self) -> str:
        if self._has_failure:
            return f"InvocationOutcome(failure={self._failure!r})"
        if self._has_result:
            return f"InvocationOutcome(result={self._result!r})"
        return "InvocationOutcome()"
