"""Plain-call interception policies (synchronous value / no-value calls)."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from typing_extensions import Self

from ._hooks import VALUE_SHAPES, adapt
from .base import InterceptionPolicy

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..contracts.descriptor import MethodDescriptor, ReturnShape

TState = TypeVar("TState")


@dataclass(frozen=True)
class StatefulSyncPolicy(InterceptionPolicy[TState]):
    """Wraps plain calls with ``before`` / ``after`` / ``error`` hooks.

    ``before`` produces the correlation state handed to ``after`` or
    ``error`` of the same call.  A failure raised by the target or by
    ``after`` is reported to ``error`` and then re-raised unchanged.

    Usage::

        policy = (
            StatefulSyncPolicy[float]()
            .before(lambda: time.perf_counter())
            .after(lambda started, result: log(result, time.perf_counter() - started))
            .error(lambda started, exc: log_failure(exc))
        )
    """

    after_action: Callable[..., Any] | None = None

    DEFAULT: ClassVar[StatefulSyncPolicy[Any]]

    def after(self, action: Callable[..., Any]) -> Self:
        """``(state)``, ``(state, result)`` or ``(state, target, method, args, result)``."""
        return replace(self, after_action=adapt(action, "after", self._value_shapes))

    def applies_to(self, shape: ReturnShape) -> bool:
        return shape.is_plain

    def try_intercept(
        self, target: Any, method: MethodDescriptor, args: tuple[Any, ...]
    ) -> tuple[bool, Any]:
        if not self.accepts(target, method, args):
            return False, None

        state = self.run_before(target, method, args)
        try:
            result = method.invoke(target, args)
            if self.after_action is not None:
                self.after_action(state, target, method, args, result)
        except Exception as exc:
            if self.error_action is not None:
                self.error_action(state, target, method, args, exc)
            raise
        return True, result


@dataclass(frozen=True)
class SyncPolicy(StatefulSyncPolicy[None]):
    """Stateless plain-call policy.

    Hooks never see a state: ``after`` takes ``()``, ``(result)`` or
    ``(target, method, args, result)``; ``error`` takes ``()``,
    ``(exception)`` or ``(target, method, args, exception)``.
    """

    _value_shapes = VALUE_SHAPES

    DEFAULT: ClassVar[SyncPolicy]


StatefulSyncPolicy.DEFAULT = StatefulSyncPolicy()
SyncPolicy.DEFAULT = SyncPolicy()
