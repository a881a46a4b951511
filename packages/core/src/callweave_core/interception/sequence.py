"""Sequence-call interception policies (pull, async pull and push streams)."""

from __future__ import annotations

from dataclasses import dataclass, replace
from functools import partial
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from typing_extensions import Self

from ..contracts.descriptor import ReturnShape
from ..primitives.exceptions import InvocationShapeError
from ._hooks import COMPLETE_SHAPES, STATEFUL_COMPLETE_SHAPES, VALUE_SHAPES, adapt
from .base import InterceptionPolicy
from .streams import (
    InterceptedObservable,
    SequenceHooks,
    _noop,
    intercept_async_pull,
    intercept_pull,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from ..contracts.descriptor import MethodDescriptor
    from ._hooks import Adapter

TState = TypeVar("TState")


@dataclass(frozen=True)
class StatefulSequencePolicy(InterceptionPolicy[TState]):
    """Observes sequences element by element.

    ``before`` runs when the proxy method is called.  The returned sequence
    is wrapped lazily: ``next`` fires for every element as the consumer
    pulls it (or the source pushes it), then exactly one of ``complete`` /
    ``error`` closes the call.  Closing a pull sequence early fires neither.
    """

    next_action: Callable[..., Any] | None = None
    complete_action: Callable[..., Any] | None = None

    _complete_shapes: ClassVar[Mapping[int, Adapter]] = STATEFUL_COMPLETE_SHAPES

    DEFAULT: ClassVar[StatefulSequencePolicy[Any]]

    def next(self, action: Callable[..., Any]) -> Self:
        """``(state)``, ``(state, element)`` or ``(state, target, method, args, element)``."""
        return replace(self, next_action=adapt(action, "next", self._value_shapes))

    def complete(self, action: Callable[..., Any]) -> Self:
        """``(state)`` or ``(state, target, method, args)``."""
        return replace(
            self, complete_action=adapt(action, "complete", self._complete_shapes)
        )

    def _hook_slots(self) -> tuple[str, ...]:
        return ("before", "next", "complete", "error")

    def applies_to(self, shape: ReturnShape) -> bool:
        return shape.is_sequence

    def try_intercept(
        self, target: Any, method: MethodDescriptor, args: tuple[Any, ...]
    ) -> tuple[bool, Any]:
        if not self.accepts(target, method, args):
            return False, None

        state = self.run_before(target, method, args)
        hooks = self._bind_hooks(state, target, method, args)
        try:
            source = method.invoke(target, args)
            wrapped = None if source is None else self._wrap(method, source, hooks)
        except Exception as exc:
            hooks.on_error(exc)
            raise
        if wrapped is None:
            hooks.on_complete()
        return True, wrapped

    def _bind_hooks(
        self,
        state: Any,
        target: Any,
        method: MethodDescriptor,
        args: tuple[Any, ...],
    ) -> SequenceHooks:
        def bound(action: Callable[..., Any] | None) -> Callable[..., Any]:
            if action is None:
                return _noop
            return partial(action, state, target, method, args)

        return SequenceHooks(
            on_next=bound(self.next_action),
            on_complete=bound(self.complete_action),
            on_error=bound(self.error_action),
        )

    @staticmethod
    def _wrap(method: MethodDescriptor, source: Any, hooks: SequenceHooks) -> Any:
        shape = method.return_shape
        if shape is ReturnShape.PULL_SEQUENCE:
            if not hasattr(source, "__iter__"):
                raise InvocationShapeError(method.name, "an iterable", source)
            return intercept_pull(source, hooks)
        if shape is ReturnShape.ASYNC_PULL_SEQUENCE:
            if not hasattr(source, "__aiter__"):
                raise InvocationShapeError(method.name, "an async iterable", source)
            return intercept_async_pull(source, hooks)
        if not callable(getattr(source, "subscribe", None)):
            raise InvocationShapeError(method.name, "an observable", source)
        return InterceptedObservable(source, hooks)


@dataclass(frozen=True)
class SequencePolicy(StatefulSequencePolicy[None]):
    """Stateless sequence policy.

    ``next`` takes ``()``, ``(element)`` or ``(target, method, args, element)``;
    ``complete`` takes ``()`` or ``(target, method, args)``.
    """

    _value_shapes = VALUE_SHAPES
    _complete_shapes = COMPLETE_SHAPES

    DEFAULT: ClassVar[SequencePolicy]


StatefulSequencePolicy.DEFAULT = StatefulSequencePolicy()
SequencePolicy.DEFAULT = SequencePolicy()
