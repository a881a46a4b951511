"""Future-call interception policies (coroutines, awaitables, asyncio futures).

Both future flavours are normalised to one awaitable before hooks attach:

* single-use awaitables (coroutines and other ``__await__`` objects) come
  back as a coroutine;
* re-usable ``asyncio.Future`` / ``asyncio.Task`` objects come back as an
  ``asyncio.Task`` scheduled on the future's own loop,
  unless ``before`` returned an awaitable: the target is then called only
  once that state is available, so the call always comes back as a
  coroutine.

Every hook may be synchronous or return an awaitable.
"""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from typing_extensions import Self

from ..primitives.exceptions import InvocationShapeError
from ..utils import fire_and_forget, maybe_await
from ._hooks import VALUE_SHAPES, adapt
from .base import InterceptionPolicy

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from ..contracts.descriptor import MethodDescriptor, ReturnShape

TState = TypeVar("TState")


@dataclass(frozen=True)
class StatefulAsyncPolicy(InterceptionPolicy[TState]):
    """Wraps future-returning calls with ``before`` / ``after`` / ``error`` hooks.

    The gate and ``before`` run synchronously when the proxy method is
    called, and so does the target call that produces the awaitable.  A
    failure at that point is reported to ``error`` and raised immediately;
    a failure of the awaitable itself is reported when it completes and is
    raised to whoever awaits the result.

    When ``before`` returns an awaitable, the target call is deferred until
    that state is available and the proxy returns a coroutine, whatever
    kind of future the target produces.  ``asyncio.CancelledError`` is
    never reported to ``error``.
    """

    after_action: Callable[..., Any] | None = None

    DEFAULT: ClassVar[StatefulAsyncPolicy[Any]]

    def after(self, action: Callable[..., Any]) -> Self:
        """``(state)``, ``(state, result)`` or ``(state, target, method, args, result)``."""
        return replace(self, after_action=adapt(action, "after", self._value_shapes))

    def applies_to(self, shape: ReturnShape) -> bool:
        return shape.is_future

    def try_intercept(
        self, target: Any, method: MethodDescriptor, args: tuple[Any, ...]
    ) -> tuple[bool, Any]:
        if not self.accepts(target, method, args):
            return False, None

        state = self.run_before(target, method, args)
        if inspect.isawaitable(state):
            return True, self._intercept_deferred(state, target, method, args)

        try:
            awaitable = self._start(target, method, args)
        except Exception as exc:
            if self.error_action is not None:
                reported = self.error_action(state, target, method, args, exc)
                if inspect.isawaitable(reported):
                    fire_and_forget(reported)
            raise

        observed = self._observe(state, target, method, args, awaitable)
        if isinstance(awaitable, asyncio.Future):
            return True, awaitable.get_loop().create_task(observed)
        return True, observed

    @staticmethod
    def _start(
        target: Any, method: MethodDescriptor, args: tuple[Any, ...]
    ) -> Awaitable[Any]:
        awaitable = method.invoke(target, args)
        if not inspect.isawaitable(awaitable):
            raise InvocationShapeError(method.name, "an awaitable", awaitable)
        return awaitable

    async def _intercept_deferred(
        self,
        pending_state: Awaitable[Any],
        target: Any,
        method: MethodDescriptor,
        args: tuple[Any, ...],
    ) -> Any:
        state = await pending_state
        try:
            awaitable = self._start(target, method, args)
        except Exception as exc:
            if self.error_action is not None:
                await maybe_await(self.error_action(state, target, method, args, exc))
            raise
        return await self._observe(state, target, method, args, awaitable)

    async def _observe(
        self,
        state: Any,
        target: Any,
        method: MethodDescriptor,
        args: tuple[Any, ...],
        awaitable: Awaitable[Any],
    ) -> Any:
        try:
            result = await awaitable
            if self.after_action is not None:
                value = None if method.return_shape.is_void else result
                await maybe_await(self.after_action(state, target, method, args, value))
        except Exception as exc:
            if self.error_action is not None:
                await maybe_await(self.error_action(state, target, method, args, exc))
            raise
        return result


@dataclass(frozen=True)
class AsyncPolicy(StatefulAsyncPolicy[None]):
    """Stateless future-call policy; hooks never see a state."""

    _value_shapes = VALUE_SHAPES

    DEFAULT: ClassVar[AsyncPolicy]


StatefulAsyncPolicy.DEFAULT = StatefulAsyncPolicy()
AsyncPolicy.DEFAULT = AsyncPolicy()
