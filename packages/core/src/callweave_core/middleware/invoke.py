"""Method-invocation middleware.

Runs a contract method at the end of a *void* middleware pipeline.  The
terminal functions never raise for a target failure: they record it on the
context's :class:`~callweave_core.primitives.outcome.InvocationOutcome`, so
middlewares can inspect, replace or clear it on the way out.
``call_invoke`` / ``call_invoke_async`` unwrap the outcome at the end.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..primitives.exceptions import InvocationShapeError
from ..primitives.outcome import InvocationOutcome
from .pipeline import build_pipeline, build_sync_pipeline

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from ..contracts.descriptor import MethodDescriptor
    from ..ports.middleware import IMiddleware, ISyncMiddleware


@dataclass
class InvocationContext:
    """One method call travelling through a void middleware pipeline."""

    method: MethodDescriptor
    arguments: tuple[Any, ...]
    instance: Any = None
    outcome: InvocationOutcome = field(default_factory=InvocationOutcome)


def invoke_sync(context: InvocationContext) -> None:
    """Terminal function: call the method and record its outcome."""
    try:
        result = context.method.invoke(context.instance, context.arguments)
    except Exception as exc:  # noqa: BLE001
        context.outcome.set_failure(exc)
    else:
        context.outcome.set_result(result)


async def invoke_async(context: InvocationContext) -> None:
    """Terminal function: call the method, await it and record its outcome.

    Void futures record ``None``.
    """
    try:
        awaitable = context.method.invoke(context.instance, context.arguments)
        if not inspect.isawaitable(awaitable):
            raise InvocationShapeError(context.method.name, "an awaitable", awaitable)
        result = await awaitable
    except Exception as exc:  # noqa: BLE001
        context.outcome.set_failure(exc)
    else:
        context.outcome.set_result(None if context.method.return_shape.is_void else result)


def invocation_pipeline(
    middlewares: Sequence[ISyncMiddleware],
) -> Callable[[InvocationContext], Any]:
    """Void sync pipeline over *middlewares* ending at :func:`invoke_sync`."""
    return build_sync_pipeline(middlewares, invoke_sync)


def async_invocation_pipeline(
    middlewares: Sequence[IMiddleware],
) -> Callable[[InvocationContext], Awaitable[Any]]:
    """Void async pipeline over *middlewares* ending at :func:`invoke_async`."""
    return build_pipeline(middlewares, invoke_async)


def call_invoke(
    func: Callable[[InvocationContext], Any],
    instance: Any,
    method: MethodDescriptor,
    *args: Any,
) -> Any:
    """Run *func* over a fresh context, then return or raise its outcome."""
    context = InvocationContext(method=method, arguments=tuple(args), instance=instance)
    func(context)
    return context.outcome.unwrap()


async def call_invoke_async(
    func: Callable[[InvocationContext], Awaitable[Any]],
    instance: Any,
    method: MethodDescriptor,
    *args: Any,
) -> Any:
    """Async form of :func:`call_invoke`."""
    context = InvocationContext(method=method, arguments=tuple(args), instance=instance)
    await func(context)
    return context.outcome.unwrap()
