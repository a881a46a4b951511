"""No-value ("void") middleware forms.

Void middlewares return nothing: whatever they produce is recorded on the
context (see :class:`~callweave_core.middleware.invoke.InvocationContext`).
``combine``, ``compose`` and ``switch`` are the value forms unchanged; only
``choose`` differs, because its predicate can only look at the context.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from ..utils import maybe_await
from .aio import AsyncMiddleware, AsyncMiddlewareFunc
from .aio import combine as acombine
from .aio import compose as acompose
from .aio import switch as aswitch
from .sync import Middleware, MiddlewareFunc, combine, compose, switch

__all__ = [
    "acombine",
    "acompose",
    "achoose",
    "aswitch",
    "choose",
    "combine",
    "compose",
    "switch",
]


def choose(
    choices: Iterable[Middleware],
    was_chosen: Callable[[Any], bool],
    default: Middleware,
) -> Middleware:
    """Run *choices* in order until ``was_chosen(context)`` holds, else *default*."""
    options = tuple(choices)

    def _chosen(context: Any, next_handler: MiddlewareFunc) -> None:
        for middleware in options:
            middleware(context, next_handler)
            if was_chosen(context):
                return
        default(context, next_handler)

    return _chosen


def achoose(
    choices: Iterable[AsyncMiddleware],
    was_chosen: Callable[[Any], bool | Awaitable[bool]],
    default: AsyncMiddleware,
) -> AsyncMiddleware:
    """Async form of :func:`choose`; the predicate may be sync or async."""
    options = tuple(choices)

    async def _chosen(context: Any, next_handler: AsyncMiddlewareFunc) -> None:
        for middleware in options:
            await middleware(context, next_handler)
            if await maybe_await(was_chosen(context)):
                return
        await default(context, next_handler)

    return _chosen
