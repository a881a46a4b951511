"""Asynchronous middleware algebra.

Same algebra as :mod:`callweave_core.middleware.sync` with awaitable stages:
a *middleware* is ``async (context, next) -> result`` and a *terminal
function* is ``async (context) -> result``.

Cancellation is the asyncio task-cancellation signal.  It travels through
every ``await`` below untouched; nothing here catches ``CancelledError``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from ..utils import maybe_await
from .sync import _flatten, _order

AsyncMiddlewareFunc = Callable[[Any], Awaitable[Any]]
AsyncMiddleware = Callable[[Any, AsyncMiddlewareFunc], Awaitable[Any]]


def constant_func(result: Any) -> AsyncMiddlewareFunc:
    async def _constant(_context: Any) -> Any:
        return result

    return _constant


def constant(result: Any) -> AsyncMiddleware:
    async def _constant(_context: Any, _next: AsyncMiddlewareFunc) -> Any:
        return result

    return _constant


def combine(
    first: Callable[..., Awaitable[Any]], second: Callable[..., Awaitable[Any]]
) -> AsyncMiddlewareFunc:
    """Glue an async middleware and an async terminal function, in either order."""
    middleware, func = _order(first, second)

    async def _combined(context: Any) -> Any:
        return await middleware(context, func)

    return _combined


def compose(
    *middlewares: AsyncMiddleware | Iterable[AsyncMiddleware],
) -> AsyncMiddleware:
    """Chain async middlewares into one; the first is the outermost."""
    stages = _flatten(middlewares)

    async def _composed(context: Any, next_handler: AsyncMiddlewareFunc) -> Any:
        async def _step(index: int, ctx: Any) -> Any:
            if index >= len(stages):
                return await next_handler(ctx)
            return await stages[index](ctx, lambda c: _step(index + 1, c))

        return await _step(0, context)

    return _composed


def switch(
    selector: Callable[[Any], AsyncMiddleware | Awaitable[AsyncMiddleware]],
) -> AsyncMiddleware:
    """Pick the middleware from the input; *selector* may be sync or async."""

    async def _switched(context: Any, next_handler: AsyncMiddlewareFunc) -> Any:
        middleware = await maybe_await(selector(context))
        return await middleware(context, next_handler)

    return _switched


def choose(
    choices: Iterable[AsyncMiddleware],
    was_chosen: Callable[[Any, Any], bool | Awaitable[bool]],
    default: AsyncMiddleware,
) -> AsyncMiddleware:
    """Try *choices* in order and keep the first accepted result.

    ``was_chosen(result, context)`` may return a bool or an awaitable bool.
    """
    options = tuple(choices)

    async def _chosen(context: Any, next_handler: AsyncMiddlewareFunc) -> Any:
        for middleware in options:
            result = await middleware(context, next_handler)
            if await maybe_await(was_chosen(result, context)):
                return result
        return await default(context, next_handler)

    return _chosen
