"""Synchronous middleware algebra.

A *middleware* is ``(context, next) -> result``; a *terminal function* is
``(context) -> result``.  Everything here builds new callables out of those
two shapes and never catches what a stage raises.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from ..utils import positional_arity


MiddlewareFunc = Callable[[Any], Any]
Middleware = Callable[[Any, MiddlewareFunc], Any]


def constant_func(result: Any) -> MiddlewareFunc:
    """Terminal function that ignores its input."""
    return lambda _context: result


def constant(result: Any) -> Middleware:
    """Middleware that ignores its input and never calls ``next``."""
    return lambda _context, _next: result


def combine(first: Callable[..., Any], second: Callable[..., Any]) -> MiddlewareFunc:
    """Glue a middleware and a terminal function into a new terminal function.

    Both argument orders are accepted: ``combine(func, middleware)`` and
    ``combine(middleware, func)`` are the same function.  The order is told
    apart by arity, the middleware being the callable that takes ``next``.
    """
    middleware, func = _order(first, second)
    return lambda context: middleware(context, func)


def compose(
    *middlewares: Middleware | Iterable[Middleware],
) -> Middleware:
    """Chain middlewares into one.

    The first middleware is the **outermost**: its "before" code runs first
    and its "after" code runs last.
    """
    stages = _flatten(middlewares)

    def _composed(context: Any, next_handler: MiddlewareFunc) -> Any:
        def _step(index: int, ctx: Any) -> Any:
            if index >= len(stages):
                return next_handler(ctx)
            return stages[index](ctx, lambda c: _step(index + 1, c))

        return _step(0, context)

    return _composed


def switch(selector: Callable[[Any], Middleware]) -> Middleware:
    """Pick the middleware to run from the input, for this call only."""

    def _switched(context: Any, next_handler: MiddlewareFunc) -> Any:
        return selector(context)(context, next_handler)

    return _switched


def choose(
    choices: Iterable[Middleware],
    was_chosen: Callable[[Any, Any], bool],
    default: Middleware,
) -> Middleware:
    """Try *choices* in order and keep the first result ``was_chosen`` accepts.

    ``was_chosen(result, context)`` runs after each choice; when no choice is
    accepted, *default* runs with the original continuation.
    """
    options = tuple(choices)

    def _chosen(context: Any, next_handler: MiddlewareFunc) -> Any:
        for middleware in options:
            result = middleware(context, next_handler)
            if was_chosen(result, context):
                return result
        return default(context, next_handler)

    return _chosen


# ── Helpers shared with the async and void flavours ──────────────


def _flatten(middlewares: tuple[Any, ...]) -> tuple[Any, ...]:
    if len(middlewares) == 1 and not callable(middlewares[0]):
        return tuple(middlewares[0])
    return tuple(middlewares)


def _order(first: Callable[..., Any], second: Callable[..., Any]) -> tuple[Any, Any]:
    if positional_arity(first) >= 2 > positional_arity(second):
        return first, second
    return second, first
