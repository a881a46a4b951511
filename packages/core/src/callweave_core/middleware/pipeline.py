"""build_pipeline — run a list of middlewares around a handler."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from . import aio, sync

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from ..ports.middleware import IMiddleware, ISyncMiddleware


def build_pipeline(
    middlewares: Sequence[IMiddleware],
    handler_fn: Callable[[Any], Awaitable[Any]],
) -> Callable[[Any], Awaitable[Any]]:
    """Build a LIFO async middleware chain ending at *handler_fn*.

    The first middleware in the list is the **outermost** wrapper.
    Each middleware must implement: ``async def __call__(message, next_handler)``.
    Equivalent to ``aio.combine(aio.compose(middlewares), handler_fn)``; an
    empty list returns *handler_fn* itself.
    """
    if not middlewares:
        return handler_fn
    composed = aio.compose(tuple(middlewares))

    async def _pipeline(message: Any) -> Any:
        return await composed(message, handler_fn)

    return _pipeline


def build_sync_pipeline(
    middlewares: Sequence[ISyncMiddleware],
    handler_fn: Callable[[Any], Any],
) -> Callable[[Any], Any]:
    """Synchronous counterpart of :func:`build_pipeline`."""
    if not middlewares:
        return handler_fn
    composed = sync.compose(tuple(middlewares))

    def _pipeline(message: Any) -> Any:
        return composed(message, handler_fn)

    return _pipeline
