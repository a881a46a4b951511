"""Common utility functions and helpers."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any

logger = logging.getLogger("callweave.utils")

VARIADIC_ARITY = 255


def positional_arity(func: Any) -> int:
    """Number of positional arguments *func* accepts.

    Callables taking ``*args`` (mocks included) report ``VARIADIC_ARITY``;
    callables whose signature cannot be read report ``-1``.
    """
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return -1
    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return VARIADIC_ARITY
        if parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return count


async def maybe_await(value: Any) -> Any:
    """Await *value* when it is awaitable, otherwise return it as is."""
    if inspect.isawaitable(value):
        return await value
    return value


# Strong references to running fire-and-forget tasks; the loop keeps only weak ones.
_background_tasks: set[asyncio.Future[Any]] = set()


def _on_fire_and_forget_done(task: asyncio.Task[Any]) -> None:
    """Callback for fire-and-forget tasks.

    Logs exceptions instead of swallowing them.
    """
    _background_tasks.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("Fire-and-forget hook task failed: %s", exc, exc_info=exc)


def fire_and_forget(awaitable: Any) -> None:
    """Schedule *awaitable* on the running loop without waiting for it.

    Without a running loop a coroutine is closed (it can never run) and a
    warning is logged.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        logger.warning("No running event loop, dropped hook awaitable %r", awaitable)
        return

    task = asyncio.ensure_future(awaitable, loop=loop)
    _background_tasks.add(task)
    task.add_done_callback(_on_fire_and_forget_done)
