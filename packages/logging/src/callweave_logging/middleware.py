"""LoggingMiddleware — logs every message passing through an async pipeline."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from callweave_core import IMiddleware

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger("callweave.middleware")


class LoggingMiddleware(IMiddleware):
    """Logs message handling — name, duration, failure with traceback.

    Invocation contexts carry their failure on the outcome instead of
    raising it; such a recorded failure is logged as a failure too.

    The message name is the ``name`` of its method when the message is an
    :class:`~callweave_core.InvocationContext`, otherwise its type name.
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._logger = log or logger

    async def __call__(
        self,
        message: Any,
        next_handler: Callable[[Any], Awaitable[Any]],
    ) -> Any:
        """Log the message handling."""
        msg_name = _message_name(message)
        self._logger.info("Handling %s", msg_name)
        start = time.perf_counter()
        try:
            result = await next_handler(message)
            elapsed = (time.perf_counter() - start) * 1000
            failure = _recorded_failure(message)
            if failure is not None:
                self._logger.error(
                    "%s failed after %.2fms", msg_name, elapsed, exc_info=failure
                )
            else:
                self._logger.info("%s completed in %.2fms", msg_name, elapsed)
            return result
        except Exception:
            elapsed = (time.perf_counter() - start) * 1000
            self._logger.exception("%s failed after %.2fms", msg_name, elapsed)
            raise


def _message_name(message: Any) -> str:
    method = getattr(message, "method", None)
    name = getattr(method, "name", None)
    if isinstance(name, str):
        return name
    return type(message).__name__


def _recorded_failure(message: Any) -> BaseException | None:
    outcome = getattr(message, "outcome", None)
    if outcome is None or not getattr(outcome, "has_failure", False):
        return None
    return outcome.failure
