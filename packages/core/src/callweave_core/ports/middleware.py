"""IMiddleware / ISyncMiddleware — LIFO middleware protocols."""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Protocol,
    runtime_checkable,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@runtime_checkable
class IMiddleware(Protocol):
    """Protocol for asynchronous middleware.

    Middleware wraps the rest of the pipeline and can inspect/modify the
    input, short-circuit execution, or perform side-effects.
    The chain is applied in **LIFO** order (first composed = outermost).
    """

    async def __call__(
        self,
        message: Any,
        next_handler: Callable[[Any], Awaitable[Any]],
    ) -> Any:
        """Execute middleware logic and call next_handler to proceed.

        Parameters
        ----------
        message:
            The pipeline input.
        next_handler:
            Async callable representing the rest of the pipeline.

        Returns
        -------
        The result from the rest of the pipeline (or a replacement).
        """
        ...


@runtime_checkable
class ISyncMiddleware(Protocol):
    """Synchronous counterpart of :class:`IMiddleware`."""

    def __call__(
        self,
        message: Any,
        next_handler: Callable[[Any], Any],
    ) -> Any: ...
