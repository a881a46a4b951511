"""LoggingInterceptorState — correlation state of one logged call."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable


@dataclass(frozen=True)
class LoggingInterceptorState:
    """Produced by ``before`` and handed to the other hooks of the same call."""

    logger: logging.Logger
    type_name: str
    parameters: str | None = None
    get_result: Callable[[Any], str | None] = field(default=lambda _result: None)
    started: float = field(default_factory=time.perf_counter)

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started) * 1000
