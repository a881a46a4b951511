"""Primitives: exceptions, invocation outcome."""

from __future__ import annotations

from callweave_core.primitives.exceptions import (
    CallweaveError,
    ContractError,
    InterceptionConfigurationError,
    InvocationShapeError,
    NoOutcomeError,
)
from callweave_core.primitives.outcome import InvocationOutcome

__all__ = [
    "CallweaveError",
    "ContractError",
    "InterceptionConfigurationError",
    "InvocationOutcome",
    "InvocationShapeError",
    "NoOutcomeError",
]
