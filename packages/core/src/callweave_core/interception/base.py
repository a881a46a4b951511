"""InterceptionPolicy — shared configuration surface of every policy family."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from typing_extensions import Self

from ..primitives.exceptions import InterceptionConfigurationError
from ._hooks import (
    BEFORE_SHAPES,
    GATE_SHAPES,
    STATEFUL_VALUE_SHAPES,
    adapt,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from ..contracts.descriptor import MethodDescriptor, ReturnShape
    from ._hooks import Adapter

TState = TypeVar("TState")


@dataclass(frozen=True)
class InterceptionPolicy(Generic[TState]):
    """Immutable hook configuration shared by the plain, future and sequence families.

    Every configuration method returns a **new** policy with one hook
    replaced, so a policy can be shared freely once built.  A policy without
    a gate intercepts every call of its shape.
    """

    before_action: Callable[..., Any] | None = None
    error_action: Callable[..., Any] | None = None
    should_intercept_action: Callable[..., Any] | None = None

    _value_shapes: ClassVar[Mapping[int, Adapter]] = STATEFUL_VALUE_SHAPES

    # ── Configuration ────────────────────────────────────────────

    def should_intercept(self, action: Callable[..., bool]) -> Self:
        """Gate: ``() -> bool`` or ``(target, method, args) -> bool``."""
        return replace(
            self, should_intercept_action=adapt(action, "should_intercept", GATE_SHAPES)
        )

    def before(self, action: Callable[..., Any]) -> Self:
        """``() -> state`` or ``(target, method, args) -> state``."""
        return replace(self, before_action=adapt(action, "before", BEFORE_SHAPES))

    def error(self, action: Callable[..., Any]) -> Self:
        return replace(self, error_action=adapt(action, "error", self._value_shapes))

    def with_hooks(self, hooks: Any) -> Self:
        """Copy every hook from a hooks object (see ``callweave_core.ports``)."""
        if hooks is None:
            raise InterceptionConfigurationError("hooks must not be None")
        policy = self
        gate = getattr(hooks, "should_intercept", None)
        if gate is not None:
            policy = policy.should_intercept(gate)
        for slot in self._hook_slots():
            policy = getattr(policy, slot)(getattr(hooks, slot))
        return policy

    def _hook_slots(self) -> tuple[str, ...]:
        return ("before", "after", "error")

    # ── Interception ─────────────────────────────────────────────

    def applies_to(self, shape: ReturnShape) -> bool:
        raise NotImplementedError

    def accepts(self, target: Any, method: MethodDescriptor, args: tuple[Any, ...]) -> bool:
        """True when this policy claims the call: right shape and gate open."""
        if not self.applies_to(method.return_shape):
            return False
        gate = self.should_intercept_action
        return gate is None or bool(gate(target, method, args))

    def run_before(
        self, target: Any, method: MethodDescriptor, args: tuple[Any, ...]
    ) -> Any:
        if self.before_action is None:
            return None
        return self.before_action(target, method, args)

    def try_intercept(
        self, target: Any, method: MethodDescriptor, args: tuple[Any, ...]
    ) -> tuple[bool, Any]:
        raise NotImplementedError
