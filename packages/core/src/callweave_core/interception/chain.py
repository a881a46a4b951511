"""InterceptorChain — ordered, immutable list of interception policies."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, ClassVar

from ..primitives.exceptions import InterceptionConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..contracts.descriptor import ContractDescriptor, MethodDescriptor
    from ..ports.interception import IInterceptionPolicy

logger = logging.getLogger("callweave.interception")


def _checked(policy: IInterceptionPolicy | None) -> IInterceptionPolicy:
    if policy is None:
        raise InterceptionConfigurationError("An interception policy must not be None")
    return policy


@dataclass(frozen=True)
class InterceptorChain:
    """Policies consulted in order; the first one that accepts owns the call.

    A call no policy accepts goes straight to the target.  A chain is itself
    a policy that always accepts, so chains can be nested.
    """

    display_name: str = "Default"
    policies: tuple[IInterceptionPolicy, ...] = ()

    DEFAULT: ClassVar[InterceptorChain]

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "policies", tuple(_checked(p) for p in self.policies)
        )
        logger.debug(
            "Interceptor chain %s configured with %d policies",
            self.display_name,
            len(self.policies),
        )

    def prepend(self, policy: IInterceptionPolicy) -> InterceptorChain:
        return replace(self, policies=(_checked(policy), *self.policies))

    def add(self, policy: IInterceptionPolicy) -> InterceptorChain:
        return replace(self, policies=(*self.policies, _checked(policy)))

    def add_range(self, policies: Iterable[IInterceptionPolicy]) -> InterceptorChain:
        if policies is None:
            raise InterceptionConfigurationError("policies must not be None")
        return replace(
            self, policies=(*self.policies, *(_checked(p) for p in policies))
        )

    def named(self, display_name: str) -> InterceptorChain:
        return replace(self, display_name=display_name)

    def invoke(self, target: Any, method: MethodDescriptor, args: tuple[Any, ...]) -> Any:
        """Route one call through the first accepting policy, or to the target."""
        for policy in self.policies:
            handled, result = policy.try_intercept(target, method, args)
            if handled:
                return result
        return method.invoke(target, args)

    def try_intercept(
        self, target: Any, method: MethodDescriptor, args: tuple[Any, ...]
    ) -> tuple[bool, Any]:
        return True, self.invoke(target, method, args)

    def create_interceptor(
        self, target: Any, contract: type | ContractDescriptor | None = None
    ) -> Any:
        """Shortcut for :func:`~callweave_core.interception.proxy.create_interceptor`."""
        from .proxy import create_interceptor

        return create_interceptor(self, target, contract)

    def __str__(self) -> str:
        return f"InterceptorChain({self.display_name}, {len(self.policies)} policies)"


InterceptorChain.DEFAULT = InterceptorChain()
