"""Proxy factory — generates one interceptor class per contract.

The generated class carries one forwarding method per entry of the
contract's descriptor table.  Each forwarding method normalises its
arguments through the descriptor and hands the call to the chain; the
proxy instance itself only holds the target and the chain.
"""

from __future__ import annotations

import inspect
import logging
import threading
import types
from typing import TYPE_CHECKING, Any

from ..contracts.descriptor import ContractDescriptor, describe_contract
from ..primitives.exceptions import InterceptionConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..contracts.descriptor import MethodDescriptor
    from .chain import InterceptorChain

logger = logging.getLogger("callweave.interception")


class Interceptor:
    """Base class of every generated proxy."""

    _callweave_contract: ContractDescriptor

    def __init__(self, target: Any, chain: InterceptorChain) -> None:
        object.__setattr__(self, "_callweave_target", target)
        object.__setattr__(self, "_callweave_chain", chain)

    def __getattr__(self, name: str) -> Any:
        # Only reached for names missing from the generated class.
        raise AttributeError(
            f"{self._callweave_contract.name} has no member {name!r}"
        )

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} "
            f"target={self.__dict__.get('_callweave_target')!r}>"
        )


def target_of(proxy: Interceptor) -> Any:
    """Return the object *proxy* forwards to."""
    return proxy._callweave_target


def _forwarder(descriptor: MethodDescriptor) -> Callable[..., Any]:
    def forward(self: Interceptor, *args: Any, **kwargs: Any) -> Any:
        arguments = descriptor.bind(args, kwargs)
        return self._callweave_chain.invoke(
            self._callweave_target, descriptor, arguments
        )

    forward.__name__ = forward.__qualname__ = descriptor.name
    if descriptor.signature is not None:
        forward.__signature__ = descriptor.signature  # type: ignore[attr-defined]
    return forward


def _property_forwarder(name: str) -> property:
    def read(self: Interceptor) -> Any:
        return getattr(self._callweave_target, name)

    read.__name__ = name
    return property(read)


# Protocol methods run on the target; every other dunder stays the proxy's own.
_FORWARDED_DUNDERS = frozenset(
    """
    __len__ __iter__ __reversed__ __contains__ __getitem__ __setitem__ __delitem__
    __bool__ __str__ __format__ __bytes__ __int__ __float__ __index__
    __eq__ __ne__ __lt__ __le__ __gt__ __ge__ __hash__ __call__
    __enter__ __exit__ __aenter__ __aexit__ __aiter__ __next__ __anext__ __await__
    """.split()
)


def _dunder_forwarder(name: str) -> Callable[..., Any]:
    def forward(self: Interceptor, *args: Any, **kwargs: Any) -> Any:
        return getattr(self._callweave_target, name)(*args, **kwargs)

    forward.__name__ = forward.__qualname__ = name
    return forward


def _contract_dunders(contract: type) -> list[str]:
    names = []
    for name in sorted(_FORWARDED_DUNDERS):
        for cls in contract.__mro__:
            if cls is object:
                break
            if name in vars(cls):
                if callable(vars(cls)[name]):
                    names.append(name)
                break
    return names


def _contract_properties(contract: type) -> list[str]:
    return [
        name
        for name in dir(contract)
        if not name.startswith("_")
        and isinstance(inspect.getattr_static(contract, name), property)
    ]


def _inherits_contract(contract: Any) -> bool:
    if not isinstance(contract, type):
        return False
    if getattr(contract, "_is_protocol", False):
        return False
    return contract.__module__ != "builtins"


_proxy_classes: dict[Any, type[Interceptor]] = {}
_proxy_lock = threading.Lock()


def proxy_class_for(contract: type | ContractDescriptor) -> type[Interceptor]:
    """Return the (cached) interceptor class generated for *contract*."""
    with _proxy_lock:
        cached = _proxy_classes.get(contract)
        if cached is not None:
            return cached

        table = describe_contract(contract)
        namespace: dict[str, Any] = {
            "__module__": getattr(contract, "__module__", __name__),
            "_callweave_contract": table,
        }
        if isinstance(contract, type):
            for name in _contract_dunders(contract):
                namespace[name] = _dunder_forwarder(name)
            for name in _contract_properties(contract):
                namespace[name] = _property_forwarder(name)
        for descriptor in table:
            namespace[descriptor.name] = _forwarder(descriptor)

        bases: tuple[type, ...] = (Interceptor,)
        if _inherits_contract(contract):
            bases = (Interceptor, contract)  # type: ignore[assignment]

        name = getattr(contract, "__name__", table.name)
        cls = types.new_class(
            f"{name}Interceptor", bases, exec_body=lambda ns: ns.update(namespace)
        )
        # Every contract member is forwarded, so nothing is left abstract.
        cls.__abstractmethods__ = frozenset()
        _proxy_classes[contract] = cls

    logger.debug(
        "Generated proxy class %s (%d methods)", cls.__name__, len(table)
    )
    return cls


def create_interceptor(
    chain: InterceptorChain,
    target: Any,
    contract: type | ContractDescriptor | None = None,
) -> Any:
    """Wrap *target* in a proxy routing every contract call through *chain*.

    *contract* defaults to ``type(target)``.
    """
    if target is None:
        raise InterceptionConfigurationError("target must not be None")
    if chain is None:
        raise InterceptionConfigurationError("chain must not be None")
    cls = proxy_class_for(type(target) if contract is None else contract)
    return cls(target, chain)
