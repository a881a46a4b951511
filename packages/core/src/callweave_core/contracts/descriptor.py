"""Invocation descriptors — the enumerable method table of a contract.

A contract is described once, at registration time, into a
:class:`ContractDescriptor`: one immutable :class:`MethodDescriptor` per public
method, each carrying a closed :class:`ReturnShape` classification.  Policies
only ever look at that classification; nothing inspects return values to find
out what kind of call is in flight.
"""

from __future__ import annotations

import asyncio
import collections.abc as cabc
import inspect
import logging
import threading
import types
import typing
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from ..ports.stream import IObservable
from ..primitives.exceptions import ContractError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping, Sequence

logger = logging.getLogger("callweave.contracts")

_EMPTY = inspect.Parameter.empty


class ReturnShape(str, Enum):
    """How a contract method hands back its result."""

    PLAIN_VOID = "plain_void"
    PLAIN_VALUE = "plain_value"
    FUTURE_VOID = "future_void"
    FUTURE_VALUE = "future_value"
    PULL_SEQUENCE = "pull_sequence"
    ASYNC_PULL_SEQUENCE = "async_pull_sequence"
    PUSH_STREAM = "push_stream"

    @property
    def is_plain(self) -> bool:
        return self in (ReturnShape.PLAIN_VOID, ReturnShape.PLAIN_VALUE)

    @property
    def is_future(self) -> bool:
        return self in (ReturnShape.FUTURE_VOID, ReturnShape.FUTURE_VALUE)

    @property
    def is_sequence(self) -> bool:
        return self in (
            ReturnShape.PULL_SEQUENCE,
            ReturnShape.ASYNC_PULL_SEQUENCE,
            ReturnShape.PUSH_STREAM,
        )

    @property
    def is_void(self) -> bool:
        return self in (ReturnShape.PLAIN_VOID, ReturnShape.FUTURE_VOID)


@dataclass(frozen=True)
class MethodDescriptor:
    """Immutable description of one contract method.

    ``signature`` is optional; when present it excludes the receiver and is
    used to turn keyword arguments into the ordered argument tuple and back.
    """

    name: str
    parameter_types: tuple[Any, ...] = ()
    return_shape: ReturnShape = ReturnShape.PLAIN_VALUE
    signature: inspect.Signature | None = field(
        default=None, compare=False, repr=False
    )

    def bind(
        self, args: Sequence[Any], kwargs: Mapping[str, Any] | None = None
    ) -> tuple[Any, ...]:
        """Normalise call arguments into a tuple aligned with ``parameter_types``."""
        if self.signature is None:
            if kwargs:
                raise TypeError(f"{self.name}() does not accept keyword arguments")
            return tuple(args)
        bound = self.signature.bind(*args, **(kwargs or {}))
        bound.apply_defaults()
        return tuple(bound.arguments.values())

    def invoke(self, target: Any, args: Sequence[Any]) -> Any:
        """Call this method on *target* with arguments produced by :meth:`bind`."""
        method = getattr(target, self.name)
        if self.signature is None:
            return method(*args)
        positional, keywords = self._split(args)
        return method(*positional, **keywords)

    def _split(self, args: Sequence[Any]) -> tuple[list[Any], dict[str, Any]]:
        assert self.signature is not None
        positional: list[Any] = []
        keywords: dict[str, Any] = {}
        for parameter, value in zip(self.signature.parameters.values(), args):
            if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
                positional.extend(value)
            elif parameter.kind is inspect.Parameter.KEYWORD_ONLY:
                keywords[parameter.name] = value
            elif parameter.kind is inspect.Parameter.VAR_KEYWORD:
                keywords.update(value)
            else:
                positional.append(value)
        return positional, keywords

    def __str__(self) -> str:
        params = ", ".join(_type_name(t) for t in self.parameter_types)
        return f"{self.name}({params}) -> {self.return_shape.value}"


@dataclass(frozen=True, eq=False)
class ContractDescriptor:
    """The descriptor table of one contract, keyed by method name."""

    name: str
    methods: Mapping[str, MethodDescriptor]

    @classmethod
    def of(cls, name: str, *methods: MethodDescriptor) -> ContractDescriptor:
        """Build a table by hand, without introspecting any class."""
        table: dict[str, MethodDescriptor] = {}
        for method in methods:
            if method.name in table:
                raise ContractError(
                    f"Contract {name} declares {method.name}() more than once"
                )
            table[method.name] = method
        return cls(name=name, methods=MappingProxyType(table))

    def get(self, name: str) -> MethodDescriptor | None:
        return self.methods.get(name)

    def __getitem__(self, name: str) -> MethodDescriptor:
        return self.methods[name]

    def __contains__(self, name: object) -> bool:
        return name in self.methods

    def __iter__(self) -> Iterator[MethodDescriptor]:
        return iter(self.methods.values())

    def __len__(self) -> int:
        return len(self.methods)


# ── Classification ───────────────────────────────────────────────

_FUTURE_ORIGINS: tuple[Any, ...] = (
    cabc.Awaitable,
    cabc.Coroutine,
    asyncio.Future,
    asyncio.Task,
)
_ASYNC_PULL_ORIGINS: tuple[Any, ...] = (
    cabc.AsyncIterator,
    cabc.AsyncIterable,
    cabc.AsyncGenerator,
)
_PULL_ORIGINS: tuple[Any, ...] = (cabc.Iterator, cabc.Iterable, cabc.Generator)

_NAMED_SHAPES: dict[str, ReturnShape] = {
    "None": ReturnShape.PLAIN_VOID,
    "Awaitable": ReturnShape.FUTURE_VALUE,
    "Coroutine": ReturnShape.FUTURE_VALUE,
    "Future": ReturnShape.FUTURE_VALUE,
    "Task": ReturnShape.FUTURE_VALUE,
    "AsyncIterator": ReturnShape.ASYNC_PULL_SEQUENCE,
    "AsyncIterable": ReturnShape.ASYNC_PULL_SEQUENCE,
    "AsyncGenerator": ReturnShape.ASYNC_PULL_SEQUENCE,
    "Iterator": ReturnShape.PULL_SEQUENCE,
    "Iterable": ReturnShape.PULL_SEQUENCE,
    "Generator": ReturnShape.PULL_SEQUENCE,
    "IObservable": ReturnShape.PUSH_STREAM,
}


def _is_none(annotation: Any) -> bool:
    return annotation is None or annotation is type(None) or annotation == "None"


def _shape_of_name(annotation: str) -> ReturnShape:
    # Annotations that could not be resolved (TYPE_CHECKING-only imports).
    head = annotation.strip().split("[", 1)[0].rsplit(".", 1)[-1]
    shape = _NAMED_SHAPES.get(head, ReturnShape.PLAIN_VALUE)
    if shape is ReturnShape.FUTURE_VALUE:
        inner = annotation[annotation.find("[") + 1 : -1] if "[" in annotation else ""
        if inner.rsplit(",", 1)[-1].strip() == "None":
            return ReturnShape.FUTURE_VOID
    return shape


def _is_observable_type(origin: Any) -> bool:
    if origin is IObservable:
        return True
    if not isinstance(origin, type):
        return False
    try:
        return issubclass(origin, IObservable)
    except TypeError:
        return False


def shape_of_annotation(annotation: Any) -> ReturnShape:
    """Classify a return annotation into a :class:`ReturnShape`."""
    if annotation is _EMPTY:
        return ReturnShape.PLAIN_VALUE
    if isinstance(annotation, str):
        return _shape_of_name(annotation)
    if _is_none(annotation):
        return ReturnShape.PLAIN_VOID

    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)

    if origin is typing.Union or origin is types.UnionType:
        # Optional[X] keeps the shape of X; a None result is handled per shape.
        candidates = [arg for arg in args if not _is_none(arg)]
        if len(candidates) == 1:
            return shape_of_annotation(candidates[0])
        return ReturnShape.PLAIN_VALUE

    origin = origin or annotation
    if origin in _FUTURE_ORIGINS:
        if args and _is_none(args[-1]):
            return ReturnShape.FUTURE_VOID
        return ReturnShape.FUTURE_VALUE
    if origin in _ASYNC_PULL_ORIGINS:
        return ReturnShape.ASYNC_PULL_SEQUENCE
    if origin in _PULL_ORIGINS:
        return ReturnShape.PULL_SEQUENCE
    if _is_observable_type(origin):
        return ReturnShape.PUSH_STREAM
    return ReturnShape.PLAIN_VALUE


def classify(func: Callable[..., Any], annotation: Any = _EMPTY) -> ReturnShape:
    """Classify a function by its kind first, then by its return annotation."""
    if inspect.isasyncgenfunction(func):
        return ReturnShape.ASYNC_PULL_SEQUENCE
    if inspect.isgeneratorfunction(func):
        return ReturnShape.PULL_SEQUENCE
    if inspect.iscoroutinefunction(func):
        if _is_none(annotation):
            return ReturnShape.FUTURE_VOID
        return ReturnShape.FUTURE_VALUE
    return shape_of_annotation(annotation)


def _resolve_hints(func: Callable[..., Any]) -> dict[str, Any]:
    try:
        return typing.get_type_hints(func)
    except Exception:  # noqa: BLE001
        # Fall back to the raw (possibly string) annotations.
        return dict(getattr(func, "__annotations__", {}))


def describe_method(
    func: Callable[..., Any],
    *,
    name: str | None = None,
    bound: bool = True,
) -> MethodDescriptor:
    """Describe a single function.

    ``bound`` drops the first parameter (the receiver) from the signature.
    """
    hints = _resolve_hints(func)
    signature = inspect.signature(func)
    parameters = list(signature.parameters.values())
    if bound and parameters:
        parameters = parameters[1:]
    signature = signature.replace(parameters=parameters)
    parameter_types = tuple(
        hints.get(parameter.name, parameter.annotation) for parameter in parameters
    )
    return MethodDescriptor(
        name=name or func.__name__,
        parameter_types=parameter_types,
        return_shape=classify(func, hints.get("return", _EMPTY)),
        signature=signature,
    )


def _contract_members(contract: type) -> Iterator[tuple[str, Callable[..., Any], bool]]:
    for name in dir(contract):
        if name.startswith("_"):
            continue
        member = inspect.getattr_static(contract, name)
        if isinstance(member, staticmethod):
            yield name, member.__func__, False
        elif isinstance(member, classmethod):
            yield name, member.__func__, True
        elif inspect.isfunction(member):
            yield name, member, True


_contract_cache: dict[type, ContractDescriptor] = {}
_contract_lock = threading.Lock()


def describe_contract(contract: type | ContractDescriptor) -> ContractDescriptor:
    """Return the (cached) descriptor table of *contract*.

    Every public function, static method and class method becomes a
    :class:`MethodDescriptor`; properties and data attributes are ignored.
    """
    if isinstance(contract, ContractDescriptor):
        return contract
    if not isinstance(contract, type):
        raise ContractError(
            f"A contract must be a class or a ContractDescriptor, got {contract!r}"
        )

    with _contract_lock:
        cached = _contract_cache.get(contract)
        if cached is not None:
            return cached

        methods = [
            describe_method(func, name=name, bound=bound)
            for name, func, bound in _contract_members(contract)
        ]
        descriptor = ContractDescriptor.of(contract.__qualname__, *methods)
        _contract_cache[contract] = descriptor

    logger.debug(
        "Described contract %s (%d methods)", contract.__qualname__, len(descriptor)
    )
    return descriptor


def _type_name(annotation: Any) -> str:
    if annotation is _EMPTY:
        return "Any"
    if isinstance(annotation, type):
        return annotation.__name__
    return str(annotation).replace("typing.", "")
