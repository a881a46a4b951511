"""Interception policy and hook protocols."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from ..contracts.descriptor import MethodDescriptor

TState = TypeVar("TState")


@runtime_checkable
class IInterceptionPolicy(Protocol):
    """A policy that may claim and fully handle a call.

    ``try_intercept`` returns ``(False, None)`` to decline, so the next policy
    (or the raw target) gets the call, or ``(True, result)`` once it has
    invoked the target itself and applied its hooks.
    """

    def try_intercept(
        self,
        target: Any,
        method: MethodDescriptor,
        args: tuple[Any, ...],
    ) -> tuple[bool, Any]: ...


# ── Hooks objects accepted by ``with_hooks`` ─────────────────────
#
# ``should_intercept`` is optional on every hooks object; when missing the
# policy intercepts every call of its shape.


class ISyncInterceptionHooks(Protocol):
    def before(self, target: Any, method: MethodDescriptor, args: tuple[Any, ...]) -> None: ...

    def after(
        self, target: Any, method: MethodDescriptor, args: tuple[Any, ...], result: Any
    ) -> None: ...

    def error(
        self,
        target: Any,
        method: MethodDescriptor,
        args: tuple[Any, ...],
        exception: Exception,
    ) -> None: ...


class IStatefulSyncInterceptionHooks(Protocol, Generic[TState]):
    def before(
        self, target: Any, method: MethodDescriptor, args: tuple[Any, ...]
    ) -> TState: ...

    def after(
        self,
        state: TState,
        target: Any,
        method: MethodDescriptor,
        args: tuple[Any, ...],
        result: Any,
    ) -> None: ...

    def error(
        self,
        state: TState,
        target: Any,
        method: MethodDescriptor,
        args: tuple[Any, ...],
        exception: Exception,
    ) -> None: ...


class IAsyncInterceptionHooks(Protocol):
    """Hooks for future-returning calls; every method may return an awaitable."""

    def before(
        self, target: Any, method: MethodDescriptor, args: tuple[Any, ...]
    ) -> Awaitable[None] | None: ...

    def after(
        self, target: Any, method: MethodDescriptor, args: tuple[Any, ...], result: Any
    ) -> Awaitable[None] | None: ...

    def error(
        self,
        target: Any,
        method: MethodDescriptor,
        args: tuple[Any, ...],
        exception: Exception,
    ) -> Awaitable[None] | None: ...


class IStatefulAsyncInterceptionHooks(Protocol, Generic[TState]):
    def before(
        self, target: Any, method: MethodDescriptor, args: tuple[Any, ...]
    ) -> Awaitable[TState] | TState: ...

    def after(
        self,
        state: TState,
        target: Any,
        method: MethodDescriptor,
        args: tuple[Any, ...],
        result: Any,
    ) -> Awaitable[None] | None: ...

    def error(
        self,
        state: TState,
        target: Any,
        method: MethodDescriptor,
        args: tuple[Any, ...],
        exception: Exception,
    ) -> Awaitable[None] | None: ...


class ISequenceInterceptionHooks(Protocol):
    def before(self, target: Any, method: MethodDescriptor, args: tuple[Any, ...]) -> None: ...

    def next(
        self, target: Any, method: MethodDescriptor, args: tuple[Any, ...], value: Any
    ) -> None: ...

    def complete(
        self, target: Any, method: MethodDescriptor, args: tuple[Any, ...]
    ) -> None: ...

    def error(
        self,
        target: Any,
        method: MethodDescriptor,
        args: tuple[Any, ...],
        exception: Exception,
    ) -> None: ...


class IStatefulSequenceInterceptionHooks(Protocol, Generic[TState]):
    def before(
        self, target: Any, method: MethodDescriptor, args: tuple[Any, ...]
    ) -> TState: ...

    def next(
        self,
        state: TState,
        target: Any,
        method: MethodDescriptor,
        args: tuple[Any, ...],
        value: Any,
    ) -> None: ...

    def complete(
        self,
        state: TState,
        target: Any,
        method: MethodDescriptor,
        args: tuple[Any, ...],
    ) -> None: ...

    def error(
        self,
        state: TState,
        target: Any,
        method: MethodDescriptor,
        args: tuple[Any, ...],
        exception: Exception,
    ) -> None: ...
