"""IObservable / IObserver — push-stream protocols."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

T_co = TypeVar("T_co", covariant=True)
T_contra = TypeVar("T_contra", contravariant=True)


@runtime_checkable
class IDisposable(Protocol):
    """Handle returned by ``subscribe``; disposing it ends the subscription."""

    def dispose(self) -> None: ...


@runtime_checkable
class IObserver(Protocol[T_contra]):
    """Receives the notifications of a push stream.

    A well-behaved source calls ``on_next`` zero or more times followed by at
    most one of ``on_error`` / ``on_completed``.
    """

    def on_next(self, value: T_contra) -> None: ...

    def on_error(self, error: Exception) -> None: ...

    def on_completed(self) -> None: ...


@runtime_checkable
class IObservable(Protocol[T_co]):
    """A source that pushes values to subscribed observers at its own pace."""

    def subscribe(self, observer: IObserver[Any]) -> IDisposable: ...
