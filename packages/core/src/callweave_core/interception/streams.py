"""Sequence wrappers that report every element and the terminal event.

Each wrapper is lazy: nothing happens until the caller enumerates (or
subscribes), and every enumeration / subscription is observed on its own.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..utils import maybe_await

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, Callable, Iterable

    from ..ports.stream import IDisposable, IObservable, IObserver


def _noop(*_args: Any) -> None:
    return None


@dataclass(frozen=True)
class SequenceHooks:
    """The per-call hooks of one intercepted sequence, already bound to its state."""

    on_next: Callable[[Any], Any] = _noop
    on_complete: Callable[[], Any] = _noop
    on_error: Callable[[Exception], Any] = _noop


# ── Pull ─────────────────────────────────────────────────────────


def _pull(source: Iterable[Any], hooks: SequenceHooks) -> Iterator[Any]:
    try:
        iterator = iter(source)
        while True:
            try:
                item = next(iterator)
            except StopIteration:
                break
            hooks.on_next(item)
            try:
                yield item
            except GeneratorExit:
                close = getattr(iterator, "close", None)
                if close is not None:
                    close()
                raise
    except Exception as exc:
        hooks.on_error(exc)
        raise
    hooks.on_complete()


class InterceptedIterable:
    """Re-iterable view over a source iterable; each ``iter()`` is observed."""

    __slots__ = ("_hooks", "_source")

    def __init__(self, source: Iterable[Any], hooks: SequenceHooks) -> None:
        self._source = source
        self._hooks = hooks

    def __iter__(self) -> Iterator[Any]:
        return _pull(self._source, self._hooks)

    def __repr__(self) -> str:
        return f"InterceptedIterable({self._source!r})"


def intercept_pull(source: Iterable[Any], hooks: SequenceHooks) -> Iterable[Any]:
    """One-shot iterators stay one-shot; re-iterable sources stay re-iterable."""
    if isinstance(source, Iterator):
        return _pull(source, hooks)
    return InterceptedIterable(source, hooks)


# ── Async pull ───────────────────────────────────────────────────


async def _apull(source: AsyncIterable[Any], hooks: SequenceHooks) -> AsyncIterator[Any]:
    try:
        iterator = source.__aiter__()
        while True:
            try:
                item = await iterator.__anext__()
            except StopAsyncIteration:
                break
            await maybe_await(hooks.on_next(item))
            try:
                yield item
            except GeneratorExit:
                aclose = getattr(iterator, "aclose", None)
                if aclose is not None:
                    await aclose()
                raise
    except Exception as exc:
        await maybe_await(hooks.on_error(exc))
        raise
    await maybe_await(hooks.on_complete())


class InterceptedAsyncIterable:
    """Async counterpart of :class:`InterceptedIterable`."""

    __slots__ = ("_hooks", "_source")

    def __init__(self, source: AsyncIterable[Any], hooks: SequenceHooks) -> None:
        self._source = source
        self._hooks = hooks

    def __aiter__(self) -> AsyncIterator[Any]:
        return _apull(self._source, self._hooks)

    def __repr__(self) -> str:
        return f"InterceptedAsyncIterable({self._source!r})"


def intercept_async_pull(
    source: AsyncIterable[Any], hooks: SequenceHooks
) -> AsyncIterable[Any]:
    if isinstance(source, AsyncIterator):
        return _apull(source, hooks)
    return InterceptedAsyncIterable(source, hooks)


# ── Push ─────────────────────────────────────────────────────────


class _InterceptingObserver:
    """Forwards notifications downstream after reporting them.

    At most one terminal event is reported and forwarded per subscription,
    even when the source misbehaves.
    """

    __slots__ = ("_downstream", "_hooks", "_stopped")

    def __init__(self, downstream: IObserver[Any], hooks: SequenceHooks) -> None:
        self._downstream = downstream
        self._hooks = hooks
        self._stopped = False

    def on_next(self, value: Any) -> None:
        if self._stopped:
            return
        try:
            self._hooks.on_next(value)
        except Exception as exc:  # noqa: BLE001
            self.on_error(exc)
            return
        self._downstream.on_next(value)

    def on_error(self, error: Exception) -> None:
        if self._stopped:
            return
        self._stopped = True
        self._hooks.on_error(error)
        self._downstream.on_error(error)

    def on_completed(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        self._hooks.on_complete()
        self._downstream.on_completed()


class InterceptedObservable:
    """Push stream whose every subscription is observed independently."""

    __slots__ = ("_hooks", "_source")

    def __init__(self, source: IObservable[Any], hooks: SequenceHooks) -> None:
        self._source = source
        self._hooks = hooks

    def subscribe(self, observer: IObserver[Any]) -> IDisposable:
        return self._source.subscribe(_InterceptingObserver(observer, self._hooks))

    def __repr__(self) -> str:
        return f"InterceptedObservable({self._source!r})"
