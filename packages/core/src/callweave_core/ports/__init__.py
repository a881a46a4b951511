from callweave_core.ports.interception import (
    IAsyncInterceptionHooks,
    IInterceptionPolicy,
    ISequenceInterceptionHooks,
    IStatefulAsyncInterceptionHooks,
    IStatefulSequenceInterceptionHooks,
    IStatefulSyncInterceptionHooks,
    ISyncInterceptionHooks,
)
from callweave_core.ports.middleware import IMiddleware, ISyncMiddleware
from callweave_core.ports.stream import IDisposable, IObservable, IObserver

__all__ = [
    "IAsyncInterceptionHooks",
    "IDisposable",
    "IInterceptionPolicy",
    "IMiddleware",
    "IObservable",
    "IObserver",
    "ISequenceInterceptionHooks",
    "IStatefulAsyncInterceptionHooks",
    "IStatefulSequenceInterceptionHooks",
    "IStatefulSyncInterceptionHooks",
    "ISyncInterceptionHooks",
    "ISyncMiddleware",
]
