"""Interception engine: policies, chains and proxy generation."""

from callweave_core.interception.aio import AsyncPolicy, StatefulAsyncPolicy
from callweave_core.interception.base import InterceptionPolicy
from callweave_core.interception.chain import InterceptorChain
from callweave_core.interception.proxy import (
    Interceptor,
    create_interceptor,
    proxy_class_for,
    target_of,
)
from callweave_core.interception.sequence import SequencePolicy, StatefulSequencePolicy
from callweave_core.interception.streams import (
    InterceptedAsyncIterable,
    InterceptedIterable,
    InterceptedObservable,
    SequenceHooks,
)
from callweave_core.interception.sync import StatefulSyncPolicy, SyncPolicy

__all__ = [
    "AsyncPolicy",
    "InterceptedAsyncIterable",
    "InterceptedIterable",
    "InterceptedObservable",
    "InterceptionPolicy",
    "Interceptor",
    "InterceptorChain",
    "SequenceHooks",
    "SequencePolicy",
    "StatefulAsyncPolicy",
    "StatefulSequencePolicy",
    "StatefulSyncPolicy",
    "SyncPolicy",
    "create_interceptor",
    "proxy_class_for",
    "target_of",
]
