"""callweave-core — call interception and middleware composition.

Zero infrastructure dependencies. Wraps the methods of any contract with
before / after / error hooks (plus next / complete for sequences) and
composes middleware pipelines around plain and async calls.
"""

from __future__ import annotations

# ── Contracts ────────────────────────────────────────────────────
from .contracts import (
    ContractDescriptor,
    MethodDescriptor,
    ReturnShape,
    classify,
    describe_contract,
    describe_method,
    shape_of_annotation,
)

# ── Interception ─────────────────────────────────────────────────
from .interception import (
    AsyncPolicy,
    InterceptedAsyncIterable,
    InterceptedIterable,
    InterceptedObservable,
    InterceptionPolicy,
    Interceptor,
    InterceptorChain,
    SequenceHooks,
    SequencePolicy,
    StatefulAsyncPolicy,
    StatefulSequencePolicy,
    StatefulSyncPolicy,
    SyncPolicy,
    create_interceptor,
    proxy_class_for,
    target_of,
)

# ── Middleware ───────────────────────────────────────────────────
from .middleware import (
    InvocationContext,
    aio,
    async_invocation_pipeline,
    build_pipeline,
    build_sync_pipeline,
    call_invoke,
    call_invoke_async,
    invocation_pipeline,
    invoke_async,
    invoke_sync,
    sync,
    void,
)

# ── Ports ────────────────────────────────────────────────────────
from .ports import (
    IAsyncInterceptionHooks,
    IDisposable,
    IInterceptionPolicy,
    IMiddleware,
    IObservable,
    IObserver,
    ISequenceInterceptionHooks,
    IStatefulAsyncInterceptionHooks,
    IStatefulSequenceInterceptionHooks,
    IStatefulSyncInterceptionHooks,
    ISyncInterceptionHooks,
    ISyncMiddleware,
)

# ── Primitives ───────────────────────────────────────────────────
from .primitives import (
    CallweaveError,
    ContractError,
    InterceptionConfigurationError,
    InvocationOutcome,
    InvocationShapeError,
    NoOutcomeError,
)

__all__ = [
    # Contracts
    "ContractDescriptor",
    "MethodDescriptor",
    "ReturnShape",
    "classify",
    "describe_contract",
    "describe_method",
    "shape_of_annotation",
    # Interception
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
    # Middleware
    "InvocationContext",
    "aio",
    "async_invocation_pipeline",
    "build_pipeline",
    "build_sync_pipeline",
    "call_invoke",
    "call_invoke_async",
    "invocation_pipeline",
    "invoke_async",
    "invoke_sync",
    "sync",
    "void",
    # Ports
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
    # Primitives
    "CallweaveError",
    "ContractError",
    "InterceptionConfigurationError",
    "InvocationOutcome",
    "InvocationShapeError",
    "NoOutcomeError",
]
