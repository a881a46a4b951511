"""Middleware algebra and method-invocation middleware."""

from callweave_core.middleware import aio, sync, void
from callweave_core.middleware.invoke import (
    InvocationContext,
    async_invocation_pipeline,
    call_invoke,
    call_invoke_async,
    invocation_pipeline,
    invoke_async,
    invoke_sync,
)
from callweave_core.middleware.pipeline import build_pipeline, build_sync_pipeline

__all__ = [
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
]
