"""callweave-logging — logging interceptor and middleware built on callweave-core."""

from __future__ import annotations

from .builder import LoggingInterceptorBuilder
from .exceptions import BuilderAlreadyBuiltError
from .extractors import ParameterExtractor, ResultExtractor, render_pairs
from .interceptor import LoggingInterceptor
from .middleware import LoggingMiddleware
from .options import LoggingInterceptorOptions
from .state import LoggingInterceptorState

__all__ = [
    "BuilderAlreadyBuiltError",
    "LoggingInterceptor",
    "LoggingInterceptorBuilder",
    "LoggingInterceptorOptions",
    "LoggingInterceptorState",
    "LoggingMiddleware",
    "ParameterExtractor",
    "ResultExtractor",
    "render_pairs",
]
