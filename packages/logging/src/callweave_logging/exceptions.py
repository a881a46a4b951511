"""Exceptions for callweave-logging."""

from __future__ import annotations

from callweave_core import InterceptionConfigurationError


class BuilderAlreadyBuiltError(InterceptionConfigurationError):
    """Raised when a LoggingInterceptorBuilder is configured or built after ``build()``."""
