"""LoggingInterceptorBuilder — fluent, single-use configuration of a LoggingInterceptor.

Usage::

    interceptor = (
        LoggingInterceptorBuilder()
        .with_logger_category(OrderRepository, "shop.orders")
        .do_not_intercept_if_named("ping")
        .log_parameter("order_id")
        .log_result(lambda order: {"status": order.status}, method_name="get")
        .skip_exception(KeyError, method_name="get")
        .build()
    )
    repository = interceptor.intercept(SqlOrderRepository(), OrderRepository)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from callweave_core import InterceptionConfigurationError
from typing_extensions import Self

from .exceptions import BuilderAlreadyBuiltError
from .extractors import (
    MethodCache,
    ParameterExtractor,
    ResultExtractor,
    parameters_getter,
    render_pairs,
    result_getter,
)
from .interceptor import LoggingInterceptor
from .options import LoggingInterceptorOptions

if TYPE_CHECKING:
    from collections.abc import Callable

    from callweave_core import MethodDescriptor


def _render(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, Mapping):
        return render_pairs(value)
    return str(value)


def _require(value: Any, name: str) -> None:
    if value is None:
        raise InterceptionConfigurationError(f"{name} must not be None")


class LoggingInterceptorBuilder:
    """Collects loggers, filters, extractors and flags for one LoggingInterceptor."""

    def __init__(self) -> None:
        self._built = False
        self._options = LoggingInterceptorOptions()

        self._logger: logging.Logger | None = None
        self._logger_factory: Callable[[MethodDescriptor, Any], logging.Logger] | None = None
        self._categories: dict[type, str] = {}

        self._intercept_sequences = False
        self._intercept_async = True

        self._include_by_default = True
        self._method_predicates: list[Callable[[MethodDescriptor], bool]] = []
        self._skip_predicates: list[Callable[[MethodDescriptor, BaseException], bool]] = []

        self._get_parameters: Callable[[MethodDescriptor, tuple[Any, ...]], Any] | None = None
        self._parameter_extractors: list[ParameterExtractor] = []
        self._get_result: Callable[[MethodDescriptor, Any], Any] | None = None
        self._result_extractors: list[ResultExtractor] = []

    # ── Loggers ──────────────────────────────────────────────────

    def with_logger(self, logger: logging.Logger) -> Self:
        """Log every call through *logger*."""
        _require(logger, "logger")
        self._check_not_built()
        self._logger = logger
        return self

    def with_logger_factory(
        self, factory: Callable[[MethodDescriptor, Any], logging.Logger]
    ) -> Self:
        """Pick the logger per call from ``(method, target)``."""
        _require(factory, "factory")
        self._check_not_built()
        self._logger_factory = factory
        return self

    def with_logger_category(self, contract: type, name: str) -> Self:
        """Log calls on targets that are instances of *contract* under *name*."""
        _require(contract, "contract")
        _require(name, "name")
        self._check_not_built()
        self._categories[contract] = name
        return self

    def with_options(self, options: LoggingInterceptorOptions) -> Self:
        _require(options, "options")
        self._check_not_built()
        self._options = options
        return self

    # ── Flags ────────────────────────────────────────────────────

    def intercept_sequences(self) -> Self:
        return self._set_flag("_intercept_sequences", True)

    def do_not_intercept_sequences(self) -> Self:
        return self._set_flag("_intercept_sequences", False)

    def intercept_async(self) -> Self:
        return self._set_flag("_intercept_async", True)

    def do_not_intercept_async(self) -> Self:
        return self._set_flag("_intercept_async", False)

    # ── Filters ──────────────────────────────────────────────────
    #
    # Either include filters (only matching methods are logged) or exclude
    # filters (matching methods are not logged); never both.

    def do_intercept_if(self, predicate: Callable[[MethodDescriptor], bool]) -> Self:
        return self._add_filter(predicate, include=True)

    def do_intercept_if_named(self, method_name: str) -> Self:
        _require(method_name, "method_name")
        return self.do_intercept_if(lambda method: method.name == method_name)

    def do_intercept_if_matches(self, pattern: str | re.Pattern[str]) -> Self:
        _require(pattern, "pattern")
        regex = re.compile(pattern)
        return self.do_intercept_if(lambda method: regex.search(method.name) is not None)

    def do_not_intercept_if(self, predicate: Callable[[MethodDescriptor], bool]) -> Self:
        return self._add_filter(predicate, include=False)

    def do_not_intercept_if_named(self, method_name: str) -> Self:
        _require(method_name, "method_name")
        return self.do_not_intercept_if(lambda method: method.name == method_name)

    def do_not_intercept_if_matches(self, pattern: str | re.Pattern[str]) -> Self:
        _require(pattern, "pattern")
        regex = re.compile(pattern)
        return self.do_not_intercept_if(
            lambda method: regex.search(method.name) is not None
        )

    # ── Expected failures ────────────────────────────────────────

    def skip_exception_if(
        self, predicate: Callable[[MethodDescriptor, BaseException], bool]
    ) -> Self:
        """Failures matching *predicate* are logged as DONE instead of ERROR."""
        _require(predicate, "predicate")
        self._check_not_built()
        self._skip_predicates.append(predicate)
        return self

    def skip_exception(
        self,
        exception_type: type[BaseException],
        method_name: str | None = None,
        predicate: Callable[[BaseException], bool] | None = None,
    ) -> Self:
        _require(exception_type, "exception_type")

        def matches(method: MethodDescriptor, exc: BaseException) -> bool:
            if method_name is not None and method.name != method_name:
                return False
            if not isinstance(exc, exception_type):
                return False
            return predicate is None or bool(predicate(exc))

        return self.skip_exception_if(matches)

    # ── Parameters / result ──────────────────────────────────────

    def with_parameters(
        self, get_parameters: Callable[[MethodDescriptor, tuple[Any, ...]], Any]
    ) -> Self:
        """Render the arguments of every call with *get_parameters*."""
        _require(get_parameters, "get_parameters")
        self._check_not_built()
        self._get_parameters = get_parameters
        return self

    def log_parameter(
        self,
        name: str,
        extract: Callable[[Any], Any] | None = None,
        output_name: str | None = None,
        method_name: str | None = None,
    ) -> Self:
        """Log the parameter called *name* (optionally only on *method_name*)."""
        _require(name, "name")
        self._check_not_built()
        self._parameter_extractors.append(
            ParameterExtractor(
                name=name,
                extract=extract or (lambda value: value),
                output_name=output_name,
                method_name=method_name,
            )
        )
        return self

    def with_result(self, get_result: Callable[[MethodDescriptor, Any], Any]) -> Self:
        """Render every result (and sequence element) with *get_result*."""
        _require(get_result, "get_result")
        self._check_not_built()
        self._get_result = get_result
        return self

    def log_result(
        self,
        extract: Callable[[Any], Any] | None = None,
        output_name: str | None = None,
        method_name: str | None = None,
    ) -> Self:
        self._check_not_built()
        self._result_extractors.append(
            ResultExtractor(
                extract=extract or (lambda value: value),
                output_name=output_name,
                method_name=method_name,
            )
        )
        return self

    # ── Build ────────────────────────────────────────────────────

    def build(self) -> LoggingInterceptor:
        """Produce the interceptor.  A builder can only be built once."""
        self._check_not_built()
        interceptor = LoggingInterceptor(
            options=self._options,
            logger_for=self._create_logger_for(),
            method_filter=self._create_method_filter(),
            treat_as_done=self._create_treat_as_done(),
            parameters_for=self._create_parameters_for(),
            result_for=self._create_result_for(),
            intercept_sequences=self._intercept_sequences,
            intercept_async=self._intercept_async,
        )
        self._built = True
        return interceptor

    # ── Internals ────────────────────────────────────────────────

    def _check_not_built(self) -> None:
        if self._built:
            raise BuilderAlreadyBuiltError("LoggingInterceptor is already built")

    def _set_flag(self, name: str, value: bool) -> Self:
        self._check_not_built()
        setattr(self, name, value)
        return self

    def _add_filter(
        self, predicate: Callable[[MethodDescriptor], bool], *, include: bool
    ) -> Self:
        _require(predicate, "predicate")
        self._check_not_built()
        if self._method_predicates and self._include_by_default == include:
            raise InterceptionConfigurationError(
                "Cannot mix do_intercept_* and do_not_intercept_* filters"
            )
        self._include_by_default = not include
        self._method_predicates.append(predicate)
        return self

    def _create_logger_for(self) -> Callable[[MethodDescriptor, Any], logging.Logger]:
        if self._logger is not None:
            if self._logger_factory is not None or self._categories:
                raise InterceptionConfigurationError(
                    "When a logger is set, no other logger source may be configured"
                )
            logger = self._logger
            return lambda _method, _target: logger

        if self._logger_factory is not None:
            if self._categories:
                raise InterceptionConfigurationError(
                    "When a logger factory is set, no logger categories may be configured"
                )
            return self._logger_factory

        categories = dict(self._categories)
        unknown = self._options.unknown_type_name

        def logger_for(_method: MethodDescriptor, target: Any) -> logging.Logger:
            if target is None:
                return logging.getLogger(unknown)
            target_type = type(target)
            for cls in target_type.__mro__:
                if cls in categories:
                    return logging.getLogger(categories[cls])
            return logging.getLogger(f"{target_type.__module__}.{target_type.__qualname__}")

        return logger_for

    def _create_method_filter(self) -> Callable[[MethodDescriptor], bool]:
        predicates = tuple(self._method_predicates)
        include_by_default = self._include_by_default

        def method_filter(method: MethodDescriptor) -> bool:
            matched = any(predicate(method) for predicate in predicates)
            return not matched if include_by_default else matched

        return method_filter

    def _create_treat_as_done(
        self,
    ) -> Callable[[MethodDescriptor, BaseException], bool]:
        predicates = tuple(self._skip_predicates)
        return lambda method, exc: any(predicate(method, exc) for predicate in predicates)

    def _create_parameters_for(
        self,
    ) -> Callable[[MethodDescriptor, tuple[Any, ...]], str | None]:
        if self._get_parameters is not None:
            if self._parameter_extractors:
                raise InterceptionConfigurationError(
                    "with_parameters cannot be combined with log_parameter"
                )
            get_parameters = self._get_parameters
            return lambda method, args: _render(get_parameters(method, args))

        extractors = tuple(self._parameter_extractors)
        if not extractors:
            return lambda _method, _args: None

        getters = MethodCache()

        def parameters_for(method: MethodDescriptor, args: tuple[Any, ...]) -> str | None:
            getter = getters.get(method, lambda: parameters_getter(method, extractors))
            return getter(args)

        return parameters_for

    def _create_result_for(
        self,
    ) -> Callable[[MethodDescriptor], Callable[[Any], str | None]]:
        if self._get_result is not None:
            if self._result_extractors:
                raise InterceptionConfigurationError(
                    "with_result cannot be combined with log_result"
                )
            get_result = self._get_result
            return lambda method: lambda result: _render(get_result(method, result))

        extractors = tuple(self._result_extractors)
        getters = MethodCache()

        def result_for(method: MethodDescriptor) -> Callable[[Any], str | None]:
            getter: Callable[[Any], str | None] = getters.get(
                method, lambda: result_getter(method, extractors)
            )
            return getter

        return result_for
