"""LoggingInterceptor — logs START / DONE / NEXT / ERROR stages of intercepted calls."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from callweave_core import (
    InterceptorChain,
    StatefulAsyncPolicy,
    StatefulSequencePolicy,
    StatefulSyncPolicy,
    create_interceptor,
)

from .extractors import MethodCache
from .state import LoggingInterceptorState

if TYPE_CHECKING:
    from collections.abc import Callable

    from callweave_core import ContractDescriptor, MethodDescriptor

    from .options import LoggingInterceptorOptions


class LoggingInterceptor:
    """Stateful hooks object shared by the sync, async and sequence policies.

    Built by :class:`~callweave_logging.builder.LoggingInterceptorBuilder`;
    immutable once built apart from its per-method caches.
    """

    def __init__(
        self,
        *,
        options: LoggingInterceptorOptions,
        logger_for: Callable[[MethodDescriptor, Any], logging.Logger],
        method_filter: Callable[[MethodDescriptor], bool],
        treat_as_done: Callable[[MethodDescriptor, BaseException], bool],
        parameters_for: Callable[[MethodDescriptor, tuple[Any, ...]], str | None],
        result_for: Callable[[MethodDescriptor], Callable[[Any], str | None]],
        intercept_sequences: bool = False,
        intercept_async: bool = True,
    ) -> None:
        self.options = options
        self.intercept_sequences = intercept_sequences
        self.intercept_async = intercept_async
        self._logger_for = logger_for
        self._method_filter = method_filter
        self._treat_as_done = treat_as_done
        self._parameters_for = parameters_for
        self._result_for = result_for
        self._should_intercept_cache = MethodCache()
        self._chain: InterceptorChain | None = None

    # ── Wiring ───────────────────────────────────────────────────

    def chain(self) -> InterceptorChain:
        """The chain of policies using this interceptor as their hooks."""
        if self._chain is None:
            chain = InterceptorChain(display_name="Logging")
            if self.intercept_sequences:
                chain = chain.add(StatefulSequencePolicy.DEFAULT.with_hooks(self))
            if self.intercept_async:
                chain = chain.add(StatefulAsyncPolicy.DEFAULT.with_hooks(self))
            self._chain = chain.add(StatefulSyncPolicy.DEFAULT.with_hooks(self))
        return self._chain

    def intercept(
        self, target: Any, contract: type | ContractDescriptor | None = None
    ) -> Any:
        """Return a proxy of *target* that logs every intercepted call."""
        return create_interceptor(self.chain(), target, contract)

    # ── Hooks ────────────────────────────────────────────────────

    def should_intercept(
        self, target: Any, method: MethodDescriptor, args: tuple[Any, ...]
    ) -> bool:
        return self._should_intercept_cache.get(  # type: ignore[no-any-return]
            method, lambda: bool(self._method_filter(method))
        )

    def before(
        self, target: Any, method: MethodDescriptor, args: tuple[Any, ...]
    ) -> LoggingInterceptorState:
        state = LoggingInterceptorState(
            logger=self._logger_for(method, target),
            type_name=self._type_name(target),
            parameters=self._parameters_for(method, args),
            get_result=self._result_for(method),
        )
        if state.logger.isEnabledFor(self.options.start_level):
            template = (
                self.options.start_message
                if state.parameters is None
                else self.options.start_parameters_message
            )
            state.logger.log(
                self.options.start_level,
                template,
                self._fields(state, method, self.options.start_stage),
            )
        return state

    def after(
        self,
        state: LoggingInterceptorState,
        target: Any,
        method: MethodDescriptor,
        args: tuple[Any, ...],
        result: Any,
    ) -> None:
        result_text = None if method.return_shape.is_void else state.get_result(result)
        self._log_outcome(
            state,
            method,
            self.options.done_level,
            self.options.result_stage if result_text else self.options.done_stage,
            result_text,
        )

    def next(
        self,
        state: LoggingInterceptorState,
        target: Any,
        method: MethodDescriptor,
        args: tuple[Any, ...],
        value: Any,
    ) -> None:
        if not state.logger.isEnabledFor(self.options.next_level):
            return
        self._log_outcome(
            state,
            method,
            self.options.next_level,
            self.options.next_stage,
            state.get_result(value),
        )

    def complete(
        self,
        state: LoggingInterceptorState,
        target: Any,
        method: MethodDescriptor,
        args: tuple[Any, ...],
    ) -> None:
        self._log_outcome(
            state, method, self.options.done_level, self.options.complete_stage, None
        )

    def error(
        self,
        state: LoggingInterceptorState,
        target: Any,
        method: MethodDescriptor,
        args: tuple[Any, ...],
        exception: Exception,
    ) -> None:
        if self._treat_as_done(method, exception):
            self._log_outcome(
                state, method, self.options.done_level, self.options.done_stage, None
            )
            return
        if not state.logger.isEnabledFor(self.options.error_level):
            return
        template = (
            self.options.error_message
            if state.parameters is None
            else self.options.error_parameters_message
        )
        state.logger.log(
            self.options.error_level,
            template,
            self._fields(state, method, self.options.error_stage),
            exc_info=exception,
        )

    # ── Internals ────────────────────────────────────────────────

    def _log_outcome(
        self,
        state: LoggingInterceptorState,
        method: MethodDescriptor,
        level: int,
        stage: str,
        result_text: str | None,
    ) -> None:
        if not state.logger.isEnabledFor(level):
            return
        fields = self._fields(state, method, stage)
        if result_text:
            fields["result"] = result_text
            template = (
                self.options.result_message
                if state.parameters is None
                else self.options.result_parameters_message
            )
        else:
            template = (
                self.options.done_message
                if state.parameters is None
                else self.options.done_parameters_message
            )
        state.logger.log(level, template, fields)

    @staticmethod
    def _fields(
        state: LoggingInterceptorState, method: MethodDescriptor, stage: str
    ) -> dict[str, Any]:
        return {
            "type_name": state.type_name,
            "method_name": method.name,
            "parameters": state.parameters,
            "stage": stage,
            "elapsed": state.elapsed_ms,
        }

    def _type_name(self, target: Any) -> str:
        if target is None:
            return self.options.unknown_type_name
        return type(target).__name__
