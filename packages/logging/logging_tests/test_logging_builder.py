import logging

import pytest
from pydantic import ValidationError

from callweave_core import InterceptionConfigurationError
from callweave_logging import (
    BuilderAlreadyBuiltError,
    LoggingInterceptor,
    LoggingInterceptorBuilder,
    LoggingInterceptorOptions,
)


def test_build_returns_interceptor() -> None:
    assert isinstance(LoggingInterceptorBuilder().build(), LoggingInterceptor)


def test_builder_is_single_use() -> None:
    builder = LoggingInterceptorBuilder()
    builder.build()

    with pytest.raises(BuilderAlreadyBuiltError, match="already built"):
        builder.build()
    with pytest.raises(InterceptionConfigurationError):
        builder.intercept_sequences()


def test_flags_default_and_toggle() -> None:
    defaults = LoggingInterceptorBuilder().build()
    toggled = (
        LoggingInterceptorBuilder().intercept_sequences().do_not_intercept_async().build()
    )

    assert not defaults.intercept_sequences
    assert defaults.intercept_async
    assert toggled.intercept_sequences
    assert not toggled.intercept_async


def test_mixing_include_and_exclude_filters_is_rejected() -> None:
    with pytest.raises(InterceptionConfigurationError, match="Cannot mix"):
        LoggingInterceptorBuilder().do_intercept_if_named("a").do_not_intercept_if_named("b")
    with pytest.raises(InterceptionConfigurationError, match="Cannot mix"):
        LoggingInterceptorBuilder().do_not_intercept_if_matches("a").do_intercept_if(
            lambda method: True
        )


def test_several_filters_of_one_kind_are_allowed() -> None:
    builder = (
        LoggingInterceptorBuilder()
        .do_not_intercept_if_named("a")
        .do_not_intercept_if_matches(r"^_")
    )

    assert isinstance(builder.build(), LoggingInterceptor)


@pytest.mark.parametrize(
    "configure",
    [
        lambda b: b.with_logger(None),
        lambda b: b.with_logger_factory(None),
        lambda b: b.with_options(None),
        lambda b: b.do_intercept_if(None),
        lambda b: b.skip_exception_if(None),
        lambda b: b.with_parameters(None),
        lambda b: b.log_parameter(None),
        lambda b: b.with_result(None),
    ],
)
def test_none_arguments_are_rejected(configure) -> None:
    with pytest.raises(InterceptionConfigurationError, match="must not be None"):
        configure(LoggingInterceptorBuilder())


def test_logger_and_factory_are_exclusive() -> None:
    builder = (
        LoggingInterceptorBuilder()
        .with_logger(logging.getLogger("a"))
        .with_logger_factory(lambda method, target: logging.getLogger("b"))
    )

    with pytest.raises(InterceptionConfigurationError, match="no other logger source"):
        builder.build()


def test_factory_and_categories_are_exclusive() -> None:
    builder = (
        LoggingInterceptorBuilder()
        .with_logger_factory(lambda method, target: logging.getLogger("b"))
        .with_logger_category(object, "c")
    )

    with pytest.raises(InterceptionConfigurationError, match="categories"):
        builder.build()


def test_whole_and_per_parameter_extraction_are_exclusive() -> None:
    builder = (
        LoggingInterceptorBuilder()
        .with_parameters(lambda method, args: args)
        .log_parameter("x")
    )

    with pytest.raises(InterceptionConfigurationError, match="with_parameters"):
        builder.build()


def test_whole_and_per_result_extraction_are_exclusive() -> None:
    builder = (
        LoggingInterceptorBuilder().with_result(lambda method, result: result).log_result()
    )

    with pytest.raises(InterceptionConfigurationError, match="with_result"):
        builder.build()


# --- Options ---


def test_options_defaults() -> None:
    options = LoggingInterceptorOptions()

    assert options.start_level == logging.DEBUG
    assert options.done_level == logging.INFO
    assert options.next_level == logging.DEBUG
    assert options.error_level == logging.ERROR
    assert (options.start_stage, options.done_stage, options.error_stage) == (
        "START",
        "DONE",
        "ERROR",
    )
    assert options.unknown_type_name == "UnknownType"


def test_options_are_frozen() -> None:
    options = LoggingInterceptorOptions()

    with pytest.raises(ValidationError):
        options.start_stage = "GO"  # type: ignore[misc]


def test_options_reject_unknown_level_names() -> None:
    with pytest.raises(ValidationError, match="Unknown logging level"):
        LoggingInterceptorOptions(error_level="LOUD")


def test_options_reject_empty_stage_names() -> None:
    with pytest.raises(ValidationError):
        LoggingInterceptorOptions(done_stage="")


def test_with_parameters_renders_mappings(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="params")

    class Greeter:
        def greet(self, name: str) -> str:
            return f"hi {name}"

    interceptor = (
        LoggingInterceptorBuilder()
        .with_logger(logging.getLogger("params"))
        .with_parameters(lambda method, args: {"who": args[0]})
        .with_result(lambda method, result: result.upper())
        .build()
    )

    assert interceptor.intercept(Greeter()).greet("ann") == "hi ann"

    logged = [r.getMessage() for r in caplog.records if r.name == "params"]
    assert logged[0] == "Greeter.greet(who='ann') | START"
    assert logged[1].startswith("Greeter.greet(who='ann') | RESULT = (HI ANN).")
