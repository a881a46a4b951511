import time
from abc import ABC, abstractmethod
from unittest.mock import ANY, MagicMock

import pytest

from callweave_core.interception import (
    InterceptorChain,
    StatefulSyncPolicy,
    SyncPolicy,
    create_interceptor,
)
from callweave_core.primitives.exceptions import InterceptionConfigurationError

# --- Test Contracts ---


class Greeter(ABC):
    @abstractmethod
    def greet(self, name: str) -> str: ...

    @abstractmethod
    def forget(self, name: str) -> None: ...


class FriendlyGreeter(Greeter):
    def __init__(self) -> None:
        self.log = []

    def greet(self, name: str) -> str:
        self.log.append(f"greet {name}")
        if not name:
            raise ValueError("name is required")
        return f"Hello {name}"

    def forget(self, name: str) -> None:
        self.log.append(f"forget {name}")


def proxy_with(policy, target=None):
    return create_interceptor(
        InterceptorChain.DEFAULT.add(policy), target or FriendlyGreeter(), Greeter
    )


# --- Hook ordering ---


def test_before_then_target_then_after() -> None:
    target = FriendlyGreeter()
    policy = (
        SyncPolicy.DEFAULT.before(lambda: target.log.append("before"))
        .after(lambda result: target.log.append(f"after {result}"))
        .error(lambda exc: target.log.append("error"))
    )

    assert proxy_with(policy, target).greet("Ann") == "Hello Ann"
    assert target.log == ["before", "greet Ann", "after Hello Ann"]


def test_failure_fires_error_once_and_reraises_same_object() -> None:
    after = MagicMock()
    error = MagicMock()
    proxy = proxy_with(SyncPolicy.DEFAULT.after(after).error(error))

    with pytest.raises(ValueError, match="name is required") as exc_info:
        proxy.greet("")

    after.assert_not_called()
    error.assert_called_once_with(ANY, ANY, ("",), exc_info.value)


def test_full_context_hooks_receive_target_method_and_args() -> None:
    target = FriendlyGreeter()
    before = MagicMock()
    after = MagicMock()
    proxy = proxy_with(SyncPolicy.DEFAULT.before(before).after(after), target)

    proxy.greet("Bo")

    (called_target, method, args), _ = before.call_args
    assert called_target is target
    assert method.name == "greet"
    assert args == ("Bo",)
    after.assert_called_once_with(target, method, ("Bo",), "Hello Bo")


def test_void_methods_pass_none_to_after() -> None:
    results = []
    proxy = proxy_with(SyncPolicy.DEFAULT.after(results.append))

    assert proxy.forget("Cy") is None
    assert results == [None]


def test_failure_in_after_is_reported_to_error() -> None:
    failure = RuntimeError("after failed")
    errors = []

    def broken_after(_result):
        raise failure

    proxy = proxy_with(SyncPolicy.DEFAULT.after(broken_after).error(errors.append))

    with pytest.raises(RuntimeError):
        proxy.greet("Di")

    assert errors == [failure]


# --- Correlation state ---


def test_state_flows_from_before_to_after() -> None:
    seen = []
    counter = iter(range(100))
    policy = (
        StatefulSyncPolicy[int]()
        .before(lambda: next(counter))
        .after(lambda state, result: seen.append((state, result)))
    )
    proxy = proxy_with(policy)

    proxy.greet("A")
    proxy.greet("B")

    assert seen == [(0, "Hello A"), (1, "Hello B")]


def test_state_flows_from_before_to_error() -> None:
    seen = []
    policy = (
        StatefulSyncPolicy[str]()
        .before(lambda target, method, args: f"{method.name}{args}")
        .error(lambda state, exc: seen.append((state, type(exc))))
    )

    with pytest.raises(ValueError):
        proxy_with(policy).greet("")

    assert seen == [("greet('',)", ValueError)]


def test_stateful_single_argument_hooks_receive_state() -> None:
    states = []
    policy = StatefulSyncPolicy[str]().before(lambda: "token").after(states.append)

    proxy_with(policy).greet("E")

    assert states == ["token"]


def test_stateful_full_context_hooks() -> None:
    after = MagicMock()
    policy = StatefulSyncPolicy[str]().before(lambda: "s").after(after)

    proxy_with(policy).greet("F")

    after.assert_called_once_with("s", ANY, ANY, ("F",), "Hello F")


# --- Gate ---


def test_gated_off_policy_declines_and_fires_nothing() -> None:
    hooks = MagicMock()
    target = FriendlyGreeter()
    policy = (
        SyncPolicy.DEFAULT.should_intercept(lambda: False)
        .before(hooks.before)
        .after(hooks.after)
        .error(hooks.error)
    )

    assert proxy_with(policy, target).greet("G") == "Hello G"
    hooks.before.assert_not_called()
    hooks.after.assert_not_called()
    hooks.error.assert_not_called()
    assert target.log == ["greet G"]


def test_gate_receives_call_context() -> None:
    after = MagicMock()
    policy = SyncPolicy.DEFAULT.should_intercept(
        lambda target, method, args: method.name == "greet"
    ).after(after)
    proxy = proxy_with(policy)

    proxy.forget("H")
    proxy.greet("H")

    after.assert_called_once_with(ANY, ANY, ("H",), "Hello H")


def test_gated_off_policy_lets_next_policy_handle_the_call() -> None:
    first = MagicMock()
    second = MagicMock()
    chain = (
        InterceptorChain.DEFAULT.add(
            SyncPolicy.DEFAULT.should_intercept(lambda: False).after(first)
        )
        .add(SyncPolicy.DEFAULT.after(second))
    )

    create_interceptor(chain, FriendlyGreeter(), Greeter).greet("I")

    first.assert_not_called()
    second.assert_called_once()


# --- Configuration ---


def test_policies_are_immutable() -> None:
    base = SyncPolicy.DEFAULT
    configured = base.after(lambda: None)

    assert base.after_action is None
    assert configured.after_action is not None
    assert configured is not base


@pytest.mark.parametrize("hook", ["before", "after", "error", "should_intercept"])
def test_none_hook_is_rejected(hook) -> None:
    with pytest.raises(InterceptionConfigurationError, match="must not be None"):
        getattr(SyncPolicy.DEFAULT, hook)(None)


def test_unsupported_arity_is_rejected() -> None:
    with pytest.raises(InterceptionConfigurationError, match="positional arguments"):
        SyncPolicy.DEFAULT.after(lambda a, b: None)


def test_typed_policy_rejects_untyped_zero_argument_after() -> None:
    with pytest.raises(InterceptionConfigurationError):
        StatefulSyncPolicy[int]().after(lambda: None)


class _Unreadable:
    """Callable whose signature cannot be inspected, like some C builtins."""

    __signature__ = "not a signature"

    def __call__(self, *args):
        return None


def test_hook_with_unreadable_signature_is_rejected_at_configuration() -> None:
    with pytest.raises(InterceptionConfigurationError, match="cannot be read"):
        SyncPolicy.DEFAULT.before(_Unreadable())


def test_builtin_hook_never_fails_at_call_time() -> None:
    after = MagicMock()
    try:
        policy = StatefulSyncPolicy[float]().before(time.perf_counter).after(after)
    except InterceptionConfigurationError:
        return

    assert proxy_with(policy).greet("T") == "Hello T"
    after.assert_called_once()


def test_with_hooks_copies_every_hook() -> None:
    class Hooks:
        def __init__(self) -> None:
            self.calls = []

        def should_intercept(self, target, method, args):
            return True

        def before(self, target, method, args):
            self.calls.append("before")
            return "state"

        def after(self, state, target, method, args, result):
            self.calls.append(("after", state, result))

        def error(self, state, target, method, args, exception):
            self.calls.append(("error", state))

    hooks = Hooks()
    proxy = proxy_with(StatefulSyncPolicy[str]().with_hooks(hooks))

    proxy.greet("J")
    with pytest.raises(ValueError):
        proxy.greet("")

    assert hooks.calls == [
        "before",
        ("after", "state", "Hello J"),
        "before",
        ("error", "state"),
    ]


def test_with_hooks_rejects_none() -> None:
    with pytest.raises(InterceptionConfigurationError):
        SyncPolicy.DEFAULT.with_hooks(None)


def test_sync_policy_ignores_future_methods() -> None:
    class Service:
        async def load(self) -> int:
            return 1

    after = MagicMock()
    proxy = create_interceptor(
        InterceptorChain.DEFAULT.add(SyncPolicy.DEFAULT.after(after)), Service()
    )

    coroutine = proxy.load()
    coroutine.close()

    after.assert_not_called()
