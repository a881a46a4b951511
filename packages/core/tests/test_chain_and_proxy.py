import logging
from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable
from unittest.mock import MagicMock

import pytest

from callweave_core.contracts import ContractDescriptor, MethodDescriptor, ReturnShape
from callweave_core.interception import (
    Interceptor,
    InterceptorChain,
    SyncPolicy,
    create_interceptor,
    proxy_class_for,
    target_of,
)
from callweave_core.primitives.exceptions import InterceptionConfigurationError

# --- Test Contracts ---


class Account(ABC):
    @abstractmethod
    def deposit(self, amount: int, *, memo: str = "") -> int: ...

    @property
    @abstractmethod
    def owner(self) -> str: ...


class SavingsAccount(Account):
    def __init__(self) -> None:
        self.balance = 0
        self.memos = []

    def deposit(self, amount: int, *, memo: str = "") -> int:
        self.balance += amount
        self.memos.append(memo)
        return self.balance

    @property
    def owner(self) -> str:
        return "Ada"

    def audit(self) -> str:
        return "secret"


@runtime_checkable
class Clock(Protocol):
    def now(self) -> int: ...


class FixedClock:
    def now(self) -> int:
        return 1700


# --- Proxy behaviour ---


def test_proxy_without_policies_is_transparent() -> None:
    account = SavingsAccount()
    proxy = create_interceptor(InterceptorChain.DEFAULT, account, Account)

    assert proxy.deposit(10) == 10
    assert proxy.deposit(5, memo="gift") == 15
    assert account.memos == ["", "gift"]
    assert proxy.owner == "Ada"


def test_proxy_is_an_instance_of_abstract_contract() -> None:
    proxy = create_interceptor(InterceptorChain.DEFAULT, SavingsAccount(), Account)

    assert isinstance(proxy, Account)
    assert isinstance(proxy, Interceptor)


def test_proxy_matches_runtime_checkable_protocol() -> None:
    proxy = create_interceptor(InterceptorChain.DEFAULT, FixedClock(), Clock)

    assert isinstance(proxy, Clock)
    assert proxy.now() == 1700


def test_names_outside_the_contract_are_not_reachable() -> None:
    proxy = create_interceptor(InterceptorChain.DEFAULT, SavingsAccount(), Account)

    with pytest.raises(AttributeError, match="audit"):
        proxy.audit()


def test_contract_defaults_to_target_type() -> None:
    proxy = create_interceptor(InterceptorChain.DEFAULT, SavingsAccount())

    assert proxy.audit() == "secret"
    assert isinstance(proxy, SavingsAccount)


def test_explicit_descriptor_table_as_contract() -> None:
    table = ContractDescriptor.of(
        "Pinger", MethodDescriptor("now", return_shape=ReturnShape.PLAIN_VALUE)
    )
    proxy = create_interceptor(InterceptorChain.DEFAULT, FixedClock(), table)

    assert proxy.now() == 1700
    assert type(proxy).__name__ == "PingerInterceptor"


def test_proxy_classes_are_cached_per_contract() -> None:
    assert proxy_class_for(Account) is proxy_class_for(Account)
    assert type(create_interceptor(InterceptorChain.DEFAULT, SavingsAccount(), Account)) is (
        proxy_class_for(Account)
    )


def test_proxy_class_generation_is_logged(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="callweave.interception")

    class Fresh:
        def ping(self) -> None: ...

    proxy_class_for(Fresh)

    assert "Generated proxy class FreshInterceptor" in caplog.text


def test_target_of_returns_the_wrapped_object() -> None:
    account = SavingsAccount()
    proxy = create_interceptor(InterceptorChain.DEFAULT, account, Account)

    assert target_of(proxy) is account


class Bag:
    def __init__(self, *items: str) -> None:
        self._items = list(items)

    def add(self, item: str) -> None:
        self._items.append(item)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __iter__(self):
        return iter(self._items)

    def __enter__(self) -> "Bag":
        return self

    def __exit__(self, *exc_info) -> None:
        self._items.clear()


def test_protocol_dunders_run_on_the_target() -> None:
    bag = Bag("a", "b")
    proxy = create_interceptor(InterceptorChain.DEFAULT, bag)

    assert len(proxy) == 2
    assert "a" in proxy
    assert list(proxy) == ["a", "b"]

    proxy.add("c")

    assert len(proxy) == 3
    with proxy as entered:
        assert entered is bag
    assert len(bag) == 0


def test_dunders_missing_from_the_contract_are_not_forwarded() -> None:
    proxy = create_interceptor(InterceptorChain.DEFAULT, SavingsAccount(), Account)

    with pytest.raises(TypeError):
        len(proxy)


def test_missing_target_or_chain_is_rejected() -> None:
    with pytest.raises(InterceptionConfigurationError, match="target"):
        create_interceptor(InterceptorChain.DEFAULT, None, Account)
    with pytest.raises(InterceptionConfigurationError, match="chain"):
        create_interceptor(None, SavingsAccount(), Account)  # type: ignore[arg-type]


def test_keyword_arguments_reach_policies_as_positional_tuple() -> None:
    after = MagicMock()
    chain = InterceptorChain.DEFAULT.add(SyncPolicy.DEFAULT.after(after))
    proxy = chain.create_interceptor(SavingsAccount(), Account)

    proxy.deposit(3, memo="m")

    _, _, args, result = after.call_args.args
    assert args == (3, "m")
    assert result == 3


# --- Chain ---


def test_chain_operations_return_new_chains() -> None:
    first = SyncPolicy.DEFAULT.after(lambda: None)
    second = SyncPolicy.DEFAULT.before(lambda: None)

    chain = InterceptorChain.DEFAULT.add(first)
    prepended = chain.prepend(second)
    extended = chain.add_range([second, first])

    assert InterceptorChain.DEFAULT.policies == ()
    assert chain.policies == (first,)
    assert prepended.policies == (second, first)
    assert extended.policies == (first, second, first)


def test_chain_rejects_none_policies() -> None:
    with pytest.raises(InterceptionConfigurationError):
        InterceptorChain.DEFAULT.add(None)  # type: ignore[arg-type]
    with pytest.raises(InterceptionConfigurationError):
        InterceptorChain.DEFAULT.prepend(None)  # type: ignore[arg-type]
    with pytest.raises(InterceptionConfigurationError):
        InterceptorChain.DEFAULT.add_range([None])  # type: ignore[list-item]


def test_first_accepting_policy_owns_the_call() -> None:
    first = MagicMock()
    second = MagicMock()
    chain = InterceptorChain.DEFAULT.add(SyncPolicy.DEFAULT.after(first)).add(
        SyncPolicy.DEFAULT.after(second)
    )

    chain.create_interceptor(SavingsAccount(), Account).deposit(1)

    first.assert_called_once()
    second.assert_not_called()


def test_chains_nest_as_policies() -> None:
    calls = []
    inner = InterceptorChain(display_name="inner").add(
        SyncPolicy.DEFAULT.after(lambda: calls.append("inner"))
    )
    outer = InterceptorChain(display_name="outer").add(inner)

    outer.create_interceptor(SavingsAccount(), Account).deposit(1)

    assert calls == ["inner"]


def test_chain_str_and_name() -> None:
    chain = InterceptorChain.DEFAULT.named("Audit").add(SyncPolicy.DEFAULT)

    assert str(chain) == "InterceptorChain(Audit, 1 policies)"
