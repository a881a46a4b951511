import asyncio
import logging
from unittest.mock import MagicMock

import pytest

from callweave_core import utils
from callweave_core.utils import (
    VARIADIC_ARITY,
    fire_and_forget,
    maybe_await,
    positional_arity,
)


def test_positional_arity() -> None:
    def two(a, b, *, c=None):
        return None

    class Callable3:
        def __call__(self, a, b, c):
            return None

    assert positional_arity(lambda: None) == 0
    assert positional_arity(two) == 2
    assert positional_arity(Callable3()) == 3
    assert positional_arity(lambda *args: None) == VARIADIC_ARITY
    assert positional_arity(MagicMock()) == VARIADIC_ARITY


@pytest.mark.asyncio()
async def test_maybe_await() -> None:
    async def value():
        return 5

    assert await maybe_await(value()) == 5
    assert await maybe_await(6) == 6


@pytest.mark.asyncio()
async def test_fire_and_forget_runs_on_the_loop() -> None:
    done = asyncio.Event()

    async def hook():
        done.set()

    fire_and_forget(hook())

    await asyncio.wait_for(done.wait(), timeout=1)


@pytest.mark.asyncio()
async def test_fire_and_forget_keeps_task_referenced_until_done() -> None:
    release = asyncio.Event()

    async def hook():
        await release.wait()

    before = set(utils._background_tasks)
    fire_and_forget(hook())
    pending = utils._background_tasks - before

    assert len(pending) == 1

    release.set()
    await asyncio.gather(*pending)
    await asyncio.sleep(0)

    assert not pending & utils._background_tasks


def test_fire_and_forget_without_loop_closes_and_warns(caplog) -> None:
    caplog.set_level(logging.WARNING, logger="callweave.utils")
    ran = []

    async def hook():
        ran.append(True)

    coroutine = hook()
    fire_and_forget(coroutine)

    assert ran == []
    assert coroutine.cr_frame is None
    assert "No running event loop" in caplog.text
