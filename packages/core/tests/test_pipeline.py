from unittest.mock import AsyncMock

import pytest

from callweave_core.middleware import aio, build_pipeline, build_sync_pipeline


class RecordingMiddleware:
    def __init__(self, name, log) -> None:
        self.name = name
        self.log = log

    async def __call__(self, message, next_handler):
        self.log.append(self.name)
        return await next_handler(message)


class SyncRecordingMiddleware:
    def __init__(self, name, log) -> None:
        self.name = name
        self.log = log

    def __call__(self, message, next_handler):
        self.log.append(self.name)
        return next_handler(message)


@pytest.mark.asyncio()
async def test_build_pipeline_first_is_outermost() -> None:
    log = []
    handler = AsyncMock(return_value="done")
    pipeline = build_pipeline(
        [RecordingMiddleware("outer", log), RecordingMiddleware("inner", log)], handler
    )

    assert await pipeline("msg") == "done"
    assert log == ["outer", "inner"]
    handler.assert_awaited_once_with("msg")


@pytest.mark.asyncio()
async def test_build_pipeline_matches_combine_of_compose() -> None:
    log_a, log_b = [], []

    async def handler(message):
        return message * 2

    pipeline = build_pipeline(
        [RecordingMiddleware("a", log_a), RecordingMiddleware("b", log_a)], handler
    )
    combined = aio.combine(
        aio.compose(RecordingMiddleware("a", log_b), RecordingMiddleware("b", log_b)),
        handler,
    )

    assert await pipeline(4) == await combined(4)
    assert log_a == log_b


@pytest.mark.asyncio()
async def test_build_pipeline_without_middlewares_is_the_handler() -> None:
    handler = AsyncMock(return_value=1)

    assert build_pipeline([], handler) is handler


def test_build_sync_pipeline() -> None:
    log = []
    pipeline = build_sync_pipeline(
        [SyncRecordingMiddleware("outer", log), SyncRecordingMiddleware("inner", log)],
        lambda message: message.upper(),
    )

    assert pipeline("msg") == "MSG"
    assert log == ["outer", "inner"]
