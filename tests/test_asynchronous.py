"""Test the asynchronous protocols."""
import asyncio
import logging

import pytest

from magicmethods.asynchronous import AsyncSession
from magicmethods.asynchronous import Sleep
from magicmethods.asynchronous import Ticker
from magicmethods.asynchronous import demo

logger = logging.getLogger(__name__)
logger.debug("Importing {}".format(__name__))


@pytest.mark.asyncio
async def test_sleep_is_awaitable_more_than_once():
    nap = Sleep(0, result="done")
    assert await nap == "done"
    assert await nap == "done"
    assert await Sleep(0) is None


@pytest.mark.asyncio
async def test_sleep_in_gather():
    results = await asyncio.gather(Sleep(0.01, "slow"), Sleep(0, "fast"))
    assert results == ["slow", "fast"]


@pytest.mark.asyncio
async def test_sleep_with_timeout():
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(Sleep(10), timeout=0.01)


def test_sleep_rejects_negative_delay():
    with pytest.raises(ValueError):
        Sleep(-1)


def test_sleep_is_not_a_coroutine():
    nap = Sleep(0)
    assert not asyncio.iscoroutine(nap)
    assert hasattr(type(nap), "__await__")


@pytest.mark.asyncio
async def test_ticker():
    assert [tick async for tick in Ticker(3)] == [0, 1, 2]
    assert [tick async for tick in Ticker(0)] == []


@pytest.mark.asyncio
async def test_ticker_is_exhausted_after_one_pass():
    ticker = Ticker(2)
    assert [tick async for tick in ticker] == [0, 1]
    assert [tick async for tick in ticker] == []
    with pytest.raises(StopAsyncIteration):
        await ticker.__anext__()


@pytest.mark.asyncio
async def test_ticker_protocol_methods():
    ticker = Ticker(1)
    assert ticker.__aiter__() is ticker
    assert await ticker.__anext__() == 0


@pytest.mark.asyncio
async def test_session():
    async with AsyncSession("ok") as session:
        assert session.opened
        assert not session.closed
    assert session.closed
    assert session.exc_type is None


@pytest.mark.asyncio
async def test_session_does_not_suppress():
    session = AsyncSession("failing")
    with pytest.raises(KeyError):
        async with session:
            raise KeyError("boom")
    assert session.closed
    assert session.exc_type is KeyError


def test_sync_with_is_not_supported():
    with pytest.raises((AttributeError, TypeError)):
        with AsyncSession("sync"):
            pass


def test_demo():
    # demo() starts its own event loop, so it runs from a synchronous test.
    observations = dict(demo())
    assert observations["awaited"] == "rested"
    assert observations["awaited twice"] == "rested"
    assert observations["async for"] == [0, 1, 2]
    assert observations["inside async with"] == (True, False)
    assert observations["after async with"] == (True, True)
