"""Asynchronous protocols: awaitables, async iterators and async context managers.

The ``await``, ``async for`` and ``async with`` statements are driven by
special methods, just like their synchronous counterparts.

``await obj``
    calls ``type(obj).__await__``, which must return an iterator. Delegating to
    the ``__await__`` of a coroutine is the easy way to write one.
``async for x in obj``
    calls ``__aiter__`` (a plain method) once, then awaits ``__anext__`` until it
    raises `StopAsyncIteration`.
``async with obj``
    awaits ``__aenter__`` and ``__aexit__``. As with ``__exit__``, a true
    result from ``__aexit__`` suppresses the exception.
"""

from __future__ import annotations

__all__ = ["AsyncSession", "Sleep", "Ticker", "demo"]

import asyncio
import logging
import typing

from magicmethods.catalog import chapter

logger = logging.getLogger(__name__)
logger.debug("Importing {}".format(__name__))

_T = typing.TypeVar("_T")


class Sleep(typing.Generic[_T]):
    """An awaitable that sleeps for *delay* seconds and produces *result*.

    Unlike a coroutine object, the same instance can be awaited more than once.
    """

    def __init__(self, delay: float, result: _T = None):
        if delay < 0:
            raise ValueError("delay must be non-negative.")
        self.delay = delay
        self.result = result

    def __await__(self) -> typing.Generator[typing.Any, None, _T]:
        return asyncio.sleep(self.delay, self.result).__await__()


class Ticker:
    """Asynchronously count from 0 to *count* - 1, pausing *interval* seconds before each tick."""

    def __init__(self, count: int, interval: float = 0):
        self.count = count
        self.interval = interval
        self._next = 0

    def __aiter__(self):
        return self

    async def __anext__(self) -> int:
        if self._next >= self.count:
            raise StopAsyncIteration
        await asyncio.sleep(self.interval)
        value = self._next
        self._next += 1
        return value


class AsyncSession:
    """Record the progress of an ``async with`` block."""

    def __init__(self, name: str):
        self.name = name
        self.opened = False
        self.closed = False
        self.exc_type: typing.Optional[typing.Type[BaseException]] = None

    async def __aenter__(self):
        await asyncio.sleep(0)
        self.opened = True
        logger.debug(f"Opened session {self.name}.")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await asyncio.sleep(0)
        self.closed = True
        self.exc_type = exc_type
        logger.debug(f"Closed session {self.name}.")
        return False


async def _main():
    observations = []
    nap = Sleep(0, result="rested")
    observations.append(("awaited", await nap))
    observations.append(("awaited twice", await nap))
    observations.append(("async for", [tick async for tick in Ticker(3)]))
    async with AsyncSession("demo") as session:
        observations.append(("inside async with", (session.opened, session.closed)))
    observations.append(("after async with", (session.opened, session.closed)))
    return observations


@chapter("asynchronous", title="Asynchronous protocols")
def demo():
    return asyncio.run(_main())
