"""Await Python awaitables from inside effectful computations.

Two handlers are provided for the same ``await`` effect:

    - ``async_``: suspends the whole computation with an ``AsyncEscape``;
      run it with ``execute_async`` on an event loop.
    - ``blocking``: runs each awaitable on a private event loop in a worker
      thread; run it with plain ``execute``.

Exceptions raised by the awaitable are raised at the ``yield`` that awaited it.

Example:
    aio = create_async_await()

    async def fetch() -> int:
        return 42

    def program():
        return (yield from aio.await_(fetch()))

    await execute_async(aio.async_(program))
    execute(aio.blocking(program))
"""

from __future__ import annotations

import asyncio
import concurrent.futures
from collections.abc import Awaitable, Generator
from typing import Any

from handleff.computation import Computation
from handleff.continuation import Continuation
from handleff.handler import handler
from handleff.instance import new_effect_instance
from handleff.invocation import AsyncEscape


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


def _run_awaitable_sync(awaitable: Awaitable[Any]) -> Any:
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(_await(awaitable))
    finally:
        loop.close()


def _on_await_async(k: Continuation, awaitable: Awaitable[Any]) -> Generator[Any, Any, Any]:
    try:
        value = yield AsyncEscape(action=lambda: _await(awaitable))
    except Exception as exc:
        return (yield from k.throw(exc))
    return (yield from k(value))


def _on_await_blocking(k: Continuation, awaitable: Awaitable[Any]) -> Generator[Any, Any, Any]:
    try:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as executor:
            value = executor.submit(_run_awaitable_sync, awaitable).result()
    except Exception as exc:
        return (yield from k.throw(exc))
    return (yield from k(value))


class AsyncAwait:
    def __init__(self) -> None:
        self.await_effect = new_effect_instance("AsyncAwait#await")
        self._async_handler = handler(self.await_effect, None, _on_await_async)
        self._blocking_handler = handler(self.await_effect, None, _on_await_blocking)

    def await_(self, awaitable: Awaitable[Any]) -> Generator[Any, Any, Any]:
        return (yield self.await_effect(awaitable))

    def async_(self, computation: Computation[Any]) -> Generator[Any, Any, Any]:
        return self._async_handler(computation)

    def blocking(self, computation: Computation[Any]) -> Generator[Any, Any, Any]:
        return self._blocking_handler(computation)


def create_async_await() -> AsyncAwait:
    return AsyncAwait()


__all__ = ["AsyncAwait", "create_async_await"]
