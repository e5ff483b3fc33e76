"""Helpers to run blocking work concurrently from sync or async contexts."""

from __future__ import annotations

import asyncio
import threading
from queue import Queue
from typing import TYPE_CHECKING, Any, TypeVar

from comicpdf.exceptions import AsyncExecutionError

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine, Sequence

T = TypeVar("T")


def _run_in_background_thread(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine in a dedicated thread with its own event loop.

    Args:
        coro: The coroutine to run.

    Raises:
        AsyncExecutionError: If the coroutine raises an exception.

    Returns:
        The result of the coroutine.
    """
    output: Queue[T | BaseException] = Queue(maxsize=1)

    def _runner() -> None:
        try:
            output.put(asyncio.run(coro))
        except BaseException as exc:
            output.put(exc)

    thread = threading.Thread(target=_runner, daemon=True)
    thread.start()
    thread.join()

    result = output.get()
    if isinstance(result, BaseException):
        raise AsyncExecutionError(result=result) from result
    return result


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run an async coroutine from both sync and async contexts.

    Args:
        coro: The coroutine to run.

    Returns:
        The result of the coroutine.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    return _run_in_background_thread(coro)


async def _gather_in_threads(calls: Sequence[Callable[[], T]], limit: int) -> list[T]:
    semaphore = asyncio.Semaphore(max(limit, 1))

    async def _call(func: Callable[[], T]) -> T:
        async with semaphore:
            return await asyncio.to_thread(func)

    return list(await asyncio.gather(*[_call(func) for func in calls]))


def map_in_threads(calls: Sequence[Callable[[], T]], *, limit: int) -> list[T]:
    """Run blocking callables in worker threads, at most `limit` at a time.

    Results keep the order of `calls`. The first exception raised by a callable
    propagates; callers that need per-item recovery catch inside the callable.

    Args:
        calls: Zero-argument callables.
        limit: Maximum number of callables running concurrently.

    Returns:
        list[T]: One result per callable, in input order.
    """
    if not calls:
        return []
    if limit <= 1 or len(calls) == 1:
        return [func() for func in calls]
    return run_async(_gather_in_threads(calls, limit))
