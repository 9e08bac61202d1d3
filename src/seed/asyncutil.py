# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Async Primitives

Single responsibility: Control-flow building blocks shared by the install
pipeline (sequential chains, unordered fan-out, single-flight jobs).
"""

import asyncio
import functools
from typing import Any, Awaitable, Callable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def chain(*steps: Callable[..., Awaitable[Any]]) -> Any:
    """
    Run async steps strictly in order.

    The first step is called with no arguments, every later step with the
    previous step's result. The first exception aborts the chain and the
    remaining steps never start.

    Args:
        *steps: Coroutine functions

    Returns:
        Result of the last step (None for an empty chain)
    """
    result: Any = None
    for index, step in enumerate(steps):
        result = await (step() if index == 0 else step(result))
    return result


async def parallel(items: Iterable[T], worker: Callable[[T], Awaitable[R]]) -> List[R]:
    """
    Run worker for every item concurrently.

    Every branch runs to completion, failed siblings are not cancelled.
    Once all have finished, the first failure (in submission order) is
    raised.

    Args:
        items: Items to fan out over
        worker: Coroutine function applied to each item

    Returns:
        Worker results in submission order
    """
    tasks = [worker(item) for item in items]
    if not tasks:
        return []

    # Wait for every branch, capturing exceptions
    results = await asyncio.gather(*tasks, return_exceptions=True)

    # Raise the first failure found
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)


class Once(Generic[T]):
    """
    Single-flight memoization of an async operation.

    The first call starts the operation as a task. Concurrent callers and
    callers arriving after completion await that same task and observe the
    identical result or exception; the operation never runs twice.
    """

    def __init__(self, operation: Callable[[], Awaitable[T]], name: Optional[str] = None):
        self._operation = operation
        self._name = name
        self._task: Optional[asyncio.Task] = None

    @property
    def started(self) -> bool:
        return self._task is not None

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    def start(self) -> asyncio.Task:
        """Start the operation if it has not started yet and return its task."""
        if self._task is None:
            self._task = asyncio.ensure_future(self._operation())
            if self._name:
                self._task.set_name(self._name)
            # Outcome is delivered to awaiters; mark it retrieved for the loop
            self._task.add_done_callback(_consume_outcome)
        return self._task

    async def __call__(self) -> T:
        # Shield so one cancelled caller does not cancel the shared job
        return await asyncio.shield(self.start())


def _consume_outcome(task: asyncio.Task) -> None:
    if not task.cancelled():
        task.exception()


def asyncify(fn: Callable[..., R]) -> Callable[..., Awaitable[R]]:
    """
    Wrap a synchronous, possibly raising function as a coroutine function.

    The function runs in a worker thread; an exception it raises is
    re-raised to the awaiting caller.
    """

    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> R:
        return await asyncio.to_thread(fn, *args, **kwargs)

    return wrapper
