"""Lazily-started, shared, memoized awaitable."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine, Generator
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class Deferred(Generic[T]):
    """
    Awaitable that runs its work at most once, on first await.

    Creating a Deferred has no side effects. The first ``await`` starts the
    factory as a task; every awaiter, whether it arrives while the task is
    running or after it finished, receives the same outcome: the same value,
    or the same exception raised again. Cancelling one awaiter does not
    cancel the shared task.

    Example:
        deferred = Deferred(fetch_page)
        first, second = await asyncio.gather(deferred, deferred)
        # fetch_page() ran exactly once; first is second
    """

    def __init__(self, factory: Callable[[], Coroutine[Any, Any, T]]) -> None:
        """
        Args:
            factory: Coroutine function producing the value; called at most once
        """
        self._factory = factory
        self._task: Optional[asyncio.Task[T]] = None

    @property
    def started(self) -> bool:
        """Whether the work has been started by a first await."""
        return self._task is not None

    def done(self) -> bool:
        """Whether the outcome has settled."""
        return self._task is not None and self._task.done()

    def result(self) -> T:
        """
        Return the settled value, or raise the settled exception.

        Raises:
            asyncio.InvalidStateError: If the outcome has not settled yet
        """
        if self._task is None:
            raise asyncio.InvalidStateError("Deferred has not been started")
        return self._task.result()

    def map(self, fn: Callable[[T], U]) -> Deferred[U]:
        """
        Derive a new Deferred applying ``fn`` to this one's value.

        The derived Deferred is itself lazy and memoized; exceptions from this
        one pass through unchanged.
        """

        async def mapped() -> U:
            return fn(await self)

        return Deferred(mapped)

    def _start(self) -> asyncio.Task[T]:
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._factory())
        return self._task

    async def _wait(self) -> T:
        return await asyncio.shield(self._start())

    def __await__(self) -> Generator[Any, None, T]:
        return self._wait().__await__()

    def __repr__(self) -> str:
        if self._task is None:
            state = "pending"
        elif not self._task.done():
            state = "running"
        elif self._task.cancelled():
            state = "cancelled"
        elif self._task.exception() is not None:
            state = "failed"
        else:
            state = "done"
        return f"<Deferred {state}>"
