from __future__ import annotations

import asyncio
import inspect
from typing import Awaitable, TypeVar

from beautycatalog.application.exceptions import AbortedError

T = TypeVar("T")


class CancellationToken:
    """
    Cooperative cancellation handle threaded through every catalog call.

    Checking the token is the caller's job at each suspension point; `run()` additionally
    races an awaitable against the token so a request in flight is abandoned as soon as
    the token is signalled.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise AbortedError(self._reason or "Aborted")

    async def run(self, awaitable: Awaitable[T]) -> T:
        if self._event.is_set():
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            raise AbortedError(self._reason or "Aborted")

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            waiter.cancel()
            raise
        waiter.cancel()

        if task in done:
            return task.result()

        task.cancel()
        # Drain the abandoned request; whatever it ended with, the abort wins.
        await asyncio.gather(task, return_exceptions=True)
        raise AbortedError(self._reason or "Aborted")


def ensure_token(cancellation: CancellationToken | None) -> CancellationToken:
    return cancellation if cancellation is not None else CancellationToken()
