"""Cooperative cancellation for one itinerary generation run."""

from __future__ import annotations

import asyncio
import contextlib
from typing import Awaitable, TypeVar

T = TypeVar("T")


class GenerationCancelled(Exception):
    """Raised internally when the caller withdraws a generation request."""


class CancellationToken:
    """Shared cancellation signal; set once, never reset."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise GenerationCancelled()


async def run_cancellable(awaitable: Awaitable[T], token: CancellationToken | None) -> T:
    """Await ``awaitable`` unless ``token`` fires first, in which case the work is cancelled."""

    task = asyncio.ensure_future(awaitable)
    if token is None:
        return await task

    waiter = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        raise
    finally:
        waiter.cancel()

    if token.cancelled:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        raise GenerationCancelled()
    return task.result()
