"""Cooperative cancellation for a roast session.

A `CancellationToken` is owned by one session and fired when the client goes
away. `race` lets every upstream await observe it: whichever of the upstream
work or the token finishes first wins, and the loser is cancelled.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from services.roast.exceptions import ClientAbortedError


logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """One-shot cancellation signal backed by an `asyncio.Event`."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> bool:
        """Fire the token. Returns False if it had already fired."""
        if self._event.is_set():
            return False
        self._event.set()
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception:
                logger.exception("Cancellation callback failed")
        return True

    def on_cancel(self, callback: Callable[[], None]) -> None:
        """Run `callback` once when the token fires (immediately if it already has)."""
        if self.cancelled:
            callback()
            return
        self._callbacks.append(callback)

    async def wait(self) -> None:
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise ClientAbortedError()


def _discard(awaitable: Awaitable[object]) -> None:
    # Close never-started coroutines so they don't warn about not being awaited
    if inspect.iscoroutine(awaitable):
        awaitable.close()


async def race(awaitable: Awaitable[T], token: CancellationToken) -> T:
    """Await `awaitable` unless `token` fires first.

    Raises:
        ClientAbortedError: If the token was already cancelled or fires before
            the awaitable completes. The upstream task is cancelled.
    """
    if token.cancelled:
        _discard(awaitable)
        raise ClientAbortedError()

    upstream = asyncio.ensure_future(awaitable)
    watcher = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({upstream, watcher}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        watcher.cancel()
        if not upstream.done():
            upstream.cancel()

    if token.cancelled:
        if upstream.done() and not upstream.cancelled():
            # Mark a late failure as retrieved; the session is aborting anyway
            upstream.exception()
        raise ClientAbortedError()
    return upstream.result()

